import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends

from statement_parser.api.dependencies import get_service
from statement_parser.api.schemas import CategorizeRequest
from statement_parser.manager import CategorizerService
from statement_parser.models import CategorizationResult, Category

router = APIRouter()


@router.post("/categorize", response_model=CategorizationResult)
async def categorize_transaction(
    req: CategorizeRequest,
    service: Annotated[CategorizerService, Depends(get_service)],
) -> CategorizationResult:
    return await asyncio.to_thread(
        service.categorize,
        req.description,
        req.amount,
        req.use_ai,
    )


@router.get("/categories")
async def get_categories() -> list[str]:
    return [category.value for category in Category]
