import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException

from statement_parser.api.dependencies import get_analyzer
from statement_parser.api.schemas import AnalysisRequest, AnalysisResponse
from statement_parser.errors import AnalysisFailure
from statement_parser.logger import get_logger
from statement_parser.services.analysis import SpendingAnalyzer

logger = get_logger(__name__)

router = APIRouter()


@router.post("/analysis", response_model=AnalysisResponse)
async def analyze_spending(
    req: AnalysisRequest,
    analyzer: Annotated[SpendingAnalyzer, Depends(get_analyzer)],
) -> AnalysisResponse:
    if not req.transactions:
        raise HTTPException(status_code=400, detail="transactions is required")
    try:
        report = await asyncio.to_thread(analyzer.analyze, req.transactions)
    except AnalysisFailure as exc:
        logger.error("[ANALYSIS] %s", exc)
        raise HTTPException(status_code=500, detail="AI analysis failed") from exc
    return AnalysisResponse(report=report)
