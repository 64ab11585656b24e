import asyncio
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, UploadFile

from statement_parser.api.dependencies import get_pipeline, get_statements
from statement_parser.api.schemas import ParseRequest
from statement_parser.core import settings
from statement_parser.errors import OCRError, TextExtractionError, UnsupportedFile
from statement_parser.logger import get_logger
from statement_parser.models import StatementParseResult, UploadResult
from statement_parser.services.statements import StatementParser
from statement_parser.services.upload import UploadPipeline

logger = get_logger(__name__)

router = APIRouter()

UNDETECTED_BANK_DETAIL = "Could not identify the bank or parse the statement"


@router.post("/parse", response_model=StatementParseResult)
async def parse_statement(
    req: ParseRequest,
    statements: Annotated[StatementParser, Depends(get_statements)],
) -> StatementParseResult:
    result = await asyncio.to_thread(statements.parse_bank_statement, req.text, req.use_ai)
    if result is None:
        raise HTTPException(status_code=422, detail=UNDETECTED_BANK_DETAIL)
    return result


@router.post("/upload", response_model=UploadResult)
async def upload_statement(
    file: UploadFile,
    pipeline: Annotated[UploadPipeline, Depends(get_pipeline)],
) -> UploadResult:
    max_bytes = settings.get_env_int("MAX_UPLOAD_BYTES", settings.DEFAULT_MAX_UPLOAD_BYTES, min_value=1)
    data = await file.read(max_bytes + 1)
    if not data:
        raise HTTPException(status_code=400, detail="No file provided")
    if len(data) > max_bytes:
        raise HTTPException(status_code=400, detail=f"File too large (max {max_bytes} bytes)")

    logger.info("[UPLOAD] Received '%s' (%s, %d bytes).", file.filename, file.content_type, len(data))
    try:
        text = await pipeline.extract_text(file.filename, file.content_type, data)
    except UnsupportedFile as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except OCRError as exc:
        logger.warning("[UPLOAD] OCR failed for '%s': %s", file.filename, exc)
        raise HTTPException(status_code=400, detail="Could not recognise text in the image") from exc
    except TextExtractionError as exc:
        logger.warning("[UPLOAD] Text extraction failed for '%s': %s", file.filename, exc)
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    result = await asyncio.to_thread(
        pipeline.process_text,
        text,
        use_ai_parsing=settings.get_env_bool("USE_AI_PARSING", True),
        use_ai_categorization=settings.get_env_bool("USE_AI_CATEGORIZATION", True),
    )
    if result is None:
        raise HTTPException(status_code=400, detail=UNDETECTED_BANK_DETAIL)
    return result
