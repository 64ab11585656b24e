from fastapi import HTTPException, Request

from statement_parser.integration.storage import TransactionSink
from statement_parser.manager import CategorizerService
from statement_parser.services.analysis import SpendingAnalyzer
from statement_parser.services.statements import StatementParser
from statement_parser.services.upload import UploadPipeline


def get_service(request: Request) -> CategorizerService:
    service = getattr(request.app.state, "service", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service


def get_statements(request: Request) -> StatementParser:
    statements = getattr(request.app.state, "statements", None)
    if not statements:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return statements


def get_pipeline(request: Request) -> UploadPipeline:
    pipeline = getattr(request.app.state, "pipeline", None)
    if not pipeline:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return pipeline


def get_sink(request: Request) -> TransactionSink:
    sink = getattr(request.app.state, "sink", None)
    if not sink:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return sink


def get_analyzer(request: Request) -> SpendingAnalyzer:
    analyzer = getattr(request.app.state, "analyzer", None)
    if not analyzer:
        raise HTTPException(status_code=400, detail="AI backend is not configured")
    return analyzer
