import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from statement_parser.api.routes import analysis, categorize, health, statements, transactions
from statement_parser.core import settings
from statement_parser.integration.llm import LLMClient
from statement_parser.integration.storage import JsonlTransactionSink
from statement_parser.integration.yandex_vision import YandexVisionClient
from statement_parser.logger import get_logger, setup_logging
from statement_parser.manager import CategorizerService
from statement_parser.parsers.ai import AIStatementParser
from statement_parser.services.analysis import SpendingAnalyzer
from statement_parser.services.statements import StatementParser
from statement_parser.services.upload import UploadPipeline

logger = get_logger(__name__)


def create_app() -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        llm = LLMClient.from_env()
        ocr = YandexVisionClient()
        if not ocr.configured:
            logger.warning("YANDEX_VISION_API_KEY not set. Image uploads will be rejected.")

        service = CategorizerService(llm=llm)
        statement_parser = StatementParser(
            ai_parser=AIStatementParser(llm) if llm else None,
            force_debit_sign=settings.get_env_bool("FORCE_DEBIT_SIGN", True),
        )
        sink = JsonlTransactionSink(os.path.join(settings.DATA_DIR, "transactions.jsonl"))
        pipeline = UploadPipeline(
            statements=statement_parser,
            categorizer=service,
            ocr=ocr,
            sink=sink,
        )

        app.state.service = service
        app.state.statements = statement_parser
        app.state.ocr = ocr
        app.state.pipeline = pipeline
        app.state.sink = sink
        app.state.analyzer = SpendingAnalyzer(llm) if llm else None

        logger.info("Services initialized.")
        yield
        await ocr.aclose()
        logger.info("Service shutting down.")

    app = FastAPI(title="Statement Parser", lifespan=lifespan)

    app.include_router(statements.router)
    app.include_router(categorize.router)
    app.include_router(transactions.router)
    app.include_router(analysis.router)
    app.include_router(health.router)

    return app


app = create_app()
