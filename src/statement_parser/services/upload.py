import asyncio

from statement_parser.domain.summary import build_summary
from statement_parser.errors import OCRError, TextExtractionError, UnsupportedFile
from statement_parser.integration.pdf import extract_text_from_pdf
from statement_parser.integration.storage import NullSink, TransactionSink
from statement_parser.integration.yandex_vision import YandexVisionClient
from statement_parser.logger import get_logger
from statement_parser.manager import CategorizerService
from statement_parser.models import (
    CategorizedTransaction,
    StatementParseResult,
    TransactionError,
    UploadResult,
)
from statement_parser.services.statements import StatementParser

logger = get_logger(__name__)


def is_pdf(filename: str | None, content_type: str | None) -> bool:
    return (content_type or "").lower() == "application/pdf" or (filename or "").lower().endswith(".pdf")


def is_image(content_type: str | None) -> bool:
    return (content_type or "").lower().startswith("image/")


class UploadPipeline:
    def __init__(
        self,
        statements: StatementParser,
        categorizer: CategorizerService,
        ocr: YandexVisionClient | None = None,
        sink: TransactionSink | None = None,
    ) -> None:
        self.statements = statements
        self.categorizer = categorizer
        self.ocr = ocr
        self.sink: TransactionSink = sink or NullSink()

    async def extract_text(self, filename: str | None, content_type: str | None, data: bytes) -> str:
        """Turn an uploaded file into statement text.

        Raises:
            UnsupportedFile: for anything other than a PDF or an image.
            TextExtractionError: when no text comes out (OCRError for images).
        """
        if is_pdf(filename, content_type):
            text = await asyncio.to_thread(extract_text_from_pdf, data)
        elif is_image(content_type):
            if self.ocr is None or not self.ocr.configured:
                raise OCRError("OCR backend is not configured")
            text = await self.ocr.recognize(data, mime_type=(content_type or "image/jpeg").lower())
        else:
            raise UnsupportedFile("Unsupported file type. Upload an image (JPG, PNG) or a PDF.")

        if not text or not text.strip():
            raise TextExtractionError("No text could be recognised in the file")
        return text

    def categorize_and_store(
        self,
        parsed: StatementParseResult,
        use_ai_categorization: bool,
    ) -> UploadResult:
        saved: list[CategorizedTransaction] = []
        errors: list[TransactionError] = []

        for transaction in parsed.transactions:
            try:
                result = self.categorizer.categorize(
                    transaction.description,
                    transaction.amount,
                    use_ai=use_ai_categorization,
                )
                categorized = CategorizedTransaction(
                    **transaction.model_dump(),
                    bank=parsed.bank,
                    category=result.category,
                    confidence=result.confidence,
                    method=result.method,
                )
                self.sink.save(categorized)
            except Exception as exc:
                logger.error("[UPLOAD] Failed to store '%s': %s", transaction.description[:50], exc)
                errors.append(TransactionError(description=transaction.description, error=str(exc)))
                continue
            saved.append(categorized)

        logger.info(
            "[UPLOAD] %s: stored %d of %d transactions (%d errors).",
            parsed.bank.value,
            len(saved),
            len(parsed.transactions),
            len(errors),
        )
        return UploadResult(
            bank=parsed.bank,
            transactions=saved,
            summary=build_summary(saved),
            errors=errors,
        )

    def process_text(
        self,
        text: str,
        *,
        use_ai_parsing: bool = True,
        use_ai_categorization: bool = False,
    ) -> UploadResult | None:
        """Parse, categorize and store one statement; None when the bank is unknown."""
        parsed = self.statements.parse_bank_statement(text, use_ai=use_ai_parsing)
        if parsed is None:
            return None
        return self.categorize_and_store(parsed, use_ai_categorization)
