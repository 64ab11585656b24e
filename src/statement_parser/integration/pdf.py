from io import BytesIO

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from statement_parser.errors import TextExtractionError
from statement_parser.logger import get_logger

logger = get_logger(__name__)


def extract_text_from_pdf(data: bytes) -> str:
    """Return the embedded text of every page, pages separated by a blank line.

    Scanned PDFs without a text layer yield an empty string.
    """
    try:
        reader = PdfReader(BytesIO(data))
        pages = [
            (page.extract_text() or "").replace("\u202f", " ").replace("\xa0", " ")
            for page in reader.pages
        ]
    except PdfReadError as exc:
        raise TextExtractionError(f"Could not read PDF: {exc}") from exc

    logger.debug("[PDF] Extracted text from %d pages.", len(pages))
    return "\n\n".join(pages)
