from collections.abc import Sequence

from statement_parser.logger import get_logger

from .base import BankParser
from .registry import build_parsers

logger = get_logger(__name__)


def detect_bank(text: str, parsers: Sequence[BankParser] | None = None) -> BankParser | None:
    """Return the first registered parser whose indicators match, or None."""
    candidates = parsers if parsers is not None else build_parsers()
    for parser in candidates:
        if parser.detect(text):
            logger.debug("[DETECT] Statement matched %s.", parser.bank_name)
            return parser
    logger.info("[DETECT] No supported bank recognised in statement text.")
    return None
