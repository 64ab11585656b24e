from collections.abc import Sequence
from time import perf_counter

from statement_parser.domain.timefmt import format_duration
from statement_parser.logger import get_logger
from statement_parser.models import ParsedTransaction, StatementParseResult
from statement_parser.parsers.ai import AIStatementParser
from statement_parser.parsers.base import BankParser
from statement_parser.parsers.detector import detect_bank
from statement_parser.parsers.registry import build_parsers

logger = get_logger(__name__)


class StatementParser:
    """Detect the bank, then read transactions with AI or the bank's grammar."""

    def __init__(
        self,
        parsers: Sequence[BankParser] | None = None,
        ai_parser: AIStatementParser | None = None,
        force_debit_sign: bool = True,
    ) -> None:
        self.parsers = list(parsers) if parsers is not None else build_parsers(force_debit_sign)
        self.ai_parser = ai_parser

    @property
    def ai_available(self) -> bool:
        return self.ai_parser is not None

    def detect(self, text: str) -> BankParser | None:
        return detect_bank(text, self.parsers)

    def parse_bank_statement(self, text: str, use_ai: bool = True) -> StatementParseResult | None:
        """Return the bank and its transactions, or None.

        None means either that no supported bank was recognised or that an
        unexpected error occurred; the latter is logged.
        """
        started = perf_counter()
        parser = self.detect(text)
        if parser is None:
            return None

        try:
            transactions = self._extract(parser, text, use_ai)
        except Exception:
            logger.exception("[PARSE] Unexpected error while parsing %s statement.", parser.bank_name)
            return None

        logger.info(
            "[PARSE] %s: %d transactions in %s.",
            parser.bank_name,
            len(transactions),
            format_duration(perf_counter() - started),
        )
        return StatementParseResult(bank=parser.bank, transactions=transactions)

    def _extract(self, parser: BankParser, text: str, use_ai: bool) -> list[ParsedTransaction]:
        if use_ai and self.ai_parser is not None:
            try:
                return self.ai_parser.parse(text, parser.bank_name)
            except Exception as exc:
                logger.warning(
                    "[PARSE] AI parsing failed, falling back to %s grammar: %s",
                    parser.bank_name,
                    exc,
                )
        return parser.parse(text)
