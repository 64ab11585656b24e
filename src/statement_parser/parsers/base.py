import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from statement_parser.domain.normalize import CURRENCY_GLYPHS, parse_amount, parse_date, parse_time
from statement_parser.errors import MalformedAmount, UnparseableDate
from statement_parser.logger import get_logger
from statement_parser.models import Bank, ParsedTransaction

logger = get_logger(__name__)

DATE_TOKEN_RE = re.compile(r"(?<!\d)(?:\d{2}\.\d{2}\.\d{4}|\d{2}/\d{2}/\d{4}|\d{4}-\d{2}-\d{2})(?!\d)")
TIME_TOKEN_RE = re.compile(r"[\s,|]*(\d{2}:\d{2}(?::\d{2})?)(?!\d)")

# A numeric token that is not part of a date, a time, a masked card
# number or a word. Thousands may be grouped with (no-break) spaces.
AMOUNT_PATTERN = (
    r"(?<![\w.,*:/])[+-]?\d+(?:[ \u00a0]\d{3})*(?:[.,]\d+)?(?![\d:/]|[.,]\d)"
)
AMOUNT_RE = re.compile(AMOUNT_PATTERN)
CURRENCY_AMOUNT_RE = re.compile(AMOUNT_PATTERN + rf"(?=\s*(?:[{CURRENCY_GLYPHS}]|руб))", re.IGNORECASE)
BALANCE_RE = re.compile(
    r"(?:баланс|остаток|balance)\s*[:\s]\s*([+-]?\d+(?:[ \u00a0]\d{3})*(?:[.,]\d+)?)",
    re.IGNORECASE,
)

_DESCRIPTION_STRIP = " \t|;"


@dataclass(frozen=True)
class DateToken:
    date: str
    time: str | None
    end: int


def split_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def clean_description(raw: str) -> str:
    without_dates = DATE_TOKEN_RE.sub(" ", raw)
    return re.sub(r"\s+", " ", without_dates).strip(_DESCRIPTION_STRIP)


class BankParser(ABC):
    """One bank's statement grammar: how to recognise it and how to read it."""

    bank: Bank
    indicators: tuple[re.Pattern[str], ...] = ()

    def __init__(self, force_debit_sign: bool = True) -> None:
        # Statement lines are read as debits: a positive amount is negated.
        self.force_debit_sign = force_debit_sign

    @property
    def bank_name(self) -> str:
        return self.bank.value

    def detect(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.indicators)

    def parse(self, text: str) -> list[ParsedTransaction]:
        lines = split_lines(text)
        transactions = self.parse_lines(lines)
        logger.debug(
            "[PARSE] %s grammar read %d transactions from %d lines.",
            self.bank_name,
            len(transactions),
            len(lines),
        )
        return transactions

    @abstractmethod
    def parse_lines(self, lines: list[str]) -> list[ParsedTransaction]:
        """Walk the statement lines in order and emit transactions."""
        pass

    def locate_date(self, line: str) -> DateToken | None:
        """Find the date token and an optional time right after it.

        Raises:
            UnparseableDate: if the date token is not a real calendar date.
        """
        match = DATE_TOKEN_RE.search(line)
        if not match:
            return None
        date_value = parse_date(match.group(0))
        end = match.end()
        time_match = TIME_TOKEN_RE.match(line, end)
        time_value = None
        if time_match:
            time_value = parse_time(time_match.group(1))
            end = time_match.end()
        return DateToken(date=date_value, time=time_value, end=end)

    @staticmethod
    def amount_region_end(line: str, start: int = 0) -> int:
        """Index where amount search stops: the labelled balance or line end."""
        balance_match = BALANCE_RE.search(line, start)
        return balance_match.start() if balance_match else len(line)

    @staticmethod
    def find_balance(line: str) -> Decimal | None:
        match = BALANCE_RE.search(line)
        if not match:
            return None
        return parse_amount(match.group(1))

    def signed(self, amount: Decimal) -> Decimal:
        if self.force_debit_sign and amount > 0:
            return -amount
        return amount

    def build(
        self,
        date: str,
        time: str | None,
        amount: Decimal,
        description: str,
        balance: Decimal | None,
    ) -> ParsedTransaction | None:
        """Create a transaction, or None when it has no description or no amount."""
        amount = self.signed(amount)
        if not description or amount == 0:
            return None
        return ParsedTransaction(
            date=date,
            time=time,
            amount=amount,
            description=description,
            balance=balance if balance is not None else Decimal("0"),
        )

    def _skip_line(self, index: int, line: str, exc: MalformedAmount | UnparseableDate) -> None:
        logger.debug("[PARSE] %s: skipping line %d (%s): %s", self.bank_name, index, exc, line[:80])
