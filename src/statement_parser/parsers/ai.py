import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError

from statement_parser.domain.normalize import parse_date, parse_time
from statement_parser.errors import AIParseFailure, UnparseableDate
from statement_parser.integration.llm import LLMClient
from statement_parser.logger import get_logger
from statement_parser.models import ParsedTransaction

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)

INSTRUCTIONS = "You extract transactions from bank statements and answer with JSON only."

PROMPT_TEMPLATE = """Extract every transaction from the following bank statement text ({bank_name}).

Return a JSON array where each object has:
- date: date in YYYY-MM-DD format
- time: time in HH:MM format (optional)
- amount: number, negative for expenses and positive for income
- description: transaction description
- balance: account balance after the transaction

Example:
[
  {{
    "date": "2026-01-03",
    "time": "14:30",
    "amount": -1500.50,
    "description": "Оплата в магазине Магнит",
    "balance": 50000.00
  }}
]

Statement text:
{text}

Return ONLY the JSON array, without any explanation."""


def strip_code_fence(raw: str) -> str:
    match = _FENCE_RE.search(raw)
    if match:
        return match.group(1)
    return raw.strip()


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).replace(" ", "").replace(",", "."))
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def coerce_transaction(item: Any) -> ParsedTransaction | None:
    """Validate one element of the model's answer, None when unusable."""
    if not isinstance(item, dict):
        return None

    raw_date = item.get("date")
    description = item.get("description")
    amount = _to_decimal(item.get("amount"))
    if not raw_date or not isinstance(description, str) or not description.strip():
        return None
    if amount is None or amount == 0:
        return None

    try:
        date_value = parse_date(str(raw_date))
    except UnparseableDate:
        return None

    raw_time = item.get("time")
    balance = _to_decimal(item.get("balance"))
    try:
        return ParsedTransaction(
            date=date_value,
            time=parse_time(str(raw_time)) if raw_time else None,
            amount=amount,
            description=description.strip(),
            balance=balance if balance is not None else Decimal("0"),
        )
    except ValidationError:
        return None


class AIStatementParser:
    def __init__(self, llm: LLMClient):
        self.llm = llm

    @property
    def name(self) -> str:
        return self.llm.name

    def parse(self, text: str, bank_name: str) -> list[ParsedTransaction]:
        """Ask the model for the statement's transactions.

        Raises:
            AIParseFailure: on any backend error, non-JSON output, or when no
                element survives validation.
        """
        prompt = PROMPT_TEMPLATE.format(bank_name=bank_name, text=text)
        try:
            raw = self.llm.complete(INSTRUCTIONS, prompt, temperature=0.0)
        except Exception as exc:
            raise AIParseFailure(f"AI backend request failed: {exc}") from exc

        if not raw:
            raise AIParseFailure("AI backend returned an empty response")

        try:
            payload = json.loads(strip_code_fence(raw))
        except json.JSONDecodeError as exc:
            raise AIParseFailure(f"AI backend returned invalid JSON: {exc}") from exc

        if not isinstance(payload, list):
            raise AIParseFailure(f"Expected a JSON array, got {type(payload).__name__}")

        transactions = []
        for item in payload:
            tx = coerce_transaction(item)
            if tx is not None:
                transactions.append(tx)

        dropped = len(payload) - len(transactions)
        if dropped:
            logger.debug("[AI] Dropped %d invalid transaction(s) from AI output.", dropped)

        if not transactions:
            raise AIParseFailure("AI backend returned no usable transactions")

        logger.info("[AI] Parsed %d transactions for %s.", len(transactions), bank_name)
        return transactions
