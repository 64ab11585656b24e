import re
from decimal import Decimal

from statement_parser.domain.normalize import parse_amount
from statement_parser.errors import MalformedAmount, UnparseableDate
from statement_parser.models import Bank, ParsedTransaction

from .base import CURRENCY_AMOUNT_RE, DATE_TOKEN_RE, BankParser, clean_description


class TinkoffParser(BankParser):
    """``DD.MM.YYYY HH:MM Description -Amount₽ Баланс: X₽``.

    Only a number followed by a currency glyph counts as the amount, which
    keeps account and reference numbers out. The balance may sit on the
    next line.
    """

    bank = Bank.TINKOFF
    indicators = (
        re.compile(r"тинькофф", re.IGNORECASE),
        re.compile(r"tinkoff", re.IGNORECASE),
        re.compile(r"тинькоф", re.IGNORECASE),
        re.compile(r"карта.*тинькофф", re.IGNORECASE),
    )

    def parse_lines(self, lines: list[str]) -> list[ParsedTransaction]:
        transactions: list[ParsedTransaction] = []

        for i, line in enumerate(lines):
            try:
                token = self.locate_date(line)
                if not token:
                    continue

                region_end = self.amount_region_end(line, token.end)
                amount_match = CURRENCY_AMOUNT_RE.search(line, token.end, region_end)
                if not amount_match:
                    continue

                description = clean_description(line[token.end:amount_match.start()])
                tx = self.build(
                    token.date,
                    token.time,
                    parse_amount(amount_match.group(0)),
                    description,
                    self._balance_near(lines, i),
                )
                if tx:
                    transactions.append(tx)
            except (MalformedAmount, UnparseableDate) as exc:
                self._skip_line(i, line, exc)

        return transactions

    def _balance_near(self, lines: list[str], index: int) -> Decimal:
        balance = self.find_balance(lines[index])
        if balance is not None:
            return balance
        if index + 1 < len(lines) and not DATE_TOKEN_RE.search(lines[index + 1]):
            balance = self.find_balance(lines[index + 1])
            if balance is not None:
                return balance
        return Decimal("0")
