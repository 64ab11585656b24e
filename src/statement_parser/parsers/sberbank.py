import re
from decimal import Decimal

from statement_parser.domain.normalize import parse_amount
from statement_parser.errors import MalformedAmount, UnparseableDate
from statement_parser.models import Bank, ParsedTransaction

from .base import AMOUNT_RE, DATE_TOKEN_RE, BankParser, DateToken, clean_description

class SberbankParser(BankParser):
    """Dense single-line layout.

    ``DD.MM.YYYY HH:MM | Description | Amount | Balance`` on one line, or
    the date on its own line with description and amount on the following
    lines.
    """

    bank = Bank.SBERBANK
    indicators = (
        re.compile(r"сбербанк", re.IGNORECASE),
        re.compile(r"sberbank", re.IGNORECASE),
        re.compile(r"сбер", re.IGNORECASE),
        re.compile(r"карта.*сбер", re.IGNORECASE),
    )

    def parse_lines(self, lines: list[str]) -> list[ParsedTransaction]:
        transactions: list[ParsedTransaction] = []
        current: DateToken | None = None
        balance = Decimal("0")
        pending_description = ""
        used: set[int] = set()

        for i, line in enumerate(lines):
            try:
                line_balance = self.find_balance(line)
                if line_balance is not None:
                    balance = line_balance

                token = self.locate_date(line)
                if token:
                    current = None
                    used.add(i)
                    region_end = self.amount_region_end(line, token.end)
                    amount_match = AMOUNT_RE.search(line, token.end, region_end)
                    if not amount_match:
                        # Amount is expected on a following line.
                        current = token
                        pending_description = clean_description(line[token.end:region_end])
                        continue

                    description = clean_description(line[token.end:amount_match.start()])
                    pending_description = ""
                    tx = self.build(
                        token.date,
                        token.time,
                        parse_amount(amount_match.group(0)),
                        description,
                        balance,
                    )
                    if tx:
                        transactions.append(tx)
                    continue

                # Only a date row still waiting for its amount takes one.
                if current is None:
                    continue

                region_end = self.amount_region_end(line)
                amount_match = AMOUNT_RE.search(line, 0, region_end)
                if not amount_match:
                    continue

                description = clean_description(line[:amount_match.start()])
                if not description:
                    description = self._previous_description(lines, i, used) or pending_description
                tx = self.build(
                    current.date,
                    current.time,
                    parse_amount(amount_match.group(0)),
                    description,
                    balance,
                )
                used.add(i)
                used.add(i - 1)
                current = None
                pending_description = ""
                if tx:
                    transactions.append(tx)
            except (MalformedAmount, UnparseableDate) as exc:
                if DATE_TOKEN_RE.search(line):
                    # The record opened by a bad date line is dropped whole.
                    current = None
                    pending_description = ""
                self._skip_line(i, line, exc)

        return transactions

    def _previous_description(self, lines: list[str], index: int, used: set[int]) -> str:
        if index == 0 or (index - 1) in used:
            return ""
        previous = lines[index - 1]
        return clean_description(previous[:self.amount_region_end(previous)])
