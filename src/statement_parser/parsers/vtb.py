import re
from decimal import Decimal

from statement_parser.domain.normalize import parse_amount
from statement_parser.errors import MalformedAmount, UnparseableDate
from statement_parser.models import Bank, ParsedTransaction

from .base import AMOUNT_RE, BankParser, clean_description


class VTBParser(BankParser):
    """``DD.MM.YYYY | Description | Amount | Balance`` with several numbers per line.

    With two or more numbers the second-to-last is the amount and the last
    is the balance. The rule is positional only, so a stray number such as
    an account suffix shifts both.
    """

    bank = Bank.VTB
    indicators = (
        re.compile(r"втб", re.IGNORECASE),
        re.compile(r"vtb", re.IGNORECASE),
        re.compile(r"втб24", re.IGNORECASE),
        re.compile(r"карта.*втб", re.IGNORECASE),
    )

    def parse_lines(self, lines: list[str]) -> list[ParsedTransaction]:
        transactions: list[ParsedTransaction] = []

        for i, line in enumerate(lines):
            try:
                token = self.locate_date(line)
                if not token:
                    continue

                region_end = self.amount_region_end(line, token.end)
                matches = list(AMOUNT_RE.finditer(line, token.end, region_end))
                if not matches:
                    continue

                balance = Decimal("0")
                if len(matches) >= 2:
                    amount = parse_amount(matches[-2].group(0))
                    balance = parse_amount(matches[-1].group(0))
                else:
                    amount = parse_amount(matches[0].group(0))

                if balance == 0:
                    labelled = self.find_balance(line)
                    if labelled is not None:
                        balance = labelled

                description = clean_description(line[token.end:matches[0].start()])
                tx = self.build(token.date, token.time, amount, description, balance)
                if tx:
                    transactions.append(tx)
            except (MalformedAmount, UnparseableDate) as exc:
                self._skip_line(i, line, exc)

        return transactions
