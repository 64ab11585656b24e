from statement_parser.models import Bank

from .base import BankParser
from .sberbank import SberbankParser
from .tinkoff import TinkoffParser
from .vtb import VTBParser

# Registration order is detection order: the first bank whose
# indicators match wins.
PARSER_TYPES: dict[Bank, type[BankParser]] = {
    Bank.SBERBANK: SberbankParser,
    Bank.TINKOFF: TinkoffParser,
    Bank.VTB: VTBParser,
}


def build_parsers(force_debit_sign: bool = True) -> list[BankParser]:
    return [parser_type(force_debit_sign=force_debit_sign) for parser_type in PARSER_TYPES.values()]


def get_parser(bank: Bank, force_debit_sign: bool = True) -> BankParser:
    return PARSER_TYPES[bank](force_debit_sign=force_debit_sign)
