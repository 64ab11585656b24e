from datetime import date
from decimal import Decimal

import pytest

from statement_parser.models import Bank
from statement_parser.parsers.detector import detect_bank
from statement_parser.parsers.registry import build_parsers, get_parser
from statement_parser.parsers.sberbank import SberbankParser
from statement_parser.parsers.tinkoff import TinkoffParser
from statement_parser.parsers.vtb import VTBParser

SBERBANK_TEXT = """ПАО Сбербанк
Выписка по карте
03.01.2026 14:30 Пятёрочка 1 250,00 баланс: 48 750,00
04.01.2026
Яндекс Такси
-350,00
"""

TINKOFF_TEXT = """Тинькофф Банк
03.01.2026 14:30 Оплата в магазине -1500.50 ₽ баланс: 50000.00
04.01.2026 09:15 Кофейня 250 ₽
Баланс: 49 750,00 ₽
05.01.2026 Перевод по номеру счета 40817810 1000
"""

VTB_TEXT = """Банк ВТБ (ПАО)
03.01.2026 Магазин Лента -2 500,00 47 500,00
04.01.2026 12:00 Аптека 36,6 -300,00 47 200,00
05.01.2026 Кафе 450,00
06.01.2026 Комиссия 0,00
07.01.2026 Без суммы
"""


@pytest.mark.parametrize(
    "text, bank",
    [
        ("ПАО Сбербанк", Bank.SBERBANK),
        ("SberBank Online", Bank.SBERBANK),
        ("Тинькофф", Bank.TINKOFF),
        ("TINKOFF BANK", Bank.TINKOFF),
        ("ВТБ24", Bank.VTB),
        ("vtb online", Bank.VTB),
    ],
)
def test_detect_bank(text: str, bank: Bank) -> None:
    parser = detect_bank(text)
    assert parser is not None
    assert parser.bank == bank


def test_detect_bank_registration_order_wins() -> None:
    parser = detect_bank("Перевод с карты ВТБ на карту Сбербанк")
    assert parser is not None
    assert parser.bank == Bank.SBERBANK


def test_detect_bank_unknown() -> None:
    assert detect_bank("АО Альфа-Банк\n03.01.2026 Кафе -100") is None


def test_detect_bank_is_deterministic() -> None:
    parsers = build_parsers()
    results = {detect_bank(TINKOFF_TEXT, parsers).bank for _ in range(5)}
    assert results == {Bank.TINKOFF}


def test_registry_order() -> None:
    assert [p.bank for p in build_parsers()] == [Bank.SBERBANK, Bank.TINKOFF, Bank.VTB]
    assert isinstance(get_parser(Bank.VTB), VTBParser)


def test_sberbank_single_and_multi_line() -> None:
    transactions = SberbankParser().parse(SBERBANK_TEXT)

    assert len(transactions) == 2
    first, second = transactions
    assert first.date == date(2026, 1, 3)
    assert first.time == "14:30"
    assert first.amount == Decimal("-1250.00")
    assert first.description == "Пятёрочка"
    assert first.balance == Decimal("48750.00")

    assert second.date == date(2026, 1, 4)
    assert second.time is None
    assert second.amount == Decimal("-350.00")
    assert second.description == "Яндекс Такси"


def test_sberbank_description_on_date_line() -> None:
    text = "Сбербанк\n05.01.2026 10:00 Аптека Ригла\n-420,00"
    transactions = SberbankParser().parse(text)
    assert len(transactions) == 1
    assert transactions[0].description == "Аптека Ригла"
    assert transactions[0].amount == Decimal("-420.00")


def test_sberbank_forces_debit_sign_by_default() -> None:
    text = "Сбербанк\n10.01.2026 Зарплата +75000,00"
    assert SberbankParser().parse(text)[0].amount == Decimal("-75000.00")


def test_sberbank_debit_sign_policy_can_be_disabled() -> None:
    text = "Сбербанк\n10.01.2026 Зарплата +75000,00"
    transactions = SberbankParser(force_debit_sign=False).parse(text)
    assert transactions[0].amount == Decimal("75000.00")


def test_sberbank_ignores_lines_before_first_date() -> None:
    text = "Сбербанк\nКарта **** 1234\nИтого 500"
    assert SberbankParser().parse(text) == []


def test_sberbank_bad_date_line_drops_its_record() -> None:
    text = "Сбербанк\n03.01.2026 Кафе -100,00\n31.02.2026\nТакси\n-200,00"
    transactions = SberbankParser().parse(text)

    assert len(transactions) == 1
    assert transactions[0].description == "Кафе"
    assert transactions[0].date == date(2026, 1, 3)


def test_sberbank_numbers_after_complete_row_are_not_transactions() -> None:
    text = "Сбербанк\n03.01.2026 14:30 Кафе -100,00\nКод авторизации 123456"
    transactions = SberbankParser().parse(text)

    assert len(transactions) == 1
    assert transactions[0].amount == Decimal("-100.00")


def test_sberbank_pending_row_takes_one_amount() -> None:
    text = "Сбербанк\n04.01.2026\nЯндекс Такси\n-350,00\nКод авторизации 123456"
    transactions = SberbankParser().parse(text)

    assert [t.description for t in transactions] == ["Яндекс Такси"]


def test_tinkoff_scenario_line() -> None:
    text = "Тинькофф\n03.01.2026 14:30 Оплата в магазине -1500.50 ₽ баланс: 50000.00"
    transactions = TinkoffParser().parse(text)

    assert len(transactions) == 1
    tx = transactions[0]
    assert tx.date == date(2026, 1, 3)
    assert tx.time == "14:30"
    assert tx.amount == Decimal("-1500.50")
    assert tx.description == "Оплата в магазине"
    assert tx.balance == Decimal("50000.00")


def test_tinkoff_balance_on_next_line_and_currency_anchor() -> None:
    transactions = TinkoffParser().parse(TINKOFF_TEXT)

    assert [t.description for t in transactions] == ["Оплата в магазине", "Кофейня"]
    assert transactions[1].amount == Decimal("-250")
    assert transactions[1].balance == Decimal("49750.00")


def test_tinkoff_drops_line_without_description() -> None:
    text = "Тинькофф\n03.01.2026 14:30 -100 ₽"
    assert TinkoffParser().parse(text) == []


def test_vtb_multi_amount_lines() -> None:
    transactions = VTBParser().parse(VTB_TEXT)

    assert len(transactions) == 3
    shop, pharmacy, cafe = transactions

    assert shop.amount == Decimal("-2500.00")
    assert shop.balance == Decimal("47500.00")
    assert shop.description == "Магазин Лента"

    # Second-to-last number is the amount, last is the balance.
    assert pharmacy.amount == Decimal("-300.00")
    assert pharmacy.balance == Decimal("47200.00")
    assert pharmacy.time == "12:00"
    assert pharmacy.description == "Аптека"

    assert cafe.amount == Decimal("-450.00")
    assert cafe.balance == Decimal("0")


def test_vtb_labelled_balance_with_single_amount() -> None:
    text = "ВТБ\n05.01.2026 Кафе 450,00 Остаток: 10 000,00"
    tx = VTBParser().parse(text)[0]
    assert tx.amount == Decimal("-450.00")
    assert tx.balance == Decimal("10000.00")


def test_invalid_calendar_date_skips_only_that_line() -> None:
    text = "ВТБ\n31.02.2026 Кафе 100,00 900,00\n01.03.2026 Кафе 200,00 700,00"
    transactions = VTBParser().parse(text)
    assert len(transactions) == 1
    assert transactions[0].date == date(2026, 3, 1)


@pytest.mark.parametrize("text", [SBERBANK_TEXT, TINKOFF_TEXT, VTB_TEXT])
def test_all_grammars_emit_debits(text: str) -> None:
    parser = detect_bank(text)
    transactions = parser.parse(text)
    assert transactions
    assert all(t.amount < 0 for t in transactions)
    assert all(t.description for t in transactions)
