from datetime import date
from decimal import Decimal

from statement_parser.domain.summary import build_summary, filter_by_date
from statement_parser.domain.timefmt import format_duration
from statement_parser.models import Bank, CategorizedTransaction, Category


def make_tx(day: int, amount: str, description: str, category: Category) -> CategorizedTransaction:
    return CategorizedTransaction(
        date=date(2026, 1, day),
        amount=Decimal(amount),
        description=description,
        bank=Bank.TINKOFF,
        category=category,
        confidence=0.65,
        method="keywords",
    )


def test_build_summary() -> None:
    transactions = [
        make_tx(5, "-350", "Яндекс Такси", Category.TRANSPORT),
        make_tx(3, "-1500.50", "Пятёрочка", Category.FOOD),
        make_tx(4, "75000", "Зарплата", Category.INCOME),
        make_tx(6, "-200", "Кафе", Category.FOOD),
    ]

    summary = build_summary(transactions, top_limit=2)

    assert summary.total_transactions == 4
    assert summary.income == Decimal("75000")
    assert summary.expenses == Decimal("2050.50")
    assert summary.net == Decimal("72949.50")
    assert summary.date_range.start == date(2026, 1, 3)
    assert summary.date_range.end == date(2026, 1, 6)

    assert summary.categories[0].category == Category.FOOD
    assert summary.categories[0].amount == Decimal("1700.50")
    assert [e.description for e in summary.top_expenses] == ["Пятёрочка", "Яндекс Такси"]
    assert summary.top_expenses[0].amount == Decimal("1500.50")
    assert all(c.category != Category.INCOME for c in summary.categories)
    assert [(d.date, d.amount) for d in summary.daily_expenses] == [
        (date(2026, 1, 3), Decimal("1500.50")),
        (date(2026, 1, 5), Decimal("350")),
        (date(2026, 1, 6), Decimal("200")),
    ]


def test_build_summary_empty() -> None:
    summary = build_summary([])
    assert summary.total_transactions == 0
    assert summary.net == 0
    assert summary.date_range is None
    assert summary.top_expenses == []


def test_format_duration() -> None:
    assert format_duration(0) == "0 ms"
    assert format_duration(0.0005) == "500 µs"
    assert format_duration(0.25) == "250.0 ms"
    assert format_duration(2.5) == "2.50 s"


def test_top_expenses_default_to_three() -> None:
    transactions = [make_tx(day, f"-{day * 100}", f"Покупка {day}", Category.SHOPPING) for day in range(1, 6)]

    summary = build_summary(transactions)

    assert [e.amount for e in summary.top_expenses] == [Decimal("500"), Decimal("400"), Decimal("300")]


def test_daily_expenses_sum_same_day() -> None:
    transactions = [
        make_tx(3, "-100", "Кафе", Category.FOOD),
        make_tx(3, "-250", "Такси", Category.TRANSPORT),
        make_tx(3, "5000", "Возврат", Category.INCOME),
    ]

    summary = build_summary(transactions)

    assert len(summary.daily_expenses) == 1
    assert summary.daily_expenses[0].amount == Decimal("350")


def test_filter_by_date() -> None:
    transactions = [make_tx(day, "-10", "Кафе", Category.FOOD) for day in (1, 5, 9)]

    assert [t.date.day for t in filter_by_date(transactions, date(2026, 1, 2), date(2026, 1, 9))] == [5, 9]
    assert [t.date.day for t in filter_by_date(transactions, end=date(2026, 1, 5))] == [1, 5]
    assert len(filter_by_date(transactions)) == 3
