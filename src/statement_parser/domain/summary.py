import datetime as dt
from collections import defaultdict
from collections.abc import Sequence
from decimal import Decimal

from statement_parser.models import (
    CategorizedTransaction,
    Category,
    CategoryTotal,
    DailyExpense,
    DateRange,
    StatementSummary,
    TopExpense,
)

TOP_EXPENSES_LIMIT = 3


def filter_by_date(
    transactions: Sequence[CategorizedTransaction],
    start: dt.date | None = None,
    end: dt.date | None = None,
) -> list[CategorizedTransaction]:
    """Keep transactions within ``[start, end]``; either bound may be open."""
    return [
        t
        for t in transactions
        if (start is None or t.date >= start) and (end is None or t.date <= end)
    ]


def build_summary(
    transactions: Sequence[CategorizedTransaction],
    *,
    top_limit: int = TOP_EXPENSES_LIMIT,
) -> StatementSummary:
    """Totals, per-category and per-day expenses, and the largest expenses."""
    spent = [t for t in transactions if t.amount < 0]
    income = sum((t.amount for t in transactions if t.amount > 0), Decimal("0"))
    expenses = sum((-t.amount for t in spent), Decimal("0"))

    category_totals: dict[Category, Decimal] = defaultdict(lambda: Decimal("0"))
    daily_totals: dict[dt.date, Decimal] = defaultdict(lambda: Decimal("0"))
    for t in spent:
        category_totals[t.category] += -t.amount
        daily_totals[t.date] += -t.amount

    categories = sorted(
        (CategoryTotal(category=category, amount=amount) for category, amount in category_totals.items()),
        key=lambda total: total.amount,
        reverse=True,
    )
    daily_expenses = [DailyExpense(date=day, amount=daily_totals[day]) for day in sorted(daily_totals)]

    largest = sorted(spent, key=lambda t: abs(t.amount), reverse=True)[:top_limit]
    top_expenses = [
        TopExpense(
            date=t.date,
            amount=abs(t.amount),
            description=t.description,
            category=t.category,
            bank=t.bank,
        )
        for t in largest
    ]

    dates = sorted(t.date for t in transactions)
    date_range = DateRange(start=dates[0], end=dates[-1]) if dates else None

    return StatementSummary(
        total_transactions=len(transactions),
        income=income,
        expenses=expenses,
        net=income - expenses,
        date_range=date_range,
        categories=categories,
        top_expenses=top_expenses,
        daily_expenses=daily_expenses,
    )
