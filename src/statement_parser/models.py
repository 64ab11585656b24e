import datetime as dt
import re
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


class Category(str, Enum):
    INCOME = "Income"
    FOOD = "Food"
    TRANSPORT = "Transport"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    UTILITIES = "Utilities"
    HEALTH = "Health"
    EDUCATION = "Education"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: str | None) -> "Category":
        """Map a free-form label onto the closed set, ``Other`` when unknown."""
        if not label:
            return cls.OTHER
        cleaned = label.strip().strip("\"'.").strip()
        for category in cls:
            if category.value.lower() == cleaned.lower():
                return category
        return cls.OTHER


class Bank(str, Enum):
    SBERBANK = "Сбербанк"
    TINKOFF = "Тинькофф"
    VTB = "ВТБ"


class ParsedTransaction(BaseModel):
    date: dt.date
    time: Optional[str] = None  # HH:MM, 24h
    amount: Decimal  # negative = expense
    description: str
    balance: Decimal = Decimal("0")

    @field_validator("description")
    @classmethod
    def _description_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description must not be empty")
        return value

    @field_validator("amount")
    @classmethod
    def _amount_not_zero(cls, value: Decimal) -> Decimal:
        if value == 0:
            raise ValueError("amount must not be zero")
        return value

    @field_validator("time")
    @classmethod
    def _time_shape(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _TIME_RE.match(value):
            raise ValueError(f"time must be HH:MM, got '{value}'")
        return value


class CategorizationResult(BaseModel):
    category: Category
    confidence: float = Field(ge=0.0, le=1.0)
    method: str  # "keywords" or the AI backend name


class StatementParseResult(BaseModel):
    bank: Bank
    transactions: list[ParsedTransaction]


class CategorizedTransaction(ParsedTransaction):
    bank: Bank
    category: Category
    confidence: float
    method: str


class CategoryTotal(BaseModel):
    category: Category
    amount: Decimal


class TopExpense(BaseModel):
    date: dt.date
    amount: Decimal
    description: str
    category: Category
    bank: Bank


class DailyExpense(BaseModel):
    date: dt.date
    amount: Decimal


class DateRange(BaseModel):
    start: dt.date
    end: dt.date


class StatementSummary(BaseModel):
    total_transactions: int
    income: Decimal
    expenses: Decimal
    net: Decimal
    date_range: Optional[DateRange] = None
    categories: list[CategoryTotal] = []
    top_expenses: list[TopExpense] = []
    daily_expenses: list[DailyExpense] = []


class TransactionError(BaseModel):
    description: str
    error: str


class UploadResult(BaseModel):
    bank: Bank
    transactions: list[CategorizedTransaction]
    summary: StatementSummary
    errors: list[TransactionError] = []


class KeyMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    income: Optional[float] = None
    expenses: Optional[float] = None
    net: Optional[float] = None
    top_category: Optional[str] = Field(default=None, alias="topCategory")


class AnalysisReport(BaseModel):
    """Spending report written by the model.

    When the answer is not the expected JSON only ``summary`` is filled,
    with the model's raw text.
    """

    model_config = ConfigDict(populate_by_name=True)

    summary: str = ""
    key_metrics: Optional[KeyMetrics] = Field(default=None, alias="keyMetrics")
    insights: list[str] = []
    risks: list[str] = []
    recommendations: list[str] = []
