from abc import ABC, abstractmethod
from decimal import Decimal

from statement_parser.models import CategorizationResult, Category

INCOME_CONFIDENCE = 1.0


def income_result(amount: Decimal | float, method: str) -> CategorizationResult | None:
    """Positive amounts are always income; nothing else is consulted."""
    if amount > 0:
        return CategorizationResult(category=Category.INCOME, confidence=INCOME_CONFIDENCE, method=method)
    return None


class Classifier(ABC):
    method: str

    @abstractmethod
    def classify(self, description: str, amount: Decimal | float) -> CategorizationResult | None:
        """Attempt to categorize the transaction."""
        pass
