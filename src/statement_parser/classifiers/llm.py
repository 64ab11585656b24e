from decimal import Decimal

from statement_parser.errors import CategorizationFailure
from statement_parser.integration.llm import LLMClient
from statement_parser.logger import get_logger
from statement_parser.models import CategorizationResult, Category

from .base import Classifier, income_result

logger = get_logger(__name__)

LLM_CONFIDENCE = 0.9

CATEGORY_LABELS = ", ".join(category.value for category in Category)

INSTRUCTIONS = f"""You categorize bank transactions by their description.
Available categories: {CATEGORY_LABELS}.
Answer with the category name only, without any explanation."""


class LLMClassifier(Classifier):
    def __init__(self, llm: LLMClient):
        self.llm = llm

    @property
    def method(self) -> str:  # type: ignore[override]
        return self.llm.name

    def classify(self, description: str, amount: Decimal | float) -> CategorizationResult:
        """Ask the model for one label from the closed category set.

        Raises:
            CategorizationFailure: if the backend errors or answers with nothing.
        """
        income = income_result(amount, self.method)
        if income:
            return income

        prompt = f'Categorize this transaction: "{description}"'
        try:
            answer = self.llm.complete(INSTRUCTIONS, prompt, temperature=0.3, max_tokens=20)
        except Exception as exc:
            raise CategorizationFailure(f"AI categorization failed: {exc}") from exc

        if answer is None:
            raise CategorizationFailure("AI backend returned an empty answer")

        category = Category.from_label(answer)
        if category is Category.OTHER and answer.strip().lower() != Category.OTHER.value.lower():
            logger.debug("[CATEGORIZE] Unknown label '%s' from AI; using Other.", answer.strip()[:40])

        return CategorizationResult(
            category=category,
            confidence=LLM_CONFIDENCE,
            method=self.method,
        )
