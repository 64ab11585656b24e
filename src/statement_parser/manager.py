from decimal import Decimal

from statement_parser.classifiers.base import income_result
from statement_parser.classifiers.keywords import KeywordClassifier
from statement_parser.classifiers.llm import LLMClassifier
from statement_parser.integration.llm import LLMClient
from statement_parser.logger import get_logger
from statement_parser.models import CategorizationResult

logger = get_logger(__name__)


class CategorizerService:
    def __init__(self, llm: LLMClient | None = None):
        self.keywords = KeywordClassifier()
        self.llm: LLMClassifier | None = LLMClassifier(llm) if llm else None
        if self.llm is None:
            logger.info("[CATEGORIZE] No AI backend configured. Keyword categorization only.")

    @property
    def ai_available(self) -> bool:
        return self.llm is not None

    def categorize(
        self, description: str, amount: Decimal | float, use_ai: bool = False
    ) -> CategorizationResult:
        income = income_result(amount, self.keywords.method)
        if income:
            return income

        if use_ai and self.llm:
            logger.debug("[CATEGORIZE] Trying %s for: '%s...'", self.llm.method, description[:50])
            try:
                return self.llm.classify(description, amount)
            except Exception as exc:
                logger.warning(
                    "[CATEGORIZE] AI categorization failed, using keywords for '%s': %s",
                    description[:50],
                    exc,
                )

        result = self.keywords.classify(description, amount)
        logger.debug(
            "[CATEGORIZE] keywords returned '%s' (confidence: %.2f) for '%s'",
            result.category.value,
            result.confidence,
            description[:50],
        )
        return result
