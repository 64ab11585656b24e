from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from statement_parser.classifiers.keywords import KeywordClassifier, categorize_transaction
from statement_parser.classifiers.llm import LLMClassifier
from statement_parser.errors import CategorizationFailure
from statement_parser.manager import CategorizerService
from statement_parser.models import Category


@pytest.fixture
def llm() -> MagicMock:
    mock = MagicMock()
    mock.name = "ai"
    return mock


def test_positive_amount_is_income() -> None:
    result = categorize_transaction("Зарплата за январь", Decimal("75000"))
    assert result.category == Category.INCOME
    assert result.confidence == 1.0
    assert result.method == "keywords"


def test_income_wins_over_keywords() -> None:
    result = categorize_transaction("salary refund for groceries at Pyaterochka кафе", 10)
    assert result.category == Category.INCOME
    assert result.confidence == 1.0


def test_single_keyword_match() -> None:
    result = categorize_transaction("McDonald's оплата", Decimal("-450"))
    assert result.category == Category.FOOD
    assert result.confidence == pytest.approx(0.65)
    assert result.method == "keywords"


def test_multiple_matches_raise_confidence() -> None:
    result = categorize_transaction("Кафе Кофе Хауз", -300)
    assert result.category == Category.FOOD
    assert result.confidence == pytest.approx(0.8)


def test_confidence_is_capped() -> None:
    result = categorize_transaction("кафе ресторан кофе пицца суши бургер", -1)
    assert result.confidence == pytest.approx(0.9)


def test_first_category_in_order_wins() -> None:
    # "такси" is Transport, "магазин" is Shopping; Transport comes first.
    result = categorize_transaction("Такси до магазина", -500)
    assert result.category == Category.TRANSPORT


def test_no_match_is_other() -> None:
    result = categorize_transaction("qwxz 1234", -10)
    assert result.category == Category.OTHER
    assert result.confidence == 0.5


@pytest.mark.parametrize(
    "description",
    ["Оплата в магазине", "Аптека Ригла", "ЖКХ Москва", "Skillbox курс", "", "Перевод"],
)
def test_keywords_stay_in_closed_set(description: str) -> None:
    result = KeywordClassifier().classify(description, -1)
    assert result.category in set(Category)
    assert 0.0 <= result.confidence <= 1.0


def test_llm_classifier_maps_label(llm: MagicMock) -> None:
    llm.complete.return_value = " Food\n"
    result = LLMClassifier(llm).classify("Вкусно и точка", -300)

    assert result.category == Category.FOOD
    assert result.confidence == 0.9
    assert result.method == "ai"
    assert llm.complete.call_args.kwargs == {"temperature": 0.3, "max_tokens": 20}


def test_llm_classifier_unknown_label_is_other(llm: MagicMock) -> None:
    llm.complete.return_value = "Groceries"
    result = LLMClassifier(llm).classify("Лента", -300)
    assert result.category == Category.OTHER
    assert result.confidence == 0.9


def test_llm_classifier_income_skips_backend(llm: MagicMock) -> None:
    result = LLMClassifier(llm).classify("Перевод", 100)
    assert result.category == Category.INCOME
    llm.complete.assert_not_called()


def test_llm_classifier_failure(llm: MagicMock) -> None:
    llm.complete.side_effect = RuntimeError("503")
    with pytest.raises(CategorizationFailure):
        LLMClassifier(llm).classify("Лента", -300)


def test_llm_classifier_empty_answer(llm: MagicMock) -> None:
    llm.complete.return_value = None
    with pytest.raises(CategorizationFailure):
        LLMClassifier(llm).classify("Лента", -300)


def test_service_income_never_calls_ai(llm: MagicMock) -> None:
    service = CategorizerService(llm=llm)
    result = service.categorize("Зарплата", Decimal("75000"), use_ai=True)

    assert result.category == Category.INCOME
    assert result.method == "keywords"
    llm.complete.assert_not_called()


def test_service_uses_ai_when_requested(llm: MagicMock) -> None:
    llm.complete.return_value = "Entertainment"
    service = CategorizerService(llm=llm)

    result = service.categorize("Премьер зал", -600, use_ai=True)

    assert result.category == Category.ENTERTAINMENT
    assert result.method == "ai"


def test_service_falls_back_to_keywords_on_ai_error(llm: MagicMock) -> None:
    llm.complete.side_effect = TimeoutError()
    service = CategorizerService(llm=llm)

    result = service.categorize("Яндекс Такси", -350, use_ai=True)

    assert result.category == Category.TRANSPORT
    assert result.method == "keywords"


def test_service_keywords_by_default(llm: MagicMock) -> None:
    service = CategorizerService(llm=llm)
    result = service.categorize("Аптека", -200)
    assert result.category == Category.HEALTH
    llm.complete.assert_not_called()


def test_service_without_backend() -> None:
    service = CategorizerService()
    assert not service.ai_available
    result = service.categorize("Аптека", -200, use_ai=True)
    assert result.method == "keywords"
