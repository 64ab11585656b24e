from decimal import Decimal

from statement_parser.models import CategorizationResult, Category

from .base import Classifier, income_result

BASE_CONFIDENCE = 0.5
CONFIDENCE_PER_MATCH = 0.15
MAX_KEYWORD_CONFIDENCE = 0.9

# Order matters: the first category with any hit wins.
CATEGORY_KEYWORDS: dict[Category, tuple[str, ...]] = {
    Category.FOOD: (
        "mcdonald",
        "макдональдс",
        "вкусно и точка",
        "kfc",
        "burger",
        "бургер",
        "кафе",
        "cafe",
        "ресторан",
        "restaurant",
        "кофе",
        "coffee",
        "starbucks",
        "пицц",
        "pizza",
        "суши",
        "столовая",
        "продукты",
        "пятерочка",
        "пятёрочка",
        "магнит",
        "перекресток",
        "перекрёсток",
        "вкусвилл",
        "лента",
        "дикси",
        "яндекс еда",
        "delivery club",
        "самокат",
    ),
    Category.TRANSPORT: (
        "такси",
        "taxi",
        "uber",
        "яндекс go",
        "yandex go",
        "метро",
        "автобус",
        "транспорт",
        "тройка",
        "электричк",
        "ржд",
        "аэрофлот",
        "azs",
        "азс",
        "бензин",
        "лукойл",
        "роснефть",
        "газпромнефть",
        "shell",
        "парковк",
        "каршеринг",
        "делимобиль",
    ),
    Category.ENTERTAINMENT: (
        "кино",
        "cinema",
        "театр",
        "концерт",
        "музей",
        "боулинг",
        "netflix",
        "spotify",
        "steam",
        "playstation",
        "кинопоиск",
        "okko",
        "ivi.ru",
        "яндекс музыка",
        "развлечен",
    ),
    Category.SHOPPING: (
        "магазин",
        "wildberries",
        "ozon",
        "озон",
        "aliexpress",
        "маркет",
        "market",
        "ikea",
        "zara",
        "h&m",
        "м.видео",
        "эльдорадо",
        "dns",
        "спортмастер",
        "леруа",
        "leroy",
        "ашан",
        "одежда",
    ),
    Category.UTILITIES: (
        "жкх",
        "коммунальн",
        "квартплата",
        "электроэнерг",
        "мосэнерго",
        "водоканал",
        "мосгаз",
        "газоснабж",
        "интернет",
        "ростелеком",
        "мтс",
        "билайн",
        "мегафон",
        "теле2",
        "связь",
        "домофон",
    ),
    Category.HEALTH: (
        "аптека",
        "apteka",
        "pharmacy",
        "клиника",
        "больниц",
        "стоматолог",
        "медицин",
        "врач",
        "доктор",
        "анализ",
        "инвитро",
        "invitro",
        "фитнес",
    ),
    Category.EDUCATION: (
        "школа",
        "университет",
        "курс",
        "обучени",
        "учеб",
        "skillbox",
        "geekbrains",
        "coursera",
        "udemy",
        "книг",
        "литрес",
        "education",
    ),
}


def count_matches(description: str, keywords: tuple[str, ...]) -> int:
    lowered = description.lower()
    return sum(1 for keyword in keywords if keyword in lowered)


def match_category(description: str) -> tuple[Category, int]:
    """Return the first category with a keyword hit and its hit count."""
    for category, keywords in CATEGORY_KEYWORDS.items():
        matches = count_matches(description, keywords)
        if matches:
            return category, matches
    return Category.OTHER, 0


def keyword_confidence(matches: int) -> float:
    return min(BASE_CONFIDENCE + CONFIDENCE_PER_MATCH * matches, MAX_KEYWORD_CONFIDENCE)


class KeywordClassifier(Classifier):
    """Keyword lookup. Always returns a result; ``Other`` when nothing matches."""

    method = "keywords"

    def classify(self, description: str, amount: Decimal | float) -> CategorizationResult:
        income = income_result(amount, self.method)
        if income:
            return income

        category, matches = match_category(description or "")
        return CategorizationResult(
            category=category,
            confidence=keyword_confidence(matches),
            method=self.method,
        )


def categorize_transaction(description: str, amount: Decimal | float) -> CategorizationResult:
    return KeywordClassifier().classify(description, amount)
