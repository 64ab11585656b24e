import json
from collections.abc import Sequence

from pydantic import ValidationError

from statement_parser.errors import AnalysisFailure
from statement_parser.integration.llm import LLMClient
from statement_parser.logger import get_logger
from statement_parser.models import AnalysisReport, CategorizedTransaction
from statement_parser.parsers.ai import strip_code_fence

logger = get_logger(__name__)

MAX_ANALYSIS_TRANSACTIONS = 200

INSTRUCTIONS = "You are a financial analyst. Answer with strict JSON only, without explanations."

PROMPT_TEMPLATE = """Analyse the transactions below and return JSON with this schema:
{{
  "summary": string,
  "keyMetrics": {{ "income": number, "expenses": number, "net": number, "topCategory": string }},
  "insights": string[],
  "risks": string[],
  "recommendations": string[]
}}
If there is little data, fill the fields with short conclusions.
Transactions: {transactions}
"""

_REPORT_FIELDS = {"date", "amount", "description", "category", "bank"}


def read_report(raw: str) -> AnalysisReport:
    """Build a report from the model's answer, keeping the raw text when it is not JSON."""
    try:
        payload = json.loads(strip_code_fence(raw))
        if isinstance(payload, dict):
            return AnalysisReport.model_validate(payload)
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.debug("[ANALYSIS] Answer is not a JSON report: %s", exc)
    return AnalysisReport(summary=raw.strip())


class SpendingAnalyzer:
    def __init__(self, llm: LLMClient, limit: int = MAX_ANALYSIS_TRANSACTIONS):
        self.llm = llm
        self.limit = limit

    def build_prompt(self, transactions: Sequence[CategorizedTransaction]) -> str:
        rows = [t.model_dump(mode="json", include=_REPORT_FIELDS) for t in transactions[: self.limit]]
        return PROMPT_TEMPLATE.format(transactions=json.dumps(rows, ensure_ascii=False))

    def analyze(self, transactions: Sequence[CategorizedTransaction]) -> AnalysisReport:
        """Ask the model for a spending report over at most ``limit`` transactions.

        Raises:
            AnalysisFailure: if the backend errors or answers with nothing.
        """
        prompt = self.build_prompt(transactions)
        try:
            raw = self.llm.complete(INSTRUCTIONS, prompt, temperature=0.3)
        except Exception as exc:
            raise AnalysisFailure(f"AI analysis failed: {exc}") from exc

        if not raw:
            raise AnalysisFailure("AI backend returned an empty report")

        report = read_report(raw)
        logger.info(
            "[ANALYSIS] Report for %d transactions (%d insights).",
            min(len(transactions), self.limit),
            len(report.insights),
        )
        return report
