from decimal import Decimal

from pydantic import BaseModel, Field

from statement_parser.models import AnalysisReport, CategorizedTransaction


class ParseRequest(BaseModel):
    text: str = Field(min_length=1)
    use_ai: bool = True


class CategorizeRequest(BaseModel):
    description: str
    amount: Decimal
    use_ai: bool = False


class AnalysisRequest(BaseModel):
    transactions: list[CategorizedTransaction] = []


class AnalysisResponse(BaseModel):
    report: AnalysisReport
