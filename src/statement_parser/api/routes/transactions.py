import asyncio
import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Depends

from statement_parser.api.dependencies import get_sink
from statement_parser.domain.summary import build_summary, filter_by_date
from statement_parser.integration.storage import TransactionSink
from statement_parser.models import CategorizedTransaction, StatementSummary

router = APIRouter()


@router.get("/transactions", response_model=list[CategorizedTransaction])
async def list_transactions(
    sink: Annotated[TransactionSink, Depends(get_sink)],
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
) -> list[CategorizedTransaction]:
    transactions = await asyncio.to_thread(sink.load)
    return filter_by_date(transactions, start_date, end_date)


@router.get("/transactions/stats", response_model=StatementSummary)
async def transaction_stats(
    sink: Annotated[TransactionSink, Depends(get_sink)],
    start_date: dt.date | None = None,
    end_date: dt.date | None = None,
) -> StatementSummary:
    transactions = await asyncio.to_thread(sink.load)
    return build_summary(filter_by_date(transactions, start_date, end_date))
