import os
import threading
from typing import Protocol

from statement_parser.models import CategorizedTransaction


class TransactionSink(Protocol):
    def save(self, transaction: CategorizedTransaction) -> None:
        """Persist one transaction or raise."""
        ...

    def load(self) -> list[CategorizedTransaction]:
        """Return every stored transaction in save order."""
        ...


class NullSink:
    def save(self, transaction: CategorizedTransaction) -> None:
        return None

    def load(self) -> list[CategorizedTransaction]:
        return []


class JsonlTransactionSink:
    """Append each saved transaction as one JSON line."""

    def __init__(self, data_path: str = "transactions.jsonl"):
        self.data_path = data_path
        self._lock = threading.Lock()
        directory = os.path.dirname(data_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

    def save(self, transaction: CategorizedTransaction) -> None:
        line = transaction.model_dump_json()
        with self._lock:
            with open(self.data_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

    def load(self) -> list[CategorizedTransaction]:
        if not os.path.exists(self.data_path):
            return []
        with open(self.data_path, encoding="utf-8") as f:
            return [CategorizedTransaction.model_validate_json(line) for line in f if line.strip()]
