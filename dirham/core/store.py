"""
Transaction Store

Persists the merged record set and the statement import history. Two
implementations share the same protocol:

- ``InMemoryTransactionStore``: process-local, used by tests and one-shot runs
- ``JsonFileTransactionStore``: one JSON document per key
  (``transactions.json``, ``statements.json``) under a data directory

The store does not serialize concurrent read-merge-write cycles; callers must
hold a single writer.
"""
import json
import os
from pathlib import Path
from typing import List, Optional, Protocol

from dirham.common.logging_config import get_logger
from dirham.common.models import StatementEntry, TransactionRecord
from dirham.common.settings import get_data_dir

logger = get_logger(__name__)

TRANSACTIONS_KEY = "transactions"
STATEMENTS_KEY = "statements"


class TransactionStore(Protocol):
    def list(self) -> List[TransactionRecord]: ...

    def replace(self, records: List[TransactionRecord]) -> None: ...

    def list_statements(self) -> List[StatementEntry]: ...

    def add_statement(self, entry: StatementEntry) -> None: ...

    def clear(self) -> None: ...


class InMemoryTransactionStore:
    def __init__(self, records: Optional[List[TransactionRecord]] = None):
        self._records = list(records or [])
        self._statements: List[StatementEntry] = []

    def list(self) -> List[TransactionRecord]:
        return list(self._records)

    def replace(self, records: List[TransactionRecord]) -> None:
        self._records = list(records)

    def list_statements(self) -> List[StatementEntry]:
        return list(self._statements)

    def add_statement(self, entry: StatementEntry) -> None:
        self._statements.append(entry)

    def clear(self) -> None:
        self._records = []
        self._statements = []


class JsonFileTransactionStore:
    """
    File-backed store.

    Writes go to a temporary file that replaces the target, so a crash never
    leaves a half-written document. A corrupt document raises on read.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self.data_dir = Path(data_dir or get_data_dir())
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _read(self, key: str) -> list:
        path = self._path(key)
        if not path.exists():
            return []
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"Unexpected content in {path}: expected a JSON list")
        return data

    def _write(self, key: str, items: list) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(items, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
        logger.debug("Store document written.", key=key, items=len(items))

    def list(self) -> List[TransactionRecord]:
        return [TransactionRecord.from_dict(d) for d in self._read(TRANSACTIONS_KEY)]

    def replace(self, records: List[TransactionRecord]) -> None:
        self._write(TRANSACTIONS_KEY, [r.to_dict() for r in records])

    def list_statements(self) -> List[StatementEntry]:
        return [StatementEntry.from_dict(d) for d in self._read(STATEMENTS_KEY)]

    def add_statement(self, entry: StatementEntry) -> None:
        items = self._read(STATEMENTS_KEY)
        items.append(entry.to_dict())
        self._write(STATEMENTS_KEY, items)

    def clear(self) -> None:
        for key in (TRANSACTIONS_KEY, STATEMENTS_KEY):
            path = self._path(key)
            if path.exists():
                path.unlink()
        logger.info("Store cleared.", data_dir=str(self.data_dir))
