"""
Statement Importer

Read-merge-write cycle for one statement document:

1. Parse the document (size check included)
2. Read the stored records
3. Merge, dropping records already known
4. Write the merged set back and record the import in the history

A document that yields no new records is still a successful import
(``added == 0``); any extraction failure raises and leaves the store untouched.
"""
import time
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional

from dirham.common.logging_config import get_logger
from dirham.common.models import StatementEntry, StatementParseResult, TransactionRecord
from dirham.parsing.pipeline import StatementPipeline
from .consolidator import TransactionConsolidator
from .store import TransactionStore

logger = get_logger(__name__)


@dataclass
class ImportSummary:
    added: int
    duplicates: int
    total: int
    statement: StatementEntry
    parse_result: StatementParseResult

    @property
    def message(self) -> str:
        if self.added == 0:
            return "No new transactions found; every transaction in this statement was already imported."
        return f"Imported {self.added} new transactions."

    def to_dict(self):
        return {
            'message': self.message,
            'added': self.added,
            'duplicates': self.duplicates,
            'total': self.total,
            'statement': self.statement.to_dict(),
            'result': self.parse_result.summary(),
        }


class StatementImporter:
    def __init__(self, store: TransactionStore, pipeline: Optional[StatementPipeline] = None, clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.pipeline = pipeline or StatementPipeline()
        self.clock = clock or datetime.now

    def import_file(self, file_path: str) -> ImportSummary:
        result = self.pipeline.process_file(file_path)
        return self.commit(result)

    def import_bytes(self, data: bytes, filename: str) -> ImportSummary:
        result = self.pipeline.process_bytes(data, filename=filename)
        return self.commit(result)

    def commit(self, result: StatementParseResult) -> ImportSummary:
        """Merge a parse result into the store."""
        now = self.clock()
        statement_id = f"statement_{int(now.timestamp() * 1000)}"
        incoming: List[TransactionRecord] = [replace(r, statement_id=statement_id) for r in result.records]

        existing = self.store.list()
        merged = TransactionConsolidator.merge(existing, incoming)

        self.store.replace(merged.records)
        entry = StatementEntry(
            id=statement_id,
            filename=result.filename or "",
            upload_date=now,
            transaction_count=merged.added,
        )
        self.store.add_statement(entry)

        logger.info(
            "Statement imported." if merged.added else "Statement contained no new transactions.",
            filename=result.filename,
            statement_id=statement_id,
            added=merged.added,
            duplicates=merged.duplicates,
            total=len(merged.records),
        )
        return ImportSummary(
            added=merged.added,
            duplicates=merged.duplicates,
            total=len(merged.records),
            statement=entry,
            parse_result=result,
        )

    def clear(self) -> None:
        started = time.monotonic()
        self.store.clear()
        logger.info("All transactions and statements cleared.", elapsed_ms=round((time.monotonic() - started) * 1000, 2))
