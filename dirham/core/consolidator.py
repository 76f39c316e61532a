from dataclasses import dataclass
from typing import List, Sequence

import pandas as pd

from dirham.common.logging_config import get_logger
from dirham.common.models import TransactionRecord

logger = get_logger(__name__)

RECORD_COLUMNS = [
    'operation_date', 'value_date', 'description', 'amount',
    'direction', 'category', 'code', 'statement_id',
]
KEY_COLUMNS = ['date', 'description', 'amount']


@dataclass
class MergeResult:
    records: List[TransactionRecord]
    added: int
    duplicates: int
    removed_existing: int


def records_to_frame(records: Sequence[TransactionRecord]) -> pd.DataFrame:
    """Tabular view of records, one row per record, in input order."""
    if not records:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    df = pd.DataFrame([r.to_dict() for r in records], columns=RECORD_COLUMNS)
    df['amount'] = pd.to_numeric(df['amount'])
    return df


def _key_frame(records: Sequence[TransactionRecord], origin: str) -> pd.DataFrame:
    keys = [r.dedup_key for r in records]
    df = pd.DataFrame(keys, columns=KEY_COLUMNS)
    df['origin'] = origin
    return df


class TransactionConsolidator:
    @staticmethod
    def merge(existing: Sequence[TransactionRecord], new: Sequence[TransactionRecord]) -> MergeResult:
        """
        Combine the stored records with freshly extracted ones.

        Deduplication Strategy:
        Records are identified by (date, trimmed description, absolute amount
        with two decimals). The existing set is collapsed first, keeping the
        first occurrence; then every new record whose key is already known
        (from the existing set or from an earlier new record) is dropped.
        Order is existing records first, then the new ones, each in their
        original order.
        """
        existing = list(existing)
        new = list(new)
        if not existing and not new:
            return MergeResult(records=[], added=0, duplicates=0, removed_existing=0)

        frames = [f for f in (_key_frame(existing, 'existing'), _key_frame(new, 'new')) if not f.empty]
        combined = pd.concat(frames, ignore_index=True)
        keep_mask = ~combined.duplicated(subset=KEY_COLUMNS, keep='first')

        # Row positions line up with existing + new
        candidates = existing + new
        merged = [rec for rec, keep in zip(candidates, keep_mask.tolist()) if keep]

        is_new = (combined['origin'] == 'new')
        added = int((keep_mask & is_new).sum())
        removed_existing = int((~keep_mask & ~is_new).sum())
        duplicates = len(new) - added

        if removed_existing:
            logger.warning("Duplicate records found in the existing set.", removed=removed_existing)
        logger.info(
            "Records merged.",
            existing=len(existing),
            incoming=len(new),
            added=added,
            duplicates=duplicates,
            total=len(merged),
        )
        return MergeResult(records=merged, added=added, duplicates=duplicates, removed_existing=removed_existing)
