from .consolidator import MergeResult, TransactionConsolidator, records_to_frame
from .importer import ImportSummary, StatementImporter
from .store import InMemoryTransactionStore, JsonFileTransactionStore, TransactionStore

__all__ = [
    'ImportSummary',
    'InMemoryTransactionStore',
    'JsonFileTransactionStore',
    'MergeResult',
    'StatementImporter',
    'TransactionConsolidator',
    'TransactionStore',
    'records_to_frame',
]
