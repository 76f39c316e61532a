from .config import VariantRegistry
from .exceptions import FatalStatementError, LineError, StatementError
from .pipeline import StatementPipeline

__all__ = [
    'FatalStatementError',
    'LineError',
    'StatementError',
    'StatementPipeline',
    'VariantRegistry',
]
