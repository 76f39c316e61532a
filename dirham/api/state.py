import threading
from typing import Optional

from dirham.common.logging_config import get_logger
from dirham.common.settings import ParserSettings, get_data_dir
from dirham.core.importer import StatementImporter
from dirham.core.store import JsonFileTransactionStore, TransactionStore
from dirham.parsing.pipeline import StatementPipeline

logger = get_logger(__name__)


class AppState:
    """
    Process-wide store and importer.

    ``lock`` serializes the read-merge-write cycle of imports and clears, since
    the store itself holds no lock.
    """

    def __init__(self, store: Optional[TransactionStore] = None, settings: Optional[ParserSettings] = None):
        self.settings = settings or ParserSettings.from_env()
        self.store = store or JsonFileTransactionStore(get_data_dir())
        self.importer = StatementImporter(self.store, pipeline=StatementPipeline(settings=self.settings))
        self.lock = threading.Lock()


_state: Optional[AppState] = None
_state_lock = threading.Lock()


def get_state() -> AppState:
    """FastAPI dependency returning the shared AppState, created on first use."""
    global _state
    with _state_lock:
        if _state is None:
            _state = AppState()
            logger.info("Application state initialized.", store=type(_state.store).__name__)
        return _state

