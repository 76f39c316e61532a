"""
Runtime settings for statement parsing and storage.

Defaults are the committed limits of the import engine; every field can be
overridden through a ``DIRHAM_*`` environment variable.
"""
import os
from dataclasses import dataclass, fields
from typing import Optional


@dataclass(frozen=True)
class ParserSettings:
    """
    Limits applied while decoding and parsing a statement.

    Attributes:
        max_input_bytes: Ceiling on the raw document size (InputTooLarge)
        max_pages: Pages beyond this index are never read
        open_timeout: Seconds allowed to open the document
        page_timeout: Seconds allowed to fetch the content of one page
        total_timeout: Seconds allowed for the whole pipeline
        max_amount: Largest accepted transaction magnitude
        min_year / max_year: Accepted range for date years
    """
    max_input_bytes: int = 10 * 1024 * 1024
    max_pages: int = 5
    open_timeout: float = 5.0
    page_timeout: float = 3.0
    total_timeout: float = 15.0
    max_amount: float = 10_000_000
    min_year: int = 2000
    max_year: int = 2030

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "ParserSettings":
        """Build settings, reading ``DIRHAM_<FIELD>`` overrides (e.g. DIRHAM_MAX_PAGES)."""
        environ = os.environ if environ is None else environ
        overrides = {}
        for f in fields(cls):
            raw = environ.get(f"DIRHAM_{f.name.upper()}")
            if raw is None or not raw.strip():
                continue
            caster = int if f.type in (int, "int") else float
            overrides[f.name] = caster(raw)
        return cls(**overrides)


def get_data_dir() -> str:
    """Directory where the JSON transaction store lives."""
    return os.getenv("DIRHAM_DATA_DIR", os.path.join(os.getcwd(), "data"))
