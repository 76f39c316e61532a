"""
Statement Pipeline

Orchestrates one statement document through every stage, in order:

1. Decode the PDF into positioned fragments (first pages only)
2. Reconstruct reading-order lines
3. Detect the bank variant
4. Resolve the statement period from balance anchors
5. Extract transactions with the variant's parser

Line-level problems are collected in the result; any document-level problem
raises and no records are returned.
"""
import os
import time
from contextlib import contextmanager
from typing import List, Optional

from dirham.common.logging_config import get_logger
from dirham.common.models import StatementParseResult
from dirham.common.settings import ParserSettings
from .banks import get_parser_class
from .config.registry import VariantRegistry
from .exceptions import DecodeTimeout, InputTooLarge, UnsupportedDocument
from .lines import reconstruct_lines
from .period import find_anchor_candidates, resolve_statement_period
from .sources.pdf import PdfFragmentSource

logger = get_logger(__name__)

PDF_MAGIC = b"%PDF"


class StatementPipeline:
    """
    Main orchestrator for statement extraction.

    Handles:
    - Input size and type checks
    - Time budget for the whole document
    - Stage boundary diagnostics (entered/exited, elapsed time)
    """

    def __init__(self, registry: Optional[VariantRegistry] = None, settings: Optional[ParserSettings] = None, source: Optional[PdfFragmentSource] = None):
        """
        Initialize pipeline.

        Args:
            registry: VariantRegistry with the available layouts
            settings: Limits and timeouts
            source: PDF decoding collaborator
        """
        self.settings = settings or ParserSettings()
        self.registry = registry or VariantRegistry()
        self.source = source or PdfFragmentSource(self.settings)

    @contextmanager
    def _stage(self, name: str, deadline: Optional[float] = None, filename: str = None):
        started = time.monotonic()
        logger.debug("Stage entered.", stage=name)
        yield
        elapsed_ms = round((time.monotonic() - started) * 1000, 2)
        logger.debug("Stage exited.", stage=name, elapsed_ms=elapsed_ms)
        if deadline is not None and time.monotonic() > deadline:
            raise DecodeTimeout(f"Statement processing ({name})", self.settings.total_timeout, filename=filename)

    def check_input(self, data: bytes, filename: str = None) -> None:
        size = len(data or b"")
        if size > self.settings.max_input_bytes:
            raise InputTooLarge(size, self.settings.max_input_bytes, filename=filename)
        if not data or data.lstrip()[:4] != PDF_MAGIC:
            raise UnsupportedDocument("Please upload a PDF file.", filename=filename)

    def process_bytes(self, data: bytes, filename: str = None) -> StatementParseResult:
        """
        Parse a statement PDF.

        Args:
            data: Raw PDF bytes
            filename: Original file name, for diagnostics

        Returns:
            StatementParseResult with the records and parse metadata
        """
        self.check_input(data, filename=filename)
        deadline = time.monotonic() + self.settings.total_timeout
        logger.info("Statement processing started.", filename=filename, size=len(data))

        with self._stage("decode", deadline, filename):
            pages = self.source.read_pages(data, deadline=deadline, filename=filename)

        with self._stage("lines", deadline, filename):
            lines = reconstruct_lines(pages, max_pages=self.settings.max_pages)

        result = self.process_lines(lines, filename=filename, deadline=deadline)
        result.page_count = len(pages)
        return result

    def process_file(self, file_path: str) -> StatementParseResult:
        with open(file_path, 'rb') as f:
            data = f.read()
        return self.process_bytes(data, filename=os.path.basename(file_path))

    def process_lines(self, lines: List[str], filename: str = None, deadline: Optional[float] = None) -> StatementParseResult:
        """
        Run detection, period resolution and extraction on reconstructed lines.
        """
        if not lines:
            logger.warning("No text lines extracted.", filename=filename)

        with self._stage("detect", deadline, filename):
            layout = self.registry.detect_layout(lines)

        with self._stage("period", deadline, filename):
            candidates = find_anchor_candidates(lines, self.registry.anchor_patterns())
            period = resolve_statement_period(lines, [], filename=filename, candidates=candidates)

        parser = get_parser_class(layout.variant)(self.settings)
        with self._stage("extract", deadline, filename):
            records, failures = parser.parse(lines, period, filename=filename)

        result = StatementParseResult(
            records=records,
            variant=parser.variant,
            bank_name=layout.name,
            period=period,
            anchor_candidates=candidates,
            failed_lines=failures,
            line_count=len(lines),
            filename=filename,
        )
        logger.info("Statement processing finished.", **result.summary())
        return result
