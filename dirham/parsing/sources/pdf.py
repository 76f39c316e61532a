"""
PDF fragment source backed by pdfplumber.

Opens a statement from raw bytes and yields, for each of the first pages, the
positioned words of that page. The decoder runs on a daemon reader thread that
owns the document from open to close; the caller waits on it with a timeout:

- opening the document (and counting its pages): ``open_timeout``
- extracting one page: ``page_timeout``

A timeout aborts the whole read with ``DecodeTimeout``. The reader is told to
stop and closes the document itself once its current call returns; a hung
decoder never keeps the process alive. Any other failure on a page skips
that page.
"""
import io
import queue
import threading
import time
from typing import List, Optional

import pdfplumber

from dirham.common.logging_config import get_logger
from dirham.common.models import PositionedFragment
from dirham.common.settings import ParserSettings
from ..exceptions import DecodeTimeout, DocumentOpenFailure, PageDecodeFailure

logger = get_logger(__name__)

OPENED = "opened"
OPEN_FAILED = "open_failed"
PAGE = "page"
PAGE_FAILED = "page_failed"


def page_fragments(pdf, index: int) -> List[PositionedFragment]:
    """
    Words of one page. pdfplumber measures ``bottom`` from the top of the
    page; the fragment position is flipped to PDF user space so that larger
    values are higher on the page.
    """
    page = pdf.pages[index]
    height = float(page.height)
    fragments = []
    for word in page.extract_words():
        text = (word.get('text') or '').strip()
        if not text:
            continue
        fragments.append(PositionedFragment(text=text, vertical_position=round(height - float(word['bottom']))))
    return fragments


class DocumentReader(threading.Thread):
    """
    Daemon thread decoding one document, page after page.

    Progress is reported as events on ``events``:
    ``(OPENED, page_count)``, ``(OPEN_FAILED, error)``,
    ``(PAGE, index, fragments)``, ``(PAGE_FAILED, index, error)``.
    The document is always closed by this thread.
    """

    def __init__(self, data: bytes, max_pages: int):
        super().__init__(name="dirham-pdf", daemon=True)
        self.data = data
        self.max_pages = max_pages
        self.events = queue.Queue()
        self.cancelled = threading.Event()
        self.closed = threading.Event()

    def run(self):
        pdf = None
        try:
            try:
                pdf = pdfplumber.open(io.BytesIO(self.data))
                page_count = len(pdf.pages)
            except Exception as e:
                self.events.put((OPEN_FAILED, e))
                return
            self.events.put((OPENED, page_count))

            for index in range(min(page_count, self.max_pages)):
                if self.cancelled.is_set():
                    return
                try:
                    self.events.put((PAGE, index, page_fragments(pdf, index)))
                except Exception as e:
                    self.events.put((PAGE_FAILED, index, e))
        finally:
            if pdf is not None:
                pdf.close()
            self.closed.set()


class PdfFragmentSource:
    """
    Decodes statement PDFs into per-page lists of PositionedFragment.
    """

    def __init__(self, settings: Optional[ParserSettings] = None):
        self.settings = settings or ParserSettings()
        self.page_count = 0
        self.reader: Optional[DocumentReader] = None

    def read_pages(self, data: bytes, deadline: Optional[float] = None, filename: str = None) -> List[List[PositionedFragment]]:
        """
        Decode up to ``settings.max_pages`` pages.

        Args:
            data: Raw PDF bytes
            deadline: ``time.monotonic()`` value after which decoding must stop
            filename: Used in error messages only

        Returns:
            One fragment list per page that decoded successfully, in page order
        """
        reader = DocumentReader(data, self.settings.max_pages)
        self.reader = reader
        reader.start()
        try:
            event = self._next_event(
                reader, self._budget(self.settings.open_timeout, deadline),
                operation="Opening the document", filename=filename,
            )
            if event[0] == OPEN_FAILED:
                error = event[1]
                logger.error(f"PDF Read Error: {error}", error_type=type(error).__name__)
                raise DocumentOpenFailure(f"Could not open PDF: {error}", filename=filename) from error

            page_count = event[1]
            self.page_count = page_count
            max_pages = min(page_count, self.settings.max_pages)
            logger.info("PDF opened.", pages=page_count, pages_to_read=max_pages)

            pages = []
            for index in range(max_pages):
                event = self._next_event(
                    reader, self._budget(self.settings.page_timeout, deadline),
                    operation=f"Reading page {index + 1}", filename=filename,
                )
                if event[0] == PAGE_FAILED:
                    error = event[2]
                    failure = PageDecodeFailure(index + 1, str(error))
                    logger.warning("Page skipped.", page=index + 1, reason=failure.code, detail=str(error))
                    continue
                pages.append(event[2])
            return pages
        finally:
            reader.cancelled.set()

    @staticmethod
    def _budget(limit: float, deadline: Optional[float]) -> float:
        if deadline is None:
            return limit
        return max(0.0, min(limit, deadline - time.monotonic()))

    @staticmethod
    def _next_event(reader: DocumentReader, timeout: float, operation: str, filename: str = None):
        try:
            return reader.events.get(timeout=timeout)
        except queue.Empty:
            logger.error(f"{operation} timed out.", timeout=timeout)
            raise DecodeTimeout(operation, timeout, filename=filename)
