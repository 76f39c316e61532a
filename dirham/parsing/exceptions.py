"""
Exceptions raised while turning a statement document into transactions.

Two families:
- ``FatalStatementError``: the whole document is rejected, no records are kept.
- ``LineError``: a single line is rejected; it is recorded and parsing goes on.

Every error carries a stable ``code`` (its class name by default) used in logs,
API responses and the list of failed lines.
"""


class StatementError(Exception):
    """
    Base class for statement parsing errors.

    The message can be enriched with:
    - The filename that failed
    - A sample of the text that was being read
    """

    def __init__(self, message: str, filename: str = None, sample_text: str = None):
        self.message = message
        self.filename = filename
        self.sample_text = sample_text

        details = []
        if filename:
            details.append(f"File: {filename}")
        if sample_text:
            details.append(f"Sample: {sample_text[:200]}")

        full_message = f"{message}\n" + "\n".join(details) if details else message
        super().__init__(full_message)

    @property
    def code(self) -> str:
        return type(self).__name__


class FatalStatementError(StatementError):
    """Aborts the parse of the whole document."""


class LineError(StatementError):
    """Rejects one line; the document parse continues."""


class InputTooLarge(FatalStatementError):
    def __init__(self, size: int, limit: int, filename: str = None):
        self.size = size
        self.limit = limit
        super().__init__(
            f"Document is {size} bytes, larger than the {limit} byte limit.",
            filename=filename,
        )


class UnsupportedDocument(FatalStatementError):
    """Input is not a PDF document."""


class DocumentOpenFailure(FatalStatementError):
    """The PDF decoder could not open the document."""


class DecodeTimeout(FatalStatementError):
    def __init__(self, operation: str, seconds: float, filename: str = None):
        self.operation = operation
        self.seconds = seconds
        super().__init__(f"{operation} timed out after {seconds:g}s.", filename=filename)


class PageDecodeFailure(LineError):
    """A page could not be decoded; the page is skipped."""

    def __init__(self, page_number: int, cause: str):
        self.page_number = page_number
        super().__init__(f"Page {page_number} could not be decoded: {cause}")


class NoPeriodAnchorFound(FatalStatementError):
    def __init__(self, filename: str = None, sample_text: str = None):
        super().__init__(
            "No opening or closing balance line found; cannot determine the statement period.",
            filename=filename,
            sample_text=sample_text,
        )


class NoTransactionsParsed(FatalStatementError):
    def __init__(self, bank_name: str = None, filename: str = None):
        bank = f" for {bank_name}" if bank_name else ""
        super().__init__(f"No transactions were parsed{bank}.", filename=filename)


class PeriodConsistencyViolation(FatalStatementError):
    def __init__(self, expected: str, found: list, filename: str = None):
        self.expected = expected
        self.found = sorted(found)
        super().__init__(
            f"Transactions fall in {', '.join(self.found)} but the statement period is {expected}.",
            filename=filename,
        )


class InvalidDateComponent(LineError):
    pass


class AmountUnparseable(LineError):
    pass


class AmountOutOfRange(LineError):
    pass
