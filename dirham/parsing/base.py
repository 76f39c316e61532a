"""
Base Class for Statement Parsers

Every layout shares the same contract: walk the reconstructed lines, tokenize
the ones that look like transactions, normalize them into TransactionRecords
and check that the whole document agrees with the statement period.
Subclasses only provide the line grammar and the date resolution.
"""
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from dirham.common.logging_config import get_logger
from dirham.common.models import (
    BankVariant,
    FailedLine,
    RawTransactionToken,
    StatementPeriod,
    TransactionRecord,
)
from dirham.common.settings import ParserSettings
from .exceptions import (
    AmountOutOfRange,
    AmountUnparseable,
    LineError,
    NoTransactionsParsed,
    PeriodConsistencyViolation,
)
from .keywords import infer_category, infer_direction
from .normalize import AMOUNT_RE, apply_sign, build_date_iso, clean_description, parse_amount

logger = get_logger(__name__)


class BaseStatementParser(ABC):
    """
    Abstract Base Class for all statement layouts.

    Returns:
        Tuple[List[TransactionRecord], List[FailedLine]]
    """
    variant: BankVariant = BankVariant.UNKNOWN
    bank_name: str = 'Unknown Bank'

    ignored_keywords = ("SOLDE", "TOTAL")

    def __init__(self, settings: Optional[ParserSettings] = None):
        self.settings = settings or ParserSettings()

    def parse(self, lines: List[str], period: StatementPeriod, filename: str = None) -> Tuple[List[TransactionRecord], List[FailedLine]]:
        """
        Extract every transaction of the document.

        Raises:
            NoTransactionsParsed: zero records after a full pass
            PeriodConsistencyViolation: a record falls outside the statement month
        """
        records, failures = self.extract(lines, period)

        if not records:
            logger.error("No transactions were parsed.", bank=self.bank_name, failed_lines=len(failures))
            raise NoTransactionsParsed(bank_name=self.bank_name, filename=filename)

        self.check_period_consistency(records, period, filename=filename)
        return records, failures

    def extract(self, lines: List[str], period: StatementPeriod) -> Tuple[List[TransactionRecord], List[FailedLine]]:
        records = []
        failures = []

        for line_number, line in enumerate(lines, start=1):
            text = (line or "").strip()
            if self.should_ignore_line(text):
                continue

            token = self.tokenize(text)
            if token is None:
                continue

            try:
                records.append(self.build_record(token, period))
            except LineError as e:
                failures.append(FailedLine(line_number=line_number, text=text, code=e.code, reason=e.message))
                logger.debug("Line skipped.", line_number=line_number, reason=e.code, detail=e.message)

        logger.info(
            f"{self.bank_name}: parsed {len(records)} transactions.",
            variant=self.variant.value,
            tx_count=len(records),
            failed_lines=len(failures),
        )
        return records, failures

    def should_ignore_line(self, line: str) -> bool:
        """
        Blank lines, balance lines and totals never hold a transaction.
        Keywords match case-sensitively: merchant names such as "Total" are kept.
        """
        if not line:
            return True
        return any(k in line for k in self.ignored_keywords)

    @abstractmethod
    def tokenize(self, line: str) -> Optional[RawTransactionToken]:
        """Return a token when ``line`` matches the layout's transaction grammar."""
        raise NotImplementedError

    @abstractmethod
    def resolve_dates(self, token: RawTransactionToken, period: StatementPeriod) -> Tuple[str, str]:
        """Return the (operation, value) ISO dates of a token."""
        raise NotImplementedError

    def build_record(self, token: RawTransactionToken, period: StatementPeriod) -> TransactionRecord:
        magnitude = self.parse_magnitude(token.amount_text)

        description = clean_description(token.description)
        direction = infer_direction(description)
        operation_date, value_date = self.resolve_dates(token, period)

        return TransactionRecord(
            code=token.code,
            operation_date=operation_date,
            value_date=value_date,
            description=description,
            amount=apply_sign(magnitude, direction),
            direction=direction,
            category=infer_category(description),
        )

    def parse_magnitude(self, amount_text: str):
        if not AMOUNT_RE.match(amount_text or ""):
            raise AmountUnparseable(f"Unparseable amount: {amount_text!r}")
        magnitude = parse_amount(amount_text)
        if magnitude <= 0 or magnitude > self.settings.max_amount:
            raise AmountOutOfRange(f"Amount out of range: {amount_text!r}")
        return magnitude

    def build_date(self, day, month, year) -> str:
        return build_date_iso(day, month, year, min_year=self.settings.min_year, max_year=self.settings.max_year)

    def check_period_consistency(self, records: List[TransactionRecord], period: StatementPeriod, filename: str = None):
        """
        All or nothing: every operation date must fall in the statement month.
        """
        expected = period.label()
        months = {r.operation_date[:7] for r in records}
        stray = months - {expected}
        if stray:
            logger.error(
                "Transactions outside the statement period.",
                expected=expected,
                found=sorted(months),
            )
            raise PeriodConsistencyViolation(expected=expected, found=list(months), filename=filename)

