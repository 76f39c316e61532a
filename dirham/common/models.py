from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Tuple


class BankVariant(str, Enum):
    """
    Statement layouts the parser understands.

    ATTIJARIWAFA: code-prefixed lines with space-separated day/month tokens.
    CIH: slash-delimited operation/value day/month pairs.
    """
    ATTIJARIWAFA = "attijariwafa"
    CIH = "cih"
    UNKNOWN = "unknown"


class Direction(str, Enum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


class AnchorKind(str, Enum):
    CLOSING_BALANCE = "closing"
    OPENING_BALANCE = "opening"

    @property
    def priority(self) -> int:
        """Lower wins when choosing the statement period."""
        return 1 if self is AnchorKind.CLOSING_BALANCE else 2


@dataclass(frozen=True)
class PositionedFragment:
    """A piece of text at a vertical position on a page (PDF user space, y grows upward)."""
    text: str
    vertical_position: float


@dataclass(frozen=True)
class LogicalLine:
    text: str
    vertical_position: float


@dataclass(frozen=True)
class StatementPeriod:
    """
    Accounting month covered by a statement, inferred from a balance anchor line.

    ``source`` names the anchor pattern (e.g. ``AWB_CLOSING``) and ``balance``
    holds the signed balance printed on the anchor line, when readable.
    """
    year: int
    month: int
    anchor_kind: AnchorKind
    day: Optional[int] = None
    source: str = ""
    line_number: int = 0
    line: str = ""
    balance: Optional[Decimal] = None

    @property
    def anchor_priority(self) -> int:
        return self.anchor_kind.priority

    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class RawTransactionToken:
    """
    Per-line tokenizer output, before normalization.

    ``day_components`` holds the raw date tokens in line order: ``("07",)`` for
    a code-prefixed line, ``("07/05", "08/05")`` for an operation/value pair.
    """
    day_components: Tuple[str, ...]
    description: str
    amount_text: str
    code: Optional[str] = None


@dataclass(frozen=True)
class TransactionRecord:
    """
    Canonical transaction produced by the extractor.

    Invariant: ``direction`` is CREDIT exactly when ``amount`` is positive and
    DEBIT exactly when it is negative; a zero amount is never valid.
    """
    operation_date: str
    value_date: str
    description: str
    amount: Decimal
    direction: Direction
    category: str = "other"
    code: Optional[str] = None
    statement_id: Optional[str] = None

    def __post_init__(self):
        if self.amount == 0:
            raise ValueError("Transaction amount must not be zero")
        expected = Direction.CREDIT if self.amount > 0 else Direction.DEBIT
        if self.direction is not expected:
            raise ValueError(
                f"Direction {self.direction.value} does not match amount sign {self.amount}"
            )

    @property
    def dedup_key(self) -> Tuple[str, str, str]:
        """(ISO date, trimmed description, absolute amount with 2 decimals)."""
        return (self.operation_date, self.description.strip(), f"{abs(self.amount):.2f}")

    def to_dict(self):
        return {
            'code': self.code,
            'operation_date': self.operation_date,
            'value_date': self.value_date,
            'description': self.description,
            'amount': float(self.amount),
            'direction': self.direction.value,
            'category': self.category,
            'statement_id': self.statement_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TransactionRecord":
        amount = Decimal(str(data['amount'])).quantize(Decimal("0.01"))
        return cls(
            operation_date=data['operation_date'],
            value_date=data.get('value_date') or data['operation_date'],
            description=data.get('description', ''),
            amount=amount,
            direction=Direction(data['direction']),
            category=data.get('category') or 'other',
            code=data.get('code'),
            statement_id=data.get('statement_id'),
        )


@dataclass(frozen=True)
class FailedLine:
    """A line that matched a transaction grammar but was rejected."""
    line_number: int
    text: str
    code: str
    reason: str


@dataclass(frozen=True)
class StatementEntry:
    """One imported statement document, as listed in the import history."""
    id: str
    filename: str
    upload_date: datetime
    transaction_count: int

    def to_dict(self):
        return {
            'id': self.id,
            'filename': self.filename,
            'upload_date': self.upload_date.isoformat(),
            'transaction_count': self.transaction_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StatementEntry":
        return cls(
            id=data['id'],
            filename=data.get('filename', ''),
            upload_date=datetime.fromisoformat(data['upload_date']),
            transaction_count=int(data.get('transaction_count', 0)),
        )


@dataclass
class StatementParseResult:
    """Everything the pipeline learned about one statement document."""
    records: List[TransactionRecord]
    variant: BankVariant
    bank_name: str
    period: StatementPeriod
    anchor_candidates: List[StatementPeriod] = field(default_factory=list)
    failed_lines: List[FailedLine] = field(default_factory=list)
    currency: str = "MAD"
    page_count: int = 0
    line_count: int = 0
    filename: Optional[str] = None

    def summary(self) -> dict:
        return {
            'filename': self.filename,
            'bank': self.bank_name,
            'variant': self.variant.value,
            'period': self.period.label(),
            'period_source': self.period.source,
            'currency': self.currency,
            'transactions': len(self.records),
            'failed_lines': len(self.failed_lines),
            'pages': self.page_count,
            'lines': self.line_count,
        }
