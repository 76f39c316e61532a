"""
Statement Layout Configuration

Defines dataclasses describing how each supported statement layout is
recognized and where its balance anchors are.
"""
import re
from dataclasses import dataclass, field
from typing import List

from dirham.common.models import AnchorKind, BankVariant


@dataclass
class AnchorPattern:
    """
    A balance line that dates the statement.

    Attributes:
        kind: 'closing' or 'opening'
        source: Short label reported with the chosen period (e.g. "AWB_CLOSING")
        pattern: Regex with named groups day, month, year and optionally amount, side
    """
    kind: AnchorKind
    source: str
    pattern: str

    def __post_init__(self):
        self.kind = AnchorKind(self.kind)
        self.regex = re.compile(self.pattern)


@dataclass
class StatementLayout:
    """
    Configuration for one bank statement layout.

    Attributes:
        name: Human-readable bank name (e.g. "Attijariwafa Bank")
        variant: BankVariant value handled by this layout
        brand_keywords: Lowercase strings identifying the issuer anywhere in the text
        structural_pattern: Regex matched against each line when no brand is found
        detection_rank: Lower ranks are tried first, for brands and for structure
        anchors: Balance anchor patterns, closing and opening
        is_default: Used when nothing else identifies the document
    """
    name: str
    variant: BankVariant
    brand_keywords: List[str]
    structural_pattern: str
    detection_rank: int = 100
    anchors: List[AnchorPattern] = field(default_factory=list)
    is_default: bool = False

    def __post_init__(self):
        self.variant = BankVariant(self.variant)
        self.brand_keywords = [k.lower() for k in self.brand_keywords]
        self.structural_regex = re.compile(self.structural_pattern)

    def matches_brand(self, lowered_text: str) -> bool:
        return any(k in lowered_text for k in self.brand_keywords)

    def matches_structure(self, lines: List[str]) -> bool:
        return any(line and self.structural_regex.search(line.strip()) for line in lines)
