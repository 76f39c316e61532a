"""
Statement period resolution.

Every line is scanned for opening and closing balance anchors. The closing
balance wins over the opening one; between equal kinds the earliest line wins.
"""
from decimal import Decimal
from typing import Iterable, List, Optional

from dirham.common.logging_config import get_logger
from dirham.common.models import StatementPeriod
from .config.layout import AnchorPattern
from .exceptions import NoPeriodAnchorFound
from .normalize import parse_amount

logger = get_logger(__name__)


def _signed_balance(match) -> Optional[Decimal]:
    amount_text = match.groupdict().get('amount')
    if not amount_text:
        return None
    value = parse_amount(amount_text)
    if match.groupdict().get('side') == 'DEBITEUR':
        value = -abs(value)
    return value


def find_anchor_candidates(lines: List[str], anchors: Iterable[AnchorPattern]) -> List[StatementPeriod]:
    """Collect one candidate per anchor match, in line order."""
    anchors = list(anchors)
    candidates = []

    for line_number, line in enumerate(lines, start=1):
        if not line or 'SOLDE' not in line.upper():
            continue
        for anchor in anchors:
            m = anchor.regex.search(line)
            if not m:
                continue
            month = int(m.group('month'))
            day = int(m.group('day'))
            if not 1 <= month <= 12:
                logger.warning("Balance anchor with invalid month ignored.", line_number=line_number, source=anchor.source, month=month)
                continue
            candidates.append(StatementPeriod(
                year=int(m.group('year')),
                month=month,
                day=day if 1 <= day <= 31 else None,
                anchor_kind=anchor.kind,
                source=anchor.source,
                line_number=line_number,
                line=line.strip(),
                balance=_signed_balance(m),
            ))
            logger.debug(
                "Balance anchor found.",
                source=anchor.source,
                line_number=line_number,
                period=f"{int(m.group('year')):04d}-{month:02d}",
            )
    return candidates


def choose_period(candidates: List[StatementPeriod]) -> StatementPeriod:
    """Lowest priority number first, then earliest line. Deterministic."""
    ranked = sorted(candidates, key=lambda c: (c.anchor_priority, c.line_number))
    return ranked[0]


def resolve_statement_period(
    lines: List[str],
    anchors: Iterable[AnchorPattern],
    filename: str = None,
    candidates: Optional[List[StatementPeriod]] = None,
) -> StatementPeriod:
    """
    Pick the authoritative (year, month[, day]) of the statement.

    ``candidates`` may be passed when already collected with
    ``find_anchor_candidates``.

    Raises:
        NoPeriodAnchorFound: no balance anchor on any line
    """
    if candidates is None:
        candidates = find_anchor_candidates(lines, anchors)
    if not candidates:
        solde_lines = [l for l in lines if l and 'SOLDE' in l.upper()]
        logger.error("No balance lines found.", solde_lines=solde_lines[:10])
        raise NoPeriodAnchorFound(filename=filename, sample_text="\n".join(lines[:5]) or None)

    chosen = choose_period(candidates)
    logger.info(
        f"Statement period resolved: {chosen.label()}",
        source=chosen.source,
        line_number=chosen.line_number,
        candidates=len(candidates),
    )
    return chosen
