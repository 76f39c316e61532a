"""
Line reconstruction from positioned text fragments.

PDF text comes out as loose fragments, each with a vertical position. Fragments
closer than ``LINE_MERGE_TOLERANCE`` units are the same printed line; lines are
then read top to bottom (descending vertical position, PDF y grows upward).
"""
from itertools import islice
from typing import Iterable, List, Sequence

from dirham.common.logging_config import get_logger
from dirham.common.models import LogicalLine, PositionedFragment

logger = get_logger(__name__)

LINE_MERGE_TOLERANCE = 2
MAX_PAGES = 5


def reconstruct_page(fragments: Iterable[PositionedFragment]) -> List[LogicalLine]:
    """
    Merge one page's fragments into ordered logical lines.

    A fragment joins the first line whose position is within the tolerance,
    appended after a single space; otherwise it opens a new line at its own
    position. Blank fragments are ignored.
    """
    rows = []  # [vertical_position, [texts]]
    for fragment in fragments:
        text = (fragment.text or "").strip()
        if not text:
            continue
        y = fragment.vertical_position
        for row in rows:
            if abs(row[0] - y) < LINE_MERGE_TOLERANCE:
                row[1].append(text)
                break
        else:
            rows.append([y, [text]])

    # Stable sort keeps encounter order for lines at the same height
    rows.sort(key=lambda r: r[0], reverse=True)

    lines = []
    for y, texts in rows:
        text = " ".join(texts).strip()
        if text:
            lines.append(LogicalLine(text=text, vertical_position=y))
    return lines


def reconstruct_lines(pages: Iterable[Sequence[PositionedFragment]], max_pages: int = MAX_PAGES) -> List[str]:
    """
    Flatten pages (in page order) into the document's reading-order lines.

    Only the first ``max_pages`` pages are read.
    """
    all_lines = []
    for page_number, fragments in enumerate(islice(pages, max_pages), start=1):
        page_lines = reconstruct_page(fragments)
        logger.debug("Page reconstructed.", page=page_number, lines=len(page_lines))
        all_lines.extend(line.text for line in page_lines)
    return all_lines
