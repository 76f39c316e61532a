"""
Variant Registry

Loads statement layouts from JSON files and classifies a document's lines
into one of them.
"""
import os
import json
from typing import List, Optional

from dirham.common.logging_config import get_logger
from dirham.common.models import BankVariant
from .layout import AnchorPattern, StatementLayout

logger = get_logger(__name__)

DEFAULT_LAYOUTS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'layouts')


class VariantRegistry:
    """
    Registry of statement layouts.

    Detection order (first match wins):
    1. Brand keywords anywhere in the joined text (case-insensitive)
    2. Structural line pattern, layouts tried by ``detection_rank``
    3. The default layout
    """

    def __init__(self, layouts_dir: Optional[str] = None, layouts: Optional[List[StatementLayout]] = None):
        """
        Initialize registry from a directory of .json layouts, or from explicit layouts.

        Args:
            layouts_dir: Path to directory containing .json layout files
            layouts: Pre-built layouts (skips disk loading)
        """
        self.layouts_dir = layouts_dir or DEFAULT_LAYOUTS_DIR
        self.layouts: List[StatementLayout] = []
        if layouts is not None:
            self.layouts = list(layouts)
        else:
            self._load_layouts()
        self.layouts.sort(key=lambda l: l.detection_rank)

    def _load_layouts(self) -> None:
        """Scans the directory and loads all .json layouts."""
        if not os.path.exists(self.layouts_dir):
            logger.warning(f"Layouts directory not found: {self.layouts_dir}")
            return

        for fname in sorted(os.listdir(self.layouts_dir)):
            if not fname.endswith(".json"):
                continue
            fpath = os.path.join(self.layouts_dir, fname)
            try:
                with open(fpath, 'r', encoding='utf-8') as f:
                    self.layouts.append(self._parse_layout(json.load(f)))
                logger.debug(f"Loaded layout: {fname}")
            except (OSError, ValueError, TypeError, KeyError) as e:
                logger.error(f"Error loading layout {fname}: {e}", layout_file=fname)

    def _parse_layout(self, data: dict) -> StatementLayout:
        """Converts dict to StatementLayout object."""
        anchors = [AnchorPattern(**a) for a in data.get('anchors', [])]

        layout_data = data.copy()
        layout_data.pop('anchors', None)

        return StatementLayout(anchors=anchors, **layout_data)

    def detect(self, lines: List[str]) -> BankVariant:
        """
        Classify the document. Never fails: an unidentified document gets the
        default layout and any failure surfaces later as zero transactions.
        """
        return self.detect_layout(lines).variant

    def detect_layout(self, lines: List[str]) -> StatementLayout:
        lowered = " ".join(l for l in lines if l).lower()

        for layout in self.layouts:
            if layout.matches_brand(lowered):
                logger.info(f"Detected {layout.name} by brand.", variant=layout.variant.value, method="brand")
                return layout

        for layout in self.layouts:
            if layout.matches_structure(lines):
                logger.info(f"Detected {layout.name} by line pattern.", variant=layout.variant.value, method="pattern")
                return layout

        default = self.default_layout()
        logger.warning(f"Could not detect bank, defaulting to {default.name}.", variant=default.variant.value, method="default")
        return default

    def default_layout(self) -> StatementLayout:
        for layout in self.layouts:
            if layout.is_default:
                return layout
        return self.get(BankVariant.ATTIJARIWAFA)

    def get(self, variant: BankVariant) -> StatementLayout:
        for layout in self.layouts:
            if layout.variant == variant:
                return layout
        raise KeyError(f"No layout registered for variant {variant}")

    def anchor_patterns(self) -> List[AnchorPattern]:
        """All balance anchors of all layouts, closing anchors first."""
        anchors = [a for layout in self.layouts for a in layout.anchors]
        return sorted(anchors, key=lambda a: a.kind.priority)

    def list_layouts(self) -> List[str]:
        """List all available layout names."""
        return [l.name for l in self.layouts]
