# Configuration submodule
from .layout import AnchorPattern, StatementLayout
from .registry import VariantRegistry

__all__ = ['AnchorPattern', 'StatementLayout', 'VariantRegistry']
