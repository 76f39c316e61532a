from dirham.common.models import BankVariant
from .attijariwafa import AttijariwafaParser
from .cih import CIHParser

PARSERS = {
    BankVariant.ATTIJARIWAFA: AttijariwafaParser,
    BankVariant.CIH: CIHParser,
}


def get_parser_class(variant: BankVariant):
    """Parser for ``variant``; an unknown layout falls back to Attijariwafa."""
    return PARSERS.get(variant, AttijariwafaParser)


__all__ = [
    'AttijariwafaParser',
    'CIHParser',
    'PARSERS',
    'get_parser_class',
]
