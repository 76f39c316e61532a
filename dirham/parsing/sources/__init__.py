# Document sources
from .pdf import PdfFragmentSource

__all__ = ['PdfFragmentSource']
