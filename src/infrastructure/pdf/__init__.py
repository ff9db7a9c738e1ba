"""
PDF conversion integration (PDFShift).
"""

from .client import PdfConversionError, PdfShiftClient

__all__ = ["PdfConversionError", "PdfShiftClient"]
