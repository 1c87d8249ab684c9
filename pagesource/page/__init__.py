"""
Page text extraction: PyMuPDF page → raw positioned fragments.
"""

from .models import RawFragment
from .text_layer import PageTextLayer, span_transform

__all__ = ["RawFragment", "PageTextLayer", "span_transform"]
