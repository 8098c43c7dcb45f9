"""Slide deck converters for slidecode."""

from slidecode.converters.base import BaseSlideConverter, ConvertedDeck
from slidecode.converters.deck import SlideDeckConverter
from slidecode.converters.office import LibreOfficeConverter, find_soffice
from slidecode.converters.raster import PdfRasterizer

__all__ = [
    "BaseSlideConverter",
    "ConvertedDeck",
    "SlideDeckConverter",
    "LibreOfficeConverter",
    "PdfRasterizer",
    "find_soffice",
]
