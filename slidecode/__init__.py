"""slidecode - Slide decks to browsable previews with labeled QR codes."""

__version__ = "0.1.0"
__author__ = "slidecode contributors"

__all__ = ["__version__"]
