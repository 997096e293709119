"""
science-mcp - paper search and PDF reading tools for agents

This is the main public API module.
"""

from .core.config import Settings
from .core.pdf_fetcher import PDFFetcher
from .core.pdf_reader import PDFTextReader
from .core.tools import PaperTools

__version__ = "0.1.0"
__all__ = [
    "PaperTools",
    "PDFFetcher",
    "PDFTextReader",
    "Settings",
]
