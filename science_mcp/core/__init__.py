"""
science-mcp - research paper search and PDF reading tools

This package lets an agent without internet access search arXiv and
Semantic Scholar, download paper PDFs (with an open-access fallback for
paywalled publishers) and read their text in size-bounded pieces.
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config import Settings
from .pdf_fetcher import PDFFetcher
from .pdf_reader import PDFTextReader
from .tools import PaperTools

__all__ = [
    "PaperTools",
    "PDFFetcher",
    "PDFTextReader",
    "Settings",
]
