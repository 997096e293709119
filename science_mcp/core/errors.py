"""
Exceptions raised by the download and extraction pipeline
"""


class ScienceMCPError(RuntimeError):
    """Base class for errors surfaced at the tool boundary."""


class PDFNotFoundError(ScienceMCPError, FileNotFoundError):
    """Raised when a local PDF path does not exist."""

    def __init__(self, path):
        super().__init__(f"PDF file not found: {path}")
        self.path = str(path)


class InvalidPDFError(ScienceMCPError):
    """Raised when downloaded bytes do not carry the %PDF signature."""


class DownloadError(ScienceMCPError):
    """Raised when a PDF cannot be fetched over HTTP."""


class PDFReadError(ScienceMCPError):
    """Raised when a PDF cannot be parsed or its text extracted."""


class PageRangeError(ScienceMCPError, ValueError):
    """Raised for inverted or out-of-document page ranges."""


class ToolArgumentError(ScienceMCPError, ValueError):
    """Raised for missing or invalid tool arguments."""


class SearchError(ScienceMCPError):
    """Raised when a paper index cannot be queried or its response parsed."""
