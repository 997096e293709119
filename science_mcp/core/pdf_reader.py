"""
PDF text extraction - page counts, page ranges and fixed-size chunks
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from pypdf import PdfReader

from .chunking import chunk_ranges
from .errors import PageRangeError, PDFNotFoundError, PDFReadError
from .models import ChunkSet, PageRange, TextChunk

logger = logging.getLogger(__name__)

DEFAULT_LINE_BREAK_THRESHOLD = 5.0


class PDFTextReader:
    """Extract text from local PDFs.

    pypdf only parses the document structure: it neither executes embedded
    scripts nor rasterizes fonts, so loading is safe for untrusted files.
    """

    def __init__(self, line_break_threshold: float = DEFAULT_LINE_BREAK_THRESHOLD):
        self.line_break_threshold = line_break_threshold

    def page_count(self, pdf_path: str) -> int:
        return len(self._open(pdf_path).pages)

    def resolve_range(
        self,
        total_pages: int,
        start_page: Optional[int] = None,
        end_page: Optional[int] = None,
    ) -> PageRange:
        """
        Apply defaults and clamping to a requested page range

        A missing start means page 1, a missing end means the last page and
        an end past the last page is clamped to it.

        Raises:
            PageRangeError: If the range is empty or starts outside the document
        """
        start = 1 if start_page is None else int(start_page)
        end = total_pages if end_page is None else min(int(end_page), total_pages)

        if start < 1:
            raise PageRangeError(f"Start page must be at least 1, got {start}")
        if start > total_pages:
            raise PageRangeError(
                f"Start page {start} is beyond the last page ({total_pages})"
            )
        if start > end:
            raise PageRangeError(f"Invalid page range: start page {start} is after end page {end}")
        return PageRange(start=start, end=end)

    def extract_text(
        self,
        pdf_path: str,
        start_page: Optional[int] = None,
        end_page: Optional[int] = None,
    ) -> str:
        """
        Extract text for a page range

        Args:
            pdf_path: Local PDF path
            start_page: First page (1-based), defaults to 1
            end_page: Last page (1-based), defaults to the last page

        Returns:
            Per-page text blocks prefixed with ``--- Page N ---`` and
            separated by blank lines

        Raises:
            PDFNotFoundError: If the file does not exist
            PageRangeError: If the range is invalid
            PDFReadError: If the PDF cannot be parsed
        """
        reader = self._open(pdf_path)
        pages = self.resolve_range(len(reader.pages), start_page, end_page)
        return self._extract_range(reader, pages)

    def read_chunked(self, pdf_path: str, chunk_size: int = 10) -> ChunkSet:
        """Split the whole document into consecutive chunks of `chunk_size` pages."""
        reader = self._open(pdf_path)
        total_pages = len(reader.pages)
        if total_pages == 0:
            raise PDFReadError("Failed to read PDF: could not determine PDF page count")

        chunks = [
            TextChunk(index=index, pages=pages, text=self._extract_range(reader, pages))
            for index, pages in enumerate(chunk_ranges(total_pages, chunk_size))
        ]
        return ChunkSet(total_pages=total_pages, chunk_size=chunk_size, chunks=chunks)

    def _open(self, pdf_path: str) -> PdfReader:
        pdf_file = Path(pdf_path).expanduser()
        if not pdf_file.exists():
            raise PDFNotFoundError(pdf_file)

        try:
            reader = PdfReader(str(pdf_file), strict=False)
            # Forces the page tree to load so broken files fail here.
            len(reader.pages)
        except Exception as exc:
            raise PDFReadError(f"Failed to read PDF: {exc}") from exc
        return reader

    def _extract_range(self, reader: PdfReader, pages: PageRange) -> str:
        text_parts: List[str] = []
        for page_number in range(pages.start, pages.end + 1):
            try:
                runs = self._collect_runs(reader.pages[page_number - 1])
            except Exception as exc:
                raise PDFReadError(f"Failed to read PDF page {page_number}: {exc}") from exc
            page_text = self.join_runs(runs, self.line_break_threshold)
            text_parts.append(f"--- Page {page_number} ---\n{page_text}")
        return "\n\n".join(text_parts)

    @staticmethod
    def _collect_runs(page: Any) -> List[Tuple[str, float]]:
        runs: List[Tuple[str, float]] = []

        def visitor(text, cm, tm, font_dict, font_size):
            fragment = " ".join((text or "").split())
            if not fragment:
                return
            # y of the text matrix origin in user space (tm x cm).
            y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
            runs.append((fragment, float(y)))

        page.extract_text(visitor_text=visitor)
        return runs

    @staticmethod
    def join_runs(runs: Sequence[Tuple[str, float]], threshold: float) -> str:
        """Join text runs with spaces, breaking lines on vertical jumps."""
        lines: List[List[str]] = []
        last_y: Optional[float] = None

        for text, y in runs:
            if last_y is None or abs(y - last_y) > threshold:
                lines.append([])
            lines[-1].append(text)
            last_y = y

        return "\n".join(" ".join(line) for line in lines)
