"""
Tool operations exposed to agents, and the dispatch boundary around them
"""
from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

from .arxiv_client import ArxivClient
from .chunking import fit_chunk_size
from .config import Settings
from .errors import ToolArgumentError
from .models import ToolResult
from .pdf_fetcher import PDFFetcher
from .pdf_reader import PDFTextReader
from .scholar_client import SemanticScholarClient
from .storage import DownloadStore

logger = logging.getLogger(__name__)

READ_NEXT_PAGES = 5
DOWNLOAD_READ_PAGES = 10
SCHOLAR_SORT_CHOICES = ("relevance", "date")


def to_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, indent=2)


class PaperTools:
    """Paper search and PDF tools sharing one download directory"""

    def __init__(
        self,
        settings: Settings,
        store: Optional[DownloadStore] = None,
        fetcher: Optional[PDFFetcher] = None,
        reader: Optional[PDFTextReader] = None,
        arxiv: Optional[ArxivClient] = None,
        scholar: Optional[SemanticScholarClient] = None,
    ):
        self.settings = settings
        self.store = store or DownloadStore(settings.download_dir)
        self.arxiv = arxiv or ArxivClient(settings)
        self.scholar = scholar or SemanticScholarClient(settings)
        self.fetcher = fetcher or PDFFetcher(settings, store=self.store, resolver=self.arxiv)
        self.reader = reader or PDFTextReader(line_break_threshold=settings.line_break_threshold)

        self._handlers: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "search_arxiv": self._handle_search_arxiv,
            "search_arxiv_by_category": self._handle_search_arxiv_by_category,
            "search_google_scholar": self._handle_search_google_scholar,
            "search_both_sources": self._handle_search_both_sources,
            "download_pdf": self._handle_download_pdf,
            "read_pdf_text": self._handle_read_pdf_text,
            "download_and_read_pdf": self._handle_download_and_read_pdf,
            "list_downloaded_pdfs": lambda arguments: self.list_downloaded(),
            "cleanup_downloads": lambda arguments: self.cleanup(),
        }

    @property
    def tool_names(self):
        return sorted(self._handlers)

    def invoke(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> ToolResult:
        """
        Run a tool by name

        Every failure is converted into an error result; nothing raises
        past this point.
        """
        try:
            handler = self._handlers.get(name)
            if handler is None:
                raise ToolArgumentError(f"Unknown tool: {name}")
            payload = handler(arguments or {})
        except Exception as exc:
            logger.warning("Tool %s failed: %s", name, exc)
            return ToolResult(text=f"Error: {exc}", is_error=True)
        return ToolResult(text=to_json(payload))

    # PDF operations

    def download(self, url: str, filename: Optional[str] = None) -> Dict[str, Any]:
        filepath = self.fetcher.download(url, filename)
        return {
            "action": "download_pdf",
            "pdfUrl": url,
            "filepath": filepath,
            "message": "PDF downloaded successfully",
        }

    def read_text(
        self,
        filepath: str,
        start_page: Optional[int] = None,
        end_page: Optional[int] = None,
        chunked: bool = False,
        chunk_size: int = 10,
    ) -> Dict[str, Any]:
        if chunked:
            return self.read_chunked(filepath, chunk_size)

        total_pages = self.reader.page_count(filepath)
        pages = self.reader.resolve_range(total_pages, start_page, end_page)
        text = self.reader.extract_text(filepath, pages.start, pages.end)
        return {
            "action": "read_pdf_text",
            "filepath": filepath,
            "totalPages": total_pages,
            "startPage": pages.start,
            "endPage": pages.end,
            "hasMorePages": pages.end < total_pages,
            "nextPageRange": self._next_range(pages.end, total_pages, READ_NEXT_PAGES),
            "text": text,
        }

    def read_chunked(self, filepath: str, chunk_size: int = 10) -> Dict[str, Any]:
        """
        Read the whole PDF as chunks small enough for one response

        Falls back to the first page only, cut to ``fallback_max_chars``,
        when even single-page chunks exceed the token budget.
        """
        if chunk_size < 1:
            raise ToolArgumentError(f"chunkSize must be at least 1, got {chunk_size}")

        built: Dict[int, Dict[str, Any]] = {}

        def render(size: int) -> str:
            chunk_set = self.reader.read_chunked(filepath, size)
            built[size] = {
                "action": "read_pdf_text",
                "filepath": filepath,
                "chunked": True,
                "totalPages": chunk_set.total_pages,
                "chunkSize": size,
                "chunks": [chunk.to_dict() for chunk in chunk_set.chunks],
            }
            return to_json(built[size])

        fitted = fit_chunk_size(
            render,
            requested_size=chunk_size,
            max_tokens=self.settings.max_response_tokens,
            start_cap=self.settings.chunk_start_cap,
        )
        if fitted is not None:
            size, _ = fitted
            return built[size]

        logger.info("PDF too large even at one page per chunk: %s", filepath)
        text = self.reader.extract_text(filepath, 1, 1)
        return {
            "action": "read_pdf_text",
            "filepath": filepath,
            "startPage": 1,
            "endPage": 1,
            "text": text[: self.settings.fallback_max_chars],
            "truncated": True,
            "message": "PDF too large, showing first page only (truncated)",
        }

    def download_and_read(
        self,
        url: str,
        filename: Optional[str] = None,
        start_page: int = 1,
        end_page: int = DOWNLOAD_READ_PAGES,
    ) -> Dict[str, Any]:
        filepath = self.fetcher.download(url, filename)
        total_pages = self.reader.page_count(filepath)
        pages = self.reader.resolve_range(total_pages, start_page, end_page)
        text = self.reader.extract_text(filepath, pages.start, pages.end)
        return {
            "action": "download_and_read_pdf",
            "pdfUrl": url,
            "filepath": filepath,
            "totalPages": total_pages,
            "startPage": pages.start,
            "endPage": pages.end,
            "hasMorePages": pages.end < total_pages,
            "nextPageRange": self._next_range(pages.end, total_pages, DOWNLOAD_READ_PAGES),
            "text": text,
        }

    def list_downloaded(self) -> Dict[str, Any]:
        files = self.store.list_pdfs()
        return {
            "action": "list_downloaded_pdfs",
            "downloadsDirectory": str(self.store.directory),
            "files": files,
            "count": len(files),
        }

    def cleanup(self) -> Dict[str, Any]:
        removed = self.store.cleanup()
        return {
            "action": "cleanup_downloads",
            "removed": removed,
            "message": "All downloaded PDFs have been cleaned up",
        }

    # Search operations

    def search_arxiv(self, query: str, max_results: int = 10, sort_by: str = "relevance"):
        results = self.arxiv.search(query, max_results=max_results, sort_by=sort_by)
        return {
            "source": "ArXiv",
            "query": query,
            "results": [paper.to_dict() for paper in results],
        }

    def search_arxiv_by_category(
        self,
        category: str,
        max_results: int = 10,
        sort_by: str = "submittedDate",
    ):
        results = self.arxiv.search_by_category(category, max_results=max_results, sort_by=sort_by)
        return {
            "source": "ArXiv",
            "category": category,
            "results": [paper.to_dict() for paper in results],
        }

    def search_scholar(self, query: str, max_results: int = 10, sort_by: str = "relevance"):
        if sort_by not in SCHOLAR_SORT_CHOICES:
            raise ToolArgumentError(f"Unsupported sort order: {sort_by}")
        results = self.scholar.search(query, max_results=max_results, sort_by=sort_by)
        return {
            "source": "Google Scholar",
            "query": query,
            "results": [paper.to_dict() for paper in results],
        }

    def search_both(self, query: str, max_results: int = 10, sort_by: str = "relevance"):
        if sort_by not in SCHOLAR_SORT_CHOICES:
            raise ToolArgumentError(f"Unsupported sort order: {sort_by}")
        arxiv_sort = "submittedDate" if sort_by == "date" else "relevance"

        with ThreadPoolExecutor(max_workers=2) as executor:
            arxiv_future = executor.submit(
                self.arxiv.search, query, max_results=max_results, sort_by=arxiv_sort
            )
            scholar_future = executor.submit(
                self.scholar.search, query, max_results=max_results, sort_by=sort_by
            )
            arxiv_results = arxiv_future.result()
            scholar_results = scholar_future.result()

        return {
            "query": query,
            "sources": {
                "arxiv": {
                    "count": len(arxiv_results),
                    "results": [paper.to_dict() for paper in arxiv_results],
                },
                "scholar": {
                    "count": len(scholar_results),
                    "results": [paper.to_dict() for paper in scholar_results],
                },
            },
        }

    # Argument handling

    def _handle_search_arxiv(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.search_arxiv(
            _require_str(arguments, "query"),
            max_results=_optional_int(arguments, "maxResults", 10),
            sort_by=arguments.get("sortBy") or "relevance",
        )

    def _handle_search_arxiv_by_category(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.search_arxiv_by_category(
            _require_str(arguments, "category"),
            max_results=_optional_int(arguments, "maxResults", 10),
            sort_by=arguments.get("sortBy") or "submittedDate",
        )

    def _handle_search_google_scholar(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.search_scholar(
            _require_str(arguments, "query"),
            max_results=_optional_int(arguments, "maxResults", 10),
            sort_by=arguments.get("sortBy") or "relevance",
        )

    def _handle_search_both_sources(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.search_both(
            _require_str(arguments, "query"),
            max_results=_optional_int(arguments, "maxResults", 10),
            sort_by=arguments.get("sortBy") or "relevance",
        )

    def _handle_download_pdf(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.download(
            _require_str(arguments, "pdfUrl"),
            filename=arguments.get("filename") or None,
        )

    def _handle_read_pdf_text(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.read_text(
            _require_str(arguments, "filepath"),
            start_page=_optional_int(arguments, "startPage", None),
            end_page=_optional_int(arguments, "endPage", None),
            chunked=bool(arguments.get("chunked", False)),
            chunk_size=_optional_int(arguments, "chunkSize", 10),
        )

    def _handle_download_and_read_pdf(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        return self.download_and_read(
            _require_str(arguments, "pdfUrl"),
            filename=arguments.get("filename") or None,
            start_page=_optional_int(arguments, "startPage", 1),
            end_page=_optional_int(arguments, "endPage", DOWNLOAD_READ_PAGES),
        )

    @staticmethod
    def _next_range(end_page: int, total_pages: int, span: int) -> Optional[Dict[str, int]]:
        if end_page >= total_pages:
            return None
        return {
            "startPage": end_page + 1,
            "endPage": min(end_page + span, total_pages),
        }


def _require_str(arguments: Dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ToolArgumentError(f"Missing required argument: {key}")
    return value.strip()


def _optional_int(arguments: Dict[str, Any], key: str, default):
    value = arguments.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ToolArgumentError(f"Argument {key} must be an integer, got {value!r}") from exc
