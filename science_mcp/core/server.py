"""
MCP stdio server exposing the paper tools
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from .config import Settings, configure_logging
from .tools import PaperTools

logger = logging.getLogger(__name__)

SERVER_NAME = "scientific-research-server"


def create_server(tools: PaperTools) -> FastMCP:
    """Register every tool on a FastMCP server.

    Tool calls run in worker threads so the event loop keeps serving other
    requests while a download or PDF parse is in progress.
    """
    mcp = FastMCP(SERVER_NAME)

    async def run(name: str, arguments: Dict[str, Any]) -> str:
        result = await asyncio.to_thread(tools.invoke, name, arguments)
        if result.is_error:
            raise ToolError(result.text)
        return result.text

    @mcp.tool()
    async def search_arxiv(query: str, maxResults: int = 10, sortBy: str = "relevance") -> str:
        """Search for scientific papers on ArXiv. Accepts natural language or ArXiv
        syntax (cat:, ti:, abs:, au:). sortBy: relevance, lastUpdatedDate or submittedDate."""
        return await run("search_arxiv", {"query": query, "maxResults": maxResults, "sortBy": sortBy})

    @mcp.tool()
    async def search_arxiv_by_category(
        category: str,
        maxResults: int = 10,
        sortBy: str = "submittedDate",
    ) -> str:
        """Search ArXiv papers by exact category code, e.g. cs.AI, cs.LG, quant-ph, stat.ML."""
        return await run(
            "search_arxiv_by_category",
            {"category": category, "maxResults": maxResults, "sortBy": sortBy},
        )

    @mcp.tool()
    async def search_google_scholar(query: str, maxResults: int = 10, sortBy: str = "relevance") -> str:
        """Search for scientific papers on Google Scholar (served by Semantic Scholar).
        sortBy: relevance or date."""
        return await run(
            "search_google_scholar",
            {"query": query, "maxResults": maxResults, "sortBy": sortBy},
        )

    @mcp.tool()
    async def search_both_sources(query: str, maxResults: int = 10, sortBy: str = "relevance") -> str:
        """Search ArXiv and Google Scholar at the same time. sortBy: relevance or date."""
        return await run(
            "search_both_sources",
            {"query": query, "maxResults": maxResults, "sortBy": sortBy},
        )

    @mcp.tool()
    async def download_pdf(pdfUrl: str, filename: Optional[str] = None) -> str:
        """Download a PDF from a URL and save it locally."""
        return await run("download_pdf", {"pdfUrl": pdfUrl, "filename": filename})

    @mcp.tool()
    async def read_pdf_text(
        filepath: str,
        startPage: Optional[int] = None,
        endPage: Optional[int] = None,
        chunked: bool = False,
        chunkSize: int = 10,
    ) -> str:
        """Read text from a downloaded PDF. Pages are 1-based. Set chunked=true to get
        the whole document split into chunks sized to stay under the response limit."""
        return await run(
            "read_pdf_text",
            {
                "filepath": filepath,
                "startPage": startPage,
                "endPage": endPage,
                "chunked": chunked,
                "chunkSize": chunkSize,
            },
        )

    @mcp.tool()
    async def download_and_read_pdf(
        pdfUrl: str,
        filename: Optional[str] = None,
        startPage: int = 1,
        endPage: int = 10,
    ) -> str:
        """Download a PDF and read a page range (pages 1-10 by default). The response
        says whether more pages remain and which range to read next with read_pdf_text."""
        return await run(
            "download_and_read_pdf",
            {"pdfUrl": pdfUrl, "filename": filename, "startPage": startPage, "endPage": endPage},
        )

    @mcp.tool()
    async def list_downloaded_pdfs() -> str:
        """List all downloaded PDF files."""
        return await run("list_downloaded_pdfs", {})

    @mcp.tool()
    async def cleanup_downloads() -> str:
        """Delete all downloaded PDF files."""
        return await run("cleanup_downloads", {})

    return mcp


def main() -> None:
    settings = Settings()
    configure_logging(settings.log_level)
    logger.info("Starting %s, downloads in %s", SERVER_NAME, settings.download_dir)
    create_server(PaperTools(settings)).run()


if __name__ == "__main__":
    main()
