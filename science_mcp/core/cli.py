"""
CLI interface for science-mcp
"""
import argparse
import sys
from typing import List, Optional

from .config import Settings, configure_logging
from .models import ToolResult
from .tools import PaperTools


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser"""
    parser = argparse.ArgumentParser(
        description="Search papers, download PDFs and read their text"
    )
    parser.add_argument(
        "--download-dir",
        help="Directory for downloaded PDFs (default: shared temp directory)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    download = subparsers.add_parser("download", help="Download a PDF")
    download.add_argument("url", help="PDF URL")
    download.add_argument("--filename", help="Local filename (also used as a title hint)")
    download.add_argument(
        "--read",
        action="store_true",
        help="Read the first pages after downloading"
    )
    download.add_argument("--start", type=int, default=1, help="First page to read")
    download.add_argument("--end", type=int, default=10, help="Last page to read")

    read = subparsers.add_parser("read", help="Read text from a downloaded PDF")
    read.add_argument("path", help="Local PDF path")
    read.add_argument("--start", type=int, help="First page (1-based)")
    read.add_argument("--end", type=int, help="Last page (1-based)")
    read.add_argument("--chunked", action="store_true", help="Return the document in chunks")
    read.add_argument("--chunk-size", type=int, default=10, help="Pages per chunk")

    subparsers.add_parser("list", help="List downloaded PDFs")
    subparsers.add_parser("cleanup", help="Delete all downloaded PDFs")

    search = subparsers.add_parser("search", help="Search for papers")
    search.add_argument("query", help="Search query")
    search.add_argument(
        "--source",
        choices=["arxiv", "scholar", "both"],
        default="arxiv",
        help="Paper index to query"
    )
    search.add_argument("--max-results", type=int, default=10, help="Results per source")
    search.add_argument(
        "--sort-by",
        default="relevance",
        help="relevance, lastUpdatedDate, submittedDate (arxiv) or date (scholar/both)"
    )

    subparsers.add_parser("serve", help="Run the MCP stdio server")

    return parser


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    overrides = {}
    if args.download_dir:
        overrides["download_dir"] = args.download_dir
    settings = Settings(**overrides)
    configure_logging("DEBUG" if args.verbose else "WARNING")

    if args.command == "serve":
        from .server import create_server

        configure_logging(settings.log_level)
        create_server(PaperTools(settings)).run()
        return

    tools = PaperTools(settings)
    result = _run_command(tools, args)
    if result.is_error:
        print(result.text, file=sys.stderr)
        sys.exit(1)
    print(result.text)


def _run_command(tools: PaperTools, args: argparse.Namespace) -> ToolResult:
    if args.command == "download":
        if args.read:
            return tools.invoke(
                "download_and_read_pdf",
                {
                    "pdfUrl": args.url,
                    "filename": args.filename,
                    "startPage": args.start,
                    "endPage": args.end,
                },
            )
        return tools.invoke("download_pdf", {"pdfUrl": args.url, "filename": args.filename})

    if args.command == "read":
        return tools.invoke(
            "read_pdf_text",
            {
                "filepath": args.path,
                "startPage": args.start,
                "endPage": args.end,
                "chunked": args.chunked,
                "chunkSize": args.chunk_size,
            },
        )

    if args.command == "list":
        return tools.invoke("list_downloaded_pdfs")

    if args.command == "cleanup":
        return tools.invoke("cleanup_downloads")

    tool_name = {
        "arxiv": "search_arxiv",
        "scholar": "search_google_scholar",
        "both": "search_both_sources",
    }[args.source]
    return tools.invoke(
        tool_name,
        {"query": args.query, "maxResults": args.max_results, "sortBy": args.sort_by},
    )


if __name__ == "__main__":
    main()
