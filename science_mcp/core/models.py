"""
Data models for science-mcp
"""
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PageRange:
    """Inclusive, 1-based page range"""
    start: int
    end: int

    @property
    def page_count(self) -> int:
        return self.end - self.start + 1

    def __str__(self):
        return f"pages {self.start}-{self.end}"


@dataclass
class TextChunk:
    """Extracted text covering a contiguous page range"""
    index: int
    pages: PageRange
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chunkIndex": self.index,
            "startPage": self.pages.start,
            "endPage": self.pages.end,
            "text": self.text,
        }


@dataclass
class ChunkSet:
    """A document split into chunks of `chunk_size` pages"""
    total_pages: int
    chunk_size: int
    chunks: List[TextChunk] = field(default_factory=list)

    @property
    def texts(self) -> List[str]:
        return [chunk.text for chunk in self.chunks]

    def __str__(self):
        return f"{len(self.chunks)} chunks of {self.chunk_size} pages ({self.total_pages} pages)"


@dataclass
class ArxivPaper:
    """An entry returned by the arXiv API"""
    title: str
    authors: List[str] = field(default_factory=list)
    abstract: str = ""
    published: str = ""
    categories: List[str] = field(default_factory=list)
    arxiv_id: Optional[str] = None
    pdf_url: Optional[str] = None
    html_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "authors": self.authors,
            "abstract": self.abstract,
            "published": self.published,
            "categories": self.categories,
            "pdfUrl": self.pdf_url,
            "htmlUrl": self.html_url,
        }

    def __str__(self):
        return f"{self.title} by {', '.join(self.authors) if self.authors else 'Unknown'}"


@dataclass
class ScholarPaper:
    """A paper returned by Semantic Scholar"""
    title: str
    authors: List[str] = field(default_factory=list)
    abstract: str = ""
    year: str = ""
    venue: str = ""
    cited_by: int = 0
    url: str = ""
    pdf_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["citedBy"] = data.pop("cited_by")
        data["pdfUrl"] = data.pop("pdf_url")
        return data

    def __str__(self):
        return f"{self.title} ({self.year or 'n.d.'})"


@dataclass
class ToolResult:
    """Text returned across the tool boundary"""
    text: str
    is_error: bool = False
