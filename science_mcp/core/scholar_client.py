"""
Semantic Scholar search client
"""
from __future__ import annotations

import logging
from typing import List, Optional

import requests

from .config import Settings
from .models import ScholarPaper

logger = logging.getLogger(__name__)

PAPER_FIELDS = "title,authors,abstract,year,venue,citationCount,url,openAccessPdf"


class SemanticScholarClient:
    """Search papers through the Semantic Scholar Graph API.

    Google Scholar blocks automated requests, so the scholar search tool
    is served from here.
    """

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def search(
        self,
        query: str,
        max_results: int = 10,
        sort_by: str = "relevance",
    ) -> List[ScholarPaper]:
        """Return matching papers; request or decode failures yield an empty list."""
        params = {
            "query": query,
            "limit": max_results,
            "fields": PAPER_FIELDS,
        }
        try:
            response = self.session.get(
                f"{self.settings.semantic_scholar_url}/paper/search",
                params=params,
                headers={"Accept": "application/json", "User-Agent": self.settings.user_agent},
                timeout=self.settings.search_timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Error searching Semantic Scholar for %r: %s", query, exc)
            return []

        papers = [self._parse_paper(item) for item in (payload or {}).get("data") or []]
        if sort_by == "date":
            papers.sort(key=lambda paper: self._year_key(paper.year), reverse=True)
        return papers

    @staticmethod
    def _parse_paper(item: dict) -> ScholarPaper:
        open_access = item.get("openAccessPdf") or {}
        year = item.get("year")
        return ScholarPaper(
            title=item.get("title") or "",
            authors=[
                author.get("name", "")
                for author in item.get("authors") or []
                if author.get("name")
            ],
            abstract=item.get("abstract") or "",
            year=str(year) if year else "",
            venue=item.get("venue") or "",
            cited_by=item.get("citationCount") or 0,
            url=item.get("url") or f"https://www.semanticscholar.org/paper/{item.get('paperId', '')}",
            pdf_url=open_access.get("url") or None,
        )

    @staticmethod
    def _year_key(year: str) -> int:
        try:
            return int(year)
        except (TypeError, ValueError):
            return 0
