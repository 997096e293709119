"""
arXiv API client - paper search and open-access PDF lookup
"""
from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional

import requests

from .config import Settings
from .errors import SearchError
from .models import ArxivPaper

logger = logging.getLogger(__name__)

ATOM_NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "arxiv": "http://arxiv.org/schemas/atom",
}

SORT_CHOICES = ("relevance", "lastUpdatedDate", "submittedDate")

FIELD_PREFIX_PATTERN = re.compile(r"^\s*(ti|au|abs|co|jr|cat|rn|id|all):", re.IGNORECASE)


class ArxivClient:
    """Query the arXiv Atom API"""

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()

    def search(
        self,
        query: str,
        max_results: int = 10,
        sort_by: str = "relevance",
    ) -> List[ArxivPaper]:
        """
        Search arXiv papers

        Args:
            query: Free text, or arXiv syntax such as ``cat:cs.AI`` or ``ti:"..."``
            max_results: Number of entries to request
            sort_by: relevance, lastUpdatedDate or submittedDate

        Returns:
            Parsed entries in API order

        Raises:
            SearchError: If the API cannot be reached or returns invalid XML
        """
        if sort_by not in SORT_CHOICES:
            raise SearchError(f"Unsupported arXiv sort order: {sort_by}")

        text = (query or "").strip()
        if not text:
            raise SearchError("Search query cannot be empty.")
        if not FIELD_PREFIX_PATTERN.match(text):
            text = f"all:{text}"

        root = self._query(text, max_results=max_results, sort_by=sort_by)
        return [self._parse_entry(entry) for entry in root.findall("atom:entry", ATOM_NS)]

    def search_by_category(
        self,
        category: str,
        max_results: int = 10,
        sort_by: str = "submittedDate",
    ) -> List[ArxivPaper]:
        return self.search(f"cat:{category.strip()}", max_results=max_results, sort_by=sort_by)

    def find_open_access_pdf(self, title: str) -> Optional[str]:
        """
        Look up an open-access PDF link for a paper title.

        Tries an exact title phrase first, then a relaxed query with
        punctuation removed. Never raises; any failure means "not found".
        """
        try:
            root = self._query(f'ti:"{title}"', max_results=5, sort_by="relevance")
            entries = root.findall("atom:entry", ATOM_NS)
            if not entries:
                relaxed = re.sub(r"[^\w\s]", " ", title).strip()
                root = self._query(relaxed, max_results=5, sort_by="relevance")
                entries = root.findall("atom:entry", ATOM_NS)
            if not entries:
                return None
            return self._pdf_link(entries[0], strict=True)
        except Exception as exc:
            logger.warning("Error searching arXiv for %r: %s", title, exc)
            return None

    def _query(self, search_query: str, max_results: int, sort_by: str) -> ET.Element:
        params = {
            "search_query": search_query,
            "start": 0,
            "max_results": max_results,
            "sortBy": sort_by,
            "sortOrder": "descending",
        }
        xml_text = self._http_get(self.settings.arxiv_api_url, params).decode(
            "utf-8", errors="replace"
        )
        try:
            return ET.fromstring(xml_text)
        except ET.ParseError as exc:
            raise SearchError("Failed to parse arXiv API response") from exc

    def _http_get(self, url: str, params: Dict[str, Any]) -> bytes:
        headers = {"User-Agent": self.settings.user_agent}
        try:
            response = self.session.get(
                url,
                params=params,
                headers=headers,
                timeout=self.settings.request_timeout,
            )
            response.raise_for_status()
            return response.content
        except requests.RequestException as exc:
            raise SearchError(f"arXiv request failed: {exc}") from exc

    def _parse_entry(self, entry: ET.Element) -> ArxivPaper:
        entry_id = self._clean_text(entry.findtext("atom:id", default="", namespaces=ATOM_NS))
        authors = [
            self._clean_text(author.findtext("atom:name", default="", namespaces=ATOM_NS))
            for author in entry.findall("atom:author", ATOM_NS)
            if self._clean_text(author.findtext("atom:name", default="", namespaces=ATOM_NS))
        ]
        categories = [
            category.attrib.get("term", "")
            for category in entry.findall("atom:category", ATOM_NS)
            if category.attrib.get("term")
        ]

        html_url = None
        for link in entry.findall("atom:link", ATOM_NS):
            if link.attrib.get("rel") == "alternate":
                html_url = link.attrib.get("href", "").strip() or None
                break

        return ArxivPaper(
            title=self._clean_text(entry.findtext("atom:title", default="", namespaces=ATOM_NS)),
            authors=authors,
            abstract=self._clean_text(
                entry.findtext("atom:summary", default="", namespaces=ATOM_NS)
            ),
            published=entry.findtext("atom:published", default="", namespaces=ATOM_NS).strip(),
            categories=categories,
            arxiv_id=entry_id.rsplit("/abs/", 1)[-1] or None,
            pdf_url=self._pdf_link(entry),
            html_url=html_url or entry_id or None,
        )

    @staticmethod
    def _pdf_link(entry: ET.Element, strict: bool = False) -> Optional[str]:
        for link in entry.findall("atom:link", ATOM_NS):
            href = link.attrib.get("href", "").strip()
            content_type = link.attrib.get("type", "").strip()
            if content_type == "application/pdf":
                return href or None
            if not strict and (
                link.attrib.get("title", "").strip().lower() == "pdf"
                or href.endswith(".pdf")
            ):
                return href
        return None

    @staticmethod
    def _clean_text(text: str) -> str:
        return re.sub(r"\s+", " ", text).strip()
