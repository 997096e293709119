"""
PDF download module - fetch, validate and store remote PDFs
"""
from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Optional
from urllib.parse import parse_qs, unquote, urlparse

import requests

from .arxiv_client import ArxivClient
from .config import Settings
from .errors import DownloadError, InvalidPDFError, ScienceMCPError
from .storage import DownloadStore

logger = logging.getLogger(__name__)

PDF_SIGNATURE = b"%PDF"

ARXIV_PDF_PATTERN = re.compile(r"arxiv\.org/pdf/([^/?#]+)", re.IGNORECASE)
UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")
TITLE_QUERY_KEYS = ("title", "q", "query")
MIN_TITLE_LENGTH = 10


class PDFFetcher:
    """Download PDFs into the shared download directory.

    A failed download from a known paywalled publisher gets one recovery
    attempt: a title is derived from the filename hint or URL, an
    open-access copy is looked up on arXiv, and that URL is downloaded
    instead. The number of such hops is bounded by ``fallback_attempts``.
    """

    def __init__(
        self,
        settings: Settings,
        store: Optional[DownloadStore] = None,
        resolver: Optional[ArxivClient] = None,
        session: Optional[requests.Session] = None,
    ):
        self.settings = settings
        self.session = session or requests.Session()
        self.store = store or DownloadStore(settings.download_dir)
        self.resolver = resolver or ArxivClient(settings, session=self.session)

    def download(
        self,
        url: str,
        filename: Optional[str] = None,
        fallback_attempts: Optional[int] = None,
    ) -> str:
        """
        Download a PDF and return its absolute local path

        Args:
            url: Remote PDF URL
            filename: Optional local filename; also used as a title hint
            fallback_attempts: Open-access hops still allowed for this call

        Raises:
            DownloadError: If the request fails and no open-access copy is found
            InvalidPDFError: If the payload is not a PDF and no copy is found
        """
        if fallback_attempts is None:
            fallback_attempts = self.settings.fallback_attempts

        try:
            return self._fetch_and_store(url, filename)
        except (DownloadError, InvalidPDFError) as exc:
            logger.warning("Error downloading PDF %s: %s", url, exc)
            if fallback_attempts > 0 and self.is_paywalled(url):
                recovered = self._download_open_access_copy(url, filename, fallback_attempts - 1)
                if recovered:
                    return recovered
            raise

    def is_paywalled(self, url: str) -> bool:
        return any(domain in url for domain in self.settings.paywalled_domains)

    def _download_open_access_copy(
        self,
        url: str,
        filename: Optional[str],
        fallback_attempts: int,
    ) -> Optional[str]:
        logger.info("Detected paywalled source, looking for an open-access copy: %s", url)
        title = self.derive_title(url, filename)
        if not title:
            logger.info("No usable title for %s, skipping open-access lookup", url)
            return None

        pdf_url = self.resolver.find_open_access_pdf(title)
        if not pdf_url:
            logger.info("No open-access copy found for %r", title)
            return None

        logger.info("Found open-access copy on arXiv: %s", pdf_url)
        try:
            return self.download(pdf_url, filename, fallback_attempts=fallback_attempts)
        except ScienceMCPError as exc:
            logger.warning("Open-access download failed for %s: %s", pdf_url, exc)
            return None

    def _fetch_and_store(self, url: str, filename: Optional[str]) -> str:
        data = self._http_get(url)
        name = self.resolve_filename(url, filename)

        temp_path = self.store.write_temporary(name, data)
        try:
            if not self._has_pdf_signature(temp_path):
                raise InvalidPDFError("Downloaded file is not a valid PDF")
            output_path = self.store.commit(temp_path, name)
        except Exception:
            self.store.discard(temp_path)
            raise

        logger.info("PDF downloaded successfully: %s", output_path)
        return str(output_path)

    def _http_get(self, url: str) -> bytes:
        headers = {"User-Agent": self.settings.user_agent}
        try:
            response = self.session.get(
                url,
                headers=headers,
                timeout=self.settings.request_timeout,
            )
            response.raise_for_status()
            return response.content
        except requests.RequestException as exc:
            raise DownloadError(f"Failed to download PDF: {exc}") from exc

    @classmethod
    def _has_pdf_signature(cls, path: Path) -> bool:
        with Path(path).open("rb") as file_obj:
            return cls.is_valid_pdf(file_obj.read(len(PDF_SIGNATURE)))

    @staticmethod
    def is_valid_pdf(data: bytes) -> bool:
        return len(data) >= 4 and data[:4] == PDF_SIGNATURE

    @staticmethod
    def resolve_filename(url: str, hint: Optional[str] = None) -> str:
        """Derive a filesystem-safe ``.pdf`` name from a hint or the URL."""
        if hint:
            name = hint
        else:
            arxiv_match = ARXIV_PDF_PATTERN.search(url) if "arxiv.org" in url else None
            if arxiv_match:
                name = f"arxiv_{arxiv_match.group(1)}"
            elif "scholar.google" in url:
                name = f"scholar_{_timestamp_ms()}"
            else:
                last_segment = urlparse(url).path.split("/")[-1]
                name = last_segment.removesuffix(".pdf") or f"paper_{_timestamp_ms()}"

        if not name.endswith(".pdf"):
            name += ".pdf"
        return UNSAFE_FILENAME_CHARS.sub("_", name)

    @staticmethod
    def derive_title(url: str, hint: Optional[str] = None) -> Optional[str]:
        """Guess a paper title for the open-access lookup, or None."""
        if hint:
            candidate = re.sub(r"[_-]", " ", hint.removesuffix(".pdf")).strip()
            if len(candidate) > MIN_TITLE_LENGTH:
                return candidate

        try:
            parsed = urlparse(url)
            query = parse_qs(parsed.query)
        except ValueError:
            return None

        for key in TITLE_QUERY_KEYS:
            values = query.get(key)
            if values and values[0].strip():
                return values[0].strip()

        last_segment = unquote(parsed.path.split("/")[-1])
        if len(last_segment) > MIN_TITLE_LENGTH and "." not in last_segment:
            return re.sub(r"[_-]", " ", last_segment)

        return None


def _timestamp_ms() -> int:
    return int(time.time() * 1000)
