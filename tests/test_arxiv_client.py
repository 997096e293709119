"""
Test for arXiv client module
"""
import pytest
import requests

from helpers import ARXIV_API, EMPTY_FEED, FakeResponse, FakeSession, arxiv_feed
from science_mcp.core.arxiv_client import ArxivClient
from science_mcp.core.config import Settings
from science_mcp.core.errors import SearchError


def _client(routes) -> ArxivClient:
    return ArxivClient(Settings(), session=FakeSession(routes))


class TestArxivSearch:
    """Test paper search"""

    def test_search_parses_entries(self):
        feed = arxiv_feed(
            [
                {
                    "id": "1706.03762v7",
                    "title": "Attention Is\n   All You Need",
                    "authors": ["Ashish Vaswani", "Noam Shazeer"],
                    "categories": ["cs.CL", "cs.LG"],
                }
            ]
        )
        client = _client({ARXIV_API: FakeResponse(content=feed)})

        papers = client.search("transformers", max_results=3)

        assert len(papers) == 1
        paper = papers[0]
        assert paper.title == "Attention Is All You Need"
        assert paper.authors == ["Ashish Vaswani", "Noam Shazeer"]
        assert paper.categories == ["cs.CL", "cs.LG"]
        assert paper.abstract == "Summary text."
        assert paper.arxiv_id == "1706.03762v7"
        assert paper.pdf_url == "http://arxiv.org/pdf/1706.03762v7"
        assert paper.html_url == "http://arxiv.org/abs/1706.03762v7"

    def test_free_text_gets_all_prefix(self):
        client = _client({ARXIV_API: FakeResponse(content=EMPTY_FEED)})
        client.search("quantum computing")

        params = client.session.calls[0][1]
        assert params["search_query"] == "all:quantum computing"
        assert params["sortBy"] == "relevance"
        assert params["sortOrder"] == "descending"

    def test_field_syntax_is_kept(self):
        client = _client({ARXIV_API: FakeResponse(content=EMPTY_FEED)})
        client.search('ti:"graph networks"')
        assert client.session.calls[0][1]["search_query"] == 'ti:"graph networks"'

    def test_search_by_category(self):
        client = _client({ARXIV_API: FakeResponse(content=EMPTY_FEED)})
        assert client.search_by_category("cs.AI") == []

        params = client.session.calls[0][1]
        assert params["search_query"] == "cat:cs.AI"
        assert params["sortBy"] == "submittedDate"

    def test_invalid_sort_order(self):
        client = _client({})
        with pytest.raises(SearchError):
            client.search("x", sort_by="citations")

    def test_network_failure_raises_search_error(self):
        client = _client({ARXIV_API: requests.ConnectionError("offline")})
        with pytest.raises(SearchError, match="offline"):
            client.search("transformers")

    def test_malformed_xml_raises_search_error(self):
        client = _client({ARXIV_API: FakeResponse(content=b"<feed><entry>")})
        with pytest.raises(SearchError):
            client.search("transformers")


class TestOpenAccessLookup:
    """Test open-access PDF lookup by title"""

    def test_exact_title_match(self):
        feed = arxiv_feed([{"id": "1512.03385v1", "title": "Deep Residual Learning"}])
        client = _client({ARXIV_API: FakeResponse(content=feed)})

        url = client.find_open_access_pdf("Deep Residual Learning")

        assert url == "http://arxiv.org/pdf/1512.03385v1"
        params = client.session.calls[0][1]
        assert params["search_query"] == 'ti:"Deep Residual Learning"'
        assert params["max_results"] == 5

    def test_relaxed_retry_strips_punctuation(self):
        feed = arxiv_feed([{"id": "2005.14165", "title": "Language Models are Few-Shot Learners"}])
        client = _client(
            {ARXIV_API: [FakeResponse(content=EMPTY_FEED), FakeResponse(content=feed)]}
        )

        url = client.find_open_access_pdf("Language Models: Few-Shot Learners!")

        assert url == "http://arxiv.org/pdf/2005.14165"
        relaxed = client.session.calls[1][1]["search_query"]
        assert relaxed == "Language Models  Few Shot Learners"

    def test_no_entries_returns_none(self):
        client = _client(
            {ARXIV_API: [FakeResponse(content=EMPTY_FEED), FakeResponse(content=EMPTY_FEED)]}
        )
        assert client.find_open_access_pdf("An Unknown Paper") is None
        assert len(client.session.calls) == 2

    def test_entry_without_pdf_link_returns_none(self):
        feed = arxiv_feed([{"id": "1234.5678", "title": "No Link", "pdf": False}])
        client = _client({ARXIV_API: FakeResponse(content=feed)})
        assert client.find_open_access_pdf("No Link Paper Title") is None

    def test_failures_are_swallowed(self):
        client = _client({ARXIV_API: FakeResponse(status_code=503)})
        assert client.find_open_access_pdf("Any Paper Title") is None
