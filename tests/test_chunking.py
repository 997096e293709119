"""
Test for chunk sizing module
"""
import pytest

from science_mcp.core.chunking import chunk_ranges, estimate_tokens, fit_chunk_size
from science_mcp.core.errors import PDFReadError


class TestChunkRanges:
    """Test page partitioning"""

    @pytest.mark.parametrize("total_pages", [1, 2, 3, 7, 10, 50])
    @pytest.mark.parametrize("chunk_size", [1, 2, 3, 10, 64])
    def test_ranges_cover_document_without_gaps(self, total_pages, chunk_size):
        ranges = chunk_ranges(total_pages, chunk_size)

        pages = [page for r in ranges for page in range(r.start, r.end + 1)]
        assert pages == list(range(1, total_pages + 1))
        assert all(r.page_count == chunk_size for r in ranges[:-1])
        assert 1 <= ranges[-1].page_count <= chunk_size

    def test_chunk_boundaries(self):
        ranges = chunk_ranges(7, 3)
        assert [(r.start, r.end) for r in ranges] == [(1, 3), (4, 6), (7, 7)]

    def test_invalid_chunk_size(self):
        with pytest.raises(ValueError):
            chunk_ranges(10, 0)


class TestFitChunkSize:
    """Test the shrink-and-retry search"""

    def test_estimate_tokens(self):
        assert estimate_tokens("x" * 400) == 100

    def test_requested_size_is_capped(self):
        tried = []

        def render(size):
            tried.append(size)
            return "x" * 10

        assert fit_chunk_size(render, requested_size=10, max_tokens=100) == (2, "x" * 10)
        assert tried == [2]

    def test_small_request_is_kept(self):
        result = fit_chunk_size(lambda size: "ok", requested_size=1, max_tokens=100)
        assert result == (1, "ok")

    def test_halves_until_it_fits(self):
        tried = []

        def render(size):
            tried.append(size)
            return "x" * (size * 400)

        assert fit_chunk_size(render, requested_size=10, max_tokens=100, start_cap=8) == (1, "x" * 400)
        assert tried == [8, 4, 2, 1]

    def test_errors_also_shrink(self):
        def render(size):
            if size > 1:
                raise PDFReadError("too big to parse")
            return "fits"

        assert fit_chunk_size(render, requested_size=4, max_tokens=100, start_cap=4) == (1, "fits")

    def test_returns_none_when_one_page_is_too_large(self):
        tried = []

        def render(size):
            tried.append(size)
            return "x" * 100_000

        assert fit_chunk_size(render, requested_size=10, max_tokens=15000) is None
        assert tried == [2, 1]
