"""
Shared test helpers: minimal PDF writer and fake HTTP session
"""
from typing import Dict, List, Sequence, Tuple, Union

import requests


def _escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def make_pdf(pages: Sequence[Sequence[Tuple[float, float, str]]]) -> bytes:
    """Build a valid PDF; each page is a list of (x, y, text) runs."""
    page_count = len(pages)
    font_id = 3
    first_page_id = 4
    objects: Dict[int, bytes] = {}

    kids = " ".join(f"{first_page_id + 2 * idx} 0 R" for idx in range(page_count))
    objects[1] = b"<< /Type /Catalog /Pages 2 0 R >>"
    objects[2] = f"<< /Type /Pages /Kids [{kids}] /Count {page_count} >>".encode()
    objects[font_id] = b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>"

    for idx, runs in enumerate(pages):
        page_id = first_page_id + 2 * idx
        content_id = page_id + 1
        stream = "\n".join(
            f"BT /F1 12 Tf 1 0 0 1 {x} {y} Tm ({_escape(text)}) Tj ET" for x, y, text in runs
        ).encode("latin-1")
        objects[page_id] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
            f"/Resources << /Font << /F1 {font_id} 0 R >> >> /Contents {content_id} 0 R >>"
        ).encode()
        objects[content_id] = (
            f"<< /Length {len(stream)} >>\nstream\n".encode() + stream + b"\nendstream"
        )

    out = bytearray(b"%PDF-1.4\n")
    offsets: List[int] = []
    for obj_id in range(1, len(objects) + 1):
        offsets.append(len(out))
        out += f"{obj_id} 0 obj\n".encode() + objects[obj_id] + b"\nendobj\n"

    xref_offset = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += (
        f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\n"
        f"startxref\n{xref_offset}\n%%EOF\n"
    ).encode()
    return bytes(out)


def make_text_pdf(page_texts: Sequence[str]) -> bytes:
    """One line of text per page."""
    return make_pdf([[(72, 720, text)] for text in page_texts])


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b"", json_data=None, url: str = ""):
        self.status_code = status_code
        self.content = content
        self._json_data = json_data
        self.url = url

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(
                f"{self.status_code} Client Error for url: {self.url}",
                response=self,
            )

    def json(self):
        if self._json_data is None:
            raise ValueError("No JSON body")
        return self._json_data


Route = Union[FakeResponse, Exception, List[Union[FakeResponse, Exception]]]


class FakeSession:
    """Stands in for requests.Session; routes by exact URL.

    A list route is consumed one response per call.
    """

    def __init__(self, routes: Dict[str, Route]):
        self.routes = routes
        self.calls: List[Tuple[str, dict, dict, float]] = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append((url, params or {}, headers or {}, timeout))
        if url not in self.routes:
            raise requests.ConnectionError(f"No route to {url}")

        route = self.routes[url]
        if isinstance(route, list):
            route = route.pop(0)
        if isinstance(route, Exception):
            raise route
        route.url = url
        return route

    def urls(self) -> List[str]:
        return [call[0] for call in self.calls]


ARXIV_API = "http://export.arxiv.org/api/query"

EMPTY_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>ArXiv Query</title>
</feed>
"""


def arxiv_feed(entries: Sequence[dict]) -> bytes:
    """Atom feed with entries of {id, title, pdf?, authors?, categories?}."""
    body = []
    for entry in entries:
        links = [
            f'<link href="http://arxiv.org/abs/{entry["id"]}" rel="alternate" type="text/html"/>'
        ]
        if entry.get("pdf", True):
            links.append(
                f'<link title="pdf" href="http://arxiv.org/pdf/{entry["id"]}" '
                f'rel="related" type="application/pdf"/>'
            )
        authors = "".join(
            f"<author><name>{name}</name></author>" for name in entry.get("authors", [])
        )
        categories = "".join(
            f'<category term="{term}" scheme="http://arxiv.org/schemas/atom"/>'
            for term in entry.get("categories", [])
        )
        body.append(
            f"""<entry>
    <id>http://arxiv.org/abs/{entry["id"]}</id>
    <published>2017-06-12T17:57:34Z</published>
    <title>{entry["title"]}</title>
    <summary>  {entry.get("summary", "Summary text.")}
    </summary>
    {authors}
    {"".join(links)}
    {categories}
  </entry>"""
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<feed xmlns="http://www.w3.org/2005/Atom">\n'
        + "\n".join(body)
        + "\n</feed>\n"
    ).encode()
