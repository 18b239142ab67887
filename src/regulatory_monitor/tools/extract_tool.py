"""Extract tool - turn fetched HTML into plain text, structure signals and links."""

import hashlib
import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from ..models.page_structure import PageStructure

SKIP_LINK_PREFIXES = ("#", "mailto:", "tel:", "javascript:")
BLOCK_TAGS = [
    "p", "li", "h1", "h2", "h3", "h4", "h5", "h6",
    "td", "th", "blockquote", "pre", "dt", "dd", "caption",
]


@dataclass
class ExtractedPage:
    """Result from extract_page."""

    text: str
    structure: PageStructure
    links: list[str] = field(default_factory=list)
    title: Optional[str] = None


def content_hash(content: str) -> str:
    """SHA-256 hex digest of the raw content."""
    return hashlib.sha256((content or "").encode("utf-8")).hexdigest()


def normalize_url(url: str, base: str | None = None) -> str:
    """Normalize URL: resolve against base, strip fragment and trailing slash."""
    parsed = urlparse(url)
    if base and not parsed.netloc:
        url = urljoin(base, url)
        parsed = urlparse(url)

    result = f"{parsed.scheme}://{parsed.netloc}{parsed.path}"
    if parsed.query:
        result += "?" + parsed.query
    return result.rstrip("/") or result + "/"


def _extract_text(soup: BeautifulSoup) -> str:
    """Body text without scripts, styles and chrome; paragraphs separated by blank lines."""
    body = soup.find("body") or soup
    for tag in body.find_all(["script", "style", "nav", "footer", "noscript"]):
        tag.decompose()
    blocks = []
    for tag in body.find_all(BLOCK_TAGS):
        if tag.find(BLOCK_TAGS):
            continue  # innermost blocks only
        text = re.sub(r"\s+", " ", tag.get_text(separator=" ", strip=True))
        if text:
            blocks.append(text)
    if not blocks:
        return re.sub(r"\s+", " ", body.get_text(separator=" ", strip=True))
    return "\n\n".join(blocks)


def extract_page(html: str, url: str = "", content_type: str = "text/html") -> ExtractedPage:
    """
    Parse HTML once and collect what the classifier and crawl loop consume.
    Links are resolved against url and normalized.
    """
    if content_type and "xml" in content_type.lower():
        soup = BeautifulSoup(html or "", "xml")
    else:
        soup = BeautifulSoup(html or "", "lxml")

    title = soup.title.get_text(strip=True) if soup.title else None
    if not title:
        h1 = soup.find("h1")
        title = h1.get_text(strip=True) if h1 else None

    description = None
    desc = soup.find("meta", attrs={"name": "description"}) or soup.find(
        "meta", attrs={"property": "og:description"}
    )
    if desc and desc.get("content"):
        description = desc["content"].strip()

    links: list[str] = []
    pdf_links = 0
    seen: set[str] = set()
    for a in soup.find_all("a", href=True):
        href = a["href"].strip()
        if ".pdf" in href.lower():
            pdf_links += 1
        if not href or href.lower().startswith(SKIP_LINK_PREFIXES):
            continue
        norm = normalize_url(href, url or None)
        if norm not in seen and urlparse(norm).scheme in ("http", "https"):
            seen.add(norm)
            links.append(norm)

    structure = PageStructure(
        title=title,
        meta_description=description,
        table_count=len(soup.find_all("table")),
        form_count=len(soup.find_all("form")),
        pdf_link_count=pdf_links,
    )
    return ExtractedPage(
        text=_extract_text(soup),
        structure=structure,
        links=links,
        title=title,
    )
