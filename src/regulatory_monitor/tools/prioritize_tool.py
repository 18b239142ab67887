"""Prioritize tool - rank the crawl frontier with generic and regulatory signals."""

import logging
import re
from collections import Counter
from collections.abc import Sequence
from typing import Optional, Protocol
from urllib.parse import urlparse

from ..config.taxonomy import LOW_PRIORITY_PATTERNS, PRIORITY_CONTENT_TYPES, PRIORITY_SECTIONS
from ..models.crawl_candidate import CrawlCandidate, PageMetadata

logger = logging.getLogger(__name__)

URL_DATE_RE = re.compile(r"\b20\d{2}[-/]\d{1,2}[-/]\d{1,2}\b")
WORD_SPLIT_RE = re.compile(r"\W+")

COMMON_WORDS = frozenset({"the", "and", "a", "to", "in", "of", "is", "you", "that", "it"})
PREFERRED_TERMS = ("about", "faq", "help", "guide", "news", "contact")
AVOID_EXTENSIONS = (".pdf", ".jpg", ".png", ".gif", ".mp3", ".mp4", ".zip")


class BaseRanker(Protocol):
    """Generic ranking the regulatory prioritizer builds on."""

    def score(self, url: str) -> float: ...

    def rank(self, urls: Sequence[str], max_count: int) -> list[str]: ...


class AdaptiveRanker:
    """
    Generic frontier ranking: unvisited pages, short paths, less-visited domains
    and a few navigational terms score higher; binary and media files score lower.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger(__name__)
        self._page_metadata: dict[str, PageMetadata] = {}
        self._domain_visits: Counter[str] = Counter()

    @property
    def page_metadata(self) -> dict[str, PageMetadata]:
        return dict(self._page_metadata)

    def load_page_metadata(self, metadata: dict[str, PageMetadata]) -> None:
        self._page_metadata.update(metadata)
        self._logger.info("Loaded metadata for %d pages", len(metadata))

    def score(self, url: str) -> float:
        try:
            parsed = urlparse(url)
        except ValueError:
            return 0.0
        if not parsed.scheme or not parsed.netloc:
            return 0.0

        score = 1.0
        if url not in self._page_metadata:
            score += 2.0
        visits = self._domain_visits.get(parsed.netloc, 0)
        if visits:
            score -= min(0.5, visits * 0.1)

        segments = [s for s in parsed.path.split("/") if s]
        score -= len(segments) * 0.2

        lower = url.lower()
        score += 0.5 * sum(1 for term in PREFERRED_TERMS if term in lower)
        if lower.endswith(AVOID_EXTENSIONS):
            score -= 5.0
        return score

    def rank(self, urls: Sequence[str], max_count: int) -> list[str]:
        if not urls or max_count <= 0:
            return []
        self._logger.debug("Prioritizing %d URLs", len(urls))
        ranked = sorted(urls, key=self.score, reverse=True)[:max_count]
        self._logger.debug("Selected top %d URLs based on priority scores", len(ranked))
        return ranked

    def record_visit(self, url: str, text: str, links_count: int = 0) -> PageMetadata:
        """Remember a fetched page so it ranks below unvisited ones."""
        words = [
            w for w in WORD_SPLIT_RE.split((text or "").lower())
            if len(w) > 3 and w not in COMMON_WORDS
        ]
        keywords = [w for w, _ in Counter(words).most_common(10)]
        content_length = len(text or "")
        metadata = PageMetadata(
            url=url,
            content_length=content_length,
            links_count=links_count,
            keywords=keywords,
            importance_score=(
                min(1.0, content_length / 5000.0)
                + min(1.0, links_count / 30.0)
                + min(1.0, len(keywords) / 5.0)
            ),
        )
        self._page_metadata[url] = metadata
        self._domain_visits[urlparse(url).netloc] += 1
        self._logger.debug("Updated metadata for %s: length=%d, links=%d", url, content_length, links_count)
        return metadata


class CrawlPrioritizer:
    """
    Regulatory rescoring layered over a base ranker.
    URLs with an extra score above 2.0 are forced into the selected batch.
    """

    PROMOTION_THRESHOLD = 2.0

    def __init__(
        self,
        base_ranker: Optional[BaseRanker] = None,
        priority_sections: Optional[Sequence[str]] = None,
        priority_content_types: Optional[Sequence[str]] = None,
        low_priority_patterns: Optional[Sequence[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._logger = logger or logging.getLogger(__name__)
        self.base_ranker = base_ranker or AdaptiveRanker(logger=self._logger)
        self._priority_sections = _lowered(PRIORITY_SECTIONS if priority_sections is None else priority_sections)
        self._priority_content_types = _lowered(
            PRIORITY_CONTENT_TYPES if priority_content_types is None else priority_content_types
        )
        self._low_priority_patterns = _lowered(
            LOW_PRIORITY_PATTERNS if low_priority_patterns is None else low_priority_patterns
        )

    def extra_score(self, url: str) -> float:
        lower = url.lower()
        score = 0.0
        if any(section in lower for section in self._priority_sections):
            score += 3.0
        if any(token in lower for token in self._priority_content_types):
            score += 2.0
        if any(pattern in lower for pattern in self._low_priority_patterns):
            score -= 3.0
        if URL_DATE_RE.search(url):
            score += 1.5
        if lower.endswith(".pdf"):
            score += 2.0
        return score

    def score_candidates(self, urls: Sequence[str]) -> list[CrawlCandidate]:
        return [
            CrawlCandidate(url=url, base_score=self.base_ranker.score(url), extra_score=self.extra_score(url))
            for url in urls
        ]

    def prioritize(self, urls: Sequence[str], max_count: int = 10) -> list[str]:
        """Select up to max_count URLs, promoting high-priority regulatory pages."""
        if not urls or max_count <= 0:
            return []

        candidates = [(url, self.extra_score(url)) for url in urls]
        selected = list(self.base_ranker.rank(urls, max_count))

        # Stable sort: equal extra scores keep input order
        for url, extra in sorted(candidates, key=lambda c: c[1], reverse=True):
            if extra <= self.PROMOTION_THRESHOLD or url in selected:
                continue
            if len(selected) >= max_count:
                self._logger.debug("Promoting %s over %s", url, selected[-1])
                selected[-1] = url
            else:
                selected.append(url)

        return selected[:max_count]


def _lowered(values: Sequence[str]) -> tuple[str, ...]:
    return tuple(v.lower() for v in values)
