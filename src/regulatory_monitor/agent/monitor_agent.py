"""Monitor agent - control plane for the regulatory monitoring crawl loop."""

import asyncio
import logging
from collections import Counter
from typing import Optional
from urllib.parse import urlparse

import httpx

from ..config.loader import Config, load_term_dictionaries
from ..models.change_result import ChangeType, RegulatoryChangeResult, RegulatoryImpact
from ..models.crawl_candidate import PageMetadata
from ..models.monitored_page import MonitoredPage, RegulatoryImportance
from ..models.page_structure import DocumentMetadata, PageStructure
from ..models.page_version import PageVersion
from ..storage import StateStore, create_state_store
from ..tools.change_tool import RegulatoryChangeDetector
from ..tools.classify_tool import ContentClassifier
from ..tools.extract_tool import content_hash, extract_page, normalize_url
from ..tools.fetch_tool import fetch_tool
from ..tools.importance_tool import determine_importance
from ..tools.prioritize_tool import AdaptiveRanker, CrawlPrioritizer

logger = logging.getLogger(__name__)

FRONTIER_KEY = "monitor:frontier"
PAGE_METADATA_KEY = "monitor:page_metadata"
USER_AGENT = "regulatory-monitor/0.1"


def build_classifier(config: Config) -> ContentClassifier:
    """Classifier with configured keyword additions registered."""
    classifier = ContentClassifier()
    settings = config.classifier
    if settings.include_gambling_keywords:
        classifier.add_gambling_keywords()
    if settings.term_dictionaries_path:
        for doc_type, keywords in load_term_dictionaries(settings.term_dictionaries_path).items():
            classifier.add_keywords(doc_type, keywords)
    for doc_type, keywords in settings.custom_keywords.items():
        classifier.add_keywords(doc_type, keywords)
    return classifier


class MonitorAgent:
    """
    Runs crawl cycles: prioritize the frontier, fetch the batch concurrently,
    then classify, diff against the latest snapshot and persist each page.
    A failure on one URL is logged and never stops the cycle.
    """

    def __init__(
        self,
        config: Config,
        store: Optional[StateStore] = None,
        classifier: Optional[ContentClassifier] = None,
        detector: Optional[RegulatoryChangeDetector] = None,
        prioritizer: Optional[CrawlPrioritizer] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self.store = store or create_state_store(config.store)
        self.classifier = classifier or build_classifier(config)
        self.detector = detector or RegulatoryChangeDetector()
        self.prioritizer = prioritizer or CrawlPrioritizer(
            base_ranker=AdaptiveRanker(),
            priority_sections=config.prioritizer.priority_sections,
            priority_content_types=config.prioritizer.priority_content_types,
            low_priority_patterns=config.prioritizer.low_priority_patterns,
        )
        self._client = client

        self.allowed_domains = set(config.allowed_domains) or {
            urlparse(u).netloc for u in config.start_urls
        }
        self._frontier: list[str] = []
        self._seen: set[str] = set()
        self._documents: dict[str, MonitoredPage] = {}
        self._changes: list[RegulatoryChangeResult] = []

    @property
    def frontier(self) -> list[str]:
        return list(self._frontier)

    @property
    def documents(self) -> dict[str, MonitoredPage]:
        return dict(self._documents)

    @property
    def _adaptive_ranker(self) -> Optional[AdaptiveRanker]:
        ranker = self.prioritizer.base_ranker
        return ranker if isinstance(ranker, AdaptiveRanker) else None

    async def _restore_page_metadata(self) -> None:
        """Reload visit records saved by a previous run into the adaptive ranker."""
        if self._adaptive_ranker is None:
            return
        saved = await self.store.get(PAGE_METADATA_KEY, default={})
        if saved:
            self._adaptive_ranker.load_page_metadata(
                {url: PageMetadata.model_validate(data) for url, data in saved.items()}
            )

    def enqueue(self, urls: list[str]) -> int:
        """Add unseen, in-scope URLs to the frontier. Returns how many were added."""
        added = 0
        for url in urls:
            norm = normalize_url(url)
            if norm in self._seen or norm in self._frontier:
                continue
            if self.allowed_domains and urlparse(norm).netloc not in self.allowed_domains:
                continue
            if len(self._seen) + len(self._frontier) >= self.config.crawl_limits.max_pages:
                break
            self._frontier.append(norm)
            added += 1
        return added

    async def run(self, cycles: int = 1) -> list[MonitoredPage]:
        """Seed the frontier and run up to `cycles` crawl cycles."""
        self._seen.clear()
        self._frontier.clear()
        self.enqueue(self.config.start_urls)
        pending = await self.store.get(FRONTIER_KEY, default=[])
        if pending:
            self.enqueue(pending)
            logger.info("Restored %d pending URLs from previous run", len(pending))
        await self._restore_page_metadata()

        pages: list[MonitoredPage] = []
        for cycle in range(1, cycles + 1):
            if not self._frontier:
                logger.info("Frontier empty after %d cycles", cycle - 1)
                break
            logger.info("Starting cycle %d with %d URLs in frontier", cycle, len(self._frontier))
            pages.extend(await self.run_cycle())

        await self.store.set(FRONTIER_KEY, self._frontier)
        if self._adaptive_ranker is not None:
            await self.store.set(
                PAGE_METADATA_KEY,
                {url: m.model_dump(mode="json") for url, m in self._adaptive_ranker.page_metadata.items()},
            )
        logger.info("Monitored %d pages, %d regulatory changes detected", len(pages), len(self._changes))
        return pages

    async def run_cycle(self) -> list[MonitoredPage]:
        """Fetch and process one prioritized batch from the frontier."""
        limits = self.config.crawl_limits
        batch = self.prioritizer.prioritize(self._frontier, limits.batch_size)
        self._frontier = [u for u in self._frontier if u not in batch]
        self._seen.update(batch)
        if not batch:
            return []

        semaphore = asyncio.Semaphore(limits.max_concurrent_requests)
        if self._client is not None:
            results = await asyncio.gather(*(self._monitor_url(self._client, semaphore, u) for u in batch))
        else:
            async with httpx.AsyncClient(
                timeout=limits.request_timeout_seconds,
                follow_redirects=True,
                trust_env=False,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                results = await asyncio.gather(*(self._monitor_url(client, semaphore, u) for u in batch))
        return [page for page in results if page is not None]

    async def _monitor_url(
        self,
        client: httpx.AsyncClient,
        semaphore: asyncio.Semaphore,
        url: str,
    ) -> Optional[MonitoredPage]:
        async with semaphore:
            fetch_result = await fetch_tool(client, url, self.config.retry_policy)

        if fetch_result.error or fetch_result.http_status != 200:
            logger.warning(
                "Skipping %s: HTTP %s %s", url, fetch_result.http_status, fetch_result.error or ""
            )
            return None
        if "html" not in fetch_result.content_type.lower():
            logger.info("Skipping %s: unsupported content type %s", url, fetch_result.content_type)
            return None

        try:
            return await self.process_page(url, fetch_result.html, fetch_result.content_type)
        except Exception as e:
            logger.exception("Failed to process %s: %s", url, e)
            return None

    async def process_page(self, url: str, html: str, content_type: str = "text/html") -> MonitoredPage:
        """Monitor an already fetched HTML page and queue its links."""
        extracted = extract_page(html, url, content_type)
        if self._adaptive_ranker is not None:
            self._adaptive_ranker.record_visit(url, extracted.text, len(extracted.links))
        self.enqueue(extracted.links)
        return await self._monitor_content(
            url=url,
            text=extracted.text,
            raw=html,
            structure=extracted.structure,
            title=extracted.title,
        )

    async def process_document(
        self,
        url: str,
        text: str,
        metadata: Optional[DocumentMetadata] = None,
    ) -> MonitoredPage:
        """Monitor a linked binary document whose text was extracted upstream."""
        metadata = metadata or DocumentMetadata()
        structure = PageStructure(title=metadata.title) if metadata.title else None
        return await self._monitor_content(
            url=url,
            text=text,
            raw=None,
            structure=structure,
            title=metadata.title,
            extra_metadata={"document": metadata.model_dump(mode="json", exclude_none=True)},
        )

    async def _monitor_content(
        self,
        url: str,
        text: str,
        raw: Optional[str],
        structure: Optional[PageStructure],
        title: Optional[str],
        extra_metadata: Optional[dict] = None,
    ) -> MonitoredPage:
        classification = self.classifier.classify(url, text, structure)
        importance = determine_importance(classification, url, title)
        digest = content_hash(raw if raw is not None else text)

        previous = await self.store.get_latest_version(url)
        change: Optional[RegulatoryChangeResult] = None

        if previous is not None and previous.hash == digest:
            logger.debug("No content change detected for %s", url)
            version = previous
        else:
            change_type = ChangeType.NONE
            if previous is not None:
                change = self.detector.detect_changes(url, previous.text_content or "", text)
                change_type = change.change_type
                self._record_change(change)

            metadata = {
                "document_type": classification.primary_type.value,
                "confidence": classification.confidence,
                "importance": importance.value,
                "matched_keywords": classification.matched_keywords,
                "regulatory_impact": (change.regulatory_impact if change else RegulatoryImpact.NONE).value,
            }
            if title:
                metadata["title"] = title
            metadata.update(extra_metadata or {})

            version = PageVersion(
                url=url,
                hash=digest,
                change_from_previous=change_type,
                content_summary=text[: self.config.content_summary_length].strip(),
                metadata=metadata,
                full_content=raw,
                text_content=text,
            )
            await self.store.save_version(version)

        page = MonitoredPage(
            url=url,
            title=title or "Untitled Document",
            classification=classification,
            importance=importance,
            change=change,
            version=version,
            is_pdf=url.lower().endswith(".pdf"),
        )
        self._documents[url] = page
        logger.info(
            "Classified %s as %s (%.0f%% confidence, %s importance)",
            url,
            classification.primary_type.value,
            classification.confidence * 100,
            importance.value,
        )
        return page

    def _record_change(self, change: RegulatoryChangeResult) -> None:
        if change.regulatory_impact == RegulatoryImpact.NONE:
            return
        self._changes.append(change)
        if change.regulatory_impact.level >= RegulatoryImpact.MEDIUM.level:
            logger.warning("Significant regulatory change detected!\n%s", change.impact_summary)

    def high_importance_documents(self) -> list[MonitoredPage]:
        return [
            page for page in self._documents.values()
            if page.importance in (RegulatoryImportance.HIGH, RegulatoryImportance.CRITICAL)
        ]

    def high_impact_changes(self) -> list[RegulatoryChangeResult]:
        return [
            change for change in self._changes
            if change.regulatory_impact in (RegulatoryImpact.MEDIUM, RegulatoryImpact.HIGH)
        ]

    def get_statistics(self) -> str:
        """Counts of monitored documents by type, importance and change impact."""
        doc_types = Counter(p.classification.primary_type.value for p in self._documents.values())
        importance = Counter(p.importance.value for p in self._documents.values())
        impacts = Counter(c.regulatory_impact.value for c in self._changes)

        lines = ["Regulatory Monitoring Statistics:", f"Total regulatory documents: {len(self._documents)}"]
        lines.append("\nDocument Types:")
        lines.extend(f"- {name}: {count}" for name, count in doc_types.most_common())
        lines.append("\nImportance Levels:")
        lines.extend(f"- {name}: {count}" for name, count in importance.most_common())
        lines.append(f"\nRegulatory changes detected: {len(self._changes)}")
        lines.append("\nRegulatory Impact Levels:")
        lines.extend(f"- {name}: {count}" for name, count in impacts.most_common())
        return "\n".join(lines)
