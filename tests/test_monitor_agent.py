"""End-to-end tests for the monitor agent with a mocked HTTP transport."""

import httpx
import pytest

from regulatory_monitor.agent.monitor_agent import FRONTIER_KEY, PAGE_METADATA_KEY, MonitorAgent
from regulatory_monitor.config.loader import Config
from regulatory_monitor.models import (
    ChangeType,
    DocumentMetadata,
    DocumentType,
    RegulatoryImpact,
    RegulatoryImportance,
)
from regulatory_monitor.storage import InMemoryStateStore

START_URL = "https://example.gov/licensees-and-businesses"
LCCP_URL = "https://example.gov/licensees-and-businesses/lccp"

PAGE_V1 = """
<html><head><title>Licensees and businesses</title></head>
<body>
  <p>Intro paragraph.</p>
  <a href="/licensees-and-businesses/lccp">LCCP</a>
  <a href="https://elsewhere.org/page">Elsewhere</a>
</body></html>
"""

PAGE_V2 = PAGE_V1.replace(
    "<p>Intro paragraph.</p>",
    "<p>Intro paragraph.</p><p>" + " ".join(["Licensees must."] * 6) + "</p>",
)


class FakeSite:
    """Serves pages from a dict; unknown URLs are 404."""

    def __init__(self, pages):
        self.pages = pages
        self.requests = []

    def __call__(self, request):
        url = str(request.url)
        self.requests.append(url)
        if url not in self.pages:
            return httpx.Response(404, text="not found")
        body, content_type = self.pages[url]
        return httpx.Response(200, text=body, headers={"content-type": content_type})


def _config(**overrides):
    data = {
        "start_urls": [START_URL],
        "retry_policy": {"max_attempts": 1, "backoff_seconds": 0},
    }
    data.update(overrides)
    return Config.from_dict(data)


def _agent(site, store=None, **config_overrides):
    client = httpx.AsyncClient(transport=httpx.MockTransport(site))
    return MonitorAgent(_config(**config_overrides), store=store or InMemoryStateStore(), client=client)


class TestRun:
    """Crawl cycles against a fake site."""

    @pytest.mark.asyncio
    async def test_first_run_stores_version_and_frontier(self):
        site = FakeSite({START_URL: (PAGE_V1, "text/html; charset=utf-8")})
        store = InMemoryStateStore()
        agent = _agent(site, store)

        pages = await agent.run(cycles=1)

        assert [p.url for p in pages] == [START_URL]
        assert pages[0].title == "Licensees and businesses"
        assert pages[0].change is None
        assert pages[0].version.change_from_previous == ChangeType.NONE
        assert (await store.get_latest_version(START_URL)).text_content == "Intro paragraph."
        assert await store.get(FRONTIER_KEY) == [LCCP_URL]

    @pytest.mark.asyncio
    async def test_second_run_detects_regulatory_change(self):
        site = FakeSite({START_URL: (PAGE_V1, "text/html")})
        store = InMemoryStateStore()
        agent = _agent(site, store)
        await agent.run(cycles=1)

        site.pages[START_URL] = (PAGE_V2, "text/html")
        await agent.run(cycles=1)

        page = agent.documents[START_URL]
        assert page.change is not None
        assert page.change.change_type == ChangeType.MAJOR
        assert page.change.regulatory_patterns == {"RequirementChange": 6}
        assert page.change.regulatory_impact == RegulatoryImpact.HIGH
        assert page.version.metadata["regulatory_impact"] == "High"
        assert agent.high_impact_changes() == [page.change]
        assert len(await store.get_version_history(START_URL)) == 2
        assert LCCP_URL in site.requests

    @pytest.mark.asyncio
    async def test_unchanged_content_keeps_previous_version(self):
        site = FakeSite({START_URL: (PAGE_V1, "text/html")})
        store = InMemoryStateStore()
        agent = _agent(site, store)

        first = await agent.run(cycles=1)
        second = await agent.run(cycles=1)

        assert second[0].change is None
        assert second[0].version == first[0].version
        assert len(await store.get_version_history(START_URL)) == 1

    @pytest.mark.asyncio
    async def test_multiple_cycles_follow_links(self):
        site = FakeSite(
            {
                START_URL: (PAGE_V1, "text/html"),
                LCCP_URL: (
                    "<html><head><title>LCCP</title></head><body><p>Licence conditions.</p></body></html>",
                    "text/html",
                ),
            }
        )
        agent = _agent(site)

        pages = await agent.run(cycles=3)

        assert [p.url for p in pages] == [START_URL, LCCP_URL]
        assert agent.frontier == []
        assert agent.documents[LCCP_URL].importance == RegulatoryImportance.CRITICAL
        assert "https://elsewhere.org/page" not in site.requests

    @pytest.mark.asyncio
    async def test_errors_and_non_html_are_skipped(self):
        site = FakeSite({START_URL: ("%PDF-1.7", "application/pdf")})
        agent = _agent(site)

        pages = await agent.run(cycles=1)

        assert pages == []
        assert agent.documents == {}

    @pytest.mark.asyncio
    async def test_pending_frontier_is_restored(self):
        site = FakeSite({})
        store = InMemoryStateStore()
        await store.set(FRONTIER_KEY, [LCCP_URL])
        agent = _agent(site, store)

        await agent.run(cycles=1)

        assert LCCP_URL in site.requests


    @pytest.mark.asyncio
    async def test_visit_records_survive_restart(self):
        site = FakeSite({START_URL: (PAGE_V1, "text/html")})
        store = InMemoryStateStore()
        await _agent(site, store).run(cycles=1)

        saved = await store.get(PAGE_METADATA_KEY)
        restarted = _agent(FakeSite({}), store)
        await restarted.run(cycles=1)

        assert list(saved) == [START_URL]
        assert saved[START_URL]["content_length"] == len("Intro paragraph.")
        metadata = restarted.prioritizer.base_ranker.page_metadata
        assert metadata[START_URL].content_length == len("Intro paragraph.")
        assert metadata[START_URL].links_count == 2


class TestEnqueue:
    def test_filters_domain_duplicates_and_limit(self):
        agent = _agent(FakeSite({}), crawl_limits={"max_pages": 2})

        added = agent.enqueue(
            [
                "https://example.gov/a/",
                "https://example.gov/a#section",
                "https://elsewhere.org/b",
                "https://example.gov/c",
                "https://example.gov/d",
            ]
        )

        assert added == 2
        assert agent.frontier == ["https://example.gov/a", "https://example.gov/c"]


class TestProcessDocument:
    @pytest.mark.asyncio
    async def test_linked_document_is_monitored(self):
        store = InMemoryStateStore()
        agent = _agent(FakeSite({}), store)
        url = "https://example.gov/documents/lccp-consolidated.pdf"

        page = await agent.process_document(
            url,
            "These license conditions apply to all operators.",
            DocumentMetadata(title="LCCP consolidated version", page_count=120),
        )

        assert page.is_pdf
        assert page.title == "LCCP consolidated version"
        assert page.importance == RegulatoryImportance.CRITICAL
        saved = await store.get_latest_version(url)
        assert saved.full_content is None
        assert saved.metadata["document"] == {"title": "LCCP consolidated version", "page_count": 120}


class TestReporting:
    @pytest.mark.asyncio
    async def test_statistics(self):
        agent = _agent(FakeSite({}))
        await agent.process_page(
            "https://example.gov/news/enforcement-action/acme",
            "<html><body><p>Enforcement action: Acme was fined £10,000.</p></body></html>",
        )

        stats = agent.get_statistics()

        assert "Total regulatory documents: 1" in stats
        assert f"- {DocumentType.ENFORCEMENT_ACTION.value}: 1" in stats
        assert "Regulatory changes detected: 0" in stats
        assert "- Low: 1" in stats
        assert agent.high_importance_documents() == []
