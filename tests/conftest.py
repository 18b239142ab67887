"""Shared fixtures for regulatory monitor tests."""

from datetime import datetime, timedelta, timezone

import pytest

from regulatory_monitor.models import PageVersion
from regulatory_monitor.storage import FileSystemStateStore, InMemoryStateStore, SqliteStateStore
from regulatory_monitor.tools.change_tool import RegulatoryChangeDetector
from regulatory_monitor.tools.classify_tool import ContentClassifier

BASE_TIME = datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def classifier():
    return ContentClassifier()


@pytest.fixture
def detector():
    return RegulatoryChangeDetector()


@pytest.fixture
def make_version():
    """Build a PageVersion captured `minutes` after a fixed base time."""

    def _make(url="https://example.gov/guidance/lccp", minutes=0, **kwargs):
        defaults = {
            "hash": f"hash-{minutes}",
            "content_summary": f"summary {minutes}",
            "metadata": {"document_type": "Guidance", "confidence": 0.5},
            "full_content": f"<html><body><p>version {minutes}</p></body></html>",
            "text_content": f"version {minutes}",
        }
        defaults.update(kwargs)
        return PageVersion(url=url, captured_at=BASE_TIME + timedelta(minutes=minutes), **defaults)

    return _make


@pytest.fixture(params=["memory", "file", "sqlite"])
def store_factory(request, tmp_path):
    """Factory building each backend with a given retention bound."""

    def _factory(max_versions=10):
        if request.param == "memory":
            return InMemoryStateStore(max_versions=max_versions)
        if request.param == "file":
            return FileSystemStateStore(tmp_path / "state", max_versions=max_versions)
        return SqliteStateStore(tmp_path / "state.db", max_versions=max_versions)

    _factory.backend = request.param
    return _factory
