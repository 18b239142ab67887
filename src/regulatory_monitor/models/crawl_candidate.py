"""Crawl frontier scoring records."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field


class CrawlCandidate(BaseModel):
    """Per-call scoring of a frontier URL. Never persisted."""

    url: str
    base_score: float = 0.0
    extra_score: float = 0.0


class PageMetadata(BaseModel):
    """What the base ranker remembers about a visited page."""

    url: str
    content_length: int = Field(0, ge=0)
    links_count: int = Field(0, ge=0)
    last_visited: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    importance_score: float = 0.0
    keywords: list[str] = Field(default_factory=list)
