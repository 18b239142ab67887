"""Configuration loader for the regulatory monitor."""

import json
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, Field

from ..models.classification_result import DocumentType
from .taxonomy import LOW_PRIORITY_PATTERNS, PRIORITY_CONTENT_TYPES, PRIORITY_SECTIONS


class CrawlLimits(BaseModel):
    """Crawl limits configuration."""

    max_pages: int = Field(default=100, ge=1)
    batch_size: int = Field(default=10, ge=1)
    max_concurrent_requests: int = Field(default=5, ge=1)
    request_timeout_seconds: float = Field(default=30.0, gt=0)


class RetryPolicy(BaseModel):
    """Retry configuration for transient fetch failures."""

    max_attempts: int = Field(default=3, ge=1)
    backoff_seconds: float = Field(default=2.0, ge=0)


class PrioritizerConfig(BaseModel):
    """URL segments that raise or lower crawl priority."""

    priority_sections: list[str] = Field(default_factory=lambda: list(PRIORITY_SECTIONS))
    priority_content_types: list[str] = Field(default_factory=lambda: list(PRIORITY_CONTENT_TYPES))
    low_priority_patterns: list[str] = Field(default_factory=lambda: list(LOW_PRIORITY_PATTERNS))


class ClassifierConfig(BaseModel):
    """Keyword additions for the content classifier."""

    custom_keywords: dict[DocumentType, list[str]] = Field(default_factory=dict)
    term_dictionaries_path: Optional[str] = None
    include_gambling_keywords: bool = False


class StoreConfig(BaseModel):
    """State store backend selection."""

    backend: Literal["memory", "file", "sqlite"] = "memory"
    base_path: str = Field(default="./output/state")
    db_path: str = Field(default="./output/state.db")
    max_versions: int = Field(default=10, ge=1)


class Config(BaseModel):
    """Full system configuration."""

    start_urls: list[str] = Field(default_factory=list)
    allowed_domains: list[str] = Field(default_factory=list)
    crawl_limits: CrawlLimits = Field(default_factory=CrawlLimits)
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)
    prioritizer: PrioritizerConfig = Field(default_factory=PrioritizerConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    content_summary_length: int = Field(default=200, ge=0)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load config from YAML file."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """Load config from dictionary."""
        return cls(**data)


def load_config(path: str | Path) -> Config:
    """Load configuration from file (YAML or JSON)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path.suffix in (".yaml", ".yml"):
        return Config.from_yaml(path)

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return Config.from_dict(data)


def load_term_dictionaries(path: str | Path) -> dict[DocumentType, list[str]]:
    """
    Load keyword dictionaries, one file per document type.
    Files are named after the type value (e.g. Regulation.txt), one keyword per line.
    Missing files yield no keywords for that type.
    """
    path = Path(path)
    result: dict[DocumentType, list[str]] = {}
    for doc_type in DocumentType:
        f = path / f"{doc_type.value}.txt"
        if not f.exists():
            continue
        keywords = [
            line.strip()
            for line in f.read_text(encoding="utf-8").splitlines()
            if line.strip() and not line.startswith("#")
        ]
        if keywords:
            result[doc_type] = keywords
    return result
