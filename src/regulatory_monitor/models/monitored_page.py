"""Outcome of monitoring one URL in a crawl cycle."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from .change_result import RegulatoryChangeResult
from .classification_result import ClassificationResult
from .page_version import PageVersion


class RegulatoryImportance(str, Enum):
    """Importance of a regulatory document. Ordered by declaration."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def level(self) -> int:
        return list(type(self)).index(self)


class MonitoredPage(BaseModel):
    """Classified page with its importance, detected change and saved version."""

    url: str
    title: str = "Untitled Document"
    classification: ClassificationResult
    importance: RegulatoryImportance = RegulatoryImportance.LOW
    change: Optional[RegulatoryChangeResult] = None
    version: Optional[PageVersion] = None
    is_pdf: bool = False
    processed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
