"""Change magnitude, regulatory impact and the change detection result."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class ChangeType(str, Enum):
    """Magnitude tier produced by the base diff. Ordered by declaration."""

    NONE = "None"
    MINOR = "Minor"
    MODERATE = "Moderate"
    MAJOR = "Major"

    @property
    def level(self) -> int:
        return list(type(self)).index(self)


class RegulatoryImpact(str, Enum):
    """Materiality of a change. The detector emits at most HIGH."""

    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def level(self) -> int:
        return list(type(self)).index(self)


class RegulatoryChangeResult(BaseModel):
    """Result of comparing two snapshots of a regulatory page."""

    url: str
    change_type: ChangeType = ChangeType.NONE
    detected_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    changed_sections: dict[str, str] = Field(default_factory=dict)
    regulatory_patterns: dict[str, int] = Field(default_factory=dict)
    important_keywords_found: list[str] = Field(default_factory=list)
    regulatory_excerpts: list[str] = Field(default_factory=list, max_length=5)
    regulatory_impact: RegulatoryImpact = RegulatoryImpact.NONE
    impact_summary: str = ""

    @property
    def total_pattern_matches(self) -> int:
        return sum(self.regulatory_patterns.values())
