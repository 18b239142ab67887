"""Persisted snapshot of a monitored page."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .change_result import ChangeType


class PageVersion(BaseModel):
    """
    One capture of a URL's content plus derived metadata.
    full_content and text_content are large payloads; stores keep them apart
    from the metadata record.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    hash: str = ""
    captured_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    change_from_previous: ChangeType = ChangeType.NONE
    content_summary: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)
    full_content: Optional[str] = None
    text_content: Optional[str] = None

    def without_payload(self) -> "PageVersion":
        """Metadata-only copy, as written to the metadata record."""
        return self.model_copy(update={"full_content": None, "text_content": None})
