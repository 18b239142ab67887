"""Structural signals of a parsed page, supplied by the extraction layer."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PageStructure(BaseModel):
    """Signals the classifier reads from a parsed HTML document."""

    title: Optional[str] = None
    meta_description: Optional[str] = None
    table_count: int = Field(0, ge=0)
    form_count: int = Field(0, ge=0)
    pdf_link_count: int = Field(0, ge=0)


class DocumentMetadata(BaseModel):
    """Basic metadata of a linked binary document (PDF, Word, Excel, PowerPoint)."""

    title: Optional[str] = None
    author: Optional[str] = None
    created: Optional[datetime] = None
    modified: Optional[datetime] = None
    page_count: Optional[int] = Field(None, ge=0)
