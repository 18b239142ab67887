"""Data models for the regulatory monitor."""

from .classification_result import ClassificationResult, DocumentType
from .change_result import ChangeType, RegulatoryImpact, RegulatoryChangeResult
from .crawl_candidate import CrawlCandidate, PageMetadata
from .monitored_page import MonitoredPage, RegulatoryImportance
from .page_structure import DocumentMetadata, PageStructure
from .page_version import PageVersion

__all__ = [
    "ClassificationResult",
    "DocumentType",
    "ChangeType",
    "RegulatoryImpact",
    "RegulatoryChangeResult",
    "CrawlCandidate",
    "PageMetadata",
    "MonitoredPage",
    "RegulatoryImportance",
    "DocumentMetadata",
    "PageStructure",
    "PageVersion",
]
