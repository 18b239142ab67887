"""Analysis tools and crawl adapters for the regulatory monitor."""

from .change_tool import RegulatoryChangeDetector
from .classify_tool import ContentClassifier
from .diff_tool import ParagraphDiff
from .extract_tool import extract_page
from .fetch_tool import fetch_tool
from .importance_tool import determine_importance
from .prioritize_tool import AdaptiveRanker, CrawlPrioritizer

__all__ = [
    "RegulatoryChangeDetector",
    "ContentClassifier",
    "ParagraphDiff",
    "extract_page",
    "fetch_tool",
    "determine_importance",
    "AdaptiveRanker",
    "CrawlPrioritizer",
]
