"""Importance tool - rate how much a classified document matters for compliance."""

from typing import Optional

from ..models.classification_result import ClassificationResult, DocumentType
from ..models.monitored_page import RegulatoryImportance

CRITICAL_KEYWORDS = ("license conditions", "code of practice")


def determine_importance(
    classification: ClassificationResult,
    url: str,
    title: Optional[str] = None,
) -> RegulatoryImportance:
    """
    Rules are evaluated top-down; the first match wins.
    URL, title and keyword checks are case-insensitive.
    """
    url = url.lower()
    title = (title or "").lower()
    keywords = {kw.lower() for kw in classification.matched_keywords}
    primary = classification.primary_type
    confidence = classification.confidence

    if primary == DocumentType.ENFORCEMENT_ACTION and confidence > 0.7:
        return RegulatoryImportance.CRITICAL

    if "/lccp/" in url or "lccp" in title or any(kw in keywords for kw in CRITICAL_KEYWORDS):
        return RegulatoryImportance.CRITICAL

    if primary in (DocumentType.REGULATION, DocumentType.GUIDANCE) and confidence > 0.8:
        return RegulatoryImportance.HIGH

    if "/aml/" in url or "money laundering" in title or "anti-money laundering" in keywords:
        return RegulatoryImportance.HIGH

    if (
        primary in (DocumentType.REGULATION, DocumentType.GUIDANCE, DocumentType.CONSULTATION)
        and confidence > 0.5
    ):
        return RegulatoryImportance.MEDIUM

    return RegulatoryImportance.LOW
