"""Document type classification result."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DocumentType(str, Enum):
    """Regulatory document types. Declaration order breaks score ties."""

    GUIDANCE = "Guidance"
    REGULATION = "Regulation"
    CONSULTATION = "Consultation"
    ENFORCEMENT_ACTION = "EnforcementAction"
    PRESS_RELEASE = "PressRelease"
    STATISTICS = "Statistics"
    LICENSING_INFO = "LicensingInfo"
    OTHER = "Other"


def empty_scores() -> dict[DocumentType, float]:
    return {doc_type: 0.0 for doc_type in DocumentType}


class ClassificationResult(BaseModel):
    """Output of ContentClassifier.classify."""

    primary_type: DocumentType = DocumentType.OTHER
    secondary_type: Optional[DocumentType] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    type_scores: dict[DocumentType, float] = Field(default_factory=empty_scores)
    matched_keywords: list[str] = Field(default_factory=list)
