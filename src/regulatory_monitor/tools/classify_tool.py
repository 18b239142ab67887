"""Classify tool - score regulatory document type from URL, text and structure."""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Optional

from ..config.taxonomy import (
    DOCUMENT_KEYWORDS,
    DOCUMENT_PATTERNS,
    GAMBLING_FAMILY_TYPES,
    GAMBLING_KEYWORDS,
    URL_TYPE_PATTERNS,
)
from ..models.classification_result import ClassificationResult, DocumentType, empty_scores
from ..models.page_structure import PageStructure

logger = logging.getLogger(__name__)

_MONTHS = "January|February|March|April|May|June|July|August|September|October|November|December"
DATE_RE = re.compile(
    rf"\b\d{{1,2}}/\d{{1,2}}/\d{{2,4}}\b|\b\d{{1,2}}\s+(?:{_MONTHS})\s+\d{{4}}\b",
    re.IGNORECASE,
)
MONEY_RE = re.compile(r"[£$€]\s*[\d,]+(?:\.\d+)?|\b\d+\s*(?:pounds|dollars|euros)\b", re.IGNORECASE)
PERCENT_RE = re.compile(r"\b\d+(?:\.\d+)?\s*%")

MAX_SCORE = 10.0


class ContentClassifier:
    """
    Additive multi-signal scorer for regulatory document types.
    Keyword and pattern tables are copied at construction; add_keywords is a
    setup-time operation and must not run concurrently with classify.
    """

    def __init__(
        self,
        keywords: Optional[Mapping[DocumentType, Sequence[str]]] = None,
        patterns: Optional[Mapping[DocumentType, Sequence[str]]] = None,
        url_patterns: Optional[Sequence[tuple[str, DocumentType]]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._logger = logger or logging.getLogger(__name__)
        source = DOCUMENT_KEYWORDS if keywords is None else keywords
        self._keyword_map: dict[DocumentType, list[str]] = {
            doc_type: list(words) for doc_type, words in source.items()
        }
        pattern_source = DOCUMENT_PATTERNS if patterns is None else patterns
        self._pattern_map: dict[DocumentType, list[re.Pattern]] = {
            doc_type: [re.compile(p, re.IGNORECASE) for p in pats]
            for doc_type, pats in pattern_source.items()
        }
        self._url_patterns = [
            (re.compile(p), doc_type)
            for p, doc_type in (URL_TYPE_PATTERNS if url_patterns is None else url_patterns)
        ]
        self._word_res: dict[str, re.Pattern] = {}
        for words in self._keyword_map.values():
            self._compile_words(words)

    @property
    def keyword_map(self) -> dict[DocumentType, list[str]]:
        return {doc_type: list(words) for doc_type, words in self._keyword_map.items()}

    def add_keywords(self, document_type: DocumentType, keywords: Iterable[str]) -> None:
        """Append custom keywords for a document type."""
        keywords = list(keywords)
        self._keyword_map.setdefault(document_type, []).extend(keywords)
        self._compile_words(keywords)
        self._logger.info("Added %d custom keywords for %s", len(keywords), document_type.value)

    def add_gambling_keywords(self) -> None:
        """Register the gambling-regulation keyword families."""
        for family, doc_type in GAMBLING_FAMILY_TYPES.items():
            self.add_keywords(doc_type, GAMBLING_KEYWORDS[family])

    def classify(
        self,
        url: str,
        text: str,
        structure: Optional[PageStructure] = None,
    ) -> ClassificationResult:
        """
        Classify a page. Never raises: a failing pass is logged and skipped,
        so the result reflects whichever signals succeeded.
        """
        scores = empty_scores()
        matched: list[str] = []

        try:
            self._analyze_url(url or "", scores)
        except Exception as e:
            self._logger.warning("URL analysis failed for %s: %s", url, e)

        try:
            self._analyze_content(text or "", scores, matched)
        except Exception as e:
            self._logger.warning("Content analysis failed for %s: %s", url, e)

        if structure is not None:
            try:
                self._analyze_structure(structure, scores)
            except Exception as e:
                self._logger.warning("Structure analysis failed for %s: %s", url, e)

        # sorted() is stable, so ties keep DocumentType declaration order
        ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
        primary_type, primary_score = ranked[0]
        secondary_type = ranked[1][0] if len(ranked) > 1 and ranked[1][1] > 0 else None
        confidence = min(max(primary_score / MAX_SCORE, 0.0), 1.0)

        self._logger.debug(
            "Classified %s as %s with %.0f%% confidence", url, primary_type.value, confidence * 100
        )
        return ClassificationResult(
            primary_type=primary_type,
            secondary_type=secondary_type,
            confidence=confidence,
            type_scores=scores,
            matched_keywords=matched,
        )

    def is_regulatory_document(self, url: str, text: str) -> bool:
        """Regulation, or confidently Guidance/EnforcementAction/LicensingInfo."""
        result = self.classify(url, text)
        is_regulatory = result.primary_type == DocumentType.REGULATION or (
            result.confidence > 0.7
            and result.primary_type in (
                DocumentType.GUIDANCE,
                DocumentType.ENFORCEMENT_ACTION,
                DocumentType.LICENSING_INFO,
            )
        )
        self._logger.debug(
            "Document at %s is %s (confidence %.2f)",
            url,
            "regulatory" if is_regulatory else "non-regulatory",
            result.confidence,
        )
        return is_regulatory

    def _compile_words(self, keywords: Iterable[str]) -> None:
        for keyword in keywords:
            if keyword not in self._word_res:
                self._word_res[keyword] = re.compile(rf"\b{re.escape(keyword.lower())}\b")

    def _analyze_url(self, url: str, scores: dict[DocumentType, float]) -> None:
        url = url.lower()
        for doc_type, keywords in self._keyword_map.items():
            for keyword in keywords:
                kw = keyword.lower()
                if f"/{kw}" in url or f"-{kw}" in url or f"{kw}/" in url:
                    scores[doc_type] += 1.5
                elif kw in url:
                    scores[doc_type] += 0.5

        if url.endswith(".pdf"):
            scores[DocumentType.REGULATION] += 0.5
            scores[DocumentType.GUIDANCE] += 0.5

        for pattern, doc_type in self._url_patterns:
            if pattern.search(url):
                scores[doc_type] += 2.0

    def _analyze_content(
        self,
        text: str,
        scores: dict[DocumentType, float],
        matched: list[str],
    ) -> None:
        text = text.lower()
        for doc_type, keywords in self._keyword_map.items():
            for keyword in keywords:
                count = len(self._word_res[keyword].findall(text))
                if count:
                    scores[doc_type] += min(count * 0.2, 2.0)
                    if keyword not in matched:
                        matched.append(keyword)

        for doc_type, patterns in self._pattern_map.items():
            for pattern in patterns:
                count = len(pattern.findall(text))
                if count:
                    scores[doc_type] += min(count * 0.5, 2.5)

        if len(DATE_RE.findall(text)) > 5:
            scores[DocumentType.REGULATION] += 0.5
            scores[DocumentType.STATISTICS] += 1.0

        money = len(MONEY_RE.findall(text))
        if money:
            scores[DocumentType.ENFORCEMENT_ACTION] += min(money * 0.3, 1.5)

        percentages = len(PERCENT_RE.findall(text))
        if percentages > 3:
            scores[DocumentType.STATISTICS] += min(percentages * 0.2, 1.0)

    def _analyze_structure(self, structure: PageStructure, scores: dict[DocumentType, float]) -> None:
        title = (structure.title or "").lower()
        description = (structure.meta_description or "").lower()
        for doc_type, keywords in self._keyword_map.items():
            for keyword in keywords:
                kw = keyword.lower()
                if title and kw in title:
                    scores[doc_type] += 1.5
                if description and kw in description:
                    scores[doc_type] += 0.5

        if structure.table_count:
            scores[DocumentType.STATISTICS] += min(structure.table_count * 0.5, 1.5)
        if structure.form_count:
            scores[DocumentType.LICENSING_INFO] += 1.0
        if structure.pdf_link_count:
            scores[DocumentType.REGULATION] += 0.5
            scores[DocumentType.GUIDANCE] += 0.5
