"""Change tool - score the regulatory impact of a content change."""

import logging
import re
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Optional

from ..config.taxonomy import IMPORTANT_KEYWORDS, REGULATORY_CHANGE_PATTERNS
from ..models.change_result import ChangeType, RegulatoryChangeResult, RegulatoryImpact
from .diff_tool import BaseDiff, ParagraphDiff

logger = logging.getLogger(__name__)

EXCERPTS_PER_PATTERN = 3
MAX_EXCERPTS = 5


def extract_sentence(text: str, index: int) -> str:
    """Sentence around index, bounded by the nearest periods on either side."""
    start = text.rfind(".", 0, index + 1)
    start = 0 if start == -1 else start + 1
    end = text.find(".", index)
    end = len(text) if end == -1 else end + 1
    return text[start:end].strip()


def calculate_impact(
    regulatory_patterns: Mapping[str, int],
    keyword_count: int,
) -> RegulatoryImpact:
    """Map pattern and keyword counts to an impact level. First match wins."""
    total = sum(regulatory_patterns.values())
    if total > 10 or keyword_count > 3 or regulatory_patterns.get("RequirementChange", 0) > 5:
        return RegulatoryImpact.HIGH
    if total > 5 or keyword_count > 1:
        return RegulatoryImpact.MEDIUM
    if total > 0 or keyword_count > 0:
        return RegulatoryImpact.LOW
    return RegulatoryImpact.NONE


def generate_impact_summary(result: RegulatoryChangeResult) -> str:
    """Human-readable report of a change result."""
    lines = [
        f"Regulatory Change Analysis for: {result.url}",
        f"Change Type: {result.change_type.value}",
        f"Regulatory Impact: {result.regulatory_impact.value}",
        "",
    ]
    if result.regulatory_patterns:
        lines.append("Regulatory Patterns Detected:")
        lines.extend(f"- {name}: {count} instances" for name, count in result.regulatory_patterns.items())
        lines.append("")
    if result.important_keywords_found:
        lines.append("Important Regulatory Keywords:")
        lines.extend(f"- {kw}" for kw in result.important_keywords_found)
        lines.append("")
    if result.regulatory_excerpts:
        lines.append("Key Regulatory Excerpts:")
        lines.extend(f'- "{excerpt}"' for excerpt in result.regulatory_excerpts[:MAX_EXCERPTS])
    return "\n".join(lines).rstrip() + "\n"


class RegulatoryChangeDetector:
    """
    Detect changes between two text snapshots and rate their regulatory impact.
    Cosmetic diffs (None/Minor) short-circuit before any pattern scan.
    """

    def __init__(
        self,
        base_diff: Optional[BaseDiff] = None,
        patterns: Optional[Mapping[str, str]] = None,
        important_keywords: Optional[Sequence[str]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._base_diff = base_diff or ParagraphDiff()
        self._patterns = {
            name: re.compile(p, re.IGNORECASE)
            for name, p in (REGULATORY_CHANGE_PATTERNS if patterns is None else patterns).items()
        }
        self._important_keywords = list(
            IMPORTANT_KEYWORDS if important_keywords is None else important_keywords
        )
        self._logger = logger or logging.getLogger(__name__)

    def detect_changes(self, url: str, old_text: str, new_text: str) -> RegulatoryChangeResult:
        """Compare snapshots. Never raises; analysis errors are logged."""
        detected_at = datetime.now(timezone.utc)
        try:
            change_type = self._base_diff.analyze_changes(old_text or "", new_text or "")
            sections = self._base_diff.extract_changed_sections(old_text or "", new_text or "")
        except Exception as e:
            self._logger.warning("Base diff failed for %s: %s", url, e)
            change_type, sections = ChangeType.MAJOR, {"Added": new_text or ""}

        patterns: dict[str, int] = {}
        excerpts: list[str] = []
        keywords: list[str] = []

        if change_type.level > ChangeType.MINOR.level:
            added = sections.get("Added", "")
            try:
                self._scan_patterns(added, patterns, excerpts)
                self._scan_keywords(added, keywords)
            except Exception as e:
                self._logger.warning("Regulatory scan failed for %s: %s", url, e)
            impact = calculate_impact(patterns, len(keywords))
        else:
            impact = RegulatoryImpact.NONE

        result = RegulatoryChangeResult(
            url=url,
            change_type=change_type,
            detected_at=detected_at,
            changed_sections=sections,
            regulatory_patterns=patterns,
            important_keywords_found=keywords,
            regulatory_excerpts=excerpts[:MAX_EXCERPTS],
            regulatory_impact=impact,
        )
        result.impact_summary = generate_impact_summary(result)

        if impact.level > RegulatoryImpact.NONE.level:
            self._logger.info(
                "Detected %s impact change at %s (%d pattern matches)",
                impact.value,
                url,
                result.total_pattern_matches,
            )
        return result

    def _scan_patterns(self, added: str, patterns: dict[str, int], excerpts: list[str]) -> None:
        for name, pattern in self._patterns.items():
            matches = list(pattern.finditer(added))
            if not matches:
                continue
            patterns[name] = len(matches)
            self._logger.debug("Found %d instances of %s pattern in added content", len(matches), name)
            for match in matches[:EXCERPTS_PER_PATTERN]:
                excerpts.append(extract_sentence(added, match.start()))

    def _scan_keywords(self, added: str, keywords: list[str]) -> None:
        folded = added.casefold()
        for keyword in self._important_keywords:
            if keyword.casefold() in folded and keyword not in keywords:
                keywords.append(keyword)
                self._logger.debug("Found important keyword: %s in added content", keyword)
