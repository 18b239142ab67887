"""Diff tool - paragraph-level change magnitude and changed sections."""

import re
from typing import Protocol

from ..models.change_result import ChangeType

PARAGRAPH_SPLIT_RE = re.compile(r"\r\n\r\n|\n\n")


class BaseDiff(Protocol):
    """Change primitive consumed by the regulatory change detector."""

    def analyze_changes(self, old_text: str, new_text: str) -> ChangeType: ...

    def extract_changed_sections(self, old_text: str, new_text: str) -> dict[str, str]: ...


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines, dropping empty paragraphs."""
    return [p.strip() for p in PARAGRAPH_SPLIT_RE.split(text or "") if p.strip()]


class ParagraphDiff:
    """
    Compare two texts paragraph by paragraph (case-insensitive).
    Similarity is the share of old paragraphs still present, relative to the
    larger paragraph count.
    """

    def __init__(self, minor_threshold: float = 0.9, moderate_threshold: float = 0.7):
        self.minor_threshold = minor_threshold
        self.moderate_threshold = moderate_threshold

    def analyze_changes(self, old_text: str, new_text: str) -> ChangeType:
        old_text = old_text or ""
        new_text = new_text or ""
        if old_text.strip() == new_text.strip():
            return ChangeType.NONE
        if not old_text.strip() or not new_text.strip():
            return ChangeType.MAJOR

        old_paragraphs = split_paragraphs(old_text)
        new_folded = {p.casefold() for p in split_paragraphs(new_text)}
        new_count = len(split_paragraphs(new_text))

        common = sum(1 for p in old_paragraphs if p.casefold() in new_folded)
        similarity = common / max(len(old_paragraphs), new_count)

        if similarity > self.minor_threshold:
            return ChangeType.MINOR
        if similarity > self.moderate_threshold:
            return ChangeType.MODERATE
        return ChangeType.MAJOR

    def extract_changed_sections(self, old_text: str, new_text: str) -> dict[str, str]:
        old_paragraphs = split_paragraphs(old_text)
        new_paragraphs = split_paragraphs(new_text)
        old_folded = {p.casefold() for p in old_paragraphs}
        new_folded = {p.casefold() for p in new_paragraphs}

        added = [p for p in new_paragraphs if p.casefold() not in old_folded]
        removed = [p for p in old_paragraphs if p.casefold() not in new_folded]

        sections: dict[str, str] = {}
        if added:
            sections["Added"] = "\n\n".join(added)
        if removed:
            sections["Removed"] = "\n\n".join(removed)
        return sections
