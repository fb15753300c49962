"""Custom exception hierarchy for concept-editor."""

from __future__ import annotations


class ConceptEditorError(Exception):
    """Base exception for all concept-editor errors."""


class ValidationError(ConceptEditorError):
    """Invalid data (unknown concept type or relation kind, blank name)."""


class NotFoundError(ConceptEditorError):
    """Concept or relation doesn't exist in the store."""


class UnknownConceptError(NotFoundError):
    """A relation target does not resolve to any concept."""

    def __init__(self, selector: str | int) -> None:
        self.selector = selector
        super().__init__(f"No such concept found: {selector!r}")


class UnmatchedPhraseError(ConceptEditorError):
    """No concept could be discerned for the rest of a phrase."""

    def __init__(self, words: tuple[str, ...] | list[str]) -> None:
        self.words = tuple(words)
        self.remainder = " ".join(self.words)
        super().__init__(
            f"No concept could be discerned for the phrase {self.remainder!r}"
        )


class SnapshotError(ConceptEditorError):
    """Malformed snapshot document."""
