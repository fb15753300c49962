"""Mapping of a raw phrase onto the concepts of a store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from concept_editor.exceptions import UnmatchedPhraseError
from concept_editor.models import Concept
from concept_editor.normalize import split_words, stem

if TYPE_CHECKING:
    from concept_editor.store import ConceptStore

logger = logging.getLogger(__name__)


class PhraseSegmenter:
    """Greedy longest-prefix segmentation of phrases into concepts.

    At each position the longest run of words naming a concept wins and is
    never revisited, so a phrase has exactly one segmentation for a given
    store: with both "foo bar" and "foo" registered, "foo bar" is always
    the single concept "foo bar".
    """

    def __init__(self, store: ConceptStore) -> None:
        self._store = store

    def segment(self, phrase: str) -> list[Concept]:
        """Return the concepts named by *phrase*, in phrase order.

        Raises:
            UnmatchedPhraseError: the leading remaining word matches no
                concept, even alone. The error carries every unconsumed
                (normalized) word.
        """
        words = [stem(w) for w in split_words(phrase)]
        matched: list[Concept] = []

        while words:
            concept, consumed = self._match_prefix(words)
            if concept is None:
                raise UnmatchedPhraseError(words)
            logger.debug("Matched %r to concept %d", " ".join(words[:consumed]),
                         concept.id)
            matched.append(concept)
            words = words[consumed:]

        return matched

    def _match_prefix(self, words: list[str]) -> tuple[Concept | None, int]:
        # Try the whole remainder first, then drop words from the right.
        for length in range(len(words), 0, -1):
            concept = self._store.lookup(" ".join(words[:length]))
            if concept is not None:
                return concept, length
        return None, 0
