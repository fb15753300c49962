"""Populate a concept store from a word-relationship source."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from concept_editor.models import Concept, RelationKind
from concept_editor.normalize import normalize
from concept_editor.relations import training_kind
from concept_editor.sources import RelatedWordsSource
from concept_editor.store import ConceptStore

logger = logging.getLogger(__name__)


class Trainer:
    """Walks related words and records them as relations between concepts.

    Only the public store primitives are used: ``find_concept``,
    ``create_concept`` and ``add_relation``, and ``save`` after each relation
    when a snapshot path is configured.
    """

    def __init__(
        self,
        store: ConceptStore,
        source: RelatedWordsSource,
        *,
        snapshot_path: str | Path | None = None,
        delay: float = 0.0,
    ) -> None:
        self.store = store
        self.source = source
        self.snapshot_path = Path(snapshot_path) if snapshot_path else None
        self.delay = delay
        self.relations_added = 0

    def train(self, word: str, max_depth: int) -> Concept | None:
        """Train on *word*, recursing into unknown related words.

        Each level of recursion spends one unit of *max_depth*; at zero
        nothing is created. Returns the concept for *word*, or None when
        the depth was already exhausted.
        """
        if max_depth <= 0:
            logger.debug("Max depth reached at %r", word)
            return None

        logger.info("Training on %s", word)
        base = self.store.find_concept(word)
        if base is None:
            base = self.store.create_concept(word)

        if self.delay:
            time.sleep(self.delay)
        relationships = self.source.related_words(word)

        for relationship in relationships:
            kind = training_kind(relationship.relationship_type)
            if kind is None:
                logger.debug("Skipping relationship %s",
                             relationship.relationship_type)
                continue
            for related in relationship.words:
                self._relate(base, kind, related, max_depth)

        return base

    def _relate(
        self, base: Concept, kind: RelationKind, word: str, max_depth: int
    ) -> None:
        if not normalize(word):
            logger.debug("Skipping blank related word %r", word)
            return
        concept = self.store.find_concept(word)

        # If the word doesn't exist, train on it first.
        if concept is None:
            self.train(word, max_depth - 1)
            concept = self.store.find_concept(word)
        if concept is None:
            logger.debug("No concept for %r at this depth, skipping", word)
            return
        if concept is base:
            return
        if any(r.kind is kind and r.targets == (concept.id,)
               for r in base.relations):
            return

        logger.info("Relating %s => %s (%s)", base.name, concept.name, kind.value)
        self.store.add_relation(base, kind, [concept.id])
        self.relations_added += 1

        if self.snapshot_path is not None:
            self.store.save(self.snapshot_path)
