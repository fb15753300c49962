"""Recursive expansion of concepts through UNION and EXAMPLE relations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from concept_editor.models import Concept, Relation, RelationKind
from concept_editor.relations import is_combinator

if TYPE_CHECKING:
    from concept_editor.store import ConceptStore

logger = logging.getLogger(__name__)


class RelationResolver:
    """Resolves concepts into the set of concepts they stand for.

    - UNION: the union of what every target resolves to.
    - EXAMPLE: what every target has in common (intersection).
    - Any other relation kind is descriptive and never expanded.
    - A concept without UNION/EXAMPLE relations stands for itself.

    Targets that no longer exist contribute the empty set. A concept met
    again while it is still being resolved further up the call chain also
    contributes the empty set, which bounds the recursion on cyclic graphs.
    """

    def __init__(self, store: ConceptStore) -> None:
        self._store = store

    def resolve(self, concept: Concept) -> set[Concept]:
        return self._resolve(concept, frozenset())

    def describe(self, concepts: Iterable[Concept]) -> set[Concept]:
        """Union of the resolutions of every concept in *concepts*."""
        resolved: set[Concept] = set()
        for concept in concepts:
            resolved |= self.resolve(concept)
        return resolved

    def _resolve(self, concept: Concept, active: frozenset[int]) -> set[Concept]:
        if concept.id in active:
            logger.debug("Cycle through concept %d (%s), skipping",
                         concept.id, concept.name)
            return set()
        active = active | {concept.id}

        combinators = [r for r in concept.relations if is_combinator(r.kind)]
        if not combinators:
            return {concept}

        resolved: set[Concept] = set()
        for relation in combinators:
            resolved |= self._resolve_relation(relation, active)
        return resolved

    def _resolve_relation(
        self, relation: Relation, active: frozenset[int]
    ) -> set[Concept]:
        per_target = [self._resolve_target(t, active) for t in relation.targets]
        if not per_target:
            return set()
        if relation.kind is RelationKind.UNION:
            return set().union(*per_target)
        return set.intersection(*per_target)

    def _resolve_target(self, concept_id: int, active: frozenset[int]) -> set[Concept]:
        concept = self._store.concept_by_id(concept_id)
        if concept is None:
            logger.debug("Relation target %d no longer exists", concept_id)
            return set()
        return self._resolve(concept, active)
