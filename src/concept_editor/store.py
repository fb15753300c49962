"""ConceptStore: main entry point for the concept-editor library."""

from __future__ import annotations

import logging
from collections.abc import Generator, Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from concept_editor.exceptions import (
    NotFoundError,
    UnknownConceptError,
    ValidationError,
)
from concept_editor.models import (
    Concept,
    ConceptType,
    Relation,
    RelationKind,
    Snapshot,
)
from concept_editor.normalize import normalize
from concept_editor.relations import parse_concept_type, parse_relation_kind

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "v1"

Selector = str | int


class ConceptStore:
    """Owns every concept and relation of one graph.

    Concept ids and relation ids come from two independent counters that
    only ever grow, so an id is never handed out twice even after deletion.
    """

    def __init__(self, *, version: str = SNAPSHOT_VERSION) -> None:
        self.version = version
        self._concepts: list[Concept] = []
        self._max_concept_id = 0
        self._max_relation_id = 0

    def __len__(self) -> int:
        return len(self._concepts)

    def __iter__(self) -> Iterator[Concept]:
        return iter(tuple(self._concepts))

    @property
    def concepts(self) -> tuple[Concept, ...]:
        return tuple(self._concepts)

    @property
    def max_concept_id(self) -> int:
        return self._max_concept_id

    @property
    def max_relation_id(self) -> int:
        return self._max_relation_id

    # ------------------------------------------------------------------
    # Concepts
    # ------------------------------------------------------------------

    def create_concept(
        self,
        name: str,
        type: str | ConceptType | None = None,
    ) -> Concept:
        concept_type = parse_concept_type(type)
        normalized = normalize(name)
        if not normalized:
            raise ValidationError("Concept name cannot be blank")

        shadowing = self.lookup(normalized)
        if shadowing is not None and shadowing.name == normalized:
            logger.warning(
                "Concept %r is shadowed by existing concept %d",
                normalized, shadowing.id,
            )

        self._max_concept_id += 1
        concept = Concept(
            id=self._max_concept_id,
            name=normalized,
            type=concept_type,
        )
        self._concepts.append(concept)
        logger.debug("Created concept %d %s[%s]", concept.id, concept.name,
                     concept.type.value)
        return concept

    def lookup(self, normalized_name: str) -> Concept | None:
        """Find a concept by an already-normalized name, then by id."""
        for concept in self._concepts:
            if concept.name == normalized_name:
                return concept

        # By default, just look by id.
        candidate = normalized_name.strip()
        if candidate.isdecimal():
            return self.concept_by_id(int(candidate))
        return None

    def find_concept(self, selector: Selector) -> Concept | None:
        """Find a concept by name (first match wins) or by id."""
        if isinstance(selector, bool) or not isinstance(selector, (str, int)):
            raise ValidationError(
                f"Concept selector must be a name or an id, got {selector!r}"
            )
        if isinstance(selector, int):
            return self.concept_by_id(selector)
        return self.lookup(normalize(selector))

    def get_concept(self, selector: Selector | Concept) -> Concept:
        if isinstance(selector, Concept):
            return self._owned(selector)
        concept = self.find_concept(selector)
        if concept is None:
            raise NotFoundError(f"No such concept found: {selector!r}")
        return concept

    def concept_by_id(self, concept_id: int) -> Concept | None:
        for concept in self._concepts:
            if concept.id == concept_id:
                return concept
        return None

    def remove_concept(self, selector: Selector | Concept) -> None:
        """Remove one concept; relations elsewhere that target it are kept."""
        concept = self.get_concept(selector)
        for index, c in enumerate(self._concepts):
            if c is concept:
                del self._concepts[index]
                break
        logger.debug("Removed concept %d %s", concept.id, concept.name)

    def _owned(self, concept: Concept) -> Concept:
        if not any(c is concept for c in self._concepts):
            raise NotFoundError(
                f"Concept {concept.id} ({concept.name!r}) is not in this store"
            )
        return concept

    # ------------------------------------------------------------------
    # Relations
    # ------------------------------------------------------------------

    def add_relation(
        self,
        owner: Selector | Concept,
        kind: str | RelationKind,
        targets: Iterable[Selector],
    ) -> Relation:
        """Append a relation of *kind* from *owner* to every target.

        All targets are resolved before anything changes: one unknown
        target raises UnknownConceptError and leaves the store untouched.
        """
        concept = self.get_concept(owner)
        relation_kind = parse_relation_kind(kind)

        target_ids: list[int] = []
        for selector in targets:
            target = self.find_concept(selector)
            if target is None:
                raise UnknownConceptError(selector)
            target_ids.append(target.id)
        if not target_ids:
            raise ValidationError("A relation needs at least one target")

        self._max_relation_id += 1
        relation = Relation(
            id=self._max_relation_id,
            kind=relation_kind,
            targets=tuple(target_ids),
        )
        concept.relations.append(relation)
        logger.debug(
            "Related %s %s of %s (id=%d)",
            concept.name, relation_kind.value, list(relation.targets),
            relation.id,
        )
        return relation

    def get_relation(self, owner: Selector | Concept, relation_id: int) -> Relation:
        concept = self.get_concept(owner)
        for relation in concept.relations:
            if relation.id == relation_id:
                return relation
        raise NotFoundError(
            f"No such relation found in concept {concept.id}: {relation_id}"
        )

    def remove_relation(self, owner: Selector | Concept, relation_id: int) -> None:
        concept = self.get_concept(owner)
        for index, relation in enumerate(concept.relations):
            if relation.id == relation_id:
                del concept.relations[index]
                logger.debug("Removed relation %d from %s", relation_id,
                             concept.name)
                return
        raise NotFoundError(
            f"No such relation found in concept {concept.id}: {relation_id}"
        )

    # ------------------------------------------------------------------
    # Snapshot / restore
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            version=self.version,
            max_concept_id=self._max_concept_id,
            max_relation_id=self._max_relation_id,
            concepts=tuple(_copy_concept(c) for c in self._concepts),
        )

    def restore(self, snapshot: Snapshot) -> None:
        """Replace the whole store with *snapshot*, counters included.

        The record is checked first; if it is rejected nothing changes.
        """
        _check_snapshot(snapshot)
        concepts = [_copy_concept(c) for c in snapshot.concepts]
        self.version = snapshot.version
        self._concepts = concepts
        self._max_concept_id = snapshot.max_concept_id
        self._max_relation_id = snapshot.max_relation_id

    @contextmanager
    def transaction(self) -> Generator[ConceptStore, None, None]:
        """Group mutations; any exception restores the state on entry."""
        saved = self.snapshot()
        try:
            yield self
        except BaseException:
            self.restore(saved)
            raise

    def save(self, path: str | Path) -> None:
        from concept_editor.snapshot import dump_snapshot

        dump_snapshot(self.snapshot(), path)

    @classmethod
    def load(cls, path: str | Path) -> ConceptStore:
        from concept_editor.snapshot import load_snapshot

        store = cls()
        store.restore(load_snapshot(path))
        return store

    # ------------------------------------------------------------------
    # Phrases
    # ------------------------------------------------------------------

    def segment(self, phrase: str) -> list[Concept]:
        from concept_editor.segmenter import PhraseSegmenter

        return PhraseSegmenter(self).segment(phrase)

    def resolve(self, selector: Selector | Concept) -> set[Concept]:
        from concept_editor.resolver import RelationResolver

        return RelationResolver(self).resolve(self.get_concept(selector))

    def describe(self, phrase: str) -> set[Concept]:
        """Segment *phrase* and resolve every concept it mentions."""
        from concept_editor.resolver import RelationResolver

        return RelationResolver(self).describe(self.segment(phrase))


def _check_snapshot(snapshot: Snapshot) -> None:
    seen_concepts: set[int] = set()
    seen_relations: set[int] = set()
    for concept in snapshot.concepts:
        if concept.id in seen_concepts:
            raise ValidationError(f"Duplicate concept id in snapshot: {concept.id}")
        seen_concepts.add(concept.id)
        for relation in concept.relations:
            if relation.id in seen_relations:
                raise ValidationError(
                    f"Duplicate relation id in snapshot: {relation.id}"
                )
            seen_relations.add(relation.id)

    if seen_concepts and max(seen_concepts) > snapshot.max_concept_id:
        raise ValidationError(
            f"Snapshot concept counter {snapshot.max_concept_id} is below "
            f"concept id {max(seen_concepts)}"
        )
    if seen_relations and max(seen_relations) > snapshot.max_relation_id:
        raise ValidationError(
            f"Snapshot relation counter {snapshot.max_relation_id} is below "
            f"relation id {max(seen_relations)}"
        )


def _copy_concept(concept: Concept) -> Concept:
    # Relations are immutable, only the list needs copying.
    return Concept(
        id=concept.id,
        name=concept.name,
        type=concept.type,
        relations=list(concept.relations),
    )
