"""Validation engine for concept-editor graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from concept_editor.models import Concept, ValidationResult, ValidationSeverity
from concept_editor.relations import is_combinator

if TYPE_CHECKING:
    from concept_editor.store import ConceptStore


def validate_store(store: ConceptStore) -> list[ValidationResult]:
    """Run all validation rules."""
    results: list[ValidationResult] = []
    results.extend(_val_con_001(store))
    results.extend(_val_rel_001(store))
    results.extend(_val_rel_002(store))
    results.extend(_val_rel_003(store))
    return results


def validate_concept(store: ConceptStore, concept: Concept) -> list[ValidationResult]:
    """Validate the relations owned by a single concept."""
    return [
        r for r in validate_store(store)
        if (r.entity_type == "concept" and r.entity_id == concept.id)
        or (r.entity_type == "relation"
            and r.details is not None
            and r.details.get("owner") == concept.id)
    ]


# ------------------------------------------------------------------
# Individual rule implementations
# ------------------------------------------------------------------

def _val_con_001(store: ConceptStore) -> list[ValidationResult]:
    """Concept shadowed by an earlier concept with the same name."""
    results = []
    first_by_name: dict[str, int] = {}
    for concept in store.concepts:
        first = first_by_name.setdefault(concept.name, concept.id)
        if first != concept.id:
            results.append(ValidationResult(
                rule_id="VAL-CON-001",
                severity=ValidationSeverity.WARNING.value,
                entity_type="concept",
                entity_id=concept.id,
                message=(
                    f"Concept {concept.name!r} is shadowed by concept {first} "
                    "and cannot be selected by name"
                ),
                details={"shadowed_by": first},
            ))
    return results


def _val_rel_001(store: ConceptStore) -> list[ValidationResult]:
    """Relation targets that reference no existing concept."""
    results = []
    existing = {c.id for c in store.concepts}
    for concept in store.concepts:
        for relation in concept.relations:
            dangling = [t for t in relation.targets if t not in existing]
            if dangling:
                results.append(ValidationResult(
                    rule_id="VAL-REL-001",
                    severity=ValidationSeverity.WARNING.value,
                    entity_type="relation",
                    entity_id=relation.id,
                    message=f"Relation targets missing concepts: {dangling}",
                    details={"owner": concept.id, "missing": dangling},
                ))
    return results


def _val_rel_002(store: ConceptStore) -> list[ValidationResult]:
    """Concepts that reach themselves through UNION/EXAMPLE relations."""
    results = []
    edges: dict[int, set[int]] = {
        c.id: {
            t
            for r in c.relations if is_combinator(r.kind)
            for t in r.targets
        }
        for c in store.concepts
    }
    for concept in store.concepts:
        if _reaches(edges, concept.id, concept.id):
            results.append(ValidationResult(
                rule_id="VAL-REL-002",
                severity=ValidationSeverity.WARNING.value,
                entity_type="concept",
                entity_id=concept.id,
                message=(
                    f"Concept {concept.name!r} is part of a UNION/EXAMPLE cycle"
                ),
                details=None,
            ))
    return results


def _val_rel_003(store: ConceptStore) -> list[ValidationResult]:
    """Relations without any target."""
    results = []
    for concept in store.concepts:
        for relation in concept.relations:
            if not relation.targets:
                results.append(ValidationResult(
                    rule_id="VAL-REL-003",
                    severity=ValidationSeverity.ERROR.value,
                    entity_type="relation",
                    entity_id=relation.id,
                    message=f"{relation.kind.value} relation has no targets",
                    details={"owner": concept.id},
                ))
    return results


def _reaches(edges: dict[int, set[int]], start: int, goal: int) -> bool:
    stack = list(edges.get(start, ()))
    seen: set[int] = set()
    while stack:
        node = stack.pop()
        if node == goal:
            return True
        if node in seen:
            continue
        seen.add(node)
        stack.extend(edges.get(node, ()))
    return False
