"""Concept type and relation kind tables for concept-editor."""

from __future__ import annotations

from concept_editor.exceptions import ValidationError
from concept_editor.models import ConceptType, RelationKind

# Only these kinds are expanded during resolution; every other kind is
# descriptive metadata.
COMBINATOR_KINDS: frozenset[RelationKind] = frozenset({
    RelationKind.UNION,
    RelationKind.EXAMPLE,
})

# Related-word categories of a word-relationship source and the relation kind
# each one becomes. Categories not listed here are ignored.
#   "equivalent", "related-word", "form", "inflected-form", "primary",
#   "same-context", "verb-form", "verb-stem"
TRAINING_RELATIONSHIPS: dict[str, RelationKind] = {
    "synonym": RelationKind.SYNONYM,
    "antonym": RelationKind.ANTONYM,
    "variant": RelationKind.IDENTICAL,
    "hypernym": RelationKind.SUBSET,
    "hyponym": RelationKind.SUPERSET,
}

CONCEPT_TYPES: frozenset[str] = frozenset(m.value for m in ConceptType)
RELATION_KINDS: frozenset[str] = frozenset(m.value for m in RelationKind)


def parse_concept_type(value: str | ConceptType | None) -> ConceptType:
    """Convert user input into a ConceptType; ``None`` means UNTYPED."""
    if value is None:
        return ConceptType.UNTYPED
    if isinstance(value, ConceptType):
        return value
    key = str(value).strip().upper()
    if key not in CONCEPT_TYPES:
        raise ValidationError(
            f"Type {value!r} does not exist. "
            f"Valid: {', '.join(sorted(CONCEPT_TYPES))}"
        )
    return ConceptType(key)


def parse_relation_kind(value: str | RelationKind) -> RelationKind:
    """Convert user input into a RelationKind."""
    if isinstance(value, RelationKind):
        return value
    key = str(value).strip().upper()
    if key not in RELATION_KINDS:
        raise ValidationError(
            f"No such relation: {value!r}. "
            f"Valid: {', '.join(sorted(RELATION_KINDS))}"
        )
    return RelationKind(key)


def is_valid_concept_type(value: str) -> bool:
    """Check if a string names a concept type (case-insensitive)."""
    return str(value).strip().upper() in CONCEPT_TYPES


def is_valid_relation_kind(value: str) -> bool:
    """Check if a string names a relation kind (case-insensitive)."""
    return str(value).strip().upper() in RELATION_KINDS


def is_combinator(kind: RelationKind) -> bool:
    """Check if a relation kind is expanded by resolution."""
    return kind in COMBINATOR_KINDS


def training_kind(relationship_type: str) -> RelationKind | None:
    """Map a source's related-word category to a relation kind, or None."""
    return TRAINING_RELATIONSHIPS.get(relationship_type)
