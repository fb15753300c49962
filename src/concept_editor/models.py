"""Domain model dataclasses and enums for concept-editor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ConceptType(str, Enum):
    """Grammatical type of a concept."""

    NOUN = "NOUN"
    VERB = "VERB"
    ADJECTIVE = "ADJECTIVE"
    PRONOUN = "PRONOUN"
    UNTYPED = "UNTYPED"


class RelationKind(str, Enum):
    """Valid kinds of relation from one concept to others."""

    # Base case, a concept that is defined in code
    KEYWORD = "KEYWORD"
    SYNONYM = "SYNONYM"
    ANTONYM = "ANTONYM"
    # Owner is a more general form of the targets (time is a superset of epoch)
    SUPERSET = "SUPERSET"
    SUBSET = "SUBSET"
    IDENTICAL = "IDENTICAL"
    # Targets belong to the owner (a car owns its tires)
    POSSESSIVE = "POSSESSIVE"
    # Owner is defined in terms of several other concepts
    UNION = "UNION"
    # Owner is whatever all of the targets have in common
    EXAMPLE = "EXAMPLE"


class ValidationSeverity(str, Enum):
    """Severity level for validation results."""

    ERROR = "ERROR"
    WARNING = "WARNING"


# ---------------------------------------------------------------------------
# Dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Relation:
    """A typed, directed edge from its owning concept to target concept ids."""

    id: int
    kind: RelationKind
    targets: tuple[int, ...]


@dataclass(eq=False, slots=True)
class Concept:
    """A named, typed node of the graph.

    Concepts compare and hash by identity; the store hands out the same
    object for the same concept until the store is restored.
    """

    id: int
    name: str
    type: ConceptType
    relations: list[Relation] = field(default_factory=list)

    def __repr__(self) -> str:
        return f"Concept(id={self.id}, name={self.name!r}, type={self.type.value})"


@dataclass(frozen=True, slots=True)
class Snapshot:
    """The complete state of a concept store, including id counters."""

    version: str
    max_concept_id: int
    max_relation_id: int
    concepts: tuple[Concept, ...]


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """A single validation finding (error or warning)."""

    rule_id: str
    severity: str
    entity_type: str
    entity_id: int
    message: str
    details: dict[str, Any] | None
