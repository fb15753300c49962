"""concept-editor: a concept/relation graph with phrase description."""

__version__ = "0.1.0"

from .exceptions import (
    ConceptEditorError as ConceptEditorError,
    NotFoundError as NotFoundError,
    SnapshotError as SnapshotError,
    UnknownConceptError as UnknownConceptError,
    UnmatchedPhraseError as UnmatchedPhraseError,
    ValidationError as ValidationError,
)

from .models import (
    Concept as Concept,
    ConceptType as ConceptType,
    Relation as Relation,
    RelationKind as RelationKind,
    Snapshot as Snapshot,
    ValidationResult as ValidationResult,
    ValidationSeverity as ValidationSeverity,
)

from .normalize import (
    normalize as normalize,
    stem as stem,
)

from .store import ConceptStore as ConceptStore
from .segmenter import PhraseSegmenter as PhraseSegmenter
from .resolver import RelationResolver as RelationResolver

from .snapshot import (
    dump_snapshot as dump_snapshot,
    load_snapshot as load_snapshot,
)

from .validator import validate_store as validate_store

__all__ = [
    # Store and algorithms
    "ConceptStore",
    "PhraseSegmenter",
    "RelationResolver",
    # Models
    "Concept",
    "ConceptType",
    "Relation",
    "RelationKind",
    "Snapshot",
    "ValidationResult",
    "ValidationSeverity",
    # Functions
    "normalize",
    "stem",
    "dump_snapshot",
    "load_snapshot",
    "validate_store",
    # Exceptions
    "ConceptEditorError",
    "NotFoundError",
    "SnapshotError",
    "UnknownConceptError",
    "UnmatchedPhraseError",
    "ValidationError",
]
