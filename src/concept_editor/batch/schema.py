"""Operations, field tables and result records of a batch change request."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class OperationType(str, Enum):
    """Store mutations a change request may contain."""

    CREATE_CONCEPT = "create_concept"
    ADD_RELATION = "add_relation"
    REMOVE_RELATION = "remove_relation"
    REMOVE_CONCEPT = "remove_concept"


REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    OperationType.CREATE_CONCEPT.value: ("name",),
    OperationType.ADD_RELATION.value: ("concept", "kind", "targets"),
    OperationType.REMOVE_RELATION.value: ("concept", "relation"),
    OperationType.REMOVE_CONCEPT.value: ("concept",),
}

OPTIONAL_FIELDS: dict[str, tuple[str, ...]] = {
    OperationType.CREATE_CONCEPT.value: ("type",),
    OperationType.ADD_RELATION.value: (),
    OperationType.REMOVE_RELATION.value: (),
    OperationType.REMOVE_CONCEPT.value: (),
}


def missing_fields(operation: str, params: dict[str, Any]) -> list[str]:
    """Required fields of *operation* that are absent or empty in *params*."""
    return [
        name for name in REQUIRED_FIELDS.get(operation, ())
        if params.get(name) in (None, "", [])
    ]


@dataclass(slots=True)
class Change:
    """One operation of a change request and its raw parameters."""

    operation: str
    params: dict[str, Any]
    line_number: int | None = None

    @property
    def concept(self) -> Any:
        """Selector of the concept the change applies to, if any."""
        return self.params.get("concept")

    @property
    def targets(self) -> list[Any]:
        # A lone selector is accepted in place of a one-element list.
        targets = self.params.get("targets")
        if targets is None:
            return []
        return targets if isinstance(targets, list) else [targets]


@dataclass(slots=True)
class ChangeRequest:
    changes: list[Change]
    session_name: str | None = None
    session_description: str | None = None
    source_file: Path | None = None


@dataclass(frozen=True, slots=True)
class ChangeError:
    """A problem that keeps a change from being applied."""

    index: int
    operation: str
    field: str
    message: str
    line_number: int | None = None


@dataclass(frozen=True, slots=True)
class ChangeWarning:
    """A change that is well formed but will probably fail or surprise."""

    index: int
    operation: str
    message: str
    line_number: int | None = None


@dataclass(slots=True)
class RequestValidation:
    errors: list[ChangeError] = field(default_factory=list)
    warnings: list[ChangeWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


@dataclass(frozen=True, slots=True)
class ChangeResult:
    """Outcome of applying (or simulating) one change."""

    index: int
    operation: str
    success: bool
    message: str
    target: str | None = None
    created_id: int | None = None
    error: str | None = None


@dataclass(slots=True)
class BatchResult:
    """Outcome of a whole change request.

    Changes after the first failure of an atomic batch are never attempted
    and count as skipped.
    """

    total_count: int
    success_count: int
    failure_count: int
    changes: list[ChangeResult]
    duration_seconds: float
    rolled_back: bool = False

    @property
    def skipped_count(self) -> int:
        return self.total_count - self.success_count - self.failure_count
