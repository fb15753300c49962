"""
Checks a change request before it is applied.

Every change is checked on its own (known operation, required fields, closed
types and kinds, selector shapes). When a store is given, concept selectors
are also looked up; one that resolves neither in the store nor to a concept
created earlier in the same request only earns a warning, since the change
may still succeed once earlier changes have run.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..normalize import normalize
from ..relations import (
    CONCEPT_TYPES,
    RELATION_KINDS,
    is_valid_concept_type,
    is_valid_relation_kind,
)
from .schema import (
    Change,
    ChangeError,
    ChangeRequest,
    ChangeWarning,
    OperationType,
    REQUIRED_FIELDS,
    RequestValidation,
    missing_fields,
)

if TYPE_CHECKING:
    from ..store import ConceptStore

logger = logging.getLogger(__name__)

_OPERATIONS = frozenset(op.value for op in OperationType)


def validate_change_request(
    request: ChangeRequest,
    store: ConceptStore | None = None,
) -> RequestValidation:
    """Validate every change of *request*, optionally against *store*."""
    validation = RequestValidation()
    created: set[str] = set()

    for index, change in enumerate(request.changes):
        _ChangeCheck(change, index, validation).run(store, created)

        name = change.params.get("name")
        if change.operation == OperationType.CREATE_CONCEPT.value and isinstance(name, str):
            created.add(normalize(name))

    logger.debug(
        "Validated %d change(s): %d error(s), %d warning(s)",
        len(request.changes), validation.error_count, validation.warning_count,
    )
    return validation


class _ChangeCheck:
    """Collects the findings for a single change into a shared result."""

    def __init__(self, change: Change, index: int, validation: RequestValidation) -> None:
        self.change = change
        self.index = index
        self.validation = validation
        self.failed = False

    def error(self, field: str, message: str) -> None:
        self.failed = True
        self.validation.errors.append(ChangeError(
            index=self.index,
            operation=self.change.operation,
            field=field,
            message=message,
            line_number=self.change.line_number,
        ))

    def warn(self, message: str) -> None:
        self.validation.warnings.append(ChangeWarning(
            index=self.index,
            operation=self.change.operation,
            message=message,
            line_number=self.change.line_number,
        ))

    def run(self, store: ConceptStore | None, created: set[str]) -> None:
        op = self.change.operation
        params = self.change.params

        if op not in _OPERATIONS:
            self.error(
                "operation",
                f"Unknown operation '{op}'. Valid: {', '.join(sorted(_OPERATIONS))}",
            )
            return

        for name in missing_fields(op, params):
            self.error(name, f"Missing required field '{name}'")
        if self.failed:
            return

        if op == OperationType.CREATE_CONCEPT.value:
            self._check_create(params)
        elif op == OperationType.ADD_RELATION.value:
            self._check_add_relation(params)
        elif op == OperationType.REMOVE_RELATION.value:
            relation = params["relation"]
            if isinstance(relation, bool) or not isinstance(relation, int):
                self.error("relation", "Field 'relation' must be an integer relation id")

        if "concept" in REQUIRED_FIELDS[op] and not _is_selector(params["concept"]):
            self.error("concept", f"Invalid concept selector: {params['concept']!r}")

        if store is not None and not self.failed:
            self._check_references(store, created)

    def _check_create(self, params: dict[str, Any]) -> None:
        name = params["name"]
        if not isinstance(name, str) or not normalize(name):
            self.error("name", "Field 'name' must be a non-blank string")
        concept_type = params.get("type")
        if concept_type is not None and not is_valid_concept_type(concept_type):
            self.error(
                "type",
                f"Unknown concept type '{concept_type}'. "
                f"Valid: {', '.join(sorted(CONCEPT_TYPES))}",
            )

    def _check_add_relation(self, params: dict[str, Any]) -> None:
        if not is_valid_relation_kind(params["kind"]):
            self.error(
                "kind",
                f"Unknown relation kind '{params['kind']}'. "
                f"Valid: {', '.join(sorted(RELATION_KINDS))}",
            )
        for target in self.change.targets:
            if not _is_selector(target):
                self.error("targets", f"Invalid concept selector: {target!r}")

    def _check_references(self, store: ConceptStore, created: set[str]) -> None:
        selectors: list[Any] = []
        if self.change.concept is not None:
            selectors.append(self.change.concept)
        if self.change.operation == OperationType.ADD_RELATION.value:
            selectors.extend(self.change.targets)
        for selector in selectors:
            if not _resolves(selector, store, created):
                self.warn(f"Concept {selector!r} not found (yet)")


def _is_selector(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and bool(value.strip())


def _resolves(selector: Any, store: ConceptStore, created: set[str]) -> bool:
    if store.find_concept(selector) is not None:
        return True
    return isinstance(selector, str) and normalize(selector) in created
