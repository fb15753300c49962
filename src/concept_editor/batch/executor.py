"""
Applies a change request to a ConceptStore.

Changes go through the store's public mutation methods only. By default a
failing change is recorded and the rest still run; an atomic request runs
inside ``store.transaction()`` and is undone as a whole on the first failure.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..exceptions import ConceptEditorError, ValidationError
from .schema import (
    BatchResult,
    Change,
    ChangeRequest,
    ChangeResult,
    OperationType,
    missing_fields,
)

if TYPE_CHECKING:
    from ..store import ConceptStore

logger = logging.getLogger(__name__)


class _BatchAborted(Exception):
    """Raised inside an atomic batch to roll the store back."""


def execute_change_request(
    request: ChangeRequest,
    store: ConceptStore,
    dry_run: bool = False,
    atomic: bool = False,
) -> BatchResult:
    """Execute a batch change request.

    Args:
        request: The change request to execute
        store: The store to modify
        dry_run: Only report what would be executed
        atomic: Undo every change of the batch on the first failure and
            skip the remaining changes

    Returns:
        BatchResult with one ChangeResult per attempted change
    """
    started = time.monotonic()
    results: list[ChangeResult] = []
    rolled_back = False

    if dry_run:
        results = [
            ChangeResult(
                index=i,
                operation=change.operation,
                success=True,
                message=f"Would execute {change.operation}",
                target=_target_label(change),
            )
            for i, change in enumerate(request.changes)
        ]
    elif atomic:
        try:
            with store.transaction():
                for i, change in enumerate(request.changes):
                    results.append(_apply(change, i, store))
                    if not results[-1].success:
                        raise _BatchAborted()
        except _BatchAborted:
            rolled_back = True
            logger.warning("Batch rolled back after change #%d failed", len(results))
    else:
        results = [_apply(change, i, store) for i, change in enumerate(request.changes)]

    failures = sum(1 for r in results if not r.success)
    return BatchResult(
        total_count=len(request.changes),
        success_count=0 if rolled_back else len(results) - failures,
        failure_count=failures,
        changes=results,
        duration_seconds=time.monotonic() - started,
        rolled_back=rolled_back,
    )


def _apply(change: Change, index: int, store: ConceptStore) -> ChangeResult:
    op = change.operation
    handler = _HANDLERS.get(op)
    if handler is None:
        return ChangeResult(
            index=index,
            operation=op,
            success=False,
            message=f"Unknown operation: {op}",
            error=f"Unknown operation: {op}",
        )

    try:
        missing = missing_fields(op, change.params)
        if missing:
            raise ValidationError(f"Missing required field(s): {', '.join(missing)}")
        message, target, created_id = handler(change, store)
    except ConceptEditorError as e:
        logger.warning("Change #%d (%s) failed: %s", index + 1, op, e)
        return ChangeResult(
            index=index,
            operation=op,
            success=False,
            message=f"Error: {e}",
            target=_target_label(change),
            error=str(e),
        )

    return ChangeResult(
        index=index,
        operation=op,
        success=True,
        message=message,
        target=target,
        created_id=created_id,
    )


def _target_label(change: Change) -> str:
    if change.concept is not None:
        return str(change.concept)
    return str(change.params.get("name", "new concept"))


# Each handler returns (message, target name, id of what it created).
_Outcome = tuple[str, str, int | None]


def _create_concept(change: Change, store: ConceptStore) -> _Outcome:
    concept = store.create_concept(str(change.params["name"]), change.params.get("type"))
    message = f"Created concept {concept.id}) {concept.name}[{concept.type.value}]"
    return message, concept.name, concept.id


def _add_relation(change: Change, store: ConceptStore) -> _Outcome:
    concept = store.get_concept(change.concept)
    relation = store.add_relation(concept, change.params["kind"], change.targets)
    message = f"Added {relation.kind.value} relation {relation.id} to {concept.name}"
    return message, concept.name, relation.id


def _remove_relation(change: Change, store: ConceptStore) -> _Outcome:
    concept = store.get_concept(change.concept)
    raw = change.params["relation"]
    if isinstance(raw, int) and not isinstance(raw, bool):
        relation_id = raw
    elif isinstance(raw, str) and raw.strip().isdecimal():
        relation_id = int(raw)
    else:
        raise ValidationError(f"Invalid relation id: {raw!r}")
    store.remove_relation(concept, relation_id)
    return f"Removed relation {relation_id} from {concept.name}", concept.name, None


def _remove_concept(change: Change, store: ConceptStore) -> _Outcome:
    concept = store.get_concept(change.concept)
    store.remove_concept(concept)
    return f"Removed concept {concept.id} {concept.name}", concept.name, None


_HANDLERS: dict[str, Callable[[Change, ConceptStore], _Outcome]] = {
    OperationType.CREATE_CONCEPT.value: _create_concept,
    OperationType.ADD_RELATION.value: _add_relation,
    OperationType.REMOVE_RELATION.value: _remove_relation,
    OperationType.REMOVE_CONCEPT.value: _remove_concept,
}
