"""JSON codec for full-store snapshots."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from concept_editor.exceptions import SnapshotError, ValidationError
from concept_editor.models import Concept, Relation, Snapshot
from concept_editor.relations import parse_concept_type, parse_relation_kind

logger = logging.getLogger(__name__)


def dump_snapshot(snapshot: Snapshot, destination: str | Path) -> None:
    """Write *snapshot* to *destination* as one JSON document.

    The document is written next to the destination and moved into place,
    so an existing snapshot is never left half-written.
    """
    destination = Path(destination)
    payload = json.dumps(snapshot_to_dict(snapshot), indent=2)

    fd, tmp_path = tempfile.mkstemp(
        prefix=f".{destination.name}.", suffix=".tmp",
        dir=destination.parent,
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_path, destination)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise

    logger.info(
        "Dumped %d concepts to %s", len(snapshot.concepts), destination
    )


def load_snapshot(source: str | Path) -> Snapshot:
    """Read a snapshot written by :func:`dump_snapshot`.

    Raises:
        SnapshotError: the file is not a snapshot document
        FileNotFoundError: the file does not exist
    """
    source = Path(source)
    with open(source, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Invalid snapshot JSON in {source}: {e}") from e

    snapshot = snapshot_from_dict(data)
    logger.info("Loading %s (version %s)", source, snapshot.version)
    return snapshot


def snapshot_to_dict(snapshot: Snapshot) -> dict[str, Any]:
    return {
        "version": snapshot.version,
        "max_concept_id": snapshot.max_concept_id,
        "max_relation_id": snapshot.max_relation_id,
        "concepts": [_concept_to_dict(c) for c in snapshot.concepts],
    }


def snapshot_from_dict(data: Any) -> Snapshot:
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot root must be a mapping")

    try:
        concepts_data = data["concepts"]
        if not isinstance(concepts_data, list):
            raise SnapshotError("Field 'concepts' must be a list")
        return Snapshot(
            version=str(data.get("version", "")),
            max_concept_id=_as_int(data["max_concept_id"], "max_concept_id"),
            max_relation_id=_as_int(data["max_relation_id"], "max_relation_id"),
            concepts=tuple(_concept_from_dict(c) for c in concepts_data),
        )
    except KeyError as e:
        raise SnapshotError(f"Missing required field: {e.args[0]!r}") from e
    except ValidationError as e:
        raise SnapshotError(str(e)) from e


def _concept_to_dict(concept: Concept) -> dict[str, Any]:
    return {
        "id": concept.id,
        "name": concept.name,
        "type": concept.type.value,
        "relations": [
            {
                "id": r.id,
                "kind": r.kind.value,
                "targets": list(r.targets),
            }
            for r in concept.relations
        ],
    }


def _concept_from_dict(data: Any) -> Concept:
    if not isinstance(data, dict):
        raise SnapshotError("Each concept must be a mapping")
    if not isinstance(data.get("relations", []), list):
        raise SnapshotError("Field 'relations' must be a list")
    return Concept(
        id=_as_int(data["id"], "concept id"),
        name=str(data["name"]),
        type=parse_concept_type(data.get("type")),
        relations=[_relation_from_dict(r) for r in data.get("relations", [])],
    )


def _relation_from_dict(data: Any) -> Relation:
    if not isinstance(data, dict):
        raise SnapshotError("Each relation must be a mapping")
    targets = data.get("targets", [])
    if not isinstance(targets, list):
        raise SnapshotError("Field 'targets' must be a list")
    return Relation(
        id=_as_int(data["id"], "relation id"),
        kind=parse_relation_kind(data["kind"]),
        targets=tuple(_as_int(t, "relation target") for t in targets),
    )


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SnapshotError(f"Field {field!r} must be an integer, got {value!r}")
    return value
