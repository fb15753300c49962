"""
Reads change requests from YAML.

A request is a mapping with a required, non-empty ``changes`` list and an
optional ``session`` mapping (``name``, ``description``)::

    session:
      name: seed colors
    changes:
      - operation: create_concept
        name: red
        type: ADJECTIVE
      - operation: add_relation
        concept: warm
        kind: UNION
        targets: [red, orange]
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .schema import Change, ChangeRequest


class ParseError(Exception):
    """A change request document is malformed."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        super().__init__(message)


def load_change_request(source: str | Path | dict[str, Any]) -> ChangeRequest:
    """Build a ChangeRequest from a file path, YAML text or parsed mapping.

    Raises:
        ParseError: the document is not a valid change request
        FileNotFoundError: *source* names a file that does not exist
    """
    if isinstance(source, dict):
        return _build_request(source, [], None)

    if isinstance(source, Path) or _looks_like_path(source):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        data, lines = _parse_yaml(path.read_text(encoding="utf-8"), "Empty YAML file")
        return _build_request(data, lines, path)

    data, lines = _parse_yaml(source, "Empty YAML content")
    return _build_request(data, lines, None)


def load_yaml_file(path: str | Path) -> dict[str, Any]:
    """Parse a YAML file into its root mapping without building a request."""
    data, _ = _parse_yaml(Path(path).read_text(encoding="utf-8"), "Empty YAML file")
    return data


def _looks_like_path(text: str) -> bool:
    if "\n" in text:
        return False
    return "/" in text or "\\" in text or text.endswith((".yaml", ".yml"))


def _parse_yaml(text: str, empty_message: str) -> tuple[dict[str, Any], list[int]]:
    """Parse *text*, also returning the 1-based start line of each change."""
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        raise ParseError(f"Invalid YAML: {e}", line=mark.line + 1 if mark else None) from e

    if data is None:
        raise ParseError(empty_message)
    if not isinstance(data, dict):
        raise ParseError("YAML root must be a mapping (dictionary)")
    return data, _change_lines(root)


def _change_lines(root: yaml.Node | None) -> list[int]:
    if not isinstance(root, yaml.MappingNode):
        return []
    for key, value in root.value:
        if key.value == "changes" and isinstance(value, yaml.SequenceNode):
            return [item.start_mark.line + 1 for item in value.value]
    return []


def _build_request(
    data: dict[str, Any],
    lines: list[int],
    source_file: Path | None,
) -> ChangeRequest:
    session = data.get("session") or {}
    if not isinstance(session, dict):
        raise ParseError("Field 'session' must be a mapping")

    raw_changes = data.get("changes")
    if raw_changes is None:
        raise ParseError("Missing required field: 'changes'")
    if not isinstance(raw_changes, list):
        raise ParseError("Field 'changes' must be a list")
    if not raw_changes:
        raise ParseError("Field 'changes' cannot be empty")

    changes = []
    for i, raw in enumerate(raw_changes):
        line = lines[i] if i < len(lines) else None
        changes.append(_build_change(raw, i, line))

    return ChangeRequest(
        changes=changes,
        session_name=session.get("name"),
        session_description=session.get("description"),
        source_file=source_file,
    )


def _build_change(raw: Any, index: int, line: int | None) -> Change:
    label = f"Change #{index + 1}"
    if not isinstance(raw, dict):
        raise ParseError(f"{label} must be a mapping (dictionary)", line=line)

    operation = raw.get("operation")
    if not operation:
        raise ParseError(f"{label}: Missing required field 'operation'", line=line)
    if not isinstance(operation, str):
        raise ParseError(f"{label}: Field 'operation' must be a string", line=line)

    params = {k: v for k, v in raw.items() if k != "operation"}
    return Change(operation=operation, params=params, line_number=line)
