"""
concept-editor command line.

    concept-editor --db graph.json list
    concept-editor --db graph.json describe hot dogs
    concept-editor --db graph.json apply changes.yaml --atomic
    concept-editor --db graph.json train dog --depth 2
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import httpx

from . import __version__
from .batch.executor import execute_change_request
from .batch.parser import ParseError, load_change_request
from .batch.schema import BatchResult, ChangeRequest, RequestValidation
from .batch.validator import validate_change_request
from .exceptions import ConceptEditorError, UnmatchedPhraseError
from .models import Concept
from .store import ConceptStore
from .validator import validate_store

DB_ENV = "CONCEPT_EDITOR_DB"


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit status."""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except (ConceptEditorError, OSError) as e:
        print(f"err: {e}")
        return 1


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="concept-editor",
        description="Build, query and train a graph of related concepts",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--db",
        type=Path,
        default=os.environ.get(DB_ENV) or None,
        help=f"JSON snapshot to load and save (default: ${DB_ENV})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")

    commands = parser.add_subparsers(title="commands", dest="command")

    sub = commands.add_parser("list", help="Print every concept with its relations")
    sub.set_defaults(func=cmd_list)

    sub = commands.add_parser("describe", help="Print the concepts a phrase resolves to")
    sub.add_argument("phrase", nargs="+", help="Words of the phrase")
    sub.set_defaults(func=cmd_describe)

    sub = commands.add_parser(
        "check", help="Report dangling targets, cycles and shadowed names",
    )
    sub.set_defaults(func=cmd_check)

    sub = commands.add_parser("validate", help="Check a YAML change request without applying it")
    sub.add_argument("file", type=Path, help="Change request file")
    sub.set_defaults(func=cmd_validate)

    sub = commands.add_parser("apply", help="Apply a YAML change request to the snapshot")
    sub.add_argument("file", type=Path, help="Change request file")
    sub.add_argument("--dry-run", action="store_true", help="Report the changes, apply none")
    sub.add_argument(
        "--atomic", action="store_true",
        help="Keep nothing if any change fails",
    )
    sub.set_defaults(func=cmd_apply)

    sub = commands.add_parser("train", help="Grow the graph from a word's related words")
    sub.add_argument("word", help="Word to start from")
    sub.add_argument("--depth", type=int, default=2, help="Recursion depth (default: 2)")
    sub.add_argument(
        "--source", choices=("wordnik", "wordnet"), default="wordnik",
        help="Related-word provider (default: wordnik)",
    )
    sub.add_argument("--lexicon", help="wn lexicon specifier, for --source wordnet")
    sub.add_argument(
        "--delay", type=float, default=0.75,
        help="Pause in seconds before each provider request (default: 0.75)",
    )
    sub.set_defaults(func=cmd_train)

    return parser


def cmd_list(args: argparse.Namespace) -> int:
    store = _open_store(args)
    for concept in store:
        print(_format_concept(concept))
        for relation in concept.relations:
            targets = (store.concept_by_id(t) for t in relation.targets)
            names = " ".join(t.name for t in targets if t is not None)
            print(f" |-> {relation.kind.value} of: {names} (id={relation.id})")
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    store = _open_store(args)
    try:
        resolved = store.describe(" ".join(args.phrase))
    except UnmatchedPhraseError as e:
        print(f"err: {e}")
        return 1

    for concept in sorted(resolved, key=lambda c: c.id):
        print(_format_concept(concept))
    return 0


def cmd_check(args: argparse.Namespace) -> int:
    results = validate_store(_open_store(args))
    if not results:
        print("No issues found.")
        return 0

    for r in results:
        print(f"  [{r.severity}] {r.rule_id} {r.entity_type} {r.entity_id}: {r.message}")
    errors = sum(1 for r in results if r.severity == "ERROR")
    print(f"\n{errors} error(s), {len(results) - errors} warning(s)")
    return 1 if errors else 0


def cmd_validate(args: argparse.Namespace) -> int:
    request = _read_request(args.file, "Validating")
    if request is None:
        return 1

    store = _open_store(args) if args.db else None
    validation = validate_change_request(request, store)
    _print_issues(validation)

    if validation.is_valid:
        print("\nValidation passed!")
        return 0
    print(f"\n{validation.error_count} error(s), {validation.warning_count} warning(s)")
    return 1


def cmd_apply(args: argparse.Namespace) -> int:
    request = _read_request(args.file, "Applying")
    if request is None:
        return 1

    store = _open_store(args)
    validation = validate_change_request(request, store)
    if not validation.is_valid:
        _print_issues(validation)
        print(f"\n{validation.error_count} error(s); nothing was applied.")
        return 1
    _print_issues(validation)

    if args.dry_run:
        print("\n[DRY RUN] No changes will be made.")
    result = execute_change_request(request, store, dry_run=args.dry_run, atomic=args.atomic)
    _print_batch_result(result)

    if not args.dry_run and not result.rolled_back and result.success_count:
        _save_store(args, store)
    return 1 if result.failure_count else 0


def cmd_train(args: argparse.Namespace) -> int:
    from .sources import WordnetSource, WordnikSource
    from .training import Trainer

    store = _open_store(args)
    source = WordnetSource(args.lexicon) if args.source == "wordnet" else WordnikSource()

    trainer = Trainer(store, source, snapshot_path=args.db, delay=args.delay)
    try:
        trainer.train(args.word, args.depth)
    except httpx.HTTPError as e:
        print(f"err: related-word request failed: {e}")
        print(f"Added {trainer.relations_added} relation(s) before the failure")
        return 1
    finally:
        if isinstance(source, WordnikSource):
            source.close()

    print(f"Added {trainer.relations_added} relation(s); {len(store)} concept(s) in store")
    _save_store(args, store)
    return 0


def _open_store(args: argparse.Namespace) -> ConceptStore:
    if args.db is not None and Path(args.db).exists():
        return ConceptStore.load(args.db)
    return ConceptStore()


def _save_store(args: argparse.Namespace, store: ConceptStore) -> None:
    if args.db is None:
        print("\nNo --db given, changes were not saved.")
        return
    store.save(args.db)
    print(f"\nSaved {len(store)} concept(s) to {args.db}")


def _read_request(path: Path, action: str) -> ChangeRequest | None:
    print(f"{action} {path}")
    try:
        request = load_change_request(path)
    except ParseError as e:
        where = f" (line {e.line})" if e.line else ""
        print(f"  [PARSE ERROR] {e}{where}")
        return None
    except FileNotFoundError as e:
        print(f"  [ERROR] {e}")
        return None

    session = f", session {request.session_name!r}" if request.session_name else ""
    print(f"  Changes: {len(request.changes)}{session}")
    return request


def _format_concept(concept: Concept) -> str:
    return f"{concept.id}) {concept.name}[{concept.type.value}]"


def _print_issues(validation: RequestValidation) -> None:
    def where(issue) -> str:
        line = f", line {issue.line_number}" if issue.line_number else ""
        return f"#{issue.index + 1} {issue.operation}{line}"

    for error in validation.errors:
        print(f"  [ERROR] {where(error)}: {error.message} (field '{error.field}')")
    for warning in validation.warnings:
        print(f"  [WARN]  {where(warning)}: {warning.message}")


def _print_batch_result(result: BatchResult) -> None:
    for change in result.changes:
        status = "ok" if change.success else "FAILED"
        print(f"  {change.index + 1}/{result.total_count} {change.operation} {status}: "
              f"{change.message}")

    print(
        f"\n{result.success_count} applied, {result.failure_count} failed, "
        f"{result.skipped_count} skipped in {result.duration_seconds:.2f}s"
    )
    if result.rolled_back:
        print("Batch rolled back, no changes were kept.")


if __name__ == "__main__":
    sys.exit(main())
