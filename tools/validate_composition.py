"""CLI entry point for :func:`composition.validation.validate_composition`."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from composition.catalog import SoundCatalog
from composition.persistence import CompositionDocumentError, CompositionFileAdapter
from composition.validation import audit_references, validate_composition


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Report every consistency problem in a saved composition document.",
    )
    parser.add_argument(
        "--composition-file",
        type=Path,
        required=True,
        help="Path to the serialized composition JSON document.",
    )
    parser.add_argument(
        "--audit-references",
        action="store_true",
        help="Also report unknown sound ids and overlapping sections.",
    )
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Sound catalog JSON used by --audit-references instead of availableSounds.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    composition_file = args.composition_file.expanduser().resolve()
    if not composition_file.exists():
        raise SystemExit(f"Composition file '{composition_file}' does not exist.")
    try:
        composition = CompositionFileAdapter(composition_file.parent).load(composition_file.name)
    except CompositionDocumentError as exc:
        raise SystemExit(f"Composition file '{composition_file}' is unreadable: {exc}") from exc

    violations = validate_composition(composition)
    if args.audit_references:
        catalog = SoundCatalog.from_file(args.catalog.expanduser().resolve()) if args.catalog else None
        violations.extend(audit_references(composition, catalog))

    summary = {
        "composition_id": composition.id,
        "title": composition.title,
        "valid": not violations,
        "violations": [violation.to_dict() for violation in violations],
    }
    print(json.dumps(summary, indent=2))
    return 0 if not violations else 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
