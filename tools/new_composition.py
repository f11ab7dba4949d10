"""CLI helper that writes a fresh composition document to disk."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from composition.catalog import SoundCatalog, SoundNotFoundError
from composition.factories import new_composition
from composition.models import NewCompositionSettings
from composition.persistence import CompositionFileAdapter
from composition.validation import validate_composition

logger = logging.getLogger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create an empty drum-machine composition and save it as JSON.",
    )
    parser.add_argument("--title", required=True, help="Title shown in the composition library.")
    parser.add_argument("--tempo", type=int, default=120, help="Tempo in BPM (40-300).")
    parser.add_argument("--beats-per-bar", type=int, default=4, help="Beats in each bar (1-12).")
    parser.add_argument("--subdivision", type=int, default=4, help="Steps per beat.")
    parser.add_argument("--bars", type=int, default=4, help="Number of bars.")
    parser.add_argument(
        "--catalog",
        type=Path,
        help="Sound catalog JSON used to populate available sounds and initial tracks.",
    )
    parser.add_argument(
        "--sound",
        action="append",
        default=[],
        metavar="SOUND_ID",
        help="Sound id to add as an initial track (requires --catalog). May be repeated.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Destination JSON file for the composition document.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.sound and args.catalog is None:
        raise SystemExit("--sound requires --catalog so track names can be resolved.")

    catalog: SoundCatalog | None = None
    if args.catalog is not None:
        catalog_path = args.catalog.expanduser().resolve()
        if not catalog_path.exists():
            raise SystemExit(f"Sound catalog '{catalog_path}' does not exist.")
        catalog = SoundCatalog.from_file(catalog_path)

    settings = NewCompositionSettings(
        title=args.title,
        tempo=args.tempo,
        beats_per_bar=args.beats_per_bar,
        subdivision=args.subdivision,
        number_of_bars=args.bars,
        initial_sounds=args.sound,
    )
    try:
        composition = new_composition(settings, catalog)
    except SoundNotFoundError as exc:
        raise SystemExit(f"Unknown sound: {exc.args[0]}") from exc

    for violation in validate_composition(composition):
        logger.warning("New composition is inconsistent: %s", violation)

    output = args.output.expanduser().resolve()
    destination = CompositionFileAdapter(output.parent).save(composition, output.name)
    print(f"Wrote composition {composition.id} to {destination}")
    print(
        f"Bars: {composition.number_of_bars} | Steps per bar: {composition.steps_per_bar} "
        f"| Tracks: {len(composition.tracks)}"
    )
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
