"""Constructors producing structurally valid default composition pieces.

Factories never validate their inputs. A non-positive bar or step count
simply yields an empty grid; :func:`composition.validation.validate_composition`
reports the resulting inconsistencies later.
"""
from __future__ import annotations

import logging
import uuid
from typing import Iterable, List, Optional

from .catalog import SoundCatalog
from .config import DEFAULT_LIMITS
from .models import (
    Beat,
    Composition,
    NewCompositionSettings,
    Section,
    SectionColor,
    Track,
    utc_now,
)

logger = logging.getLogger(__name__)


def generate_id(prefix: str) -> str:
    """Return a process-unique identifier such as ``track_<hex>``."""

    return f"{prefix}_{uuid.uuid4().hex}"


def create_empty_beat() -> Beat:
    return Beat(active=False)


def create_empty_bars(number_of_bars: int, steps_per_bar: int) -> List[List[Beat]]:
    """Build a ``number_of_bars`` x ``steps_per_bar`` grid of distinct empty beats."""

    return [
        [create_empty_beat() for _ in range(steps_per_bar)]
        for _ in range(number_of_bars)
    ]


def create_track(
    sound_id: str,
    sound_name: str,
    number_of_bars: int,
    steps_per_bar: int,
) -> Track:
    return Track(
        id=generate_id("track"),
        name=sound_name,
        sound_id=sound_id,
        volume=DEFAULT_LIMITS.default_track_volume,
        bars=create_empty_bars(number_of_bars, steps_per_bar),
    )


def create_section(
    name: str,
    start_bar: int,
    end_bar: int,
    color: SectionColor | str | None = None,
) -> Section:
    """Build a section; ``color`` defaults to the configured section colour."""

    if color is None:
        color = DEFAULT_LIMITS.default_section_color
    return Section(
        id=generate_id("section"),
        name=name,
        start_bar=start_bar,
        end_bar=end_bar,
        color=SectionColor(color),
    )


def create_composition(settings: NewCompositionSettings) -> Composition:
    """Create a bare composition from user settings.

    Tracks, sections, and ``available_sounds`` start empty. Populating the
    sound list and the tracks named by ``settings.initial_sounds`` is the
    second construction phase, see :func:`attach_catalog`.
    """

    now = utc_now()
    composition = Composition(
        id=generate_id("comp"),
        title=settings.title,
        created_at=now,
        modified_at=now,
        tempo=settings.tempo,
        beats_per_bar=settings.beats_per_bar,
        subdivision=settings.subdivision,
        number_of_bars=settings.number_of_bars,
    )
    logger.debug(
        "Created composition %s (%d bars x %d steps)",
        composition.id,
        composition.number_of_bars,
        composition.steps_per_bar,
    )
    return composition


def attach_catalog(
    composition: Composition,
    catalog: SoundCatalog,
    initial_sounds: Optional[Iterable[str]] = None,
) -> Composition:
    """Offer the catalog's sounds and add a track for each initial sound id.

    Raises :class:`~composition.catalog.SoundNotFoundError` before touching
    the composition when an initial sound is missing from the catalog.
    """

    sounds = [catalog.get(sound_id) for sound_id in initial_sounds or ()]
    composition.available_sounds = catalog.ids()
    for sound in sounds:
        composition.tracks.append(
            create_track(
                sound.id,
                sound.name,
                composition.number_of_bars,
                composition.steps_per_bar,
            )
        )
    composition.touch()
    logger.debug(
        "Attached %d catalog sounds and %d initial tracks to %s",
        len(composition.available_sounds),
        len(sounds),
        composition.id,
    )
    return composition


def new_composition(
    settings: NewCompositionSettings,
    catalog: Optional[SoundCatalog] = None,
) -> Composition:
    """Run both construction phases: bare composition, then catalog attachment."""

    composition = create_composition(settings)
    if catalog is not None:
        attach_catalog(composition, catalog, settings.initial_sounds)
    return composition
