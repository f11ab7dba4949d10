"""Consistency audit for compositions.

Validation never raises. Every problem found is returned as a
:class:`Violation` record so an editor can show all of them at once and
react to them by ``kind`` instead of matching message text.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .catalog import SoundCatalog
from .config import DEFAULT_LIMITS, CompositionLimits
from .models import Composition

logger = logging.getLogger(__name__)


class ViolationKind(str, Enum):
    TEMPO_RANGE = "tempo_range"
    BEATS_PER_BAR_RANGE = "beats_per_bar_range"
    BAR_COUNT = "bar_count"
    TRACK_BAR_COUNT = "track_bar_count"
    BAR_STEP_COUNT = "bar_step_count"
    TRACK_VOLUME = "track_volume"
    BEAT_VOLUME = "beat_volume"
    SECTION_START = "section_start"
    SECTION_END = "section_end"
    UNKNOWN_SOUND = "unknown_sound"
    SECTION_OVERLAP = "section_overlap"


@dataclass(frozen=True)
class Violation:
    """Single inconsistency between declared dimensions/ranges and the data."""

    kind: ViolationKind
    message: str
    track_index: Optional[int] = None
    bar_index: Optional[int] = None
    step_index: Optional[int] = None
    section_index: Optional[int] = None
    expected: Optional[object] = None
    actual: Optional[object] = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "trackIndex": self.track_index,
            "barIndex": self.bar_index,
            "stepIndex": self.step_index,
            "sectionIndex": self.section_index,
            "expected": self.expected,
            "actual": self.actual,
        }


def validate_composition(
    composition: Composition,
    limits: CompositionLimits = DEFAULT_LIMITS,
) -> List[Violation]:
    """Return every violation found in ``composition``; empty means valid.

    Checks run in a fixed order: tempo, beats per bar, bar count, then each
    track (bar count, per-bar step count and beat volumes, track volume),
    then each section (start bar, end bar).
    """

    violations: List[Violation] = []

    if not limits.tempo_in_range(composition.tempo):
        violations.append(
            Violation(
                kind=ViolationKind.TEMPO_RANGE,
                message=f"Tempo must be between {limits.min_tempo} and {limits.max_tempo} BPM",
                expected=(limits.min_tempo, limits.max_tempo),
                actual=composition.tempo,
            )
        )

    if not limits.beats_per_bar_in_range(composition.beats_per_bar):
        violations.append(
            Violation(
                kind=ViolationKind.BEATS_PER_BAR_RANGE,
                message=(
                    f"Beats per bar must be between {limits.min_beats_per_bar} "
                    f"and {limits.max_beats_per_bar}"
                ),
                expected=(limits.min_beats_per_bar, limits.max_beats_per_bar),
                actual=composition.beats_per_bar,
            )
        )

    if composition.number_of_bars < limits.min_bars:
        violations.append(
            Violation(
                kind=ViolationKind.BAR_COUNT,
                message=f"Must have at least {limits.min_bars} bar",
                expected=limits.min_bars,
                actual=composition.number_of_bars,
            )
        )

    steps_per_bar = composition.steps_per_bar
    for track_index, track in enumerate(composition.tracks):
        if len(track.bars) != composition.number_of_bars:
            violations.append(
                Violation(
                    kind=ViolationKind.TRACK_BAR_COUNT,
                    message=(
                        f"Track {track_index} has {len(track.bars)} bars, "
                        f"expected {composition.number_of_bars}"
                    ),
                    track_index=track_index,
                    expected=composition.number_of_bars,
                    actual=len(track.bars),
                )
            )

        for bar_index, bar in enumerate(track.bars):
            if len(bar) != steps_per_bar:
                violations.append(
                    Violation(
                        kind=ViolationKind.BAR_STEP_COUNT,
                        message=(
                            f"Track {track_index}, bar {bar_index} has {len(bar)} steps, "
                            f"expected {steps_per_bar}"
                        ),
                        track_index=track_index,
                        bar_index=bar_index,
                        expected=steps_per_bar,
                        actual=len(bar),
                    )
                )
            for step_index, beat in enumerate(bar):
                if beat.volume is not None and not limits.volume_in_range(beat.volume):
                    violations.append(
                        Violation(
                            kind=ViolationKind.BEAT_VOLUME,
                            message=(
                                f"Track {track_index}, bar {bar_index}, step {step_index} "
                                f"volume must be between {limits.min_volume:g} and {limits.max_volume:g}"
                            ),
                            track_index=track_index,
                            bar_index=bar_index,
                            step_index=step_index,
                            expected=(limits.min_volume, limits.max_volume),
                            actual=beat.volume,
                        )
                    )

        if not limits.volume_in_range(track.volume):
            violations.append(
                Violation(
                    kind=ViolationKind.TRACK_VOLUME,
                    message=(
                        f"Track {track_index} volume must be between "
                        f"{limits.min_volume:g} and {limits.max_volume:g}"
                    ),
                    track_index=track_index,
                    expected=(limits.min_volume, limits.max_volume),
                    actual=track.volume,
                )
            )

    for section_index, section in enumerate(composition.sections):
        if section.start_bar < 1 or section.start_bar > composition.number_of_bars:
            violations.append(
                Violation(
                    kind=ViolationKind.SECTION_START,
                    message=f"Section {section_index} start bar is out of range",
                    section_index=section_index,
                    expected=(1, composition.number_of_bars),
                    actual=section.start_bar,
                )
            )
        if section.end_bar < section.start_bar or section.end_bar > composition.number_of_bars:
            violations.append(
                Violation(
                    kind=ViolationKind.SECTION_END,
                    message=f"Section {section_index} end bar is invalid",
                    section_index=section_index,
                    expected=(section.start_bar, composition.number_of_bars),
                    actual=section.end_bar,
                )
            )

    logger.debug("Validated composition %s: %d violation(s)", composition.id, len(violations))
    return violations


def validation_messages(
    composition: Composition,
    limits: CompositionLimits = DEFAULT_LIMITS,
) -> List[str]:
    """Return the human-readable form of :func:`validate_composition`."""

    return [violation.message for violation in validate_composition(composition, limits)]


def is_valid(composition: Composition, limits: CompositionLimits = DEFAULT_LIMITS) -> bool:
    return not validate_composition(composition, limits)


def audit_references(
    composition: Composition,
    catalog: Optional[SoundCatalog] = None,
) -> List[Violation]:
    """Report dangling sound references and overlapping sections.

    This is stricter than :func:`validate_composition` and is only run by
    callers that opt in. Sound ids are checked against ``catalog`` when
    given, otherwise against ``composition.available_sounds``; the sound
    check is skipped when neither lists any sounds.
    """

    violations: List[Violation] = []

    known = set(catalog.ids()) if catalog is not None else set(composition.available_sounds)
    if known:
        for track_index, track in enumerate(composition.tracks):
            if track.sound_id not in known:
                violations.append(
                    Violation(
                        kind=ViolationKind.UNKNOWN_SOUND,
                        message=f"Track {track_index} references unknown sound {track.sound_id!r}",
                        track_index=track_index,
                        actual=track.sound_id,
                    )
                )

    for section_index, section in enumerate(composition.sections):
        for other_index in range(section_index + 1, len(composition.sections)):
            other = composition.sections[other_index]
            if section.overlaps(other):
                violations.append(
                    Violation(
                        kind=ViolationKind.SECTION_OVERLAP,
                        message=f"Section {section_index} overlaps section {other_index}",
                        section_index=section_index,
                        actual=other_index,
                    )
                )

    logger.debug("Audited references of %s: %d violation(s)", composition.id, len(violations))
    return violations
