"""In-place editing helpers for composition grids, tracks, and sections."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from composition.catalog import SoundCatalog
from composition.factories import create_empty_beat, create_section, create_track
from composition.models import Beat, Composition, Section, SectionColor, Track

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class BeatEdit:
    """Record describing a single beat change for auditing or previews."""

    edit_id: str
    track_id: str
    bar: int
    step: int
    previous: Beat
    updated: Beat


class CompositionEditor:
    """Mutates a composition in place and keeps ``modified_at`` current.

    Grid coordinates are 0-indexed; section bar numbers stay 1-indexed as
    stored on :class:`~composition.models.Section`.
    """

    def __init__(self, composition: Composition, *, catalog: Optional[SoundCatalog] = None) -> None:
        self._composition = composition
        self._catalog = catalog
        self._history: List[BeatEdit] = []
        self._edit_counter = 0

    @property
    def composition(self) -> Composition:
        return self._composition

    @property
    def history(self) -> List[BeatEdit]:
        """Return the recorded beat edits in order of execution."""

        return list(self._history)

    # ------------------------------------------------------------------
    # Beat edits
    # ------------------------------------------------------------------
    def toggle_beat(self, track_id: str, bar: int, step: int) -> Beat:
        """Flip a beat on or off."""

        beat = self._get_beat(track_id, bar, step)
        return self.set_beat(track_id, bar, step, active=not beat.active)

    def set_beat(
        self,
        track_id: str,
        bar: int,
        step: int,
        *,
        active: Optional[bool] = None,
        volume: object = _UNSET,
    ) -> Beat:
        """Assign the active flag and/or volume override of one beat.

        Pass ``volume=None`` to drop the override; omit it to leave the
        override untouched.
        """

        previous = self._get_beat(track_id, bar, step)
        payload: dict[str, object] = {}
        if active is not None:
            payload["active"] = active
        if volume is not _UNSET:
            payload["volume"] = volume
        updated = previous.model_copy(update=payload)
        self._commit(track_id, bar, step, previous, updated)
        return updated

    def clear_beat_volume(self, track_id: str, bar: int, step: int) -> Beat:
        return self.set_beat(track_id, bar, step, volume=None)

    def clear_track(self, track_id: str) -> Track:
        """Reset every beat of a track to an empty beat."""

        track = self._composition.get_track(track_id)
        for bar_index, row in enumerate(track.bars):
            for step_index, beat in enumerate(row):
                self._commit(track_id, bar_index, step_index, beat, create_empty_beat())
        return track

    # ------------------------------------------------------------------
    # Track and section edits
    # ------------------------------------------------------------------
    def add_track(self, sound_id: str, name: Optional[str] = None) -> Track:
        """Create a track sized to the composition and append it.

        The display name defaults to the catalog name of the sound, or the
        sound id when no catalog is attached.
        """

        if name is None:
            name = self._catalog.get(sound_id).name if self._catalog is not None else sound_id
        track = create_track(
            sound_id,
            name,
            self._composition.number_of_bars,
            self._composition.steps_per_bar,
        )
        self._composition.add_track(track)
        logger.debug("Added track %s (%s) to %s", track.id, sound_id, self._composition.id)
        return track

    def remove_track(self, track_id: str) -> Track:
        return self._composition.remove_track(track_id)

    def set_track_volume(self, track_id: str, volume: float) -> Track:
        track = self._composition.get_track(track_id)
        track.volume = volume
        self._composition.touch()
        return track

    def rename_track(self, track_id: str, name: str) -> Track:
        track = self._composition.get_track(track_id)
        track.name = name
        self._composition.touch()
        return track

    def add_section(
        self,
        name: str,
        start_bar: int,
        end_bar: int,
        color: SectionColor | str | None = None,
    ) -> Section:
        """Append a section; out-of-range bars are left for validation to report."""

        section = create_section(name, start_bar, end_bar, color)
        self._composition.add_section(section)
        return section

    def remove_section(self, section_id: str) -> Section:
        return self._composition.remove_section(section_id)

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------
    def set_number_of_bars(self, number_of_bars: int) -> None:
        """Resize every track to ``number_of_bars`` keeping existing beats.

        Sections are not adjusted; a section that now extends past the last
        bar is reported by the validator.
        """

        if number_of_bars < 1:
            raise ValueError("number_of_bars must be at least 1")
        self._composition.number_of_bars = number_of_bars
        self._regrid()

    def set_meter(self, beats_per_bar: int, subdivision: int) -> None:
        """Change the meter and re-grid each bar, keeping steps by position."""

        if beats_per_bar < 1 or subdivision < 1:
            raise ValueError("beats_per_bar and subdivision must be positive")
        self._composition.beats_per_bar = beats_per_bar
        self._composition.subdivision = subdivision
        self._regrid()

    def set_tempo(self, tempo: int) -> None:
        self._composition.tempo = tempo
        self._composition.touch()

    def rename(self, title: str) -> None:
        self._composition.title = title
        self._composition.touch()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _regrid(self) -> None:
        number_of_bars = self._composition.number_of_bars
        steps_per_bar = self._composition.steps_per_bar
        for track in self._composition.tracks:
            track.bars = [
                _fit_bar(track.bars[index] if index < len(track.bars) else [], steps_per_bar)
                for index in range(number_of_bars)
            ]
        self._composition.touch()
        logger.debug(
            "Re-gridded %s to %d bars x %d steps",
            self._composition.id,
            number_of_bars,
            steps_per_bar,
        )

    def _get_beat(self, track_id: str, bar: int, step: int) -> Beat:
        return self._composition.get_track(track_id).beat_at(bar, step)

    def _next_edit_id(self) -> str:
        self._edit_counter += 1
        return f"edit_{self._edit_counter}"

    def _commit(self, track_id: str, bar: int, step: int, previous: Beat, updated: Beat) -> None:
        if previous == updated:
            return
        track = self._composition.get_track(track_id)
        track.bars[bar][step] = updated
        self._history.append(
            BeatEdit(
                edit_id=self._next_edit_id(),
                track_id=track_id,
                bar=bar,
                step=step,
                previous=previous,
                updated=updated,
            )
        )
        self._composition.touch()


def _fit_bar(row: List[Beat], steps_per_bar: int) -> List[Beat]:
    kept = row[:steps_per_bar]
    return kept + [create_empty_beat() for _ in range(steps_per_bar - len(kept))]
