"""Playback state and playhead bookkeeping for an external playback engine.

Nothing here keeps time. The engine driving playback calls
:meth:`PlaybackTransport.advance` once per step at whatever rate
:meth:`PlaybackTransport.step_duration_seconds` suggests and asks for the
hits to sound at the current position.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np

from composition.models import Composition, PlaybackPosition, PlaybackState

logger = logging.getLogger(__name__)


class TransportStateError(RuntimeError):
    """Raised for a playback transition that is not allowed from the current state."""


def effective_volume(beat_volume: Optional[float], track_volume: float) -> float:
    """Return the beat's override when present, otherwise the track volume."""

    return track_volume if beat_volume is None else beat_volume


def velocity_grid(composition: Composition) -> np.ndarray:
    """Return effective volumes shaped ``(tracks, bars, steps_per_bar)``.

    Inactive beats are ``0.0``. The composition must be dimensionally
    consistent; ragged grids raise :class:`ValueError`.
    """

    shape = (len(composition.tracks), composition.number_of_bars, composition.steps_per_bar)
    grid = np.zeros(shape, dtype=np.float32)
    for track_index, track in enumerate(composition.tracks):
        if len(track.bars) != composition.number_of_bars:
            raise ValueError(f"Track {track_index} does not match the composition bar count")
        for bar_index, row in enumerate(track.bars):
            if len(row) != composition.steps_per_bar:
                raise ValueError(
                    f"Track {track_index}, bar {bar_index} does not match the steps per bar"
                )
            for step_index, beat in enumerate(row):
                if beat.active:
                    grid[track_index, bar_index, step_index] = effective_volume(
                        beat.volume, track.volume
                    )
    return grid


class PlaybackTransport:
    """Tracks whether playback runs and where the playhead is."""

    def __init__(self, composition: Composition) -> None:
        self._composition = composition
        self._state = PlaybackState.STOPPED
        self._position = PlaybackPosition()

    @property
    def composition(self) -> Composition:
        return self._composition

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def position(self) -> PlaybackPosition:
        return self._position

    @property
    def is_playing(self) -> bool:
        return self._state is PlaybackState.PLAYING

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------
    def play(self) -> PlaybackState:
        """Start from stopped, or continue from paused."""

        if self._state is PlaybackState.PLAYING:
            raise TransportStateError("Transport is already playing")
        return self._transition(PlaybackState.PLAYING)

    def pause(self) -> PlaybackState:
        if self._state is not PlaybackState.PLAYING:
            raise TransportStateError(f"Cannot pause while {self._state.value}")
        return self._transition(PlaybackState.PAUSED)

    def resume(self) -> PlaybackState:
        if self._state is not PlaybackState.PAUSED:
            raise TransportStateError(f"Cannot resume while {self._state.value}")
        return self._transition(PlaybackState.PLAYING)

    def stop(self) -> PlaybackState:
        """Stop from any state and rewind to the first step."""

        self._position = PlaybackPosition()
        return self._transition(PlaybackState.STOPPED)

    # ------------------------------------------------------------------
    # Playhead
    # ------------------------------------------------------------------
    def seek(self, bar: int, step: int = 0) -> PlaybackPosition:
        """Move the playhead, raising when the target lies outside the grid."""

        target = PlaybackPosition(bar=bar, step=step)
        if not target.is_within(self._composition.number_of_bars, self._composition.steps_per_bar):
            raise IndexError(
                f"Position bar={bar} step={step} outside "
                f"{self._composition.number_of_bars} bars x {self._composition.steps_per_bar} steps"
            )
        self._position = target
        return target

    def advance(self, steps: int = 1) -> PlaybackPosition:
        """Move forward while playing, wrapping bars and looping to the start."""

        if self._state is not PlaybackState.PLAYING:
            raise TransportStateError(f"Cannot advance while {self._state.value}")
        steps_per_bar = self._composition.steps_per_bar
        total_steps = self._composition.number_of_bars * steps_per_bar
        if total_steps <= 0:
            raise ValueError("Composition has no steps to play")
        absolute = (self._position.bar * steps_per_bar + self._position.step + steps) % total_steps
        bar, step = divmod(absolute, steps_per_bar)
        self._position = PlaybackPosition(bar=bar, step=step)
        return self._position

    def step_duration_seconds(self) -> float:
        """Length of one step at the composition tempo and subdivision."""

        return 60.0 / self._composition.tempo / self._composition.subdivision

    def active_hits(self, position: Optional[PlaybackPosition] = None) -> List[Tuple[int, float]]:
        """Return ``(track_index, volume)`` for every active beat at ``position``."""

        target = self._position if position is None else position
        hits: List[Tuple[int, float]] = []
        for track_index, track in enumerate(self._composition.tracks):
            try:
                beat = track.beat_at(target.bar, target.step)
            except IndexError:
                continue
            if beat.active:
                hits.append((track_index, effective_volume(beat.volume, track.volume)))
        return hits

    def _transition(self, target: PlaybackState) -> PlaybackState:
        logger.debug("Transport %s -> %s", self._state.value, target.value)
        self._state = target
        return target
