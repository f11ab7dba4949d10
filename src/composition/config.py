"""Shared numeric limits and defaults for composition documents."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompositionLimits:
    """Ranges the validator audits plus defaults used by the factories."""

    min_tempo: int = 40
    max_tempo: int = 300
    min_beats_per_bar: int = 1
    max_beats_per_bar: int = 12
    min_bars: int = 1
    min_volume: float = 0.0
    max_volume: float = 1.0
    default_track_volume: float = 0.8
    default_section_color: str = "blue"

    def tempo_in_range(self, tempo: float) -> bool:
        return self.min_tempo <= tempo <= self.max_tempo

    def beats_per_bar_in_range(self, beats_per_bar: int) -> bool:
        return self.min_beats_per_bar <= beats_per_bar <= self.max_beats_per_bar

    def volume_in_range(self, volume: float) -> bool:
        return self.min_volume <= volume <= self.max_volume


DEFAULT_LIMITS = CompositionLimits()
