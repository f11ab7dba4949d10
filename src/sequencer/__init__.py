"""Editing and playback-transport helpers built on the composition model."""

from .editor import BeatEdit, CompositionEditor
from .transport import PlaybackTransport, TransportStateError, effective_volume, velocity_grid

__all__ = [
    "CompositionEditor",
    "BeatEdit",
    "PlaybackTransport",
    "TransportStateError",
    "effective_volume",
    "velocity_grid",
]
