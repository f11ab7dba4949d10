"""Sound library index supplying the drum sounds compositions refer to."""
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Mapping

from pydantic import BaseModel, Field

from .models import DrumSound, SoundCategory


class SoundNotFoundError(KeyError):
    """Raised when a sound id is missing from the catalog."""


class SoundCatalog(BaseModel):
    """Ordered collection of :class:`DrumSound` entries."""

    sounds: List[DrumSound] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, object]) -> "SoundCatalog":
        """Hydrate from a raw dict (loaded JSON)."""

        return cls.model_validate(payload)

    @classmethod
    def from_file(cls, path: Path) -> "SoundCatalog":
        """Load a catalog JSON export from disk."""

        payload = json.loads(path.read_text(encoding="utf-8"))
        return cls.from_payload(payload)

    def __contains__(self, sound_id: object) -> bool:
        return any(sound.id == sound_id for sound in self.sounds)

    def __len__(self) -> int:
        return len(self.sounds)

    def ids(self) -> List[str]:
        """Return sound ids in catalog order."""

        return [sound.id for sound in self.sounds]

    def get(self, sound_id: str) -> DrumSound:
        for sound in self.sounds:
            if sound.id == sound_id:
                return sound
        raise SoundNotFoundError(f"Sound {sound_id!r} not found in catalog")

    def by_category(self, category: SoundCategory | str) -> List[DrumSound]:
        wanted = SoundCategory(category)
        return [sound for sound in self.sounds if sound.category == wanted]
