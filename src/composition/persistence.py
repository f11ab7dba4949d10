"""JSON document format for compositions.

Documents use the camelCase keys of the composition model and leave out
unset values, so an empty beat is stored as ``{"active": false}`` and
only beats carrying a volume override have a ``volume`` key.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from .models import Composition

logger = logging.getLogger(__name__)


class CompositionDocumentError(ValueError):
    """Raised when stored text cannot be turned back into a composition."""


class CompositionSerializer:
    """Convert between :class:`Composition` and its stored document shape."""

    @staticmethod
    def to_dict(composition: Composition) -> Dict[str, Any]:
        return composition.model_dump(mode="json", by_alias=True, exclude_none=True)

    @staticmethod
    def from_dict(payload: Dict[str, Any]) -> Composition:
        """Rehydrate a composition; malformed payloads raise :class:`CompositionDocumentError`."""

        try:
            return Composition.model_validate(payload)
        except ValidationError as exc:
            raise CompositionDocumentError(
                f"Invalid composition document ({exc.error_count()} error(s))"
            ) from exc

    @classmethod
    def dumps(cls, composition: Composition, *, indent: int | None = 2) -> str:
        return json.dumps(cls.to_dict(composition), indent=indent)

    @classmethod
    def loads(cls, text: str) -> Composition:
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CompositionDocumentError(f"Composition document is not valid JSON: {exc.msg}") from exc
        if not isinstance(payload, dict):
            raise CompositionDocumentError("Composition document must be a JSON object")
        return cls.from_dict(payload)


class CompositionFileAdapter:
    """Reads and writes composition documents below ``base_path``.

    Saves go through a sibling ``.tmp`` file that replaces the target once
    fully written, so an interrupted save never leaves half a document.
    """

    def __init__(self, base_path: Path, *, indent: int | None = 2) -> None:
        self.base_path = base_path
        self._indent = indent

    def path_for(self, filename: str) -> Path:
        return self.base_path / filename

    def save(self, composition: Composition, filename: str) -> Path:
        destination = self.path_for(filename)
        destination.parent.mkdir(parents=True, exist_ok=True)
        staging = destination.with_name(f"{destination.name}.tmp")
        staging.write_text(
            CompositionSerializer.dumps(composition, indent=self._indent), encoding="utf-8"
        )
        staging.replace(destination)
        logger.debug("Saved composition %s to %s", composition.id, destination)
        return destination

    def load(self, filename: str) -> Composition:
        """Load ``filename``; unreadable documents raise :class:`CompositionDocumentError`."""

        source = self.path_for(filename)
        try:
            return CompositionSerializer.loads(source.read_text(encoding="utf-8"))
        except CompositionDocumentError as exc:
            raise CompositionDocumentError(f"{source}: {exc}") from exc
