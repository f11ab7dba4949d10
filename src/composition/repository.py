"""Repository abstractions for composition storage backends.

Repositories store whatever they are given: they do not validate. Callers
that want to block saving an inconsistent composition run
:func:`composition.validation.validate_composition` first.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Mapping, Protocol

from .models import Composition, CompositionMetadata
from .persistence import CompositionDocumentError, CompositionFileAdapter

logger = logging.getLogger(__name__)


class CompositionRepositoryError(Exception):
    """Base error for repository failures."""


class CompositionNotFoundError(CompositionRepositoryError):
    """Raised when a requested composition cannot be located."""


class CompositionRepository(Protocol):
    """Minimal interface shared by storage backends."""

    def save(self, composition: Composition) -> CompositionMetadata:
        """Persist the composition and return its :class:`CompositionMetadata`."""

    def load(self, identifier: str) -> Composition:
        """Retrieve a composition by identifier."""

    def delete(self, identifier: str) -> None:
        """Remove the composition from the backing store."""

    def list(self) -> Iterable[CompositionMetadata]:
        """Iterate over stored compositions."""


class LocalCompositionRepository(CompositionRepository):
    """Filesystem-backed repository using :class:`CompositionFileAdapter`."""

    def __init__(self, adapter: CompositionFileAdapter, *, extension: str = ".json") -> None:
        self._adapter = adapter
        self._extension = extension

    @classmethod
    def from_environment(
        cls,
        *,
        extension: str = ".json",
        env: Mapping[str, str] | None = None,
    ) -> "LocalCompositionRepository":
        """Instantiate the repository from environment variables.

        ``BEATGRID_STORAGE_DIR`` (required)
            Directory holding composition documents; created on first save.
        ``BEATGRID_EXTENSION`` (optional)
            File extension for stored documents; defaults to ``.json``.
        """

        environment: Mapping[str, str]
        environment = env if env is not None else os.environ
        storage_dir = environment.get("BEATGRID_STORAGE_DIR")
        if not storage_dir:
            raise CompositionRepositoryError(
                "BEATGRID_STORAGE_DIR environment variable must be set to configure local storage"
            )
        resolved_extension = environment.get("BEATGRID_EXTENSION", extension)
        adapter = CompositionFileAdapter(Path(storage_dir).expanduser())
        return cls(adapter, extension=resolved_extension)

    @property
    def base_path(self) -> Path:
        return self._adapter.base_path

    def _filename_for(self, identifier: str) -> str:
        return f"{identifier}{self._extension}"

    def _path_for(self, identifier: str) -> Path:
        return self._adapter.base_path / self._filename_for(identifier)

    def _read(self, path: Path) -> Composition:
        try:
            return self._adapter.load(path.name)
        except CompositionDocumentError as exc:
            raise CompositionRepositoryError(f"Composition document {path} is unreadable") from exc

    def save(self, composition: Composition) -> CompositionMetadata:
        destination = self._adapter.save(composition, self._filename_for(composition.id))
        return composition.metadata(str(destination))

    def load(self, identifier: str) -> Composition:
        path = self._path_for(identifier)
        if not path.exists():
            raise CompositionNotFoundError(f"Composition {identifier!r} not found at {path}")
        return self._read(path)

    def delete(self, identifier: str) -> None:
        path = self._path_for(identifier)
        if not path.exists():
            raise CompositionNotFoundError(f"Composition {identifier!r} not found at {path}")
        path.unlink()
        logger.debug("Deleted composition %s", path)

    def list(self) -> Iterable[CompositionMetadata]:
        for file_path in sorted(self._adapter.base_path.glob(f"*{self._extension}")):
            composition = self._read(file_path)
            yield composition.metadata(str(file_path))


class InMemoryCompositionRepository(CompositionRepository):
    """Dictionary-backed repository suitable for tests or editor sessions."""

    def __init__(self) -> None:
        self._storage: Dict[str, Composition] = {}

    def save(self, composition: Composition) -> CompositionMetadata:
        self._storage[composition.id] = composition.model_copy(deep=True)
        return composition.metadata("in-memory")

    def load(self, identifier: str) -> Composition:
        try:
            composition = self._storage[identifier]
        except KeyError as exc:
            raise CompositionNotFoundError(f"Composition {identifier!r} not found in memory") from exc
        return composition.model_copy(deep=True)

    def delete(self, identifier: str) -> None:
        if identifier not in self._storage:
            raise CompositionNotFoundError(f"Composition {identifier!r} not found in memory")
        del self._storage[identifier]

    def list(self) -> Iterable[CompositionMetadata]:
        for composition in self._storage.values():
            yield composition.metadata("in-memory")
