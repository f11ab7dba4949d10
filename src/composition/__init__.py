"""Composition package exposing the sequencer data model, factories, and validation."""
from .catalog import SoundCatalog, SoundNotFoundError
from .config import DEFAULT_LIMITS, CompositionLimits
from .factories import (
    attach_catalog,
    create_composition,
    create_empty_bars,
    create_empty_beat,
    create_section,
    create_track,
    new_composition,
)
from .models import (
    Beat,
    BuiltInAsset,
    Composition,
    CompositionMetadata,
    DrumSound,
    ExternalUri,
    NewCompositionSettings,
    PlaybackPosition,
    PlaybackState,
    Section,
    SectionColor,
    SoundCategory,
    Track,
)
from .persistence import CompositionDocumentError, CompositionFileAdapter, CompositionSerializer
from .repository import (
    CompositionNotFoundError,
    CompositionRepository,
    CompositionRepositoryError,
    InMemoryCompositionRepository,
    LocalCompositionRepository,
)
from .validation import (
    Violation,
    ViolationKind,
    audit_references,
    is_valid,
    validate_composition,
    validation_messages,
)

__all__ = [
    "Beat",
    "BuiltInAsset",
    "Composition",
    "CompositionMetadata",
    "DrumSound",
    "ExternalUri",
    "NewCompositionSettings",
    "PlaybackPosition",
    "PlaybackState",
    "Section",
    "SectionColor",
    "SoundCategory",
    "Track",
    "CompositionLimits",
    "DEFAULT_LIMITS",
    "SoundCatalog",
    "SoundNotFoundError",
    "create_empty_beat",
    "create_empty_bars",
    "create_track",
    "create_section",
    "create_composition",
    "attach_catalog",
    "new_composition",
    "Violation",
    "ViolationKind",
    "validate_composition",
    "validation_messages",
    "is_valid",
    "audit_references",
    "CompositionSerializer",
    "CompositionDocumentError",
    "CompositionFileAdapter",
    "CompositionRepository",
    "LocalCompositionRepository",
    "InMemoryCompositionRepository",
    "CompositionRepositoryError",
    "CompositionNotFoundError",
]
