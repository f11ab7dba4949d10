"""Pydantic-powered data model for step-sequencer compositions.

A composition is a grid of on/off beats organised as tracks x bars x
steps, plus named sections labelling bar ranges. The models only enforce
types: range and dimension rules live in :mod:`composition.validation`
so malformed documents can still be loaded and reported on in full.

Serialized documents use camelCase keys (``numberOfBars``, ``soundId``)
while Python code works with snake_case attributes.
"""
from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(UTC)


class DocumentModel(BaseModel):
    """Base model mapping snake_case attributes onto camelCase document keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SectionColor(str, Enum):
    """Theme colour keys available for section markers."""

    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    ORANGE = "orange"
    PINK = "pink"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"


class SoundCategory(str, Enum):
    """Grouping used by the sound library when listing drum sounds."""

    CONGAS = "congas"
    DJEMBE = "djembe"
    BONGOS = "bongos"
    TIMBALES = "timbales"
    SHAKERS = "shakers"
    BELLS = "bells"
    WOOD = "wood"
    METALLIC = "metallic"
    OTHER = "other"


class PlaybackState(str, Enum):
    PLAYING = "playing"
    STOPPED = "stopped"
    PAUSED = "paused"


class Beat(DocumentModel):
    """Single grid cell: on/off plus an optional volume override."""

    active: bool = False
    volume: Optional[float] = Field(
        None, description="Per-beat volume override (0-1); falls back to the track volume"
    )


class Track(DocumentModel):
    """One instrument's pattern across every bar of the composition."""

    id: str
    name: str
    sound_id: str = Field(..., description="Reference into the external sound catalog")
    volume: float = 0.8
    bars: List[List[Beat]] = Field(
        default_factory=list, description="Pattern data indexed as bars[bar][step]"
    )

    def beat_at(self, bar: int, step: int) -> Beat:
        """Return the beat at a 0-indexed grid coordinate."""

        if bar < 0 or bar >= len(self.bars):
            raise IndexError(f"Bar index {bar} out of range for track {self.id!r}")
        row = self.bars[bar]
        if step < 0 or step >= len(row):
            raise IndexError(f"Step index {step} out of range for bar {bar} of track {self.id!r}")
        return row[step]


class Section(DocumentModel):
    """Named, coloured label over an inclusive, 1-indexed bar range."""

    id: str
    name: str
    start_bar: int
    end_bar: int
    color: SectionColor = SectionColor.BLUE

    @property
    def bar_count(self) -> int:
        return max(0, self.end_bar - self.start_bar + 1)

    def overlaps(self, other: Section) -> bool:
        return self.start_bar <= other.end_bar and other.start_bar <= self.end_bar


class ExternalUri(DocumentModel):
    """Sound asset resolved from a file path or URI."""

    kind: Literal["uri"] = "uri"
    uri: str


class BuiltInAsset(DocumentModel):
    """Sound asset bundled with the application and addressed by number."""

    kind: Literal["builtin"] = "builtin"
    asset_id: int


SoundSource = Annotated[Union[ExternalUri, BuiltInAsset], Field(discriminator="kind")]


class DrumSound(DocumentModel):
    """Catalog entry describing a playable drum sound."""

    id: str
    name: str
    source: SoundSource
    category: SoundCategory = SoundCategory.OTHER


class CompositionMetadata(DocumentModel):
    """Summary of a stored composition used for library listings."""

    id: str
    title: str
    created_at: datetime
    modified_at: datetime
    tempo: int
    number_of_bars: int
    track_count: int
    file_path: str = Field(..., description="File path or storage key")


class NewCompositionSettings(DocumentModel):
    """User-supplied options for starting a new composition."""

    title: str
    tempo: int = 120
    beats_per_bar: int = 4
    subdivision: int = 4
    number_of_bars: int = 4
    initial_sounds: List[str] = Field(
        default_factory=list, description="Sound ids to add as tracks once a catalog is attached"
    )

    @property
    def steps_per_bar(self) -> int:
        return self.beats_per_bar * self.subdivision


class Composition(DocumentModel):
    """Aggregate root owning timing parameters, tracks, and sections."""

    id: str
    title: str
    created_at: datetime = Field(default_factory=utc_now)
    modified_at: datetime = Field(default_factory=utc_now)
    tempo: int = Field(120, description="Tempo in beats per minute")
    beats_per_bar: int = 4
    subdivision: int = Field(4, description="Steps per beat")
    number_of_bars: int = 4
    sections: List[Section] = Field(default_factory=list)
    tracks: List[Track] = Field(default_factory=list)
    available_sounds: List[str] = Field(
        default_factory=list, description="Sound ids offered when adding tracks"
    )

    @property
    def steps_per_bar(self) -> int:
        return self.beats_per_bar * self.subdivision

    def touch(self) -> None:
        """Update the modification timestamp."""

        self.modified_at = utc_now()

    def track_index(self, track_id: str) -> int:
        for index, track in enumerate(self.tracks):
            if track.id == track_id:
                return index
        raise KeyError(f"Track {track_id!r} not found")

    def get_track(self, track_id: str) -> Track:
        return self.tracks[self.track_index(track_id)]

    def section_index(self, section_id: str) -> int:
        for index, section in enumerate(self.sections):
            if section.id == section_id:
                return index
        raise KeyError(f"Section {section_id!r} not found")

    def get_section(self, section_id: str) -> Section:
        return self.sections[self.section_index(section_id)]

    def add_track(self, track: Track) -> None:
        """Append a track while keeping timestamps accurate."""

        self.tracks.append(track)
        self.touch()

    def remove_track(self, track_id: str) -> Track:
        """Remove and return a track, raising if the id is unknown."""

        removed = self.tracks.pop(self.track_index(track_id))
        self.touch()
        return removed

    def add_section(self, section: Section) -> None:
        """Append a section while keeping timestamps accurate."""

        self.sections.append(section)
        self.touch()

    def remove_section(self, section_id: str) -> Section:
        """Remove and return a section, raising if the id is unknown."""

        removed = self.sections.pop(self.section_index(section_id))
        self.touch()
        return removed

    def metadata(self, file_path: str) -> CompositionMetadata:
        """Summarise the composition for a library listing."""

        return CompositionMetadata(
            id=self.id,
            title=self.title,
            created_at=self.created_at,
            modified_at=self.modified_at,
            tempo=self.tempo,
            number_of_bars=self.number_of_bars,
            track_count=len(self.tracks),
            file_path=file_path,
        )


class PlaybackPosition(BaseModel):
    """Current playhead location; both coordinates are 0-indexed."""

    model_config = ConfigDict(frozen=True)

    bar: int = 0
    step: int = 0

    def is_within(self, number_of_bars: int, steps_per_bar: int) -> bool:
        return 0 <= self.bar < number_of_bars and 0 <= self.step < steps_per_bar
