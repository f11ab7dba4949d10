from datetime import datetime

import pytest

from composition.factories import create_track
from composition.models import (
    Beat,
    BuiltInAsset,
    Composition,
    DrumSound,
    ExternalUri,
    PlaybackPosition,
    PlaybackState,
    Section,
    SectionColor,
    Track,
)


def test_models_accept_out_of_range_values_for_later_validation():
    composition = Composition(id="c", title="Loose", tempo=999, beats_per_bar=0, number_of_bars=-1)
    track = Track(id="t", name="Kick", sound_id="kick", volume=1.5)
    beat = Beat(active=True, volume=2.0)

    assert composition.tempo == 999
    assert track.volume == 1.5
    assert beat.volume == 2.0


def test_camel_case_aliases_and_snake_case_names_both_populate():
    by_alias = Track.model_validate({"id": "t", "name": "Kick", "soundId": "kick", "bars": []})
    by_name = Track(id="t", name="Kick", sound_id="kick", bars=[])

    assert by_alias == by_name
    assert by_alias.model_dump(by_alias=True)["soundId"] == "kick"


def test_steps_per_bar_multiplies_meter_and_subdivision():
    composition = Composition(id="c", title="T", beats_per_bar=3, subdivision=4)
    assert composition.steps_per_bar == 12


def test_touch_updates_timestamp():
    composition = Composition(id="c", title="T")
    before = composition.modified_at
    composition.touch()
    assert composition.modified_at >= before
    assert isinstance(composition.modified_at, datetime)
    assert composition.modified_at.tzinfo is not None


def test_add_and_remove_track_and_section_refresh_timestamp():
    composition = Composition(id="c", title="T", number_of_bars=2)
    track = create_track("kick", "Kick", 2, 16)
    section = Section(id="s", name="A", start_bar=1, end_bar=2)
    before = composition.modified_at

    composition.add_track(track)
    composition.add_section(section)
    assert composition.get_track(track.id) is track
    assert composition.get_section("s") is section
    assert composition.modified_at >= before

    assert composition.remove_track(track.id) is track
    assert composition.remove_section("s") is section
    assert composition.tracks == []
    assert composition.sections == []


def test_remove_unknown_ids_raise_key_error():
    composition = Composition(id="c", title="T")
    with pytest.raises(KeyError):
        composition.remove_track("missing")
    with pytest.raises(KeyError):
        composition.remove_section("missing")


def test_track_beat_at_bounds():
    track = create_track("kick", "Kick", 2, 4)
    assert track.beat_at(1, 3).active is False
    with pytest.raises(IndexError):
        track.beat_at(2, 0)
    with pytest.raises(IndexError):
        track.beat_at(0, 4)
    with pytest.raises(IndexError):
        track.beat_at(-1, 0)


def test_section_color_rejects_unknown_names():
    assert Section(id="s", name="A", start_bar=1, end_bar=1, color="cyan").color is SectionColor.CYAN
    with pytest.raises(ValueError):
        Section(id="s", name="A", start_bar=1, end_bar=1, color="magenta")


def test_section_overlap_and_bar_count():
    first = Section(id="a", name="A", start_bar=1, end_bar=4)
    second = Section(id="b", name="B", start_bar=4, end_bar=6)
    third = Section(id="c", name="C", start_bar=5, end_bar=8)

    assert first.bar_count == 4
    assert first.overlaps(second)
    assert not first.overlaps(third)


def test_drum_sound_source_is_a_tagged_variant():
    builtin = DrumSound.model_validate(
        {"id": "k", "name": "Kick", "source": {"kind": "builtin", "assetId": 4}, "category": "wood"}
    )
    external = DrumSound.model_validate(
        {"id": "s", "name": "Snare", "source": {"kind": "uri", "uri": "file:///snare.wav"}}
    )

    assert isinstance(builtin.source, BuiltInAsset)
    assert builtin.source.asset_id == 4
    assert isinstance(external.source, ExternalUri)
    assert external.category.value == "other"
    with pytest.raises(ValueError):
        DrumSound.model_validate({"id": "x", "name": "X", "source": {"kind": "midi", "uri": "x"}})


def test_metadata_summary(example_composition: Composition):
    metadata = example_composition.metadata("library/groove.json")

    assert metadata.id == example_composition.id
    assert metadata.track_count == 2
    assert metadata.number_of_bars == 4
    assert metadata.model_dump(by_alias=True)["filePath"] == "library/groove.json"


def test_playback_position_is_frozen_and_bounded():
    position = PlaybackPosition(bar=1, step=15)
    assert position.is_within(2, 16)
    assert not position.is_within(1, 16)
    assert not PlaybackPosition(bar=0, step=-1).is_within(1, 16)
    with pytest.raises(ValueError):
        position.bar = 0  # type: ignore[misc]
    assert PlaybackState("paused") is PlaybackState.PAUSED
