import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
for entry in (ROOT, ROOT / "src"):
    if str(entry) not in sys.path:
        sys.path.insert(0, str(entry))

from composition.catalog import SoundCatalog  # noqa: E402
from composition.factories import attach_catalog, create_composition, create_section  # noqa: E402
from composition.models import (  # noqa: E402
    BuiltInAsset,
    Composition,
    DrumSound,
    ExternalUri,
    NewCompositionSettings,
    SoundCategory,
)


@pytest.fixture()
def catalog() -> SoundCatalog:
    return SoundCatalog(
        sounds=[
            DrumSound(
                id="conga_hi",
                name="Conga High",
                source=BuiltInAsset(asset_id=3),
                category=SoundCategory.CONGAS,
            ),
            DrumSound(
                id="djembe_bass",
                name="Djembe Bass",
                source=ExternalUri(uri="file:///sounds/djembe_bass.wav"),
                category=SoundCategory.DJEMBE,
            ),
            DrumSound(
                id="shaker",
                name="Shaker",
                source=BuiltInAsset(asset_id=7),
                category=SoundCategory.SHAKERS,
            ),
        ]
    )


@pytest.fixture()
def settings() -> NewCompositionSettings:
    return NewCompositionSettings(
        title="Groove",
        tempo=120,
        beats_per_bar=4,
        subdivision=4,
        number_of_bars=4,
        initial_sounds=["conga_hi", "djembe_bass"],
    )


@pytest.fixture()
def example_composition(settings: NewCompositionSettings, catalog: SoundCatalog) -> Composition:
    composition = create_composition(settings)
    attach_catalog(composition, catalog, settings.initial_sounds)
    composition.tracks[0].bars[0][0].active = True
    composition.tracks[0].bars[1][4].active = True
    composition.tracks[0].bars[1][4].volume = 0.5
    composition.tracks[1].bars[3][15].active = True
    composition.sections.append(create_section("Intro", 1, 2))
    composition.sections.append(create_section("Verse", 3, 4, "green"))
    return composition
