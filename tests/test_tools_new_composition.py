import json
from pathlib import Path

import pytest

from composition.catalog import SoundCatalog
from composition.persistence import CompositionFileAdapter
from composition.validation import validate_composition

from tools import new_composition


def _write_catalog(tmp_path: Path, catalog: SoundCatalog) -> Path:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog.model_dump(mode="json", by_alias=True)), encoding="utf-8")
    return path


def test_cli_writes_composition_with_initial_tracks(tmp_path: Path, catalog: SoundCatalog, capsys) -> None:
    output = tmp_path / "library" / "groove.json"

    exit_code = new_composition.main(
        [
            "--title",
            "Groove",
            "--tempo",
            "96",
            "--bars",
            "2",
            "--catalog",
            str(_write_catalog(tmp_path, catalog)),
            "--sound",
            "shaker",
            "--sound",
            "conga_hi",
            "--output",
            str(output),
        ]
    )

    assert exit_code == 0
    composition = CompositionFileAdapter(output.parent).load(output.name)
    assert composition.title == "Groove"
    assert composition.tempo == 96
    assert [track.sound_id for track in composition.tracks] == ["shaker", "conga_hi"]
    assert composition.available_sounds == ["conga_hi", "djembe_bass", "shaker"]
    assert validate_composition(composition) == []
    captured = capsys.readouterr()
    assert composition.id in captured.out
    assert "Tracks: 2" in captured.out


def test_cli_without_catalog_writes_bare_composition(tmp_path: Path) -> None:
    output = tmp_path / "bare.json"

    assert new_composition.main(["--title", "Bare", "--output", str(output)]) == 0

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["tracks"] == []
    assert payload["availableSounds"] == []
    assert payload["numberOfBars"] == 4


def test_cli_rejects_sounds_without_catalog(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        new_composition.main(["--title", "X", "--sound", "shaker", "--output", str(tmp_path / "x.json")])


def test_cli_rejects_unknown_sound(tmp_path: Path, catalog: SoundCatalog) -> None:
    with pytest.raises(SystemExit):
        new_composition.main(
            [
                "--title",
                "X",
                "--catalog",
                str(_write_catalog(tmp_path, catalog)),
                "--sound",
                "cowbell",
                "--output",
                str(tmp_path / "x.json"),
            ]
        )
    assert not (tmp_path / "x.json").exists()
