from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from tile_import.policy_settings_store import (
    SCHEMA_VERSION,
    PolicySettingsStore,
    default_policy_settings,
    default_settings_path,
)


def test_load_returns_defaults_when_no_settings_file(tmp_path: Path) -> None:
    settings_path = tmp_path / "import_settings.json"
    store = PolicySettingsStore(settings_path=settings_path)

    loaded = store.load()

    assert loaded == default_policy_settings()
    assert not settings_path.exists()


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    settings_path = tmp_path / "nested" / "import_settings.json"
    store = PolicySettingsStore(settings_path=settings_path)

    payload = default_policy_settings()
    payload["dither_choice"] = 2
    payload["background_color_choice"] = 1
    payload["grid_width"] = 4
    store.save(payload)

    loaded = store.load()

    assert loaded["dither_choice"] == 2
    assert loaded["background_color_choice"] == 1
    assert loaded["grid_width"] == 4
    assert loaded["grid_height"] == 1
    assert loaded["schema_version"] == SCHEMA_VERSION
    assert [p.name for p in settings_path.parent.iterdir()] == ["import_settings.json"]


def test_load_falls_back_to_defaults_for_broken_file(tmp_path: Path) -> None:
    settings_path = tmp_path / "import_settings.json"
    settings_path.write_text("{not json", encoding="utf-8")
    assert PolicySettingsStore(settings_path).load() == default_policy_settings()

    settings_path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert PolicySettingsStore(settings_path).load() == default_policy_settings()


def test_load_keeps_out_of_range_values_for_validation(tmp_path: Path) -> None:
    settings_path = tmp_path / "import_settings.json"
    settings_path.write_text(json.dumps({"scale_choice": 9}), encoding="utf-8")

    loaded = PolicySettingsStore(settings_path).load()

    assert loaded["scale_choice"] == 9



def test_load_ignores_unknown_keys_and_keeps_other_schema_values(tmp_path: Path) -> None:
    settings_path = tmp_path / "import_settings.json"
    settings_path.write_text(
        json.dumps({"schema_version": 99, "grid_height": 3, "window_geometry": "800x600"}),
        encoding="utf-8",
    )

    loaded = PolicySettingsStore(settings_path).load()

    assert loaded["grid_height"] == 3
    assert loaded["schema_version"] == SCHEMA_VERSION
    assert "window_geometry" not in loaded


def test_save_writes_only_policy_keys(tmp_path: Path) -> None:
    settings_path = tmp_path / "import_settings.json"

    PolicySettingsStore(settings_path).save({"scale_choice": 2, "last_directory": "/tmp"})

    written = json.loads(settings_path.read_text(encoding="utf-8"))
    assert written == {**default_policy_settings(), "scale_choice": 2}


def test_save_keeps_previous_file_when_write_fails(tmp_path: Path, monkeypatch) -> None:
    settings_path = tmp_path / "import_settings.json"
    store = PolicySettingsStore(settings_path)
    store.save({"dither_choice": 1})

    def _fail_replace(self, target):
        raise OSError("disk full")

    monkeypatch.setattr(Path, "replace", _fail_replace)
    with pytest.raises(OSError):
        store.save({"dither_choice": 2})

    assert store.load()["dither_choice"] == 1
    assert sorted(os.listdir(tmp_path)) == ["import_settings.json"]


@pytest.mark.parametrize(
    ("os_name", "env", "expected"),
    [
        ("nt", {"APPDATA": "AppData"}, Path("AppData") / "TileImport" / "import_settings.json"),
        ("nt", {}, Path("home") / ".tileimport" / "import_settings.json"),
        ("posix", {"XDG_CONFIG_HOME": "xdg"}, Path("xdg") / "tileimport" / "import_settings.json"),
        ("posix", {}, Path("home") / ".config" / "tileimport" / "import_settings.json"),
    ],
)
def test_default_settings_path(os_name, env, expected) -> None:
    assert default_settings_path(os_name=os_name, env=env, home=Path("home")) == expected


def test_store_uses_default_settings_path(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr("os.name", "posix")

    assert PolicySettingsStore().settings_path == tmp_path / "config" / "tileimport" / "import_settings.json"
