from __future__ import annotations

import json
from pathlib import Path

import pytest

from tile_import.json_files import read_json_object, write_json_atomic


def test_read_json_object_missing_file(tmp_path: Path) -> None:
    assert read_json_object(tmp_path / "none.json") is None


@pytest.mark.parametrize("content", ["{broken", "[1, 2]", "null"])
def test_read_json_object_rejects_non_objects(tmp_path: Path, content) -> None:
    path = tmp_path / "data.json"
    path.write_text(content, encoding="utf-8")
    assert read_json_object(path) is None


def test_write_json_atomic_keeps_old_file_when_payload_fails(tmp_path: Path) -> None:
    path = tmp_path / "data.json"
    write_json_atomic(path, {"grid_width": 2})

    with pytest.raises(TypeError):
        write_json_atomic(path, {"grid_width": object()})

    assert json.loads(path.read_text(encoding="utf-8")) == {"grid_width": 2}
    assert [p.name for p in tmp_path.iterdir()] == ["data.json"]
