from __future__ import annotations

import json
from pathlib import Path

import pytest

import racehistory.utils.file_operations as file_ops


def test_atomic_json_write_updates_file_and_creates_backup(tmp_path):
    target = tmp_path / "spa_6h.json"
    target.write_text(json.dumps({"name": "old"}))

    file_ops.atomic_json_write(target, {"name": "new"}, create_backup=True)

    backup = Path(str(target) + ".backup")
    assert json.loads(target.read_text()) == {"name": "new"}
    assert json.loads(backup.read_text()) == {"name": "old"}


def test_atomic_json_write_skips_backup_when_disabled(tmp_path):
    target = tmp_path / "spa_6h.json"
    target.write_text(json.dumps({"name": "old"}))

    file_ops.atomic_json_write(target, {"name": "new"}, create_backup=False)

    backup = Path(str(target) + ".backup")
    assert json.loads(target.read_text()) == {"name": "new"}
    assert backup.exists() is False


def test_atomic_json_write_creates_parent_dirs(tmp_path):
    target = tmp_path / "out" / "nested" / "race.json"

    file_ops.atomic_json_write(target, {"name": "São Paulo"}, indent=0)

    text = target.read_text(encoding="utf-8")
    assert "São Paulo" in text
    assert json.loads(text) == {"name": "São Paulo"}


def test_atomic_json_write_raises_and_preserves_original_on_move_failure(tmp_path, monkeypatch):
    target = tmp_path / "spa_6h.json"
    target.write_text(json.dumps({"name": "old"}))

    monkeypatch.setattr(
        file_ops.shutil, "move", lambda src, dst: (_ for _ in ()).throw(RuntimeError("disk full"))
    )

    with pytest.raises(OSError, match="Failed to write"):
        file_ops.atomic_json_write(target, {"name": "new"}, create_backup=True)

    assert json.loads(target.read_text()) == {"name": "old"}
    assert list(tmp_path.glob(f".{target.name}.*.tmp")) == []
