"""Tests for whole-catalog save/load and the demo harness."""

from __future__ import annotations

from pathlib import Path

import pytest

from mediacat.catalog.entities import Multimedia
from mediacat.catalog.manager import Manager
from mediacat.demo import SAMPLE_GROUP, run_demo, seed_catalog
from mediacat.persistence import load_catalog, save_catalog


class TestSaveLoad:
    def test_round_trip(self, tmp_path: Path, manager: Manager, launcher):
        seed_catalog(manager)
        path = tmp_path / "catalog.txt"

        assert save_catalog(manager, path) == 3

        fresh = Manager(launcher)
        assert load_catalog(fresh, path) == 3
        assert fresh.snapshot_entities() == manager.snapshot_entities()
        # Groups are not persisted
        assert fresh.snapshot_groups() == {}

    def test_save_replaces_previous_contents(self, tmp_path: Path, manager: Manager, launcher):
        path = tmp_path / "catalog.txt"
        manager.create_video("v1", "/y.mp4", 10)
        save_catalog(manager, path)
        save_catalog(manager, path)

        assert path.read_text(encoding="utf-8") == "Video v1 /y.mp4 10\n"
        assert not (tmp_path / "catalog.txt.tmp").exists()

        fresh = Manager(launcher)
        assert load_catalog(fresh, path) == 1

    def test_empty_catalog_writes_empty_file(self, tmp_path: Path, manager: Manager):
        path = tmp_path / "nested" / "catalog.txt"
        assert save_catalog(manager, path) == 0
        assert path.read_text(encoding="utf-8") == ""

    def test_unencodable_entity_skipped(self, tmp_path: Path, manager: Manager):
        manager.create_video("bad name", "/y.mp4", 10)
        manager.create_video("good", "/g.mp4", 3)
        path = tmp_path / "catalog.txt"

        assert save_catalog(manager, path) == 1
        assert path.read_text(encoding="utf-8") == "Video good /g.mp4 3\n"

    def test_load_keeps_records_before_abort(self, tmp_path: Path, manager: Manager):
        path = tmp_path / "catalog.txt"
        path.write_text(
            "Video a /a.mp4 1\nVideo b /b.mp4 2\nVideo a /c.mp4 3\nVideo d /d.mp4 4\n",
            encoding="utf-8",
        )
        assert load_catalog(manager, path) == 2
        assert set(manager.snapshot_entities()) == {"a", "b"}

    def test_load_abort_counts_only_this_load(self, tmp_path: Path, manager: Manager):
        manager.create_video("x", "/x.mp4", 1)
        manager.create_video("y", "/y.mp4", 2)
        path = tmp_path / "catalog.txt"
        path.write_text("Video a /a.mp4 1\nVideo x /c.mp4 3\n", encoding="utf-8")

        assert load_catalog(manager, path) == 1
        assert set(manager.snapshot_entities()) == {"x", "y", "a"}

    def test_failed_save_leaves_no_temp_file(self, tmp_path: Path, manager: Manager, monkeypatch):
        path = tmp_path / "catalog.txt"
        path.write_text("Video old /o.mp4 1\n", encoding="utf-8")
        manager.create_video("v1", "/y.mp4", 10)

        def disk_full(self, target):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(Multimedia, "serialize", disk_full)
        with pytest.raises(OSError):
            save_catalog(manager, path)

        assert not (tmp_path / "catalog.txt.tmp").exists()
        assert path.read_text(encoding="utf-8") == "Video old /o.mp4 1\n"

    def test_load_missing_file(self, tmp_path: Path, manager: Manager):
        assert load_catalog(manager, tmp_path / "missing.txt") == 0


class TestDemo:
    def test_seed(self, manager: Manager):
        seed_catalog(manager)
        assert set(manager.snapshot_entities()) == {"test-photo", "test-video", "ToyStory"}
        assert len(manager.get_group(SAMPLE_GROUP)) == 2

    def test_run_demo(self, tmp_path: Path, launcher):
        path = tmp_path / "multimedias.txt"
        out = run_demo(path, launcher)

        assert "Name: test-photo, filepath: ./test-photo.jpg, Latitude: 10, Longitude: 10" in out
        assert "Name: test-video, filepath: ./test-video.mp4, Duration: 10" in out
        assert "The duration for chapter 4 of the film is 50" in out
        assert f"Group Name: {SAMPLE_GROUP}" in out
        assert len(path.read_text(encoding="utf-8").splitlines()) == 3

    def test_run_demo_twice_on_same_file(self, tmp_path: Path, launcher):
        path = tmp_path / "multimedias.txt"
        first = run_demo(path, launcher)
        assert run_demo(path, launcher) == first
