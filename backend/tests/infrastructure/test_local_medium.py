"""Local Media — in-memory capacity and JSON file persistence."""

import pytest

from studyfront.infrastructure.local_medium import InMemoryMedium, JsonFileMedium


def test_in_memory_round_trip_and_remove():
    medium = InMemoryMedium()
    medium.set("sf:a", "1")
    assert medium.get("sf:a") == "1"
    medium.remove("sf:a")
    assert medium.get("sf:a") is None
    medium.remove("sf:a")


def test_in_memory_capacity_raises_when_full():
    medium = InMemoryMedium(max_bytes=10)
    medium.set("k", "12345")
    with pytest.raises(OSError):
        medium.set("k2", "123456")
    assert medium.get("k2") is None


def test_in_memory_overwrite_reuses_entry_bytes():
    medium = InMemoryMedium(max_bytes=10)
    medium.set("k", "123456789")
    medium.set("k", "987654321")
    assert medium.get("k") == "987654321"


def test_json_file_persists_across_instances(tmp_path):
    path = tmp_path / "nested" / "drafts.json"
    JsonFileMedium(path).set("sf:draftPosts", "[]")
    assert JsonFileMedium(path).get("sf:draftPosts") == "[]"
    assert not list(path.parent.glob("*.tmp"))


def test_json_file_missing_reads_empty(tmp_path):
    medium = JsonFileMedium(tmp_path / "none.json")
    assert medium.get("anything") is None
    assert medium.keys() == []


def test_json_file_corrupt_raises_on_read_and_is_replaced_on_write(tmp_path):
    path = tmp_path / "drafts.json"
    path.write_text("{not json", encoding="utf-8")
    medium = JsonFileMedium(path)
    with pytest.raises(ValueError):
        medium.get("sf:aiUsage")
    medium.set("sf:aiUsage", '{"day": "2026-01-01", "count": 1}')
    assert medium.get("sf:aiUsage") == '{"day": "2026-01-01", "count": 1}'
