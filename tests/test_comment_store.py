"""
Tests for the per-day comment store.
"""

import json
import threading
from unittest.mock import patch

import pytest

from api.comment_store import CommentStore
from api.shared.errors import InvalidFilename, InvalidFormat, NotFound, StorageError
from api.shared.filenames import DateKey

from .conftest import ACQUISITION, OTHER_ACQUISITION


@pytest.fixture
def store(data_root):
    return CommentStore(data_root)


def _comments_file(data_root):
    return data_root / "2025" / "05" / "14" / "JSON" / "comments.json"


class TestGetComment:
    def test_missing_file_creates_empty_object(self, store, data_root):
        assert store.get_comment(ACQUISITION) is None

        path = _comments_file(data_root)
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == {}

    def test_idempotent_and_keeps_other_keys(self, store, data_root):
        store.set_comment(OTHER_ACQUISITION, "keep me")

        assert store.get_comment(ACQUISITION) is None
        assert store.get_comment(ACQUISITION) is None
        stored = json.loads(_comments_file(data_root).read_text(encoding="utf-8"))
        assert stored == {OTHER_ACQUISITION: "keep me"}

    def test_corrupt_file_is_reported(self, store, data_root):
        path = _comments_file(data_root)
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            store.get_comment(ACQUISITION)

    def test_lazy_create_keeps_comment_written_meanwhile(self, store, data_root):
        other = CommentStore(data_root)

        def read_then_lose_race(path):
            other.set_comment(OTHER_ACQUISITION, "keep me")
            raise NotFound("File not found: comments.json")

        with patch.object(store, "_read", side_effect=read_then_lose_race):
            assert store.get_comment(ACQUISITION) is None

        assert other.get_comment(OTHER_ACQUISITION) == "keep me"

    def test_concurrent_first_reads(self, store, data_root):
        errors = []
        barrier = threading.Barrier(6)

        def read():
            barrier.wait()
            try:
                store.get_comment(ACQUISITION)
            except StorageError as e:
                errors.append(e)

        threads = [threading.Thread(target=read) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert json.loads(_comments_file(data_root).read_text(encoding="utf-8")) == {}
        assert [p.name for p in _comments_file(data_root).parent.iterdir()] == ["comments.json"]

    def test_invalid_names_never_touch_disk(self, store, data_root):
        with pytest.raises(InvalidFilename):
            store.get_comment("../comments.json")
        with pytest.raises(InvalidFormat):
            store.get_comment("data-2025-05.json")
        assert list(data_root.iterdir()) == []


class TestSetComment:
    def test_round_trip(self, store):
        store.set_comment(ACQUISITION, "hello")
        assert store.get_comment(ACQUISITION) == "hello"

    def test_last_write_wins(self, store):
        store.set_comment(ACQUISITION, "first")
        store.set_comment(ACQUISITION, "second")
        assert store.get_comment(ACQUISITION) == "second"

    def test_writes_two_space_indent(self, store, data_root):
        store.set_comment(ACQUISITION, "noisy run")
        text = _comments_file(data_root).read_text(encoding="utf-8")
        assert text == json.dumps({ACQUISITION: "noisy run"}, indent=2)

    def test_failed_write_keeps_previous_file(self, store, data_root):
        store.set_comment(ACQUISITION, "original")
        before = _comments_file(data_root).read_text(encoding="utf-8")

        with patch("api.shared.json_io.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError):
                store.set_comment(ACQUISITION, "lost")

        assert _comments_file(data_root).read_text(encoding="utf-8") == before
        assert [p.name for p in _comments_file(data_root).parent.iterdir()] == ["comments.json"]


def test_list_comments(store):
    key = DateKey("2025", "05", "14")
    assert store.list_comments(key) == {}
    store.set_comment(ACQUISITION, "a")
    store.set_comment(OTHER_ACQUISITION, "b")
    assert store.list_comments(key) == {ACQUISITION: "a", OTHER_ACQUISITION: "b"}


def test_concurrent_writers_last_one_wins(store, data_root):
    errors = []

    def write(n):
        for i in range(50):
            try:
                store.set_comment(ACQUISITION, f"writer {n} #{i}")
            except StorageError as e:
                errors.append(e)

    threads = [threading.Thread(target=write, args=(n,)) for n in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert store.get_comment(ACQUISITION).endswith("#49")
    assert [p.name for p in _comments_file(data_root).parent.iterdir()] == ["comments.json"]
