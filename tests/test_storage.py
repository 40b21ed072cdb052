"""Tests for segment files and the resume offset arithmetic."""

from rangeget.models import RangeSpec
from rangeget.storage import SegmentStore


def test_segment_naming(tmp_path):
    store = SegmentStore(tmp_path / "parts", "movie.mkv")
    assert store.segment_path(3) == tmp_path / "parts" / "movie.mkv.part-3"


def test_ensure_dir_creates_parts_folder(tmp_path):
    store = SegmentStore(tmp_path / "parts", "a.bin")
    store.ensure_dir()
    store.ensure_dir()
    assert (tmp_path / "parts").is_dir()


def test_new_segment_is_created_empty(tmp_path):
    store = SegmentStore(tmp_path, "a.bin")
    spec = RangeSpec(1, 0, 100)

    f, existing = store.open_segment(spec)
    f.close()

    assert existing == 0
    assert spec == RangeSpec(1, 0, 100)
    assert store.segment_path(1).read_bytes() == b""


def test_partial_segment_advances_spec(tmp_path):
    store = SegmentStore(tmp_path, "a.bin")
    store.segment_path(2).write_bytes(b"x" * 40)
    spec = RangeSpec(2, 250, 250)

    f, existing = store.open_segment(spec)
    with f:
        f.write(b"y")

    assert existing == 40
    assert spec == RangeSpec(2, 290, 210)
    assert store.segment_path(2).read_bytes() == b"x" * 40 + b"y"


def test_full_segment_leaves_nothing_to_fetch(tmp_path):
    store = SegmentStore(tmp_path, "a.bin")
    store.segment_path(1).write_bytes(b"z" * 250)
    spec = RangeSpec(1, 0, 250)

    f, existing = store.open_segment(spec)
    f.close()

    assert existing == 250
    assert spec.size == 0
    assert spec.offset == 250


def test_oversized_segment_clamps_to_zero(tmp_path):
    store = SegmentStore(tmp_path, "a.bin")
    store.segment_path(1).write_bytes(b"z" * 300)
    spec = RangeSpec(1, 0, 250)

    f, existing = store.open_segment(spec)
    f.close()

    assert existing == 250
    assert spec.size == 0
    assert store.segment_path(1).stat().st_size == 250


def test_remove_missing_segment_is_not_an_error(tmp_path):
    store = SegmentStore(tmp_path, "a.bin")
    assert store.remove(7) is False
    store.segment_path(7).write_bytes(b"1")
    assert store.remove(7) is True
    assert not store.segment_path(7).exists()


def test_existing_indexes_lists_numbered_segments_only(tmp_path):
    store = SegmentStore(tmp_path, "a[1].bin")
    for name in ["a[1].bin.part-3", "a[1].bin.part-1", "a[1].bin.part-x", "a[1].bin.metadata", "b.bin.part-2"]:
        (tmp_path / name).write_bytes(b"")

    assert store.existing_indexes() == [1, 3]


def test_existing_indexes_without_parts_dir(tmp_path):
    assert SegmentStore(tmp_path / "missing", "a.bin").existing_indexes() == []
