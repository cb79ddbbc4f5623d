"""Tests for generated object paths."""

import re

from video_ingest.tools.naming import (
    build_thumbnail_path,
    build_video_path,
    file_extension,
    random_suffix,
)


def _clock():
    return 1700000000.123


class TestVideoPath:
    def test_layout(self):
        stored = build_video_path("u1", "mp4", clock=_clock, suffix="abc123")
        assert stored.owner_id == "u1"
        assert stored.generated_name == "1700000000123-abc123.mp4"
        assert stored.full_path == "u1/1700000000123-abc123.mp4"

    def test_random_suffix_differs_within_same_millisecond(self):
        first = build_video_path("u1", "mp4", clock=_clock)
        second = build_video_path("u1", "mp4", clock=_clock)
        assert first.full_path != second.full_path
        assert re.match(r"^u1/1700000000123-[0-9a-f]{10}\.mp4$", first.full_path)

    def test_owner_prefix(self):
        stored = build_video_path("owner-42", "mov", clock=_clock)
        assert stored.full_path.startswith("owner-42/")


class TestThumbnailPath:
    def test_layout(self):
        assert build_thumbnail_path("u1", clock=_clock, suffix="f00d") == "u1/thumbnail_1700000000123_f00d.jpg"

    def test_unique_per_call(self):
        assert build_thumbnail_path("u1", clock=_clock) != build_thumbnail_path("u1", clock=_clock)


def test_random_suffix_shape():
    assert re.fullmatch(r"[0-9a-f]{10}", random_suffix())


class TestFileExtension:
    def test_last_dot(self):
        assert file_extension("my.holiday.clip.MOV") == "MOV"

    def test_no_dot(self):
        assert file_extension("clip") == "clip"
