"""Tests for the video processor pipeline."""

import re

import pytest

from video_ingest.api.schemas import ProcessingFailure, ProcessingSuccess
from video_ingest.errors import BlobNotFoundError, StoreAccessError
from video_ingest.processor import SUCCESS_MESSAGE, VideoProcessor

from conftest import FAKE_JPEG, SAMPLE_VIDEO, RecordingBackend, StubExtractor

THUMBNAIL_RE = re.compile(r"^u1/thumbnail_\d+_[0-9a-f]{10}\.jpg$")


class TestSuccessfulRun:
    async def test_scenario_u1(self, processor, backend, stored_video):
        result = await processor.process({"owner_id": "u1", "video_path": stored_video})

        assert isinstance(result, ProcessingSuccess)
        assert result.success is True
        assert result.message == SUCCESS_MESSAGE
        assert isinstance(result.video_id, int)
        assert result.video_path == stored_video
        assert THUMBNAIL_RE.match(result.thumbnail_path)
        assert len(backend.rows("videos")) == 1

    async def test_thumbnail_written_before_record_references_it(self, processor, backend, stored_video):
        result = await processor.process({"owner_id": "u1", "video_path": stored_video})

        thumbnails = backend.objects("thumbnails")
        assert thumbnails[result.thumbnail_path] == FAKE_JPEG
        assert backend.content_type("thumbnails", result.thumbnail_path) == "image/jpeg"

        (row,) = backend.rows("videos")
        assert row["id"] == result.video_id
        assert row["thumbnail_path"] == result.thumbnail_path
        assert row["storage_path"] == stored_video
        assert row["uploader_id"] == "u1"
        assert backend.call_names() == ["download", "upload", "insert"]

    async def test_extractor_gets_video_bytes_at_one_second(self, processor, extractor, stored_video):
        await processor.process({"owner_id": "u1", "video_path": stored_video})
        assert extractor.calls == [(len(SAMPLE_VIDEO), 1.0)]

    async def test_description_and_tags_forwarded(self, processor, backend, stored_video):
        await processor.process({
            "owner_id": "u1",
            "video_path": stored_video,
            "description": "Mi primer video",
            "tags": ["viaje", "playa"],
        })
        (row,) = backend.rows("videos")
        assert row["description"] == "Mi primer video"
        assert row["tags"] == ["viaje", "playa"]

    async def test_description_and_tags_default_empty(self, processor, backend, stored_video):
        await processor.process({"owner_id": "u1", "video_path": stored_video, "tags": None})
        (row,) = backend.rows("videos")
        assert row["description"] is None
        assert row["tags"] == []

    async def test_two_runs_produce_distinct_records_and_thumbnails(self, processor, backend, stored_video):
        backend.put_object("videos", "u1/456-def.mp4", SAMPLE_VIDEO, content_type="video/mp4")

        first = await processor.process({"owner_id": "u1", "video_path": stored_video})
        second = await processor.process({"owner_id": "u1", "video_path": "u1/456-def.mp4"})

        assert first.video_id != second.video_id
        assert first.thumbnail_path != second.thumbnail_path
        assert len(backend.rows("videos")) == 2
        assert len(backend.objects("thumbnails")) == 2


class TestValidation:
    @pytest.mark.parametrize(
        "payload",
        [
            {"owner_id": "u1"},
            {"video_path": "u1/123-abc.mp4"},
            {"owner_id": "", "video_path": "u1/123-abc.mp4"},
            {"owner_id": "u1", "video_path": "   "},
            {},
        ],
    )
    async def test_missing_fields_rejected_without_store_calls(self, processor, backend, extractor, payload):
        result = await processor.process(payload)

        assert isinstance(result, ProcessingFailure)
        assert result.error == "owner_id y video_path son requeridos"
        assert result.stage == "received"
        assert backend.calls == []
        assert extractor.calls == []

    @pytest.mark.parametrize("payload", [None, [], "owner_id=u1"])
    async def test_non_object_payload_rejected(self, processor, backend, payload):
        result = await processor.process(payload)
        assert isinstance(result, ProcessingFailure)
        assert result.stage == "received"
        assert backend.calls == []

    async def test_bad_tags_type_rejected(self, processor, backend):
        result = await processor.process({"owner_id": "u1", "video_path": "u1/a.mp4", "tags": "a,b"})
        assert isinstance(result, ProcessingFailure)
        assert "tags" in result.error
        assert backend.calls == []


class TestFailures:
    async def test_download_missing_blob(self, processor, backend, extractor):
        result = await processor.process({"owner_id": "u1", "video_path": "u1/missing.mp4"})

        assert isinstance(result, ProcessingFailure)
        assert "Error descargando video" in result.error
        assert result.stage == "downloading"
        assert extractor.calls == []
        assert backend.call_names() == ["download"]
        assert backend.objects("thumbnails") == {}
        assert backend.rows("videos") == []

    async def test_extractor_failure_writes_nothing(self, backend, failing_extractor, stored_video):
        processor = VideoProcessor(backend=backend, extractor=failing_extractor)
        result = await processor.process({"owner_id": "u1", "video_path": stored_video})

        assert isinstance(result, ProcessingFailure)
        assert result.error.startswith("Error generando miniatura:")
        assert "moov atom not found" in result.error
        assert result.stage == "extracting"
        assert backend.call_names() == ["download"]
        assert backend.objects("thumbnails") == {}
        assert backend.rows("videos") == []

    async def test_extractor_io_error(self, backend, stored_video):
        processor = VideoProcessor(backend=backend, extractor=StubExtractor(error=OSError("disk full")))
        result = await processor.process({"owner_id": "u1", "video_path": stored_video})

        assert isinstance(result, ProcessingFailure)
        assert result.stage == "extracting"
        assert "disk full" in result.error

    async def test_thumbnail_upload_failure_skips_record(self, processor, backend, stored_video):
        backend.fail("upload", StoreAccessError("thumbnails: quota exceeded"))
        result = await processor.process({"owner_id": "u1", "video_path": stored_video})

        assert isinstance(result, ProcessingFailure)
        assert result.error.startswith("Error subiendo miniatura:")
        assert result.stage == "uploading_thumbnail"
        assert "insert" not in backend.call_names()
        assert backend.rows("videos") == []

    async def test_record_insert_failure(self, processor, backend, stored_video):
        backend.fail("insert", StoreAccessError("videos: violates foreign key constraint"))
        result = await processor.process({"owner_id": "u1", "video_path": stored_video})

        assert isinstance(result, ProcessingFailure)
        assert result.error.startswith("Error guardando registro:")
        assert result.stage == "persisting"

    async def test_minimal_inserted_row_is_success(self, extractor, stored_video):
        class IdOnlyBackend(RecordingBackend):
            async def insert(self, table, row):
                await super().insert(table, row)
                return {"id": 41}

        store = IdOnlyBackend()
        store.put_object("videos", stored_video, SAMPLE_VIDEO, content_type="video/mp4")
        result = await VideoProcessor(backend=store, extractor=extractor).process(
            {"owner_id": "u1", "video_path": stored_video}
        )

        assert isinstance(result, ProcessingSuccess)
        assert result.video_id == 41
        assert len(store.rows("videos")) == 1

    async def test_unexpected_error_becomes_failure(self, processor, backend, stored_video):
        backend.fail("download", RuntimeError("connection reset"))
        result = await processor.process({"owner_id": "u1", "video_path": stored_video})

        assert isinstance(result, ProcessingFailure)
        assert result.error == "connection reset"
        assert result.stage == "failed"
        assert backend.rows("videos") == []

    async def test_not_found_error_type(self, processor, backend, stored_video):
        backend.fail("download", BlobNotFoundError("videos/u1/123-abc.mp4: Object not found"))
        result = await processor.process({"owner_id": "u1", "video_path": stored_video})
        assert "Object not found" in result.error

    async def test_failure_body_hides_stage(self, processor):
        result = await processor.process({})
        body = result.model_dump()
        assert set(body) == {"success", "error", "timestamp"}
        assert body["success"] is False
