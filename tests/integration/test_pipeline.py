"""Integration tests for the complete pipeline."""

import pytest

from image_optimizer.core.exceptions import CompressionError, ResizeError, StorageReadError
from image_optimizer.core.factories import ProcessingPipelineFactory
from image_optimizer.core.models import Notification, OptimizerConfig
from image_optimizer.handler import process_event
from image_optimizer.testing.fakes import (
    FakeLogger,
    FakeS3Client,
    FakeTinifySession,
    create_test_image,
)

BUCKET = "bolha-images"
SOURCE_KEY = "photos/42_uncompressed.jpg"


def _event(*keys):
    return {"Records": [{"s3": {"object": {"key": k, "size": 500000}}} for k in keys]}


@pytest.fixture
def fake_s3():
    s3_client = FakeS3Client()
    bucket = s3_client.create_bucket(BUCKET)
    bucket.add_object(SOURCE_KEY, b"\xff\xd8" + b"j" * 499998)
    return s3_client


@pytest.fixture
def session():
    return FakeTinifySession(
        output_location="https://api.tinify.com/output/abc123",
        resized_body=b"r" * 120000,
    )


@pytest.fixture
def pipeline(fake_s3, session):
    return ProcessingPipelineFactory.create_pipeline(
        OptimizerConfig(api_key="secret"),
        s3_client=fake_s3,
        http_session=session,
        logger=FakeLogger(),
    )


class TestPipelineIntegration:
    """Integration tests for the complete optimization pipeline."""

    def test_end_to_end(self, fake_s3, session, pipeline):
        result = process_event(_event(SOURCE_KEY), pipeline)

        assert result["optimized_count"] == 1
        output = fake_s3.get_bucket(BUCKET).get_object("photos/42.jpg")
        assert output is not None
        assert output.body == b"r" * 120000
        assert len(output.body) == 120000

        shrink, resize = session.requests
        assert len(shrink["data"]) == 500000
        assert resize["url"] == "https://api.tinify.com/output/abc123"
        assert resize["json"] == {"resize": {"method": "scale", "width": 640}}
        assert all(r.closed for r in session.responses)

    def test_end_to_end_with_real_jpeg(self, fake_s3, session, pipeline):
        fake_s3.get_bucket(BUCKET).add_object("a/b_uncompressed.jpg", create_test_image(320, 240))

        pipeline.process_notification(Notification(key="a/b_uncompressed.jpg"))

        assert fake_s3.get_bucket(BUCKET).get_object("a/b.jpg").body == b"r" * 120000

    def test_compression_forbidden(self, fake_s3, session, pipeline):
        session.respond_to_shrink(403, json_body={"error": "Unauthorized"})

        with pytest.raises(CompressionError) as exc_info:
            process_event(_event(SOURCE_KEY), pipeline)

        assert exc_info.value.status_code == 403
        assert "403" in str(exc_info.value)
        assert session.requests_to("/abc123") == []
        assert fake_s3.operations("upload") == []

    def test_resize_failure_prevents_upload(self, fake_s3, session, pipeline):
        session.respond_to_resize(503)

        with pytest.raises(ResizeError) as exc_info:
            process_event(_event(SOURCE_KEY), pipeline)

        assert exc_info.value.status_code == 503
        assert fake_s3.operations("upload") == []

    def test_download_failure_prevents_remote_calls(self, fake_s3, session, pipeline):
        with pytest.raises(StorageReadError):
            process_event(_event("photos/missing_uncompressed.jpg"), pipeline)

        assert session.requests == []
        assert fake_s3.operations("upload") == []

    def test_batch_partial_completion(self, fake_s3, session, pipeline):
        with pytest.raises(StorageReadError):
            process_event(_event(SOURCE_KEY, "photos/missing_uncompressed.jpg"), pipeline)

        assert fake_s3.get_bucket(BUCKET).get_object("photos/42.jpg").body == b"r" * 120000
        assert len(session.requests_to("/shrink")) == 1

    def test_rerun_is_idempotent(self, fake_s3, session, pipeline):
        process_event(_event(SOURCE_KEY), pipeline)
        first = fake_s3.get_bucket(BUCKET).get_object("photos/42.jpg").body

        process_event(_event(SOURCE_KEY), pipeline)
        second = fake_s3.get_bucket(BUCKET).get_object("photos/42.jpg").body

        assert first == second
        assert len(fake_s3.operations("upload")) == 2
        assert fake_s3.get_bucket(BUCKET).get_object(SOURCE_KEY) is not None

    def test_skipped_keys_do_not_touch_storage(self, fake_s3, session, pipeline):
        result = process_event(_event("photos/42.jpg"), pipeline)

        assert result["skipped_count"] == 1
        assert fake_s3.calls == []
        assert session.requests == []

    def test_clients_shared_across_notifications(self, fake_s3, session, pipeline):
        fake_s3.get_bucket(BUCKET).add_object("photos/43_uncompressed.jpg", b"jpeg")

        result = process_event(_event(SOURCE_KEY, "photos/43_uncompressed.jpg"), pipeline)

        assert result["optimized_count"] == 2
        assert len(session.requests) == 4
        assert {c["bucket"] for c in fake_s3.calls} == {BUCKET}
