"""Tests for UploadService."""

from __future__ import annotations

import itertools

import pytest

from bucket_gateway.infra.storage.client import CompletedPart, StorageError, UploadId
from bucket_gateway.services.base import InvalidRequestError
from bucket_gateway.services.upload_service import (
    MAX_PART_NUMBER,
    CompletedUpload,
    UploadService,
    order_parts,
)
from tests.services.mock_storage import MOCK_PART_SIZE, MockStorageClient


@pytest.fixture()
def mock_storage():
    return MockStorageClient()


@pytest.fixture()
def upload_service(mock_storage, settings):
    return UploadService(mock_storage, settings)


def _parts(*numbers: int) -> list[CompletedPart]:
    return [CompletedPart(part_number=n, etag=f"etag-{n}") for n in numbers]


class TestInitiate:
    def test_returns_backend_session(self, upload_service, mock_storage):
        upload = upload_service.initiate("videos/movie.mp4")

        assert upload.upload_id == "mock-upload-1"
        assert upload.object_key == "videos/movie.mp4"
        assert mock_storage.calls_to("init_multipart_upload") == [
            {
                "bucket": "test-bucket",
                "object_key": "videos/movie.mp4",
                "content_type": None,
            }
        ]

    def test_passes_content_type(self, upload_service, mock_storage):
        upload_service.initiate("a.pdf", content_type="application/pdf")

        call = mock_storage.calls_to("init_multipart_upload")[0]
        assert call["content_type"] == "application/pdf"

    def test_rejects_empty_key_without_backend_call(
        self, upload_service, mock_storage
    ):
        with pytest.raises(InvalidRequestError):
            upload_service.initiate("   ")
        assert mock_storage.calls == []

    def test_backend_failure_propagates(self, upload_service, mock_storage):
        mock_storage.fail("init_multipart_upload", "AccessDenied")

        with pytest.raises(StorageError, match="AccessDenied"):
            upload_service.initiate("a.bin")


class TestPresignParts:
    @pytest.mark.parametrize("part_count", [1, 2, 7, 50])
    def test_returns_one_url_per_part_in_order(
        self, upload_service, mock_storage, part_count
    ):
        urls = upload_service.presign_parts("a.bin", UploadId("u-1"), part_count)

        assert [u.part_number for u in urls] == list(range(1, part_count + 1))
        assert len(mock_storage.calls_to("presign_upload_part")) == part_count
        for url in urls:
            assert f"partNumber={url.part_number}" in url.url

    def test_scopes_each_url_to_key_and_upload(self, upload_service, mock_storage):
        upload_service.presign_parts("a.bin", UploadId("u-1"), 2)

        for call in mock_storage.calls_to("presign_upload_part"):
            assert call["bucket"] == "test-bucket"
            assert call["object_key"] == "a.bin"
            assert call["upload_id"] == "u-1"

    def test_urls_expire_after_fifteen_minutes(self, upload_service, mock_storage):
        upload_service.presign_parts("a.bin", UploadId("u-1"), 1)

        call = mock_storage.calls_to("presign_upload_part")[0]
        assert call["expires_in"] == 15 * 60

    @pytest.mark.parametrize("part_count", [0, -1, MAX_PART_NUMBER + 1])
    def test_rejects_part_count_out_of_range(
        self, upload_service, mock_storage, part_count
    ):
        with pytest.raises(InvalidRequestError):
            upload_service.presign_parts("a.bin", UploadId("u-1"), part_count)
        assert mock_storage.calls == []

    def test_rejects_missing_upload_id(self, upload_service, mock_storage):
        with pytest.raises(InvalidRequestError, match="fileId"):
            upload_service.presign_parts("a.bin", UploadId(""), 1)
        assert mock_storage.calls == []

    def test_backend_failure_propagates(self, upload_service, mock_storage):
        mock_storage.fail("presign_upload_part")

        with pytest.raises(StorageError):
            upload_service.presign_parts("a.bin", UploadId("u-1"), 3)


class TestComplete:
    @pytest.mark.parametrize("order", list(itertools.permutations([1, 2, 3])))
    def test_submits_parts_sorted_by_part_number(
        self, upload_service, mock_storage, order
    ):
        upload = upload_service.initiate("a.bin")

        upload_service.complete("a.bin", upload.upload_id, _parts(*order))

        submitted = mock_storage.calls_to("complete_multipart_upload")[0]["parts"]
        assert [p.part_number for p in submitted] == [1, 2, 3]
        assert [p.etag for p in submitted] == ["etag-1", "etag-2", "etag-3"]

    def test_reports_size_from_head_lookup(self, upload_service, mock_storage):
        upload = upload_service.initiate("a.bin")

        result = upload_service.complete("a.bin", upload.upload_id, _parts(2, 1))

        assert result == CompletedUpload(key="a.bin", size=2 * MOCK_PART_SIZE)
        assert mock_storage.calls_to("head_object") == [
            {"bucket": "test-bucket", "object_key": "a.bin"}
        ]

    def test_rejects_empty_parts(self, upload_service, mock_storage):
        with pytest.raises(InvalidRequestError, match="parts"):
            upload_service.complete("a.bin", UploadId("u-1"), [])
        assert mock_storage.calls == []

    def test_rejected_completion_skips_head_lookup(
        self, upload_service, mock_storage
    ):
        mock_storage.fail("complete_multipart_upload", "InvalidPart")

        with pytest.raises(StorageError, match="InvalidPart"):
            upload_service.complete("a.bin", UploadId("u-1"), _parts(1))

        assert mock_storage.calls_to("head_object") == []
        assert mock_storage.calls_to("abort_multipart_upload") == []

    def test_failed_head_lookup_is_fatal(self, upload_service, mock_storage):
        upload = upload_service.initiate("a.bin")
        mock_storage.fail("head_object", "Not Found")

        with pytest.raises(StorageError, match="could not be verified: Not Found"):
            upload_service.complete("a.bin", upload.upload_id, _parts(1))

        # the completion itself went through
        assert "a.bin" in mock_storage.objects


class TestAbort:
    def test_aborts_session(self, upload_service, mock_storage):
        upload = upload_service.initiate("a.bin")

        upload_service.abort("a.bin", upload.upload_id)

        assert upload.upload_id not in mock_storage.uploads

    def test_unknown_session_propagates_backend_error(
        self, upload_service, mock_storage
    ):
        with pytest.raises(StorageError, match="NoSuchUpload"):
            upload_service.abort("a.bin", UploadId("missing"))


def test_order_parts_is_stable_for_sorted_input():
    parts = _parts(1, 2, 3)
    assert order_parts(parts) == parts
    assert order_parts(reversed(parts)) == parts
