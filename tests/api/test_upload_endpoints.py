"""API tests for multipart upload endpoints."""

from __future__ import annotations

from tests.services.mock_storage import MOCK_PART_SIZE


def _initiate(client, file_name="videos/movie.mp4"):
    return client.post("/initiate-multipart-upload", json={"fileName": file_name})


class TestInitiateMultipartUpload:
    def test_returns_enveloped_session(self, client):
        resp = _initiate(client)

        assert resp.status_code == 200
        assert resp.json() == {
            "status": 200,
            "payload": {"id": "mock-upload-1", "key": "videos/movie.mp4"},
        }

    def test_missing_file_name_is_client_error(self, client, mock_storage):
        resp = client.post("/initiate-multipart-upload", json={})

        assert resp.status_code == 400
        assert resp.headers["content-type"].startswith("text/plain")
        assert "fileName" in resp.text
        assert mock_storage.calls == []

    def test_malformed_json_is_client_error(self, client, mock_storage):
        resp = client.post(
            "/initiate-multipart-upload",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert resp.status_code == 400
        assert mock_storage.calls == []

    def test_backend_error_is_passed_through(self, client, mock_storage):
        mock_storage.fail("init_multipart_upload", "AccessDenied: bucket policy")

        resp = _initiate(client)

        assert resp.status_code == 500
        assert resp.text == "AccessDenied: bucket policy"
        assert resp.headers["X-Error-Code"] == "storage_error"


class TestGeneratePresignedUrls:
    def test_returns_one_url_per_part(self, client):
        upload_id = _initiate(client).json()["payload"]["id"]

        resp = client.post(
            "/generate-presigned-urls",
            json={"fileKey": "videos/movie.mp4", "fileId": upload_id, "parts": 3},
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == 200
        assert [item["partNumber"] for item in body["payload"]] == [1, 2, 3]
        for item in body["payload"]:
            assert f"partNumber={item['partNumber']}" in item["signedUrl"]
            assert f"uploadId={upload_id}" in item["signedUrl"]

    def test_zero_parts_is_client_error(self, client, mock_storage):
        resp = client.post(
            "/generate-presigned-urls",
            json={"fileKey": "a.bin", "fileId": "u-1", "parts": 0},
        )

        assert resp.status_code == 400
        assert mock_storage.calls == []

    def test_non_integer_parts_is_client_error(self, client, mock_storage):
        resp = client.post(
            "/generate-presigned-urls",
            json={"fileKey": "a.bin", "fileId": "u-1", "parts": "many"},
        )

        assert resp.status_code == 400
        assert mock_storage.calls == []


class TestCompleteMultipartUpload:
    def test_completes_out_of_order_parts(self, client, mock_storage):
        upload_id = _initiate(client, "a.bin").json()["payload"]["id"]

        resp = client.post(
            "/complete-multipart-upload",
            json={
                "fileKey": "a.bin",
                "fileId": upload_id,
                "parts": [
                    {"eTag": "e3", "partNumber": 3},
                    {"eTag": "e1", "partNumber": 1},
                    {"eTag": "e2", "partNumber": 2},
                ],
            },
        )

        assert resp.status_code == 200
        assert resp.json() == {
            "status": 200,
            "payload": {"key": "a.bin", "size": 3 * MOCK_PART_SIZE},
        }
        submitted = mock_storage.calls_to("complete_multipart_upload")[0]["parts"]
        assert [(p.part_number, p.etag) for p in submitted] == [
            (1, "e1"),
            (2, "e2"),
            (3, "e3"),
        ]

    def test_empty_parts_is_client_error(self, client, mock_storage):
        resp = client.post(
            "/complete-multipart-upload",
            json={"fileKey": "a.bin", "fileId": "u-1", "parts": []},
        )

        assert resp.status_code == 400
        assert mock_storage.calls == []

    def test_unknown_upload_is_backend_error(self, client):
        resp = client.post(
            "/complete-multipart-upload",
            json={
                "fileKey": "a.bin",
                "fileId": "missing",
                "parts": [{"eTag": "e1", "partNumber": 1}],
            },
        )

        assert resp.status_code == 500
        assert "NoSuchUpload" in resp.text

    def test_failed_size_lookup_is_backend_error(self, client, mock_storage):
        upload_id = _initiate(client, "a.bin").json()["payload"]["id"]
        mock_storage.fail("head_object", "Not Found")

        resp = client.post(
            "/complete-multipart-upload",
            json={
                "fileKey": "a.bin",
                "fileId": upload_id,
                "parts": [{"eTag": "e1", "partNumber": 1}],
            },
        )

        assert resp.status_code == 500
        assert "Not Found" in resp.text


class TestAbortMultipartUpload:
    def test_aborts_upload(self, client, mock_storage):
        upload_id = _initiate(client, "a.bin").json()["payload"]["id"]

        resp = client.post(
            "/abort-multipart-upload",
            json={"fileKey": "a.bin", "fileId": upload_id},
        )

        assert resp.status_code == 200
        assert resp.json() == {"status": 200, "payload": True}
        assert mock_storage.uploads == {}
