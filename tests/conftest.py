from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bucket_gateway.common.config import Settings
from bucket_gateway.main import create_app
from tests.services.mock_storage import MockStorageClient

TEST_BUCKET = "test-bucket"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        S3_BUCKET_NAME=TEST_BUCKET,
        S3_ACCESS_KEY_ID="test-key",
        S3_SECRET_ACCESS_KEY="test-secret",
        S3_ENDPOINT="http://localhost:9000",
    )


@pytest.fixture()
def mock_storage() -> MockStorageClient:
    return MockStorageClient()


@pytest.fixture()
def client(settings, mock_storage) -> TestClient:
    app = create_app(settings, storage_client=mock_storage)
    return TestClient(app)
