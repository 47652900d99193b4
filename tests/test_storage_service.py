# =============================================================================
# tests/test_storage_service.py - S3 Storage Tests
# =============================================================================
# Tests for StorageService with a mocked boto3 client.
# =============================================================================

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from app.exceptions import StorageError
from core.services.storage_service import ObjectNotFoundError, StorageService


def _client_error(code: str, operation: str = "GetObject") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


@pytest.fixture
def s3():
    return MagicMock()


@pytest.fixture
def service(s3):
    return StorageService(bucket="test-bucket", client=s3)


class TestCreateUploadUrl:
    """Test pre-signed PUT URLs."""

    def test_signs_put_object(self, service, s3):
        s3.generate_presigned_url.return_value = "https://s3.example/signed"

        url = service.create_upload_url(
            "uploads/u/a.csv",
            "text/csv",
            metadata={"original-filename": "a.csv"},
            expires_in=600,
        )

        assert url == "https://s3.example/signed"
        s3.generate_presigned_url.assert_called_once_with(
            "put_object",
            Params={
                "Bucket": "test-bucket",
                "Key": "uploads/u/a.csv",
                "ContentType": "text/csv",
                "Metadata": {"original-filename": "a.csv"},
            },
            ExpiresIn=600,
        )

    def test_default_expiry(self, service, s3):
        from app.config import settings
        service.create_upload_url("uploads/u/a.csv", "text/csv")
        assert s3.generate_presigned_url.call_args.kwargs["ExpiresIn"] == settings.UPLOAD_URL_EXPIRES_SECONDS

    def test_signing_failure(self, service, s3):
        s3.generate_presigned_url.side_effect = _client_error("AccessDenied", "PutObject")

        with pytest.raises(StorageError) as exc_info:
            service.create_upload_url("uploads/u/a.csv", "text/csv")

        assert exc_info.value.status_code == 502


class TestReadObject:
    """Test downloading objects."""

    def test_returns_bytes_and_closes_body(self, service, s3):
        body = MagicMock()
        body.read.return_value = b"a,b\n1,2\n"
        s3.get_object.return_value = {"Body": body, "ContentLength": 8}

        assert service.read_object("uploads/u/a.csv") == b"a,b\n1,2\n"
        body.close.assert_called_once()
        s3.get_object.assert_called_once_with(Bucket="test-bucket", Key="uploads/u/a.csv")

    @pytest.mark.parametrize("code", ["NoSuchKey", "404"])
    def test_missing_key(self, service, s3, code):
        s3.get_object.side_effect = _client_error(code)

        with pytest.raises(ObjectNotFoundError):
            service.read_object("uploads/u/missing.csv")

    def test_missing_body(self, service, s3):
        s3.get_object.return_value = {"Body": None}

        with pytest.raises(ObjectNotFoundError):
            service.read_object("uploads/u/a.csv")

    def test_other_errors_are_storage_errors(self, service, s3):
        s3.get_object.side_effect = _client_error("AccessDenied")

        with pytest.raises(StorageError):
            service.read_object("uploads/u/a.csv")

    def test_too_large(self, service, s3):
        body = MagicMock()
        s3.get_object.return_value = {"Body": body, "ContentLength": 2048}

        with pytest.raises(StorageError):
            service.read_object("uploads/u/a.csv", max_bytes=1024)

        body.read.assert_not_called()


class TestCheckBucket:
    """Test readiness probe."""

    def test_ok(self, service, s3):
        service.check_bucket()
        s3.head_bucket.assert_called_once_with(Bucket="test-bucket")

    def test_failure(self, service, s3):
        s3.head_bucket.side_effect = _client_error("403", "HeadBucket")

        with pytest.raises(StorageError):
            service.check_bucket()
