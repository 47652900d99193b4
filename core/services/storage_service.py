# =============================================================================
# core/services/storage_service.py - S3 Storage Operations
# =============================================================================
# Handles object storage for uploaded files:
# - Issuing pre-signed PUT URLs (browsers upload straight to S3)
# - Reading objects back for the message constructor
# - Bucket reachability for readiness checks
# =============================================================================

import logging
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.config import settings
from app.exceptions import StorageError

logger = logging.getLogger(__name__)

# S3 error codes meaning "no such object"
MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}


class ObjectNotFoundError(Exception):
    """Raised when a key has no object behind it."""

    def __init__(self, key: str):
        super().__init__(f"No object at {key}")
        self.key = key


class StorageService:
    """
    Service for S3 operations on the upload bucket.

    The boto3 client is created on first use so importing the service
    never needs AWS credentials.
    """

    def __init__(self, bucket: str | None = None, client=None):
        self.bucket = bucket or settings.AWS_S3_BUCKET
        self._client = client

    @property
    def client(self):
        if self._client is None:
            session = boto3.session.Session(
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION,
            )
            self._client = session.client("s3")
        return self._client

    def create_upload_url(
        self,
        key: str,
        content_type: str,
        metadata: dict[str, str] | None = None,
        expires_in: int | None = None,
    ) -> str:
        """
        Create a pre-signed PUT URL for one object.

        The uploader must send the same Content-Type (and metadata
        headers) that were signed.

        Args:
            key: Object key
            content_type: MIME type the browser will send
            metadata: x-amz-meta-* values to sign into the URL
            expires_in: URL lifetime in seconds

        Returns:
            The pre-signed URL

        Raises:
            StorageError: If signing fails
        """
        expires_in = expires_in or settings.UPLOAD_URL_EXPIRES_SECONDS
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "ContentType": content_type,
        }
        if metadata:
            params["Metadata"] = metadata

        try:
            url = self.client.generate_presigned_url(
                "put_object",
                Params=params,
                ExpiresIn=expires_in,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to sign upload URL for {key}: {e}")
            raise StorageError("presign", str(e))

        logger.info(f"Issued upload URL for {key} (expires in {expires_in}s)")
        return url

    def read_object(self, key: str, max_bytes: int | None = None) -> bytes:
        """
        Download an object's bytes.

        Args:
            key: Object key
            max_bytes: Refuse objects larger than this

        Returns:
            Object content

        Raises:
            ObjectNotFoundError: If the key has no object or an empty body
            StorageError: If the download fails or the object is too large
        """
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=key)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in MISSING_OBJECT_CODES:
                raise ObjectNotFoundError(key)
            logger.error(f"Failed to download {key}: {e}")
            raise StorageError("download", str(e))
        except BotoCoreError as e:
            logger.error(f"Failed to download {key}: {e}")
            raise StorageError("download", str(e))

        body = response.get("Body")
        if body is None:
            raise ObjectNotFoundError(key)

        size = response.get("ContentLength")
        if max_bytes is not None and size is not None and size > max_bytes:
            raise StorageError("download", f"object is {size} bytes, limit is {max_bytes}")

        try:
            return body.read()
        finally:
            body.close()

    def check_bucket(self) -> None:
        """
        Confirm the bucket exists and is reachable.

        Raises:
            StorageError: If head_bucket fails
        """
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except (ClientError, BotoCoreError) as e:
            raise StorageError("head_bucket", str(e))


@lru_cache
def get_storage_service() -> StorageService:
    """Shared StorageService (one boto3 client per process)."""
    return StorageService()
