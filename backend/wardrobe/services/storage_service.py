"""
Transient photo staging in S3-compatible object storage (MinIO/AWS S3).

Uploads only live for the duration of one request, so the surface is small:
put, delete, existence check and a health probe. Every MinIO or network
failure is reported as ``StorageError``.
"""
import io
import logging
from contextlib import contextmanager
from typing import Callable, Optional

import urllib3
from minio import Minio
from minio.error import MinioException, S3Error

from wardrobe.core.config import settings
from wardrobe.core.exceptions import StorageError

logger = logging.getLogger(__name__)

# Network-level failures surface from urllib3, API-level failures from minio
STORAGE_ERRORS = (MinioException, urllib3.exceptions.HTTPError)

# urllib3 rejects non-positive socket timeouts
MIN_CALL_TIMEOUT_SECONDS = 0.01


def _build_client(timeout: Optional[float] = None) -> Minio:
    """MinIO client with bounded timeouts; retries are left to the caller."""
    if timeout is None:
        timeout = settings.STORAGE_TIMEOUT_SECONDS
    return Minio(
        settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_SECURE,
        http_client=urllib3.PoolManager(
            timeout=urllib3.Timeout(connect=timeout, read=timeout),
            retries=False,
        ),
    )


@contextmanager
def _storage_errors(message: str, detailed: bool = True):
    """Re-raise MinIO/network failures as StorageError."""
    try:
        yield
    except STORAGE_ERRORS as e:
        logger.error(f"{message}: {e}")
        raise StorageError(f"{message}: {e}" if detailed else f"{message}.")


class StorageService:
    """Staging bucket for uploaded photos."""

    def __init__(
        self,
        client: Optional[Minio] = None,
        client_factory: Optional[Callable[[Optional[float]], Minio]] = None,
    ):
        """
        Args:
            client: Client used for calls without a tighter timeout
            client_factory: Builds a client for a given socket timeout;
                defaults to ``_build_client`` unless ``client`` is given
        """
        if client is None:
            client_factory = client_factory or _build_client
            client = client_factory(None)
        self.client = client
        self.client_factory = client_factory
        self.bucket_name = settings.MINIO_BUCKET
        self.initialized = False

    def _client_for(self, timeout: Optional[float]) -> Minio:
        """Client whose connect and read timeouts do not exceed ``timeout``."""
        if timeout is None or self.client_factory is None:
            return self.client
        if timeout >= settings.STORAGE_TIMEOUT_SECONDS:
            return self.client
        return self.client_factory(max(timeout, MIN_CALL_TIMEOUT_SECONDS))

    def initialize_bucket(self, client: Optional[Minio] = None) -> None:
        """
        Make sure the staging bucket exists, creating it if needed.

        Raises:
            StorageError: If the bucket cannot be checked or created
        """
        client = client or self.client

        with _storage_errors("Storage initialization failed"):
            if client.bucket_exists(self.bucket_name):
                logger.info(f"✅ Using existing bucket: {self.bucket_name}")
            else:
                client.make_bucket(self.bucket_name)
                logger.info(f"✅ Created bucket: {self.bucket_name}")

        self.initialized = True

    def ensure_initialized(self, client: Optional[Minio] = None) -> None:
        if not self.initialized:
            self.initialize_bucket(client)

    def put_object(
        self,
        object_name: str,
        data: bytes,
        content_type: str = "image/jpeg",
        timeout: Optional[float] = None,
    ) -> str:
        """
        Store an in-memory payload under ``object_name``.

        Args:
            timeout: Socket timeout in seconds for this call, when tighter
                than ``STORAGE_TIMEOUT_SECONDS``

        Returns:
            The object key

        Raises:
            StorageError: "Failed to upload photo to storage."
        """
        client = self._client_for(timeout)
        self.ensure_initialized(client)

        with _storage_errors("Failed to upload photo to storage", detailed=False):
            client.put_object(
                self.bucket_name,
                object_name,
                io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )

        logger.info(f"📤 Staged {object_name} ({len(data)} bytes)")
        return object_name

    def delete_file(self, object_name: str, timeout: Optional[float] = None) -> None:
        """Remove a staged object. Raises StorageError on failure."""
        client = self._client_for(timeout)
        self.ensure_initialized(client)

        with _storage_errors("Failed to delete photo from storage"):
            client.remove_object(self.bucket_name, object_name)

        logger.info(f"🗑️  Removed staged object {object_name}")

    def file_exists(self, object_name: str) -> bool:
        """True if ``object_name`` is present in the bucket."""
        self.ensure_initialized()

        try:
            self.client.stat_object(self.bucket_name, object_name)
        except S3Error as e:
            if e.code == "NoSuchKey":
                return False
            logger.error(f"Object existence check failed: {e}")
            raise StorageError(f"Object existence check failed: {e}")
        except STORAGE_ERRORS as e:
            logger.error(f"Object existence check failed: {e}")
            raise StorageError(f"Object existence check failed: {e}")

        return True

    def health_check(self) -> bool:
        try:
            self.client.bucket_exists(self.bucket_name)
        except STORAGE_ERRORS:
            return False
        return True


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """
    Shared storage service.

    The bucket is checked lazily on first use so an unavailable storage
    backend does not break unrelated requests.
    """
    global _storage_service

    if _storage_service is None:
        _storage_service = StorageService()

    return _storage_service
