"""Object storage service for uploaded documents."""

import logging
import secrets
import time
from typing import Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from api.core.config import get_settings
from api.core.errors import StorageError
from api.services.text_extraction import get_extension

logger = logging.getLogger(__name__)

_MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}


class StorageService:
    """Service for interacting with the S3-compatible document bucket."""

    def __init__(self, s3_client=None, bucket_name: Optional[str] = None):
        settings = get_settings()
        self.bucket_name = bucket_name or settings.storage_bucket

        if s3_client is not None:
            self.s3_client = s3_client
            self.enabled = True
        elif settings.storage_access_key_id and settings.storage_secret_access_key:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=settings.storage_endpoint_url or None,
                aws_access_key_id=settings.storage_access_key_id,
                aws_secret_access_key=settings.storage_secret_access_key,
                region_name=settings.storage_region,
            )
            self.enabled = True
            logger.info(f"Storage service initialized with bucket: {self.bucket_name}")
        else:
            self.s3_client = None
            self.enabled = False
            logger.warning("Storage service disabled: credentials not configured")

    def is_enabled(self) -> bool:
        """Check if storage is configured."""
        return self.enabled

    def generate_path(self, owner_id: str, filename: str) -> str:
        """
        Generate a collision-resistant object key for a file.

        Format: {owner_id}/{epoch_ms}-{random}.{ext}
        """
        suffix = secrets.token_hex(4)
        key = f"{owner_id}/{int(time.time() * 1000)}-{suffix}"
        ext = get_extension(filename)
        return f"{key}.{ext}" if ext else key

    def upload_file(self, path: str, data: bytes, content_type: str) -> Tuple[bool, Optional[str]]:
        """
        Write an object without overwriting an existing one.

        Returns:
            Tuple of (success, error_message)
        """
        if not self.enabled:
            return False, "Storage service is not configured"

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=path,
                Body=data,
                ContentType=content_type,
                IfNoneMatch="*",
            )
            logger.info(f"Uploaded object to storage: {path}")
            return True, None
        except (BotoCoreError, ClientError) as e:
            error_msg = f"Failed to upload object {path}: {e}"
            logger.error(error_msg)
            return False, error_msg

    def delete_file(self, path: str) -> Tuple[bool, Optional[str]]:
        """
        Delete an object. An object that is already gone counts as deleted.

        Returns:
            Tuple of (success, error_message)
        """
        if not self.enabled:
            return False, "Storage service is not configured"

        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=path)
            logger.info(f"Deleted object from storage: {path}")
            return True, None
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_OBJECT_CODES:
                logger.info(f"Object already absent from storage: {path}")
                return True, None
            error_msg = f"Failed to delete object {path}: {e}"
            logger.error(error_msg)
            return False, error_msg
        except BotoCoreError as e:
            error_msg = f"Failed to delete object {path}: {e}"
            logger.error(error_msg)
            return False, error_msg

    def file_exists(self, path: str) -> bool:
        if not self.enabled:
            return False

        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=path)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _MISSING_OBJECT_CODES:
                return False
            logger.error(f"Failed to check object {path}: {e}")
            raise StorageError("Failed to check file") from e
        except BotoCoreError as e:
            logger.error(f"Failed to check object {path}: {e}")
            raise StorageError("Failed to check file") from e


# Singleton instance
_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """Get or create the storage service singleton."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
