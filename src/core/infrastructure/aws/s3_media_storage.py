"""S3-backed implementation of MediaStorageRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from core.infrastructure.adapters.s3_adapter import S3AdapterProtocol
from core.models.errors import StorageError
from core.repositories.storage_repository import MediaStorageRepository
from core.utils.constants import (
    ERROR_CODE_BUCKET_PROVISION_FAILED,
    ERROR_CODE_OBJECT_DELETE_FAILED,
    ERROR_CODE_OBJECT_UPLOAD_FAILED,
    ERROR_CODE_PRESIGNED_URL_FAILED,
)

logger = Logger(utc=True)

MISSING_BUCKET_CODES = frozenset({"404", "NoSuchBucket", "NotFound"})


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3MediaStorage(MediaStorageRepository):
    """Media storage backed by Amazon S3.

    All boto3 errors are caught and translated into ``StorageError`` with a
    stable error code.
    """

    def __init__(self, adapter: S3AdapterProtocol) -> None:
        self._s3 = adapter

    def ensure_bucket(self) -> None:
        bucket = self._s3.bucket_name

        try:
            self._s3.head_bucket()
            return
        except BotoCoreError as exc:
            logger.error("S3 head_bucket failed", extra={"bucket": bucket})
            raise StorageError(
                message="Unable to access media bucket",
                error_code=ERROR_CODE_BUCKET_PROVISION_FAILED,
                details={"bucket": bucket},
            ) from exc
        except ClientError as exc:
            if _error_code(exc) not in MISSING_BUCKET_CODES:
                logger.error("S3 head_bucket failed", extra={"bucket": bucket})
                raise StorageError(
                    message="Unable to access media bucket",
                    error_code=ERROR_CODE_BUCKET_PROVISION_FAILED,
                    details={"bucket": bucket},
                ) from exc

        logger.info("Creating media bucket", extra={"bucket": bucket})

        try:
            self._s3.create_bucket()
        except (BotoCoreError, ClientError) as exc:
            if isinstance(exc, ClientError) and _error_code(exc) in (
                "BucketAlreadyOwnedByYou",
                "BucketAlreadyExists",
            ):
                return
            logger.error("S3 create_bucket failed", extra={"bucket": bucket})
            raise StorageError(
                message="Unable to provision media bucket",
                error_code=ERROR_CODE_BUCKET_PROVISION_FAILED,
                details={"bucket": bucket},
            ) from exc

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        content_disposition: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> None:
        logger.debug(
            "Uploading object",
            extra={"key": key, "size": len(body), "content_type": content_type},
        )

        try:
            self._s3.put_object(
                key=key,
                body=body,
                content_type=content_type,
                content_disposition=content_disposition,
                metadata=metadata,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 upload failed", extra={"key": key})
            raise StorageError(
                message="Unable to store media at this time",
                error_code=ERROR_CODE_OBJECT_UPLOAD_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Object uploaded", extra={"key": key})

    def delete_object(self, *, key: str) -> None:
        logger.debug("Deleting object", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
        except (BotoCoreError, ClientError) as exc:
            logger.error("S3 delete failed", extra={"key": key})
            raise StorageError(
                message="Unable to delete media object",
                error_code=ERROR_CODE_OBJECT_DELETE_FAILED,
                details={"key": key},
            ) from exc

        logger.info("Object deleted", extra={"key": key})

    def generate_presigned_put_url(
        self,
        *,
        key: str,
        content_type: str,
        expires_in: int,
    ) -> str:
        return self._presign(
            method="put_object",
            params={"Key": key, "ContentType": content_type},
            key=key,
            expires_in=expires_in,
        )

    def generate_presigned_get_url(
        self,
        *,
        key: str,
        expires_in: int,
        content_disposition: str | None = None,
    ) -> str:
        params: dict[str, Any] = {"Key": key}

        if content_disposition:
            params["ResponseContentDisposition"] = content_disposition

        return self._presign(method="get_object", params=params, key=key, expires_in=expires_in)

    def _presign(
        self,
        *,
        method: str,
        params: dict[str, Any],
        key: str,
        expires_in: int,
    ) -> str:
        logger.debug(
            "Generating pre-signed S3 URL",
            extra={"key": key, "method": method, "expires_in": expires_in},
        )

        try:
            return self._s3.generate_presigned_url(
                method=method,
                params=params,
                expires_in=expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to generate pre-signed URL", extra={"key": key})
            raise StorageError(
                message="Unable to generate media access URL",
                error_code=ERROR_CODE_PRESIGNED_URL_FAILED,
                details={"key": key},
            ) from exc
