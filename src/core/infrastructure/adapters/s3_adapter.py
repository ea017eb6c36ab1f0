"""Thin adapter for interacting with Amazon S3 (or an S3-compatible store)."""

from collections.abc import Mapping
from typing import Any, Protocol

import boto3
from botocore.config import Config


class _Boto3S3Client(Protocol):
    """Internal typing for boto3 S3 client (AWS-facing only)."""

    def put_object(self, **kwargs: Any) -> Any: ...

    def delete_object(self, *, Bucket: str, Key: str) -> Any: ...

    def head_bucket(self, *, Bucket: str) -> Any: ...

    def create_bucket(self, **kwargs: Any) -> Any: ...

    def generate_presigned_url(
        self,
        ClientMethod: str,
        Params: Mapping[str, Any],
        ExpiresIn: int,
    ) -> str: ...

    def close(self) -> None: ...


class S3AdapterProtocol(Protocol):
    """Minimal S3 adapter protocol (repository-facing)."""

    @property
    def bucket_name(self) -> str: ...

    @property
    def region_name(self) -> str | None: ...

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        content_disposition: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> None: ...

    def delete_object(self, *, key: str) -> None: ...

    def head_bucket(self) -> None: ...

    def create_bucket(self) -> None: ...

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str: ...


class S3Adapter:
    """Low-level S3 operations (mechanical, no error handling).

    This adapter:
    - Wraps boto3 S3 clients
    - Does NOT handle errors (lets them bubble up)
    - Domain implementations catch and translate errors

    Two clients are kept: one for data operations against ``endpoint_url`` and
    one for signing against ``public_endpoint_url``, so that URLs handed to
    browsers point at a host they can reach (e.g. MinIO behind a proxy).
    """

    def __init__(
        self,
        *,
        bucket_name: str,
        region_name: str | None = None,
        endpoint_url: str | None = None,
        public_endpoint_url: str | None = None,
        force_path_style: bool = False,
    ) -> None:
        if not bucket_name:
            raise RuntimeError("S3 bucket name is not configured")

        self._bucket = bucket_name
        self._region = region_name

        config = Config(
            signature_version="s3v4",
            s3={"addressing_style": "path" if force_path_style else "auto"},
        )

        self._client: _Boto3S3Client = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            region_name=region_name,
            config=config,
        )

        if public_endpoint_url and public_endpoint_url != endpoint_url:
            self._signer: _Boto3S3Client = boto3.client(
                "s3",
                endpoint_url=public_endpoint_url,
                region_name=region_name,
                config=config,
            )
        else:
            self._signer = self._client

    @property
    def bucket_name(self) -> str:
        return self._bucket

    @property
    def region_name(self) -> str | None:
        return self._region

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        content_disposition: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Store object in S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        kwargs: dict[str, Any] = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }

        if content_disposition:
            kwargs["ContentDisposition"] = content_disposition

        if metadata:
            kwargs["Metadata"] = metadata

        self._client.put_object(**kwargs)

    def delete_object(self, *, key: str) -> None:
        """Delete object from S3.
        Raises boto3 exceptions - caught by domain implementation.
        """
        self._client.delete_object(Bucket=self._bucket, Key=key)

    def head_bucket(self) -> None:
        self._client.head_bucket(Bucket=self._bucket)

    def create_bucket(self) -> None:
        kwargs: dict[str, Any] = {"Bucket": self._bucket}

        # us-east-1 rejects an explicit location constraint
        if self._region and self._region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self._region}

        self._client.create_bucket(**kwargs)

    def generate_presigned_url(
        self,
        *,
        method: str,
        params: dict[str, Any],
        expires_in: int,
    ) -> str:
        """Generate a pre-signed S3 URL."""
        return self._signer.generate_presigned_url(
            ClientMethod=method,
            Params={**params, "Bucket": self._bucket},
            ExpiresIn=expires_in,
        )

    def close(self) -> None:
        self._client.close()
        if self._signer is not self._client:
            self._signer.close()
