"""
Pytest configuration and fixtures for media-service tests.
Provides AWS mocking, DynamoDB, S3 and SNS fixtures with proper cleanup.
"""

import base64
import json
import os
import struct
import uuid
import zlib
from collections.abc import Callable
from io import BytesIO
from typing import Any

os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("AWS_SECURITY_TOKEN", "testing")
os.environ.setdefault("AWS_SESSION_TOKEN", "testing")
os.environ["AWS_REGION"] = "us-east-1"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ["ENVIRONMENT"] = "test"
os.environ["MEDIA_S3_BUCKET_NAME"] = "media-bucket"
os.environ["MEDIA_METADATA_TABLE_NAME"] = "media-metadata"
os.environ["RATE_LIMIT_TABLE_NAME"] = "media-rate-limits"
os.environ["MEDIA_EVENTS_TOPIC_ARN"] = "arn:aws:sns:us-east-1:123456789012:media-events"
os.environ["POWERTOOLS_SERVICE_NAME"] = "media-service"
os.environ["POWERTOOLS_METRICS_NAMESPACE"] = "MediaService"
os.environ["POWERTOOLS_TRACE_DISABLED"] = "true"

import boto3  # noqa: E402
import pytest  # noqa: E402
from moto import mock_aws  # noqa: E402
from PIL import Image  # noqa: E402

from core.config import get_settings  # noqa: E402
from core.container import build_container, get_container  # noqa: E402
from core.models.media import MediaObject, MediaStatus  # noqa: E402


@pytest.fixture(autouse=True)
def reset_cached_singletons():
    get_settings.cache_clear()
    get_container.cache_clear()
    yield
    get_settings.cache_clear()
    get_container.cache_clear()


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


def _create_media_table(dynamodb_resource):
    """Helper to create the metadata table with its listing GSIs."""
    return dynamodb_resource.create_table(
        TableName=os.getenv("MEDIA_METADATA_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "owner_id", "AttributeType": "S"},
            {"AttributeName": "partition", "AttributeType": "S"},
            {"AttributeName": "uploaded_key", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "owner-uploaded-index",
                "KeySchema": [
                    {"AttributeName": "owner_id", "KeyType": "HASH"},
                    {"AttributeName": "uploaded_key", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
            {
                "IndexName": "partition-uploaded-index",
                "KeySchema": [
                    {"AttributeName": "partition", "KeyType": "HASH"},
                    {"AttributeName": "uploaded_key", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
    )


@pytest.fixture(scope="function")
def media_table(dynamodb_resource):
    table = _create_media_table(dynamodb_resource)
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def rate_limit_table(dynamodb_resource):
    table = dynamodb_resource.create_table(
        TableName=os.getenv("RATE_LIMIT_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    s3_client.create_bucket(Bucket=os.getenv("MEDIA_S3_BUCKET_NAME"))
    return s3_client


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], dict[str, Any]]:
    """
    Helper to fetch an object (body and headers) from S3.

    Usage:
        obj = s3_get_object("uploads/user-1/abc.png")
    """

    def _get(key: str) -> dict[str, Any]:
        response = s3_client.get_object(Bucket=os.getenv("MEDIA_S3_BUCKET_NAME"), Key=key)
        response["Data"] = response["Body"].read()
        return response

    return _get


@pytest.fixture(scope="function")
def events_queue(aws_mock) -> Callable[[], list[dict[str, Any]]]:
    """
    Create the events topic with an SQS subscriber.

    Usage:
        messages = events_queue()  # drains and returns published events
    """
    sns = boto3.client("sns", region_name=os.getenv("AWS_REGION"))
    sqs = boto3.client("sqs", region_name=os.getenv("AWS_REGION"))

    topic_arn = sns.create_topic(Name="media-events")["TopicArn"]
    queue_url = sqs.create_queue(QueueName="media-events-subscriber")["QueueUrl"]
    queue_arn = sqs.get_queue_attributes(QueueUrl=queue_url, AttributeNames=["QueueArn"])[
        "Attributes"
    ]["QueueArn"]
    sns.subscribe(TopicArn=topic_arn, Protocol="sqs", Endpoint=queue_arn)

    def _drain() -> list[dict[str, Any]]:
        response = sqs.receive_message(QueueUrl=queue_url, MaxNumberOfMessages=10)
        events = []
        for message in response.get("Messages", []):
            envelope = json.loads(message["Body"])
            events.append(
                {
                    "event_type": envelope["MessageAttributes"]["event_type"]["Value"],
                    "payload": json.loads(envelope["Message"]),
                }
            )
            sqs.delete_message(QueueUrl=queue_url, ReceiptHandle=message["ReceiptHandle"])
        return events

    return _drain


@pytest.fixture
def aws_resources(media_table, rate_limit_table, events_queue):
    """Every table, topic and subscriber a container needs."""
    return {"media_table": media_table, "rate_limit_table": rate_limit_table, "events": events_queue}


@pytest.fixture
def container(aws_resources):
    with build_container() as built:
        yield built


def make_image_bytes(image_format: str = "PNG", size: tuple[int, int] = (4, 3)) -> bytes:
    buffer = BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format=image_format)
    return buffer.getvalue()


@pytest.fixture
def png_bytes() -> bytes:
    """4x3 PNG image."""
    return make_image_bytes("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    """4x3 JPEG image."""
    return make_image_bytes("JPEG")


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


@pytest.fixture
def oversized_png_bytes() -> bytes:
    """Tiny PNG whose header declares 60000x60000 pixels."""
    header = struct.pack(">IIBBBBB", 60000, 60000, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b""))
        + _png_chunk(b"IEND", b"")
    )


@pytest.fixture
def make_media_record() -> Callable[..., MediaObject]:
    """
    Factory for metadata records.

    Usage:
        record = make_media_record(owner_id="user-1", uploaded_at="2024-01-01T10:00:00.000000+00:00")
    """

    def _make(**overrides: Any) -> MediaObject:
        media_id = overrides.pop("id", str(uuid.uuid4()))
        owner_id = overrides.pop("owner_id", "user-1")
        values: dict[str, Any] = {
            "id": media_id,
            "owner_id": owner_id,
            "original_name": "photo.png",
            "stored_key": f"uploads/{owner_id}/{media_id}.png",
            "mime_type": "image/png",
            "size_bytes": 128,
            "width": 4,
            "height": 3,
            "status": MediaStatus.ACTIVE,
            "uploaded_at": "2024-01-01T10:00:00.000000+00:00",
        }
        values.update(overrides)
        return MediaObject(**values)

    return _make


def encode_multipart(
    parts: list[tuple[str, str | None, str | None, bytes]],
    boundary: str = "----media-test-boundary",
) -> bytes:
    """Encode ``(field, filename, content_type, data)`` parts as multipart/form-data.

    ``filename`` is written as raw UTF-8 bytes, the way browsers send it.
    """
    chunks: list[bytes] = []

    for field, filename, content_type, data in parts:
        disposition = f'form-data; name="{field}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'

        chunks.append(f"--{boundary}\r\n".encode())
        chunks.append(f"Content-Disposition: {disposition}\r\n".encode("utf-8"))
        if content_type:
            chunks.append(f"Content-Type: {content_type}\r\n".encode())
        chunks.append(b"\r\n")
        chunks.append(data)
        chunks.append(b"\r\n")

    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build a base64-encoded multipart API Gateway event.

    Usage:
        event = multipart_event([("file", "a.png", "image/png", png)], user_id="user-1")
    """

    def _build(
        parts: list[tuple[str, str | None, str | None, bytes]],
        *,
        user_id: str | None = "user-1",
        role: str | None = None,
        boundary: str = "----media-test-boundary",
    ) -> dict[str, Any]:
        headers = {"Content-Type": f"multipart/form-data; boundary={boundary}"}
        if user_id:
            headers["X-User-Id"] = user_id
        if role:
            headers["X-User-Role"] = role

        return {
            "httpMethod": "POST",
            "path": "/media/upload",
            "headers": headers,
            "body": base64.b64encode(encode_multipart(parts, boundary)).decode("ascii"),
            "isBase64Encoded": True,
        }

    return _build
