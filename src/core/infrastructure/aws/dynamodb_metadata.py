"""DynamoDB-backed implementation of MediaMetadataRepository.

Table layout:
    - partition key ``id``
    - GSI ``owner-uploaded-index``: ``owner_id`` / ``uploaded_key``
    - GSI ``partition-uploaded-index``: ``partition`` / ``uploaded_key``, every
      item carries ``partition = "media"`` so all media can be listed in
      upload order without a scan
"""

from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError as PydanticValidationError

from core.filters.cursor_pagination import CursorPagination
from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapterProtocol
from core.models.errors import MetadataStoreError
from core.models.media import MediaObject, MediaStatus
from core.repositories.metadata_repository import MediaMetadataRepository
from core.utils.constants import (
    ERROR_CODE_METADATA_CREATE_FAILED,
    ERROR_CODE_METADATA_DELETE_FAILED,
    ERROR_CODE_METADATA_FETCH_FAILED,
    ERROR_CODE_METADATA_INVALID_FORMAT,
    ERROR_CODE_METADATA_LIST_FAILED,
    MEDIA_PARTITION_VALUE,
    OWNER_UPLOADED_INDEX,
    PARTITION_UPLOADED_INDEX,
    UPLOADED_SORT_KEY_ATTRIBUTE,
)
from core.utils.time import utc_now_iso

Item = dict[str, Any]

logger = Logger(utc=True)

CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailedException"


def _is_conditional_failure(exc: ClientError) -> bool:
    return exc.response.get("Error", {}).get("Code") == CONDITIONAL_CHECK_FAILED


def _to_item(record: MediaObject) -> Item:
    item = {key: value for key, value in record.model_dump(mode="json").items() if value is not None}
    item["partition"] = MEDIA_PARTITION_VALUE
    item[UPLOADED_SORT_KEY_ATTRIBUTE] = CursorPagination.sort_key(record.uploaded_at, record.id)
    return item


def _from_item(item: Item) -> MediaObject:
    try:
        return MediaObject.model_validate(item)
    except PydanticValidationError as exc:
        logger.error("Stored media item is malformed", extra={"media_id": item.get("id")})
        raise MetadataStoreError(
            message="Invalid media metadata format",
            error_code=ERROR_CODE_METADATA_INVALID_FORMAT,
            details={"media_id": item.get("id")},
        ) from exc


class DynamoDBMetadata(MediaMetadataRepository):
    """DynamoDB-backed metadata storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol) -> None:
        self._db = adapter

    def create_media(self, *, record: MediaObject) -> MediaObject:
        logger.debug(
            "Creating metadata",
            extra={"media_id": record.id, "owner_id": record.owner_id},
        )

        try:
            self._db.put_item(
                item=_to_item(record),
                condition_expression=Attr("id").not_exists(),
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error(
                "DynamoDB put_item failed",
                extra={"media_id": record.id, "owner_id": record.owner_id},
            )
            raise MetadataStoreError(
                message="Unable to save media metadata at this time",
                error_code=ERROR_CODE_METADATA_CREATE_FAILED,
                details={"media_id": record.id},
            ) from exc

        logger.info(
            "Metadata created",
            extra={"media_id": record.id, "owner_id": record.owner_id},
        )
        return record

    def get_media(self, *, media_id: str) -> MediaObject | None:
        logger.debug("Fetching metadata", extra={"media_id": media_id})

        try:
            response = self._db.get_item(key={"id": media_id})
        except (BotoCoreError, ClientError) as exc:
            logger.error("DynamoDB get_item failed", extra={"media_id": media_id})
            raise MetadataStoreError(
                message="Unable to retrieve media metadata",
                error_code=ERROR_CODE_METADATA_FETCH_FAILED,
                details={"media_id": media_id},
            ) from exc

        item = response.get("Item")
        if item is None:
            return None

        return _from_item(item)

    def soft_delete_media(self, *, media_id: str) -> MediaObject | None:
        logger.debug("Soft-deleting metadata", extra={"media_id": media_id})

        try:
            response = self._db.update_item(
                key={"id": media_id},
                update_expression="SET #status = :deleted, deleted_at = :deleted_at",
                condition_expression="attribute_exists(#id) AND #status = :active",
                expression_names={"#id": "id", "#status": "status"},
                expression_values={
                    ":deleted": MediaStatus.DELETED.value,
                    ":active": MediaStatus.ACTIVE.value,
                    ":deleted_at": utc_now_iso(),
                },
                return_values="ALL_NEW",
            )
        except (BotoCoreError, ClientError) as exc:
            if isinstance(exc, ClientError) and _is_conditional_failure(exc):
                logger.info(
                    "Media absent or already deleted",
                    extra={"media_id": media_id},
                )
                return None

            logger.error("DynamoDB update_item failed", extra={"media_id": media_id})
            raise MetadataStoreError(
                message="Unable to delete media metadata",
                error_code=ERROR_CODE_METADATA_DELETE_FAILED,
                details={"media_id": media_id},
            ) from exc

        logger.info("Metadata soft-deleted", extra={"media_id": media_id})
        return _from_item(response["Attributes"])

    def list_media(
        self,
        *,
        owner_id: str | None,
        limit: int,
        cursor: str | None = None,
        include_deleted: bool = False,
    ) -> tuple[list[MediaObject], str | None]:
        """List media newest first.

        NOTE:
        - The status filter runs after DynamoDB applies ``Limit``, so the
          query is repeated until ``limit + 1`` rows are collected or the
          index is exhausted.
        - ``uploaded_at`` must be stored in canonical ISO-8601 UTC format so
          ``uploaded_key`` (``uploaded_at#id``) sorts chronologically.
        - ``cursor`` and the returned cursor are raw sort keys; callers wrap
          them with ``CursorPagination.encode_cursor``.
        """
        logger.debug(
            "Listing media",
            extra={
                "owner_id": owner_id,
                "limit": limit,
                "cursor": cursor,
                "include_deleted": include_deleted,
            },
        )

        fetch_size = CursorPagination.fetch_size(limit)

        if owner_id is not None:
            index_name = OWNER_UPLOADED_INDEX
            key_condition = Key("owner_id").eq(owner_id)
        else:
            index_name = PARTITION_UPLOADED_INDEX
            key_condition = Key("partition").eq(MEDIA_PARTITION_VALUE)

        if cursor:
            key_condition &= Key(UPLOADED_SORT_KEY_ATTRIBUTE).lte(cursor)

        query_kwargs: dict[str, Any] = {
            "IndexName": index_name,
            "KeyConditionExpression": key_condition,
            "ScanIndexForward": False,
            "Limit": fetch_size,
        }

        if not include_deleted:
            query_kwargs["FilterExpression"] = Attr("status").eq(MediaStatus.ACTIVE.value)

        items: list[Item] = []

        try:
            while True:
                response = self._db.query(**query_kwargs)
                items.extend(response.get("Items", []))

                # Stop once the page plus the look-ahead row is collected
                if len(items) >= fetch_size:
                    break

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break

                query_kwargs["ExclusiveStartKey"] = last_evaluated_key

        except (BotoCoreError, ClientError) as exc:
            logger.error("DynamoDB query failed", extra={"owner_id": owner_id})
            raise MetadataStoreError(
                message="Unable to list media",
                error_code=ERROR_CODE_METADATA_LIST_FAILED,
                details={"owner_id": owner_id},
            ) from exc

        records = [_from_item(item) for item in items[:fetch_size]]
        page, next_cursor = CursorPagination.page(
            records,
            limit,
            cursor_of=lambda record: CursorPagination.sort_key(record.uploaded_at, record.id),
        )

        logger.info(
            "Media listed",
            extra={"owner_id": owner_id, "count": len(page), "has_more": next_cursor is not None},
        )
        return page, next_cursor
