import base64
import json
from urllib.parse import parse_qs, urlparse

from handlers.presign_upload.handler import handler


def parse(response) -> dict:
    return json.loads(response["body"])


def presign_event(api_event, body, **kwargs):
    return api_event("POST", "/media/presign", body=body, **kwargs)


class TestPresignHandler:
    def test_issues_upload_intent(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "photo.png", "mimeType": "image/png", "sizeBytes": 1234},
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 201
        body = parse(response)
        assert body["key"] == f"uploads/user-1/{body['id']}.png"
        assert body["expiresIn"] == 900
        assert body["metadata"] == {"ownerId": "user-1", "mimeType": "image/png", "sizeBytes": 1234}

        url = urlparse(body["uploadUrl"])
        assert url.path.endswith(body["key"])
        assert parse_qs(url.query)["X-Amz-Expires"] == ["900"]
        assert "content-type" in parse_qs(url.query)["X-Amz-SignedHeaders"][0]

    def test_no_metadata_row_is_written(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "photo.png", "mimeType": "image/png", "sizeBytes": 10},
        )

        handler(event, lambda_context)

        assert aws_resources["media_table"].scan()["Count"] == 0

    def test_mime_type_is_lower_cased(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "photo.JPG", "mimeType": " IMAGE/JPEG ", "sizeBytes": 10},
        )

        body = parse(handler(event, lambda_context))

        assert body["metadata"]["mimeType"] == "image/jpeg"
        assert body["key"].endswith(".jpg")

    def test_unsupported_mime_type(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "doc.pdf", "mimeType": "application/pdf", "sizeBytes": 10},
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert parse(response)["error"] == "UNSUPPORTED_MIME_TYPE"

    def test_size_over_limit(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "photo.png", "mimeType": "image/png", "sizeBytes": 10 * 1024 * 1024 + 1},
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert parse(response)["error"] == "FILE_SIZE_EXCEEDED"

    def test_size_at_limit(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "photo.png", "mimeType": "image/png", "sizeBytes": 10 * 1024 * 1024},
        )

        assert handler(event, lambda_context)["statusCode"] == 201

    def test_invalid_fields(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "", "mimeType": "image/png", "sizeBytes": "12"},
        )

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        body = parse(response)
        assert body["message"] == "Invalid request params"
        fields = {error["field"] for error in body["details"]["errors"]}
        assert fields == {"fileName", "sizeBytes"}

    def test_zero_size(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "photo.png", "mimeType": "image/png", "sizeBytes": 0},
        )

        assert handler(event, lambda_context)["statusCode"] == 400

    def test_invalid_json(self, aws_resources, lambda_context, api_event) -> None:
        response = handler(presign_event(api_event, "{not json"), lambda_context)

        assert response["statusCode"] == 400
        assert parse(response)["message"] == "Invalid JSON body"

    def test_non_utf8_body(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(api_event, None)
        event["body"] = base64.b64encode(b'{"fileName": "\xff.png"}').decode("ascii")
        event["isBase64Encoded"] = True

        response = handler(event, lambda_context)

        assert response["statusCode"] == 400
        assert parse(response)["message"] == "Invalid JSON body"

    def test_non_object_json(self, aws_resources, lambda_context, api_event) -> None:
        response = handler(presign_event(api_event, "[1, 2]"), lambda_context)

        assert response["statusCode"] == 400

    def test_missing_identity(self, aws_resources, lambda_context, api_event) -> None:
        event = presign_event(
            api_event,
            {"fileName": "photo.png", "mimeType": "image/png", "sizeBytes": 10},
            user_id=None,
        )

        assert handler(event, lambda_context)["statusCode"] == 401
