"""Media Storage Service Package."""

__version__ = "1.0.0"
__description__ = (
    "Serverless media upload and retrieval service using AWS Lambda, S3, DynamoDB and SNS"
)

__all__ = ["handlers", "core"]
