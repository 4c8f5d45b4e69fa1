"""Business logic for object deletion.

Deletion is idempotent: removing a key that does not exist, or removing
the same key twice, reports success.
"""

from aws_lambda_powertools import Logger

from image_pipeline.core.infrastructure.aws.s3_object_storage import S3ObjectStorage
from image_pipeline.core.models.result import StorageResult
from image_pipeline.core.repositories.storage_repository import ObjectStorageGateway

logger = Logger(UTC=True)


class DeleteService:
    """Application service responsible for deleting stored objects."""

    def __init__(self, storage: ObjectStorageGateway | None = None) -> None:
        self.storage = storage or S3ObjectStorage()

    def delete_file(self, key: str) -> StorageResult:
        logger.debug("Starting object deletion", extra={"key": key})

        result = self.storage.delete(key=key)

        if not result.success:
            logger.error(
                "Object deletion failed",
                extra={"key": key, "code": result.error.code},
            )

        return result
