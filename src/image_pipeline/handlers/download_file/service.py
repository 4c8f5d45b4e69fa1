"""
Business logic for issuing signed download URLs.
"""

import os

from aws_lambda_powertools import Logger

from image_pipeline.core.infrastructure.aws.s3_object_storage import S3ObjectStorage
from image_pipeline.core.models.result import ServiceSuccess, StorageResult
from image_pipeline.core.repositories.storage_repository import ObjectStorageGateway
from image_pipeline.core.utils.constants import (
    ENV_APP_RUNTIME,
    LOCALHOST_URL,
    LOCALSTACK_URL,
)

logger = Logger(UTC=True)


class DownloadService:
    """Application service responsible for signed download URLs."""

    def __init__(self, storage: ObjectStorageGateway | None = None) -> None:
        self.storage = storage or S3ObjectStorage()

    @staticmethod
    def _rewrite_localstack_url(url: str) -> str:
        """
        Replace internal LocalStack hostname with localhost
        so URLs are accessible from the host machine.
        """
        return url.replace(LOCALSTACK_URL, LOCALHOST_URL, 1)

    def get_download_url(self, key: str) -> StorageResult:
        """Return a time-limited URL for ``key``.

        The key is not checked for existence; a missing object surfaces
        when the URL is dereferenced.
        """
        result = self.storage.get_signed_download_url(key=key)

        if not result.success:
            logger.error(
                "Failed to issue download URL",
                extra={"key": key, "code": result.error.code},
            )
            return result

        logger.info("Download URL issued", extra={"key": key})

        if os.getenv(ENV_APP_RUNTIME) == "localstack":
            return ServiceSuccess[str](data=self._rewrite_localstack_url(result.data))

        return result
