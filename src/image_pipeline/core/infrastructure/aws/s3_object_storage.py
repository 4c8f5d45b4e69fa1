"""S3-backed implementation of ObjectStorageGateway."""

import re

from aws_lambda_powertools import Logger
from botocore.exceptions import ClientError

from image_pipeline.core.infrastructure.adapters.s3_adapter import (
    S3Adapter,
    S3AdapterProtocol,
)
from image_pipeline.core.models.errors import ImageServiceError, ValidationError
from image_pipeline.core.models.result import (
    ServiceFailure,
    ServiceSuccess,
    StorageResult,
)
from image_pipeline.core.repositories.storage_repository import ObjectStorageGateway
from image_pipeline.core.utils.constants import (
    DEFAULT_CONTENT_TYPE_BINARY,
    SIGNED_URL_EXPIRES_IN,
)
from image_pipeline.core.utils.time import unix_millis

logger = Logger(UTC=True)

_WHITESPACE = re.compile(r"\s+")


class S3ObjectStorage(ObjectStorageGateway):
    """Object storage gateway backed by Amazon S3."""

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3 = adapter or S3Adapter()

    @staticmethod
    def build_key(original_name: str) -> str:
        """Return ``{unix_millis}-{name}`` with whitespace runs turned into dashes.

        Two uploads of the same name within one millisecond share a key and
        the later one overwrites the earlier.
        """
        return f"{unix_millis()}-{_WHITESPACE.sub('-', original_name)}"

    def upload(
        self,
        *,
        file_data: bytes,
        original_name: str,
        content_type: str | None,
    ) -> StorageResult:
        """Upload bytes to S3 under a generated key."""
        try:
            if not original_name or not original_name.strip():
                raise ValidationError(
                    message="Invalid file name",
                    details={"original_name": original_name},
                )

            key = self.build_key(original_name)

            logger.debug(
                "Uploading object",
                extra={"key": key, "size": len(file_data)},
            )

            self._s3.put_object(
                key=key,
                body=file_data,
                content_type=content_type or DEFAULT_CONTENT_TYPE_BINARY,
            )
            logger.info("Object uploaded successfully", extra={"key": key})
            return ServiceSuccess[str](data=key)

        except ValidationError as exc:
            logger.warning("Upload rejected", extra={"error": exc.message})
            return self._failure(exc, "Unknown upload error")

        except Exception as exc:
            logger.exception("S3 upload failed", extra={"original_name": original_name})
            return self._failure(exc, "Unknown upload error")

    def get_signed_download_url(self, *, key: str) -> StorageResult:
        """Generate a pre-signed GET URL valid for one hour."""
        logger.debug(
            "Generating pre-signed S3 URL",
            extra={"key": key, "expires_in": SIGNED_URL_EXPIRES_IN},
        )

        try:
            url = self._s3.generate_presigned_url(
                method="get_object",
                params={"Key": key},
                expires_in=SIGNED_URL_EXPIRES_IN,
            )
            return ServiceSuccess[str](data=url)

        except Exception as exc:
            logger.exception("Failed to generate pre-signed URL", extra={"key": key})
            return self._failure(exc, "Failed to generate signed URL")

    def delete(self, *, key: str) -> StorageResult:
        """Delete an object from S3. Missing keys are not an error."""
        logger.debug("Deleting object", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
            logger.info("Object deleted successfully", extra={"key": key})
            return ServiceSuccess[str](data=f'File "{key}" deleted successfully')

        except Exception as exc:
            logger.exception("S3 deletion failed", extra={"key": key})
            return self._failure(exc, "Failed to delete file")

    @classmethod
    def _failure(cls, exc: Exception, fallback_message: str) -> ServiceFailure:
        if isinstance(exc, ImageServiceError):
            message = exc.message
        else:
            message = str(exc) or fallback_message

        return ServiceFailure.build(message, cls._get_error_code(exc))

    @staticmethod
    def _get_error_code(exc: Exception) -> str | None:
        """Extract a provider or domain error code, if the error carries one."""
        if isinstance(exc, ClientError):
            code = exc.response.get("Error", {}).get("Code")
            return str(code) if code else None

        if isinstance(exc, ImageServiceError):
            return exc.error_code

        code = getattr(exc, "code", None)
        return code if isinstance(code, str) else None
