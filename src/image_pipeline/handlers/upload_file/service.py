"""Business logic for file uploads.

Every payload passes the MIME allow-list and the size guard before it is
handed to the object storage gateway.
"""

from aws_lambda_powertools import Logger

from image_pipeline.core.infrastructure.aws.s3_object_storage import S3ObjectStorage
from image_pipeline.core.models.result import StorageResult
from image_pipeline.core.processing.pipeline import prepare_image
from image_pipeline.core.repositories.storage_repository import ObjectStorageGateway

logger = Logger(UTC=True)


class UploadService:
    """Application service responsible for uploads.

    This service orchestrates:
    - MIME type gatekeeping
    - Recompression of oversized images
    - Uploading the resulting bytes to object storage
    """

    def __init__(self, storage: ObjectStorageGateway | None = None) -> None:
        self.storage = storage or S3ObjectStorage()

    def upload_file(
        self,
        *,
        file_data: bytes,
        file_name: str,
        content_type: str | None = None,
    ) -> StorageResult:
        """Guard and upload an image.

        Args:
            file_data: Raw image bytes
            file_name: Client-supplied file name
            content_type: Declared MIME type, detected when omitted

        Returns:
            ServiceResult with the generated object key

        Raises:
            MIMETypeError: If the payload is not an accepted image type
            ProcessingError: If an oversized image cannot be recompressed
        """
        logger.debug("Starting upload", extra={"file_name": file_name})

        image = prepare_image(file_data, content_type)

        result = self.storage.upload(
            file_data=image.data,
            original_name=file_name,
            content_type=image.mime_type,
        )

        if result.success:
            logger.info("Upload completed", extra={"key": result.data})
        else:
            logger.error(
                "Upload failed",
                extra={"error": result.error.message, "code": result.error.code},
            )

        return result
