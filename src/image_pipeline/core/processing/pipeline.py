"""Stages every inbound payload passes through before transform or upload."""

from aws_lambda_powertools import Logger

from image_pipeline.core.models.errors import MIMETypeError
from image_pipeline.core.models.image import ImageBuffer
from image_pipeline.core.processing.size_guard import guard_image
from image_pipeline.core.utils.mime import detect_mime_type, ensure_allowed_mime_type

logger = Logger(UTC=True)


def resolve_mime_type(file_data: bytes, content_type: str | None) -> str:
    """Return the declared content type, detecting it from magic bytes if absent."""
    if content_type and content_type.strip():
        return content_type

    try:
        return detect_mime_type(file_data)
    except ValueError as exc:
        raise MIMETypeError(
            message="Unable to determine file type",
            details={"content_type": content_type},
        ) from exc


def prepare_image(file_data: bytes, content_type: str | None = None) -> ImageBuffer:
    """Run the MIME allow-list check and then the size guard.

    Raises:
        MIMETypeError: If the payload is not an accepted image type
        ProcessingError: If an oversized payload cannot be recompressed
    """
    mime_type = ensure_allowed_mime_type(resolve_mime_type(file_data, content_type))
    image = guard_image(ImageBuffer(data=file_data, mime_type=mime_type))

    logger.debug(
        "Image prepared for processing",
        extra={"mime_type": image.mime_type, "size": image.size_bytes},
    )
    return image
