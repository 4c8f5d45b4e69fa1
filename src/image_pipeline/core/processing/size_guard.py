"""Pre-transform size guard.

Payloads above the size threshold are re-encoded as JPEG at a bounded
width before any other stage sees them. Smaller payloads pass through
untouched.
"""

from io import BytesIO

from aws_lambda_powertools import Logger
from PIL import Image

from image_pipeline.core.models.errors import ProcessingError
from image_pipeline.core.models.image import ImageBuffer
from image_pipeline.core.utils.constants import (
    SIZE_GUARD_JPEG_QUALITY,
    SIZE_GUARD_MAX_BYTES,
    SIZE_GUARD_MAX_WIDTH,
)

logger = Logger(UTC=True)


def enforce_size_limit(
    file_data: bytes,
    size_bytes: int | None = None,
) -> tuple[bytes, int]:
    """Recompress ``file_data`` when its size exceeds the threshold.

    Args:
        file_data: Raw encoded image bytes
        size_bytes: Declared payload size, defaults to ``len(file_data)``

    Returns:
        Tuple of (buffer, size). The input buffer is returned unchanged when
        it is within the limit.

    Raises:
        ProcessingError: If the oversized image cannot be re-encoded
    """
    size = len(file_data) if size_bytes is None else size_bytes

    if size <= SIZE_GUARD_MAX_BYTES:
        return file_data, size

    logger.info(
        "Recompressing oversized image",
        extra={"size": size, "threshold": SIZE_GUARD_MAX_BYTES},
    )

    try:
        with Image.open(BytesIO(file_data)) as img:
            img.load()
            width, height = img.size
            if width > SIZE_GUARD_MAX_WIDTH:
                new_height = max(1, round(height * SIZE_GUARD_MAX_WIDTH / width))
                img = img.resize(
                    (SIZE_GUARD_MAX_WIDTH, new_height), Image.Resampling.LANCZOS
                )
            if img.mode not in ("RGB", "L"):
                img = img.convert("RGB")

            buffer = BytesIO()
            img.save(buffer, format="JPEG", quality=SIZE_GUARD_JPEG_QUALITY)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.exception("Failed to recompress oversized image")
        raise ProcessingError(
            message=f"Failed to recompress image: {exc}",
            details={"size": size},
        ) from exc

    compressed = buffer.getvalue()
    logger.info(
        "Oversized image recompressed",
        extra={"original_size": size, "new_size": len(compressed)},
    )
    return compressed, len(compressed)


def guard_image(image: ImageBuffer) -> ImageBuffer:
    """Apply the size guard to an ``ImageBuffer``.

    A recompressed buffer is always JPEG, so its MIME type is updated.
    """
    data, _ = enforce_size_limit(image.data, image.size_bytes)

    if data is image.data:
        return image

    return ImageBuffer(data=data, mime_type="image/jpeg")
