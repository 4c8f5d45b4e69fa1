from collections.abc import Mapping

from aws_lambda_powertools import Logger

from image_pipeline.core.models.errors import MIMETypeError
from image_pipeline.core.utils.constants import ALLOWED_MIME_TYPES

logger = Logger(UTC=True)

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"RIFF": "image/webp",
}


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    raise ValueError("Unsupported or unknown file type")


def ensure_allowed_mime_type(mime_type: str | None) -> str:
    """Return the normalized MIME type if it is on the allow-list.

    Raises:
        MIMETypeError: If the type is missing or not an accepted image type
    """
    normalized = (mime_type or "").split(";", 1)[0].strip().lower()

    if normalized not in ALLOWED_MIME_TYPES:
        logger.warning("Rejected MIME type", extra={"mime_type": mime_type})
        raise MIMETypeError(
            message=(
                f"Invalid file type: {mime_type}. "
                f"Only {','.join(sorted(ALLOWED_MIME_TYPES))} images are allowed."
            ),
            details={"mime_type": mime_type},
        )

    return normalized
