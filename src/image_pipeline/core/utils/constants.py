"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"

# Processing Errors
ERROR_CODE_PROCESSING_FAILED = "PROCESSING_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 25 * 1024 * 1024  # 25MB decoded request payload

DEFAULT_CONTENT_TYPE_BINARY = "application/octet-stream"

MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
}

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())


# ============================================================================
# Size Guard
# ============================================================================

SIZE_GUARD_MAX_BYTES = 5 * 1024 * 1024  # 5MB threshold
SIZE_GUARD_MAX_WIDTH = 1024
SIZE_GUARD_JPEG_QUALITY = 80


# ============================================================================
# Transform Engine
# ============================================================================

DEFAULT_JPEG_QUALITY = 80
MIN_JPEG_QUALITY = 1
MAX_JPEG_QUALITY = 100

UPLOADS_DIR_NAME = "uploads"
GENERATED_DIR_NAME = "gen"
DEFAULT_OUTPUT_ROOT = "/tmp/image-pipeline"


# ============================================================================
# Object Storage
# ============================================================================

SIGNED_URL_EXPIRES_IN = 3600  # seconds


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_S3_ACCESS_KEY_ID = "IMAGE_S3_ACCESS_KEY_ID"
ENV_IMAGE_S3_SECRET_ACCESS_KEY = "IMAGE_S3_SECRET_ACCESS_KEY"
ENV_IMAGE_OUTPUT_ROOT = "IMAGE_OUTPUT_ROOT"
ENV_APP_RUNTIME = "APP_RUNTIME"
LOCALSTACK_URL = "http://localstack"
LOCALHOST_URL = "http://localhost"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)
