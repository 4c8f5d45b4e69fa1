"""Base Pydantic model for requests carrying a base64-encoded image."""

from aws_lambda_powertools import Logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from image_pipeline.core.models.errors import ValidationError
from image_pipeline.core.utils.constants import MAX_FILE_SIZE, get_max_file_size_mb
from image_pipeline.core.utils.validators import decode_base64_file

logger = Logger(UTC=True)


class ImagePayloadRequest(BaseModel):
    """Validation model shared by upload and transform requests."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    content_type: str | None = Field(
        None,
        max_length=100,
        description="Declared MIME type; detected from the file when omitted",
    )

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        """
        Validate base64 file:
        - must not be empty
        - must decode correctly
        - must have non-zero size
        - must not exceed MAX_FILE_SIZE
        """
        if not value:
            raise ValueError("file must not be empty")

        try:
            file_data = decode_base64_file(value)
        except ValidationError as exc:
            logger.error("File validation error: Invalid base64")
            raise ValueError("Invalid base64 encoded file") from exc

        if not file_data:
            raise ValueError("Decoded file is empty")

        if len(file_data) > MAX_FILE_SIZE:
            logger.error("File size validation error: File size exceeds limit")
            raise ValueError(f"File size exceeds {get_max_file_size_mb()}MB limit")

        return value

    @property
    def file_data(self) -> bytes:
        return decode_base64_file(self.file)
