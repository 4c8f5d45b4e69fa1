"""Pydantic models for file upload request/response."""

from pydantic import Field

from image_pipeline.core.models.payload import ImagePayloadRequest


class UploadFileRequest(ImagePayloadRequest):
    """Validation model for file upload request.

    The file name is only length-checked here; the storage gateway rejects
    blank names and reports them through its result envelope.
    """

    file_name: str = Field(
        ..., max_length=255, description="Original file name, embedded in the object key"
    )
