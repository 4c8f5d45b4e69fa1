"""Pydantic models for delete file request."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class DeleteFileRequest(BaseModel):
    """Validation model for delete file request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    key: StrictStr = Field(
        ...,
        min_length=1,
        max_length=1024,
        description="Object key to delete",
    )
