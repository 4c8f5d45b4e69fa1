"""Pydantic models for signed download URL requests."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class DownloadFileRequest(BaseModel):
    """Validation model for download request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    key: StrictStr = Field(
        ...,
        min_length=1,
        max_length=1024,
        description="Object key returned by the upload endpoint",
    )
