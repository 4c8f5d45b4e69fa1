"""Shared image buffer and variant models."""

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictInt, StrictStr


class ImageBuffer(BaseModel):
    """Raw image payload travelling through the pipeline stages."""

    model_config = ConfigDict(frozen=True)

    data: StrictBytes = Field(..., description="Raw encoded image bytes")
    mime_type: StrictStr = Field(..., description="Declared MIME type (e.g. image/png)")

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class GeneratedVariant(BaseModel):
    """Image derived by one transform operation and written to disk."""

    model_config = ConfigDict(frozen=True)

    path: StrictStr = Field(..., description="Filesystem path of the written variant")
    width: StrictInt = Field(..., description="Output width in pixels")
    height: StrictInt = Field(..., description="Output height in pixels")
    size_bytes: StrictInt = Field(..., description="Encoded file size in bytes")
    resolution: StrictInt | None = Field(
        None, description="Target resolution for multi-resolution variants"
    )
