"""Pydantic models for transform requests.

Field names follow snake_case; the camelCase names used by existing
clients (``folderName``, ``fileCount``, ``minRes``, ``maxRes``) are
accepted as well.
"""

from pydantic import AliasChoices, Field

from image_pipeline.core.models.payload import ImagePayloadRequest
from image_pipeline.core.models.transform import (
    CompressSpec,
    CropSpec,
    MultiResolutionSpec,
    ResizeSpec,
    TransformSpec,
)


class TransformRequest(ImagePayloadRequest):
    """Fields common to every transform request."""

    folder_name: str = Field(
        ...,
        min_length=1,
        max_length=128,
        validation_alias=AliasChoices("folder_name", "folderName"),
        description="Target folder for generated files",
    )

    def to_spec(self) -> TransformSpec:
        raise NotImplementedError


class ResizeRequest(TransformRequest):
    width: int = Field(..., description="Target width in pixels")
    height: int = Field(..., description="Target height in pixels")

    def to_spec(self) -> TransformSpec:
        return ResizeSpec(width=self.width, height=self.height)


class CompressRequest(TransformRequest):
    quality: int = Field(..., ge=1, le=100, description="JPEG quality (1-100)")

    def to_spec(self) -> TransformSpec:
        return CompressSpec(quality=self.quality)


class CropRequest(TransformRequest):
    width: int = Field(..., description="Crop width")
    height: int = Field(..., description="Crop height")
    left: int = Field(..., description="X offset")
    top: int = Field(..., description="Y offset")

    def to_spec(self) -> TransformSpec:
        return CropSpec(
            width=self.width, height=self.height, left=self.left, top=self.top
        )


class GenerateImagesRequest(TransformRequest):
    file_count: int = Field(
        ...,
        ge=1,
        validation_alias=AliasChoices("file_count", "fileCount"),
        description="Number of images to generate",
    )
    min_res: int = Field(
        ...,
        validation_alias=AliasChoices("min_res", "minRes"),
        description="Smallest target width",
    )
    max_res: int = Field(
        ...,
        validation_alias=AliasChoices("max_res", "maxRes"),
        description="Largest target width",
    )

    def to_spec(self) -> TransformSpec:
        return MultiResolutionSpec(
            file_count=self.file_count,
            min_resolution=self.min_res,
            max_resolution=self.max_res,
        )
