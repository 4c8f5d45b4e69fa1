"""Transform request variants understood by the transform engine."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class ResizeSpec(BaseModel):
    """Scale to exactly ``width`` x ``height``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["resize"] = "resize"
    width: StrictInt
    height: StrictInt


class CompressSpec(BaseModel):
    """Re-encode at a JPEG quality without resizing."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["compress"] = "compress"
    quality: StrictInt = Field(..., ge=1, le=100)


class CropSpec(BaseModel):
    """Extract the rectangle starting at (``left``, ``top``)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["crop"] = "crop"
    width: StrictInt
    height: StrictInt
    left: StrictInt
    top: StrictInt


class MultiResolutionSpec(BaseModel):
    """Evenly spaced batch of widths between two resolutions.

    ``min_resolution <= max_resolution`` is deliberately not enforced;
    a descending range yields descending widths.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["multi_resolution"] = "multi_resolution"
    file_count: StrictInt = Field(..., ge=1)
    min_resolution: StrictInt
    max_resolution: StrictInt


TransformSpec = ResizeSpec | CompressSpec | CropSpec | MultiResolutionSpec
