import base64

import pytest
from pydantic import ValidationError

from image_pipeline.core.models.transform import (
    CompressSpec,
    CropSpec,
    MultiResolutionSpec,
    ResizeSpec,
)
from image_pipeline.handlers.transform_image.models import (
    CompressRequest,
    CropRequest,
    GenerateImagesRequest,
    ResizeRequest,
)

FILE = base64.b64encode(b"\x89PNG\r\n\x1a\nxx").decode()


def test_resize_request_to_spec() -> None:
    request = ResizeRequest(file=FILE, folder_name="a", width="10", height=20)

    assert request.to_spec() == ResizeSpec(width=10, height=20)


def test_compress_request_bounds() -> None:
    assert CompressRequest(file=FILE, folder_name="a", quality=1).to_spec() == CompressSpec(
        quality=1
    )

    with pytest.raises(ValidationError):
        CompressRequest(file=FILE, folder_name="a", quality=101)


def test_crop_request_to_spec() -> None:
    request = CropRequest(file=FILE, folder_name="a", width=1, height=2, left=3, top=4)

    assert request.to_spec() == CropSpec(width=1, height=2, left=3, top=4)


def test_generate_request_accepts_camel_case() -> None:
    request = GenerateImagesRequest.model_validate(
        {"file": FILE, "folderName": "set", "fileCount": 2, "minRes": 5, "maxRes": 9}
    )

    assert request.folder_name == "set"
    assert request.to_spec() == MultiResolutionSpec(
        file_count=2, min_resolution=5, max_resolution=9
    )


def test_folder_name_is_required() -> None:
    with pytest.raises(ValidationError):
        ResizeRequest.model_validate({"file": FILE, "width": 1, "height": 1})
