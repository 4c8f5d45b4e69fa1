"""Image transform engine.

Derives resized, compressed, cropped and multi-resolution variants from a
source image buffer using Pillow and writes them below a local output root:

    {root}/uploads/{folder}/resized_{w}x{h}.jpg
    {root}/uploads/{folder}/compressed_q{quality}.jpg
    {root}/uploads/{folder}/cropped_{w}x{h}.jpg
    {root}/gen/{folder}/{folder}_{resolution}.jpg

File names are deterministic, so repeating a request overwrites the
previous output instead of accumulating copies.
"""

import math
import os
from io import BytesIO
from pathlib import Path

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps

from image_pipeline.core.models.errors import ProcessingError, ValidationError
from image_pipeline.core.models.image import GeneratedVariant
from image_pipeline.core.models.transform import (
    CompressSpec,
    CropSpec,
    MultiResolutionSpec,
    ResizeSpec,
    TransformSpec,
)
from image_pipeline.core.utils.constants import (
    DEFAULT_JPEG_QUALITY,
    DEFAULT_OUTPUT_ROOT,
    ENV_IMAGE_OUTPUT_ROOT,
    GENERATED_DIR_NAME,
    MAX_JPEG_QUALITY,
    MIN_JPEG_QUALITY,
    UPLOADS_DIR_NAME,
)

logger = Logger(UTC=True)

_DECODE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def interpolate_resolutions(
    file_count: int,
    min_resolution: int,
    max_resolution: int,
) -> list[int]:
    """Return ``file_count`` evenly spaced resolutions from min to max inclusive.

    Halves round up, so ``(100, 101)`` over three files gives ``[100, 101, 101]``.
    """
    if file_count < 1:
        raise ValidationError(
            message="File count must be at least 1.",
            details={"file_count": file_count},
        )

    if file_count == 1:
        return [min_resolution]

    step = (max_resolution - min_resolution) / (file_count - 1)
    return [math.floor(min_resolution + step * i + 0.5) for i in range(file_count)]


class TransformEngine:
    """Produces image variants on the local filesystem."""

    def __init__(self, output_root: str | Path | None = None) -> None:
        root = Path(
            output_root or os.getenv(ENV_IMAGE_OUTPUT_ROOT) or DEFAULT_OUTPUT_ROOT
        )
        self._uploads_dir = root / UPLOADS_DIR_NAME
        self._generated_dir = root / GENERATED_DIR_NAME

    def resize(
        self,
        file_data: bytes,
        folder_name: str,
        width: int,
        height: int,
    ) -> GeneratedVariant:
        """Resize an image to exactly ``width`` x ``height``.

        The source is scaled to cover the target box and centre-cropped, then
        encoded as JPEG.

        Raises:
            ValidationError: If the folder name is invalid
            ProcessingError: If the dimensions are not positive or the codec fails
        """
        output_dir = self._output_dir(self._uploads_dir, folder_name)

        if width <= 0 or height <= 0:
            raise ProcessingError(
                message=f"Failed to resize image: invalid dimensions {width}x{height}",
                details={"width": width, "height": height},
            )

        img = self._open_image(file_data)
        try:
            resized = ImageOps.fit(img, (width, height), Image.Resampling.LANCZOS)
        except _DECODE_ERRORS as exc:
            raise ProcessingError(message=f"Failed to resize image: {exc}") from exc

        output_path = output_dir / f"resized_{width}x{height}.jpg"
        return self._save_jpeg(resized, output_path, quality=DEFAULT_JPEG_QUALITY)

    def compress(
        self,
        file_data: bytes,
        folder_name: str,
        quality: int,
    ) -> GeneratedVariant:
        """Re-encode an image at the given JPEG quality without resizing.

        Raises:
            ValidationError: If quality is outside 1-100 or the folder name is invalid
            ProcessingError: If the codec fails
        """
        if quality < MIN_JPEG_QUALITY or quality > MAX_JPEG_QUALITY:
            raise ValidationError(
                message="Quality must be between 1 and 100.",
                details={"quality": quality},
            )

        output_dir = self._output_dir(self._uploads_dir, folder_name)
        img = self._open_image(file_data)

        output_path = output_dir / f"compressed_q{quality}.jpg"
        return self._save_jpeg(img, output_path, quality=quality)

    def crop(
        self,
        file_data: bytes,
        folder_name: str,
        width: int,
        height: int,
        left: int,
        top: int,
    ) -> GeneratedVariant:
        """Extract a ``width`` x ``height`` rectangle at (``left``, ``top``).

        The rectangle is never clamped. One that does not fit inside the
        source image is rejected.

        Raises:
            ValidationError: If the folder name is invalid
            ProcessingError: If the rectangle is out of bounds or the codec fails
        """
        output_dir = self._output_dir(self._uploads_dir, folder_name)
        img = self._open_image(file_data)

        src_width, src_height = img.size
        if (
            width <= 0
            or height <= 0
            or left < 0
            or top < 0
            or left + width > src_width
            or top + height > src_height
        ):
            raise ProcessingError(
                message="Failed to crop image: bad extract area",
                details={
                    "rectangle": [left, top, width, height],
                    "source": [src_width, src_height],
                },
            )

        cropped = img.crop((left, top, left + width, top + height))

        output_path = output_dir / f"cropped_{width}x{height}.jpg"
        return self._save_jpeg(cropped, output_path, quality=DEFAULT_JPEG_QUALITY)

    def generate_multi_resolution(
        self,
        file_data: bytes,
        folder_name: str,
        file_count: int,
        min_resolution: int,
        max_resolution: int,
    ) -> list[GeneratedVariant]:
        """Generate ``file_count`` images with evenly spaced widths.

        Variants are produced one after another and returned in index order.
        The first failure aborts the batch; files already written are kept
        and listed under ``details["generated"]`` of the raised error.
        """
        resolutions = interpolate_resolutions(file_count, min_resolution, max_resolution)
        output_dir = self._output_dir(self._generated_dir, folder_name)

        logger.debug(
            "Generating multi-resolution batch",
            extra={"folder_name": folder_name, "resolutions": resolutions},
        )

        variants: list[GeneratedVariant] = []
        for resolution in resolutions:
            try:
                variants.append(
                    self._resize_to_width(file_data, output_dir, resolution)
                )
            except ProcessingError as exc:
                logger.exception(
                    "Multi-resolution batch aborted",
                    extra={"folder_name": folder_name, "resolution": resolution},
                )
                raise ProcessingError(
                    message=exc.message,
                    details={
                        **exc.details,
                        "resolution": resolution,
                        "generated": [variant.path for variant in variants],
                    },
                ) from exc

        return variants

    def apply(
        self,
        file_data: bytes,
        folder_name: str,
        spec: TransformSpec,
    ) -> list[GeneratedVariant]:
        """Run the transform described by ``spec``."""
        if isinstance(spec, ResizeSpec):
            return [self.resize(file_data, folder_name, spec.width, spec.height)]

        if isinstance(spec, CompressSpec):
            return [self.compress(file_data, folder_name, spec.quality)]

        if isinstance(spec, CropSpec):
            return [
                self.crop(
                    file_data, folder_name, spec.width, spec.height, spec.left, spec.top
                )
            ]

        if isinstance(spec, MultiResolutionSpec):
            return self.generate_multi_resolution(
                file_data,
                folder_name,
                spec.file_count,
                spec.min_resolution,
                spec.max_resolution,
            )

        raise ValidationError(
            message="Unsupported transform",
            details={"spec": type(spec).__name__},
        )

    def _resize_to_width(
        self,
        file_data: bytes,
        output_dir: Path,
        resolution: int,
    ) -> GeneratedVariant:
        if resolution <= 0:
            raise ProcessingError(
                message=f"Failed to resize image: invalid resolution {resolution}",
                details={"resolution": resolution},
            )

        img = self._open_image(file_data)
        width, height = img.size
        new_height = max(1, round(height * resolution / width))

        try:
            resized = img.resize((resolution, new_height), Image.Resampling.LANCZOS)
        except _DECODE_ERRORS as exc:
            raise ProcessingError(message=f"Failed to resize image: {exc}") from exc

        output_path = output_dir / f"{output_dir.name}_{resolution}.jpg"
        variant = self._save_jpeg(resized, output_path, quality=DEFAULT_JPEG_QUALITY)
        return variant.model_copy(update={"resolution": resolution})

    @staticmethod
    def _output_dir(base_dir: Path, folder_name: str) -> Path:
        """Return (and create) the target folder for a transform."""
        name = folder_name.strip() if folder_name else ""

        if (
            not name
            or name in (".", "..")
            or "/" in name
            or "\\" in name
            or os.sep in name
        ):
            raise ValidationError(
                message="Invalid folder name",
                details={"folder_name": folder_name},
            )

        output_dir = base_dir / name
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir

    @staticmethod
    def _open_image(file_data: bytes) -> Image.Image:
        """Decode image bytes, surfacing codec failures as ProcessingError."""
        try:
            img = Image.open(BytesIO(file_data))
            img.load()
        except _DECODE_ERRORS as exc:
            logger.warning("Failed to decode image", extra={"error": str(exc)})
            raise ProcessingError(message=f"Failed to decode image: {exc}") from exc
        return img

    @staticmethod
    def _save_jpeg(img: Image.Image, output_path: Path, *, quality: int) -> GeneratedVariant:
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")

        try:
            img.save(output_path, format="JPEG", quality=quality)
        except _DECODE_ERRORS as exc:
            logger.exception("Failed to encode image", extra={"path": str(output_path)})
            raise ProcessingError(message=f"Failed to encode image: {exc}") from exc

        logger.info(
            "Image variant written",
            extra={"path": str(output_path), "width": img.width, "height": img.height},
        )

        return GeneratedVariant(
            path=str(output_path),
            width=img.width,
            height=img.height,
            size_bytes=output_path.stat().st_size,
        )
