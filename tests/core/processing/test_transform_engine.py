"""Unit tests for TransformEngine."""

from io import BytesIO
from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from image_pipeline.core.models.errors import ProcessingError, ValidationError
from image_pipeline.core.models.transform import (
    CompressSpec,
    CropSpec,
    MultiResolutionSpec,
    ResizeSpec,
)
from image_pipeline.core.processing.transform_engine import (
    TransformEngine,
    interpolate_resolutions,
)


def image_size(path: str) -> tuple[int, int]:
    with Image.open(path) as img:
        assert img.format == "JPEG"
        return img.size


@pytest.fixture
def engine(tmp_path) -> TransformEngine:
    return TransformEngine(tmp_path)


class TestInterpolateResolutions:
    @pytest.mark.parametrize(
        "file_count,min_res,max_res,expected",
        [
            (3, 100, 300, [100, 200, 300]),
            (1, 250, 900, [250]),
            (2, 100, 300, [100, 300]),
            (4, 100, 200, [100, 133, 167, 200]),
            (3, 100, 101, [100, 101, 101]),
            (3, 300, 100, [300, 200, 100]),
            (3, 150, 150, [150, 150, 150]),
        ],
    )
    def test_evenly_spaced(self, file_count, min_res, max_res, expected) -> None:
        assert interpolate_resolutions(file_count, min_res, max_res) == expected

    @pytest.mark.parametrize("file_count", [0, -1])
    def test_rejects_non_positive_file_count(self, file_count) -> None:
        with pytest.raises(ValidationError):
            interpolate_resolutions(file_count, 100, 200)


class TestResize:
    def test_resize_writes_exact_dimensions(self, engine, tmp_path, sample_png) -> None:
        variant = engine.resize(sample_png, "album", 30, 90)

        expected = tmp_path / "uploads" / "album" / "resized_30x90.jpg"
        assert variant.path == str(expected)
        assert image_size(variant.path) == (30, 90)
        assert (variant.width, variant.height) == (30, 90)
        assert variant.size_bytes == expected.stat().st_size

    def test_resize_overwrites_previous_output(self, engine, tmp_path, sample_png) -> None:
        first = engine.resize(sample_png, "album", 20, 20)
        second = engine.resize(sample_png, "album", 20, 20)

        assert first.path == second.path
        assert len(list((tmp_path / "uploads" / "album").iterdir())) == 1

    @pytest.mark.parametrize("width,height", [(0, 10), (10, 0), (-5, 10)])
    def test_resize_rejects_non_positive_dimensions(
        self, engine, sample_png, width, height
    ) -> None:
        with pytest.raises(ProcessingError):
            engine.resize(sample_png, "album", width, height)

    def test_resize_corrupt_buffer(self, engine) -> None:
        with pytest.raises(ProcessingError) as exc:
            engine.resize(b"garbage", "album", 10, 10)

        assert "Failed to decode image" in exc.value.message


class TestCompress:
    @pytest.mark.parametrize("quality", [1, 100])
    def test_compress_accepts_quality_bounds(self, engine, tmp_path, sample_jpeg, quality) -> None:
        variant = engine.compress(sample_jpeg, "shots", quality)

        assert variant.path == str(tmp_path / "uploads" / "shots" / f"compressed_q{quality}.jpg")
        assert image_size(variant.path) == (80, 60)

    @pytest.mark.parametrize("quality", [0, 101, -3])
    def test_compress_rejects_out_of_range_quality_before_io(
        self, engine, tmp_path, sample_jpeg, quality
    ) -> None:
        with patch.object(TransformEngine, "_open_image") as mock_open:
            with pytest.raises(ValidationError) as exc:
                engine.compress(sample_jpeg, "shots", quality)

        mock_open.assert_not_called()
        assert exc.value.message == "Quality must be between 1 and 100."
        assert not (tmp_path / "uploads").exists()

    def test_compress_flattens_transparency(self, engine, make_image) -> None:
        rgba = make_image(10, 10, fmt="PNG", mode="RGBA", color=(0, 0, 0, 0))

        variant = engine.compress(rgba, "alpha", 50)

        with Image.open(variant.path) as img:
            assert img.mode == "RGB"


class TestCrop:
    def test_crop_extracts_rectangle(self, engine, tmp_path, make_image) -> None:
        source = make_image(100, 80, fmt="PNG")

        variant = engine.crop(source, "crops", 40, 30, 10, 20)

        assert variant.path == str(tmp_path / "uploads" / "crops" / "cropped_40x30.jpg")
        assert image_size(variant.path) == (40, 30)

    def test_crop_preserves_pixels(self, engine) -> None:
        img = Image.new("RGB", (20, 20), color=(0, 0, 0))
        img.paste((255, 255, 255), (10, 0, 20, 20))
        buffer = BytesIO()
        img.save(buffer, format="PNG")

        variant = engine.crop(buffer.getvalue(), "crops", 10, 20, 10, 0)

        with Image.open(variant.path) as out:
            r, g, b = out.convert("RGB").getpixel((5, 10))
            assert min(r, g, b) > 240

    def test_crop_full_image_is_allowed(self, engine, make_image) -> None:
        variant = engine.crop(make_image(30, 30), "crops", 30, 30, 0, 0)

        assert image_size(variant.path) == (30, 30)

    @pytest.mark.parametrize(
        "width,height,left,top",
        [
            (50, 10, 60, 0),
            (10, 50, 0, 40),
            (101, 10, 0, 0),
            (10, 10, -1, 0),
            (0, 10, 0, 0),
        ],
    )
    def test_crop_outside_bounds_is_not_clamped(
        self, engine, make_image, width, height, left, top
    ) -> None:
        with pytest.raises(ProcessingError) as exc:
            engine.crop(make_image(100, 80), "crops", width, height, left, top)

        assert "bad extract area" in exc.value.message
        assert exc.value.details["source"] == [100, 80]


class TestGenerateMultiResolution:
    def test_generates_evenly_spaced_widths(self, engine, tmp_path, make_image) -> None:
        source = make_image(400, 200)

        variants = engine.generate_multi_resolution(source, "batch", 3, 100, 300)

        gen_dir = tmp_path / "gen" / "batch"
        assert [v.path for v in variants] == [
            str(gen_dir / "batch_100.jpg"),
            str(gen_dir / "batch_200.jpg"),
            str(gen_dir / "batch_300.jpg"),
        ]
        assert [v.resolution for v in variants] == [100, 200, 300]
        assert [image_size(v.path) for v in variants] == [(100, 50), (200, 100), (300, 150)]

    @pytest.mark.parametrize("file_count", [1, 2, 5])
    def test_returns_file_count_variants(self, engine, make_image, file_count) -> None:
        variants = engine.generate_multi_resolution(make_image(), "n", file_count, 40, 90)

        assert len(variants) == file_count
        assert variants[0].resolution == 40

    def test_descending_range_keeps_index_order(self, engine, make_image) -> None:
        variants = engine.generate_multi_resolution(make_image(), "desc", 3, 90, 30)

        assert [v.resolution for v in variants] == [90, 60, 30]

    def test_failure_aborts_batch_and_keeps_earlier_files(
        self, engine, tmp_path, make_image
    ) -> None:
        with pytest.raises(ProcessingError) as exc:
            engine.generate_multi_resolution(make_image(), "partial", 3, 50, -50)

        generated = exc.value.details["generated"]
        assert generated == [
            str(tmp_path / "gen" / "partial" / "partial_50.jpg"),
        ]
        assert exc.value.details["resolution"] == 0
        assert Path(generated[0]).exists()

    def test_rejects_zero_file_count(self, engine, make_image) -> None:
        with pytest.raises(ValidationError):
            engine.generate_multi_resolution(make_image(), "zero", 0, 10, 20)


class TestFolderNames:
    @pytest.mark.parametrize("folder_name", ["", "   ", "..", "a/b", "..\\x"])
    def test_invalid_folder_names_are_rejected(self, engine, sample_png, folder_name) -> None:
        with pytest.raises(ValidationError):
            engine.resize(sample_png, folder_name, 10, 10)

    def test_output_root_from_environment(self, output_root, sample_png) -> None:
        variant = TransformEngine().resize(sample_png, "env", 10, 10)

        assert variant.path == str(output_root / "uploads" / "env" / "resized_10x10.jpg")


class TestApply:
    def test_apply_dispatches_each_spec(self, engine, make_image) -> None:
        source = make_image(120, 60)

        assert image_size(engine.apply(source, "a", ResizeSpec(width=12, height=6))[0].path) == (12, 6)
        assert engine.apply(source, "a", CompressSpec(quality=40))[0].path.endswith(
            "compressed_q40.jpg"
        )
        assert image_size(
            engine.apply(source, "a", CropSpec(width=10, height=10, left=0, top=0))[0].path
        ) == (10, 10)
        batch = engine.apply(
            source,
            "a",
            MultiResolutionSpec(file_count=2, min_resolution=20, max_resolution=60),
        )
        assert [v.resolution for v in batch] == [20, 60]
