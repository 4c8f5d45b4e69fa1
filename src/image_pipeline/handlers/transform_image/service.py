"""Business logic for image transforms.

The service composes the pipeline stages for every transform request:
MIME allow-list, size guard, then the transform engine. Validation and
processing failures propagate to the caller as domain exceptions.
"""

from pathlib import Path

from aws_lambda_powertools import Logger

from image_pipeline.core.models.image import GeneratedVariant
from image_pipeline.core.models.transform import TransformSpec
from image_pipeline.core.processing.pipeline import prepare_image
from image_pipeline.core.processing.transform_engine import TransformEngine

logger = Logger(UTC=True)


class TransformService:
    """Application service responsible for deriving image variants."""

    def __init__(
        self,
        engine: TransformEngine | None = None,
        *,
        output_root: str | Path | None = None,
    ) -> None:
        self.engine = engine or TransformEngine(output_root)

    def transform(
        self,
        *,
        file_data: bytes,
        folder_name: str,
        spec: TransformSpec,
        content_type: str | None = None,
    ) -> list[GeneratedVariant]:
        """Guard the payload and run one transform.

        Args:
            file_data: Raw image bytes
            folder_name: Target folder for generated files
            spec: Transform to apply
            content_type: Declared MIME type, detected when omitted

        Returns:
            Generated variants in request order

        Raises:
            MIMETypeError: If the payload is not an accepted image type
            ValidationError: If the transform parameters are invalid
            ProcessingError: If the image cannot be processed
        """
        logger.debug(
            "Starting transform",
            extra={"folder_name": folder_name, "transform": spec.kind},
        )

        image = prepare_image(file_data, content_type)
        variants = self.engine.apply(image.data, folder_name, spec)

        logger.info(
            "Transform completed",
            extra={
                "folder_name": folder_name,
                "transform": spec.kind,
                "count": len(variants),
            },
        )
        return variants
