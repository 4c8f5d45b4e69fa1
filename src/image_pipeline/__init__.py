"""Image Transform and Storage Pipeline Package."""

__version__ = "1.0.0"
__author__ = "Bharat kumar"
__description__ = (
    "Serverless image transform-and-store pipeline using AWS Lambda, S3, and Pillow"
)

__all__ = ["handlers", "core"]
