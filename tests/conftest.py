"""
Pytest configuration and fixtures for image-pipeline tests.
Provides AWS mocking, S3 fixtures with proper cleanup and generated images.
"""

import os
from collections.abc import Callable
from io import BytesIO
from typing import Any

import boto3
import pytest
from botocore.exceptions import ClientError
from moto import mock_aws
from PIL import Image

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "image-pipeline-test-bucket")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-pipeline-test")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImagePipelineTest")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                s3_client.delete_objects(
                    Bucket=bucket_name,
                    Delete={"Objects": [{"Key": obj["Key"]} for obj in objects]},
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Objects are deleted after each test; moto drops the bucket on context exit.
    """
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_client) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("1700000000000-img.jpg", image_bytes, "image/jpeg")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_client.put_object(
            Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"),
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    return _put


@pytest.fixture
def s3_get_object(s3_client) -> Callable[[str], dict[str, Any]]:
    """
    Helper to fetch an object (body bytes and content type) from S3.

    Usage:
        obj = s3_get_object("1700000000000-img.jpg")
    """

    def _get(key: str) -> dict[str, Any]:
        response = s3_client.get_object(Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"), Key=key)
        return {"body": response["Body"].read(), "content_type": response["ContentType"]}

    return _get


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Factory producing encoded images of a given size.

    Usage:
        png = make_image(64, 32, fmt="PNG")
    """

    def _make(
        width: int = 64,
        height: int = 48,
        *,
        fmt: str = "PNG",
        mode: str = "RGB",
        color: Any = (200, 80, 40),
    ) -> bytes:
        buffer = BytesIO()
        Image.new(mode, (width, height), color=color).save(buffer, format=fmt)
        return buffer.getvalue()

    return _make


@pytest.fixture
def sample_png(make_image) -> bytes:
    return make_image(64, 48, fmt="PNG")


@pytest.fixture
def sample_jpeg(make_image) -> bytes:
    return make_image(80, 60, fmt="JPEG")


@pytest.fixture(scope="session")
def oversized_png() -> bytes:
    """Random-noise PNG larger than the 5MB size guard threshold."""
    width, height = 1600, 1400
    noise = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
    buffer = BytesIO()
    noise.save(buffer, format="PNG")
    data = buffer.getvalue()
    assert len(data) > 5 * 1024 * 1024
    return data


@pytest.fixture
def output_root(tmp_path, monkeypatch):
    """Point the transform engine at a per-test output directory."""
    root = tmp_path / "output"
    monkeypatch.setenv("IMAGE_OUTPUT_ROOT", str(root))
    return root
