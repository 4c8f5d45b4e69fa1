import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def json_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway proxy event with a JSON body.

    Usage:
        event = json_event({"file_name": "a.png"}, image=png_bytes)
    """

    def _event(
        body: dict[str, Any],
        *,
        image: bytes | None = None,
        method: str = "POST",
    ) -> dict[str, Any]:
        payload = dict(body)
        if image is not None:
            payload["file"] = base64.b64encode(image).decode("utf-8")

        return {
            "httpMethod": method,
            "body": json.dumps(payload),
            "headers": {"Content-Type": "application/json"},
        }

    return _event


@pytest.fixture
def query_event() -> Callable[..., dict[str, Any]]:
    def _event(params: dict[str, Any] | None, *, method: str = "GET") -> dict[str, Any]:
        return {"httpMethod": method, "queryStringParameters": params}

    return _event
