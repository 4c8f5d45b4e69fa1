"""Uniform result envelope returned by storage gateway operations.

Provider failures are never raised to callers of the gateway. They are
converted into a ``ServiceFailure`` carrying a message and, when the
provider exposes one, an error code.
"""

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ServiceErrorDetail(BaseModel):
    """Error payload of a failed service operation."""

    message: str = Field(..., description="Human readable failure description")
    code: str | None = Field(None, description="Provider or domain error code")


class ServiceSuccess(BaseModel, Generic[T]):
    """Successful service operation."""

    success: Literal[True] = True
    data: T


class ServiceFailure(BaseModel):
    """Failed service operation."""

    success: Literal[False] = False
    error: ServiceErrorDetail

    @classmethod
    def build(cls, message: str, code: str | None = None) -> "ServiceFailure":
        return cls(error=ServiceErrorDetail(message=message, code=code))


# Every storage gateway operation yields a string payload (key, URL or confirmation).
StorageResult = ServiceSuccess[str] | ServiceFailure


def dump_result(result: ServiceSuccess[Any] | ServiceFailure) -> dict[str, Any]:
    """Serialize a result, omitting ``error.code`` when it is absent."""
    return result.model_dump(exclude_none=True)
