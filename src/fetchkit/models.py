"""Response envelope models for callers that want a uniform result shape."""

from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

import httpx
from pydantic import BaseModel

T = TypeVar("T")


class ResponseError(BaseModel):
    code: str | int
    message: str | None = None
    optional_data: Any = None


class BaseResponse(BaseModel, Generic[T]):
    status: Literal["SUCCESS", "ERROR"] | None = None
    data: T | None = None
    error: ResponseError | None = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> BaseResponse[Any]:
        """
        Wrap an httpx response: 2xx becomes SUCCESS with the decoded body,
        anything else ERROR with the status code and reason phrase.
        """
        body = _decode_body(response)
        if response.is_success:
            return cls(status="SUCCESS", data=body)
        return cls(
            status="ERROR",
            error=ResponseError(
                code=response.status_code,
                message=response.reason_phrase or None,
                optional_data=body,
            ),
        )


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
