"""Error payload shapes a local daemon may return alongside a 4xx/5xx status."""

from __future__ import annotations

from pydantic import BaseModel, Field, ValidationError


class ErrorDetail(BaseModel):
    """A single structured error entry."""

    code: str = Field(default="", description="Machine-readable error code")
    message: str = Field(default="", description="Human-readable error description")


class ErrorBody(BaseModel):
    """JSON body carried by an error response.

    Daemons answer either with a top-level ``message`` or with an ``errors``
    list; both are optional and unknown keys are ignored.
    """

    message: str | None = Field(default=None, description="Top-level error message")
    errors: list[ErrorDetail] = Field(default_factory=list)


def parse_error_body(content: bytes) -> ErrorBody | None:
    """Parse an error response body, returning *None* when it is not JSON."""
    if not content:
        return None
    try:
        return ErrorBody.model_validate_json(content)
    except ValidationError:
        return None


__all__ = ["ErrorBody", "ErrorDetail", "parse_error_body"]
