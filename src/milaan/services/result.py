"""ServiceResult and ServiceError — the universal service contract.

INVARIANT: All service-layer methods return ServiceResult.
Domain failures are reported through ``error``, never raised.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class ErrorCode(StrEnum):
    """Kinds of typed failure a service can report."""

    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    CONFLICT = "CONFLICT"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TRANSITION = "INVALID_TRANSITION"


class ServiceError(BaseModel):
    """Why an operation failed: an ``ErrorCode`` value, a message and free-form detail."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service call.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"offer_help"``).
        data: Operation-specific payload on success.
        warnings: Things worth reporting that did not stop the operation.
        error: Structured error if ``ok`` is False.
        meta: Extra facts about the call itself, if any.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None


def failure(op: str, code: ErrorCode, message: str, **detail: Any) -> ServiceResult:
    """Build a failed ServiceResult for *op*."""
    return ServiceResult(
        ok=False,
        op=op,
        error=ServiceError(code=str(code), message=message, detail=detail),
    )
