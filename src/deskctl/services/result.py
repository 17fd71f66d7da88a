"""What every service method returns.

A service never raises for an outcome the user can cause (no rules, an
empty history, an unknown id); it returns ``ok=False`` with one of the
error codes below. Exceptions are left for broken state, such as a
corrupt session file.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

EMPTY_RULE_SET = "EMPTY_RULE_SET"
NO_EFFECT = "NO_EFFECT"
EMPTY_HISTORY = "EMPTY_HISTORY"
NOT_FOUND = "NOT_FOUND"
DUPLICATE_NAME = "DUPLICATE_NAME"
INVALID_INPUT = "INVALID_INPUT"
IMPORT_FAILED = "IMPORT_FAILED"
NO_SESSION = "NO_SESSION"


class ServiceError(BaseModel):
    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    ``op`` names the operation (``"apply_rules"``, ``"rollback"``...).
    ``data`` is its payload when ``ok``; ``error`` is set otherwise.
    ``warnings`` collects problems that did not stop the operation, and
    ``meta`` carries timing spans under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def failure(cls, op: str, code: str, message: str, **detail: Any) -> ServiceResult:
        error = ServiceError(code=code, message=message, detail=detail)
        return cls(ok=False, op=op, error=error)
