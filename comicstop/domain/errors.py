"""
Error kinds returned by the lifecycle and retention components.

Components never raise for expected failures; they return an output whose
``errors`` list carries one ``LifecycleError`` per problem. Each kind knows
the HTTP status the boundary layer should render it with.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorKind(Enum):
    MISSING_UPLOAD_REFERENCE = "missing_upload_reference"
    AGREEMENT_REQUIRED = "agreement_required"
    # Existence and ownership are not distinguished to the caller
    NOT_FOUND_OR_FORBIDDEN = "not_found_or_forbidden"
    PREVIEW_UNAVAILABLE = "preview_unavailable"
    CONTRIBUTOR_ROLE_MISSING = "contributor_role_missing"
    INVALID_VALUE = "invalid_value"
    UNSUPPORTED_UPLOAD = "unsupported_upload"
    UPLOAD_TOO_LARGE = "upload_too_large"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.MISSING_UPLOAD_REFERENCE: 400,
    ErrorKind.AGREEMENT_REQUIRED: 400,
    ErrorKind.NOT_FOUND_OR_FORBIDDEN: 404,
    ErrorKind.PREVIEW_UNAVAILABLE: 400,
    ErrorKind.CONTRIBUTOR_ROLE_MISSING: 400,
    ErrorKind.INVALID_VALUE: 400,
    ErrorKind.UNSUPPORTED_UPLOAD: 400,
    ErrorKind.UPLOAD_TOO_LARGE: 413,
}


@dataclass(frozen=True)
class LifecycleError:
    """A single failure reported by a component."""

    kind: ErrorKind
    message: str
    field: str | None = None

    @property
    def code(self) -> str:
        return self.kind.value

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_dict(self) -> dict[str, str | None]:
        return {"code": self.code, "message": self.message, "field": self.field}


def not_found_or_forbidden(what: str = "Comic") -> LifecycleError:
    return LifecycleError(
        kind=ErrorKind.NOT_FOUND_OR_FORBIDDEN,
        message=f"{what} not found or access denied",
    )
