"""
Error taxonomy shared by the service layer and the HTTP layer.

Every failure the core can produce is an ``AppError`` with a stable
``code`` that clients branch on and an HTTP ``status_code`` the API layer
renders.  Token-layer errors subclass ``Unauthenticated`` so callers that
only care about "not logged in" can catch the parent.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class AppError(Exception):
    code: str = "error"
    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "detail": self.message}


class ValidationError(AppError):
    code = "validation_error"
    status_code = 400
    default_message = "Invalid input"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: Any) -> "ValidationError":
        """Build from a pydantic / FastAPI validation error, keeping field detail."""
        errors = [
            {
                "field": ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")),
                "message": err.get("msg", ""),
            }
            for err in exc.errors()
        ]
        return cls("Invalid input", errors=errors)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        if self.errors:
            data["errors"] = self.errors
        return data


class DuplicateEmail(AppError):
    code = "duplicate_email"
    status_code = 409
    default_message = "Email already in use"


class InvalidCredentials(AppError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid email or password"


class Unauthenticated(AppError):
    code = "unauthenticated"
    status_code = 401
    default_message = "Login first to access this resource"


class TokenError(Unauthenticated):
    code = "invalid_token"
    default_message = "Invalid token"


class InvalidToken(TokenError):
    code = "invalid_token"
    default_message = "Token signature does not verify"


class ExpiredToken(TokenError):
    code = "expired_token"
    default_message = "Token has expired"


class MalformedToken(TokenError):
    code = "malformed_token"
    default_message = "Token is malformed"


class AccountNotFound(Unauthenticated):
    code = "account_not_found"
    default_message = "Account no longer exists"


class Forbidden(AppError):
    code = "forbidden"
    status_code = 403
    default_message = "Admin role required"


class NotFound(AppError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class Timeout(AppError):
    code = "timeout"
    status_code = 504
    default_message = "Operation timed out"


class StoreUnavailable(AppError):
    code = "store_unavailable"
    status_code = 503
    default_message = "Data store unavailable"


# code -> class, used by clients to rebuild errors from responses
ERRORS_BY_CODE: Dict[str, type] = {
    cls.code: cls
    for cls in (
        ValidationError,
        DuplicateEmail,
        InvalidCredentials,
        Unauthenticated,
        InvalidToken,
        ExpiredToken,
        MalformedToken,
        AccountNotFound,
        Forbidden,
        NotFound,
        Timeout,
        StoreUnavailable,
    )
}
