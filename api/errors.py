"""
api/errors.py -- Client-facing error taxonomy.

Every error a route raises is an HTTPException carrying a structured detail
dict ({"code", "message"}). The single HTTPException handler in api/main.py
renders it as the standard envelope:

    {"success": false, "error": {"message": "...", "code": "..."}}

  ValidationError  400  missing or invalid fields
  NotFoundError    404  referenced entity absent
  ConflictError    409  unique constraint (e.g. email already registered)
  AuthError        401  bad credentials (the token dependency uses 401/403)
  InternalError    500  unexpected failure; message is always generic

Validation and not-found errors are raised before any write, so they leave
state untouched.
"""

from __future__ import annotations

from fastapi import HTTPException


class ApiError(HTTPException):
    default_status: int = 500

    def __init__(self, code: str, message: str, status_code: int | None = None) -> None:
        super().__init__(
            status_code=status_code or self.default_status,
            detail={"code": code, "message": message},
        )
        self.code = code
        self.message = message


class ValidationError(ApiError):
    default_status = 400


class NotFoundError(ApiError):
    default_status = 404


class ConflictError(ApiError):
    default_status = 409


class AuthError(ApiError):
    default_status = 401


class InternalError(ApiError):
    default_status = 500

    def __init__(self) -> None:
        super().__init__("INTERNAL_ERROR", "Internal server error")
