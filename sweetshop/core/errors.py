# sweetshop/core/errors.py
"""
Domain errors raised by services and the access gate.

Each error is an HTTPException so FastAPI renders it as a structured
{"detail": ...} response without extra mapping code in the routers.
Auth failures carry deliberately generic messages.
"""
from typing import Any

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    def __init__(self, detail: Any = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFound(HTTPException):
    def __init__(self, detail: str = "Not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateEmail(HTTPException):
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class OutOfStock(HTTPException):
    def __init__(self, detail: str = "Out of stock"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidCredentials(Unauthorized):
    def __init__(self):
        super().__init__(detail="Invalid email or password")


class InvalidToken(Unauthorized):
    def __init__(self):
        super().__init__(detail="Invalid or expired token")


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Admin access required"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
