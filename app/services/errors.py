from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ShipmentServiceError(Exception):
    code: str
    message: str
    status_code: int = 500

    def __str__(self) -> str:
        return self.message

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


@dataclass
class BadRequest(ShipmentServiceError):
    code: str = "BAD_REQUEST"
    message: str = "Request payload is invalid."
    status_code: int = 400


@dataclass
class Unauthorized(ShipmentServiceError):
    code: str = "UNAUTHORIZED"
    message: str = "Authentication required."
    status_code: int = 401


@dataclass
class Forbidden(ShipmentServiceError):
    """
    Covers both role denials and lifecycle-table denials. The kind (and HTTP
    status) is the same for both; `code` tells them apart:
    FORBIDDEN vs TRANSITION_NOT_ALLOWED.
    """

    code: str = "FORBIDDEN"
    message: str = "You do not have permission to perform this action."
    status_code: int = 403


@dataclass
class NotFound(ShipmentServiceError):
    code: str = "NOT_FOUND"
    message: str = "Resource not found."
    status_code: int = 404


@dataclass
class Conflict(ShipmentServiceError):
    code: str = "CONFLICT"
    message: str = "Resource already exists."
    status_code: int = 409
