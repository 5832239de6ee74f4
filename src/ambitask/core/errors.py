# src/ambitask/core/errors.py

from __future__ import annotations

"""
Error taxonomy shared by the server and the console client.

Server side, the API layer maps each kind to an HTTP status:
- ValidationError -> 400
- NotFoundError   -> 404
- StoreError      -> 500

NetworkError only exists on the client side (request failed or non-2xx response).
"""


class AmbiTaskError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AmbiTaskError):
    status_code = 400


class NotFoundError(AmbiTaskError):
    status_code = 404

    @classmethod
    def for_task(cls, task_id: str) -> NotFoundError:
        return cls(f"Task not found: {task_id}")


class StoreError(AmbiTaskError):
    status_code = 500


class NetworkError(AmbiTaskError):
    """Client-side request failure. status_code is None when no response arrived."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code  # type: ignore[assignment]
