from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform success envelope: ``{"status": 200, "payload": ...}``."""

    status: int = 200
    payload: T
