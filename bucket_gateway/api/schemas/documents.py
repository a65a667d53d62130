from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class DocumentOut(BaseModel):
    """One listed object."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    size: int
