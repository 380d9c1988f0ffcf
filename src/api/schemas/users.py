from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PublicUser(BaseModel):
    """Public projection of an activated account."""

    id: str
    login: str
    first_name: str | None = None
    last_name: str | None = None

    model_config = ConfigDict(from_attributes=True)
