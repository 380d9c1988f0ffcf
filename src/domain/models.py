from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any


@dataclass(slots=True, frozen=True)
class User:
    """Read-only snapshot of a user account, safe to share through the lookup cache."""

    id: str
    login: str
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    activated: bool = False
    lang_key: str | None = None
    activation_key: str | None = None
    reset_key: str | None = None
    created_date: datetime | None = None
    reset_date: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("created_date", "reset_date"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        values = dict(data)
        for key in ("created_date", "reset_date"):
            if values.get(key):
                values[key] = datetime.fromisoformat(values[key])
        return cls(**values)
