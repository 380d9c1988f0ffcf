from __future__ import annotations


class EntityNotFoundError(Exception):
    """Raised by write paths when a referenced entity does not exist."""

    def __init__(self, entity_name: str, entity_id: str) -> None:
        super().__init__(f"{entity_name} '{entity_id}' not found")
        self.entity_name = entity_name
        self.entity_id = entity_id
