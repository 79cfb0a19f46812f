"""Exceptions raised to callers of the matching engine.

Almost every data problem is absorbed with a safe default; only a source item
that lacks its identity cannot be scored at all.
"""


class InvalidItemError(ValueError):
    """Raised when a source item is missing a mandatory identity field."""

    def __init__(self, field_name: str, item_id: str | None = None):
        self.field_name = field_name
        self.item_id = item_id
        where = f" (item {item_id})" if item_id else ""
        super().__init__(f"Source item is missing mandatory field '{field_name}'{where}")


__all__ = ["InvalidItemError"]
