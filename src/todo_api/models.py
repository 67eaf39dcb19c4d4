from __future__ import annotations

from datetime import datetime
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a Todo row as read from the store.

    Fields:
    - id: Unique integer identifier assigned by the store
    - text: Todo text (non-empty, trimmed on input via schemas)
    - completed: Boolean completion flag
    - created_at: UTC creation timestamp (aware datetime), set once by the store
    """

    id: int
    text: str
    completed: bool
    created_at: datetime
