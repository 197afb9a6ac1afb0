from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A lightweight domain model representing a Todo item owned by a single user.

    Fields:
    - id: Unique UUID4 string identifier
    - title: Short title (trimmed on input via schemas)
    - deadline: Due datetime (normalized to datetime in schemas)
    - done: Completion flag, only ever switched on
    - created_at: Local creation timestamp (datetime)
    """

    id: str
    title: str
    deadline: datetime
    done: bool
    created_at: datetime


# PUBLIC_INTERFACE
class UserEntity(TypedDict):
    """
    A user account and the todos it owns, in insertion order.

    Fields:
    - id: Unique UUID4 string identifier
    - name: Display name
    - username: Unique handle, sent by clients in the `username` header
    - pro: True once the user has upgraded to the unlimited plan
    - todos: Owned todo items
    """

    id: str
    name: str
    username: str
    pro: bool
    todos: List[TodoEntity]


@dataclass(frozen=True)
class UserContext:
    """Request context carrying a user resolved from the store."""

    user: UserEntity


@dataclass(frozen=True)
class TodoContext:
    """Request context carrying a todo together with the user that owns it."""

    user: UserEntity
    todo: TodoEntity
