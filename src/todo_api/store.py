from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from fastapi import Request

from .models import TodoEntity, UserEntity


def new_identifier() -> str:
    """Return a fresh random UUID4 in canonical string form."""
    return str(uuid.uuid4())


# PUBLIC_INTERFACE
class UserStore(ABC):
    """Abstract contract for user and todo storage backends."""

    @abstractmethod
    def add_user(self, name: str, username: str) -> UserEntity:
        """Create, store and return a new free-plan user with no todos."""

    @abstractmethod
    def username_exists(self, username: str) -> bool:
        """Return True if any stored user has this exact username."""

    @abstractmethod
    def find_by_username(self, username: str) -> Optional[UserEntity]:
        """Return the user with this exact username, or None."""

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[UserEntity]:
        """Return the user with this exact id, or None."""

    @abstractmethod
    def enable_pro(self, user: UserEntity) -> UserEntity:
        """Switch the user onto the pro plan and return it."""

    @abstractmethod
    def add_todo(self, user: UserEntity, title: str, deadline: datetime) -> TodoEntity:
        """Create a todo and append it to the end of the user's todos."""

    @abstractmethod
    def update_todo(self, todo: TodoEntity, title: str, deadline: datetime) -> TodoEntity:
        """Overwrite title and deadline of an existing todo in place."""

    @abstractmethod
    def mark_done(self, todo: TodoEntity) -> TodoEntity:
        """Flag the todo as done. Calling it again has no further effect."""

    @abstractmethod
    def remove_todo(self, user: UserEntity, todo: TodoEntity) -> bool:
        """Remove the todo from the user's list. Return False if it was not there."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored users."""


class InMemoryUserStore(UserStore):
    """
    In-memory store holding users in a plain list. Lookups are linear scans.

    Entities are handed out by reference; every mutation goes through the
    store methods below.
    """

    def __init__(self) -> None:
        self._users: List[UserEntity] = []

    def _now(self) -> datetime:
        return datetime.now()

    def add_user(self, name: str, username: str) -> UserEntity:
        user: UserEntity = {
            "id": new_identifier(),
            "name": name,
            "username": username,
            "pro": False,
            "todos": [],
        }
        self._users.append(user)
        return user

    def username_exists(self, username: str) -> bool:
        return any(u["username"] == username for u in self._users)

    def find_by_username(self, username: str) -> Optional[UserEntity]:
        return next((u for u in self._users if u["username"] == username), None)

    def find_by_id(self, user_id: str) -> Optional[UserEntity]:
        return next((u for u in self._users if u["id"] == user_id), None)

    def enable_pro(self, user: UserEntity) -> UserEntity:
        user["pro"] = True
        return user

    def add_todo(self, user: UserEntity, title: str, deadline: datetime) -> TodoEntity:
        todo: TodoEntity = {
            "id": new_identifier(),
            "title": title,
            "deadline": deadline,
            "done": False,
            "created_at": self._now(),
        }
        user["todos"].append(todo)
        return todo

    def update_todo(self, todo: TodoEntity, title: str, deadline: datetime) -> TodoEntity:
        todo["title"] = title
        todo["deadline"] = deadline
        return todo

    def mark_done(self, todo: TodoEntity) -> TodoEntity:
        todo["done"] = True
        return todo

    def remove_todo(self, user: UserEntity, todo: TodoEntity) -> bool:
        # Match by identity.
        for index, item in enumerate(user["todos"]):
            if item is todo:
                del user["todos"][index]
                return True
        return False

    def count(self) -> int:
        return len(self._users)


# PUBLIC_INTERFACE
def get_store(request: Request) -> UserStore:
    """
    Dependency returning the store attached to the running application.

    The store is created by `create_app` and kept on `app.state.store`.
    """
    return request.app.state.store
