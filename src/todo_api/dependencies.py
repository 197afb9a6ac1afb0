"""
Request validation dependencies.

Each check resolves identifiers taken from the request (the `username` header
or the `id` path parameter) against the store and either returns a typed
context for the route handler or raises an `ApiError`, in which case the
handler never runs. Routes declare the checks they need through `Depends`;
`checks_create_todos_user_availability` chains on `checks_exists_user_account`.
"""
from __future__ import annotations

import re
from typing import Optional

from fastapi import Depends, Header, Path

from .errors import InvalidIdentifier, QuotaExceeded, TodoNotFound, UserNotFound
from .models import TodoContext, UserContext, UserEntity
from .settings import Settings, get_settings
from .store import UserStore, get_store

_UUID_RE = re.compile(
    r"(?:[0-9a-f]{8}-[0-9a-f]{4}-[1-8][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}"
    r"|00000000-0000-0000-0000-000000000000"
    r"|ffffffff-ffff-ffff-ffff-ffffffffffff)",
    re.IGNORECASE,
)


def is_valid_identifier(value: str) -> bool:
    """Return True if value is a UUID in canonical hyphenated form."""
    return _UUID_RE.fullmatch(value) is not None


def _user_by_username(store: UserStore, username: Optional[str]) -> UserEntity:
    user = store.find_by_username(username) if username is not None else None
    if user is None:
        raise UserNotFound()
    return user


# PUBLIC_INTERFACE
async def checks_exists_user_account(
    username: Optional[str] = Header(None, description="Username of the acting user"),
    store: UserStore = Depends(get_store),
) -> UserContext:
    """
    Resolve the acting user from the `username` header.

    Raises:
        UserNotFound (404) if the header is missing or matches no user.
    """
    return UserContext(user=_user_by_username(store, username))


# PUBLIC_INTERFACE
async def checks_create_todos_user_availability(
    ctx: UserContext = Depends(checks_exists_user_account),
    settings: Settings = Depends(get_settings),
) -> UserContext:
    """
    Allow the request only if the user may own one more todo.

    Pro users are unlimited; free users may hold up to `settings.free_todo_limit`.

    Raises:
        QuotaExceeded (403) when a free user is already at the limit.
    """
    user = ctx.user
    if user["pro"] or len(user["todos"]) + 1 <= settings.free_todo_limit:
        return ctx
    raise QuotaExceeded()


# PUBLIC_INTERFACE
async def find_user_by_id(
    user_id: str = Path(..., alias="id", description="Identifier of the user"),
    store: UserStore = Depends(get_store),
) -> UserContext:
    """
    Resolve a user from the `id` path parameter.

    Raises:
        UserNotFound (404) if no user has that id.
    """
    user = store.find_by_id(user_id)
    if user is None:
        raise UserNotFound()
    return UserContext(user=user)


# PUBLIC_INTERFACE
async def checks_todo_exists(
    todo_id: str = Path(..., alias="id", description="Identifier (UUID) of the todo"),
    username: Optional[str] = Header(None, description="Username of the acting user"),
    store: UserStore = Depends(get_store),
) -> TodoContext:
    """
    Resolve a todo from the `id` path parameter among the todos of the user
    named in the `username` header.

    Checks run in order and stop at the first failure:
    1. the user exists, else UserNotFound (404)
    2. the id is a well-formed UUID, else InvalidIdentifier (400)
    3. the user owns a todo with that id, else TodoNotFound (404)
    """
    user = _user_by_username(store, username)

    if not is_valid_identifier(todo_id):
        raise InvalidIdentifier()

    todo = next((t for t in user["todos"] if t["id"] == todo_id), None)
    if todo is None:
        raise TodoNotFound()

    return TodoContext(user=user, todo=todo)
