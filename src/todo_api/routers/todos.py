from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends, status

from ..dependencies import (
    checks_create_todos_user_availability,
    checks_exists_user_account,
    checks_todo_exists,
)
from ..errors import TodoNotFound
from ..models import TodoContext, UserContext
from ..schemas import TodoOut, TodoWrite
from ..store import UserStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_TODO_ERRORS = {
    400: {"description": "Malformed todo id"},
    404: {"description": "User or todo not found"},
}


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="List all todos of the user named in the `username` header, in creation order.",
    responses={
        200: {"description": "List retrieved successfully"},
        404: {"description": "User not found"},
    },
)
async def list_todos(ctx: UserContext = Depends(checks_exists_user_account)) -> List[TodoOut]:
    return [TodoOut(**t) for t in ctx.user["todos"]]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Create a todo for the user named in the `username` header.\n\n"
        "Users on the free plan may hold a limited number of todos; pro users are unlimited."
    ),
    responses={
        201: {"description": "Todo created successfully"},
        403: {"description": "Free plan todo limit reached"},
        404: {"description": "User not found"},
    },
)
async def create_todo(
    payload: TodoWrite,
    ctx: UserContext = Depends(checks_create_todos_user_availability),
    store: UserStore = Depends(get_store),
) -> TodoOut:
    """
    Create a new todo and append it to the user's list.
    """
    todo = store.add_todo(ctx.user, payload.title, payload.deadline)
    logger.info("Created todo %s for user %s", todo["id"], ctx.user["id"])
    return TodoOut(**todo)


# PUBLIC_INTERFACE
@router.put(
    "/{id}",
    response_model=TodoOut,
    summary="Update Todo",
    description="Replace the title and deadline of a todo. Completion state and creation time are kept.",
    responses={200: {"description": "Todo updated"}, **_TODO_ERRORS},
)
async def update_todo(
    payload: TodoWrite,
    ctx: TodoContext = Depends(checks_todo_exists),
    store: UserStore = Depends(get_store),
) -> TodoOut:
    todo = store.update_todo(ctx.todo, payload.title, payload.deadline)
    logger.info("Updated todo %s", todo["id"])
    return TodoOut(**todo)


# PUBLIC_INTERFACE
@router.patch(
    "/{id}/done",
    response_model=TodoOut,
    summary="Mark Todo Done",
    description="Mark a todo as done. Marking an already done todo succeeds without changes.",
    responses={200: {"description": "Todo marked as done"}, **_TODO_ERRORS},
)
async def mark_todo_done(
    ctx: TodoContext = Depends(checks_todo_exists),
    store: UserStore = Depends(get_store),
) -> TodoOut:
    todo = store.mark_done(ctx.todo)
    logger.info("Marked todo %s as done", todo["id"])
    return TodoOut(**todo)


# PUBLIC_INTERFACE
@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(checks_exists_user_account)],
    summary="Delete Todo",
    description="Delete a todo of the user named in the `username` header.",
    responses={204: {"description": "Todo deleted"}, **_TODO_ERRORS},
)
async def delete_todo(
    ctx: TodoContext = Depends(checks_todo_exists),
    store: UserStore = Depends(get_store),
) -> None:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    if not store.remove_todo(ctx.user, ctx.todo):
        raise TodoNotFound()
    logger.info("Deleted todo %s of user %s", ctx.todo["id"], ctx.user["id"])
    return None
