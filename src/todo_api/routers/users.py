from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from ..dependencies import find_user_by_id
from ..errors import AlreadyPro, UsernameTaken
from ..models import UserContext
from ..schemas import UserCreate, UserOut
from ..store import UserStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create a new user on the free plan. Usernames must be unique.",
    responses={
        201: {"description": "User created successfully"},
        400: {"description": "Username already exists"},
    },
)
async def create_user(payload: UserCreate, store: UserStore = Depends(get_store)) -> UserOut:
    """
    Create a new user with a fresh id, `pro=false` and no todos.
    """
    if store.username_exists(payload.username):
        raise UsernameTaken()

    user = store.add_user(payload.name, payload.username)
    logger.info("Created user %s (%s)", user["id"], user["username"])
    return UserOut(**user)


# PUBLIC_INTERFACE
@router.get(
    "/{id}",
    response_model=UserOut,
    summary="Get User",
    description="Get a single user, including their todos, by ID.",
    responses={
        200: {"description": "User found"},
        404: {"description": "User not found"},
    },
)
async def get_user(ctx: UserContext = Depends(find_user_by_id)) -> UserOut:
    return UserOut(**ctx.user)


# PUBLIC_INTERFACE
@router.patch(
    "/{id}/pro",
    response_model=UserOut,
    summary="Upgrade to Pro",
    description="Move a user onto the pro plan, lifting the todo limit.",
    responses={
        200: {"description": "Pro plan activated"},
        400: {"description": "Pro plan already active"},
        404: {"description": "User not found"},
    },
)
async def upgrade_to_pro(
    ctx: UserContext = Depends(find_user_by_id),
    store: UserStore = Depends(get_store),
) -> UserOut:
    """
    Activate the pro plan. The upgrade is one-way; a second call is rejected.
    """
    if ctx.user["pro"]:
        raise AlreadyPro()

    user = store.enable_pro(ctx.user)
    logger.info("Enabled pro plan for user %s", user["id"])
    return UserOut(**user)
