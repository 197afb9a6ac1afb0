import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import ApiError
from .routers import todos as todos_router
from .routers import users as users_router
from .settings import Settings, get_settings
from .store import InMemoryUserStore, UserStore

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "users", "description": "User accounts and plan upgrades."},
    {
        "name": "todos",
        "description": "Todo items owned by the user named in the `username` header.",
    },
]


def configure_logging(settings: Settings) -> None:
    """Configure root logging at the level named by LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """
    Render an ApiError raised by a dependency or route handler.

    Response format:
        {
            "error": "<kind, e.g. UserNotFound>",
            "message": "<human readable explanation>"
        }
    """
    logger.warning(
        "%s %s rejected: %s (%s)", request.method, request.url.path, exc.error, exc.status_code
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


# PUBLIC_INTERFACE
def create_app(store: Optional[UserStore] = None) -> FastAPI:
    """
    Build the FastAPI application around the given store.

    Args:
        store: Storage backend shared by all requests. A fresh InMemoryUserStore
            is created when omitted.

    Returns:
        The configured FastAPI application.
    """
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Todo Plans API",
        description="In-memory todo list API with per-user ownership and a free plan todo limit.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.store = store if store is not None else InMemoryUserStore()

    # Configure CORS based on settings (.env -> CORS_ALLOW_ORIGINS), with '*' fallback
    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # PUBLIC_INTERFACE
    @app.get("/", summary="Health Check", tags=["health"])
    async def health_check(request: Request):
        """
        Health check endpoint.

        Returns:
            A JSON object indicating service health and the number of stored users.
        """
        return {"message": "Healthy", "users": request.app.state.store.count()}

    app.include_router(users_router.router)
    app.include_router(todos_router.router)
    return app


app = create_app()


# PUBLIC_INTERFACE
def run() -> None:
    """Serve the module-level app with uvicorn on HOST:PORT."""
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
