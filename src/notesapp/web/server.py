from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from notesapp.app import App
from notesapp.config import Config
from notesapp.errors import InternalError, UserError
from notesapp.web.error_handlers import general_exception_handler, request_validation_handler, user_error_handler
from notesapp.web.middleware import configure_request_middleware
from notesapp.web.routers import users_router


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """FastAPI application lifespan management."""
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="Notes API", version="0.1.0", lifespan=lifespan)
    # Available before startup so handlers work under test clients that skip lifespan
    app.state.app = app_instance

    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    configure_request_middleware(app)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        return "Hello, World!"

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    api_v1 = APIRouter(prefix="/api/v1")

    @api_v1.get("/", response_class=PlainTextResponse)
    async def api_root() -> str:
        return "Hello, World!"

    api_v1.include_router(users_router)
    app.include_router(api_v1)

    # Register error handlers
    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(InternalError, general_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    return app
