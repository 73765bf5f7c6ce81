"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api import auth, reviews, wishlist
from src.config import Settings, get_settings
from src.services.auth import AuthenticationError, SessionBoundary, StoreUnavailable, TokenCodec

logger = logging.getLogger(__name__)


async def authentication_error_handler(request: Request, exc: AuthenticationError):
    """Render any rejected credential as 401."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"detail": exc.detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
    """Log store faults hit while authenticating and answer 500."""
    logger.error(
        f"Store unavailable during authentication for {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error during authentication"},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its configuration fixed at startup."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Handle application startup and shutdown events."""
        logger.info(
            f"Starting Movie Review API ({settings.environment}), "
            f"CORS origins: {', '.join(settings.cors_origins)}"
        )
        yield
        logger.info("Shutting down Movie Review API")

    app = FastAPI(
        title="Movie Review API",
        description="Reviews and wishlists for movies, TV shows and anime",
        version="0.1.0",
        lifespan=lifespan,
    )

    token_codec = TokenCodec.from_settings(settings)
    app.state.settings = settings
    app.state.token_codec = token_codec
    app.state.session_boundary = SessionBoundary(token_codec)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)"
        )
        return response

    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(StoreUnavailable, store_unavailable_handler)

    # Register routers
    app.include_router(auth.router)
    app.include_router(reviews.router)
    app.include_router(wishlist.router)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.environment,
            "timestamp": datetime.now(UTC).isoformat(),
        }

    return app


app = create_app()
