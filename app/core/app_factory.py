"""Application factory for FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) and
the collaborators requests depend on. The rate limiter, its state and the
chat service are built here once and stored on ``app.state``; tests inject
their own instead of patching module globals.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.adapters.llm.base import AbstractLLMClient
from app.adapters.llm.factory import create_llm_client
from app.adapters.rate_limit.base import AbstractRateLimiter
from app.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter, RateLimiterState
from app.api.routes import chat_router, health_router
from app.core.config import Settings, parse_origins, settings as default_settings
from app.core.exception_handlers import setup_exception_handlers
from app.core.logging import configure_logging
from app.core.middleware import request_id_middleware
from app.core.openapi import apply_openapi_customizations
from app.services.chat_service import ChatService

logger = logging.getLogger(__name__)


def build_rate_limiter(app_settings: Settings) -> AbstractRateLimiter | None:
    """Create the limiter and its state, or None when limiting is disabled."""
    if not app_settings.app.rate_limit_enabled:
        return None
    return InMemorySlidingWindowRateLimiter(
        minute_limit=app_settings.app.rate_limit_per_minute,
        day_limit=app_settings.app.rate_limit_per_day,
        state=RateLimiterState(),
    )


def _configure_cors(app: FastAPI, app_settings: Settings) -> None:
    """Allow configured origins, or reflect any origin when none are set."""
    origins = parse_origins(app_settings.app.cors_origins) or parse_origins(
        app_settings.app.frontend_url
    )
    cors_kwargs = {"allow_origins": origins} if origins else {"allow_origin_regex": ".*"}
    app.add_middleware(
        CORSMiddleware,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        expose_headers=["Content-Disposition", app_settings.log.request_id_header],
        **cors_kwargs,
    )


def create_app(
    app_settings: Settings | None = None,
    *,
    llm_client: AbstractLLMClient | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to run with; the global settings when omitted.
        llm_client: Generation client; built from ``app_settings.llm`` when
            omitted (requires an API key).
        rate_limiter: Limiter to use; built from ``app_settings.app`` when
            omitted. Ignored when rate limiting is disabled.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.

    Raises:
        ValidationAppError: If no client is given and the LLM settings are
            incomplete.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    configure_logging(cfg.log)

    app = FastAPI(
        title="Dominican Gastronomy Chat API",
        description=(
            "Ask questions about Dominican food (dishes, ingredients, techniques, "
            "history) and get answers generated by a large language model. "
            "Requests are rate limited per client, per minute and per day."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    if llm_client is None:
        llm_client = create_llm_client(cfg.llm)
    if cfg.app.rate_limit_enabled and rate_limiter is None:
        rate_limiter = build_rate_limiter(cfg)

    app.state.settings = cfg
    app.state.rate_limiter = rate_limiter if cfg.app.rate_limit_enabled else None
    app.state.chat_service = ChatService(llm=llm_client)

    # Middleware
    app.middleware("http")(request_id_middleware)
    _configure_cors(app, cfg)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(chat_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    logger.info(
        "app.created",
        extra={
            "llm_provider": cfg.llm.provider,
            "llm_model": cfg.llm.model,
            "rate_limit_enabled": cfg.app.rate_limit_enabled,
            "rate_limit_per_minute": cfg.app.rate_limit_per_minute,
            "rate_limit_per_day": cfg.app.rate_limit_per_day,
        },
    )
    return app
