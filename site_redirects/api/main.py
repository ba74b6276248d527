import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from site_redirects import __version__
from site_redirects.api.deps import get_settings
from site_redirects.api.routes import public_redirects
from site_redirects.app_shell.config import load_resolver
from site_redirects.components.redirects import RedirectResolver
from site_redirects.shell.http.health import (
    HEALTH_PREFIX,
    HealthCheckRegistry,
    ProcessCheck,
    RulesLoadedCheck,
    StartupTracker,
    create_health_router,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging (raises ValueError for an unknown level name)."""
    if level not in logging.getLevelNamesMapping():
        raise ValueError(f"Unknown log level: {level!r}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    resolver: RedirectResolver | None = None,
    *,
    health_prefix: str = HEALTH_PREFIX,
) -> FastAPI:
    """
    Create the redirect service.

    When no resolver is given, rules are loaded from the configured rules
    file at startup; a missing or invalid file aborts the process.

    Health endpoints under ``health_prefix`` take precedence over the
    catch-all, so requests below that prefix are never gone or redirected.
    """
    tracker = StartupTracker()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown."""
        if app.state.resolver is None:
            # Configure logging and load rules on startup (fail-fast)
            try:
                settings = get_settings()
                configure_logging(settings.log_level)
                app.state.resolver = load_resolver(settings.rules_path)
            except (OSError, ValueError) as e:
                logger.critical("Startup failed: %s", e)
                sys.exit(1)

        tracker.mark_started()
        yield

    app = FastAPI(
        title="Site Redirects",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.resolver = resolver

    registry = HealthCheckRegistry()
    registry.register(ProcessCheck())
    registry.register(RulesLoadedCheck(lambda: app.state.resolver))

    # Health routes must be registered before the catch-all
    app.include_router(
        create_health_router(registry, tracker, version=__version__, prefix=health_prefix)
    )
    app.include_router(public_redirects.router)

    return app


app = create_app(health_prefix=get_settings().health_prefix)
