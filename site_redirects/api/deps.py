import os
from functools import lru_cache
from pathlib import Path

from fastapi import HTTPException, Request, status

from site_redirects.components.redirects import RedirectResolver
from site_redirects.shell.http.health import HEALTH_PREFIX

RULES_PATH_ENV = "SITE_REDIRECTS_RULES"
LOG_LEVEL_ENV = "SITE_REDIRECTS_LOG_LEVEL"
HEALTH_PREFIX_ENV = "SITE_REDIRECTS_HEALTH_PREFIX"
DEFAULT_RULES_FILE = "redirects.yaml"


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.rules_path = Path(os.environ.get(RULES_PATH_ENV, self.base_dir / DEFAULT_RULES_FILE))
        self.log_level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
        self.health_prefix = os.environ.get(HEALTH_PREFIX_ENV, HEALTH_PREFIX)


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Resolver ---
def get_resolver(request: Request) -> RedirectResolver:
    """Resolver loaded at startup and held on the app state."""
    resolver: RedirectResolver | None = getattr(request.app.state, "resolver", None)
    if resolver is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Redirect rules not loaded",
        )
    return resolver
