"""
Redirects component port definitions.
"""

from __future__ import annotations

from typing import Any, Protocol
from urllib.parse import SplitResult

from .models import PatternMatch


class PathPatternPort(Protocol):
    """A URL matcher used by pattern rules."""

    def match(self, url: SplitResult) -> PatternMatch | None:
        """Match the request URL, returning captured data or None."""
        ...


class PatternTargetPort(Protocol):
    """Maps a successful match and the original request to a pathname."""

    def __call__(self, match: PatternMatch, request: Any) -> str:
        """Return the destination pathname."""
        ...


class PathNormalizerPort(Protocol):
    """Normalizes an absolute pathname."""

    def __call__(self, pathname: str) -> str:
        """Return the normalized pathname."""
        ...


class TargetUrlBuilderPort(Protocol):
    """Builds an absolute URL on a fixed origin."""

    def __call__(
        self,
        pathname: str,
        *,
        search: str | None = None,
        hash: str | None = None,
    ) -> str:
        """Return the absolute target URL."""
        ...
