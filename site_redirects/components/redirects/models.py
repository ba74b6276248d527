"""
Redirects component value types and input/output models.

Pathname and Origin are plain strings at runtime; they are only ever
produced by the checked factories in ``_impl`` so that every value of
those types satisfies its invariant.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, NewType

# --- Validated string types ---

Pathname = NewType("Pathname", str)
Origin = NewType("Origin", str)


# --- Errors ---


class RedirectConfigError(ValueError):
    """Base class for configuration rejected at construction time."""


class InvalidPathnameError(RedirectConfigError):
    """Raised when a value is not an absolute pathname."""

    def __init__(self, value: object, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid pathname {value!r}: {reason}")


class InvalidOriginError(RedirectConfigError):
    """Raised when a value is not an http(s) origin."""

    def __init__(self, value: object, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid origin {value!r}: {reason}")


class InvalidPatternError(RedirectConfigError):
    """Raised when a path template cannot be compiled."""

    def __init__(self, template: str, reason: str) -> None:
        self.template = template
        self.reason = reason
        super().__init__(f"Invalid path pattern {template!r}: {reason}")


class InvalidRedirectCodeError(RedirectConfigError):
    """Raised for a status code outside the supported redirect codes."""

    def __init__(self, code: object) -> None:
        self.code = code
        allowed = ", ".join(str(c.value) for c in RedirectCode)
        super().__init__(f"Invalid redirect status code {code!r}: expected one of {allowed}")


# --- Enums ---


class TrailingSlash(str, Enum):
    """Trailing slash handling strategy."""

    PRESERVE = "preserve"
    STRIP = "strip"
    ENSURE = "ensure"


class RedirectCode(IntEnum):
    """HTTP redirect status codes the resolver may emit."""

    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308


GONE_STATUS = 410


class ResolveStage(str, Enum):
    """Pipeline stage that produced a decision."""

    GONE = "gone"
    EXACT = "exact"
    PATTERN = "pattern"
    FALLBACK = "fallback"


# --- Configuration ---


@dataclass(frozen=True)
class NormalizationPolicy:
    """Pathname normalization flags, applied identically to every request."""

    lowercase: bool = False
    trailing_slash: TrailingSlash = TrailingSlash.PRESERVE


@dataclass(frozen=True)
class AppConfig:
    """Immutable application configuration built once at startup."""

    new_origin: Origin
    policy: NormalizationPolicy = field(default_factory=NormalizationPolicy)


# --- Results ---


@dataclass(frozen=True)
class Gone:
    """Resource permanently removed (HTTP 410)."""


@dataclass(frozen=True)
class Redirect:
    """Redirect to an absolute target URL."""

    target: str
    code: RedirectCode


ResolveResult = Gone | Redirect


# --- Pattern matching ---


@dataclass(frozen=True)
class PatternMatch:
    """Successful path pattern match."""

    pattern: str
    pathname: str
    groups: dict[str, str] = field(default_factory=dict)
    url: Any = None


# --- Input Models ---


@dataclass(frozen=True)
class ResolveRedirectInput:
    """Input for resolving a request URL."""

    url: str
    request: Any = None


# --- Output Models ---


@dataclass(frozen=True)
class ResolveOutput:
    """Output for the resolve operation."""

    result: ResolveResult
    stage: ResolveStage
    normalized_path: str
    errors: list[str] = field(default_factory=list)
    success: bool = True
