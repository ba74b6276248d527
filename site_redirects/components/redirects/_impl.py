"""
RedirectResolver - site migration redirect decisions.

Resolves each request URL to either Gone or a redirect on the new origin.

Key behaviors:
- Strict first-match-wins pipeline: gone, exact, pattern, fallback
- Gone and exact lookups use the normalized pathname
- Pattern rules match the original URL, in declaration order
- Query string and fragment of the original URL are carried over
- Unmatched requests keep their (normalized) path on the new origin
- Invalid pathnames, origins and codes are rejected at construction time
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any
from urllib.parse import SplitResult, urlsplit, urlunsplit

from ._pattern import PathPattern, PathTemplateTarget
from .models import (
    AppConfig,
    Gone,
    InvalidOriginError,
    InvalidPathnameError,
    InvalidPatternError,
    InvalidRedirectCodeError,
    NormalizationPolicy,
    Origin,
    Pathname,
    Redirect,
    RedirectCode,
    RedirectConfigError,
    ResolveResult,
    ResolveStage,
    TrailingSlash,
)
from .ports import (
    PathNormalizerPort,
    PathPatternPort,
    PatternTargetPort,
    TargetUrlBuilderPort,
)

logger = logging.getLogger(__name__)

DEFAULT_PERMANENT_CODE = RedirectCode.PERMANENT_REDIRECT

ExactRules = Mapping[Pathname, Pathname]
GoneRules = frozenset[Pathname]


# --- Checked factories ---


def as_pathname(value: object) -> Pathname:
    """Validate an absolute pathname (raises InvalidPathnameError)."""
    if not isinstance(value, str):
        raise InvalidPathnameError(value, "must be a string")
    if not value:
        raise InvalidPathnameError(value, "must not be empty")
    if not value.startswith("/"):
        raise InvalidPathnameError(value, "must start with '/'")
    if "?" in value or "#" in value:
        raise InvalidPathnameError(value, "must not contain a query or fragment")
    return Pathname(value)


def as_origin(value: object) -> Origin:
    """
    Validate an http(s) origin (raises InvalidOriginError).

    A single trailing slash is tolerated and dropped; scheme and host are
    lowercased.
    """
    if not isinstance(value, str):
        raise InvalidOriginError(value, "must be a string")

    try:
        parsed = urlsplit(value)
    except ValueError as e:
        raise InvalidOriginError(value, str(e)) from e

    scheme = parsed.scheme.lower()
    if scheme not in ("http", "https") or not value.lower().startswith(f"{scheme}://"):
        raise InvalidOriginError(value, "must begin with http:// or https://")
    if not parsed.netloc:
        raise InvalidOriginError(value, "must include a host")
    if "@" in parsed.netloc:
        raise InvalidOriginError(value, "must not include credentials")
    if parsed.path not in ("", "/"):
        raise InvalidOriginError(value, "must not include a path")
    if parsed.query or parsed.fragment or value.endswith(("?", "#")):
        raise InvalidOriginError(value, "must not include a query or fragment")

    return Origin(f"{scheme}://{parsed.netloc.lower()}")


def as_redirect_code(value: object) -> RedirectCode:
    """Validate a redirect status code (raises InvalidRedirectCodeError)."""
    if isinstance(value, bool):
        raise InvalidRedirectCodeError(value)
    try:
        return RedirectCode(value)
    except ValueError as e:
        raise InvalidRedirectCodeError(value) from e


def as_trailing_slash(value: object) -> TrailingSlash:
    """Validate a trailing slash strategy name."""
    try:
        return TrailingSlash(value)
    except ValueError as e:
        allowed = ", ".join(t.value for t in TrailingSlash)
        raise RedirectConfigError(
            f"Invalid trailing slash strategy {value!r}: expected one of {allowed}"
        ) from e


# --- Configuration ---


def create_app_config(
    new_origin: str,
    *,
    lowercase: bool = False,
    trailing_slash: TrailingSlash | str = TrailingSlash.PRESERVE,
) -> AppConfig:
    """
    Create the immutable application configuration.

    Example:
        config = create_app_config("https://new.example", lowercase=True, trailing_slash="strip")
    """
    return AppConfig(
        new_origin=as_origin(new_origin),
        policy=NormalizationPolicy(
            lowercase=lowercase,
            trailing_slash=as_trailing_slash(trailing_slash),
        ),
    )


# --- Pathname normalization ---


def normalize_path(pathname: Pathname, policy: NormalizationPolicy | None = None) -> Pathname:
    """
    Normalize an absolute pathname according to policy.

    Case folding happens before trailing-slash handling. The root path is
    never stripped.
    """
    policy = policy or NormalizationPolicy()
    path = pathname.lower() if policy.lowercase else pathname

    if policy.trailing_slash is TrailingSlash.STRIP:
        if path != "/" and path.endswith("/"):
            # All trailing slashes, not just one, so stripping is idempotent
            path = path.rstrip("/") or "/"
    elif policy.trailing_slash is TrailingSlash.ENSURE:
        if not path.endswith("/"):
            path = f"{path}/"

    return Pathname(path)


def create_path_normalizer(policy: NormalizationPolicy) -> Callable[[str], Pathname]:
    """Create a normalizer bound to a fixed policy."""

    def normalize(pathname: str) -> Pathname:
        return normalize_path(Pathname(pathname), policy)

    return normalize


# --- Rule tables ---


@dataclass(frozen=True)
class PatternRule:
    """A single pattern rule; the first matching rule wins."""

    pattern: PathPatternPort
    to: PatternTargetPort | Callable[..., str]


def template_rule(pattern: str, to: str) -> PatternRule:
    """
    Build a pattern rule from two path templates.

    Every placeholder used in ``to`` must be captured by ``pattern``.
    """
    compiled = PathPattern(pattern)
    target = PathTemplateTarget(to)
    unknown = [name for name in target.names if name not in compiled.names]
    if unknown:
        raise InvalidPatternError(
            to, f"uses placeholders not captured by {pattern!r}: {', '.join(unknown)}"
        )
    return PatternRule(pattern=compiled, to=target)


def build_exact(
    pairs: Iterable[tuple[str, str]],
    normalize: Callable[[str], Pathname] | None = None,
) -> ExactRules:
    """
    Build the read-only exact redirect table (from -> to).

    Later duplicate sources overwrite earlier ones. When ``normalize`` is
    given, sources are stored normalized so they line up with normalized
    request paths; targets are kept verbatim.
    """
    table: dict[Pathname, Pathname] = {}
    for source, target in pairs:
        key = as_pathname(source)
        if normalize is not None:
            key = normalize(key)
        table[key] = as_pathname(target)
    return MappingProxyType(table)


def build_gone(
    paths: Iterable[str],
    normalize: Callable[[str], Pathname] | None = None,
) -> GoneRules:
    """Build the set of pathnames answered with 410 Gone."""
    gone: set[Pathname] = set()
    for path in paths:
        key = as_pathname(path)
        gone.add(normalize(key) if normalize is not None else key)
    return frozenset(gone)


def build_pattern(rules: Iterable[PatternRule]) -> tuple[PatternRule, ...]:
    """Build the ordered pattern rule list; order is match priority."""
    return tuple(rules)


# --- Target URL building ---


def build_target_url(
    origin: Origin,
    pathname: Pathname,
    *,
    search: str | None = None,
    hash: str | None = None,
) -> str:
    """
    Build an absolute URL on ``origin``, keeping optional query and fragment.

    ``search`` and ``hash`` may carry their leading ``?``/``#``.

    Example:
        build_target_url("https://example.com", "/blog", search="?page=2", hash="#top")
        # -> "https://example.com/blog?page=2#top"
    """
    parsed = urlsplit(origin)
    query = search[1:] if search and search.startswith("?") else (search or "")
    fragment = hash[1:] if hash and hash.startswith("#") else (hash or "")
    return urlunsplit((parsed.scheme, parsed.netloc, pathname, query, fragment))


def create_target_url_builder(origin: str) -> Callable[..., str]:
    """Create a URL builder with the origin fixed."""
    fixed = as_origin(origin)

    def build(
        pathname: Pathname,
        *,
        search: str | None = None,
        hash: str | None = None,
    ) -> str:
        return build_target_url(fixed, pathname, search=search, hash=hash)

    return build


# --- Resolver ---


class RedirectResolver:
    """
    Redirect resolver.

    Holds only immutable collaborators, so one instance can serve
    concurrent requests.
    """

    def __init__(
        self,
        *,
        normalize_path: PathNormalizerPort,
        build_target_url: TargetUrlBuilderPort,
        exact_rules: ExactRules,
        gone_rules: GoneRules,
        pattern_rules: Iterable[PatternRule] = (),
        permanent_code: RedirectCode | int = DEFAULT_PERMANENT_CODE,
    ) -> None:
        """Initialize resolver."""
        self._normalize_path = normalize_path
        self._build_target_url = build_target_url
        self._exact_rules = exact_rules
        self._gone_rules = gone_rules
        self._pattern_rules = build_pattern(pattern_rules)
        self._permanent_code = as_redirect_code(permanent_code)

    @property
    def permanent_code(self) -> RedirectCode:
        return self._permanent_code

    @property
    def exact_rules(self) -> ExactRules:
        return self._exact_rules

    @property
    def gone_rules(self) -> GoneRules:
        return self._gone_rules

    @property
    def pattern_rules(self) -> tuple[PatternRule, ...]:
        return self._pattern_rules

    def __call__(self, url: SplitResult | str, request: Any = None) -> ResolveResult:
        return self.resolve(url, request)

    def resolve(self, url: SplitResult | str, request: Any = None) -> ResolveResult:
        """Resolve a request URL to Gone or a Redirect."""
        result, _stage, _normalized = self.resolve_with_stage(url, request)
        return result

    def resolve_with_stage(
        self,
        url: SplitResult | str,
        request: Any = None,
    ) -> tuple[ResolveResult, ResolveStage, Pathname]:
        """
        Resolve a request URL and report which stage decided.

        Returns:
            Tuple of (result, stage, normalized_pathname).
        """
        if isinstance(url, str):
            url = urlsplit(url)
        search = url.query
        fragment = url.fragment
        normalized = self._normalize_path(url.path or "/")

        if normalized in self._gone_rules:
            logger.debug("Gone: %s", normalized)
            return Gone(), ResolveStage.GONE, normalized

        exact = self._exact_rules.get(normalized)
        if exact is not None:
            target = self._build_target_url(exact, search=search, hash=fragment)
            logger.debug("Exact redirect: %s -> %s", normalized, target)
            return self._redirect(target), ResolveStage.EXACT, normalized

        for rule in self._pattern_rules:
            match = rule.pattern.match(url)
            if match is None:
                continue
            destination = as_pathname(rule.to(match, request))
            target = self._build_target_url(destination, search=search, hash=fragment)
            logger.debug("Pattern redirect: %s -> %s via %r", url.path, target, rule.pattern)
            return self._redirect(target), ResolveStage.PATTERN, normalized

        target = self._build_target_url(normalized, search=search, hash=fragment)
        logger.debug("Fallback redirect: %s -> %s", normalized, target)
        return self._redirect(target), ResolveStage.FALLBACK, normalized

    def _redirect(self, target: str) -> Redirect:
        return Redirect(target=target, code=self._permanent_code)


def create_redirect_resolver(
    config: AppConfig,
    *,
    exact_rules: ExactRules | None = None,
    gone_rules: GoneRules | None = None,
    pattern_rules: Iterable[PatternRule] = (),
    permanent_code: RedirectCode | int = DEFAULT_PERMANENT_CODE,
) -> RedirectResolver:
    """Create a RedirectResolver wired to the config's origin and policy."""
    return RedirectResolver(
        normalize_path=create_path_normalizer(config.policy),
        build_target_url=create_target_url_builder(config.new_origin),
        exact_rules=exact_rules if exact_rules is not None else build_exact([]),
        gone_rules=gone_rules if gone_rules is not None else build_gone([]),
        pattern_rules=pattern_rules,
        permanent_code=permanent_code,
    )
