"""
Redirects component - site migration redirect resolution.
"""

from ._impl import (
    DEFAULT_PERMANENT_CODE,
    ExactRules,
    GoneRules,
    PatternRule,
    RedirectResolver,
    as_origin,
    as_pathname,
    as_redirect_code,
    as_trailing_slash,
    build_exact,
    build_gone,
    build_pattern,
    build_target_url,
    create_app_config,
    create_path_normalizer,
    create_redirect_resolver,
    create_target_url_builder,
    normalize_path,
    template_rule,
)
from ._pattern import PathPattern, PathTemplateTarget
from .component import run, run_resolve
from .models import (
    GONE_STATUS,
    AppConfig,
    Gone,
    InvalidOriginError,
    InvalidPathnameError,
    InvalidPatternError,
    InvalidRedirectCodeError,
    NormalizationPolicy,
    Origin,
    Pathname,
    PatternMatch,
    Redirect,
    RedirectCode,
    RedirectConfigError,
    ResolveOutput,
    ResolveRedirectInput,
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

__all__ = [
    # Entry points
    "run",
    "run_resolve",
    # Input models
    "ResolveRedirectInput",
    # Output models
    "Gone",
    "Redirect",
    "ResolveOutput",
    "ResolveResult",
    "ResolveStage",
    # Value types
    "AppConfig",
    "NormalizationPolicy",
    "Origin",
    "Pathname",
    "PatternMatch",
    "RedirectCode",
    "TrailingSlash",
    "GONE_STATUS",
    # Errors
    "InvalidOriginError",
    "InvalidPathnameError",
    "InvalidPatternError",
    "InvalidRedirectCodeError",
    "RedirectConfigError",
    # Ports
    "PathNormalizerPort",
    "PathPatternPort",
    "PatternTargetPort",
    "TargetUrlBuilderPort",
    # Patterns
    "PathPattern",
    "PathTemplateTarget",
    # _impl re-exports
    "DEFAULT_PERMANENT_CODE",
    "ExactRules",
    "GoneRules",
    "PatternRule",
    "RedirectResolver",
    "as_origin",
    "as_pathname",
    "as_redirect_code",
    "as_trailing_slash",
    "build_exact",
    "build_gone",
    "build_pattern",
    "build_target_url",
    "create_app_config",
    "create_path_normalizer",
    "create_redirect_resolver",
    "create_target_url_builder",
    "normalize_path",
    "template_rule",
]
