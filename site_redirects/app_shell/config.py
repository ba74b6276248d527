import logging
from pathlib import Path

from site_redirects.components.redirects import (
    AppConfig,
    RedirectResolver,
    build_exact,
    build_gone,
    build_pattern,
    create_app_config,
    create_path_normalizer,
    create_redirect_resolver,
    template_rule,
)
from site_redirects.rules.loader import load_rules
from site_redirects.rules.models import RedirectRules

logger = logging.getLogger(__name__)


def build_app_config(rules: RedirectRules) -> AppConfig:
    """Build the immutable app config from validated rules."""
    return create_app_config(
        rules.new_origin,
        lowercase=rules.normalize.lowercase,
        trailing_slash=rules.normalize.trailing_slash,
    )


def build_resolver(rules: RedirectRules) -> RedirectResolver:
    """
    Build the resolver from validated rules.

    Exact and gone sources are normalized with the configured policy, so
    `/Posts` still matches a lowercased request path.
    """
    config = build_app_config(rules)
    normalize = create_path_normalizer(config.policy)

    resolver = create_redirect_resolver(
        config,
        exact_rules=build_exact(((r.source, r.to) for r in rules.exact), normalize),
        gone_rules=build_gone(rules.gone, normalize),
        pattern_rules=build_pattern(template_rule(r.pattern, r.to) for r in rules.patterns),
        permanent_code=rules.status_code,
    )
    logger.info(
        "Redirecting to %s with status %d (lowercase=%s, trailing_slash=%s)",
        config.new_origin,
        resolver.permanent_code,
        config.policy.lowercase,
        config.policy.trailing_slash.value,
    )
    return resolver


def load_resolver(path: Path) -> RedirectResolver:
    """Load a rules file and build its resolver (fail fast on errors)."""
    return build_resolver(load_rules(path))
