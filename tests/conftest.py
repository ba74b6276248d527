from pathlib import Path

import pytest

from site_redirects.components.redirects import (
    RedirectResolver,
    build_exact,
    build_gone,
    create_app_config,
    create_path_normalizer,
    create_redirect_resolver,
    template_rule,
)

PROJECT_ROOT = Path(__file__).parent.parent


@pytest.fixture
def project_rules_path() -> Path:
    """Path to the example rules file shipped at the project root."""
    return PROJECT_ROOT / "redirects.yaml"


@pytest.fixture
def scenario_resolver() -> RedirectResolver:
    """
    Resolver for the migration scenario:
    lowercase + strip, /Posts -> /blog, /old-image.jpg gone, /lab/* -> /projects/lab/*.
    """
    config = create_app_config(
        "https://new.example",
        lowercase=True,
        trailing_slash="strip",
    )
    normalize = create_path_normalizer(config.policy)
    return create_redirect_resolver(
        config,
        exact_rules=build_exact([("/Posts", "/blog")], normalize),
        gone_rules=build_gone(["/old-image.jpg"], normalize),
        pattern_rules=[template_rule("/lab/:rest*", "/projects/lab/:rest*")],
        permanent_code=308,
    )
