"""
Rules file loading and resolver construction tests.

Verifies that the loader validates redirects.yaml and that invalid
configuration is rejected before any request is served.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from site_redirects.app_shell.config import build_app_config, build_resolver, load_resolver
from site_redirects.components.redirects import Gone, Redirect, TrailingSlash
from site_redirects.rules.loader import load_rules, parse_rules
from site_redirects.rules.models import RedirectRules


def write_rules(tmp_path: Path, rules: dict[str, Any]) -> Path:
    """Write a rules dict to a temporary YAML file."""
    path = tmp_path / "redirects.yaml"
    path.write_text(yaml.dump(rules))
    return path


MINIMAL = {"new_origin": "https://new.example"}


class TestRulesLoading:
    """Test rules file loading."""

    def test_load_project_rules_file(self, project_rules_path: Path) -> None:
        rules = load_rules(project_rules_path)
        assert rules.new_origin == "https://new.example"
        assert rules.status_code == 308
        assert rules.normalize.lowercase is True
        assert rules.normalize.trailing_slash == "strip"
        assert [(r.source, r.to) for r in rules.exact] == [("/Posts", "/blog")]
        assert rules.gone == ["/old-image.jpg"]
        assert rules.patterns[0].pattern == "/lab/:rest*"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "missing.yaml")

    def test_defaults(self) -> None:
        rules = parse_rules("new_origin: https://new.example\n")
        assert rules.status_code == 308
        assert rules.normalize.lowercase is False
        assert rules.normalize.trailing_slash == "preserve"
        assert rules.exact == []
        assert rules.gone == []
        assert rules.patterns == []

    def test_markdown_code_fence(self) -> None:
        content = "# Redirects\n\n```yaml\nnew_origin: https://new.example\n```\n\nNotes.\n"
        assert parse_rules(content).new_origin == "https://new.example"

    def test_origin_canonicalized(self) -> None:
        assert parse_rules("new_origin: HTTPS://New.Example/\n").new_origin == (
            "https://new.example"
        )

    def test_from_alias(self, tmp_path: Path) -> None:
        path = write_rules(tmp_path, {**MINIMAL, "exact": [{"from": "/a", "to": "/b"}]})
        rules = load_rules(path)
        assert rules.exact[0].source == "/a"


class TestRulesValidation:
    """Test fail-fast validation."""

    def test_invalid_yaml(self) -> None:
        with pytest.raises(ValueError, match="Invalid YAML"):
            parse_rules("new_origin: [unclosed\n")

    def test_empty_document(self) -> None:
        with pytest.raises(ValueError, match="Rules validation failed"):
            parse_rules("")

    def test_missing_origin(self) -> None:
        with pytest.raises(ValueError, match="new_origin"):
            parse_rules("status_code: 301\n")

    @pytest.mark.parametrize(
        "rules",
        [
            {"new_origin": "new.example"},
            {**MINIMAL, "status_code": 200},
            {**MINIMAL, "normalize": {"trailing_slash": "collapse"}},
            {**MINIMAL, "exact": [{"from": "posts", "to": "/blog"}]},
            {**MINIMAL, "exact": [{"from": "/posts", "to": "https://x.example/blog"}]},
            {**MINIMAL, "gone": ["old-image.jpg"]},
            {**MINIMAL, "patterns": [{"pattern": "lab/:rest*", "to": "/x"}]},
            {**MINIMAL, "patterns": [{"pattern": "/posts/:id", "to": "/blog/:slug"}]},
            {**MINIMAL, "unknown_section": True},
        ],
    )
    def test_invalid_rules_rejected(self, tmp_path: Path, rules: dict[str, Any]) -> None:
        path = write_rules(tmp_path, rules)
        with pytest.raises(ValueError, match="Rules validation failed"):
            load_rules(path)


class TestBuildResolver:
    """Test resolver construction from rules."""

    def test_app_config(self) -> None:
        rules = RedirectRules.model_validate(
            {**MINIMAL, "normalize": {"lowercase": True, "trailing_slash": "ensure"}}
        )
        config = build_app_config(rules)
        assert config.new_origin == "https://new.example"
        assert config.policy.lowercase is True
        assert config.policy.trailing_slash is TrailingSlash.ENSURE

    def test_exact_last_write_wins(self) -> None:
        rules = RedirectRules.model_validate(
            {
                **MINIMAL,
                "exact": [{"from": "/a", "to": "/first"}, {"from": "/a", "to": "/second"}],
            }
        )
        result = build_resolver(rules).resolve("https://old.example/a")
        assert isinstance(result, Redirect)
        assert result.target == "https://new.example/second"

    def test_sources_normalized_with_policy(self) -> None:
        rules = RedirectRules.model_validate(
            {
                **MINIMAL,
                "normalize": {"lowercase": True, "trailing_slash": "strip"},
                "exact": [{"from": "/Posts/", "to": "/blog"}],
                "gone": ["/Old-Image.jpg"],
            }
        )
        resolver = build_resolver(rules)
        assert resolver.resolve("https://old.example/posts") == Redirect(
            target="https://new.example/blog", code=308
        )
        assert isinstance(resolver.resolve("https://old.example/OLD-IMAGE.JPG"), Gone)

    def test_status_code_applied(self) -> None:
        rules = RedirectRules.model_validate({**MINIMAL, "status_code": 301})
        assert build_resolver(rules).permanent_code == 301

    def test_load_resolver(self, project_rules_path: Path) -> None:
        resolver = load_resolver(project_rules_path)
        result = resolver.resolve("https://old.example/lab/alpha")
        assert isinstance(result, Redirect)
        assert result.target == "https://new.example/projects/lab/alpha"
