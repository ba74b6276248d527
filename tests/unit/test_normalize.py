"""
Tests for pathname normalization and the checked value factories.
"""

from __future__ import annotations

import pytest

from site_redirects.components.redirects import (
    InvalidOriginError,
    InvalidPathnameError,
    InvalidRedirectCodeError,
    NormalizationPolicy,
    RedirectCode,
    RedirectConfigError,
    TrailingSlash,
    as_origin,
    as_pathname,
    as_redirect_code,
    create_app_config,
    create_path_normalizer,
    normalize_path,
)

STRIP = NormalizationPolicy(trailing_slash=TrailingSlash.STRIP)
ENSURE = NormalizationPolicy(trailing_slash=TrailingSlash.ENSURE)
LOWER = NormalizationPolicy(lowercase=True)


class TestNormalizePath:
    """Test policy-driven normalization."""

    def test_default_policy_is_identity(self) -> None:
        assert normalize_path("/Foo/Bar/") == "/Foo/Bar/"

    def test_lowercase(self) -> None:
        assert normalize_path("/FOO/Bar", LOWER) == "/foo/bar"

    def test_lowercase_keeps_trailing_slash_by_default(self) -> None:
        assert normalize_path("/Foo/", LOWER) == "/foo/"

    def test_strip_removes_trailing_slash(self) -> None:
        assert normalize_path("/foo/", STRIP) == "/foo"

    def test_strip_leaves_path_without_slash(self) -> None:
        assert normalize_path("/foo", STRIP) == "/foo"

    def test_strip_preserves_root(self) -> None:
        assert normalize_path("/", STRIP) == "/"

    def test_strip_repeated_slashes(self) -> None:
        assert normalize_path("/foo//", STRIP) == "/foo"
        assert normalize_path("//", STRIP) == "/"

    def test_ensure_appends_slash(self) -> None:
        assert normalize_path("/foo", ENSURE) == "/foo/"

    def test_ensure_keeps_existing_slash(self) -> None:
        assert normalize_path("/foo/", ENSURE) == "/foo/"
        assert normalize_path("/", ENSURE) == "/"

    def test_lowercase_then_strip(self) -> None:
        policy = NormalizationPolicy(lowercase=True, trailing_slash=TrailingSlash.STRIP)
        assert normalize_path("/Blog/Hello/", policy) == "/blog/hello"

    def test_bound_normalizer(self) -> None:
        normalize = create_path_normalizer(
            NormalizationPolicy(lowercase=True, trailing_slash=TrailingSlash.STRIP)
        )
        assert normalize("/Posts/") == "/posts"


class TestAsPathname:
    """Test pathname validation."""

    def test_valid(self) -> None:
        assert as_pathname("/blog") == "/blog"
        assert as_pathname("/") == "/"

    @pytest.mark.parametrize("value", ["", "blog", "https://example.com/blog", None, 42])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(InvalidPathnameError):
            as_pathname(value)

    def test_query_rejected(self) -> None:
        with pytest.raises(InvalidPathnameError, match="query or fragment"):
            as_pathname("/blog?page=2")

    def test_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            as_pathname("nope")


class TestAsOrigin:
    """Test origin validation."""

    def test_valid(self) -> None:
        assert as_origin("https://new.example") == "https://new.example"
        assert as_origin("http://localhost:8000") == "http://localhost:8000"

    def test_trailing_slash_dropped(self) -> None:
        assert as_origin("https://new.example/") == "https://new.example"

    def test_scheme_and_host_lowercased(self) -> None:
        assert as_origin("HTTPS://New.Example") == "https://new.example"

    @pytest.mark.parametrize(
        "value",
        [
            "new.example",
            "ftp://files.example",
            "https://",
            "https://new.example/blog",
            "https://new.example?x=1",
            "https://new.example#top",
            "https://user:pw@new.example",
            "",
            None,
        ],
    )
    def test_invalid(self, value: object) -> None:
        with pytest.raises(InvalidOriginError):
            as_origin(value)


class TestAsRedirectCode:
    """Test redirect code validation."""

    @pytest.mark.parametrize("code", [301, 302, 303, 307, 308])
    def test_valid(self, code: int) -> None:
        assert as_redirect_code(code) == code
        assert isinstance(as_redirect_code(code), RedirectCode)

    @pytest.mark.parametrize("code", [200, 304, 410, "308", True])
    def test_invalid(self, code: object) -> None:
        with pytest.raises(InvalidRedirectCodeError):
            as_redirect_code(code)


class TestCreateAppConfig:
    """Test app config construction."""

    def test_defaults(self) -> None:
        config = create_app_config("https://new.example")
        assert config.new_origin == "https://new.example"
        assert config.policy.lowercase is False
        assert config.policy.trailing_slash is TrailingSlash.PRESERVE

    def test_string_strategy(self) -> None:
        config = create_app_config("https://new.example", trailing_slash="ensure")
        assert config.policy.trailing_slash is TrailingSlash.ENSURE

    def test_invalid_strategy(self) -> None:
        with pytest.raises(RedirectConfigError, match="trailing slash"):
            create_app_config("https://new.example", trailing_slash="collapse")

    def test_invalid_origin(self) -> None:
        with pytest.raises(InvalidOriginError):
            create_app_config("new.example")

    def test_config_is_frozen(self) -> None:
        config = create_app_config("https://new.example")
        with pytest.raises(AttributeError):
            config.new_origin = "https://other.example"  # type: ignore[misc]
