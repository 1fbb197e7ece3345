"""Tests for TemplateConfig."""

from pathlib import Path

import pytest

from curly import TemplateConfig
from curly.environment.config import DEFAULT_CACHE_DIR, DEFAULT_CACHE_TTL


class TestDefaults:
    def test_defaults(self):
        config = TemplateConfig()
        assert config.cache_enabled is True
        assert config.cache_ttl == DEFAULT_CACHE_TTL == 3600
        assert config.cache_dir == DEFAULT_CACHE_DIR
        assert config.development is False
        assert config.autoescape is True
        assert config.minify is False

    def test_cache_dir_coerced_to_path(self):
        assert TemplateConfig(cache_dir="/tmp/x").cache_dir == Path("/tmp/x")

    def test_negative_ttl_clamped(self):
        assert TemplateConfig(cache_ttl=-5).cache_ttl == 0

    def test_frozen(self):
        with pytest.raises(AttributeError):
            TemplateConfig().cache_ttl = 1  # type: ignore[misc]

    def test_with_overrides_ignores_none(self):
        config = TemplateConfig(cache_ttl=10).with_overrides(cache_ttl=None, minify=True)
        assert config.cache_ttl == 10
        assert config.minify is True


class TestFromEnviron:
    def test_empty_environ_is_default(self):
        assert TemplateConfig.from_environ({}) == TemplateConfig()

    def test_all_variables(self, tmp_path):
        config = TemplateConfig.from_environ(
            {
                "CURLY_CACHE_ENABLED": "off",
                "CURLY_CACHE_TTL": "60",
                "CURLY_CACHE_DIR": str(tmp_path),
                "CURLY_ENV": "Development",
                "CURLY_AUTOESCAPE": "no",
                "CURLY_MINIFY": "YES",
            }
        )
        assert config == TemplateConfig(
            cache_enabled=False,
            cache_ttl=60,
            cache_dir=tmp_path,
            development=True,
            autoescape=False,
            minify=True,
        )

    def test_production_env(self):
        assert TemplateConfig.from_environ({"CURLY_ENV": "production"}).development is False

    def test_empty_cache_dir_keeps_default(self):
        assert TemplateConfig.from_environ({"CURLY_CACHE_DIR": ""}).cache_dir == DEFAULT_CACHE_DIR

    @pytest.mark.parametrize(
        ("environ", "message"),
        [
            ({"CURLY_CACHE_TTL": "soon"}, "CURLY_CACHE_TTL must be an integer"),
            ({"CURLY_MINIFY": "maybe"}, "CURLY_MINIFY must be a boolean"),
            ({"CURLY_CACHE_ENABLED": "2"}, "CURLY_CACHE_ENABLED must be a boolean"),
        ],
    )
    def test_malformed_values(self, environ, message):
        with pytest.raises(ValueError, match=message):
            TemplateConfig.from_environ(environ)
