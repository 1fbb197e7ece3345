"""Pytest configuration and fixtures for curly tests."""

from pathlib import Path

import pytest

from curly import DictLoader, Environment, FileSystemLoader, TemplateConfig


@pytest.fixture
def env():
    """Create a basic curly Environment (autoescape on, no file cache use)."""
    return Environment()


@pytest.fixture
def env_noescape():
    """Create a curly Environment with autoescape disabled."""
    return Environment(config=TemplateConfig(autoescape=False))


@pytest.fixture
def env_with_loader():
    """Create a curly Environment with DictLoader and test templates."""
    loader = DictLoader(
        {
            "hello.html": "Hello {name}!",
            "list.html": (
                "<ul>{% foreach items as item %}<li>{item}</li>{% endforeach %}</ul>"
            ),
            "broken.html": "{% if x %}never closed",
        }
    )
    return Environment(loader=loader)


@pytest.fixture
def cache_config(tmp_path: Path) -> TemplateConfig:
    """A config whose render cache lives under tmp_path."""
    return TemplateConfig(cache_dir=tmp_path / "cache", cache_ttl=3600)


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A directory of template files."""
    views = tmp_path / "views"
    views.mkdir()
    (views / "page.html").write_text(
        "<h1>{title|title}</h1>\n"
        "{% foreach items as item %}<p>{loop.index}. {item.name}</p>{% endforeach %}\n",
        encoding="utf-8",
    )
    (views / "greet.html").write_text("Hello {user.name|capitalize}!", encoding="utf-8")
    (views / "bad_round.html").write_text("line one\nprice: {price|round}\n", encoding="utf-8")
    return views


@pytest.fixture
def file_env(template_dir: Path, cache_config: TemplateConfig) -> Environment:
    """An Environment over template_dir with the file cache enabled."""
    return Environment(FileSystemLoader(template_dir), config=cache_config)


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
