"""Error pages -- what a failed render looks like.

Syntax errors name the file, line and column; runtime errors name the
failing expression and the values involved. ``error_page()`` turns either
into a standalone HTML document that cannot be mistaken for real output.

Run:
    python app.py
"""

from pathlib import Path

from curly import (
    Environment,
    FileSystemLoader,
    TemplateConfig,
    TemplateError,
    error_page,
)

templates_dir = Path(__file__).parent / "templates"
env = Environment(FileSystemLoader(templates_dir), config=TemplateConfig(cache_enabled=False))


def render_or_error_page(name: str, **data) -> str:
    try:
        return env.render(name, data)
    except TemplateError as e:
        return error_page(e)


good = render_or_error_page("checkout.html", cart={"items": [1, 2], "total": 41.5})
runtime_failure = render_or_error_page("checkout.html", cart={"items": [], "total": "n/a"})
syntax_failure = render_or_error_page("broken.html", cart={"items": ["a"]})


def main() -> None:
    print(good)
    print(runtime_failure)
    print(syntax_failure)


if __name__ == "__main__":
    main()
