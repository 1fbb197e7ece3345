"""Rendered-output cache -- file-backed templates rendered once per data.

The first render of a (template, mtime, data) triple is stored as a file
in the cache directory; later renders with the same data read that file
back. Editing the template changes its mtime, so stale output is never
served.

Run:
    python app.py
"""

import tempfile
from pathlib import Path

from curly import Environment, FileSystemLoader, TemplateConfig

templates_dir = Path(__file__).parent / "templates"
cache_dir = Path(tempfile.mkdtemp(prefix="curly-example-")) / "templates"

config = TemplateConfig(cache_dir=cache_dir, cache_ttl=300)
env = Environment(FileSystemLoader(templates_dir), config=config)

product = {
    "name": "espresso machine",
    "price": 249.5,
    "rating": 4,
    "tags": ["kitchen", "coffee"],
}

first = env.render("product.html", product=product)
second = env.render("product.html", product=product)
stats = env.cache.stats()


def main() -> None:
    print(first)
    print(f"Same output from cache: {first == second}")
    print(f"Cache stats: {stats}")
    env.clear_cache()
    print(f"After clear: {env.cache.stats()['file_count']} files")


if __name__ == "__main__":
    main()
