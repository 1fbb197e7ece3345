"""Command line for curly.

Usage:
    python -m curly render page.html --search-path views/ --data page.json
    python -m curly render page.html --search-path views/ --no-cache --error-page
    python -m curly clear-cache --cache-dir .curly-cache/templates

Settings start from ``CURLY_*`` environment variables
(``TemplateConfig.from_environ``); flags override them.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from curly.cache import TemplateCache
from curly.environment import Environment, FileSystemLoader, TemplateConfig, TemplateError
from curly.environment.exceptions import CacheError
from curly.utils.html import error_page


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Log cache activity")

    parser = argparse.ArgumentParser(prog="curly", description="Render curly templates")
    commands = parser.add_subparsers(dest="command", required=True)

    render = commands.add_parser("render", parents=[common], help="Render a template to stdout")
    render.add_argument("name", help="Template name relative to the search path")
    render.add_argument(
        "--search-path",
        action="append",
        required=True,
        help="Template directory (repeatable, first match wins)",
    )
    render.add_argument("--data", type=Path, help="JSON file with the render data")
    render.add_argument("--no-cache", action="store_true", help="Disable the render cache")
    render.add_argument("--cache-dir", type=Path, help="Render cache directory")
    render.add_argument("--ttl", type=int, help="Cache lifetime in seconds (0 = never expire)")
    render.add_argument(
        "--development", action="store_true", help="Clear the cache before rendering"
    )
    render.add_argument("--no-autoescape", action="store_true", help="Do not HTML-escape output")
    render.add_argument("--minify", action="store_true", help="Collapse whitespace between tags")
    render.add_argument(
        "--error-page", action="store_true", help="Print an HTML error page on failure"
    )

    clear = commands.add_parser(
        "clear-cache", parents=[common], help="Delete every render cache entry"
    )
    clear.add_argument("--cache-dir", type=Path, help="Render cache directory")
    return parser


def _config_from_args(args: argparse.Namespace) -> TemplateConfig:
    config = TemplateConfig.from_environ(os.environ)
    overrides: dict[str, Any] = {"cache_dir": args.cache_dir}
    if getattr(args, "no_cache", False):
        overrides["cache_enabled"] = False
    if getattr(args, "ttl", None) is not None:
        overrides["cache_ttl"] = args.ttl
    if getattr(args, "development", False):
        overrides["development"] = True
    if getattr(args, "no_autoescape", False):
        overrides["autoescape"] = False
    if getattr(args, "minify", False):
        overrides["minify"] = True
    return config.with_overrides(**overrides)


def _load_data(path: Path | None) -> dict[str, Any]:
    if path is None:
        return {}
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: render data must be a JSON object, got {type(data).__name__}")
    return data


def _render(args: argparse.Namespace, config: TemplateConfig) -> int:
    try:
        data = _load_data(args.data)
    except (OSError, ValueError) as e:
        print(f"error: cannot read data: {e}", file=sys.stderr)
        return 2

    env = Environment(FileSystemLoader(args.search_path), config=config)
    try:
        output = env.render(args.name, data)
    except TemplateError as e:
        if args.error_page:
            sys.stdout.write(error_page(e))
        else:
            print(e.format_compact(), file=sys.stderr)
        return 1

    sys.stdout.write(output)
    return 0


def _clear_cache(config: TemplateConfig) -> int:
    try:
        cache = TemplateCache(config.with_overrides(development=False))
    except CacheError as e:
        print(e.format_compact(), file=sys.stderr)
        return 1
    if not cache.clear():
        print(f"error: some entries in {cache.directory} could not be removed", file=sys.stderr)
        return 1
    print(f"Cleared {cache.directory}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _config_from_args(args)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.command == "render":
        return _render(args, config)
    return _clear_cache(config)


if __name__ == "__main__":
    sys.exit(main())
