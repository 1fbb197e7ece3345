"""Rendered-output file cache for curly."""

from curly.cache.template_cache import TemplateCache, cache_key

__all__ = ["TemplateCache", "cache_key"]
