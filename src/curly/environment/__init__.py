"""Curly environment: engine facade, configuration, loaders, filters, errors."""

from curly.environment.config import TemplateConfig
from curly.environment.core import Environment
from curly.environment.exceptions import (
    CacheError,
    CacheMissError,
    ErrorCode,
    FilterValueError,
    LexerError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UnknownFilterError,
    build_source_snippet,
)
from curly.environment.filters import DEFAULT_FILTERS
from curly.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    Loader,
    TemplateSource,
)
from curly.environment.registry import FilterRegistry

__all__ = [
    "DEFAULT_FILTERS",
    "CacheError",
    "CacheMissError",
    "ChoiceLoader",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FilterRegistry",
    "FilterValueError",
    "LexerError",
    "Loader",
    "SourceSnippet",
    "TemplateConfig",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSource",
    "TemplateSyntaxError",
    "UnknownFilterError",
    "build_source_snippet",
]
