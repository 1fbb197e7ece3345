"""Utility modules for curly."""

from curly.utils.html import Markup, error_page, html_escape, minify_html

__all__ = ["Markup", "error_page", "html_escape", "minify_html"]
