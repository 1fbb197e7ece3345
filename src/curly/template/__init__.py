"""Curly Template package — parsed template objects ready for rendering."""

from curly.template.core import Template
from curly.template.helpers import UNDEFINED
from curly.template.loop_context import LoopContext
from curly.template.renderer import Renderer
from curly.utils.html import Markup

__all__ = [
    "UNDEFINED",
    "LoopContext",
    "Markup",
    "Renderer",
    "Template",
]
