"""Block parser for curly templates.

Consumes the lexer's token stream and builds the node tree, matching open
and close directives and rejecting unmatched ones.
"""

from curly.parser.core import Parser
from curly.parser.errors import ParseError

__all__ = ["ParseError", "Parser"]
