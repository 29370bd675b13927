"""Error taxonomy for parsing and translation failures."""

from __future__ import annotations

from .ast import NO_SOURCE_LOCATION, SourceLocation


class RuaError(Exception):
    """Base class for every error raised by rua."""

    pass


class RuaSyntaxError(RuaError):
    """Raised when the parser reports errors, recovered or not."""

    def __init__(self, message: str, location: SourceLocation = NO_SOURCE_LOCATION):
        self.location = location
        if not location.is_unknown():
            message = f"{message} at {location}"
        super().__init__(message)


class TranslationError(RuaError):
    """Raised when a syntax tree cannot be translated."""

    pass


class UnsupportedConstructError(TranslationError):
    """A node outside the supported subset reached the generator.

    ``kind`` names the offending node (a tree-sitter node type, or a short
    description such as ``"else branch"``).
    """

    category: str = "construct"

    def __init__(self, kind: str, location: SourceLocation = NO_SOURCE_LOCATION):
        self.kind = kind
        self.location = location
        message = f"unsupported {self.category}: {kind}"
        if not location.is_unknown():
            message = f"{message} at {location}"
        super().__init__(message)


class UnsupportedItemError(UnsupportedConstructError):
    category = "item"


class UnsupportedStatementError(UnsupportedConstructError):
    category = "stmt"


class UnsupportedExpressionError(UnsupportedConstructError):
    category = "expr"


class UnsupportedLiteralError(UnsupportedConstructError):
    category = "literal"


class UnsupportedPatternError(UnsupportedConstructError):
    category = "pat"


class UnsupportedPathError(UnsupportedConstructError):
    category = "path"
