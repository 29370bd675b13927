"""Emitter — append-only text accumulator with block nesting depth."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from . import constants


class Emitter:
    """Shared output sink for every translation function of one run."""

    def __init__(self, indent_width: int = constants.DEFAULT_INDENT_WIDTH):
        if indent_width < 0:
            raise ValueError(f"indent_width must be non-negative, got {indent_width}")
        self._indent_width = indent_width
        self._parts: list[str] = []
        self._depth: int = 0

    @property
    def depth(self) -> int:
        return self._depth

    def write(self, text: str) -> None:
        self._parts.append(text)

    def newline(self) -> None:
        self._parts.append("\n")

    def indent(self) -> None:
        if self._depth:
            self._parts.append(" " * (self._indent_width * self._depth))

    @contextmanager
    def block(self) -> Iterator[None]:
        """Nest one level deeper for the duration of the ``with`` body."""
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def getvalue(self) -> str:
        return "".join(self._parts)
