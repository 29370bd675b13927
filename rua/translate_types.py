"""Translation pipeline data types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel

from .ast import NO_SOURCE_LOCATION, SourceLocation
from .errors import RuaError, UnsupportedConstructError
from . import constants


@dataclass(frozen=True)
class TranslateConfig:
    """Groups per-run translation settings."""

    indent_width: int = constants.DEFAULT_INDENT_WIDTH
    language: str = constants.SOURCE_LANGUAGE


class Diagnostic(BaseModel):
    """Why a translation run stopped."""

    category: str
    kind: str = ""
    message: str
    location: SourceLocation = NO_SOURCE_LOCATION

    @classmethod
    def from_error(cls, error: RuaError) -> Diagnostic:
        if isinstance(error, UnsupportedConstructError):
            return cls(
                category=error.category,
                kind=error.kind,
                message=str(error),
                location=error.location,
            )
        return cls(
            category="syntax",
            message=str(error),
            location=getattr(error, "location", NO_SOURCE_LOCATION),
        )

    def __str__(self) -> str:
        return self.message


@dataclass
class TranslationStats:
    """Timing and size statistics for each pipeline stage."""

    source_bytes: int = 0
    source_lines: int = 0

    # Stage timings (seconds)
    parse_time: float = 0.0
    lower_time: float = 0.0
    generate_time: float = 0.0
    total_time: float = 0.0

    item_count: int = 0
    output_lines: int = 0


@dataclass
class TranslationResult:
    """Outcome of one run: the full Lua text, or a diagnostic and no text."""

    output: str = ""
    diagnostic: Diagnostic | None = None
    stats: TranslationStats = field(default_factory=TranslationStats)
    error: RuaError | None = field(default=None, repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return self.diagnostic is None

    def unwrap(self) -> str:
        """Return the generated text, re-raising the error of a failed run."""
        if self.error is not None:
            raise self.error
        return self.output
