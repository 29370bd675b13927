"""Typed syntax tree for the supported Rust subset.

One closed union per syntactic category (``Item``, ``Stmt``, ``Expr``,
``Pattern``). Each union ends in an ``Unsupported*`` case that carries the
tree-sitter node type of whatever the frontend could not model, so the
generator can reject it with a precise diagnostic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict


class SourceLocation(BaseModel):
    """Structured source span from tree-sitter AST nodes."""

    model_config = ConfigDict(frozen=True)

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def is_unknown(self) -> bool:
        return (
            self.start_line == 0
            and self.start_col == 0
            and self.end_line == 0
            and self.end_col == 0
        )

    def __str__(self) -> str:
        if self.is_unknown():
            return "<unknown>"
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


NO_SOURCE_LOCATION = SourceLocation(start_line=0, start_col=0, end_line=0, end_col=0)


def _location():
    return field(default=NO_SOURCE_LOCATION, compare=False, repr=False)


class BinOp(str, Enum):
    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    REM = "%"
    # Logical
    AND = "&&"
    OR = "||"
    # Bitwise
    BIT_XOR = "^"
    BIT_AND = "&"
    BIT_OR = "|"
    SHL = "<<"
    SHR = ">>"
    # Comparison
    EQ = "=="
    LT = "<"
    LE = "<="
    NE = "!="
    GE = ">="
    GT = ">"

    @property
    def symbol(self) -> str:
        return self.value


class LitKind(str, Enum):
    STR = "str"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    CHAR = "char"
    BYTE = "byte"
    BYTE_STR = "byte_str"
    C_STR = "c_str"


# ── names ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Path:
    segments: tuple[str, ...]
    location: SourceLocation = _location()


# ── patterns ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class IdentPattern:
    name: str
    location: SourceLocation = _location()


@dataclass(frozen=True)
class PathPattern:
    path: Path
    location: SourceLocation = _location()


@dataclass(frozen=True)
class UnsupportedPattern:
    kind: str
    location: SourceLocation = _location()


Pattern = Union[IdentPattern, PathPattern, UnsupportedPattern]


# ── expressions ──────────────────────────────────────────────────


@dataclass(frozen=True)
class Literal:
    """A literal value.

    ``value`` is the decoded text for ``STR``, an ``int`` for ``INT`` and the
    raw source text for every other kind.
    """

    kind: LitKind
    value: str | int
    location: SourceLocation = _location()


@dataclass(frozen=True)
class Lit:
    literal: Literal
    location: SourceLocation = _location()


@dataclass(frozen=True)
class PathExpr:
    path: Path
    location: SourceLocation = _location()


@dataclass(frozen=True)
class Call:
    func: Expr
    args: tuple[Expr, ...] = ()
    location: SourceLocation = _location()


@dataclass(frozen=True)
class Binary:
    op: BinOp
    left: Expr
    right: Expr
    location: SourceLocation = _location()


@dataclass(frozen=True)
class Assign:
    target: Expr
    value: Expr
    location: SourceLocation = _location()


@dataclass(frozen=True)
class AssignOp:
    op: BinOp
    target: Expr
    value: Expr
    location: SourceLocation = _location()


@dataclass(frozen=True)
class Return:
    value: Expr | None = None
    location: SourceLocation = _location()


@dataclass(frozen=True)
class Loop:
    body: Block
    label: str | None = None
    location: SourceLocation = _location()


@dataclass(frozen=True)
class If:
    cond: Expr
    then: Block
    else_branch: Expr | Block | None = None
    location: SourceLocation = _location()


@dataclass(frozen=True)
class Break:
    value: Expr | None = None
    label: str | None = None
    location: SourceLocation = _location()


@dataclass(frozen=True)
class UnsupportedExpr:
    kind: str
    location: SourceLocation = _location()


Expr = Union[
    Lit,
    PathExpr,
    Call,
    Binary,
    Assign,
    AssignOp,
    Return,
    Loop,
    If,
    Break,
    UnsupportedExpr,
]


# ── statements and blocks ────────────────────────────────────────


@dataclass(frozen=True)
class Block:
    stmts: tuple[Stmt, ...] = ()
    location: SourceLocation = _location()


@dataclass(frozen=True)
class ItemStmt:
    item: Item
    location: SourceLocation = _location()


@dataclass(frozen=True)
class ExprStmt:
    """An expression without a trailing semicolon."""

    expr: Expr
    location: SourceLocation = _location()


@dataclass(frozen=True)
class SemiStmt:
    """An expression followed by ``;``."""

    expr: Expr
    location: SourceLocation = _location()


@dataclass(frozen=True)
class LocalStmt:
    pattern: Pattern
    init: Expr | None = None
    location: SourceLocation = _location()


@dataclass(frozen=True)
class UnsupportedStmt:
    kind: str
    location: SourceLocation = _location()


Stmt = Union[ItemStmt, ExprStmt, SemiStmt, LocalStmt, UnsupportedStmt]


# ── items ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Param:
    pattern: Pattern
    location: SourceLocation = _location()


@dataclass(frozen=True)
class FunctionDef:
    name: str
    params: tuple[Param, ...]
    body: Block
    generics: tuple[str, ...] = ()
    location: SourceLocation = _location()


@dataclass(frozen=True)
class UnsupportedItem:
    kind: str
    location: SourceLocation = _location()


Item = Union[FunctionDef, UnsupportedItem]


@dataclass(frozen=True)
class Module:
    items: tuple[Item, ...] = ()
    location: SourceLocation = _location()
