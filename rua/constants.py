"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

SOURCE_LANGUAGE = "rust"

DEFAULT_INDENT_WIDTH = 2

GENERATED_BANNER = "-------------------- GENERATED ------------------------"
USAGE = "Usage: rua <file.rs>"

# Lua spellings
LUA_FUNCTION = "function"
LUA_LOCAL = "local"
LUA_RETURN = "return"
LUA_BREAK = "break"
LUA_END = "end"
LUA_LOOP_HEADER = "while true do"
LUA_IF = "if"
LUA_THEN = "then"
LUA_ASSIGN = " = "
LUA_ARG_SEPARATOR = ", "
LUA_STRING_QUOTE = "'"

LUA_RESERVED_WORDS: frozenset[str] = frozenset(
    {
        "and",
        "break",
        "do",
        "else",
        "elseif",
        "end",
        "false",
        "for",
        "function",
        "goto",
        "if",
        "in",
        "local",
        "nil",
        "not",
        "or",
        "repeat",
        "return",
        "then",
        "true",
        "until",
        "while",
    }
)
RESERVED_WORD_SUFFIX = "_"

# Lua short-string escapes; everything else below 0x20 (and DEL) becomes \ddd
LUA_STRING_ESCAPES: dict[str, str] = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}

# Rust escapes understood by the frontend
RUST_SIMPLE_ESCAPES: dict[str, str] = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    "0": "\0",
    "'": "'",
    '"': '"',
}

RUST_INTEGER_SUFFIXES: tuple[str, ...] = (
    "u128",
    "i128",
    "usize",
    "isize",
    "u16",
    "i16",
    "u32",
    "i32",
    "u64",
    "i64",
    "u8",
    "i8",
)
