"""rua — translate a subset of Rust into Lua."""

from .api import (  # noqa: F401
    parse_source,
    translate_module,
    translate_source,
    translate_file,
    dump_ast,
)
from .errors import (  # noqa: F401
    RuaError,
    RuaSyntaxError,
    TranslationError,
    UnsupportedConstructError,
)
from .generator import LuaGenerator  # noqa: F401
from .translate_types import TranslateConfig, TranslationResult  # noqa: F401
