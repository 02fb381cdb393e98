"""
Language — the C / C++ sum type every probe dispatches on.

Each language carries the facts needed to build a command: which
toolchain role compiles it, which file extension its sources get, and
which environment overrides are layered in.  Unsupported tags are
rejected here, at the boundary, before anything touches the filesystem
or spawns a process.
"""
from enum import Enum, unique
from typing import Union

from toolchain_probe.errors import ConfigurationError


@unique
class ToolRole(str, Enum):
    """Toolchain binaries the probes resolve through the environment."""
    C_COMPILER = "C compiler"
    CXX_COMPILER = "C++ compiler"
    MAKE = "make"


@unique
class Language(str, Enum):
    C = "c"
    CXX = "cxx"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]

    @property
    def compiler_role(self) -> ToolRole:
        return _ROLES[self]

    @property
    def pre_flags_var(self) -> str:
        """Override inserted ahead of the probe's own flags."""
        return _PRE_FLAGS_VARS[self]

    @property
    def flags_var(self) -> str:
        """Override appended after the probe's own flags."""
        return _FLAGS_VARS[self]


# Link-time overrides are shared by both languages.
PRE_LDFLAGS_VAR = "EXTRA_PRE_LDFLAGS"
LDFLAGS_VAR = "EXTRA_LDFLAGS"

_EXTENSIONS = {Language.C: "c", Language.CXX: "cpp"}
_ROLES = {Language.C: ToolRole.C_COMPILER, Language.CXX: ToolRole.CXX_COMPILER}
_PRE_FLAGS_VARS = {Language.C: "EXTRA_PRE_CFLAGS", Language.CXX: "EXTRA_PRE_CXXFLAGS"}
_FLAGS_VARS = {Language.C: "EXTRA_CFLAGS", Language.CXX: "EXTRA_CXXFLAGS"}

_ALIASES = {"c++": Language.CXX, "cpp": Language.CXX}


def resolve_language(tag: Union[Language, str]) -> Language:
    """
    Coerce *tag* into a Language.

    Accepts Language members, their values ("c", "cxx") and the aliases
    "c++" / "cpp".

    Raises
    ------
    ConfigurationError
        For any other tag.
    """
    if isinstance(tag, Language):
        return tag
    if isinstance(tag, str):
        key = tag.strip().lower()
        if key in _ALIASES:
            return _ALIASES[key]
        try:
            return Language(key)
        except ValueError:
            pass
    raise ConfigurationError(f"Unsupported language {tag!r}")
