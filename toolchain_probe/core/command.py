"""
Command synthesizer — one shell-style compiler command line per probe.

Fragment order is fixed:

    <compiler> [EXTRA_PRE_LDFLAGS when linking] <pre-flags override>
    <flags1> <flags2> <trailing override> EXTRA_LDFLAGS

Unset and empty fragments are dropped, never rendered as blank tokens.
"""
from typing import List, Optional, Union

from toolchain_probe.config import read_string_env
from toolchain_probe.core.language import (
    LDFLAGS_VAR,
    PRE_LDFLAGS_VAR,
    Language,
    resolve_language,
)
from toolchain_probe.core.platform import resolve_binary


def compiler_for(language: Union[Language, str]) -> str:
    """Resolved compiler binary for *language*."""
    return resolve_binary(resolve_language(language).compiler_role)


def synthesize(
    language: Union[Language, str],
    flags1: Optional[str] = None,
    flags2: Optional[str] = None,
    link: bool = False,
) -> str:
    """
    Assemble the compiler invocation for *language*.

    Raises
    ------
    ConfigurationError
        If *language* is not C or C++.
    """
    lang = resolve_language(language)

    fragments: List[Optional[str]] = [
        compiler_for(lang),
        read_string_env(PRE_LDFLAGS_VAR) if link else None,
        read_string_env(lang.pre_flags_var),
        flags1,
        flags2,
        read_string_env(lang.flags_var),
        read_string_env(LDFLAGS_VAR),
    ]
    return " ".join(f.strip() for f in fragments if f and f.strip()).strip()
