"""
Header locator — find where the compiler picks up a header from.

The compiler is asked to compile ``#include <name>`` with ``-v``, which
makes gcc and clang print their include search list.  That block is
parsed and each listed directory is checked on the filesystem for the
header; the first hit wins.

Three answers:
  - FOUND                 the header compiles and its path is known
  - PRESENT_PATH_UNKNOWN  it compiles, but no listed directory holds it
                          (different diagnostic phrasing, framework
                          headers, ...)
  - NOT_FOUND             it does not compile
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum, unique
from pathlib import Path
from typing import List, Optional, Sequence, Union

from toolchain_probe.core.command import synthesize
from toolchain_probe.core.executor import ProbeMode, execute
from toolchain_probe.core.language import Language, resolve_language
from toolchain_probe.core.transient import temp_source
from toolchain_probe.policy.profile import DEFAULT_PROFILE, ProbeProfile

logger = logging.getLogger(__name__)


@unique
class HeaderStatus(str, Enum):
    FOUND = "FOUND"
    PRESENT_PATH_UNKNOWN = "PRESENT_PATH_UNKNOWN"
    NOT_FOUND = "NOT_FOUND"


@dataclass(frozen=True)
class HeaderLookup:
    status: HeaderStatus
    path: Optional[Path] = None

    @property
    def exists(self) -> bool:
        """True whenever the header is known to compile."""
        return self.status != HeaderStatus.NOT_FOUND


def _search_block_re(profile: ProbeProfile) -> "re.Pattern[str]":
    return re.compile(
        rf"^{re.escape(profile.search_start_marker)}$(.+?)^{re.escape(profile.search_end_marker)}$",
        re.MULTILINE | re.DOTALL,
    )


def parse_search_paths(output: str, profile: ProbeProfile = DEFAULT_PROFILE) -> List[str]:
    """
    Extract the ``#include <...>`` search directories from verbose output.

    Returns an empty list when the marker block is absent.
    """
    m = _search_block_re(profile).search(output or "")
    if m is None:
        return []
    return [line.strip() for line in m.group(1).strip().splitlines() if line.strip()]


def locate(name: str, directories: Sequence[str]) -> Optional[Path]:
    """First ``<dir>/<name>`` that is a regular file, in listed order."""
    for d in directories:
        candidate = Path(d) / name
        if candidate.is_file():
            return candidate
    return None


def find_header(
    name: str,
    language: Union[Language, str],
    flags: Optional[str] = None,
    profile: ProbeProfile = DEFAULT_PROFILE,
) -> HeaderLookup:
    """
    Look for header *name* as compiled by the *language* toolchain.

    Raises
    ------
    ConfigurationError
        If *language* is not C or C++.
    """
    lang = resolve_language(language)
    source = f"#include <{name}>"

    with temp_source(f"{profile.compile_check_name}.{lang.extension}", source) as artifact:
        obj = artifact.register(f"{artifact.path}{profile.object_suffix}")
        command = synthesize(lang, f"-v -c '{artifact.path}' -o '{obj}'", flags)
        outcome = execute(f"Checking for {name}", command, source, ProbeMode.CAPTURE)

    if not outcome.ok:
        return HeaderLookup(HeaderStatus.NOT_FOUND)

    found = locate(name, parse_search_paths(outcome.output, profile))
    if found is None:
        logger.debug("%s compiles but is not in the parsed search list", name)
        return HeaderLookup(HeaderStatus.PRESENT_PATH_UNKNOWN)
    return HeaderLookup(HeaderStatus.FOUND, found)
