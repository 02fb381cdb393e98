"""
Platform — the host facts the probes consume as opaque inputs.

  - current_os_identifier(): coarse OS tag used for default binaries and
    for skipping checks known to be broken on one platform.
  - find_command(): PATH lookup.
  - resolve_binary(): environment override first, platform default second.
"""
import platform
import shutil
from typing import Optional

from toolchain_probe.config import read_string_env
from toolchain_probe.core.language import ToolRole
from toolchain_probe.errors import ConfigurationError
from toolchain_probe.policy.profile import DEFAULT_PROFILE, ProbeProfile

_OS_ALIASES = {
    "darwin": "macosx",
    "sunos": "solaris",
}


def current_os_identifier() -> str:
    """Return a coarse OS tag: linux, macosx, freebsd, solaris, aix, windows, ..."""
    system = platform.system().lower()
    if system.startswith(("cygwin", "msys", "mingw")):
        return "cygwin"
    return _OS_ALIASES.get(system, system)


def find_command(name: str) -> Optional[str]:
    """Full path of *name* on PATH, or None."""
    return shutil.which(name)


def resolve_binary(role: ToolRole, profile: ProbeProfile = DEFAULT_PROFILE) -> Optional[str]:
    """
    Resolve the binary for *role*.

    ``CC`` / ``CXX`` / ``MAKE`` override the default.  Compilers fall back
    to the profile's per-OS default name; make falls back to ``make`` on
    PATH and may therefore be None.
    """
    if role == ToolRole.C_COMPILER:
        return read_string_env("CC") or profile.default_binary(
            profile.default_cc, current_os_identifier()
        )
    if role == ToolRole.CXX_COMPILER:
        return read_string_env("CXX") or profile.default_binary(
            profile.default_cxx, current_os_identifier()
        )
    if role == ToolRole.MAKE:
        return read_string_env("MAKE") or find_command("make")
    raise ConfigurationError(f"Unknown tool role {role!r}")
