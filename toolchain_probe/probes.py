"""
Probes — the public capability questions the native build asks.

Every probe answers with a plain value: a bool, a flag string (or None
when the capability is absent), or a tool path.  A missing toolchain
reads as "capability absent"; nothing here raises for it.

Cache policy per probe:
  - memoize()                 fixed toolchain property, computed once
  - memoize(force_fresh=True) tracks PATH / env changes mid-process
  - not memoized              cheap, or takes an argument
"""
import logging
import re
from pathlib import Path
from typing import Optional, Tuple

from toolchain_probe.config import read_string_env
from toolchain_probe.core.cache import memoize
from toolchain_probe.core.checks import compile_output, try_compile, try_link
from toolchain_probe.core.executor import capture
from toolchain_probe.core.language import Language, ToolRole
from toolchain_probe.core.platform import current_os_identifier, find_command, resolve_binary
from toolchain_probe.policy.profile import DEFAULT_PROFILE

logger = logging.getLogger(__name__)


# ── Toolchain binaries ───────────────────────────────────────────────────────

def cc() -> str:
    return resolve_binary(ToolRole.C_COMPILER)


def cxx() -> str:
    return resolve_binary(ToolRole.CXX_COMPILER)


def default_cc() -> str:
    # macOS aliases cc to clang; mixing it with a gcc-built C++ runtime
    # produces linker errors, so follow the system alias there.
    return DEFAULT_PROFILE.default_binary(DEFAULT_PROFILE.default_cc, current_os_identifier())


def default_cxx() -> str:
    return DEFAULT_PROFILE.default_binary(DEFAULT_PROFILE.default_cxx, current_os_identifier())


@memoize(force_fresh=True)
def make() -> Optional[str]:
    return resolve_binary(ToolRole.MAKE)


@memoize(force_fresh=True)
def gnu_make() -> Optional[str]:
    """GNU make: GMAKE, else ``gmake`` on PATH, else ``make`` if it is GNU."""
    result = read_string_env("GMAKE") or find_command("gmake")
    if result:
        return result

    result = find_command("make")
    if result and "GNU" in (capture(f"'{result}' --version") or ""):
        return result
    return None


# ── Compiler identity ────────────────────────────────────────────────────────

@memoize()
def cc_is_gcc() -> bool:
    return "gcc version" in (capture(f"{cc()} -v") or "")


@memoize()
def cc_is_clang() -> bool:
    return "clang version" in (capture(f"{cc()} --version") or "")


@memoize()
def cxx_is_clang() -> bool:
    return "clang version" in (capture(f"{cxx()} --version") or "")


@memoize()
def cc_is_sun_studio() -> bool:
    return any(
        "Sun C" in (capture(f"{cc()} {flag}") or "")
        for flag in ("-V", "-flags")
    )


# ── Flag support ─────────────────────────────────────────────────────────────

def compiler_supports_architecture(arch: str) -> bool:
    """Whether the C compiler accepts ``-arch <arch>``."""
    return try_compile(
        "Checking for C compiler '-arch' support",
        Language.C, "", f"-arch {arch}",
    )


@memoize()
def compiler_supports_visibility_flag() -> bool:
    if "aix" in current_os_identifier():
        logger.debug("-fvisibility is broken on AIX; not asking the compiler")
        return False
    return try_compile(
        "Checking for C compiler '-fvisibility' support",
        Language.C, "", "-fvisibility=hidden",
    )


@memoize()
def compiler_supports_wno_attributes_flag() -> bool:
    return try_compile(
        "Checking for C compiler '-Wno-attributes' support",
        Language.C, "", "-Wno-attributes",
    )


@memoize()
def compiler_supports_wno_missing_field_initializers_flag() -> bool:
    return try_compile(
        "Checking for C compiler '-Wno-missing-field-initializers' support",
        Language.C, "", "-Wno-missing-field-initializers",
    )


@memoize()
def compiler_supports_no_tls_direct_seg_refs_option() -> bool:
    return try_compile(
        "Checking for C compiler '-mno-tls-direct-seg-refs' support",
        Language.C, "", "-mno-tls-direct-seg-refs",
    )


@memoize()
def compiler_supports_wno_ambiguous_member_template() -> bool:
    return try_compile(
        "Checking for C compiler '-Wno-ambiguous-member-template' support",
        Language.C, "", "-Wno-ambiguous-member-template",
    )


def compiler_supports_feliminate_unused_debug() -> bool:
    """Both -feliminate-unused-debug-* flags accepted without a single warning."""
    outcome = compile_output(
        "Checking for C compiler '-feliminate-unused-debug-{symbols,types}' support",
        Language.C, "",
        "-feliminate-unused-debug-symbols -feliminate-unused-debug-types",
    )
    return outcome.ok and not (outcome.output or "").strip()


def _gcc_version(text: str) -> Optional[Tuple[int, ...]]:
    m = re.search(r"gcc version (\d+(?:\.\d+)*)", text)
    if m is None:
        return None
    return tuple(int(part) for part in m.group(1).split("."))


@memoize()
def compiler_visibility_flag_generates_warnings() -> bool:
    """
    Whether g++ floods -fvisibility=hidden builds with useless warnings.

    Old g++ releases do; the warnings are suppressed with -Wno-attributes.
    """
    if current_os_identifier() != "linux":
        return False
    version = _gcc_version(capture(f"{cxx()} -v") or "")
    if version is None:
        return False
    return version <= DEFAULT_PROFILE.visibility_warning_max_gcc


# ── Libraries and headers ────────────────────────────────────────────────────

@memoize()
def has_math_library() -> bool:
    return try_link(
        "Checking for -lmath support",
        Language.C, "int main() { return 0; }\n", "-lmath",
    )


@memoize()
def has_alloca_h() -> bool:
    return try_compile(
        "Checking for alloca.h",
        Language.C, "#include <alloca.h>",
    )


# ── Flag strings ─────────────────────────────────────────────────────────────

def debugging_cflags() -> str:
    """
    C flags that enable debugging information.

    OpenBSD's pthreads misbehave under plain -g and gdb prefers -ggdb
    anyway, so gcc gets -ggdb.
    """
    return "-ggdb" if cc_is_gcc() else "-g"


def _find_static_library(filename: str) -> Optional[str]:
    for prefix in DEFAULT_PROFILE.library_prefixes:
        candidate = Path(prefix) / "lib" / filename
        if candidate.exists():
            return str(candidate)
    return None


@memoize()
def dmalloc_ldflags() -> Optional[str]:
    override = read_string_env("DMALLOC_LIBS")
    if override:
        return override
    if current_os_identifier() == "macosx":
        return _find_static_library("libdmallocthcxx.a")
    return "-ldmallocthcxx"


@memoize()
def electric_fence_ldflags() -> Optional[str]:
    if current_os_identifier() == "macosx":
        return _find_static_library("libefence.a")
    return "-lefence"


def export_dynamic_flags() -> Optional[str]:
    if current_os_identifier() == "linux":
        return "-rdynamic"
    return None
