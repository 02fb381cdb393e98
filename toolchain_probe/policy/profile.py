"""
Profile — probe constants and tunable parameters.

The profile encapsulates every fixed knob the probes rely on (temp-file
name patterns, default binaries, library search prefixes, diagnostic
markers) so that core logic contains no opinions.  Supporting another
platform family is a profile change, not a code change.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class ProbeProfile:
    """Describes how the probes name their artifacts and read the toolchain."""

    # Identity
    profile_id: str

    # Transient source name patterns (stem + extension placeholder)
    compile_check_name: str = "probe-compile-check"
    link_check_name: str = "probe-link-check"
    run_check_name: str = "probe-run-check"

    # By-product suffixes appended to the generated source path
    object_suffix: str = ".o"
    executable_suffix: str = ".out"

    # Platform-specific default compilers; "*" is the fallback
    default_cc: Dict[str, str] = field(default_factory=dict)
    default_cxx: Dict[str, str] = field(default_factory=dict)

    # Prefixes searched for static debug allocators on macOS
    library_prefixes: List[str] = field(default_factory=list)

    # Verbose-compile header search block markers
    search_start_marker: str = "#include <...> search starts here:"
    search_end_marker: str = "End of search list."

    # g++ releases at or below this emit spurious -fvisibility warnings
    visibility_warning_max_gcc: Tuple[int, ...] = (4, 1, 2)

    @classmethod
    def v0(cls) -> "ProbeProfile":
        """The default profile: gcc/g++ everywhere except macOS (cc/c++)."""
        return cls(
            profile_id="host-c-cxx-v0",
            default_cc={"macosx": "cc", "*": "gcc"},
            default_cxx={"macosx": "c++", "*": "g++"},
            library_prefixes=["/opt/local", "/usr/local", "/usr"],
        )

    def default_binary(self, table: Dict[str, str], os_name: str) -> str:
        """Look up *os_name* in a default-binary table, falling back to '*'."""
        return table.get(os_name, table["*"])


DEFAULT_PROFILE = ProbeProfile.v0()
