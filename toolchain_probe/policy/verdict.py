"""
Verdict — structured decisions with reason enums.

Three layers:
  1. Toolchain gate  (gate_toolchain)   — can this host probe anything at all?
  2. Capability judge (judge_capability) — what does one probe's value mean?
  3. Run-check verdicts (RunVerdict)     — where a compile-and-run check stopped.

Policy rules take plain values and never import core/.
"""
from enum import Enum, unique
from pathlib import Path
from typing import List, Optional, Tuple


# ── Verdict enums ────────────────────────────────────────────────────────────

@unique
class ToolchainVerdict(str, Enum):
    READY = "READY"
    DEGRADED = "DEGRADED"
    UNUSABLE = "UNUSABLE"


@unique
class Verdict(str, Enum):
    SUPPORTED = "SUPPORTED"
    UNSUPPORTED = "UNSUPPORTED"
    ERROR = "ERROR"


@unique
class RunVerdict(str, Enum):
    PASSED = "PASSED"
    BUILD_FAILED = "BUILD_FAILED"      # compile or link step failed
    RUN_FAILED = "RUN_FAILED"          # program built but exited nonzero
    UNRUNNABLE = "UNRUNNABLE"          # program built but could not be spawned


# ── Reasons ──────────────────────────────────────────────────────────────────

@unique
class ToolchainReason(str, Enum):
    CC_NOT_FOUND = "CC_NOT_FOUND"
    CXX_NOT_FOUND = "CXX_NOT_FOUND"
    MAKE_NOT_FOUND = "MAKE_NOT_FOUND"


@unique
class CapabilityReason(str, Enum):
    VALUE_ABSENT = "VALUE_ABSENT"
    PROBE_RAISED = "PROBE_RAISED"


# ── Toolchain gate ───────────────────────────────────────────────────────────

def gate_toolchain(
    cc_path: Optional[str],
    cxx_path: Optional[str],
    make_path: Optional[str],
) -> Tuple[ToolchainVerdict, List[str]]:
    """
    Evaluate which toolchain binaries resolved on this host.

    A missing C compiler makes every probe meaningless → UNUSABLE.
    A missing C++ compiler or make only narrows what can be probed.
    """
    reasons: List[str] = []

    if not cc_path:
        reasons.append(ToolchainReason.CC_NOT_FOUND.value)
    if not cxx_path:
        reasons.append(ToolchainReason.CXX_NOT_FOUND.value)
    if not make_path:
        reasons.append(ToolchainReason.MAKE_NOT_FOUND.value)

    if ToolchainReason.CC_NOT_FOUND.value in reasons:
        return ToolchainVerdict.UNUSABLE, reasons
    if reasons:
        return ToolchainVerdict.DEGRADED, reasons
    return ToolchainVerdict.READY, []


# ── Capability judge ─────────────────────────────────────────────────────────

def judge_capability(value: object) -> Tuple[Verdict, List[str]]:
    """
    Interpret a probe's return value.

    True, a non-empty flag string or a path → SUPPORTED.
    False, None or an empty string → UNSUPPORTED.
    """
    if isinstance(value, bool):
        if value:
            return Verdict.SUPPORTED, []
        return Verdict.UNSUPPORTED, [CapabilityReason.VALUE_ABSENT.value]

    if isinstance(value, (str, Path)) and str(value):
        return Verdict.SUPPORTED, []

    return Verdict.UNSUPPORTED, [CapabilityReason.VALUE_ABSENT.value]


def judge_error(exc: BaseException) -> Tuple[Verdict, List[str]]:
    """A probe that raised is reported, not propagated, by the survey."""
    return Verdict.ERROR, [CapabilityReason.PROBE_RAISED.value]
