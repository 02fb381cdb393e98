"""
Probe executor — run one synthesized command and classify the outcome.

Three outcomes, kept apart by every caller:

  - Success         exit status 0 (captured output attached in CAPTURE mode)
  - Failure         the toolchain ran and exited nonzero
  - ExecutionError  the toolchain could not be spawned at all

The command line is split with POSIX shell-word rules and spawned
directly rather than through ``sh -c``, so a missing or non-executable
compiler surfaces as ExecutionError instead of a shell's exit 127.
"""
import shlex
import subprocess
from dataclasses import dataclass
from enum import Enum, unique
from typing import List, Optional

from toolchain_probe.core.diagnostics import (
    describe_source,
    diagnostics_enabled,
    emit_diagnostic,
    format_block,
)


@unique
class ProbeMode(str, Enum):
    SILENT = "silent"      # streams to the null device
    VERBOSE = "verbose"    # streams inherited from the operator's console
    CAPTURE = "capture"    # combined stdout+stderr captured as text


# ── Outcomes ─────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ProbeOutcome:
    """Base for the three execution outcomes."""

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True)
class Success(ProbeOutcome):
    output: Optional[str] = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure(ProbeOutcome):
    status: int


@dataclass(frozen=True)
class ExecutionError(ProbeOutcome):
    reason: str


# ── Execution ────────────────────────────────────────────────────────────────

def default_mode() -> ProbeMode:
    """VERBOSE when diagnostics are on, SILENT otherwise."""
    return ProbeMode.VERBOSE if diagnostics_enabled() else ProbeMode.SILENT


def split_command(command: str) -> List[str]:
    """Split a synthesized command line into argv."""
    argv = shlex.split(command)
    if not argv:
        raise ValueError("empty command line")
    return argv


def _spawn(argv: List[str], mode: ProbeMode) -> subprocess.CompletedProcess:
    if mode == ProbeMode.SILENT:
        return subprocess.run(
            argv,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    if mode == ProbeMode.VERBOSE:
        return subprocess.run(argv, stdin=subprocess.DEVNULL)
    return subprocess.run(
        argv,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        errors="replace",
    )


def execute(
    description: str,
    command: str,
    source: str = "",
    mode: Optional[ProbeMode] = None,
) -> ProbeOutcome:
    """
    Run *command* in *mode* and classify the result.

    Parameters
    ----------
    description : str
        Human-readable name of the check, used in the trace.
    command : str
        The literal command line, as produced by core.command.synthesize.
    source : str
        Source text of the probe, reproduced in the trace.
    mode : ProbeMode, optional
        Defaults to default_mode().

    Never raises for a missing toolchain; that is an ExecutionError.
    """
    if mode is None:
        mode = default_mode()

    if diagnostics_enabled():
        emit_diagnostic(f"{description}\nRunning: {command}\n{describe_source(source)}")

    try:
        argv = split_command(command)
        completed = _spawn(argv, mode)
    except (OSError, ValueError) as e:
        reason = str(e)
        emit_diagnostic(f"Command could not be executed! {reason}".strip())
        return ExecutionError(reason=reason)

    output = completed.stdout if mode == ProbeMode.CAPTURE else None
    if output is not None:
        emit_diagnostic(format_block("Output:", output))

    if completed.returncode == 0:
        emit_diagnostic("Check succeeded")
        return Success(output=output)

    emit_diagnostic(f"Check failed with exit status {completed.returncode}")
    return Failure(status=completed.returncode)


def capture(command: str) -> Optional[str]:
    """
    Combined stdout+stderr of *command* whatever its exit status.

    Used for identity queries (``cc -v``, ``make --version``) where the
    text matters more than the status.  None if it cannot be spawned.
    """
    try:
        completed = _spawn(split_command(command), ProbeMode.CAPTURE)
    except (OSError, ValueError) as e:
        emit_diagnostic(f"Command could not be executed! {e}".strip())
        return None
    return completed.stdout
