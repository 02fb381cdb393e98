"""
Checks — the compile / link / run building blocks every probe uses.

Each check owns exactly one transient source (plus its by-products) and
spawns exactly one toolchain process; run checks spawn the built program
once more.  All artifacts are gone before the check returns.
"""
import logging
import subprocess
from dataclasses import dataclass, replace
from typing import Optional, Union

from toolchain_probe.core.command import synthesize
from toolchain_probe.core.diagnostics import emit_diagnostic, format_block
from toolchain_probe.core.executor import ProbeMode, ProbeOutcome, execute
from toolchain_probe.core.language import Language, resolve_language
from toolchain_probe.core.transient import executable_dir, temp_source
from toolchain_probe.policy.profile import DEFAULT_PROFILE, ProbeProfile
from toolchain_probe.policy.verdict import RunVerdict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeRequest:
    """One toolchain invocation: what to compile, how, and why."""

    description: str
    language: Language
    source: str = ""
    flags1: Optional[str] = None
    flags2: Optional[str] = None
    link: bool = False

    @property
    def command(self) -> str:
        return synthesize(self.language, self.flags1, self.flags2, self.link)


@dataclass(frozen=True)
class RunCheckResult:
    verdict: RunVerdict
    exit_status: Optional[int] = None
    output: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.verdict == RunVerdict.PASSED


def _request(description, language, source, flags, link=False) -> ProbeRequest:
    # flags1 is filled in once the artifact paths exist
    return ProbeRequest(
        description=description,
        language=resolve_language(language),
        source=source,
        flags2=flags,
        link=link,
    )


def _invoke(req: ProbeRequest, flags1: str, mode: Optional[ProbeMode] = None) -> ProbeOutcome:
    req = replace(req, flags1=flags1)
    return execute(req.description, req.command, req.source, mode)


def _compile(
    req: ProbeRequest,
    profile: ProbeProfile,
    mode: Optional[ProbeMode] = None,
) -> ProbeOutcome:
    name = f"{profile.compile_check_name}.{req.language.extension}"

    with temp_source(name, req.source) as artifact:
        obj = artifact.register(f"{artifact.path}{profile.object_suffix}")
        return _invoke(req, f"-c '{artifact.path}' -o '{obj}'", mode)


def try_compile(
    description: str,
    language: Union[Language, str],
    source: str,
    flags: Optional[str] = None,
    profile: ProbeProfile = DEFAULT_PROFILE,
) -> bool:
    """Whether *source* compiles to an object file with *flags*."""
    req = _request(description, language, source, flags)
    return _compile(req, profile).ok


def compile_output(
    description: str,
    language: Union[Language, str],
    source: str,
    flags: Optional[str] = None,
    profile: ProbeProfile = DEFAULT_PROFILE,
) -> ProbeOutcome:
    """Like try_compile, but in CAPTURE mode, returning the raw outcome."""
    req = _request(description, language, source, flags)
    return _compile(req, profile, ProbeMode.CAPTURE)


def try_link(
    description: str,
    language: Union[Language, str],
    source: str,
    flags: Optional[str] = None,
    profile: ProbeProfile = DEFAULT_PROFILE,
) -> bool:
    """Whether *source* compiles and links into an executable with *flags*."""
    req = _request(description, language, source, flags, link=True)
    name = f"{profile.link_check_name}.{req.language.extension}"

    with temp_source(name, req.source) as artifact:
        exe = artifact.register(f"{artifact.path}{profile.executable_suffix}")
        return _invoke(req, f"'{artifact.path}' -o '{exe}'").ok


def run_check(
    description: str,
    language: Union[Language, str],
    source: str,
    flags: Optional[str] = None,
    profile: ProbeProfile = DEFAULT_PROFILE,
) -> RunCheckResult:
    """
    Compile and link *source*, then run the program.

    The executable lives in a private directory apart from the source.
    A build failure and a nonzero program exit are reported separately.
    """
    req = _request(description, language, source, flags, link=True)
    name = f"{profile.run_check_name}.{req.language.extension}"

    with temp_source(name, req.source) as artifact, executable_dir() as exe_dir:
        exe = artifact.register(exe_dir / f"{artifact.path.name}{profile.executable_suffix}")
        if not _invoke(req, f"'{artifact.path}' -o '{exe}'").ok:
            return RunCheckResult(RunVerdict.BUILD_FAILED)

        emit_diagnostic(f"Running {exe}")
        try:
            completed = subprocess.run(
                [str(exe)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as e:
            emit_diagnostic(f"Command failed: {e}")
            return RunCheckResult(RunVerdict.UNRUNNABLE)

    status = completed.returncode
    emit_diagnostic(format_block(f"Command exited with status {status}. Output:", completed.stdout))
    if status != 0:
        logger.debug("run check failed: %s exited with status %d", description, status)
        return RunCheckResult(RunVerdict.RUN_FAILED, status, completed.stdout)
    return RunCheckResult(RunVerdict.PASSED, status, completed.stdout)


def try_compile_and_run(
    description: str,
    language: Union[Language, str],
    source: str,
    flags: Optional[str] = None,
    profile: ProbeProfile = DEFAULT_PROFILE,
) -> bool:
    """Whether *source* builds and its program exits 0."""
    return run_check(description, language, source, flags, profile).passed
