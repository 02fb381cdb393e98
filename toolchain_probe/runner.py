"""
Survey runner — top-level orchestration: host toolchain → capability report.

This module ties the probes, policy verdicts and IO together into a
single ``run_survey`` function that can be called from a build script,
from the CLI, or programmatically.
"""
from __future__ import annotations

import argparse
import logging
import shlex
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from toolchain_probe import probes
from toolchain_probe.config import get_settings
from toolchain_probe.core.headers import find_header
from toolchain_probe.core.language import resolve_language
from toolchain_probe.core.platform import current_os_identifier, find_command
from toolchain_probe.errors import ConfigurationError
from toolchain_probe.io.schema import (
    CapabilityEntry,
    CapabilityReport,
    HeaderEntry,
    ToolchainInfo,
    VerdictCounts,
)
from toolchain_probe.io.writer import write_report
from toolchain_probe.policy.profile import DEFAULT_PROFILE, ProbeProfile
from toolchain_probe.policy.verdict import (
    ToolchainVerdict,
    Verdict,
    gate_toolchain,
    judge_capability,
    judge_error,
)

logger = logging.getLogger(__name__)


# Every argument-free probe, in report order.
SURVEY_PROBES: List[Tuple[str, Callable[[], object]]] = [
    ("cc_is_gcc", probes.cc_is_gcc),
    ("cc_is_clang", probes.cc_is_clang),
    ("cxx_is_clang", probes.cxx_is_clang),
    ("cc_is_sun_studio", probes.cc_is_sun_studio),
    ("compiler_supports_visibility_flag", probes.compiler_supports_visibility_flag),
    ("compiler_supports_wno_attributes_flag", probes.compiler_supports_wno_attributes_flag),
    ("compiler_supports_wno_missing_field_initializers_flag",
     probes.compiler_supports_wno_missing_field_initializers_flag),
    ("compiler_supports_no_tls_direct_seg_refs_option",
     probes.compiler_supports_no_tls_direct_seg_refs_option),
    ("compiler_supports_wno_ambiguous_member_template",
     probes.compiler_supports_wno_ambiguous_member_template),
    ("compiler_supports_feliminate_unused_debug", probes.compiler_supports_feliminate_unused_debug),
    ("compiler_visibility_flag_generates_warnings",
     probes.compiler_visibility_flag_generates_warnings),
    ("has_math_library", probes.has_math_library),
    ("has_alloca_h", probes.has_alloca_h),
    ("debugging_cflags", probes.debugging_cflags),
    ("dmalloc_ldflags", probes.dmalloc_ldflags),
    ("electric_fence_ldflags", probes.electric_fence_ldflags),
    ("export_dynamic_flags", probes.export_dynamic_flags),
]


def _on_path(command: Optional[str]) -> Optional[str]:
    """Resolve the program word of *command* on PATH."""
    if not command:
        return None
    try:
        words = shlex.split(command)
    except ValueError:
        return None
    return find_command(words[0]) if words else None


def _probe_entry(name: str, fn: Callable[[], object]) -> CapabilityEntry:
    try:
        value = fn()
    except Exception as e:
        logger.error("probe %s raised: %s", name, e, exc_info=True)
        verdict, reasons = judge_error(e)
        return CapabilityEntry(name=name, verdict=verdict.value, reasons=reasons, error=str(e))

    if isinstance(value, Path):
        value = str(value)
    verdict, reasons = judge_capability(value)
    return CapabilityEntry(name=name, value=value, verdict=verdict.value, reasons=reasons)


def run_survey(
    profile: ProbeProfile | None = None,
    output_dir: Path | None = None,
    headers: Sequence[Tuple[str, str]] = (),
) -> CapabilityReport:
    """
    Run every argument-free probe against the host toolchain.

    Parameters
    ----------
    profile : ProbeProfile, optional
        Defaults to DEFAULT_PROFILE.
    output_dir : Path, optional
        Directory to write capability_report.json.  If None, the report
        is only returned.
    headers : sequence of (header_name, language)
        Headers to locate in addition to the capability probes.

    Raises
    ------
    ConfigurationError
        If a requested header names an unsupported language.
    """
    if profile is None:
        profile = DEFAULT_PROFILE

    # Validate requests before any process is spawned.
    header_requests = [(name, resolve_language(lang)) for name, lang in headers]

    # ── Step 1: resolve the toolchain ────────────────────────────────
    toolchain = ToolchainInfo(
        os_name=current_os_identifier(),
        cc=probes.cc(),
        cxx=probes.cxx(),
        make=probes.make(),
        gnu_make=probes.gnu_make(),
    )

    # ── Step 2: toolchain gate ───────────────────────────────────────
    verdict, reasons = gate_toolchain(
        _on_path(toolchain.cc), _on_path(toolchain.cxx), toolchain.make
    )
    report = CapabilityReport(
        profile_id=profile.profile_id,
        toolchain=toolchain,
        verdict=verdict.value,
        reasons=reasons,
    )
    if verdict == ToolchainVerdict.UNUSABLE:
        logger.warning("no usable C compiler (%s); skipping probes", toolchain.cc)
        if output_dir:
            write_report(report, output_dir)
        return report

    # ── Step 3: capability probes ────────────────────────────────────
    counts = VerdictCounts()
    for name, fn in SURVEY_PROBES:
        entry = _probe_entry(name, fn)
        report.capabilities.append(entry)

        counts.total += 1
        if entry.verdict == Verdict.SUPPORTED.value:
            counts.supported += 1
        elif entry.verdict == Verdict.UNSUPPORTED.value:
            counts.unsupported += 1
        else:
            counts.error += 1
    report.counts = counts

    # ── Step 4: header lookups ───────────────────────────────────────
    for name, lang in header_requests:
        lookup = find_header(name, lang, profile=profile)
        report.headers.append(HeaderEntry(
            name=name,
            language=lang.value,
            status=lookup.status.value,
            path=str(lookup.path) if lookup.path else None,
        ))

    if output_dir:
        write_report(report, output_dir)

    return report


# ── CLI ──────────────────────────────────────────────────────────────────────

def _parse_header(spec: str) -> Tuple[str, str]:
    """``name`` or ``name:language`` (language defaults to c)."""
    name, sep, lang = spec.rpartition(":")
    if not sep:
        return spec, "c"
    return name, lang


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point for toolchain_probe."""
    parser = argparse.ArgumentParser(
        description="toolchain_probe — probe the host C/C++ toolchain for build capabilities",
    )
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME[:LANG]",
        help="Locate a header (LANG is c or cxx, default c); may be repeated",
    )
    parser.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=None,
        help="Directory to write capability_report.json",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Trace every probe command, source and result",
    )
    args = parser.parse_args(argv)

    verbose = args.verbose or get_settings().PROBE_VERBOSE
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        report = run_survey(
            output_dir=args.output_dir,
            headers=[_parse_header(h) for h in args.header],
        )
    except ConfigurationError as e:
        logger.error("%s", e)
        return 2

    # Print summary
    print(f"Toolchain: {report.verdict} "
          f"(cc={report.toolchain.cc}, cxx={report.toolchain.cxx}, make={report.toolchain.make})")
    for entry in report.capabilities:
        print(f"  {entry.name}: {entry.value!r} [{entry.verdict}]")
    for header in report.headers:
        print(f"  <{header.name}> ({header.language}): {header.status} {header.path or ''}".rstrip())
    print(f"Capabilities: {report.counts.total} "
          f"(supported={report.counts.supported}, "
          f"unsupported={report.counts.unsupported}, "
          f"error={report.counts.error})")

    if args.output_dir:
        print(f"Report written to: {args.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
