"""
Schema — Pydantic models for the capability report.

One output per survey: capability_report.json, holding the toolchain
gate verdict and one entry per probe.

Runtime contract fields (present in every output):
  package_name, package_version, profile_id, schema_version.
"""
from datetime import datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from toolchain_probe import PACKAGE_NAME, SCHEMA_VERSION, __version__


# ── Toolchain facts ──────────────────────────────────────────────────────────

class ToolchainInfo(BaseModel):
    """Binaries the survey resolved, as the probes would use them."""
    os_name: str
    cc: Optional[str] = None
    cxx: Optional[str] = None
    make: Optional[str] = None
    gnu_make: Optional[str] = None


# ── Per-probe entry ──────────────────────────────────────────────────────────

class CapabilityEntry(BaseModel):
    """One probe and its answer."""

    name: str
    value: Union[bool, str, None] = None

    verdict: str             # SUPPORTED | UNSUPPORTED | ERROR
    reasons: List[str] = Field(default_factory=list)

    error: Optional[str] = None


class HeaderEntry(BaseModel):
    """Where the compiler finds one requested header."""

    name: str
    language: str
    status: str              # FOUND | PRESENT_PATH_UNKNOWN | NOT_FOUND
    path: Optional[str] = None


class VerdictCounts(BaseModel):
    total: int = 0
    supported: int = 0
    unsupported: int = 0
    error: int = 0


# ── Survey report ────────────────────────────────────────────────────────────

class CapabilityReport(BaseModel):
    """Host-level summary — capability_report.json."""

    package_name: str = PACKAGE_NAME
    package_version: str = __version__
    schema_version: str = SCHEMA_VERSION
    profile_id: str

    toolchain: ToolchainInfo
    verdict: str              # READY | DEGRADED | UNUSABLE (toolchain gate)
    reasons: List[str] = Field(default_factory=list)

    capabilities: List[CapabilityEntry] = Field(default_factory=list)
    counts: VerdictCounts = Field(default_factory=VerdictCounts)

    headers: List[HeaderEntry] = Field(default_factory=list)

    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
