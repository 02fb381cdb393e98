"""
Probe configuration — environment overrides read through pydantic-settings.
"""
import os
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseSettings):
    """Environment overrides consulted by the probes"""

    # Toolchain binaries
    CC: Optional[str] = None
    CXX: Optional[str] = None
    MAKE: Optional[str] = None
    GMAKE: Optional[str] = None

    # Flag overrides layered into every synthesized command
    EXTRA_PRE_CFLAGS: Optional[str] = None
    EXTRA_PRE_CXXFLAGS: Optional[str] = None
    EXTRA_CFLAGS: Optional[str] = None
    EXTRA_CXXFLAGS: Optional[str] = None
    EXTRA_PRE_LDFLAGS: Optional[str] = None
    EXTRA_LDFLAGS: Optional[str] = None

    # Debug allocator
    DMALLOC_LIBS: Optional[str] = None

    # Transient artifacts
    PROBE_WORKDIR: Optional[str] = None
    PROBE_EXEDIR: Optional[str] = None

    # Diagnostics
    PROBE_VERBOSE: bool = False

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    @field_validator("PROBE_VERBOSE", mode="before")
    @classmethod
    def parse_verbose(cls, v):
        """Anything other than a recognised truthy word means off."""
        if isinstance(v, bool):
            return v
        return str(v).strip().lower() in _TRUTHY


def get_settings() -> Settings:
    """
    Build a fresh Settings from the current environment.

    Not cached: the environment may change between probes and the
    force-fresh probes must observe that.
    """
    return Settings()


def read_string_env(name: str) -> Optional[str]:
    """Return the override *name*, or None when it is unset or empty."""
    if name in Settings.model_fields:
        value = getattr(get_settings(), name)
    else:
        value = os.environ.get(name)
    if value is None:
        return None
    value = str(value)
    return value if value.strip() else None
