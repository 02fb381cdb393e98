"""
Errors — the small exception taxonomy of the probe.

Only caller misuse is raised.  A missing toolchain binary or a compiler
that rejects its input is an *outcome* (see core.executor), never an
exception, so configuration logic can always branch on a plain value.
"""


class ProbeError(Exception):
    """Base class for errors raised by toolchain_probe."""


class ConfigurationError(ProbeError, ValueError):
    """Invalid call-time configuration, e.g. an unsupported language tag."""
