"""
Diagnostics — the single logging seam every probe trace goes through.

Traces are emitted on the ``toolchain_probe`` logger at DEBUG.  Whether
they are wanted is decided by the logging configuration alone, so the
CLI's ``--verbose`` and a test's ``caplog.set_level`` both just work.
"""
import logging
import textwrap

logger = logging.getLogger("toolchain_probe")

RULE = "-------------------------"


def diagnostics_enabled() -> bool:
    return logger.isEnabledFor(logging.DEBUG)


def emit_diagnostic(text: str) -> None:
    logger.debug(text)


def format_block(title: str, body: str) -> str:
    """Render *body* between two rules, under *title*."""
    return f"{title}\n{RULE}\n{body}\n{RULE}"


def describe_source(source: str) -> str:
    """Source-file part of a probe trace."""
    if not source.strip():
        return "Source file is empty."
    return format_block("Source file contains:", textwrap.dedent(source).strip("\n"))
