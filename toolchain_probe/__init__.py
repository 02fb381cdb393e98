"""
toolchain_probe — build-time capability probes for a host C/C++ toolchain.

Answers the questions a build system cannot answer statically: does the
compiler accept a flag, where does a header live, does a small program
compile, link and run.  See SPEC_FULL.md for the scope contract.
"""

__version__ = "0.1.0"
PACKAGE_NAME = "toolchain_probe"
SCHEMA_VERSION = "0.1"
