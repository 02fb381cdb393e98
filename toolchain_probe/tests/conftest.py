"""
Shared pytest fixtures for toolchain_probe tests.

Provides an isolated work directory for transient artifacts, a clean
capability cache per test, and a session-wide gcc availability check
for the tests that drive a real toolchain.

Requirements for the toolchain tests:
  - gcc must be available on PATH (they are skipped otherwise)
"""
import shutil
import sys
import textwrap
from pathlib import Path

import pytest

from toolchain_probe.core.cache import clear_cache

# Program that compiles, links and exits 1 when run.
EXIT_ONE_C = textwrap.dedent("""\
    #include <stdio.h>

    int main(void) {
        printf("about to fail\\n");
        return 1;
    }
""")

EXIT_ZERO_C = textwrap.dedent("""\
    int main(void) {
        return 0;
    }
""")

BROKEN_C = textwrap.dedent("""\
    int main(void) {
        return this_is_not_declared;
    }
""")

# Shape of the search-list block gcc and clang print under -v.
SEARCH_LIST_OUTPUT = textwrap.dedent("""\
    Using built-in specs.
    #include "..." search starts here:
    #include <...> search starts here:
     {first}
     {second}
    End of search list.
""")

# Overrides the probes read; cleared before every test.
OVERRIDE_VARS = (
    "CC", "CXX", "MAKE", "GMAKE",
    "EXTRA_PRE_CFLAGS", "EXTRA_PRE_CXXFLAGS", "EXTRA_CFLAGS", "EXTRA_CXXFLAGS",
    "EXTRA_PRE_LDFLAGS", "EXTRA_LDFLAGS", "DMALLOC_LIBS",
    "PROBE_WORKDIR", "PROBE_EXEDIR", "PROBE_VERBOSE",
)


def _python_command(code: str) -> str:
    return f"'{sys.executable}' -c '{code}'"


@pytest.fixture
def python_command():
    """Factory: a command line running *code* under the current interpreter."""
    return _python_command


@pytest.fixture
def search_list_output():
    """Factory: verbose-compile output listing two include directories."""
    def build(first, second) -> str:
        return SEARCH_LIST_OUTPUT.format(first=first, second=second)
    return build


@pytest.fixture
def sources():
    """Named C snippets for the toolchain tests."""
    return {"exit_zero": EXIT_ZERO_C, "exit_one": EXIT_ONE_C, "broken": BROKEN_C}


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without inherited toolchain overrides."""
    for var in OVERRIDE_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    """Private directory all transient sources are created in."""
    d = tmp_path / "work"
    d.mkdir()
    monkeypatch.setenv("PROBE_WORKDIR", str(d))
    return d


@pytest.fixture(scope="session")
def gcc_ok():
    """Skip tests if gcc is not available."""
    if shutil.which("gcc") is None:
        pytest.skip("gcc not available - install gcc to run these tests")


@pytest.fixture
def gcc_toolchain(gcc_ok, workdir, monkeypatch) -> Path:
    """gcc/g++ pinned as the toolchain, with an isolated work directory."""
    monkeypatch.setenv("CC", "gcc")
    if shutil.which("g++") is not None:
        monkeypatch.setenv("CXX", "g++")
    return workdir


@pytest.fixture
def spawn_counter(monkeypatch):
    """Count (and fake) every toolchain process the executor spawns."""
    import subprocess

    from toolchain_probe.core import executor

    calls = []

    def fake_spawn(argv, mode):
        calls.append(list(argv))
        return subprocess.CompletedProcess(argv, 0, stdout="" if mode == executor.ProbeMode.CAPTURE else None)

    monkeypatch.setattr(executor, "_spawn", fake_spawn)
    return calls
