"""
test_cache — per-process memoization of probes.

Tests verify invariant properties:
  - A cached probe spawns the toolchain exactly once per process.
  - A force-fresh probe spawns it on every call.
  - clear_cache() forgets everything; cache_clear() forgets one probe.
"""
from toolchain_probe import probes
from toolchain_probe.core.cache import clear_cache, memoize


class TestMemoize:

    def test_computed_once(self):
        calls = []

        @memoize()
        def probe():
            calls.append(1)
            return "value"

        assert probe() == "value"
        assert probe() == "value"
        assert len(calls) == 1

    def test_falsy_values_are_cached(self):
        calls = []

        @memoize()
        def probe():
            calls.append(1)
            return None

        assert probe() is None
        assert probe() is None
        assert len(calls) == 1

    def test_force_fresh_recomputes(self):
        calls = []

        @memoize(force_fresh=True)
        def probe():
            calls.append(1)
            return len(calls)

        assert probe() == 1
        assert probe() == 2
        assert probe.force_fresh is True

    def test_clear(self):
        calls = []

        @memoize()
        def probe():
            calls.append(1)
            return True

        probe()
        clear_cache()
        probe()
        probe.cache_clear()
        probe()
        assert len(calls) == 3

    def test_same_name_different_functions(self):
        def make(value):
            @memoize()
            def probe():
                return value
            return probe

        first = make("first")
        second = make("second")
        assert first.__qualname__ == second.__qualname__
        assert first() == "first"
        assert second() == "second"

    def test_wraps_metadata(self):
        @memoize()
        def some_probe():
            """Docstring."""
            return 1

        assert some_probe.__name__ == "some_probe"
        assert some_probe.__doc__ == "Docstring."


class TestProbeSpawns:

    def test_cached_probe_spawns_once(self, workdir, spawn_counter, monkeypatch):
        monkeypatch.setenv("CC", "gcc")
        assert probes.compiler_supports_wno_attributes_flag() is True
        assert probes.compiler_supports_wno_attributes_flag() is True
        assert len(spawn_counter) == 1
        assert spawn_counter[0][0] == "gcc"
        assert "-Wno-attributes" in spawn_counter[0]

    def test_uncached_probe_spawns_every_time(self, workdir, spawn_counter, monkeypatch):
        monkeypatch.setenv("CC", "gcc")
        probes.compiler_supports_architecture("x86_64")
        probes.compiler_supports_architecture("x86_64")
        assert len(spawn_counter) == 2

    def test_force_fresh_probe_tracks_environment(self, monkeypatch):
        monkeypatch.setenv("MAKE", "make-one")
        assert probes.make() == "make-one"
        monkeypatch.setenv("MAKE", "make-two")
        assert probes.make() == "make-two"

    def test_force_fresh_probe_spawns_every_call(self, monkeypatch):
        from toolchain_probe.core import executor

        spawned = []
        monkeypatch.delenv("GMAKE", raising=False)
        monkeypatch.setattr(probes, "find_command", lambda name: "/usr/bin/make" if name == "make" else None)
        monkeypatch.setattr(executor, "_spawn", lambda argv, mode: spawned.append(argv) or _gnu_version(argv))

        assert probes.gnu_make() == "/usr/bin/make"
        assert probes.gnu_make() == "/usr/bin/make"
        assert len(spawned) == 2


def _gnu_version(argv):
    import subprocess

    return subprocess.CompletedProcess(argv, 0, stdout="GNU Make 4.3\n")
