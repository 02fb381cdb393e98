"""
test_command — command synthesis and language dispatch.

Tests verify invariant properties:
  - The command starts with the resolved compiler for the language.
  - Unset or empty overrides never appear as blank tokens.
  - Overrides land at fixed positions; EXTRA_PRE_LDFLAGS only when linking.
  - Unsupported languages fail with ConfigurationError before any side effect.
"""
import pytest

from toolchain_probe.core.checks import ProbeRequest
from toolchain_probe.core.command import synthesize
from toolchain_probe.core.language import Language, ToolRole, resolve_language
from toolchain_probe.core.platform import resolve_binary
from toolchain_probe.errors import ConfigurationError


class TestLanguage:

    @pytest.mark.parametrize("tag,expected", [
        ("c", Language.C),
        ("C", Language.C),
        ("cxx", Language.CXX),
        ("c++", Language.CXX),
        (Language.CXX, Language.CXX),
    ])
    def test_resolve(self, tag, expected):
        assert resolve_language(tag) is expected

    @pytest.mark.parametrize("tag", ["fortran", "objc", "", None, 3])
    def test_unsupported_tag_rejected(self, tag):
        with pytest.raises(ConfigurationError):
            resolve_language(tag)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_language("rust")

    def test_language_facts(self):
        assert Language.C.extension == "c"
        assert Language.CXX.extension == "cpp"
        assert Language.C.compiler_role == ToolRole.C_COMPILER
        assert Language.CXX.compiler_role == ToolRole.CXX_COMPILER
        assert Language.C.pre_flags_var == "EXTRA_PRE_CFLAGS"
        assert Language.CXX.flags_var == "EXTRA_CXXFLAGS"


class TestSynthesize:

    @pytest.mark.parametrize("language,var,binary", [
        (Language.C, "CC", "my-cc"),
        (Language.CXX, "CXX", "my-cxx"),
    ])
    def test_starts_with_resolved_binary(self, monkeypatch, language, var, binary):
        monkeypatch.setenv(var, binary)
        command = synthesize(language, "-c x.c", "-O2")
        assert command.split()[0] == binary
        assert command == f"{binary} -c x.c -O2"

    def test_default_binary_per_platform(self, monkeypatch):
        from toolchain_probe.core import platform as host

        monkeypatch.setattr(host, "current_os_identifier", lambda: "macosx")
        assert synthesize(Language.C).split()[0] == "cc"
        assert synthesize(Language.CXX).split()[0] == "c++"

        monkeypatch.setattr(host, "current_os_identifier", lambda: "linux")
        assert synthesize(Language.C).split()[0] == "gcc"
        assert synthesize(Language.CXX).split()[0] == "g++"

    def test_no_blank_tokens(self, monkeypatch):
        monkeypatch.setenv("CC", "gcc")
        monkeypatch.setenv("EXTRA_CFLAGS", "")
        monkeypatch.setenv("EXTRA_PRE_CFLAGS", "   ")
        command = synthesize(Language.C, "", None)
        assert command == "gcc"
        assert "  " not in command
        assert "None" not in command

    def test_override_positions_compile(self, monkeypatch):
        monkeypatch.setenv("CC", "gcc")
        monkeypatch.setenv("EXTRA_PRE_LDFLAGS", "-PRELD")
        monkeypatch.setenv("EXTRA_PRE_CFLAGS", "-PRE")
        monkeypatch.setenv("EXTRA_CFLAGS", "-POST")
        monkeypatch.setenv("EXTRA_LDFLAGS", "-LD")
        command = synthesize(Language.C, "-c a.c -o a.o", "-Wall")
        assert command == "gcc -PRE -c a.c -o a.o -Wall -POST -LD"

    def test_override_positions_link(self, monkeypatch):
        monkeypatch.setenv("CXX", "g++")
        monkeypatch.setenv("EXTRA_PRE_LDFLAGS", "-PRELD")
        monkeypatch.setenv("EXTRA_PRE_CXXFLAGS", "-PRE")
        monkeypatch.setenv("EXTRA_CXXFLAGS", "-POST")
        monkeypatch.setenv("EXTRA_LDFLAGS", "-LD")
        monkeypatch.setenv("EXTRA_CFLAGS", "-IGNORED")
        command = synthesize(Language.CXX, "a.cpp -o a.out", "-lm", link=True)
        assert command == "g++ -PRELD -PRE a.cpp -o a.out -lm -POST -LD"

    def test_request_orders_flag_fragments(self, monkeypatch):
        monkeypatch.setenv("CC", "gcc")
        req = ProbeRequest("check", Language.C, flags1="-c a.c -o a.o", flags2="-Wall")
        assert req.command == "gcc -c a.c -o a.o -Wall"

    def test_accepts_string_tags(self, monkeypatch):
        monkeypatch.setenv("CXX", "clang++")
        assert synthesize("c++", "-v").startswith("clang++ ")

    def test_unsupported_language_has_no_side_effects(self, workdir, spawn_counter):
        with pytest.raises(ConfigurationError):
            synthesize("pascal", "-c x.p")
        assert spawn_counter == []
        assert list(workdir.iterdir()) == []


class TestResolveBinary:

    def test_env_override_wins(self, monkeypatch):
        monkeypatch.setenv("CC", "/opt/cc")
        assert resolve_binary(ToolRole.C_COMPILER) == "/opt/cc"

    def test_empty_override_ignored(self, monkeypatch):
        from toolchain_probe.core import platform as host

        monkeypatch.setenv("CC", "")
        monkeypatch.setattr(host, "current_os_identifier", lambda: "linux")
        assert resolve_binary(ToolRole.C_COMPILER) == "gcc"

    def test_make_override(self, monkeypatch):
        monkeypatch.setenv("MAKE", "bmake")
        assert resolve_binary(ToolRole.MAKE) == "bmake"

    def test_unknown_role(self):
        with pytest.raises(ConfigurationError):
            resolve_binary("linker")
