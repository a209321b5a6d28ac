from __future__ import annotations

import os
from pathlib import Path

import pytest
from result import is_err, is_ok

from rtpath.core import calculator
from rtpath.core.calculator import (
    EXEC_PREFIX_NOT_FOUND,
    PREFIX_NOT_FOUND,
    calculate,
    calculate_path_config,
)
from rtpath.core.models import CalculationContext, PathConfig, Provenance
from rtpath.core.platform import PosixPlatform

POSIX = PosixPlatform()


def _context(tmp_path: Path, **overrides: object) -> CalculationContext:
    values: dict[str, object] = {
        "version": "9.9",
        "runtime_name": "rt",
        "prefix": str(tmp_path / "compiled"),
        "exec_prefix": str(tmp_path / "compiled"),
        "vpath": "..",
    }
    values.update(overrides)
    return CalculationContext(**values)


def _executable(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n")
    path.chmod(0o755)
    return path


def _install(root: Path) -> Path:
    """Installed layout under ``root`` with ``bin/run``; returns the executable."""
    lib = root / "lib" / "rt9.9"
    (lib / "lib-dynload").mkdir(parents=True)
    (lib / "os.py").write_text("")
    return _executable(root / "bin" / "run")


class Collector:
    def __init__(self) -> None:
        self.messages: list[str] = []

    def __call__(self, message: str) -> None:
        self.messages.append(message)


class TestInstalledLayout:
    def test_executable_found_on_path(self, tmp_path: Path) -> None:
        root = tmp_path / "opt" / "rt"
        executable = _install(root)
        context = _context(tmp_path, path_env=f"{tmp_path / 'empty'}:{executable.parent}")
        sink = Collector()

        result = calculate(PathConfig(program_name="run"), context, platform=POSIX, diagnostics=sink)

        assert is_ok(result)
        calculation = result.ok_value
        assert calculation.config.program_full_path == str(executable)
        assert calculation.argv0_path == str(root / "bin")
        assert calculation.prefix.provenance is Provenance.WALK
        assert calculation.config.prefix == str(root)
        assert calculation.config.exec_prefix == str(root)
        assert calculation.zip_path == f"{root}/lib/rt99.zip"
        assert sink.messages == []
        assert calculation.warnings == []

    def test_module_search_path_uses_library_directories(self, tmp_path: Path) -> None:
        root = tmp_path / "opt" / "rt"
        executable = _install(root)

        config = calculate_path_config(
            PathConfig(program_name=str(executable)), _context(tmp_path), platform=POSIX, diagnostics=Collector()
        ).ok_value

        assert config.module_search_path == ":".join(
            [f"{root}/lib/rt99.zip", f"{root}/lib/rt9.9", f"{root}/lib/rt9.9/lib-dynload"]
        )

    def test_symlinked_executable_resolves_to_install(self, tmp_path: Path) -> None:
        root = tmp_path / "opt" / "rt"
        executable = _install(root)
        link = tmp_path / "links" / "run"
        link.parent.mkdir()
        link.symlink_to(os.path.relpath(executable, link.parent))

        result = calculate(PathConfig(program_name=str(link)), _context(tmp_path), platform=POSIX)

        assert result.ok_value.config.program_full_path == str(link)
        assert result.ok_value.argv0_path == str(root / "bin")
        assert result.ok_value.config.prefix == str(root)

    def test_virtual_environment_points_at_base_install(self, tmp_path: Path) -> None:
        root = tmp_path / "opt" / "rt"
        _install(root)
        venv_executable = _executable(tmp_path / "venv" / "bin" / "run")
        (tmp_path / "venv" / "pyvenv.cfg").write_text(f"home = {root / 'bin'}\ninclude-system-site-packages = false\n")

        result = calculate(PathConfig(program_name=str(venv_executable)), _context(tmp_path), platform=POSIX)

        assert result.ok_value.argv0_path == str(root / "bin")
        assert result.ok_value.config.prefix == str(root)
        assert result.ok_value.config.program_full_path == str(venv_executable)


class TestBuildTree:
    def test_prefix_is_unreduced_build_path(self, tmp_path: Path) -> None:
        executable = _executable(tmp_path / "src" / "build" / "run")
        (tmp_path / "src" / "build" / "Modules").mkdir()
        (tmp_path / "src" / "build" / "Modules" / "Setup.local").write_text("")
        (tmp_path / "src" / "Lib").mkdir()
        (tmp_path / "src" / "Lib" / "os.py").write_text("")
        (tmp_path / "src" / "build" / "pybuilddir.txt").write_text("build/lib.rt-9.9")

        result = calculate(
            PathConfig(program_name=str(executable)), _context(tmp_path), platform=POSIX, diagnostics=Collector()
        )

        calculation = result.ok_value
        build_lib = f"{tmp_path}/src/build/../Lib"
        assert calculation.prefix.provenance is Provenance.BUILD_MARKER
        assert calculation.config.prefix == build_lib
        assert calculation.exec_prefix.provenance is Provenance.BUILD_MARKER
        assert calculation.config.exec_prefix == f"{tmp_path}/src/build/build/lib.rt-9.9"
        assert calculation.zip_path == f"{tmp_path}/compiled/lib/rt99.zip"
        assert calculation.warnings == []


class TestNotFound:
    def test_compiled_defaults_and_diagnostics(self, tmp_path: Path) -> None:
        executable = _executable(tmp_path / "nowhere" / "bin" / "run")
        sink = Collector()

        result = calculate(PathConfig(program_name=str(executable)), _context(tmp_path), platform=POSIX, diagnostics=sink)

        calculation = result.ok_value
        assert not calculation.prefix.found
        assert not calculation.exec_prefix.found
        assert calculation.config.prefix == str(tmp_path / "compiled")
        assert calculation.config.exec_prefix == str(tmp_path / "compiled")
        assert sink.messages == [
            PREFIX_NOT_FOUND,
            EXEC_PREFIX_NOT_FOUND,
            "Consider setting $PYTHONHOME to <prefix>[:<exec_prefix>]",
        ]
        assert calculation.warnings == sink.messages

    def test_search_path_uses_not_found_working_values(self, tmp_path: Path) -> None:
        executable = _executable(tmp_path / "nowhere" / "bin" / "run")

        config = calculate_path_config(
            PathConfig(program_name=str(executable)), _context(tmp_path), platform=POSIX, diagnostics=Collector()
        ).ok_value

        compiled = tmp_path / "compiled"
        assert config.module_search_path == ":".join(
            [f"{compiled}/lib/rt99.zip", f"{compiled}/lib/rt9.9", f"{compiled}/lib/lib-dynload"]
        )

    def test_only_missing_exec_prefix_is_reported(self, tmp_path: Path) -> None:
        root = tmp_path / "opt" / "rt"
        executable = _install(root)
        (root / "lib" / "rt9.9" / "lib-dynload").rmdir()
        sink = Collector()

        calculate(PathConfig(program_name=str(executable)), _context(tmp_path), platform=POSIX, diagnostics=sink)

        assert PREFIX_NOT_FOUND not in sink.messages
        assert EXEC_PREFIX_NOT_FOUND in sink.messages
        assert sink.messages[-1].startswith("Consider setting $PYTHONHOME")

    def test_diagnostics_suppressed_without_warnings(self, tmp_path: Path) -> None:
        executable = _executable(tmp_path / "nowhere" / "bin" / "run")
        sink = Collector()

        result = calculate(
            PathConfig(program_name=str(executable)),
            _context(tmp_path, warnings=False),
            platform=POSIX,
            diagnostics=sink,
        )

        assert result.ok_value.config.prefix == str(tmp_path / "compiled")
        assert sink.messages == []
        assert result.ok_value.warnings == []

    def test_default_sink_writes_to_stderr(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        executable = _executable(tmp_path / "nowhere" / "bin" / "run")

        calculate(PathConfig(program_name=str(executable)), _context(tmp_path, home_env_var="RTHOME"), platform=POSIX)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert PREFIX_NOT_FOUND in captured.err
        assert "Consider setting $RTHOME to <prefix>[:<exec_prefix>]" in captured.err


class TestOverrides:
    def test_runtime_override_leads_search_path(self, tmp_path: Path) -> None:
        executable = _install(tmp_path / "opt" / "rt")

        config = calculate_path_config(
            PathConfig(program_name=str(executable)),
            _context(tmp_path, pythonpath_env="/custom/a:/custom/b"),
            platform=POSIX,
        ).ok_value

        assert config.module_search_path.startswith(f"/custom/a:/custom/b:{tmp_path}/opt/rt/lib/rt99.zip:")

    def test_home_override(self, tmp_path: Path) -> None:
        executable = _executable(tmp_path / "nowhere" / "bin" / "run")
        sink = Collector()

        result = calculate(
            PathConfig(program_name=str(executable), home="/h/prefix:/h/exec"),
            _context(tmp_path),
            platform=POSIX,
            diagnostics=sink,
        )

        assert result.ok_value.config.prefix == "/h/prefix"
        assert result.ok_value.config.exec_prefix == "/h/exec"
        assert result.ok_value.zip_path == "/h/prefix/lib/rt99.zip"
        assert sink.messages == []

    def test_caller_fields_are_preserved(self, tmp_path: Path) -> None:
        executable = _install(tmp_path / "opt" / "rt")
        pathconfig = PathConfig(program_name=str(executable), prefix="/mine", module_search_path="/only")

        config = calculate_path_config(pathconfig, _context(tmp_path), platform=POSIX).ok_value

        assert config.prefix == "/mine"
        assert config.module_search_path == "/only"
        assert config.exec_prefix == str(tmp_path / "opt" / "rt")
        assert config.program_name == str(executable)

    def test_given_full_path_skips_lookup(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        executable = _install(tmp_path / "opt" / "rt")

        def forbidden(*args: object, **kwargs: object) -> None:
            raise AssertionError("executable lookup must not run")

        monkeypatch.setattr(calculator, "locate_executable", forbidden)
        pathconfig = PathConfig(program_name="run", program_full_path=str(executable))

        config = calculate_path_config(pathconfig, _context(tmp_path), platform=POSIX).ok_value

        assert config.program_full_path == str(executable)
        assert config.prefix == str(tmp_path / "opt" / "rt")


class TestFailures:
    def test_overlong_program_name(self, tmp_path: Path) -> None:
        result = calculate(
            PathConfig(program_name="/" + "x" * 64),
            _context(tmp_path, max_path=32),
            platform=POSIX,
        )

        assert is_err(result)
        assert result.err_value.kind == "path_too_long"

    def test_symlink_loop_is_reported(self, tmp_path: Path) -> None:
        (tmp_path / "a").symlink_to("b")
        (tmp_path / "b").symlink_to("a")

        result = calculate(PathConfig(program_name=str(tmp_path / "a")), _context(tmp_path), platform=POSIX)

        assert is_err(result)
        assert result.err_value.kind == "symlink_loop"
