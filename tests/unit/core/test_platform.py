from __future__ import annotations

import pytest

from rtpath.core.platform import CygwinPlatform, MacOSPlatform, MinGWPlatform, PosixPlatform, select_platform


@pytest.mark.parametrize(
    ("platform_name", "expected"),
    [
        ("linux", PosixPlatform),
        ("freebsd13", PosixPlatform),
        ("darwin", MacOSPlatform),
        ("cygwin", CygwinPlatform),
        ("msys", MinGWPlatform),
        ("mingw64", MinGWPlatform),
    ],
)
def test_select_platform(platform_name: str, expected: type) -> None:
    assert type(select_platform(platform_name)) is expected


def test_posix_platform_has_no_native_hooks() -> None:
    platform = PosixPlatform()

    assert platform.delimiter == ":"
    assert platform.exe_suffix is None
    assert platform.native_executable_path().ok_value is None
    assert platform.framework_library_path().ok_value is None


def test_suffix_platforms() -> None:
    assert CygwinPlatform().exe_suffix == ".exe"
    assert CygwinPlatform().delimiter == ":"
    assert MinGWPlatform().exe_suffix == ".exe"
    assert MinGWPlatform().delimiter == ";"


def test_macos_without_framework_reports_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys._framework", "", raising=False)

    assert MacOSPlatform().framework_library_path().ok_value is None
