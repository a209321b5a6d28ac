"""Platform capabilities consulted by the shared search algorithm.

Each platform answers three questions: is there a native way to get the
running image's path, is the runtime loaded from a framework bundle, and
does an executable need a suffix. ``select_platform`` picks the
implementation once, from ``sys.platform``.
"""

from __future__ import annotations

import ctypes
import sys
from dataclasses import dataclass
from typing import Protocol

from result import Ok, Result

from rtpath.common import create_logger
from rtpath.constants import DELIM, MAXPATHLEN, SEP

from .models import DecodeError
from .primitives import decode_path

logger = create_logger("platform")


class PlatformCapabilities(Protocol):
    """Per-platform hooks used while locating the executable and its libraries."""

    @property
    def name(self) -> str: ...

    @property
    def delimiter(self) -> str:
        """Separator between entries of PATH-like lists and of the home override."""
        ...

    @property
    def exe_suffix(self) -> str | None:
        """Suffix an executable must carry, or None when the platform has none."""
        ...

    def native_executable_path(self) -> Result[str | None, DecodeError]:
        """Absolute path of the running image from an OS API, when one exists."""
        ...

    def framework_library_path(self) -> Result[str | None, DecodeError]:
        """Path of the runtime library when it was loaded from a framework bundle."""
        ...


@dataclass(frozen=True)
class PosixPlatform:
    name: str = "posix"
    delimiter: str = DELIM
    exe_suffix: str | None = None

    def native_executable_path(self) -> Result[str | None, DecodeError]:
        return Ok(None)

    def framework_library_path(self) -> Result[str | None, DecodeError]:
        return Ok(None)


@dataclass(frozen=True)
class CygwinPlatform(PosixPlatform):
    name: str = "cygwin"
    exe_suffix: str | None = ".exe"


@dataclass(frozen=True)
class MinGWPlatform(PosixPlatform):
    name: str = "mingw"
    delimiter: str = ";"
    exe_suffix: str | None = ".exe"


class _DlInfo(ctypes.Structure):
    _fields_ = [
        ("dli_fname", ctypes.c_char_p),
        ("dli_fbase", ctypes.c_void_p),
        ("dli_sname", ctypes.c_char_p),
        ("dli_saddr", ctypes.c_void_p),
    ]


@dataclass(frozen=True)
class MacOSPlatform(PosixPlatform):
    name: str = "darwin"

    def native_executable_path(self) -> Result[str | None, DecodeError]:
        # A "#!/opt/rt/bin/python" script only gets "python" as argv[0];
        # dyld knows the real image path.
        try:
            getter = ctypes.CDLL(None)._NSGetExecutablePath
        except (OSError, AttributeError, TypeError):
            return Ok(None)

        size = ctypes.c_uint32(MAXPATHLEN)
        buffer = ctypes.create_string_buffer(MAXPATHLEN + 1)
        if getter(buffer, ctypes.byref(size)) != 0:
            return Ok(None)

        raw = buffer.value
        if not raw.startswith(SEP.encode()):
            return Ok(None)
        return decode_path(raw, "executable path")

    def framework_library_path(self) -> Result[str | None, DecodeError]:
        if not getattr(sys, "_framework", None):
            return Ok(None)

        try:
            dladdr = ctypes.CDLL(None).dladdr
            symbol = ctypes.cast(ctypes.pythonapi.Py_Initialize, ctypes.c_void_p)
        except (OSError, AttributeError, TypeError):
            return Ok(None)

        info = _DlInfo()
        if dladdr(symbol, ctypes.byref(info)) == 0 or not info.dli_fname:
            return Ok(None)

        logger.debug("Runtime loaded from framework", path=info.dli_fname)
        return decode_path(info.dli_fname, "framework location")


def select_platform(platform_name: str | None = None) -> PlatformCapabilities:
    """Return the capabilities matching ``platform_name`` (defaults to ``sys.platform``)."""
    platform_name = platform_name or sys.platform
    if platform_name == "darwin":
        return MacOSPlatform()
    if platform_name == "cygwin":
        return CygwinPlatform()
    if platform_name.startswith(("mingw", "msys")):
        return MinGWPlatform()
    return PosixPlatform()
