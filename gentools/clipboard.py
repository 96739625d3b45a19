"""Clipboard - Read and write the system clipboard through platform tools."""

import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass

from gentools.errors import GenError, ToolUnavailableError


class ClipboardReader(ABC):
    @abstractmethod
    def read(self) -> str:
        pass


class ClipboardWriter(ABC):
    @abstractmethod
    def write(self, text: str) -> None:
        pass


class ClipboardError(GenError):
    """Raised when a clipboard tool exists but fails."""
    pass


@dataclass(frozen=True)
class Backend:
    """A pair of commands that copy stdin to, and paste the clipboard to stdout."""
    name: str
    copy: tuple[str, ...]
    paste: tuple[str, ...]


# Tried in order; the first whose programs are on PATH wins
BACKENDS = {
    'darwin': [
        Backend('pbcopy', ('pbcopy',), ('pbpaste',)),
    ],
    'win32': [
        Backend('clip', ('clip',), ('powershell', '-NoProfile', '-Command', 'Get-Clipboard -Raw')),
    ],
    'linux': [
        Backend('wl-clipboard', ('wl-copy',), ('wl-paste', '--no-newline')),
        Backend('xclip', ('xclip', '-selection', 'clipboard'), ('xclip', '-selection', 'clipboard', '-o')),
        Backend('xsel', ('xsel', '--clipboard', '--input'), ('xsel', '--clipboard', '--output')),
    ],
}

INSTALL_HINTS = {
    'darwin': "pbcopy and pbpaste ship with macOS; check your PATH",
    'win32': "clip and powershell must be in PATH",
    'linux': "Install wl-clipboard, xclip or xsel: sudo apt install xclip",
}


def _platform_key(platform: str) -> str:
    return 'linux' if platform.startswith('linux') else platform


def detect_backend(need_copy: bool = True, need_paste: bool = True,
                   platform: str | None = None, which=shutil.which) -> Backend:
    """Pick the first clipboard backend whose required programs are installed.

    Raises:
        ToolUnavailableError: no usable backend on this platform
    """
    key = _platform_key(platform or sys.platform)
    for backend in BACKENDS.get(key, []):
        if need_copy and not which(backend.copy[0]):
            continue
        if need_paste and not which(backend.paste[0]):
            continue
        return backend

    hint = INSTALL_HINTS.get(key, "No clipboard tool is known for this platform")
    raise ToolUnavailableError(f"No clipboard tool found. {hint}")


class SystemClipboard(ClipboardReader, ClipboardWriter):
    """Clipboard access by shelling out to the platform's copy/paste tools."""

    def __init__(self, backend: Backend):
        self.backend = backend

    @classmethod
    def detect(cls, need_copy: bool = True, need_paste: bool = True) -> 'SystemClipboard':
        return cls(detect_backend(need_copy=need_copy, need_paste=need_paste))

    def _run(self, args: tuple[str, ...], text: str | None = None) -> str:
        try:
            result = subprocess.run(
                list(args),
                input=text.encode('utf-8') if text is not None else None,
                capture_output=True,
                check=True,
            )
        except FileNotFoundError:
            raise ToolUnavailableError(f"{args[0]} is not installed or not in PATH")
        except (subprocess.CalledProcessError, OSError) as e:
            raise ClipboardError(f"Clipboard command failed: {e}")
        return result.stdout.decode('utf-8', errors='replace')

    def read(self) -> str:
        return self._run(self.backend.paste)

    def write(self, text: str) -> None:
        self._run(self.backend.copy, text)


__all__ = [
    "ClipboardReader",
    "ClipboardWriter",
    "ClipboardError",
    "Backend",
    "BACKENDS",
    "detect_backend",
    "SystemClipboard",
]
