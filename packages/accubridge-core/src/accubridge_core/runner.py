"""Runs the accurev executable and captures its combined output."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import threading
from functools import partial
from pathlib import Path
from typing import BinaryIO

from accubridge_core.errors import ExternalToolError, ToolTimeout, ToolUnavailable

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024

# Commands whose arguments carry credentials and must not be logged.
_SENSITIVE_COMMANDS = {"login"}


def quote_argument(arg: str) -> str:
    """Quote one argument the way a Windows command line expects it.

    A trailing backslash is doubled so it does not escape the closing quote.
    Only a backslash can do that, so a trailing ``/`` is left as is.
    """
    if arg.endswith("\\"):
        return f'"{arg}\\"'
    return f'"{arg}"'


def render_command_line(exe_path: str, command: str, args: tuple[str, ...] | list[str]) -> str:
    """Human-readable command line for logs; credentials are masked."""
    shown = list(args)
    if command in _SENSITIVE_COMMANDS and len(shown) > 1:
        shown[1:] = ["***"] * (len(shown) - 1)
    return " ".join([exe_path, command, *(quote_argument(a) for a in shown)])


def _drain(stream: BinaryIO, chunks: list[bytes]) -> None:
    """Read *stream* until EOF, appending chunks in arrival order."""
    try:
        for chunk in iter(partial(stream.read1, _CHUNK_SIZE), b""):
            chunks.append(chunk)
    finally:
        stream.close()


class ProcessRunner:
    """Launches ``<exe> <command> <args...>`` without a shell.

    stdout and stderr are merged. A reader thread drains the pipe while the
    calling thread waits for the process, so a full pipe never blocks it.
    """

    def __init__(self, exe_path: str, timeout: float | None = None) -> None:
        self.exe_path = exe_path
        self.timeout = timeout

    @property
    def exe_name(self) -> str:
        return Path(self.exe_path).name

    def resolve_executable(self) -> Path | None:
        """Locate the executable: a bare name is looked up on PATH first."""
        found = shutil.which(self.exe_path)
        if found:
            return Path(found)
        path = Path(self.exe_path)
        return path if path.is_file() else None

    def is_available(self) -> bool:
        return self.resolve_executable() is not None

    def _check_executable(self) -> Path:
        path = self.resolve_executable()
        if path is None:
            raise ToolUnavailable(self.exe_path)
        if os.name != "nt" and not os.access(path, os.X_OK):
            raise ToolUnavailable(self.exe_path, reason="not executable")
        return path

    def run(self, command: str, *args: str, cwd: str | Path | None = None) -> bytes:
        """Run the tool and return its output; raise on a non-zero exit."""
        executable = self._check_executable()

        argv = [str(executable), command, *args]
        logger.debug("Executing %s", render_command_line(self.exe_path, command, args))

        try:
            process = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                cwd=str(cwd) if cwd else None,
            )
        except (FileNotFoundError, PermissionError) as e:
            raise ToolUnavailable(self.exe_path, reason=str(e)) from e

        chunks: list[bytes] = []
        reader = threading.Thread(
            target=_drain, args=(process.stdout, chunks), name="accurev-output", daemon=True
        )
        reader.start()

        try:
            exit_code = process.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            process.wait()
            reader.join()
            logger.warning("%s %s killed after %ss", self.exe_name, command, self.timeout)
            raise ToolTimeout(self.exe_name, command, self.timeout or 0, b"".join(chunks))

        reader.join()
        output = b"".join(chunks)
        logger.debug("%s %s exited %d (%d bytes)", self.exe_name, command, exit_code, len(output))

        if exit_code != 0:
            raise ExternalToolError(self.exe_name, command, exit_code, output)
        return output
