# =========  process.py  =========
"""
Thin subprocess wrapper used for the emulator.

Public API
----------
start_process(path, args, working_dir, capture_stdout) → ProcessHandle
ProcessHandle.has_exited()
ProcessHandle.request_close()     – graceful, never waits
ProcessHandle.read_all_output()   – listing invocations only
ProcessHandle.wait_for_exit()     – listing invocations only
Properties
----------
.pid   → OS process id
.args  → full argv used to start the process
"""
from __future__ import annotations

import logging
import subprocess
import sys
from typing import Optional, Sequence

log = logging.getLogger(__name__)


class ProcessHandle:
    def __init__(self, proc: subprocess.Popen, args: Sequence[str]):
        self._proc = proc
        self.args = list(args)

    @property
    def pid(self) -> int:
        return self._proc.pid

    # ── lifecycle ───────────────────────────────────────────────────────────
    def has_exited(self) -> bool:
        return self._proc.poll() is not None

    def request_close(self) -> None:
        """
        Ask the process to exit. Does not block.

        POSIX gets SIGTERM. On Windows terminate() is TerminateProcess, a hard
        kill, so a plain ``taskkill /PID`` (no /F) posts WM_CLOSE instead.
        """
        if self.has_exited():
            return
        try:
            if sys.platform == "win32":
                subprocess.Popen(["taskkill", "/PID", str(self.pid)],
                                 stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
            else:
                self._proc.terminate()
        except ProcessLookupError:
            # exited between poll() and terminate()
            return
        log.debug("close requested for pid %s", self.pid)

    # ── captured output ─────────────────────────────────────────────────────
    def read_all_output(self) -> str:
        if self._proc.stdout is None:
            return ""
        return self._proc.stdout.read() or ""

    def wait_for_exit(self) -> Optional[int]:
        return self._proc.wait()


def start_process(path: str,
                  args: Sequence[str],
                  working_dir: Optional[str] = None,
                  capture_stdout: bool = False) -> ProcessHandle:
    """
    Start *path* with *args*. Raises OSError when the binary cannot be run;
    callers translate that into their own error kind.
    """
    argv = [path, *args]
    log.debug("starting %s (cwd=%s)", argv, working_dir)
    proc = subprocess.Popen(
        argv,
        cwd=working_dir or None,
        stdout=subprocess.PIPE if capture_stdout else None,
        stderr=subprocess.DEVNULL if capture_stdout else None,
        stdin=subprocess.DEVNULL,
        text=True,
        encoding="utf-8",
        errors="replace",
    )
    return ProcessHandle(proc, argv)
