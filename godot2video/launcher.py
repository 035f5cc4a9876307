"""
godot2video.launcher - Engine process launcher

Runs the engine on a worker thread and hands back a future of its exit code.
The launcher owns the process lifetime; callers only wait on the future.
"""

import logging
import os
import shlex
import subprocess
import sys
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable, List, Optional, Sequence

# Seconds to wait for the engine to finish the movie after a terminate request
TERMINATE_GRACE_PERIOD = 10


def format_command(command: Sequence[str]) -> str:
    """Render a command line the way the local shell would read it back"""
    if os.name == "nt":
        return subprocess.list2cmdline(command)
    return shlex.join(command)


class ProcessLauncher:
    """Launches the engine with a prepared argument vector"""

    def __init__(
        self,
        executable: str,
        prompt: Optional[Callable[[str], str]] = None,
        interactive: Optional[bool] = None,
    ):
        """
        Args:
            executable: Engine executable path
            prompt: Function used to hold the console open (defaults to input)
            interactive: Whether a user can answer the prompt (defaults to stdin isatty)
        """
        self.executable = executable
        self.prompt = prompt or input
        self.interactive = sys.stdin.isatty() if interactive is None else interactive
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="godot2video")
        self._process: Optional[subprocess.Popen] = None
        self._lock = threading.Lock()
        self._terminated = False

    def build_command(self, arguments: Sequence[str]) -> List[str]:
        """Full command line: executable followed by the engine arguments"""
        return [self.executable, *arguments]

    def launch(
        self, arguments: Sequence[str], working_dir: Optional[Path] = None, keep_open: bool = False
    ) -> "Future[int]":
        """
        Start the engine and return a future of its exit code

        Args:
            arguments: Engine argument vector
            working_dir: Working directory for the engine process
            keep_open: Hold the console open after the engine exits

        Returns:
            Future resolving to the engine exit code
        """
        command = self.build_command(arguments)
        return self._executor.submit(self._run, command, working_dir, keep_open)

    def _run(self, command: List[str], working_dir: Optional[Path], keep_open: bool) -> int:
        self._terminated = False
        logging.info("Launching engine: %s", format_command(command))
        if working_dir:
            logging.debug("Engine working directory: %s", working_dir)

        start_time = time.time()
        with self._lock:
            self._process = subprocess.Popen(
                command, cwd=str(working_dir) if working_dir else None
            )

        try:
            exit_code = self._process.wait()
        finally:
            with self._lock:
                self._process = None

        elapsed = time.time() - start_time
        if exit_code == 0:
            logging.info("Engine finished in %.2f seconds", elapsed)
        else:
            logging.error("Engine exited with code %d after %.2f seconds", exit_code, elapsed)

        # A terminated engine is not waited on
        if keep_open and not self._terminated:
            self._hold_console(exit_code)

        return exit_code

    def _hold_console(self, exit_code: int):
        if not self.interactive:
            logging.debug("Keep-open requested but console is not interactive")
            return
        try:
            self.prompt(f"Engine exited with code {exit_code}. Press Enter to close...")
        except EOFError:
            pass

    def is_running(self) -> bool:
        with self._lock:
            return self._process is not None and self._process.poll() is None

    def terminate(self, grace_period: float = TERMINATE_GRACE_PERIOD) -> bool:
        """
        Stop a running engine process

        The engine gets a grace period to finalize the movie before it is
        killed; a killed engine usually leaves a truncated or unreadable file.

        Returns:
            bool: True if a process was running
        """
        with self._lock:
            process = self._process
        if process is None or process.poll() is not None:
            return False

        self._terminated = True
        logging.warning("Stopping engine; the movie file may be incomplete")
        process.terminate()
        try:
            process.wait(timeout=grace_period)
        except subprocess.TimeoutExpired:
            logging.warning("Engine did not stop after %.0fs, killing it", grace_period)
            process.kill()
            process.wait()
        return True

    def shutdown(self):
        """Release the worker thread"""
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is not None:
            self.terminate()
        self.shutdown()
        return False
