"""Running the editor subprocess under a timeout, one at a time."""

import logging
import subprocess
import threading
import time
from contextlib import contextmanager
from pathlib import Path

from .case import TestCase
from .errors import EditorError, TimeoutExceeded
from .layout import Layout

logger = logging.getLogger(__name__)

# Editor runs are wall-clock sensitive; running them concurrently under a
# parallel test runner produces spurious timeouts.
RUNNER_LIMIT = 1
DEFAULT_POLL_INTERVAL = 0.05


class RunnerSlots:
    """Counting gate bounding how many editors may run at once."""

    def __init__(self, limit: int = RUNNER_LIMIT):
        self.limit = limit
        self._active = 0
        self._cond = threading.Condition()

    @property
    def active(self) -> int:
        with self._cond:
            return self._active

    @contextmanager
    def acquire(self):
        with self._cond:
            while self._active >= self.limit:
                self._cond.wait()
            self._active += 1
        try:
            yield
        finally:
            with self._cond:
                self._active -= 1
                self._cond.notify()


RUNNER_SLOTS = RunnerSlots()


def editor_command(case: TestCase, layout: Layout, source_path: Path) -> list[str]:
    return [
        case.nvim_path,
        "-u", str(layout.init_script),
        "--noplugin",
        str(source_path),
        "--headless",
        "-n",
    ]


def run_editor(
    case: TestCase,
    source_path: Path,
    layout: Layout | None = None,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
    slots: RunnerSlots = RUNNER_SLOTS,
) -> None:
    """Run the editor until it exits or `case.timeout` elapses.

    On timeout the editor is killed. A non-empty driver error file explains
    most timeouts, so it is reported instead of the timeout when present.
    """
    layout = layout or case.layout
    command = editor_command(case, layout, source_path)

    with slots.acquire():
        logger.debug(f"Running {' '.join(command)}")
        try:
            process = subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise EditorError(case.test_id, str(e)) from e

        deadline = time.monotonic() + case.timeout
        while time.monotonic() < deadline:
            if process.poll() is not None:
                logger.debug(f"Editor for test {case.test_id} exited with {process.returncode}")
                return
            time.sleep(poll_interval)

        if process.poll() is not None:
            return
        logger.debug(f"Killing editor for test {case.test_id} after {case.timeout}s")
        process.kill()
        process.wait()

    error = layout.read_error()
    if error.strip():
        raise EditorError(case.test_id, error)
    raise TimeoutExceeded(case.test_id, case.timeout)
