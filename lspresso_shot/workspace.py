"""Writing a test case's files to disk, and removing them afterwards."""

import logging
import shutil
from pathlib import Path

from .case import TestCase
from .errors import SetupIOError
from .layout import Layout

logger = logging.getLogger(__name__)


def materialize(case: TestCase, script: str, layout: Layout | None = None) -> Path:
    """Write the driver script and all source files; return the primary source path.

    Artifacts left by an earlier run with the same test id are removed first,
    so the outcome of this run is read from files this run wrote.
    """
    layout = layout or case.layout
    try:
        layout.create_dirs()
        for marker in layout.markers:
            marker.unlink(missing_ok=True)
        layout.init_script.write_text(script, encoding="utf-8")

        source_path = _write_file(layout, case.source_file.path, case.source_file.contents)
        for other in case.other_files:
            _write_file(layout, other.path, other.contents)
    except OSError as e:
        raise SetupIOError(f"Failed to write test {case.test_id}: {e}") from e

    logger.debug(f"Materialized test {case.test_id} at {layout.root}")
    return source_path


def _write_file(layout: Layout, relative: str, contents: str) -> Path:
    path = layout.source_path(relative)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    return path


def cleanup(case: TestCase, layout: Layout | None = None) -> None:
    """Best-effort removal of the workspace; failures are only logged."""
    layout = layout or case.layout
    try:
        shutil.rmtree(layout.root)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Failed to clean up {layout.root}: {e}")
