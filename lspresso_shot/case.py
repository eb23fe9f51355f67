"""Test case description: the immutable input to every test entry point."""

import os
import random
import re
import shutil
from dataclasses import dataclass, field, replace
from pathlib import Path, PurePosixPath

from .errors import (
    InvalidEditor,
    InvalidFileExtension,
    InvalidServerCommand,
    MissingFileExtension,
)
from .layout import Layout
from .lsp.types import Position
from .utils.config import default_editor_command, load_config

_EXTENSION_RE = re.compile(r"^[A-Za-z0-9_+\-]+$")


@dataclass(frozen=True)
class Immediate:
    """The server can answer requests as soon as the client attaches."""

    @property
    def threshold(self) -> int:
        return 1


@dataclass(frozen=True)
class Progress:
    """The server is ready after `threshold` end-of-progress notifications for `token`."""

    threshold: int
    token: str

    def __post_init__(self):
        if self.threshold < 1:
            raise ValueError(f"Progress threshold must be positive, got {self.threshold}")


StartupMode = Immediate | Progress


@dataclass(frozen=True)
class TestFile:
    __test__ = False

    path: str
    contents: str

    def __post_init__(self):
        object.__setattr__(self, "path", str(self.path))

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.removeprefix(".")


def _random_test_id() -> str:
    return str(random.getrandbits(64))


def _default_timeout() -> float:
    return float(load_config()["defaults"]["timeout"])


def _default_cleanup() -> bool:
    return bool(load_config()["defaults"]["cleanup"])


def is_executable(command: str | Path) -> bool:
    """True if `command` names an executable file, directly or via PATH."""
    command = str(command)
    if os.sep in command or (os.altsep and os.altsep in command):
        path = Path(command)
        return path.is_file() and os.access(path, os.X_OK)
    return shutil.which(command) is not None


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    executable_path: str
    source_file: TestFile
    cursor_pos: Position | None = None
    other_files: tuple[TestFile, ...] = ()
    start_type: StartupMode = field(default_factory=Immediate)
    timeout: float = field(default_factory=_default_timeout)
    cleanup: bool = field(default_factory=_default_cleanup)
    nvim_path: str = field(default_factory=default_editor_command)
    test_id: str = field(default_factory=_random_test_id)

    def __post_init__(self):
        object.__setattr__(self, "executable_path", str(self.executable_path))
        object.__setattr__(self, "nvim_path", str(self.nvim_path))
        object.__setattr__(self, "other_files", tuple(self.other_files))

    @property
    def layout(self) -> Layout:
        return Layout(self.test_id)

    def with_options(self, **changes) -> "TestCase":
        return replace(self, **changes)

    def file_extension(self) -> str:
        ext = self.source_file.extension
        if not ext:
            raise MissingFileExtension(self.source_file.path)
        if not _EXTENSION_RE.match(ext):
            raise InvalidFileExtension(self.source_file.path)
        return ext

    def validate(self) -> None:
        if not is_executable(self.nvim_path):
            raise InvalidEditor(self.nvim_path)
        if not is_executable(self.executable_path):
            raise InvalidServerCommand(self.executable_path)
        layout = self.layout
        for test_file in (self.source_file, *self.other_files):
            layout.source_path(test_file.path)
        self.file_extension()
