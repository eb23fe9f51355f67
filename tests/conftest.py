import os
import stat
import tempfile
from pathlib import Path

import pytest

from lspresso_shot.case import TestCase, TestFile

FAKE_NVIM = """#!/bin/sh
# Invoked as: fake-nvim -u <init.lua> --noplugin <source> --headless -n
root=$(dirname "$2")
case "${FAKE_NVIM_MODE:-results}" in
    results) cp "$FAKE_NVIM_REPLY" "$root/results.json" ;;
    empty) : > "$root/empty" ;;
    error) printf 'driver failed\\n' > "$root/error.txt" ;;
    timeout) : > "$root/timeout" ;;
    sleep) sleep "${FAKE_NVIM_SLEEP:-5}" ;;
    error-then-sleep)
        printf 'server crashed\\n' > "$root/error.txt"
        sleep "${FAKE_NVIM_SLEEP:-5}"
        ;;
    both)
        cp "$FAKE_NVIM_REPLY" "$root/results.json"
        : > "$root/empty"
        ;;
    nothing) ;;
esac
exit 0
"""


def write_executable(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def isolated_config(temp_dir, monkeypatch):
    config_dir = temp_dir / "config"
    config_dir.mkdir()

    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_dir))
    monkeypatch.delenv("LSPRESSO_NVIM", raising=False)

    return {"config": config_dir}


@pytest.fixture
def workspace_tmp(temp_dir, monkeypatch):
    """Redirect test workspaces away from the real temp directory."""
    tmp = temp_dir / "tmp"
    tmp.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(tmp))
    return tmp


class FakeNvim:
    def __init__(self, path: Path, reply_path: Path, monkeypatch):
        self.path = path
        self.reply_path = reply_path
        self.monkeypatch = monkeypatch

    def mode(self, mode: str, sleep: float | None = None) -> None:
        self.monkeypatch.setenv("FAKE_NVIM_MODE", mode)
        if sleep is not None:
            self.monkeypatch.setenv("FAKE_NVIM_SLEEP", str(sleep))

    def reply(self, text: str) -> None:
        self.reply_path.write_text(text)
        self.mode("results")


@pytest.fixture
def fake_nvim(temp_dir, isolated_config, workspace_tmp, monkeypatch):
    path = write_executable(temp_dir / "bin" / "fake-nvim", FAKE_NVIM)
    reply_path = temp_dir / "reply.json"
    monkeypatch.setenv("FAKE_NVIM_REPLY", str(reply_path))
    monkeypatch.setenv("LSPRESSO_NVIM", str(path))
    fake = FakeNvim(path, reply_path, monkeypatch)
    fake.mode("results")
    return fake


@pytest.fixture
def fake_server(temp_dir):
    return write_executable(temp_dir / "bin" / "fake-server", "#!/bin/sh\nexit 0\n")


@pytest.fixture
def make_case(fake_server):
    def make(**options) -> TestCase:
        options.setdefault("executable_path", str(fake_server))
        options.setdefault("source_file", TestFile("main.rs", "fn main() {}\n"))
        return TestCase(**options)

    return make
