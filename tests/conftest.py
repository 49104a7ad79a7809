from __future__ import annotations

import os
import shutil
import subprocess
from typing import List, Optional

import pytest

from archvm_installer.config import InstallConfig
from archvm_installer.lib import command
from archvm_installer.steps import step_15_select_disk


class FakeRunner:
    """Stands in for subprocess.run inside the command layer and records argv."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.inputs: List[Optional[str]] = []
        self._failures: List[tuple[str, int]] = []
        self._stdout: List[tuple[str, str]] = []

    def fail_when(self, fragment: str, returncode: int = 1) -> None:
        self._failures.append((fragment, returncode))

    def stdout_when(self, fragment: str, text: str) -> None:
        self._stdout.append((fragment, text))

    def __call__(self, argv, input=None, **kwargs):
        argv = list(argv)
        self.calls.append(argv)
        self.inputs.append(input)
        line = " ".join(argv)

        returncode = 0
        for fragment, code in self._failures:
            if fragment in line:
                returncode = code
                break

        stdout = ""
        for fragment, text in self._stdout:
            if fragment in line:
                stdout = text
                break

        stderr = "simulated failure" if returncode else ""
        return subprocess.CompletedProcess(argv, returncode, stdout=stdout, stderr=stderr)

    def tools(self) -> List[str]:
        """First word of each command, looking through arch-chroot."""
        out = []
        for argv in self.calls:
            out.append(argv[2] if argv[0] == "arch-chroot" else argv[0])
        return out

    def called(self, *fragments: str) -> bool:
        lines = [" ".join(a) for a in self.calls]
        return any(all(f in line for f in fragments) for line in lines)


@pytest.fixture
def fake_run(monkeypatch):
    fake = FakeRunner()
    fake.stdout_when("genfstab", "# /dev/vda2\nUUID=1111 / ext4 rw,relatime 0 1\n")
    monkeypatch.setattr(command.subprocess, "run", fake)
    return fake


@pytest.fixture
def answers(monkeypatch):
    """Queue answers for input(); running out is a test bug."""

    queue: List[str] = []

    def fake_input(prompt: str = "") -> str:
        if not queue:
            raise AssertionError(f"Unexpected prompt: {prompt!r}")
        return queue.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)

    def push(*values: str) -> List[str]:
        queue.extend(values)
        return queue

    return push


@pytest.fixture
def target_root(tmp_path) -> str:
    root = tmp_path / "mnt"
    root.mkdir()
    return str(root)


@pytest.fixture
def cfg(target_root) -> InstallConfig:
    return InstallConfig(
        root_password="r00t-secret",
        user_password="us3r-secret",
        target_root=target_root,
    ).validate()


@pytest.fixture
def as_root(monkeypatch):
    monkeypatch.setattr(os, "geteuid", lambda: 0)
    monkeypatch.setattr(shutil, "which", lambda tool: f"/usr/bin/{tool}")


@pytest.fixture
def disk_exists(monkeypatch):
    monkeypatch.setattr(step_15_select_disk, "is_block_device", lambda path: True)


@pytest.fixture
def efivars(tmp_path):
    """Return (present_path, absent_path)."""

    present = tmp_path / "efivars"
    present.mkdir()
    return str(present), str(tmp_path / "no-efivars")


@pytest.fixture
def install_steps(efivars):
    """build_steps() with boot mode detection pointed at a fake efivars dir."""

    from archvm_installer.main import build_steps

    def make(uefi: bool = True) -> list:
        present, absent = efivars
        steps = build_steps()
        for s in steps:
            if hasattr(s, "efivars_path"):
                s.efivars_path = present if uefi else absent
        return steps

    return make
