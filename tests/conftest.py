"""
Pytest configuration and fixtures.
"""

import shutil
import subprocess
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from hostprep.cli.lib.config import HostprepConfig


class FakeCommands:
    """
    Stand-in for subprocess.run answering by command prefix.

    The longest registered prefix matching a command decides its result;
    unregistered commands succeed with empty output. Results queued with
    `then` are returned in order, the last one repeating.
    """

    def __init__(self):
        self.calls = []
        self.inputs = []
        self._responses = {}

    def set(self, *prefix, returncode=0, stdout="", stderr=""):
        self._responses[tuple(prefix)] = [(returncode, stdout, stderr)]

    def then(self, *prefix, returncode=0, stdout="", stderr=""):
        self._responses.setdefault(tuple(prefix), []).append((returncode, stdout, stderr))

    def __call__(self, cmd, **kwargs):
        cmd = list(cmd)
        self.calls.append(cmd)
        self.inputs.append(kwargs.get("input"))
        best = ()
        for prefix in self._responses:
            if tuple(cmd[: len(prefix)]) == prefix and len(prefix) > len(best):
                best = prefix
        queued = self._responses.get(best, [(0, "", "")])
        returncode, stdout, stderr = queued.pop(0) if len(queued) > 1 else queued[0]
        return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr=stderr)

    def named(self, name):
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def mock_subprocess():
    """Mock subprocess.run for testing."""
    with patch("subprocess.run") as mock:
        yield mock


@pytest.fixture
def fake_commands():
    """Route subprocess.run through a FakeCommands instance."""
    fake = FakeCommands()
    with patch("subprocess.run", side_effect=fake):
        yield fake


@pytest.fixture
def mock_which():
    """Mock shutil.which for testing."""
    with patch("shutil.which") as mock:
        yield mock


@pytest.fixture
def cfg(temp_dir):
    """Configuration pointing every system file into a temporary directory."""
    return HostprepConfig(
        fstab_path=temp_dir / "fstab",
        settle_seconds=0,
        sshd_config=temp_dir / "sshd_config",
        sudoers_dir=temp_dir / "sudoers.d",
        plugin_dir=temp_dir / "plugins",
    )


@pytest.fixture
def config_env(monkeypatch, temp_dir):
    """Write a config file redirecting system files into temp_dir and point HOSTPREP_CONFIG_PATH at it."""
    config_path = temp_dir / "hostprep.conf"
    config_path.write_text(
        "\n".join(
            [
                "[filesystem]",
                f"fstab_path = {temp_dir / 'fstab'}",
                "settle_seconds = 0",
                "[bootstrap]",
                f"sshd_config = {temp_dir / 'sshd_config'}",
                f"sudoers_dir = {temp_dir / 'sudoers.d'}",
                "[checkmk]",
                f"plugin_dir = {temp_dir / 'plugins'}",
                "",
            ]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("HOSTPREP_CONFIG_PATH", str(config_path))
    return temp_dir
