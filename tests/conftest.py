"""Shared fixtures for helmhistory tests."""

import json
import os
import stat
import sys
from pathlib import Path
from typing import List, Optional

import pytest

from helmhistory.config import reset_settings

FAKE_HELM_SCRIPT = """#!{python}
import json
import os
import sys
import time

args_file = os.environ.get("FAKE_HELM_ARGS_FILE")
if args_file:
    with open(args_file, "w") as f:
        json.dump(sys.argv[1:], f)

time.sleep(float(os.environ.get("FAKE_HELM_SLEEP", "0")))
stdout_file = os.environ.get("FAKE_HELM_STDOUT_FILE")
if stdout_file:
    with open(stdout_file, "rb") as f:
        sys.stdout.buffer.write(f.read())
else:
    sys.stdout.write(os.environ.get("FAKE_HELM_STDOUT", ""))
sys.stderr.write(os.environ.get("FAKE_HELM_STDERR", ""))
sys.exit(int(os.environ.get("FAKE_HELM_EXIT", "0")))
"""


class FakeHelm:
    """A helm stand-in that prints what it is told to and records its argv."""

    def __init__(self, path: Path, args_file: Path, monkeypatch: pytest.MonkeyPatch):
        self.path = path
        self.args_file = args_file
        self._monkeypatch = monkeypatch

    def configure(
        self,
        stdout: str = "",
        exit_code: int = 0,
        stderr: str = "",
        sleep: float = 0,
        stdout_bytes: Optional[bytes] = None,
    ) -> None:
        self._monkeypatch.setenv("FAKE_HELM_STDOUT", stdout)
        if stdout_bytes is None:
            self._monkeypatch.delenv("FAKE_HELM_STDOUT_FILE", raising=False)
        else:
            stdout_file = self.path.with_name("helm-stdout.bin")
            stdout_file.write_bytes(stdout_bytes)
            self._monkeypatch.setenv("FAKE_HELM_STDOUT_FILE", str(stdout_file))
        self._monkeypatch.setenv("FAKE_HELM_EXIT", str(exit_code))
        self._monkeypatch.setenv("FAKE_HELM_STDERR", stderr)
        self._monkeypatch.setenv("FAKE_HELM_SLEEP", str(sleep))

    def argv(self) -> Optional[List[str]]:
        if not self.args_file.exists():
            return None
        return json.loads(self.args_file.read_text())


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Give every test fresh settings, free of the caller's environment."""
    for name in list(os.environ):
        if name.upper().startswith("HELMHISTORY_"):
            monkeypatch.delenv(name)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def fake_helm(tmp_path, monkeypatch) -> FakeHelm:
    path = tmp_path / "helm"
    path.write_text(FAKE_HELM_SCRIPT.format(python=sys.executable))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    args_file = tmp_path / "helm-args.json"
    monkeypatch.setenv("FAKE_HELM_ARGS_FILE", str(args_file))

    helm = FakeHelm(path, args_file, monkeypatch)
    helm.configure()
    return helm
