"""Shared fakes for the supervisor tests."""

from __future__ import annotations

import itertools

import pytest

from dnsmasqd.config import DnsmasqConfig
from dnsmasqd.errors import FileReadError
from dnsmasqd.services.dnsmasq import DnsmasqSupervisor

ROOT_DS = ". IN DS 20326 8 2 E06D44B80B8F1D39A95C0B0D7C65D08458E880409BBC683457104237C7F8EC8"


class FakeProcess:
    def __init__(self, pid: int, kill_error: Exception | None = None):
        self.pid = pid
        self.returncode: int | None = None
        self.kill_error = kill_error
        self.killed = False

    def poll(self) -> int | None:
        return self.returncode

    def kill(self) -> None:
        if self.kill_error is not None:
            raise self.kill_error
        self.killed = True

    def exit(self, code: int = 0) -> None:
        self.returncode = code


class FakeLauncher:
    def __init__(self):
        self.calls: list[list[str]] = []
        self.processes: list[FakeProcess] = []
        self.error: Exception | None = None
        self._pids = itertools.count(1000)

    def __call__(self, argv: list[str]) -> FakeProcess:
        self.calls.append(list(argv))
        if self.error is not None:
            raise self.error
        proc = FakeProcess(next(self._pids))
        self.processes.append(proc)
        return proc


class FakeFiles:
    """File reader collaborator backed by a dict of path -> content."""

    def __init__(self, files: dict[str, str] | None = None):
        self.files = dict(files or {})
        self.reads: list[str] = []

    def __call__(self, path: str) -> str:
        self.reads.append(path)
        if path not in self.files:
            try:
                raise FileNotFoundError(2, "No such file or directory", path)
            except FileNotFoundError as e:
                raise FileReadError(path, e.strerror) from e
        return self.files[path]


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def files() -> FakeFiles:
    return FakeFiles()


@pytest.fixture
def config() -> DnsmasqConfig:
    return DnsmasqConfig(bridge_addr="10.1.2.1")


@pytest.fixture
def supervisor(config, files, launcher) -> DnsmasqSupervisor:
    return DnsmasqSupervisor(config, file_reader=files, launcher=launcher)
