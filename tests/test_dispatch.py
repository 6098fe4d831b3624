"""Tests for ssh/scp dispatch with fake child processes."""

from __future__ import annotations

import os
import subprocess
from typing import Any

import pytest

from stool.command import dispatch, expect, runner
from stool.command.secrets import SecretBuffer
from stool.errors import ErrorKind, StoolError
from stool.models import Credential, Target


class FakeRun:
    def __init__(self, returncode: int = 0, error: OSError | None = None) -> None:
        self.returncode = returncode
        self.error = error
        self.calls: list[list[str]] = []

    def __call__(self, argv: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(argv)
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(argv, self.returncode)


class FakeExpect:
    """Stands in for ``expect``: reads the script from the passed fd on wait()."""

    instances: list[FakeExpect] = []
    returncode = 0

    def __init__(self, argv: list[str], pass_fds: tuple[int, ...] = (), **kwargs: Any) -> None:
        self.argv = argv
        self.pass_fds = pass_fds
        self._fd = os.dup(pass_fds[0])
        self.script = b""
        FakeExpect.instances.append(self)

    def wait(self) -> int:
        chunks = []
        while chunk := os.read(self._fd, 4096):
            chunks.append(chunk)
        os.close(self._fd)
        self.script = b"".join(chunks)
        return self.returncode

    def kill(self) -> None:
        pass


@pytest.fixture
def fake_expect(monkeypatch: pytest.MonkeyPatch) -> type[FakeExpect]:
    FakeExpect.instances = []
    FakeExpect.returncode = 0
    monkeypatch.setattr(expect.subprocess, "Popen", FakeExpect)
    return FakeExpect


def test_connect_with_key(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)
    target = Target(name="web", host="10.0.0.5", user="ubuntu", credential=Credential.key("/k"))

    dispatch.connect(target)

    assert fake.calls == [["ssh", "-i", "/k", "ubuntu@10.0.0.5"]]


def test_connect_default_auth(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)

    dispatch.connect(Target(name="web", host="h", user="u"))

    assert fake.calls == [["ssh", "u@h"]]


def test_connect_nonzero_exit_is_connection_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(runner.subprocess, "run", FakeRun(returncode=255))

    with pytest.raises(StoolError) as excinfo:
        dispatch.connect(Target(name="web", host="h", user="u"))

    assert excinfo.value.kind == ErrorKind.ssh_connection_failed
    assert "exit status 255" in str(excinfo.value)


def test_connect_spawn_failure_keeps_cause(monkeypatch: pytest.MonkeyPatch) -> None:
    missing = FileNotFoundError(2, "No such file or directory", "ssh")
    monkeypatch.setattr(runner.subprocess, "run", FakeRun(error=missing))

    with pytest.raises(StoolError) as excinfo:
        dispatch.connect(Target(name="web", host="h", user="u"))

    assert excinfo.value.kind == ErrorKind.ssh_connection_failed
    assert excinfo.value.__cause__ is missing


def test_connect_with_password_keeps_secret_off_argv(fake_expect: type[FakeExpect]) -> None:
    target = Target(
        name="db", host="10.0.0.6", user="admin", credential=Credential.with_password("hunter2")
    )

    dispatch.connect(target)

    (process,) = fake_expect.instances
    assert process.argv[:2] == ["expect", "-f"]
    assert process.argv[2] == f"/dev/fd/{process.pass_fds[0]}"
    assert not any("hunter2" in arg for arg in process.argv)
    assert b'send -- "hunter2\\r"' in process.script
    assert b'"admin@10.0.0.6"' in process.script


def test_password_exit_status_maps_to_kind(fake_expect: type[FakeExpect]) -> None:
    fake_expect.returncode = 1

    with pytest.raises(StoolError) as excinfo:
        dispatch.transfer("a.txt", "u@h:~/", Credential.with_password("pw"))

    assert excinfo.value.kind == ErrorKind.file_transfer_failed


def test_expect_missing_is_expect_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(*args: Any, **kwargs: Any) -> None:
        raise FileNotFoundError(2, "No such file or directory", "expect")

    monkeypatch.setattr(expect.subprocess, "Popen", missing)
    script = SecretBuffer(b"spawn ssh u@h\n")

    with pytest.raises(StoolError) as excinfo:
        expect.run_expect_script(script, ErrorKind.ssh_connection_failed, "Failed")

    assert excinfo.value.kind == ErrorKind.expect_command_failed
    assert script.wiped


def test_pipe_failure_wipes_script(monkeypatch: pytest.MonkeyPatch) -> None:
    exhausted = OSError(24, "Too many open files")

    def no_pipe() -> tuple[int, int]:
        raise exhausted

    monkeypatch.setattr(expect.os, "pipe", no_pipe)
    script = SecretBuffer(b'send -- "hunter2\\r"\n')

    with pytest.raises(StoolError) as excinfo:
        expect.run_expect_script(script, ErrorKind.ssh_connection_failed, "Failed")

    assert excinfo.value.kind == ErrorKind.expect_command_failed
    assert excinfo.value.__cause__ is exhausted
    assert script.wiped


def test_expect_script_wiped_after_run(fake_expect: type[FakeExpect]) -> None:
    script = SecretBuffer(b"send -- \"secret\\r\"\n")

    expect.run_expect_script(script, ErrorKind.ssh_connection_failed, "Failed")

    assert script.wiped
    assert fake_expect.instances[0].script == b"send -- \"secret\\r\"\n"


def test_transfer_with_key(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = FakeRun()
    monkeypatch.setattr(runner.subprocess, "run", fake)

    dispatch.transfer("u@h:/var/log/app.log", "/tmp/", Credential.key("/k"))

    assert fake.calls == [["scp", "-i", "/k", "u@h:/var/log/app.log", "/tmp/"]]


def test_transfer_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(runner.subprocess, "run", FakeRun(returncode=1))

    with pytest.raises(StoolError) as excinfo:
        dispatch.transfer("a", "u@h:b", Credential.none())

    assert excinfo.value.kind == ErrorKind.file_transfer_failed


def test_execute_with_input_writes_and_wipes(monkeypatch: pytest.MonkeyPatch) -> None:
    received: list[bytes] = []

    class FakeStdin:
        def write(self, data: bytearray) -> None:
            received.append(bytes(data))

        def close(self) -> None:
            pass

    class FakePopen:
        def __init__(self, argv: list[str], **kwargs: Any) -> None:
            self.argv = argv
            self.stdin = FakeStdin()

        def wait(self) -> int:
            return 0

    monkeypatch.setattr(runner.subprocess, "Popen", FakePopen)
    token = SecretBuffer("ecr-token")

    runner.execute_with_input(["docker", "login"], token, ErrorKind.docker_command_failed)

    assert received == [b"ecr-token"]
    assert token.wiped


def test_execute_with_input_write_failure_kills_and_wipes(monkeypatch: pytest.MonkeyPatch) -> None:
    killed: list[bool] = []

    class BrokenStdin:
        def write(self, data: bytearray) -> None:
            raise BrokenPipeError(32, "Broken pipe")

        def close(self) -> None:
            pass

    class FakePopen:
        def __init__(self, argv: list[str], **kwargs: Any) -> None:
            self.stdin = BrokenStdin()

        def kill(self) -> None:
            killed.append(True)

        def wait(self) -> int:
            return -9

    monkeypatch.setattr(runner.subprocess, "Popen", FakePopen)
    token = SecretBuffer("ecr-token")

    with pytest.raises(StoolError) as excinfo:
        runner.execute_with_input(["docker", "login"], token, ErrorKind.docker_command_failed)

    assert excinfo.value.kind == ErrorKind.docker_command_failed
    assert killed == [True]
    assert token.wiped


def test_require_program_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(runner.shutil, "which", lambda name: None)

    with pytest.raises(StoolError) as excinfo:
        runner.require_program("docker", ErrorKind.docker_not_installed, "brew install docker")

    assert excinfo.value.kind == ErrorKind.docker_not_installed
    assert "brew install docker" in str(excinfo.value)
