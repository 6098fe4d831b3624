"""Tests for secret buffers."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from stool.command.secrets import SecretBuffer, wipe


def test_secret_buffer_wiped_after_block() -> None:
    buffer = SecretBuffer("hunter2")

    with buffer as data:
        assert bytes(data) == b"hunter2"

    assert buffer.wiped
    assert bytes(data) == b"\x00" * 7


def test_secret_buffer_wiped_on_error() -> None:
    buffer = SecretBuffer(SecretStr("hunter2"))

    with pytest.raises(RuntimeError):
        with buffer:
            raise RuntimeError("write failed")

    assert buffer.wiped


def test_secret_buffer_takes_over_bytearray() -> None:
    original = bytearray(b"token")
    buffer = SecretBuffer(original)

    assert original == bytearray(5)
    with buffer as data:
        assert bytes(data) == b"token"


def test_secret_buffer_repr_is_masked() -> None:
    assert "hunter2" not in repr(SecretBuffer("hunter2"))


def test_wipe_zeroes_in_place() -> None:
    data = bytearray(b"abc")
    wipe(data)
    assert data == bytearray(3)
