from __future__ import annotations

import errno
import os
import termios

import pytest

from kilo.constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    BACKSPACE,
    CTRL_F,
    CTRL_Q,
    CTRL_S,
    DEL_KEY,
    END_KEY,
    ENTER,
    ESC,
    HOME_KEY,
    PAGE_DOWN,
    PAGE_UP,
)
from kilo.terminal import (
    RawMode,
    get_cursor_position,
    get_window_size,
    make_raw,
    read_byte,
    read_key,
)


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"\x1b[A", ARROW_UP),
        (b"\x1b[B", ARROW_DOWN),
        (b"\x1b[C", ARROW_RIGHT),
        (b"\x1b[D", ARROW_LEFT),
        (b"\x1b[H", HOME_KEY),
        (b"\x1b[F", END_KEY),
        (b"\x1b[1~", HOME_KEY),
        (b"\x1b[7~", HOME_KEY),
        (b"\x1b[4~", END_KEY),
        (b"\x1b[8~", END_KEY),
        (b"\x1b[5~", PAGE_UP),
        (b"\x1b[6~", PAGE_DOWN),
        (b"\x1b[3~", DEL_KEY),
        (b"\x1bOH", HOME_KEY),
        (b"\x1bOF", END_KEY),
    ],
)
def test_escape_sequences(keys, data, expected):
    keys.send(data)
    assert read_key(keys.read_fd) == expected


@pytest.mark.parametrize(
    "data",
    [
        b"\x1b",
        b"\x1b[",
        b"\x1b[5",
        b"\x1b[5x",
        b"\x1b[9~",
        b"\x1b[Z",
        b"\x1bOA",
        b"\x1bxy",
    ],
)
def test_incomplete_or_unknown_sequences_are_escape(keys, data):
    keys.send(data)
    assert read_key(keys.read_fd) == ESC


def test_plain_and_control_bytes(keys):
    keys.send(b"a\r\x7f\x11\x13\x06")
    fd = keys.read_fd
    assert [read_key(fd) for _ in range(6)] == [ord("a"), ENTER, BACKSPACE, CTRL_Q, CTRL_S, CTRL_F]


def test_keys_are_read_one_per_call(keys):
    keys.send(b"\x1b[Ax")
    assert read_key(keys.read_fd) == ARROW_UP
    assert read_key(keys.read_fd) == ord("x")


def test_read_byte_without_data_returns_none(keys):
    assert read_byte(keys.read_fd) is None


def test_read_byte_at_eof_returns_none():
    r, w = os.pipe()
    os.close(w)
    try:
        assert read_byte(r) is None
    finally:
        os.close(r)


def test_read_error_propagates():
    r, w = os.pipe()
    os.close(r)
    os.close(w)
    with pytest.raises(OSError) as excinfo:
        read_key(r)
    assert excinfo.value.errno == errno.EBADF


def test_raw_mode_requires_a_tty(keys):
    with pytest.raises(OSError) as excinfo:
        with RawMode(keys.read_fd):
            pass
    assert excinfo.value.errno == errno.ENOTTY


def test_make_raw_flags():
    cc = [b"\x00"] * 32
    attrs = [~0 & 0xFFFF, ~0 & 0xFFFF, 0, ~0 & 0xFFFF, 38400, 38400, cc]
    iflag, oflag, cflag, lflag, ispeed, ospeed, raw_cc = make_raw(attrs)
    assert not iflag & (termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    assert not oflag & termios.OPOST
    assert cflag & termios.CS8 == termios.CS8
    assert not lflag & (termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    assert (ispeed, ospeed) == (38400, 38400)
    assert raw_cc[termios.VMIN] == 0
    assert raw_cc[termios.VTIME] == 1
    assert cc[termios.VTIME] == b"\x00"


def test_cursor_position_reply(keys, devnull):
    keys.send(b"\x1b[12;34R")
    assert get_cursor_position(keys.read_fd, devnull) == (12, 34)


def test_cursor_position_bad_reply(keys, devnull):
    keys.send(b"\x1b[12;R")
    with pytest.raises(OSError):
        get_cursor_position(keys.read_fd, devnull)


def test_window_size_falls_back_to_cursor_query(keys, devnull):
    # /dev/null has no window size, so the far-corner probe is used.
    keys.send(b"\x1b[3;7R\x1b[40;120R")
    assert get_window_size(keys.read_fd, devnull) == (40, 120)


def test_idle_callback_runs_until_a_key_arrives(keys):
    calls = []

    def idle():
        calls.append(len(calls))
        if len(calls) == 3:
            keys.send(b"q")

    assert read_key(keys.read_fd, on_idle=idle) == ord("q")
    assert calls == [0, 1, 2]
