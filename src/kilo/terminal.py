from __future__ import annotations

import errno
import fcntl
import logging
import os
import re
import struct
import termios
from contextlib import AbstractContextManager
from typing import Callable

from .constants import (
    CSI_SIMPLE_MAP,
    CSI_TILDE_MAP,
    ESC,
    SS3_SIMPLE_MAP,
)

logger = logging.getLogger(__name__)
KEY_LOGGER = logging.getLogger("kilo.keyevents")


def read_byte(fd: int) -> int | None:
    try:
        data = os.read(fd, 1)
    except (BlockingIOError, InterruptedError):
        return None
    if not data:
        return None
    return data[0]


def _read_byte_blocking(fd: int, on_idle: Callable[[], None] | None = None) -> int:
    while True:
        c = read_byte(fd)
        if c is not None:
            return c
        if on_idle is not None:
            on_idle()


def read_key(fd: int, on_idle: Callable[[], None] | None = None) -> int:
    """Block until one key is decoded.

    ``on_idle`` runs each time a read times out with no input. No edit is
    in progress at that point.
    """
    key = _decode_key(fd, on_idle)
    KEY_LOGGER.debug("key %d", key)
    return key


def _decode_key(fd: int, on_idle: Callable[[], None] | None = None) -> int:
    c = _read_byte_blocking(fd, on_idle)
    if c != ESC:
        return c

    seq0 = read_byte(fd)
    if seq0 is None:
        return ESC
    seq1 = read_byte(fd)
    if seq1 is None:
        return ESC

    if seq0 == ord("["):
        if ord("0") <= seq1 <= ord("9"):
            seq2 = read_byte(fd)
            if seq2 is None:
                return ESC
            if seq2 == ord("~"):
                return CSI_TILDE_MAP.get(seq1, ESC)
            return ESC
        return CSI_SIMPLE_MAP.get(seq1, ESC)
    if seq0 == ord("O"):
        return SS3_SIMPLE_MAP.get(seq1, ESC)
    return ESC


CURSOR_QUERY = b"\x1b[6n"
CURSOR_FAR_CORNER = b"\x1b[999C\x1b[999B"
CURSOR_REPORT_RE = re.compile(rb"\x1b\[(\d+);(\d+)R")
CURSOR_REPORT_MAX = 32


def _write_all_or_fail(fd: int, data: bytes, what: str) -> None:
    if os.write(fd, data) != len(data):
        raise OSError(errno.EIO, f"{what} write failed")


def get_cursor_position(ifd: int, ofd: int) -> tuple[int, int]:
    """Ask the terminal where the cursor is, as 1-based (row, col)."""
    _write_all_or_fail(ofd, CURSOR_QUERY, "cursor query")

    reply = bytearray()
    while len(reply) < CURSOR_REPORT_MAX - 1:
        c = read_byte(ifd)
        if c is None:
            break
        reply.append(c)
        if c == ord("R"):
            break

    m = CURSOR_REPORT_RE.fullmatch(bytes(reply))
    if m is None:
        raise OSError(errno.EIO, f"invalid cursor position response {bytes(reply)!r}")
    row, col = m.groups()
    return int(row), int(col)


def _ioctl_window_size(fd: int) -> tuple[int, int] | None:
    try:
        winsize = fcntl.ioctl(fd, termios.TIOCGWINSZ, bytes(8))
    except OSError as exc:
        logger.debug("TIOCGWINSZ failed (%s), falling back to cursor query", exc)
        return None
    rows, cols = struct.unpack("HH", winsize[:4])
    return (rows, cols) if cols else None


def get_window_size(ifd: int, ofd: int) -> tuple[int, int]:
    size = _ioctl_window_size(ofd)
    if size is not None:
        return size

    # Push the cursor into the bottom-right corner and read back where it stopped.
    saved_row, saved_col = get_cursor_position(ifd, ofd)
    _write_all_or_fail(ofd, CURSOR_FAR_CORNER, "window query")
    size = get_cursor_position(ifd, ofd)
    os.write(ofd, b"\x1b[%d;%dH" % (saved_row, saved_col))
    return size


def make_raw(attrs: list) -> list:
    """Return a copy of tcgetattr() output switched to kilo's raw mode."""
    iflag, oflag, cflag, lflag, ispeed, ospeed, cc = attrs
    iflag &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON)
    oflag &= ~termios.OPOST
    cflag |= termios.CS8
    lflag &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
    cc = list(cc)
    # Reads return after at most 100 ms even with no input.
    cc[termios.VMIN] = 0
    cc[termios.VTIME] = 1
    return [iflag, oflag, cflag, lflag, ispeed, ospeed, cc]


class RawMode(AbstractContextManager["RawMode"]):
    """Put a terminal fd in raw mode for the duration of a ``with`` block."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._saved: list | None = None

    def __enter__(self) -> "RawMode":
        if not os.isatty(self.fd):
            raise OSError(errno.ENOTTY, f"fd {self.fd} is not a tty")
        self._saved = termios.tcgetattr(self.fd)
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, make_raw(self._saved))
        logger.debug("Raw mode enabled on fd %d", self.fd)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._saved is None:
            return
        termios.tcsetattr(self.fd, termios.TCSAFLUSH, self._saved)
        self._saved = None
        logger.debug("Terminal mode restored on fd %d", self.fd)
