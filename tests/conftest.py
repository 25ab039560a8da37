from __future__ import annotations

import os
from typing import Callable, Iterator

import pytest

from kilo.editor import Editor


class KeyPipe:
    """Non-blocking pipe standing in for the terminal's input side."""

    def __init__(self) -> None:
        self.read_fd, self.write_fd = os.pipe()
        os.set_blocking(self.read_fd, False)

    def send(self, data: bytes | str) -> None:
        if isinstance(data, str):
            data = data.encode("latin-1")
        os.write(self.write_fd, data)

    def close(self) -> None:
        os.close(self.read_fd)
        os.close(self.write_fd)


@pytest.fixture
def keys() -> Iterator[KeyPipe]:
    pipe = KeyPipe()
    yield pipe
    pipe.close()


@pytest.fixture
def devnull() -> Iterator[int]:
    fd = os.open(os.devnull, os.O_WRONLY)
    yield fd
    os.close(fd)


@pytest.fixture
def make_editor(keys: KeyPipe, devnull: int) -> Callable[..., Editor]:
    def factory(
        lines: list[str] | None = None,
        filename: str | None = None,
        size: tuple[int, int] = (24, 80),
    ) -> Editor:
        editor = Editor(stdin_fd=keys.read_fd, stdout_fd=devnull, screen_size=size)
        if filename is not None:
            editor.cfg.filename = filename
            editor.select_syntax_highlight(filename)
        for line in lines or []:
            editor.insert_row(editor.cfg.numrows, line)
        editor.cfg.dirty = 0
        return editor

    return factory
