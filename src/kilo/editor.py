from __future__ import annotations

import errno
import logging
import os
import signal
import sys
import time
from typing import Any, Callable, Final

from .config import load_config
from .constants import (
    ANSI_CLEAR_SCREEN,
    ANSI_CURSOR_HOME,
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    BACKSPACE,
    CTRL_F,
    CTRL_H,
    CTRL_L,
    CTRL_Q,
    CTRL_S,
    DEL_KEY,
    END_KEY,
    ENTER,
    ESC,
    HOME_KEY,
    PAGE_DOWN,
    PAGE_UP,
    TAB,
)
from .logging_config import setup_logging
from .models import EditorConfig, Row
from .search import Search
from .syntax import select_syntax_highlight, update_syntax
from .terminal import RawMode, get_window_size, read_key
from .ui import prompt, refresh_screen

logger = logging.getLogger(__name__)

STDIN_FD: Final[int] = 0
STDOUT_FD: Final[int] = 1


class Editor:
    def __init__(
        self,
        stdin_fd: int = STDIN_FD,
        stdout_fd: int = STDOUT_FD,
        screen_size: tuple[int, int] | None = None,
    ) -> None:
        self.cfg = EditorConfig()
        self.quit_times = self.cfg.quit_times
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.search = Search(self)
        self.resize_pending = False
        if screen_size is None:
            self.update_window_size()
        else:
            self.set_screen_size(*screen_size)

    def apply_config(self, config: dict[str, Any]) -> None:
        section = config.get("editor", {})
        tab_stop = section.get("tab_stop", self.cfg.tab_stop)
        self.cfg.quit_times = section.get("quit_times", self.cfg.quit_times)
        self.cfg.message_timeout = section.get("message_timeout", self.cfg.message_timeout)
        self.quit_times = self.cfg.quit_times
        if tab_stop != self.cfg.tab_stop:
            self.cfg.tab_stop = tab_stop
            for row in self.cfg.rows:
                self.update_row(row)

    def set_screen_size(self, rows: int, cols: int) -> None:
        self.cfg.screenrows = max(1, rows - 2)
        self.cfg.screencols = max(1, cols)

    def update_window_size(self) -> None:
        try:
            rows, cols = get_window_size(self.stdin_fd, self.stdout_fd)
        except OSError as exc:
            raise OSError(exc.errno, "Unable to query screen size") from exc
        self.set_screen_size(rows, cols)

    def handle_sigwinch(self, _signum: int, _frame) -> None:
        # Applied between keys by apply_pending_resize.
        self.resize_pending = True

    def apply_pending_resize(self) -> None:
        if not self.resize_pending:
            return
        self.resize_pending = False
        self.update_window_size()
        logger.debug("Resized to %dx%d", self.cfg.screenrows, self.cfg.screencols)
        self.refresh_screen()

    def read_key(self) -> int:
        return read_key(self.stdin_fd, on_idle=self.apply_pending_resize)

    def set_status_message(self, fmt: str, *args: object) -> None:
        self.cfg.statusmsg = fmt % args if args else fmt
        self.cfg.statusmsg_time = time.time()

    def select_syntax_highlight(self, filename: str | None) -> None:
        select_syntax_highlight(self.cfg, filename)

    # Row operations.

    def update_row(self, row: Row) -> None:
        row.update_render(self.cfg.tab_stop)
        update_syntax(self.cfg, row.idx)

    def insert_row(self, at: int, s: str) -> None:
        if at < 0 or at > self.cfg.numrows:
            return
        # Seed the open comment flag with what the next row saw before the
        # insert, so a change in the new row's state cascades past it.
        prev_oc = self.cfg.rows[at - 1].hl_oc if at > 0 else False
        self.cfg.rows.insert(at, Row(idx=at, chars=s, hl_oc=prev_oc))
        for j in range(at + 1, self.cfg.numrows):
            self.cfg.rows[j].idx = j
        self.update_row(self.cfg.rows[at])
        self.cfg.dirty += 1

    def del_row(self, at: int) -> None:
        if at < 0 or at >= self.cfg.numrows:
            return
        del self.cfg.rows[at]
        for j in range(at, self.cfg.numrows):
            self.cfg.rows[j].idx = j
        if at < self.cfg.numrows:
            update_syntax(self.cfg, at)
        self.cfg.dirty += 1

    def rows_to_string(self) -> str:
        return "".join(f"{row.chars}\n" for row in self.cfg.rows)

    def row_insert_char(self, row: Row, at: int, c: str) -> None:
        if at < 0 or at > row.size:
            at = row.size
        row.chars = row.chars[:at] + c + row.chars[at:]
        self.update_row(row)
        self.cfg.dirty += 1

    def row_append_string(self, row: Row, s: str) -> None:
        row.chars += s
        self.update_row(row)
        self.cfg.dirty += 1

    def row_del_char(self, row: Row, at: int) -> None:
        if at < 0 or at >= row.size:
            return
        row.chars = row.chars[:at] + row.chars[at + 1 :]
        self.update_row(row)
        self.cfg.dirty += 1

    # Editor operations.

    def insert_char(self, c: int) -> None:
        if self.cfg.cy == self.cfg.numrows:
            self.insert_row(self.cfg.numrows, "")
        self.row_insert_char(self.cfg.rows[self.cfg.cy], self.cfg.cx, chr(c))
        self.cfg.cx += 1

    def insert_newline(self) -> None:
        cfg = self.cfg
        if cfg.cx == 0:
            self.insert_row(cfg.cy, "")
        else:
            row = cfg.rows[cfg.cy]
            self.insert_row(cfg.cy + 1, row.chars[cfg.cx :])
            row = cfg.rows[cfg.cy]
            row.chars = row.chars[: cfg.cx]
            self.update_row(row)
        cfg.cy += 1
        cfg.cx = 0

    def del_char(self) -> None:
        cfg = self.cfg
        if cfg.cy == cfg.numrows:
            return
        if cfg.cx == 0 and cfg.cy == 0:
            return

        row = cfg.rows[cfg.cy]
        if cfg.cx > 0:
            self.row_del_char(row, cfg.cx - 1)
            cfg.cx -= 1
        else:
            prev = cfg.rows[cfg.cy - 1]
            cfg.cx = prev.size
            self.row_append_string(prev, row.chars)
            self.del_row(cfg.cy)
            cfg.cy -= 1

    # File i/o.

    def open_file(self, filename: str) -> int:
        self.cfg.filename = filename
        self.select_syntax_highlight(filename)
        try:
            with open(filename, "rb") as f:
                for line in f:
                    self.insert_row(self.cfg.numrows, line.rstrip(b"\r\n").decode("latin-1"))
        except FileNotFoundError:
            logger.info("%s does not exist, starting with an empty buffer", filename)
            self.cfg.dirty = 0
            self.set_status_message("New file")
            return 1
        except OSError as exc:
            raise OSError(exc.errno, f"Opening file failed: {filename}") from exc
        self.cfg.dirty = 0
        logger.info("Opened %s (%d lines)", filename, self.cfg.numrows)
        return 0

    def save(self) -> int:
        if not self.cfg.filename:
            filename = self.prompt("Save as: %s (ESC to cancel)")
            if filename is None:
                self.set_status_message("Save aborted")
                return 1
            self.cfg.filename = filename
            self.select_syntax_highlight(filename)

        data = self.rows_to_string().encode("latin-1")
        try:
            _overwrite(self.cfg.filename, data)
        except OSError as exc:
            logger.warning("Saving %s failed: %s", self.cfg.filename, exc)
            self.set_status_message("Can't save! I/O error: %s", os.strerror(exc.errno or errno.EIO))
            return 1

        self.cfg.dirty = 0
        logger.info("Wrote %d bytes to %s", len(data), self.cfg.filename)
        self.set_status_message("%d bytes written to disk", len(data))
        return 0

    # Input.

    def refresh_screen(self) -> None:
        refresh_screen(self)

    def prompt(self, fmt: str, callback: Callable[[str, int], None] | None = None) -> str | None:
        return prompt(self, fmt, callback)

    def find(self) -> None:
        self.search.find()

    def move_cursor(self, key: int) -> None:
        cfg = self.cfg
        row = cfg.rows[cfg.cy] if cfg.cy < cfg.numrows else None

        if key == ARROW_LEFT:
            if cfg.cx != 0:
                cfg.cx -= 1
            elif cfg.cy > 0:
                cfg.cy -= 1
                cfg.cx = cfg.rows[cfg.cy].size
        elif key == ARROW_RIGHT:
            if row is not None and cfg.cx < row.size:
                cfg.cx += 1
            elif row is not None and cfg.cx == row.size:
                cfg.cy += 1
                cfg.cx = 0
        elif key == ARROW_UP:
            if cfg.cy != 0:
                cfg.cy -= 1
        elif key == ARROW_DOWN:
            if cfg.cy < cfg.numrows:
                cfg.cy += 1

        row = cfg.rows[cfg.cy] if cfg.cy < cfg.numrows else None
        rowlen = row.size if row is not None else 0
        if cfg.cx > rowlen:
            cfg.cx = rowlen

    def process_keypress(self) -> None:
        cfg = self.cfg
        c = self.read_key()
        if c == ENTER:
            self.insert_newline()
        elif c == CTRL_Q:
            if cfg.dirty and self.quit_times > 0:
                self.set_status_message(
                    "WARNING!!! File has unsaved changes. Press Ctrl-Q %d more times to quit.",
                    self.quit_times,
                )
                self.quit_times -= 1
                return
            raise SystemExit(0)
        elif c == CTRL_S:
            self.save()
        elif c == CTRL_F:
            self.find()
        elif c == HOME_KEY:
            cfg.cx = 0
        elif c == END_KEY:
            if cfg.cy < cfg.numrows:
                cfg.cx = cfg.rows[cfg.cy].size
        elif c in (BACKSPACE, CTRL_H, DEL_KEY):
            if c == DEL_KEY:
                self.move_cursor(ARROW_RIGHT)
            self.del_char()
        elif c in (PAGE_UP, PAGE_DOWN):
            if c == PAGE_UP:
                cfg.cy = cfg.rowoff
            else:
                cfg.cy = min(cfg.rowoff + cfg.screenrows - 1, cfg.numrows)
            for _ in range(cfg.screenrows):
                self.move_cursor(ARROW_UP if c == PAGE_UP else ARROW_DOWN)
        elif c in (ARROW_UP, ARROW_DOWN, ARROW_LEFT, ARROW_RIGHT):
            self.move_cursor(c)
        elif c in (CTRL_L, ESC):
            pass
        elif c == TAB or 32 <= c <= 126:
            self.insert_char(c)

        self.quit_times = cfg.quit_times


def _overwrite(filename: str, data: bytes) -> None:
    """Truncate ``filename`` to ``len(data)`` and write ``data`` over it."""
    fd = os.open(filename, os.O_RDWR | os.O_CREAT, 0o644)
    try:
        os.ftruncate(fd, len(data))
        view = memoryview(data)
        while view:
            n = os.write(fd, view)
            if n <= 0:
                raise OSError(errno.EIO, "short write")
            view = view[n:]
    finally:
        os.close(fd)


def _clear_screen() -> None:
    os.write(STDOUT_FD, (ANSI_CLEAR_SCREEN + ANSI_CURSOR_HOME).encode())


def run(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) > 1:
        print("Usage: kilo [filename]", file=sys.stderr)
        return 1
    if not os.isatty(STDIN_FD) or not os.isatty(STDOUT_FD):
        print("kilo: stdin/stdout must be a tty", file=sys.stderr)
        return 1

    config = load_config()
    setup_logging(config)

    try:
        with RawMode(STDIN_FD):
            editor = Editor()
            editor.apply_config(config)
            if args:
                editor.open_file(args[0])
            signal.signal(signal.SIGWINCH, editor.handle_sigwinch)
            if not editor.cfg.statusmsg:
                editor.set_status_message("HELP: Ctrl-S = save | Ctrl-Q = quit | Ctrl-F = find")
            while True:
                editor.refresh_screen()
                editor.process_keypress()
    except SystemExit as exc:
        _clear_screen()
        logger.info("Exiting")
        if isinstance(exc.code, int):
            return exc.code
        return 0
    except OSError as exc:
        _clear_screen()
        logger.exception("Fatal terminal error")
        print(f"kilo: {exc}", file=sys.stderr)
        return 1
