from __future__ import annotations

import os
import time
from typing import TYPE_CHECKING, Callable

from .constants import (
    ANSI_CLEAR_LINE,
    ANSI_CURSOR_HOME,
    ANSI_DEFAULT_COLOR,
    ANSI_HIDE_CURSOR,
    ANSI_INVERT_OFF,
    ANSI_INVERT_ON,
    ANSI_SHOW_CURSOR,
    BACKSPACE,
    CTRL_H,
    DEL_KEY,
    ENTER,
    ESC,
    HL_NORMAL,
    KILO_VERSION,
)
from .models import EditorConfig
from .syntax import syntax_to_color

if TYPE_CHECKING:
    from .editor import Editor


def scroll(cfg: EditorConfig) -> None:
    cfg.rx = 0
    if cfg.cy < cfg.numrows:
        cfg.rx = cfg.rows[cfg.cy].cx_to_rx(cfg.cx, cfg.tab_stop)

    if cfg.cy < cfg.rowoff:
        cfg.rowoff = cfg.cy
    if cfg.cy >= cfg.rowoff + cfg.screenrows:
        cfg.rowoff = cfg.cy - cfg.screenrows + 1
    if cfg.rx < cfg.coloff:
        cfg.coloff = cfg.rx
    if cfg.rx >= cfg.coloff + cfg.screencols:
        cfg.coloff = cfg.rx - cfg.screencols + 1


def os_text(s: str) -> str:
    """Map a file name or OS message onto the frame's one-char-per-byte model."""
    return os.fsencode(s).decode("latin-1")


def compose_screen(cfg: EditorConfig) -> str:
    scroll(cfg)
    ab: list[str] = [ANSI_HIDE_CURSOR, ANSI_CURSOR_HOME]
    draw_rows(cfg, ab)
    draw_status_bar(cfg, ab)
    draw_message_bar(cfg, ab)
    ab.append(f"\x1b[{cfg.cy - cfg.rowoff + 1};{cfg.rx - cfg.coloff + 1}H")
    ab.append(ANSI_SHOW_CURSOR)
    return "".join(ab)


def refresh_screen(editor: Editor) -> None:
    # One write per frame; a short write is not retried.
    os.write(editor.stdout_fd, compose_screen(editor.cfg).encode("latin-1"))


def draw_rows(cfg: EditorConfig, ab: list[str]) -> None:
    for y in range(cfg.screenrows):
        filerow = cfg.rowoff + y
        if filerow >= cfg.numrows:
            if cfg.numrows == 0 and not cfg.filename and y == cfg.screenrows // 3:
                draw_welcome(cfg, ab)
            else:
                ab.append("~")
        else:
            draw_row(cfg, filerow, ab)
        ab.append(ANSI_CLEAR_LINE)
        ab.append("\r\n")


def draw_welcome(cfg: EditorConfig, ab: list[str]) -> None:
    welcome = f"Kilo editor -- version {KILO_VERSION}"
    if len(welcome) > cfg.screencols:
        welcome = welcome[: cfg.screencols]
    padding = (cfg.screencols - len(welcome)) // 2
    if padding:
        ab.append("~")
        padding -= 1
    if padding > 0:
        ab.append(" " * padding)
    ab.append(welcome)


def draw_row(cfg: EditorConfig, filerow: int, ab: list[str]) -> None:
    row = cfg.rows[filerow]
    start = cfg.coloff
    end = min(row.rsize, cfg.coloff + cfg.screencols)
    current_color = -1
    for j in range(start, end):
        ch = row.render[j]
        h = row.hl[j]
        code = ord(ch)
        if code < 32 or code == 127:
            sym = chr(ord("@") + code) if code <= 26 else "?"
            ab.append(ANSI_INVERT_ON)
            ab.append(sym)
            ab.append(ANSI_INVERT_OFF)
            if current_color != -1:
                ab.append(f"\x1b[{current_color}m")
        elif h == HL_NORMAL:
            if current_color != -1:
                ab.append(ANSI_DEFAULT_COLOR)
                current_color = -1
            ab.append(ch)
        else:
            color = syntax_to_color(h)
            if color != current_color:
                ab.append(f"\x1b[{color}m")
                current_color = color
            ab.append(ch)
    ab.append(ANSI_DEFAULT_COLOR)


def draw_status_bar(cfg: EditorConfig, ab: list[str]) -> None:
    ab.append(ANSI_INVERT_ON)
    filename = os_text(cfg.filename) if cfg.filename else "[No Name]"
    status = f"{filename:.20} - {cfg.numrows} lines {'(modified)' if cfg.dirty else ''}"
    filetype = cfg.syntax.filetype if cfg.syntax else "no ft"
    rstatus = f"{filetype} | {cfg.cy + 1}/{cfg.numrows}"
    if len(status) > cfg.screencols:
        status = status[: cfg.screencols]
    ab.append(status)
    fill = len(status)
    while fill < cfg.screencols:
        if cfg.screencols - fill == len(rstatus):
            ab.append(rstatus)
            break
        ab.append(" ")
        fill += 1
    ab.append(ANSI_INVERT_OFF)
    ab.append("\r\n")


def draw_message_bar(cfg: EditorConfig, ab: list[str]) -> None:
    ab.append(ANSI_CLEAR_LINE)
    if cfg.statusmsg and time.time() - cfg.statusmsg_time < cfg.message_timeout:
        ab.append(os_text(cfg.statusmsg)[: cfg.screencols])


def prompt(
    editor: Editor, fmt: str, callback: Callable[[str, int], None] | None = None
) -> str | None:
    """Read a line of input on the message bar.

    ``fmt`` gets the current input substituted for its ``%s``. ``callback``
    is invoked with the input and the key after every keypress, including
    the Enter or Escape that ends the prompt. Returns None when cancelled.
    """
    buf = ""
    while True:
        editor.set_status_message(fmt, buf)
        editor.refresh_screen()

        c = editor.read_key()
        if c in (DEL_KEY, CTRL_H, BACKSPACE):
            buf = buf[:-1]
        elif c == ESC:
            editor.set_status_message("")
            if callback is not None:
                callback(buf, c)
            return None
        elif c == ENTER:
            if buf:
                editor.set_status_message("")
                if callback is not None:
                    callback(buf, c)
                return buf
        elif 32 <= c < 127:
            buf += chr(c)

        if callback is not None:
            callback(buf, c)
