from __future__ import annotations

from dataclasses import dataclass, field

from .constants import KILO_MESSAGE_TIMEOUT, KILO_QUIT_TIMES, KILO_TAB_STOP


@dataclass(frozen=True, slots=True)
class EditorSyntax:
    filetype: str
    filematch: tuple[str, ...]
    keywords: tuple[str, ...]
    singleline_comment_start: str
    multiline_comment_start: str
    multiline_comment_end: str
    flags: int


@dataclass(slots=True)
class Row:
    idx: int
    chars: str
    render: str = ""
    hl: list[int] = field(default_factory=list)
    hl_oc: bool = False

    @property
    def size(self) -> int:
        return len(self.chars)

    @property
    def rsize(self) -> int:
        return len(self.render)

    def update_render(self, tab_stop: int = KILO_TAB_STOP) -> None:
        out: list[str] = []
        idx = 0
        for ch in self.chars:
            if ch == "\t":
                out.append(" ")
                idx += 1
                while idx % tab_stop != 0:
                    out.append(" ")
                    idx += 1
            else:
                out.append(ch)
                idx += 1
        self.render = "".join(out)

    def cx_to_rx(self, cx: int, tab_stop: int = KILO_TAB_STOP) -> int:
        rx = 0
        for ch in self.chars[:cx]:
            if ch == "\t":
                rx += (tab_stop - 1) - (rx % tab_stop)
            rx += 1
        return rx

    def rx_to_cx(self, rx: int, tab_stop: int = KILO_TAB_STOP) -> int:
        cur_rx = 0
        for cx, ch in enumerate(self.chars):
            if ch == "\t":
                cur_rx += (tab_stop - 1) - (cur_rx % tab_stop)
            cur_rx += 1
            if cur_rx > rx:
                return cx
        return self.size


@dataclass(slots=True)
class SearchState:
    last_match: int = -1
    direction: int = 1
    saved_hl_line: int = -1
    saved_hl: list[int] | None = None


@dataclass(slots=True)
class SearchSnapshot:
    cx: int
    cy: int
    coloff: int
    rowoff: int


@dataclass(slots=True)
class EditorConfig:
    cx: int = 0
    cy: int = 0
    rx: int = 0
    rowoff: int = 0
    coloff: int = 0
    screenrows: int = 0
    screencols: int = 0
    rows: list[Row] = field(default_factory=list)
    dirty: int = 0
    filename: str | None = None
    statusmsg: str = ""
    statusmsg_time: float = 0.0
    syntax: EditorSyntax | None = None
    tab_stop: int = KILO_TAB_STOP
    quit_times: int = KILO_QUIT_TIMES
    message_timeout: float = KILO_MESSAGE_TIMEOUT

    @property
    def numrows(self) -> int:
        return len(self.rows)
