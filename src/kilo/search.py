from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .constants import (
    ARROW_DOWN,
    ARROW_LEFT,
    ARROW_RIGHT,
    ARROW_UP,
    ENTER,
    ESC,
    HL_MATCH,
)
from .models import SearchSnapshot, SearchState

if TYPE_CHECKING:
    from .editor import Editor

logger = logging.getLogger(__name__)


def search_next_match(editor: Editor, query: str, last_match: int, direction: int) -> tuple[int, int] | None:
    rows = editor.cfg.rows
    if not query:
        return None
    current = last_match
    for _ in range(len(rows)):
        current += direction
        if current == -1:
            current = len(rows) - 1
        elif current == len(rows):
            current = 0
        pos = rows[current].render.find(query)
        if pos != -1:
            return current, pos
    return None


class Search:
    """Incremental search driven through the editor prompt.

    ``state`` is None while idle. During a session it holds the last match
    and the highlight of the row painted with ``HL_MATCH``, which is put
    back before every new lookup and when the session ends.
    """

    def __init__(self, editor: Editor) -> None:
        self.editor = editor
        self.state: SearchState | None = None

    @property
    def searching(self) -> bool:
        return self.state is not None

    def find(self) -> None:
        cfg = self.editor.cfg
        saved = SearchSnapshot(cfg.cx, cfg.cy, cfg.coloff, cfg.rowoff)
        self.state = SearchState()
        try:
            query = self.editor.prompt("Search: %s (Use ESC/Arrows/Enter)", self.on_key)
        finally:
            self.restore_highlight()
            self.state = None

        if query is None:
            cfg.cx = saved.cx
            cfg.cy = saved.cy
            cfg.coloff = saved.coloff
            cfg.rowoff = saved.rowoff

    def restore_highlight(self) -> None:
        state = self.state
        if state is None or state.saved_hl is None:
            return
        rows = self.editor.cfg.rows
        if 0 <= state.saved_hl_line < len(rows):
            rows[state.saved_hl_line].hl = state.saved_hl
        state.saved_hl = None
        state.saved_hl_line = -1

    def on_key(self, query: str, key: int) -> None:
        state = self.state
        if state is None:
            return
        self.restore_highlight()

        if key in (ENTER, ESC):
            state.last_match = -1
            state.direction = 1
            return
        if key in (ARROW_RIGHT, ARROW_DOWN):
            state.direction = 1
        elif key in (ARROW_LEFT, ARROW_UP):
            state.direction = -1
        else:
            state.last_match = -1
            state.direction = 1

        if state.last_match == -1:
            state.direction = 1

        match = search_next_match(self.editor, query, state.last_match, state.direction)
        if match is None:
            return

        match_row, offset = match
        cfg = self.editor.cfg
        row = cfg.rows[match_row]
        state.last_match = match_row
        cfg.cy = match_row
        cfg.cx = row.rx_to_cx(offset, cfg.tab_stop)
        cfg.rowoff = cfg.numrows

        state.saved_hl_line = match_row
        state.saved_hl = row.hl.copy()
        for i in range(offset, min(offset + len(query), row.rsize)):
            row.hl[i] = HL_MATCH
        logger.debug("Match for %r at row %d col %d", query, match_row, offset)
