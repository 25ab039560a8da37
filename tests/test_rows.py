from __future__ import annotations

import pytest

from kilo.models import Row


def make_row(chars: str, tab_stop: int = 8) -> Row:
    row = Row(idx=0, chars=chars)
    row.update_render(tab_stop)
    return row


def test_tabs_expand_to_next_stop():
    row = make_row("\tab\tc")
    assert row.render == " " * 8 + "ab" + " " * 6 + "c"
    assert "\t" in row.chars


def test_tab_advances_to_next_multiple():
    for prefix_len in range(0, 12):
        row = make_row("x" * prefix_len + "\t")
        r = prefix_len
        assert row.cx_to_rx(prefix_len + 1) == r + (8 - r % 8)


def test_cx_to_rx_is_monotonic():
    row = make_row("a\tbc\t\td\te")
    values = [row.cx_to_rx(cx) for cx in range(row.size + 1)]
    assert values == sorted(values)
    assert values[-1] == row.rsize


def test_rx_to_cx_round_trips_without_tabs():
    row = make_row("hello world")
    for cx in range(row.size + 1):
        assert row.rx_to_cx(row.cx_to_rx(cx)) == cx


def test_rx_to_cx_is_left_inverse_with_tabs():
    row = make_row("a\tb\t\tc")
    for r in range(row.rsize + 4):
        assert row.cx_to_rx(row.rx_to_cx(r)) <= r


def test_rx_inside_tab_maps_to_the_tab():
    row = make_row("a\tb")
    assert row.rx_to_cx(3) == 1
    assert row.rx_to_cx(8) == 2


def test_custom_tab_stop():
    row = make_row("\tx", tab_stop=4)
    assert row.render == "    x"
    assert row.cx_to_rx(1, 4) == 4


def test_insert_row_renumbers_and_marks_dirty(make_editor):
    editor = make_editor(["one", "three"])
    editor.insert_row(1, "two")
    assert [row.chars for row in editor.cfg.rows] == ["one", "two", "three"]
    assert [row.idx for row in editor.cfg.rows] == [0, 1, 2]
    assert editor.cfg.dirty == 1


@pytest.mark.parametrize("at", [-1, 3])
def test_insert_row_out_of_bounds_is_ignored(make_editor, at):
    editor = make_editor(["a", "b"])
    editor.insert_row(at, "x")
    assert editor.cfg.numrows == 2
    assert editor.cfg.dirty == 0


def test_del_row_renumbers(make_editor):
    editor = make_editor(["a", "b", "c"])
    editor.del_row(0)
    assert [(row.idx, row.chars) for row in editor.cfg.rows] == [(0, "b"), (1, "c")]
    assert editor.cfg.dirty == 1
    editor.del_row(5)
    assert editor.cfg.numrows == 2


def test_insert_char_past_last_row_appends_row(make_editor):
    editor = make_editor(["abc"])
    editor.cfg.cy = 1
    editor.insert_char(ord("x"))
    assert [row.chars for row in editor.cfg.rows] == ["abc", "x"]
    assert (editor.cfg.cy, editor.cfg.cx) == (1, 1)
    assert editor.cfg.dirty > 0


def test_insert_then_delete_restores_row(make_editor):
    editor = make_editor(["hello"])
    editor.cfg.cx = 2
    editor.insert_char(ord("Z"))
    assert editor.cfg.rows[0].chars == "heZllo"
    editor.del_char()
    assert editor.cfg.rows[0].chars == "hello"
    assert editor.cfg.cx == 2


def test_del_char_is_noop_at_start_and_past_end(make_editor):
    editor = make_editor(["abc"])
    editor.del_char()
    assert editor.cfg.rows[0].chars == "abc"
    editor.cfg.cy = 1
    editor.del_char()
    assert editor.cfg.rows[0].chars == "abc"
    assert editor.cfg.dirty == 0


def test_backspace_at_line_start_joins_rows(make_editor):
    editor = make_editor(["foo", "bar", "baz"])
    editor.cfg.cy = 1
    editor.del_char()
    assert [row.chars for row in editor.cfg.rows] == ["foobar", "baz"]
    assert (editor.cfg.cy, editor.cfg.cx) == (0, 3)
    assert editor.cfg.rows[1].idx == 1


@pytest.mark.parametrize("k", [1, 3, 6])
def test_split_then_join_restores_row(make_editor, k):
    editor = make_editor(["abc\tdef"])
    editor.cfg.cx = k
    editor.insert_newline()
    assert editor.cfg.rows[0].chars == "abc\tdef"[:k]
    assert editor.cfg.rows[1].chars == "abc\tdef"[k:]
    editor.del_char()
    assert editor.cfg.numrows == 1
    assert editor.cfg.rows[0].chars == "abc\tdef"
    assert (editor.cfg.cy, editor.cfg.cx) == (0, k)


def test_newline_at_column_zero_inserts_empty_row_before(make_editor):
    editor = make_editor(["abc"])
    editor.insert_newline()
    assert [row.chars for row in editor.cfg.rows] == ["", "abc"]
    assert (editor.cfg.cy, editor.cfg.cx) == (1, 0)


def test_enter_at_end_of_second_line(make_editor):
    editor = make_editor(["first", "second", "third"])
    editor.cfg.cy = 1
    editor.cfg.cx = 3
    editor.insert_newline()
    assert [row.chars for row in editor.cfg.rows] == ["first", "sec", "ond", "third"]
    assert (editor.cfg.cy, editor.cfg.cx) == (2, 0)
    assert editor.cfg.dirty > 0


def test_enter_at_end_of_line_adds_empty_row(make_editor):
    editor = make_editor(["first", "second", "third"])
    editor.cfg.cy = 1
    editor.cfg.cx = len("second")
    editor.insert_newline()
    assert editor.cfg.numrows == 4
    assert [row.chars for row in editor.cfg.rows] == ["first", "second", "", "third"]
    assert (editor.cfg.cy, editor.cfg.cx) == (2, 0)
    assert editor.cfg.dirty > 0


def test_render_and_highlight_stay_in_step(make_editor):
    editor = make_editor(["int\tx = 1;", "/* a\t", "b */ 'c'"], filename="t.c")
    editor.cfg.cy = 1
    editor.cfg.cx = 2
    editor.insert_char(ord("\t"))
    editor.insert_newline()
    editor.del_char()
    editor.cfg.cy = 2
    editor.cfg.cx = 0
    editor.del_char()
    for row in editor.cfg.rows:
        assert len(row.render) == len(row.hl)


def test_rows_to_string(make_editor):
    editor = make_editor(["a", "", "b\tc"])
    assert editor.rows_to_string() == "a\n\nb\tc\n"
