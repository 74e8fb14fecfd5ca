import time

from status_bar import render_status


def _context(**overrides):
    ctx = {
        "status_msg": None,
        "status_until": 0,
        "mode": "normal",
        "composing": False,
        "active_cell": (2, "medium"),
        "range_size": (1, 1),
        "total_rows": 5,
        "checked": 0,
        "undo_depth": 3,
        "redo_depth": 1,
    }
    ctx.update(overrides)
    return ctx


def test_grid_summary():
    text = render_status(_context(), 200)
    assert text.startswith(" GRID | row 2 medium | 5 rows | undo 3/redo 1")
    assert len(text) == 200


def test_mode_labels_and_range():
    assert " EDIT " in render_status(_context(mode="editing"), 80)
    assert " IME " in render_status(_context(mode="editing", composing=True), 80)
    text = render_status(_context(range_size=(3, 2), checked=2), 120)
    assert "[3x2]" in text
    assert "2 checked" in text


def test_timed_message_wins_until_expiry():
    live = _context(status_msg="Pasted 3x2", status_until=time.time() + 10)
    assert render_status(live, 40).strip() == "Pasted 3x2"
    expired = _context(status_msg="Pasted 3x2", status_until=time.time() - 1)
    assert "GRID" in render_status(expired, 80)


def test_truncates_to_width():
    assert len(render_status(_context(), 10)) == 10
