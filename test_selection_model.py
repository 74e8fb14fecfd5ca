import unittest

from record_store import RecordStore
from row_schema import Row
from selection_model import Cell, SelectionModel


def _selection(rows=4):
    store = RecordStore([Row(id=f"r{i}") for i in range(rows)])
    return SelectionModel(store), store


class SelectionRangeTests(unittest.TestCase):
    def test_set_active_cell_collapses_range(self):
        sel, _ = _selection()
        sel.extend_range(Cell(2, "term"))
        self.assertTrue(sel.has_range)
        sel.set_active_cell(Cell(1, "medium"))
        self.assertFalse(sel.has_range)
        self.assertEqual(sel.normalized_rect(), (1, 1, 2, 2))

    def test_extend_range_keeps_anchor(self):
        sel, _ = _selection()
        sel.set_active_cell(Cell(2, "campaign"))
        sel.extend_range(Cell(0, "source"))
        self.assertEqual(sel.anchor, Cell(2, "campaign"))
        self.assertEqual(sel.active_cell, Cell(2, "campaign"))
        self.assertEqual(sel.normalized_rect(), (0, 2, 1, 3))
        self.assertTrue(sel.contains(1, "medium"))
        self.assertFalse(sel.contains(1, "term"))
        self.assertEqual(len(list(sel.cells())), 9)

    def test_drag_extends_only_while_dragging(self):
        sel, _ = _selection()
        sel.begin_drag(Cell(0, "baseUrl"))
        sel.drag_to(Cell(1, "source"))
        sel.end_drag()
        sel.drag_to(Cell(3, "content"))
        self.assertEqual(sel.normalized_rect(), (0, 1, 0, 1))

    def test_clamp_pulls_stale_cell_back_inside(self):
        sel, store = _selection()
        sel.set_active_cell(Cell(3, "term"))
        sel.extend_range(Cell(0, "baseUrl"))
        store.remove(["r2", "r3"])
        sel.clamp()
        self.assertEqual(sel.active_cell, Cell(1, "term"))
        self.assertFalse(sel.has_range)


class CheckedRowTests(unittest.TestCase):
    def test_toggle_row_does_not_touch_range(self):
        sel, _ = _selection()
        sel.set_active_cell(Cell(1, "source"))
        sel.extend_range(Cell(2, "medium"))
        rect = sel.normalized_rect()

        self.assertTrue(sel.toggle_row_checked("r1"))
        self.assertEqual(sel.checked_ids(), ["r1"])
        self.assertFalse(sel.toggle_row_checked("r1"))
        self.assertEqual(sel.checked_ids(), [])
        self.assertEqual(sel.normalized_rect(), rect)

    def test_toggle_unknown_row_is_noop(self):
        sel, _ = _selection()
        self.assertFalse(sel.toggle_row_checked("ghost"))
        self.assertEqual(sel.checked_ids(), [])

    def test_toggle_all(self):
        sel, _ = _selection(3)
        sel.toggle_row_checked("r0")
        self.assertTrue(sel.toggle_all_checked())
        self.assertEqual(sel.checked_ids(), ["r0", "r1", "r2"])
        self.assertFalse(sel.toggle_all_checked())
        self.assertEqual(sel.checked_ids(), [])


if __name__ == "__main__":
    unittest.main()
