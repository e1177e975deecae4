import unittest

from selection_model import (
    DRAGGING,
    EDITING,
    IDLE,
    MODE_ALL,
    MODE_COLUMN,
    MODE_ROW,
    SelectionModel,
    Target,
)


class FakeGrid:
    def __init__(self, rows):
        self.rows = [list(r) for r in rows]
        self.commits = []

    def shape(self):
        return len(self.rows), max((len(r) for r in self.rows), default=0)

    def value_at(self, r, c):
        if r < len(self.rows) and c < len(self.rows[r]):
            return self.rows[r][c]
        return ""

    def commit(self, r, c, value):
        self.commits.append((r, c, value))


def _model(rows=None):
    grid = FakeGrid(rows or [["a", "b", "c"], ["d", "e", "f"], ["g", "h", "i"]])
    return SelectionModel(grid.shape, grid.value_at, grid.commit), grid


class PointerTests(unittest.TestCase):
    def test_click_selects_single_cell(self):
        model, _ = _model()
        model.pointer_down(Target.cell(1, 1))
        self.assertEqual(model.state, DRAGGING)
        model.pointer_up()
        self.assertEqual(model.state, IDLE)
        self.assertEqual(model.selected_cells(), [(1, 1)])
        self.assertTrue(model.is_single_cell())

    def test_drag_selects_rectangle_in_any_direction(self):
        model, _ = _model()
        model.pointer_down(Target.cell(2, 2))
        model.pointer_move(Target.cell(1, 2))
        model.pointer_move(Target.cell(0, 1))
        model.pointer_up()
        self.assertEqual(model.bounding_rect(), (0, 2, 1, 2))
        self.assertEqual(len(model.selected_cells()), 6)

    def test_gutter_drag_selects_full_rows(self):
        model, _ = _model()
        model.pointer_down(Target.row_gutter(0))
        model.pointer_move(Target.cell(1, 2))
        model.pointer_up()
        self.assertEqual(model.mode, MODE_ROW)
        self.assertEqual(model.bounding_rect(), (0, 1, 0, 2))

    def test_header_drag_selects_full_columns(self):
        model, _ = _model()
        model.pointer_down(Target.column_header(2))
        model.pointer_move(Target.cell(2, 1))
        model.pointer_up()
        self.assertEqual(model.mode, MODE_COLUMN)
        self.assertEqual(model.bounding_rect(), (0, 2, 1, 2))

    def test_corner_selects_everything(self):
        model, _ = _model()
        model.pointer_down(Target.corner())
        self.assertEqual(model.state, IDLE)
        self.assertEqual(model.mode, MODE_ALL)
        self.assertIsNone(model.anchor)
        self.assertEqual(len(model.selected_cells()), 9)

    def test_shift_click_extends_from_anchor(self):
        model, _ = _model()
        model.pointer_down(Target.cell(0, 0))
        model.pointer_up()
        model.pointer_down(Target.cell(2, 1), shift=True)
        self.assertEqual(model.state, IDLE)
        self.assertEqual(model.anchor, (0, 0))
        self.assertEqual(model.bounding_rect(), (0, 2, 0, 1))

    def test_shift_click_ignored_for_gutter(self):
        model, _ = _model()
        model.pointer_down(Target.cell(0, 0))
        model.pointer_up()
        model.pointer_down(Target.row_gutter(2), shift=True)
        # a gutter target starts a fresh row drag instead
        self.assertEqual(model.state, DRAGGING)
        self.assertEqual(model.mode, MODE_ROW)

    def test_moves_outside_drag_are_ignored(self):
        model, _ = _model()
        model.pointer_move(Target.cell(1, 1))
        self.assertIsNone(model.bounding_rect())


class KeyboardTests(unittest.TestCase):
    def _at(self, row, col, rows=None):
        model, grid = _model(rows)
        model.pointer_down(Target.cell(row, col))
        model.pointer_up()
        return model, grid

    def test_arrows_move_and_stop_at_edges(self):
        model, _ = self._at(0, 0)
        model.key("up")
        model.key("left")
        self.assertEqual(model.anchor, (0, 0))
        model.key("right")
        model.key("down")
        self.assertEqual(model.selected_cells(), [(1, 1)])
        model.key("down")
        model.key("down")
        self.assertEqual(model.anchor, (2, 1))

    def test_shift_arrows_keep_anchor(self):
        model, _ = self._at(1, 1)
        model.key("right", shift=True)
        model.key("down", shift=True)
        self.assertEqual(model.anchor, (1, 1))
        self.assertEqual(model.focus, (2, 2))
        model.key("up", shift=True)
        model.key("up", shift=True)
        self.assertEqual(model.bounding_rect(), (0, 1, 1, 2))

    def test_escape_clears_selection(self):
        model, _ = self._at(1, 1)
        model.key("escape")
        self.assertIsNone(model.bounding_rect())


class EditingTests(unittest.TestCase):
    def _at(self, row, col):
        model, grid = _model()
        model.pointer_down(Target.cell(row, col))
        model.pointer_up()
        return model, grid

    def test_enter_edits_and_moves_down(self):
        model, grid = self._at(0, 0)
        model.key("enter")
        self.assertEqual(model.state, EDITING)
        self.assertEqual(model.edit_buffer, "a")
        model.type_char("!")
        model.key("enter")
        self.assertEqual(grid.commits, [(0, 0, "a!")])
        self.assertEqual(model.editing_cell, (1, 0))
        self.assertEqual(model.edit_buffer, "d")

    def test_enter_on_last_row_returns_to_idle(self):
        model, grid = self._at(2, 0)
        model.key("enter")
        model.key("enter")
        self.assertEqual(model.state, IDLE)
        self.assertEqual(grid.commits, [(2, 0, "g")])

    def test_typing_replaces_value(self):
        model, grid = self._at(1, 1)
        model.type_char("x")
        self.assertEqual(model.edit_buffer, "x")
        model.type_char("y")
        model.blur()
        self.assertEqual(grid.commits, [(1, 1, "xy")])
        self.assertEqual(model.state, IDLE)

    def test_tab_and_shift_tab(self):
        model, grid = self._at(0, 1)
        model.key("enter")
        model.key("tab")
        self.assertEqual(model.editing_cell, (0, 2))
        model.key("tab", shift=True)
        self.assertEqual(model.editing_cell, (0, 1))
        model.key("tab")
        model.key("tab")
        self.assertEqual(model.state, IDLE)
        self.assertEqual(len(grid.commits), 4)

    def test_escape_restores_without_write(self):
        model, grid = self._at(0, 0)
        model.key("enter")
        model.key("backspace")
        model.type_char("zz")
        model.key("escape")
        self.assertEqual(model.state, IDLE)
        self.assertEqual(grid.commits, [])
        self.assertEqual(model.selected_cells(), [(0, 0)])

    def test_pointer_down_commits_open_edit(self):
        model, grid = self._at(0, 0)
        model.type_char("q")
        model.pointer_down(Target.cell(2, 2))
        self.assertEqual(grid.commits, [(0, 0, "q")])
        self.assertEqual(model.state, DRAGGING)

    def test_cursor_keys_edit_buffer(self):
        model, _ = self._at(0, 0)
        model.key("enter")
        model.key("home")
        model.type_char(">")
        model.key("end")
        model.key("left")
        model.key("delete")
        self.assertEqual(model.edit_buffer, ">")

    def test_multi_cell_selection_does_not_edit(self):
        model, grid = self._at(0, 0)
        model.key("right", shift=True)
        model.key("enter")
        model.type_char("x")
        self.assertEqual(model.state, IDLE)
        self.assertEqual(grid.commits, [])


class CopyTests(unittest.TestCase):
    def test_copy_bounding_rectangle(self):
        model, _ = _model([["a", "b"], ["c"]])
        model.pointer_down(Target.cell(0, 0))
        model.pointer_move(Target.cell(1, 1))
        model.pointer_up()
        self.assertEqual(model.copy_text(), "a,b\nc,")

    def test_copy_nothing_selected(self):
        model, _ = _model()
        self.assertIsNone(model.copy_text())

    def test_clamp_after_shrink(self):
        model, grid = _model()
        model.pointer_down(Target.cell(2, 2))
        model.pointer_up()
        grid.rows = [["a"]]
        model.clamp()
        self.assertIsNone(model.bounding_rect())


if __name__ == "__main__":
    unittest.main()
