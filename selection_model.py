from dataclasses import dataclass
from typing import Callable, Optional

IDLE = "idle"
DRAGGING = "dragging"
EDITING = "editing"

MODE_CELL = "cell"
MODE_ROW = "row"
MODE_COLUMN = "column"
MODE_ALL = "all"

TARGET_CELL = "cell"
TARGET_COLUMN_HEADER = "column_header"
TARGET_ROW_GUTTER = "row_gutter"
TARGET_CORNER = "corner"

_STEPS = {
    "up": (-1, 0),
    "down": (1, 0),
    "left": (0, -1),
    "right": (0, 1),
}


@dataclass(frozen=True)
class Target:
    kind: str
    row: int = 0
    col: int = 0

    @classmethod
    def cell(cls, row: int, col: int):
        return cls(TARGET_CELL, row, col)

    @classmethod
    def column_header(cls, col: int):
        return cls(TARGET_COLUMN_HEADER, 0, col)

    @classmethod
    def row_gutter(cls, row: int):
        return cls(TARGET_ROW_GUTTER, row, 0)

    @classmethod
    def corner(cls):
        return cls(TARGET_CORNER)


@dataclass(frozen=True)
class SelectionRange:
    anchor: Optional[tuple]
    focus: Optional[tuple]
    mode: str


class SelectionModel:
    """Pointer/keyboard selection and in-place editing, free of any rendering."""

    def __init__(
        self,
        shape: Callable[[], tuple],
        value_at: Callable[[int, int], str],
        on_commit: Optional[Callable[[int, int, str], None]] = None,
    ):
        self._shape = shape
        self._value_at = value_at
        self._on_commit = on_commit

        self.state = IDLE
        self.mode = MODE_CELL
        self.anchor: Optional[tuple] = None
        self.focus: Optional[tuple] = None
        self.has_selection = False

        # Editing state
        self.editing_cell: Optional[tuple] = None
        self.edit_buffer = ""
        self.edit_cursor = 0
        self.original_value = ""


    # ---------- queries ----------
    @property
    def range(self) -> Optional[SelectionRange]:
        if not self.has_selection:
            return None
        return SelectionRange(self.anchor, self.focus, self.mode)

    @property
    def is_editing(self) -> bool:
        return self.state == EDITING

    @property
    def is_dragging(self) -> bool:
        return self.state == DRAGGING

    def _exists(self, row: int, col: int) -> bool:
        rows, cols = self._shape()
        return 0 <= row < rows and 0 <= col < cols

    def bounding_rect(self):
        """(r0, r1, c0, c1) inclusive, or None when nothing is selected."""
        if not self.has_selection:
            return None
        rows, cols = self._shape()
        if self.mode == MODE_ALL:
            if rows == 0 or cols == 0:
                return None
            return (0, rows - 1, 0, cols - 1)
        (ar, ac), (fr, fc) = self.anchor, self.focus
        r0, r1 = sorted((ar, fr))
        c0, c1 = sorted((ac, fc))
        if self.mode == MODE_ROW:
            if cols == 0:
                return None
            return (r0, r1, 0, cols - 1)
        if self.mode == MODE_COLUMN:
            if rows == 0:
                return None
            return (0, rows - 1, c0, c1)
        return (r0, r1, c0, c1)

    def is_selected(self, row: int, col: int) -> bool:
        rect = self.bounding_rect()
        if rect is None:
            return False
        r0, r1, c0, c1 = rect
        return r0 <= row <= r1 and c0 <= col <= c1

    def selected_cells(self) -> list[tuple]:
        rect = self.bounding_rect()
        if rect is None:
            return []
        r0, r1, c0, c1 = rect
        return [(r, c) for r in range(r0, r1 + 1) for c in range(c0, c1 + 1)]

    def is_single_cell(self) -> bool:
        return (
            self.has_selection
            and self.mode == MODE_CELL
            and self.anchor is not None
            and self.anchor == self.focus
        )

    # ---------- selection helpers ----------
    def _select(self, anchor, focus, mode):
        self.anchor = anchor
        self.focus = focus
        self.mode = mode
        self.has_selection = True

    def clear(self):
        self.has_selection = False
        self.mode = MODE_CELL

    def select_all(self, keep_anchor: bool = True):
        if self.state == EDITING:
            self.commit()
        self.state = IDLE
        self.has_selection = True
        self.mode = MODE_ALL
        if not keep_anchor:
            self.anchor = None
            self.focus = None

    def clamp(self):
        """Drop selection parts that no longer exist after the grid shrank."""
        rows, cols = self._shape()
        if self.state == EDITING and not self._exists(*self.editing_cell):
            self._end_editing()
            self.state = IDLE
        if self.anchor is not None and not self._exists(*self.anchor):
            self.anchor = None
            self.focus = None
            self.clear()
        elif self.focus is not None and not self._exists(*self.focus):
            self.focus = (min(self.focus[0], rows - 1), min(self.focus[1], cols - 1))

    # ---------- pointer ----------
    def pointer_down(self, target: Target, shift: bool = False):
        if (
            shift
            and self.state != EDITING
            and self.anchor is not None
            and self.mode != MODE_ROW
            and target.kind in (TARGET_CELL, TARGET_COLUMN_HEADER)
        ):
            self._select(self.anchor, (target.row, target.col), MODE_CELL)
            self.state = IDLE
            return

        if self.state == EDITING:
            self.commit()

        if target.kind == TARGET_CORNER:
            self.select_all(keep_anchor=False)
            return

        self.clear()
        if target.kind == TARGET_COLUMN_HEADER:
            mode = MODE_COLUMN
        elif target.kind == TARGET_ROW_GUTTER:
            mode = MODE_ROW
        else:
            mode = MODE_CELL
        self._select((target.row, target.col), (target.row, target.col), mode)
        self.state = DRAGGING

    def pointer_move(self, target: Target):
        if self.state != DRAGGING:
            return
        if self.mode == MODE_ROW:
            focus = (target.row, self.anchor[1])
        elif self.mode == MODE_COLUMN:
            focus = (self.anchor[0], target.col)
        else:
            if target.kind == TARGET_CORNER:
                return
            focus = (target.row, max(0, target.col))
        self.focus = focus

    def pointer_up(self):
        if self.state != DRAGGING:
            return
        if self.mode == MODE_CELL and self.anchor == self.focus:
            self._select(self.anchor, self.anchor, MODE_CELL)
        self.state = IDLE

    # ---------- keyboard ----------
    def key(self, name: str, shift: bool = False):
        if self.state == EDITING:
            self._editing_key(name, shift)
            return
        if self.state == DRAGGING:
            return

        if name in _STEPS:
            if shift:
                self._extend(name)
            else:
                self._move(name)
            return

        if name == "enter" and self.is_single_cell():
            self.begin_edit(*self.anchor)
            return

        if name == "escape":
            self.clear()

    def type_char(self, ch: str):
        if self.state == EDITING:
            buf, idx = self.edit_buffer, self.edit_cursor
            self.edit_buffer = buf[:idx] + ch + buf[idx:]
            self.edit_cursor += len(ch)
            return
        if self.state == IDLE and self.is_single_cell() and len(ch) == 1 and ch.isprintable():
            self.begin_edit(*self.anchor)
            self.edit_buffer = ch
            self.edit_cursor = 1

    def _move(self, name: str):
        if self.anchor is None:
            return
        dr, dc = _STEPS[name]
        row, col = self.anchor[0] + dr, self.anchor[1] + dc
        if row < 0 or col < 0 or not self._exists(row, col):
            return
        self._select((row, col), (row, col), MODE_CELL)

    def _extend(self, name: str):
        if self.anchor is None or not self.has_selection:
            return
        dr, dc = _STEPS[name]
        start = self.focus if self.focus is not None else self.anchor
        row, col = start[0] + dr, start[1] + dc
        if row < 0 or col < 0 or not self._exists(row, col):
            return
        self._select(self.anchor, (row, col), MODE_CELL)

    # ---------- editing ----------
    def begin_edit(self, row: int, col: int):
        self.state = EDITING
        self.editing_cell = (row, col)
        self.original_value = self._value_at(row, col)
        self.edit_buffer = self.original_value
        self.edit_cursor = len(self.edit_buffer)
        self._select((row, col), (row, col), MODE_CELL)

    def _end_editing(self):
        self.editing_cell = None
        self.edit_buffer = ""
        self.edit_cursor = 0
        self.original_value = ""

    def commit(self):
        if self.state != EDITING:
            return
        row, col = self.editing_cell
        value = self.edit_buffer
        self._end_editing()
        self.state = IDLE
        if self._on_commit is not None:
            self._on_commit(row, col, value)

    def blur(self):
        self.commit()

    def cancel_edit(self):
        if self.state != EDITING:
            return
        self.edit_buffer = self.original_value
        self._end_editing()
        self.state = IDLE

    def _editing_key(self, name: str, shift: bool):
        row, col = self.editing_cell
        if name == "enter":
            self.commit()
            if self._exists(row + 1, col):
                self.begin_edit(row + 1, col)
            return
        if name == "tab":
            self.commit()
            target = col - 1 if shift else col + 1
            if self._exists(row, target):
                self.begin_edit(row, target)
            return
        if name == "escape":
            self.cancel_edit()
            return

        buf, idx = self.edit_buffer, self.edit_cursor
        if name == "backspace":
            if idx > 0:
                self.edit_buffer = buf[: idx - 1] + buf[idx:]
                self.edit_cursor -= 1
        elif name == "delete":
            self.edit_buffer = buf[:idx] + buf[idx + 1 :]
        elif name == "left":
            self.edit_cursor = max(0, idx - 1)
        elif name == "right":
            self.edit_cursor = min(len(buf), idx + 1)
        elif name == "home":
            self.edit_cursor = 0
        elif name == "end":
            self.edit_cursor = len(buf)

    # ---------- clipboard ----------
    def copy_text(self) -> Optional[str]:
        rect = self.bounding_rect()
        if rect is None:
            return None
        r0, r1, c0, c1 = rect
        lines = []
        for r in range(r0, r1 + 1):
            lines.append(",".join(self._value_at(r, c) for c in range(c0, c1 + 1)))
        return "\n".join(lines)
