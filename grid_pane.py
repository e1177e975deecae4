import curses

import column_types
import diff_engine
import tsv_document
from selection_model import Target

_BASIC_COLORS = [
    (curses.COLOR_RED, (205, 49, 49)),
    (curses.COLOR_GREEN, (13, 188, 121)),
    (curses.COLOR_YELLOW, (229, 229, 16)),
    (curses.COLOR_BLUE, (36, 114, 200)),
    (curses.COLOR_MAGENTA, (188, 63, 188)),
    (curses.COLOR_CYAN, (17, 168, 205)),
    (curses.COLOR_WHITE, (229, 229, 229)),
]


def nearest_curses_color(hex_color: str) -> int:
    rgb = tuple(int(hex_color[i : i + 2], 16) for i in (1, 3, 5))

    def distance(item):
        return sum((a - b) ** 2 for a, b in zip(rgb, item[1]))

    return min(_BASIC_COLORS, key=distance)[0]


class GridPane:
    PAIR_CELL_TEXT = 1
    PAIR_GUTTER = 2
    PAIR_MODIFIED = 3
    PAIR_BASE_ONLY = 4
    PAIR_MOD_ONLY = 5
    PAIR_COLUMN_BASE = 10
    MAX_COL_WIDTH = 40
    MIN_COL_WIDTH = 3
    SCROLL_MARGIN = 10

    def __init__(self, session, dark=True):
        self.session = session
        self.dark = dark
        self.colors = False
        try:
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(self.PAIR_CELL_TEXT, curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_GUTTER, curses.COLOR_BLUE, -1)
            curses.init_pair(self.PAIR_MODIFIED, curses.COLOR_BLACK, curses.COLOR_YELLOW)
            curses.init_pair(self.PAIR_BASE_ONLY, curses.COLOR_BLACK, curses.COLOR_RED)
            curses.init_pair(self.PAIR_MOD_ONLY, curses.COLOR_BLACK, curses.COLOR_GREEN)
            palette = column_types.DARK_PALETTE if dark else column_types.LIGHT_PALETTE
            for i, color in enumerate(palette):
                curses.init_pair(self.PAIR_COLUMN_BASE + i, nearest_curses_color(color), -1)
            self.colors = True
        except curses.error:
            pass

        self.row_offset = 0  # first visible body row, counted from the first body row
        self.col_offset = 0

        # geometry of the last draw, used for hit testing
        self.gutter_w = 2
        self.col_spans = []  # (col, x, width)
        self.row_lines = []  # (row, y)
        self.cursor_yx = None

    # ---------- geometry ----------
    @property
    def first_body_row(self) -> int:
        return 1 if self.session.has_header else 0

    def loaded_rows(self) -> int:
        """Rows the pane may show: the materialized feed, plus diff-only rows at the end."""
        feed = self.session.feed
        if not feed.exhausted:
            return feed.materialized
        return self.session.shape()[0]

    def column_widths(self):
        grid = self.session.grid[: self.loaded_rows()]
        if self.session.base_grid is not None:
            grid = grid + self.session.base_grid[len(grid) : self.loaded_rows()]
        widths = tsv_document.column_widths(grid)
        total = self.session.shape()[1]
        widths += [0] * (total - len(widths))
        return [min(self.MAX_COL_WIDTH, max(self.MIN_COL_WIDTH, w)) for w in widths]

    def _gutter_width(self) -> int:
        if self.session.show_serial_index:
            return max(3, len(str(self.loaded_rows())) + 1)
        return 2

    def _visible_cols(self, widths, avail_w):
        cols = []
        used = 0
        for c in range(self.col_offset, len(widths)):
            if used + widths[c] + 1 > avail_w and cols:
                break
            cols.append(c)
            used += widths[c] + 1
        return cols

    # ---------- scrolling ----------
    def load_through(self, row: int):
        feed = self.session.feed
        while not feed.exhausted and row >= feed.materialized:
            feed.next_chunk()

    def ensure_visible(self, row: int, col: int, win):
        h, w = win.getmaxyx()
        body_h = max(1, h - 1)
        self.load_through(row)

        body_idx = row - self.first_body_row
        if body_idx >= 0:
            if body_idx < self.row_offset:
                self.row_offset = body_idx
            elif body_idx >= self.row_offset + body_h:
                self.row_offset = body_idx - body_h + 1

        widths = self.column_widths()
        if col < self.col_offset:
            self.col_offset = col
        else:
            avail_w = max(1, w - self._gutter_width() - 1)
            while col >= self.col_offset + max(1, len(self._visible_cols(widths, avail_w))):
                self.col_offset += 1
        self.col_offset = max(0, min(self.col_offset, max(0, len(widths) - 1)))

    def scroll(self, delta: int, win):
        h, _ = win.getmaxyx()
        body_rows = max(0, self.loaded_rows() - self.first_body_row)
        self.row_offset = max(0, min(self.row_offset + delta, max(0, body_rows - 1)))
        self.request_rows(self.first_body_row + self.row_offset + h - 1)

    def request_rows(self, last_visible_row: int) -> bool:
        feed = self.session.feed
        if feed.wants_more(last_visible_row, self.SCROLL_MARGIN):
            return feed.next_chunk() is not None
        return False

    # ---------- hit testing ----------
    def hit_test(self, y: int, x: int):
        if y < 0 or x < 0:
            return None
        if y == 0:
            if x < self.gutter_w:
                return Target.corner()
            col = self._col_at(x)
            return Target.column_header(col) if col is not None else None
        row = self._row_at(y)
        if row is None:
            return None
        if x < self.gutter_w:
            return Target.row_gutter(row)
        col = self._col_at(x)
        if col is None:
            return None
        return Target.cell(row, col)

    def _col_at(self, x: int):
        if not self.col_spans:
            return None
        for col, start, width in self.col_spans:
            if start <= x < start + width + 1:
                return col
        # past the right edge
        return self.col_spans[-1][0]

    def _row_at(self, y: int):
        if not self.row_lines:
            return None
        for row, line_y in self.row_lines:
            if line_y == y:
                return row
        return self.row_lines[-1][0]

    # ---------- rendering ----------
    def _cell_attr(self, row, col, diff_cell):
        session = self.session
        attr = curses.color_pair(self.PAIR_CELL_TEXT)
        if self.colors:
            palette_len = len(column_types.DARK_PALETTE)
            attr = curses.color_pair(self.PAIR_COLUMN_BASE + col % palette_len)
        if diff_cell is not None and self.colors:
            if diff_cell.status == diff_engine.MODIFIED:
                attr = curses.color_pair(self.PAIR_MODIFIED)
            elif diff_cell.status == diff_engine.BASE_ONLY:
                attr = curses.color_pair(self.PAIR_BASE_ONLY)
            elif diff_cell.status == diff_engine.MOD_ONLY:
                attr = curses.color_pair(self.PAIR_MOD_ONLY)
        if session.selection.is_selected(row, col):
            attr |= curses.A_REVERSE
        return attr

    def _cell_text(self, row, col, diff_cell):
        if diff_cell is not None and diff_cell.status == diff_engine.BASE_ONLY:
            return diff_cell.base_value
        return self.session.value_at(row, col)

    def _diff_cell(self, row, col):
        rows = self.session.diff_rows
        if rows is None or row >= len(rows):
            return None
        return rows[row].cell(col)

    def _put(self, win, y, x, text, width, attr=0):
        try:
            win.addnstr(y, x, text, width, attr)
        except curses.error:
            pass

    def draw(self, win):
        win.erase()
        h, w = win.getmaxyx()
        session = self.session
        selection = session.selection
        self.cursor_yx = None

        widths = self.column_widths()
        self.gutter_w = self._gutter_width()
        avail_w = max(1, w - self.gutter_w - 1)
        self.col_offset = max(0, min(self.col_offset, max(0, len(widths) - 1)))
        visible_cols = self._visible_cols(widths, avail_w)

        self.col_spans = []
        x = self.gutter_w + 1
        for c in visible_cols:
            cw = min(widths[c], max(1, w - x - 1))
            self.col_spans.append((c, x, cw))
            x += cw + 1

        # header
        self._put(win, 0, 0, "#".rjust(self.gutter_w - 1), self.gutter_w, curses.color_pair(self.PAIR_GUTTER))
        for c, x, cw in self.col_spans:
            if session.has_header:
                label = session.value_at(0, c)
                attr = self._cell_attr(0, c, self._diff_cell(0, c)) | curses.A_BOLD
                if selection.is_editing and selection.editing_cell == (0, c):
                    label = selection.edit_buffer
                    attr |= curses.A_UNDERLINE
                    self.cursor_yx = (0, x + min(selection.edit_cursor, cw - 1))
            else:
                label = str(c + 1)
                attr = curses.A_BOLD
                if selection.is_selected(0, c) and selection.mode in ("column", "all"):
                    attr |= curses.A_REVERSE
            self._put(win, 0, x, label[:cw].ljust(cw), cw, attr)

        # body
        self.row_lines = []
        first = self.first_body_row + self.row_offset
        last = min(self.loaded_rows(), first + max(0, h - 1))
        y = 1
        for r in range(first, last):
            gutter = str(r - self.first_body_row + 1) if session.show_serial_index else ""
            gutter_attr = curses.color_pair(self.PAIR_GUTTER)
            if selection.has_selection and selection.mode == "row" and selection.is_selected(r, 0):
                gutter_attr |= curses.A_REVERSE
            self._put(win, y, 0, gutter.rjust(self.gutter_w - 1), self.gutter_w, gutter_attr)
            for c, x, cw in self.col_spans:
                diff_cell = self._diff_cell(r, c)
                text = self._cell_text(r, c, diff_cell)
                attr = self._cell_attr(r, c, diff_cell)
                if selection.is_editing and selection.editing_cell == (r, c):
                    text = selection.edit_buffer
                    attr |= curses.A_UNDERLINE
                    shift = max(0, selection.edit_cursor - cw + 1)
                    text = text[shift:]
                    self.cursor_yx = (y, x + selection.edit_cursor - shift)
                self._put(win, y, x, text[:cw].ljust(cw), cw, attr)
            self.row_lines.append((r, y))
            y += 1

        win.refresh()

        if last > first:
            self.request_rows(last - 1)
