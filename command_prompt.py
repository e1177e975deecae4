import curses
import shlex
from typing import Callable

COMMANDS = {
    "ir": "insert row above",
    "irb": "insert row below",
    "dr": "delete row",
    "ic": "insert column left",
    "ica": "insert column right",
    "dc": "delete column",
    "sa": "sort ascending",
    "sd": "sort descending",
    "ac": "accept base cell",
    "ar": "accept base row",
    "diff": "compare with a base file",
    "nodiff": "leave diff mode",
    "header": "toggle first row as header",
    "index": "toggle serial index",
    "w": "save",
}


class CommandPrompt:
    """One-line prompt for structural commands, run against the current cell."""

    def __init__(self, session, set_status_cb: Callable[[str, int], None]):
        self.session = session
        self._set_status = set_status_cb

        self.active = False
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def start(self):
        self.active = True
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def _close(self):
        self.active = False
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0

    def _current_cell(self):
        selection = self.session.selection
        if selection.anchor is not None:
            return selection.anchor
        if selection.focus is not None:
            return selection.focus
        return None

    def execute(self, line: str) -> bool:
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            self._set_status(f"Bad command: {exc}", 4)
            return False
        if not parts:
            self._set_status("No command", 3)
            return False

        name, args = parts[0], parts[1:]
        session = self.session

        if name == "diff":
            if not args:
                self._set_status("Usage: diff <path>", 4)
                return False
            return session.enter_diff_mode(args[0])
        if name == "nodiff":
            session.exit_diff_mode()
            return True
        if name == "header":
            session.toggle_setting("treat_first_row_as_header")
            return True
        if name == "index":
            session.toggle_setting("add_serial_index")
            return True
        if name == "w":
            return session.save()

        if name not in COMMANDS:
            self._set_status(f"Unknown command: {name}", 4)
            return False

        cell = self._current_cell()
        if cell is None:
            if name in ("ir", "irb", "ic", "ica"):
                cell = (0, 0)
            else:
                self._set_status("Select a cell first", 3)
                return False
        row, col = cell

        if name == "ir":
            return session.insert_row(row)
        if name == "irb":
            return session.insert_row(row + 1)
        if name == "dr":
            return session.delete_row(row)
        if name == "ic":
            return session.insert_column(col)
        if name == "ica":
            return session.insert_column(col + 1)
        if name == "dc":
            return session.delete_column(col)
        if name == "sa":
            return session.sort_column(col, True)
        if name == "sd":
            return session.sort_column(col, False)
        if name == "ac":
            return session.accept_cell(row, col)
        if name == "ar":
            return session.accept_row(row)
        return False

    def handle_key(self, ch):
        if not self.active:
            return

        if ch in (10, 13, curses.KEY_ENTER):
            line = self.buffer.strip()
            self._close()
            self.execute(line)
            return

        if ch == 27:  # Esc
            self._close()
            return

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
            return

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return

        if ch == curses.KEY_HOME:
            self.cursor = 0
            return

        if ch == curses.KEY_END:
            self.cursor = len(self.buffer)
            return

        if 32 <= ch <= 126:
            self.buffer = self.buffer[: self.cursor] + chr(ch) + self.buffer[self.cursor :]
            self.cursor += 1
            return

    def draw(self, win):
        prompt = ": "
        h, w = win.getmaxyx()
        text_w = max(1, w - len(prompt) - 1)

        # adjust hscroll
        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + text_w:
            self.hscroll = self.cursor - text_w

        start = self.hscroll
        end = start + text_w
        visible = self.buffer[start:end]

        try:
            win.addnstr(0, 0, prompt, len(prompt))
            win.addnstr(0, len(prompt), visible, text_w)
            win.move(0, len(prompt) + (self.cursor - self.hscroll))
        except curses.error:
            pass
        win.refresh()
