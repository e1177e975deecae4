import curses
import logging
import sys
import time

import diff_engine
from command_prompt import CommandPrompt
from grid_pane import GridPane
from screen_layout import ScreenLayout
from status_bar import render_status

logger = logging.getLogger("tsvgrid.ui")

CTRL_A = 1
CTRL_C = 3
CTRL_K = 11
CTRL_S = 19
CTRL_X = 24
CTRL_Y = 25

# curses key code -> (key name, shift held)
KEY_NAMES = {
    curses.KEY_UP: ("up", False),
    curses.KEY_DOWN: ("down", False),
    curses.KEY_LEFT: ("left", False),
    curses.KEY_RIGHT: ("right", False),
    curses.KEY_SR: ("up", True),
    curses.KEY_SF: ("down", True),
    curses.KEY_SLEFT: ("left", True),
    curses.KEY_SRIGHT: ("right", True),
    curses.KEY_ENTER: ("enter", False),
    10: ("enter", False),
    13: ("enter", False),
    9: ("tab", False),
    curses.KEY_BTAB: ("tab", True),
    27: ("escape", False),
    curses.KEY_BACKSPACE: ("backspace", False),
    127: ("backspace", False),
    8: ("backspace", False),
    curses.KEY_DC: ("delete", False),
    curses.KEY_HOME: ("home", False),
    curses.KEY_END: ("end", False),
}

DISK_CHECK_SECONDS = 1.0


class Orchestrator:
    def __init__(self, stdscr, session):
        self.stdscr = stdscr
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)
        curses.mousemask(curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION)
        curses.mouseinterval(0)
        # ask the terminal for motion events so drags can be followed
        sys.stdout.write("\033[?1003h")
        sys.stdout.flush()

        self.session = session
        session.view = self
        self.layout = ScreenLayout(stdscr)
        self.grid = GridPane(session)
        self.prompt = CommandPrompt(session, self._set_status)

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0

        self.exit_requested = False
        self.quit_armed = False
        self.last_disk_check = 0.0

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def post(self, message):
        kind = message.get("type")
        if kind == "status":
            self._set_status(message.get("text", ""), 4)
        elif kind == "close":
            self.exit_requested = True
        elif kind == "reload":
            last = self.grid.first_body_row + self.grid.row_offset
            self.grid.load_through(min(last, self.session.shape()[0] - 1))

    def _follow_selection(self):
        selection = self.session.selection
        cell = selection.editing_cell or selection.focus or selection.anchor
        if cell is not None:
            self.grid.ensure_visible(cell[0], cell[1], self.layout.table_win)

    # ---------------- UI ----------------

    def _status_context(self):
        session = self.session
        selection = session.selection
        if self.prompt.active:
            mode = "CMD"
        elif selection.is_editing:
            mode = "EDIT"
        elif session.in_diff_mode:
            mode = "DIFF"
        else:
            mode = "GRID"
        cell = selection.editing_cell or selection.anchor
        column_type = None
        if cell is not None:
            types = session.estimated_types()
            if cell[1] < len(types):
                column_type = types[cell[1]]
        summary = None
        if session.diff_rows is not None:
            summary = diff_engine.summarize(session.diff_rows)
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "mode": mode,
            "file_path": getattr(session.document, "path", ""),
            "dirty": getattr(session.document, "dirty", False),
            "shape": session.shape(),
            "loaded_rows": self.grid.loaded_rows(),
            "cell": cell,
            "column_type": column_type,
            "diff_summary": summary,
        }

    def redraw(self):
        self.layout.show_prompt(self.prompt.active)
        self.grid.draw(self.layout.table_win)

        sw = self.layout.status_win
        sw.erase()
        _, w = sw.getmaxyx()
        try:
            sw.addnstr(0, 0, render_status(self._status_context(), w), w, curses.A_REVERSE)
        except curses.error:
            pass
        sw.refresh()

        if self.prompt.active:
            cw = self.layout.cmd_win
            cw.erase()
            try:
                curses.curs_set(1)
            except curses.error:
                pass
            self.prompt.draw(cw)
            return

        if self.grid.cursor_yx is not None:
            try:
                curses.curs_set(1)
                self.layout.table_win.move(*self.grid.cursor_yx)
                self.layout.table_win.refresh()
            except curses.error:
                pass
        else:
            try:
                curses.curs_set(0)
            except curses.error:
                pass

    # ---------------- input ----------------

    def handle_mouse(self):
        try:
            _, x, y, _, bstate = curses.getmouse()
        except curses.error:
            return
        selection = self.session.selection
        win = self.layout.table_win
        wheel_down = getattr(curses, "BUTTON5_PRESSED", 0)

        if bstate & curses.BUTTON4_PRESSED:
            self.grid.scroll(-3, win)
            return
        if wheel_down and bstate & wheel_down:
            self.grid.scroll(3, win)
            return

        target = self.grid.hit_test(y, x)
        shift = bool(bstate & curses.BUTTON_SHIFT)

        if bstate & curses.BUTTON1_PRESSED:
            if target is not None:
                selection.pointer_down(target, shift=shift)
        elif bstate & curses.BUTTON1_RELEASED:
            if target is not None:
                selection.pointer_move(target)
            selection.pointer_up()
        elif bstate & curses.BUTTON1_CLICKED:
            if target is not None:
                selection.pointer_down(target, shift=shift)
                selection.pointer_up()
        elif bstate & curses.REPORT_MOUSE_POSITION:
            if target is not None:
                selection.pointer_move(target)

    def handle_key(self, ch):
        session = self.session
        selection = session.selection

        if ch == CTRL_S:
            selection.blur()
            session.save()
            return
        if ch == CTRL_Y and not selection.is_editing:
            session.copy_selection()
            return
        if ch == CTRL_A and not selection.is_editing:
            selection.select_all()
            return
        if ch == CTRL_K:
            selection.blur()
            self.prompt.start()
            return
        if ch == curses.KEY_MOUSE:
            self.handle_mouse()
            return

        if ch in KEY_NAMES:
            name, shift = KEY_NAMES[ch]
            selection.key(name, shift=shift)
            self._follow_selection()
            return

        if 32 <= ch <= 126:
            selection.type_char(chr(ch))
            self._follow_selection()

    def _request_quit(self) -> bool:
        self.session.selection.blur()
        if getattr(self.session.document, "dirty", False) and not self.quit_armed:
            self.quit_armed = True
            self._set_status("Unsaved changes: Ctrl+X again to quit, Ctrl+S to save", 5)
            return False
        return True

    # ---------------- main loop ----------------

    def run(self):
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        try:
            while not self.exit_requested:
                ch = self.layout.table_win.getch()

                now = time.monotonic()
                if now - self.last_disk_check >= DISK_CHECK_SECONDS:
                    self.last_disk_check = now
                    check_disk = getattr(self.session.document, "check_disk", None)
                    if check_disk is not None:
                        check_disk()
                self.session.poll()

                if ch in (CTRL_C, CTRL_X):
                    if self._request_quit():
                        break
                    self.redraw()
                    continue
                if ch != -1:
                    self.quit_armed = False

                if self.prompt.active:
                    self.prompt.handle_key(ch)
                    self.redraw()
                    continue

                if ch != -1:
                    self.handle_key(ch)

                self.redraw()
        finally:
            sys.stdout.write("\033[?1003l")
            sys.stdout.flush()
            self.session.close()
            logger.info("Closed %s", self.session.title)
