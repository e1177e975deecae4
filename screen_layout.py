import curses

INPUT_TIMEOUT_MS = 100


class ScreenLayout:
    """Grid window over a one-line status bar.

    The command prompt gets the line above the status bar only while it is
    open; otherwise the grid uses that line too.
    """

    status_h = 1
    prompt_h = 1

    def __init__(self, stdscr):
        self.stdscr = stdscr
        self.H, self.W = stdscr.getmaxyx()
        self.prompt_open = False

        self.table_h = self._table_height()
        self.table_win = curses.newwin(self.table_h, self.W, 0, 0)
        # keys are read from the grid window, so it carries the poll timeout
        self.table_win.keypad(True)
        self.table_win.timeout(INPUT_TIMEOUT_MS)

        status_y = max(0, self.H - self.status_h)
        self.status_win = curses.newwin(self.status_h, self.W, status_y, 0)
        self.status_win.leaveok(True)

        self.cmd_win = curses.newwin(self.prompt_h, self.W, max(0, status_y - self.prompt_h), 0)

    def _table_height(self) -> int:
        reserved = self.status_h + (self.prompt_h if self.prompt_open else 0)
        return max(1, self.H - reserved)

    def show_prompt(self, open_: bool) -> bool:
        """Give the prompt line to the prompt or back to the grid; True if the layout changed."""
        if open_ == self.prompt_open:
            return False
        self.prompt_open = open_
        self.table_h = self._table_height()
        try:
            self.table_win.resize(self.table_h, self.W)
        except curses.error:
            pass
        return True
