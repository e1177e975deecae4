import unittest
from unittest.mock import patch

from screen_layout import INPUT_TIMEOUT_MS, ScreenLayout


class FakeScreen:
    def getmaxyx(self):
        return 24, 80


class FakeWin:
    def __init__(self, h, w, y, x):
        self.h, self.w, self.y, self.x = h, w, y, x
        self.delay = None
        self.keypad_on = False

    def keypad(self, flag):
        self.keypad_on = flag

    def timeout(self, ms):
        self.delay = ms

    def leaveok(self, flag):
        pass

    def resize(self, h, w):
        self.h, self.w = h, w


class ScreenLayoutTests(unittest.TestCase):
    def setUp(self):
        patcher = patch("curses.newwin", side_effect=FakeWin)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.layout = ScreenLayout(FakeScreen())

    def test_grid_takes_all_but_the_status_line(self):
        layout = self.layout
        self.assertEqual((layout.table_win.h, layout.table_win.y), (23, 0))
        self.assertEqual(layout.status_win.y, 23)
        self.assertEqual(layout.cmd_win.y, 22)
        self.assertEqual(layout.table_win.delay, INPUT_TIMEOUT_MS)
        self.assertTrue(layout.table_win.keypad_on)

    def test_prompt_line_only_while_open(self):
        layout = self.layout
        self.assertTrue(layout.show_prompt(True))
        self.assertEqual(layout.table_win.h, 22)
        self.assertFalse(layout.show_prompt(True))
        self.assertTrue(layout.show_prompt(False))
        self.assertEqual(layout.table_win.h, 23)


if __name__ == "__main__":
    unittest.main()
