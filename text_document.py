import logging
import os

import tsv_document

logger = logging.getLogger("tsvgrid.document")


class TextDocument:
    """In-memory text of a file on disk, edited by line/column ranges.

    Change callbacks fire for every text change, our own replace_range()
    edits included, the way an editor host reports its document changes.
    """

    def __init__(self, path: str):
        self.path = path
        self.text = ""
        self.dirty = False
        self._mtime = None
        self._callbacks = []
        self._load()

    def _load(self):
        if not os.path.exists(self.path) or os.path.getsize(self.path) == 0:
            self.text = ""
            self._mtime = os.path.getmtime(self.path) if os.path.exists(self.path) else None
            return
        with open(self.path, "r", encoding="utf-8", newline="") as fh:
            self.text = fh.read()
        self._mtime = os.path.getmtime(self.path)

    # ---------- adapter protocol ----------
    def get_full_text(self) -> str:
        return self.text

    def replace_range(self, start_line, start_col, end_line, end_col, new_text) -> bool:
        start = self._offset(start_line, start_col)
        end = self._offset(end_line, end_col)
        if start is None or end is None or end < start:
            return False
        self.text = self.text[:start] + new_text + self.text[end:]
        self.dirty = True
        self._fire()
        return True

    def save(self) -> bool:
        try:
            with open(self.path, "w", encoding="utf-8", newline="") as fh:
                fh.write(self.text)
            self._mtime = os.path.getmtime(self.path)
        except OSError as exc:
            logger.error("Save failed for %s: %s", self.path, exc)
            return False
        self.dirty = False
        logger.info("Saved %s (%d chars)", self.path, len(self.text))
        return True

    def on_external_change(self, callback):
        self._callbacks.append(callback)

    # ---------- disk watching ----------
    def check_disk(self) -> bool:
        """Reload when the file changed on disk; True if it did."""
        try:
            mtime = os.path.getmtime(self.path)
        except OSError:
            return False
        if self._mtime is not None and mtime == self._mtime:
            return False
        try:
            self._load()
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not re-read %s: %s", self.path, exc)
            # keep the current text; retry only after the next change
            self._mtime = mtime
            return False
        self.dirty = False
        self._fire()
        return True

    def set_text_externally(self, text: str):
        self.text = text
        self._fire()

    # ---------- helpers ----------
    def _fire(self):
        for callback in list(self._callbacks):
            callback()

    def _offset(self, line: int, col: int):
        if line < 0 or col < 0:
            return None
        pos = 0
        text = self.text
        for _ in range(line):
            match = tsv_document.NEWLINE.search(text, pos)
            if match is None:
                return None
            pos = match.end()
        match = tsv_document.NEWLINE.search(text, pos)
        line_end = match.start() if match else len(text)
        if pos + col > line_end:
            return None
        return pos + col


def load_base_grid(path: str):
    """Parsed grid of a reference file, or None when it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Base file %s unavailable: %s", path, exc)
        return None
    return tsv_document.parse(text)
