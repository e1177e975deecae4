import logging
import os
import time

import column_types
import config_paths
import diff_engine
import tsv_document
from mutation_guard import MutationGuard, MutationInProgress
from row_feed import VirtualRowFeed
from selection_model import SelectionModel
from text_document import load_base_grid

logger = logging.getLogger("tsvgrid.session")


class TsvSession:
    """Binds one document to its grid, selection, row feed and diff state.

    Every message for the view goes through ``view.post(dict)`` with a
    ``type`` of "reload", "update_cell", "status", "diff" or "close".
    """

    def __init__(
        self,
        document,
        config=None,
        clipboard=None,
        base_loader=load_base_grid,
        registry=None,
        clock=time.monotonic,
        view=None,
        config_loader=None,
        config_saver=None,
    ):
        self.document = document
        self.config = dict(config) if config is not None else config_paths.default_config()
        self.clipboard = clipboard
        self.base_loader = base_loader
        self.registry = registry
        self.clock = clock
        self.view = view
        self._config_loader = config_loader
        self._config_saver = config_saver if config_saver is not None else config_paths.save_config

        self.guard = MutationGuard()
        self.pending_reload_at = None
        self.closed = False

        self.base_grid = None
        self.base_path = None
        self.diff_rows = None
        self._types = []
        self._types_key = None

        self._apply_config()
        self.grid = []
        self.newline = "\n"
        self._read_document()

        self.selection = SelectionModel(self.shape, self.value_at, self.edit_cell)

        document.on_external_change(self._on_external_change)
        if registry is not None:
            registry.register(self)

    # ---------- state ----------
    def _apply_config(self):
        self.enabled = bool(self.config.get("enabled", True))
        self.has_header = bool(self.config.get("treat_first_row_as_header", True))
        self.show_serial_index = bool(self.config.get("add_serial_index", False))
        self.chunk_size = int(self.config.get("chunk_size", 1000))
        self.debounce = float(self.config.get("reload_debounce_seconds", 0.25))

    def _read_document(self):
        text = self.document.get_full_text()
        self.grid = tsv_document.parse(text)
        self.newline = tsv_document.detect_newline(text)
        self.feed = VirtualRowFeed(self.grid, self.chunk_size)
        logger.debug("Parsed %d rows x %d columns", *self.shape())

    def shape(self):
        rows, cols = len(self.grid), tsv_document.max_width(self.grid)
        if self.base_grid is not None:
            # base-only rows stay addressable so they can be accepted
            rows = max(rows, len(self.base_grid))
            cols = max(cols, tsv_document.max_width(self.base_grid))
        return rows, cols

    def value_at(self, row: int, col: int) -> str:
        return tsv_document.cell_at(self.grid, row, col)

    def estimated_types(self):
        """Per-column type names, recomputed only when the grid or header setting changed."""
        stale = (
            self._types_key is None
            or self._types_key[0] is not self.grid
            or self._types_key[1] != self.has_header
        )
        if stale:
            self._types = column_types.estimate_columns(self.grid, self.has_header)
            self._types_key = (self.grid, self.has_header)
        return self._types

    @property
    def in_diff_mode(self) -> bool:
        return self.base_grid is not None

    @property
    def title(self) -> str:
        return os.path.basename(getattr(self.document, "path", "") or "")

    def _post(self, message: dict):
        if self.view is not None:
            self.view.post(message)

    def _status(self, text: str):
        self._post({"type": "status", "text": text})

    # ---------- writing ----------
    def _begin(self, label: str):
        try:
            return self.guard.begin(label)
        except MutationInProgress as exc:
            logger.warning("Rejected %s: %s", label, exc)
            self._status("Another edit is still being applied")
            return None

    def _replace_all(self, new_grid) -> bool:
        old = self.document.get_full_text()
        lines = tsv_document.NEWLINE.split(old)
        text = tsv_document.serialize(new_grid, tsv_document.SEPARATOR, self.newline)
        return self.document.replace_range(0, 0, len(lines) - 1, len(lines[-1]), text)

    def _commit_grid(self, new_grid, description: str) -> bool:
        token = self._begin(description)
        if token is None:
            return False
        try:
            ok = self._replace_all(new_grid)
        finally:
            self.guard.end(token)
        if not ok:
            logger.error("Rewrite rejected: %s", description)
            self._status(f"Could not apply: {description}")
            return False
        self._reparse()
        self.feed = VirtualRowFeed(self.grid, self.chunk_size)
        self.selection.clamp()
        logger.info(description)
        self._post({"type": "reload"})
        self._update_diff()
        return True

    def _reparse(self):
        # the grid always mirrors the text that was actually written
        self.grid = tsv_document.parse(self.document.get_full_text())

    def edit_cell(self, row: int, col: int, value: str) -> bool:
        if row < 0 or col < 0:
            return False
        # a cell can never hold the separator or a line break
        value = tsv_document.NEWLINE.sub(" ", value.replace(tsv_document.SEPARATOR, " "))
        if row < len(self.grid) and col < len(self.grid[row]) and self.grid[row][col] == value:
            return True

        token = self._begin(f"edit {row},{col}")
        if token is None:
            return False
        try:
            span = tsv_document.cell_span(self.document.get_full_text(), row, col)
            ok = False
            if span is not None:
                line, start, end = span
                ok = self.document.replace_range(line, start, line, end, value)
            new_grid = tsv_document.set_cell(self.grid, row, col, value)
            targeted = ok
            if not ok:
                logger.info("Targeted edit of %d,%d rejected, rewriting document", row, col)
                ok = self._replace_all(new_grid)
        finally:
            self.guard.end(token)

        if not ok:
            logger.error("Failed to update row %d, column %d", row + 1, col + 1)
            self._status(f"Failed to update row {row + 1}, column {col + 1}")
            return False

        self._reparse()
        logger.info('Updated row %d, column %d to "%s"', row + 1, col + 1, value)
        if targeted:
            self._post({"type": "update_cell", "row": row, "col": col, "value": value})
        else:
            self.feed = VirtualRowFeed(self.grid, self.chunk_size)
            self._post({"type": "reload"})
        self._update_diff()
        return True

    # ---------- structural commands ----------
    def insert_column(self, index: int) -> bool:
        return self._commit_grid(
            tsv_document.insert_column(self.grid, max(0, index)),
            f"Inserted column {index + 1}",
        )

    def delete_column(self, index: int) -> bool:
        if index < 0 or index >= tsv_document.max_width(self.grid):
            return False
        return self._commit_grid(
            tsv_document.delete_column(self.grid, index), f"Deleted column {index + 1}"
        )

    def insert_row(self, index: int) -> bool:
        return self._commit_grid(
            tsv_document.insert_row(self.grid, max(0, index)), f"Inserted row {index + 1}"
        )

    def delete_row(self, index: int) -> bool:
        if index < 0 or index >= len(self.grid):
            return False
        return self._commit_grid(
            tsv_document.delete_row(self.grid, index), f"Deleted row {index + 1}"
        )

    def sort_column(self, index: int, ascending: bool = True) -> bool:
        if index < 0:
            return False
        new_grid = tsv_document.sort_rows(self.grid, index, ascending, self.has_header)
        direction = "ascending" if ascending else "descending"
        return self._commit_grid(new_grid, f"Sorted by column {index + 1} ({direction})")

    # ---------- diff mode ----------
    def enter_diff_mode(self, path: str) -> bool:
        base = self.base_loader(path)
        if base is None:
            self._status(f"Base file not found: {path}")
            return False
        self.base_grid = base
        self.base_path = path
        self._update_diff()
        summary = diff_engine.summarize(self.diff_rows)
        self._status(
            f"Comparing with {os.path.basename(path)}: {summary['changed_rows']} changed row(s)"
        )
        return True

    def exit_diff_mode(self):
        self.base_grid = None
        self.base_path = None
        self.diff_rows = None
        self._post({"type": "diff", "rows": None, "summary": None})

    def _update_diff(self):
        if self.base_grid is None:
            return
        self.diff_rows = diff_engine.diff(self.base_grid, self.grid)
        self._post(
            {
                "type": "diff",
                "rows": self.diff_rows,
                "summary": diff_engine.summarize(self.diff_rows),
            }
        )

    def accept_cell(self, row: int, col: int) -> bool:
        if self.base_grid is None:
            self._status("Not comparing against a base file")
            return False
        if row >= len(self.base_grid) or col >= len(self.base_grid[row]):
            self._status("No base value to accept")
            return False
        return self.edit_cell(row, col, self.base_grid[row][col])

    def accept_row(self, row: int) -> bool:
        if self.base_grid is None:
            self._status("Not comparing against a base file")
            return False
        if row < 0 or row >= len(self.base_grid):
            self._status("No base row to accept")
            return False
        new_grid = diff_engine.accept_row(self.grid, self.base_grid, row)
        if new_grid == self.grid:
            return True
        return self._commit_grid(new_grid, f"Accepted base row {row + 1}")

    # ---------- clipboard / persistence ----------
    def copy_selection(self) -> bool:
        text = self.selection.copy_text()
        if text is None:
            self._status("Nothing selected")
            return False
        if self.clipboard is None or not self.clipboard.write_text(text.rstrip()):
            self._status("Copy failed")
            return False
        self._status(f"Copied {len(self.selection.selected_cells())} cell(s)")
        return True

    def save(self) -> bool:
        try:
            with self.guard.hold("save"):
                ok = self.document.save()
        except MutationInProgress:
            self._status("Another edit is still being applied")
            return False
        self._status(f"Saved {self.title}" if ok else f"Save failed: {self.title}")
        return ok

    # ---------- settings ----------
    def toggle_setting(self, key: str) -> bool:
        value = config_paths.toggle_setting(key, self.config, self._config_saver)
        self._status(f"{key.replace('_', ' ').capitalize()} {'enabled' if value else 'disabled'}.")
        if self.registry is not None and self in self.registry:
            self.registry.broadcast("refresh")
        else:
            self.refresh()
        return value

    def refresh(self):
        if self._config_loader is not None:
            self.config = dict(self._config_loader())
        self._apply_config()
        if not self.enabled:
            self._post({"type": "close", "reason": "disabled"})
            return
        self.feed = VirtualRowFeed(self.grid, self.chunk_size)
        self._post({"type": "reload"})

    def close(self):
        self.closed = True
        if self.registry is not None:
            self.registry.unregister(self)

    # ---------- external changes ----------
    def _on_external_change(self):
        if self.guard.active:
            logger.debug("Ignoring change notification during %s", self.guard.label)
            return
        self.pending_reload_at = self.clock() + self.debounce

    def poll(self, now=None) -> bool:
        """Run a due reload; True when one happened."""
        if self.pending_reload_at is None:
            return False
        now = self.clock() if now is None else now
        if now < self.pending_reload_at:
            return False
        self.pending_reload_at = None
        self._read_document()
        self.selection.clamp()
        logger.info("Reloaded after external change (%d rows)", len(self.grid))
        self._post({"type": "reload"})
        self._update_diff()
        return True
