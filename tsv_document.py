import functools
import locale
import math
import re

import pandas as pd

SEPARATOR = "\t"

NEWLINE = re.compile(r"\r\n|\r|\n")


# ---------- text <-> grid ----------
def parse(text: str, separator: str = SEPARATOR) -> list[list[str]]:
    if not text:
        return []
    return [line.split(separator) for line in NEWLINE.split(text)]


def serialize(grid, separator: str = SEPARATOR, newline: str = "\n") -> str:
    return newline.join(separator.join(row) for row in grid)


def detect_newline(text: str) -> str:
    match = NEWLINE.search(text or "")
    return match.group(0) if match else "\n"


def cell_span(text: str, row: int, col: int, separator: str = SEPARATOR):
    """Return (line, start, end) of a cell inside ``text``, or None.

    Offsets are character columns on that line, suitable for a
    replace_range() call that touches nothing but the one cell.
    """
    if row < 0 or col < 0 or not text:
        return None
    lines = NEWLINE.split(text)
    if row >= len(lines):
        return None
    cells = lines[row].split(separator)
    if col >= len(cells):
        return None
    start = sum(len(cell) + len(separator) for cell in cells[:col])
    return row, start, start + len(cells[col])


# ---------- ragged helpers ----------
def copy_grid(grid) -> list[list[str]]:
    return [list(row) for row in grid]


def max_width(grid) -> int:
    return max((len(row) for row in grid), default=0)


def cell_at(grid, row: int, col: int) -> str:
    if row < 0 or col < 0 or row >= len(grid):
        return ""
    cells = grid[row]
    return cells[col] if col < len(cells) else ""


def column_widths(grid) -> list[int]:
    if not grid:
        return []
    frame = pd.DataFrame(grid, dtype="object").fillna("")
    return [int(w) for w in frame.map(len).max(axis=0).tolist()]


# ---------- structural mutation ----------
def set_cell(grid, row: int, col: int, value: str) -> list[list[str]]:
    out = copy_grid(grid)
    while len(out) <= row:
        out.append([])
    cells = out[row]
    while len(cells) <= col:
        cells.append("")
    cells[col] = value
    return out


def insert_column(grid, index: int) -> list[list[str]]:
    out = copy_grid(grid)
    for cells in out:
        while len(cells) < index:
            cells.append("")
        cells.insert(index, "")
    return out


def delete_column(grid, index: int) -> list[list[str]]:
    out = copy_grid(grid)
    for cells in out:
        if 0 <= index < len(cells):
            del cells[index]
    return out


def insert_row(grid, index: int) -> list[list[str]]:
    out = copy_grid(grid)
    width = max_width(out)
    while len(out) < index:
        out.append([""] * width)
    out.insert(max(0, index), [""] * width)
    return out


def delete_row(grid, index: int) -> list[list[str]]:
    out = copy_grid(grid)
    if 0 <= index < len(out):
        del out[index]
    return out


# ---------- sorting ----------
# leading number of a cell, so "10 kg" sorts as 10
LEADING_NUMBER = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _as_number(text: str):
    match = LEADING_NUMBER.match(text or "")
    if match is None:
        return None
    value = float(match.group())
    if not math.isfinite(value):
        return None
    return value


def compare_cells(a: str, b: str) -> int:
    na, nb = _as_number(a), _as_number(b)
    if na is not None and nb is not None:
        return (na > nb) - (na < nb)
    ka = locale.strxfrm(a.casefold())
    kb = locale.strxfrm(b.casefold())
    return (ka > kb) - (ka < kb)


def sort_rows(grid, column_index: int, ascending: bool = True, has_header_row: bool = False):
    out = copy_grid(grid)
    header = []
    if has_header_row and out:
        header = [out[0]]
        out = out[1:]

    def cmp(r1, r2):
        diff = compare_cells(cell_at([r1], 0, column_index), cell_at([r2], 0, column_index))
        return diff if ascending else -diff

    # sorted() is stable, equal keys keep file order in both directions
    body = sorted(out, key=functools.cmp_to_key(cmp))
    return header + body
