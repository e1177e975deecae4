from dataclasses import dataclass, field

import tsv_document

SAME = "same"
MODIFIED = "modified"
BASE_ONLY = "base-only"
MOD_ONLY = "mod-only"

IN_BASE = "base"
IN_WORKING = "working"
IN_BOTH = "both"


@dataclass(frozen=True)
class DiffCell:
    col: int
    base_value: str
    working_value: str
    status: str


@dataclass
class DiffRow:
    row: int
    status: str
    presence: str
    cells: list[DiffCell] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.status != SAME

    def cell(self, col: int):
        if 0 <= col < len(self.cells):
            return self.cells[col]
        return None


def diff(base, working) -> list[DiffRow]:
    rows: list[DiffRow] = []
    for r in range(max(len(base), len(working))):
        in_base = r < len(base)
        in_working = r < len(working)
        base_row = base[r] if in_base else []
        working_row = working[r] if in_working else []

        cells = []
        for c in range(max(len(base_row), len(working_row))):
            base_value = base_row[c] if c < len(base_row) else ""
            working_value = working_row[c] if c < len(working_row) else ""
            if not in_working or c >= len(working_row):
                status = BASE_ONLY
            elif not in_base or c >= len(base_row):
                status = MOD_ONLY
            elif base_value != working_value:
                status = MODIFIED
            else:
                status = SAME
            cells.append(DiffCell(c, base_value, working_value, status))

        if not in_working:
            row_status, presence = BASE_ONLY, IN_BASE
        elif not in_base:
            row_status, presence = MOD_ONLY, IN_WORKING
        elif all(cell.status == SAME for cell in cells):
            row_status, presence = SAME, IN_BOTH
        else:
            row_status, presence = MODIFIED, IN_BOTH
        rows.append(DiffRow(r, row_status, presence, cells))
    return rows


def accept_cell(working, base, row: int, col: int):
    if row < 0 or col < 0 or row >= len(base) or col >= len(base[row]):
        return tsv_document.copy_grid(working)
    return tsv_document.set_cell(working, row, col, base[row][col])


def accept_row(working, base, row: int):
    # The whole base row replaces the working row, trailing working-only cells included.
    out = tsv_document.copy_grid(working)
    if row < 0 or row >= len(base):
        return out
    while len(out) <= row:
        out.append([])
    out[row] = list(base[row])
    return out


def cell_status(rows, row: int, col: int) -> str:
    if row < 0 or row >= len(rows):
        return SAME
    cell = rows[row].cell(col)
    return cell.status if cell is not None else SAME


def summarize(rows) -> dict:
    counts = {SAME: 0, MODIFIED: 0, BASE_ONLY: 0, MOD_ONLY: 0}
    changed_rows = 0
    for diff_row in rows:
        if diff_row.changed:
            changed_rows += 1
        for cell in diff_row.cells:
            counts[cell.status] += 1
    counts["changed_rows"] = changed_rows
    return counts
