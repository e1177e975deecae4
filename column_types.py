import re

import numpy as np
import pandas as pd

EMPTY = "empty"
BOOLEAN = "boolean"
DATE = "date"
INTEGER = "integer"
FLOAT = "float"
STRING = "string"

_HEX = re.compile(r"^[+-]?0[xX][0-9a-fA-F]+$")
_DATE_SHAPES = [
    re.compile(r"^\d{4}-\d{1,2}-\d{1,2}([T ]\d{1,2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?)?$"),
    re.compile(r"^\d{4}/\d{1,2}/\d{1,2}$"),
    re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$"),
    re.compile(r"^\d{1,2}-\d{1,2}-\d{4}$"),
    re.compile(r"^\d{1,2}\.\d{1,2}\.\d{4}$"),
]

DARK_PALETTE = [
    "#FF6B6B", "#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7", "#DDA0DD",
    "#98D8C8", "#F7DC6F", "#BB8FCE", "#85C1E9", "#82E0AA", "#F8C471",
]
LIGHT_PALETTE = [
    "#C0392B", "#138D75", "#2980B9", "#27AE60", "#F39C12", "#8E44AD",
    "#16A085", "#D35400", "#7D3C98", "#1F618D", "#239B56", "#CA6F1E",
]


def parse_number(text: str):
    stripped = text.strip()
    if _HEX.match(stripped):
        return float(int(stripped, 16))
    if "_" in stripped:
        return None
    try:
        return float(stripped)
    except ValueError:
        return None


def is_date(text: str) -> bool:
    stripped = text.strip()
    if not any(shape.match(stripped) for shape in _DATE_SHAPES):
        return False
    dayfirst = bool(re.match(r"^\d{1,2}[-.]", stripped))
    try:
        pd.to_datetime(stripped, errors="raise", dayfirst=dayfirst)
    except (ValueError, OverflowError):
        return False
    return True


def estimate(values) -> str:
    """Classify a column; every non-empty sub-item must fit the type."""
    all_empty = all_boolean = all_date = all_integer = all_float = True
    for value in values:
        for item in str(value if value is not None else "").split(","):
            item = item.strip()
            if item == "":
                continue
            all_empty = False
            if item.lower() not in ("true", "false"):
                all_boolean = False
            if all_date and not is_date(item):
                all_date = False
            num = parse_number(item)
            finite = num is not None and bool(np.isfinite(num))
            if not (finite and float(num).is_integer()):
                all_integer = False
            if not finite:
                all_float = False

    if all_empty:
        return EMPTY
    if all_boolean:
        return BOOLEAN
    if all_date:
        return DATE
    if all_integer:
        return INTEGER
    if all_float:
        return FLOAT
    return STRING


def estimate_columns(grid, has_header: bool = True) -> list[str]:
    body = grid[1:] if has_header else grid
    width = max((len(row) for row in grid), default=0)
    if width == 0:
        return []
    if not body:
        return [EMPTY] * width
    padded = [list(row) + [""] * (width - len(row)) for row in body]
    frame = pd.DataFrame(padded, columns=range(width), dtype="object")
    return [estimate(frame[c].tolist()) for c in range(width)]


def column_color(index: int, dark: bool = True) -> str:
    palette = DARK_PALETTE if dark else LIGHT_PALETTE
    return palette[index % len(palette)]
