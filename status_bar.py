import os
import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, mode, file_path, dirty, shape,
                  loaded_rows, cell, column_type, diff_summary
    """
    text = ""
    now = context.get('now', time.time())
    if context.get('status_msg') and now < context.get('status_until', 0):
        text = f" {context['status_msg']}"
    else:
        mode = context.get('mode', 'GRID')
        fname = context.get('file_path') or ''
        if fname:
            fname = os.path.basename(fname)
        if context.get('dirty'):
            fname += ' [+]'
        rows, cols = context.get('shape', (0, 0))
        loaded = context.get('loaded_rows', rows)
        parts = [mode, fname, f"{rows}x{cols}"]
        if loaded < rows:
            parts.append(f"loaded {loaded}/{rows}")
        cell = context.get('cell')
        if cell is not None:
            r, c = cell
            cell_text = f"R{r + 1}C{c + 1}"
            if context.get('column_type'):
                cell_text += f" {context['column_type']}"
            parts.append(cell_text)
        summary = context.get('diff_summary')
        if summary:
            parts.append(
                f"diff ~{summary.get('modified', 0)} -{summary.get('base-only', 0)} +{summary.get('mod-only', 0)}"
            )
        text = " " + " | ".join(parts)

    return text.ljust(width)[:width]
