from dataclasses import dataclass

CHUNK_SIZE = 1000


@dataclass(frozen=True)
class RowChunk:
    start: int
    rows: list

    @property
    def end(self) -> int:
        return self.start + len(self.rows)


class VirtualRowFeed:
    """Hands rows to the grid pane in forward-only chunks."""

    def __init__(self, rows, chunk_size: int = CHUNK_SIZE, start_index: int = 0):
        self.chunk_size = max(1, chunk_size)
        self.start_index = max(0, start_index)
        self._rows = rows
        self.total_rows = len(rows)
        self.restart()

    def restart(self):
        self.initial = list(self._rows[: self.chunk_size])
        self.materialized = len(self.initial)
        self._chunks = self._iter_chunks()
        self._pending = None
        self._advance()

    def _iter_chunks(self):
        for start in range(self.chunk_size, self.total_rows, self.chunk_size):
            yield RowChunk(
                self.start_index + start,
                list(self._rows[start : start + self.chunk_size]),
            )

    def _advance(self):
        self._pending = next(self._chunks, None)

    @property
    def exhausted(self) -> bool:
        return self._pending is None

    @property
    def remaining_chunks(self) -> int:
        if self.exhausted:
            return 0
        left = self.total_rows - (self._pending.start - self.start_index)
        return (left - 1) // self.chunk_size + 1

    def next_chunk(self):
        chunk = self._pending
        if chunk is None:
            return None
        self._advance()
        self.materialized += len(chunk.rows)
        return chunk

    def wants_more(self, last_visible_row: int, margin: int = 10) -> bool:
        if self.exhausted:
            return False
        last_loaded = self.start_index + self.materialized - 1
        return last_visible_row + margin >= last_loaded
