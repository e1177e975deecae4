import pytest

from row_feed import VirtualRowFeed


def _rows(n):
    return [[str(i)] for i in range(n)]


def test_small_input_has_no_chunks():
    feed = VirtualRowFeed(_rows(5), chunk_size=10)
    assert len(feed.initial) == 5
    assert feed.exhausted
    assert feed.next_chunk() is None
    assert feed.remaining_chunks == 0


def test_chunks_arrive_in_order_with_absolute_starts():
    feed = VirtualRowFeed(_rows(25), chunk_size=10)
    assert len(feed.initial) == 10
    assert feed.remaining_chunks == 2

    first = feed.next_chunk()
    assert (first.start, first.end) == (10, 20)
    assert first.rows[0] == ["10"]
    second = feed.next_chunk()
    assert (second.start, len(second.rows)) == (20, 5)
    assert feed.exhausted
    assert feed.materialized == 25
    assert feed.next_chunk() is None


@pytest.mark.parametrize("n", [0, 1, 999, 1000, 1001, 2500])
def test_every_row_delivered_once(n):
    feed = VirtualRowFeed(_rows(n))
    seen = list(feed.initial)
    while True:
        chunk = feed.next_chunk()
        if chunk is None:
            break
        seen.extend(chunk.rows)
    assert seen == _rows(n)


def test_restart_begins_again():
    feed = VirtualRowFeed(_rows(30), chunk_size=10)
    feed.next_chunk()
    feed.next_chunk()
    assert feed.exhausted
    feed.restart()
    assert feed.materialized == 10
    assert feed.next_chunk().start == 10


def test_wants_more_near_the_end():
    feed = VirtualRowFeed(_rows(30), chunk_size=10)
    assert not feed.wants_more(0, margin=2)
    assert feed.wants_more(8, margin=2)
    feed.next_chunk()
    feed.next_chunk()
    assert not feed.wants_more(29, margin=2)


def test_start_index_offsets_chunks():
    feed = VirtualRowFeed(_rows(15), chunk_size=10, start_index=100)
    assert feed.next_chunk().start == 110
