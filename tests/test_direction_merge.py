# tests/test_direction_merge.py

from types import SimpleNamespace

from tokenledger.database.queries.merge import merge_bounded
from tokenledger.types import BlockCursor, PagingOptions

from conftest import ALICE, BOB, CAROL


def _row(block_number, log_index, tx="0xaa"):
    return SimpleNamespace(block_number=block_number, log_index=log_index,
                           identity=(tx, "0xbb", log_index))


def _key(row):
    return (row.block_number, row.log_index)


def _identity(row):
    return row.identity


class TestMergeBounded:
    def test_interleaves_descending(self):
        to_rows = [_row(9, 0, "t1"), _row(5, 0, "t2"), _row(1, 0, "t3")]
        from_rows = [_row(7, 0, "f1"), _row(3, 0, "f2")]

        merged = merge_bounded([to_rows, from_rows], _key, _identity, limit=10)

        assert [_key(r) for r in merged] == [(9, 0), (7, 0), (5, 0), (3, 0), (1, 0)]

    def test_interleaves_ascending(self):
        to_rows = [_row(1, 0, "t1"), _row(5, 0, "t2")]
        from_rows = [_row(3, 0, "f1")]

        merged = merge_bounded([to_rows, from_rows], _key, _identity, limit=None, descending=False)

        assert [_key(r) for r in merged] == [(1, 0), (3, 0), (5, 0)]

    def test_drops_rows_reached_twice(self):
        shared = _row(4, 1, "self")
        merged = merge_bounded([[shared], [_row(4, 1, "self")]], _key, _identity, limit=10)

        assert len(merged) == 1

    def test_limit_applies_after_dedup(self):
        to_rows = [_row(6, 0, "a"), _row(5, 0, "b")]
        from_rows = [_row(6, 0, "a"), _row(4, 0, "c")]

        merged = merge_bounded([to_rows, from_rows], _key, _identity, limit=2)

        assert [r.identity[0] for r in merged] == ["a", "b"]


class TestEitherDirectionListing:
    def test_self_transfer_listed_once(self, repo, session, factory):
        factory.transfer(1, 0, from_address=ALICE, to_address=ALICE)
        factory.transfer(2, 0, from_address=ALICE, to_address=BOB)
        factory.transfer(3, 0, from_address=BOB, to_address=ALICE)

        rows = repo.list_by_address(session, None, ALICE)

        assert [(r.block_number, r.log_index) for r in rows] == [(3, 0), (2, 0), (1, 0)]

    def test_page_size_caps_merged_result(self, repo, session, factory):
        for block in range(1, 6):
            factory.transfer(block, 0, from_address=CAROL, to_address=BOB)
            factory.transfer(block, 1, from_address=ALICE, to_address=CAROL)

        rows = repo.list_by_address(session, "either", CAROL, paging=PagingOptions(page_size=3))

        assert [(r.block_number, r.log_index) for r in rows] == [(5, 1), (5, 0), (4, 1)]

    def test_cursor_applies_to_both_branches(self, repo, session, factory):
        for block in range(1, 6):
            factory.transfer(block, 0, from_address=CAROL, to_address=BOB)
            factory.transfer(block, 1, from_address=ALICE, to_address=CAROL)

        paging = PagingOptions(key=BlockCursor(4, 1), page_size=3)
        rows = repo.list_by_address(session, "either", CAROL, paging=paging)

        assert [(r.block_number, r.log_index) for r in rows] == [(4, 0), (3, 1), (3, 0)]

    def test_walks_every_row_once(self, repo, session, factory):
        for block in range(1, 8):
            factory.transfer(block, 0, from_address=CAROL, to_address=CAROL)
            factory.transfer(block, 1, from_address=ALICE, to_address=CAROL)

        paging = PagingOptions(page_size=4)
        seen = []
        while True:
            rows = repo.list_by_address(session, "either", CAROL, paging=paging)
            if not rows:
                break
            seen.extend(rows)
            last = rows[-1]
            paging = paging.next_page(BlockCursor(last.block_number, last.log_index))

        assert len(seen) == 14
        assert len({r.identity for r in seen}) == 14
