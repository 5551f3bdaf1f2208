# tests/test_reconciliation.py

import pytest

from tokenledger.reconciliation.scanner import UncatalogedTransferScanner
from tokenledger.types import (
    ConfigurationError,
    ERC1155_BATCH_TRANSFER_SIGNATURE,
    TRANSFER_SIGNATURE,
    WETH_DEPOSIT_SIGNATURE,
)

from conftest import h


@pytest.fixture
def scanner():
    return UncatalogedTransferScanner(chunk_size=2)


class TestUncatalogedScan:
    def test_reports_blocks_with_missing_transfers(self, session, factory, scanner):
        catalogued = factory.transfer(1, 0)
        factory.log(1, 0, catalogued.transaction_hash)

        missing_a = factory.next_tx()
        missing_b = factory.next_tx()
        factory.log(2, 0, missing_a)
        factory.log(2, 1, missing_b, first_topic=ERC1155_BATCH_TRANSFER_SIGNATURE)

        assert list(scanner.find_uncataloged_block_numbers(session)) == [2]

    def test_each_block_reported_once(self, session, factory, scanner):
        for block in (3, 3, 3, 4, 5, 5):
            factory.log(block, 0, factory.next_tx(), first_topic=WETH_DEPOSIT_SIGNATURE)

        assert sorted(scanner.find_uncataloged_block_numbers(session)) == [3, 4, 5]

    def test_ignores_unrelated_topics(self, session, factory, scanner):
        factory.log(7, 0, factory.next_tx(), first_topic=h(0xDEAD))

        assert list(scanner.find_uncataloged_block_numbers(session)) == []

    def test_matches_on_transaction_and_log_index(self, session, factory, scanner):
        transfer = factory.transfer(8, 0)
        factory.log(8, 1, transfer.transaction_hash)

        assert list(scanner.find_uncataloged_block_numbers(session)) == [8]

    def test_restricted_signatures(self, session, factory):
        factory.log(9, 0, factory.next_tx(), first_topic=WETH_DEPOSIT_SIGNATURE)
        factory.log(10, 0, factory.next_tx())

        scanner = UncatalogedTransferScanner([TRANSFER_SIGNATURE])

        assert list(scanner.find_uncataloged_block_numbers(session)) == [10]

    def test_stream_is_lazy(self, session, factory, scanner):
        factory.log(11, 0, factory.next_tx())

        stream = scanner.find_uncataloged_block_numbers(session)

        assert next(stream) == 11
        assert list(stream) == []

    def test_fold(self, session, factory, scanner):
        for block in (12, 13, 13, 14):
            factory.log(block, 0, factory.next_tx())

        total = scanner.fold(session, lambda acc, block: acc + block, 0)
        collected = scanner.fold(session, lambda acc, block: acc | {block}, frozenset())

        assert total == 12 + 13 + 14
        assert collected == {12, 13, 14}


class TestScannerConfiguration:
    @pytest.mark.parametrize("chunk_size", [0, -5])
    def test_rejects_non_positive_chunk_size(self, chunk_size):
        with pytest.raises(ConfigurationError):
            UncatalogedTransferScanner(chunk_size=chunk_size)

    def test_rejects_empty_signature_set(self):
        with pytest.raises(ConfigurationError):
            UncatalogedTransferScanner(signatures=[])
