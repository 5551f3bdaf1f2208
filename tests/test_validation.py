# tests/test_validation.py

from decimal import Decimal

import pytest

from tokenledger.database.repositories import BatchTransactionRepository
from tokenledger.database.sql import encode_transfer_ids
from tokenledger.database.tables import DBBatchTransaction, Token, TokenTransfer
from tokenledger.types import (
    BatchTransaction,
    InvariantViolation,
    MalformedAddress,
    MalformedHash,
    TransferEvent,
    check_amount_representation,
    to_evm_address,
    to_evm_hash,
)

from conftest import ALICE, BOB, MULTI, NFT, TOKEN, block_hash, h


def _event(**overrides):
    fields = dict(
        transaction_hash=h(1),
        block_hash=h(2),
        log_index=0,
        block_number=10,
        from_address_hash=ALICE,
        to_address_hash=BOB,
        token_contract_address_hash=TOKEN,
        token_type="ERC-20",
        amount=Decimal(5),
    )
    fields.update(overrides)
    return TransferEvent(**fields)


class TestAmountRepresentation:
    def test_scalar_transfer(self):
        event = _event()

        assert event.amount == Decimal(5)
        assert not event.is_batched

    def test_batched_transfer(self):
        event = _event(token_type="ERC-1155", amount=None,
                       amounts=[Decimal(1), Decimal(2)], token_ids=[7, 8])

        assert event.is_batched
        assert event.identity == (h(1), h(2), 0)

    def test_both_representations(self):
        with pytest.raises(InvariantViolation) as info:
            _event(amounts=[Decimal(1)], token_ids=[1], token_type="ERC-1155")
        assert info.value.identity == (h(1), h(2), 0)

    def test_neither_representation(self):
        with pytest.raises(InvariantViolation):
            _event(amount=None)

    def test_arrays_must_be_parallel(self):
        with pytest.raises(InvariantViolation):
            _event(token_type="ERC-1155", amount=None, amounts=[Decimal(1), Decimal(2)], token_ids=[7])

    def test_erc20_cannot_batch(self):
        with pytest.raises(InvariantViolation):
            check_amount_representation("ERC-20", None, [Decimal(1)], [1])

    def test_unknown_token_type(self):
        with pytest.raises(InvariantViolation):
            check_amount_representation("ERC-9999", Decimal(1), None, None)

    def test_negative_positions(self):
        with pytest.raises(InvariantViolation):
            _event(log_index=-1)

    def test_hashes_are_normalized(self):
        event = _event(transaction_hash=h(1).upper().replace("0X", "0x"),
                       from_address_hash=bytes.fromhex(ALICE[2:]))

        assert event.transaction_hash == h(1)
        assert event.from_address_hash == ALICE


class TestAddressesAndHashes:
    @pytest.mark.parametrize("value", ["", "0x1234", "not an address", None, b"\x00" * 19])
    def test_malformed_addresses(self, value):
        with pytest.raises(MalformedAddress) as info:
            to_evm_address(value)
        assert info.value.value == value

    def test_checksummed_address_lowercased(self):
        assert to_evm_address("0x52908400098527886E0F7030069857D2E4169EE7") == \
            "0x52908400098527886e0f7030069857d2e4169ee7"

    @pytest.mark.parametrize("value", ["0x", h(1)[:-1], "0x" + "zz" * 32, b"\x01" * 31])
    def test_malformed_hashes(self, value):
        with pytest.raises(MalformedHash):
            to_evm_hash(value)

    def test_hash_from_bytes(self):
        assert to_evm_hash(b"\x00" * 31 + b"\x01") == h(1)


class TestStoredTransfers:
    def test_orm_rejects_invalid_row(self, session, factory):
        factory.token()
        factory.block(1)
        session.add(TokenTransfer(
            transaction_hash=h(0x99), block_hash=block_hash(1), log_index=0, block_number=1,
            from_address_hash=ALICE, to_address_hash=BOB, token_contract_address_hash=TOKEN,
            token_type="ERC-20", amount=Decimal(1), amounts=[Decimal(1)], token_ids=[1],
        ))

        with pytest.raises(InvariantViolation):
            session.flush()

    def test_orm_rejects_missing_required_attributes(self, session, factory):
        factory.token()
        factory.block(1)
        session.add(TokenTransfer(
            transaction_hash=h(0x97), block_hash=block_hash(1), log_index=0, block_number=None,
            from_address_hash=ALICE, to_address_hash=BOB, token_contract_address_hash=TOKEN,
            token_type=None, amount=Decimal(1),
        ))

        with pytest.raises(InvariantViolation) as info:
            session.flush()
        assert "block_number" in str(info.value)
        assert "token_type" in str(info.value)
        assert info.value.identity == (h(0x97), block_hash(1), 0)

    def test_legacy_row_without_block_number_still_loads(self, session, factory):
        factory.token()
        factory.block(1)
        session.execute(TokenTransfer.__table__.insert().values(
            transaction_hash=h(0x96), block_hash=block_hash(1), log_index=2, block_number=None,
            from_address_hash=ALICE, to_address_hash=BOB, token_contract_address_hash=TOKEN,
            token_type="ERC-20", amount=Decimal(1),
        ))

        (loaded,) = session.query(TokenTransfer).all()

        assert loaded.block_number is None
        assert loaded.sort_key == (-1, 2)

    def test_invalid_row_written_outside_orm_fails_on_read(self, session, factory):
        factory.token()
        factory.block(1)
        session.execute(TokenTransfer.__table__.insert().values(
            transaction_hash=h(0x98), block_hash=block_hash(1), log_index=0, block_number=1,
            from_address_hash=ALICE, to_address_hash=BOB, token_contract_address_hash=TOKEN,
            token_type="ERC-20", amount=None, amounts=None, token_ids=None,
        ))

        with pytest.raises(InvariantViolation):
            session.query(TokenTransfer).all()

    def test_array_columns_round_trip(self, session, factory):
        stored = factory.transfer(1, 0, token=MULTI, token_type="ERC-1155",
                                  amounts=[Decimal("1.5"), Decimal(10) ** 30], token_ids=[2 ** 70, 3])
        session.expire_all()

        loaded = session.get(TokenTransfer, (stored.transaction_hash, block_hash(1), 0))

        assert loaded.amounts == [Decimal("1.5"), Decimal(10) ** 30]
        assert loaded.token_ids == [2 ** 70, 3]
        assert loaded.amount is None


class TestBatchTransactions:
    def test_fields_required(self):
        with pytest.raises(InvariantViolation):
            BatchTransaction(batch_number=1)
        with pytest.raises(InvariantViolation):
            BatchTransaction(hash=h(1))

    def test_orm_rejects_missing_batch_number(self, session):
        with pytest.raises(InvariantViolation):
            DBBatchTransaction(batch_number=2).validate()

        session.add(DBBatchTransaction(hash=h(5)))

        with pytest.raises(InvariantViolation):
            session.flush()

    def test_lookup(self, db_manager, session):
        repo = BatchTransactionRepository(db_manager)
        repo.add(session, BatchTransaction(batch_number=3, hash=h(2)))
        repo.add(session, BatchTransaction(batch_number=3, hash=h(1)))
        repo.add(session, BatchTransaction(batch_number=4, hash=h(3)))

        assert repo.transaction_hashes(session, 3) == [h(1), h(2)]
        assert repo.batch_number_for(session, h(3)) == 4
        assert repo.batch_number_for(session, h(9)) is None
        assert repo.count(session) == 3


def test_encode_transfer_ids():
    encoded = encode_transfer_ids([("0x01", "0x02", 3), ("0x0a", "0x0b", 0)])

    assert encoded == "(('\\x01', '\\x02', 3),('\\x0a', '\\x0b', 0))"


def test_nft_token_kinds():
    assert Token(contract_address_hash=NFT, type="ERC-721").is_nft
    assert Token(contract_address_hash=MULTI, type="ERC-1155").is_nft
    assert not Token(contract_address_hash=TOKEN, type="ERC-20").is_nft
