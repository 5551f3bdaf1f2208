# tests/conftest.py
"""
pytest fixtures for the token ledger.

Every test gets a fresh in-memory SQLite database with the full schema
and its own DenormalizationState, so migration flags never leak between
tests.
"""

from decimal import Decimal

import pytest

from tokenledger.core.denormalization import DenormalizationState
from tokenledger.database.connection import DatabaseManager
from tokenledger.database.repositories import TransferRepository
from tokenledger.database.tables import Block, Log, Token, TokenTransfer
from tokenledger.types import DatabaseConfig, TRANSFER_SIGNATURE


def addr(n: int) -> str:
    return "0x" + format(n, "040x")


def h(n: int) -> str:
    return "0x" + format(n, "064x")


TOKEN = addr(0x7001)
NFT = addr(0x7002)
MULTI = addr(0x7003)
ALICE = addr(0xA1)
BOB = addr(0xB0B)
CAROL = addr(0xCA)


def block_hash(number: int, consensus: bool = True) -> str:
    # Forked blocks get a distinct hash at the same height
    return h(number if consensus else 0xF0000 + number)


@pytest.fixture
def db_manager():
    manager = DatabaseManager(DatabaseConfig(url="sqlite://"))
    manager.initialize()
    manager.create_schema()
    yield manager
    manager.shutdown()


@pytest.fixture
def session(db_manager):
    with db_manager.get_session() as session:
        yield session


@pytest.fixture
def state():
    return DenormalizationState()


@pytest.fixture
def repo(db_manager, state):
    return TransferRepository(db_manager, state)


class LedgerFactory:
    """Writes blocks, tokens, transfers and logs with sensible defaults"""

    def __init__(self, session):
        self.session = session
        self._tx = 0

    def token(self, address: str = TOKEN, token_type: str = "ERC-20", symbol: str = "TKN") -> Token:
        token = self.session.get(Token, address)
        if token is None:
            token = Token(contract_address_hash=address, type=token_type, symbol=symbol)
            self.session.add(token)
            self.session.flush()
        return token

    def block(self, number: int, consensus: bool = True) -> Block:
        hash_ = block_hash(number, consensus)
        block = self.session.get(Block, hash_)
        if block is None:
            block = Block(hash=hash_, number=number, consensus=consensus)
            self.session.add(block)
            self.session.flush()
        return block

    def next_tx(self) -> str:
        self._tx += 1
        return h(0x10000 + self._tx)

    def transfer(self, block_number: int, log_index: int, token: str = TOKEN,
                 from_address: str = ALICE, to_address: str = BOB,
                 amount=Decimal(1), amounts=None, token_ids=None,
                 token_type: str = "ERC-20", consensus: bool = True,
                 block_consensus="same", tx_hash: str = None) -> TokenTransfer:
        self.token(token, token_type)
        block = self.block(block_number, consensus)

        transfer = TokenTransfer(
            transaction_hash=tx_hash or self.next_tx(),
            block_hash=block.hash,
            log_index=log_index,
            block_number=block_number,
            from_address_hash=from_address,
            to_address_hash=to_address,
            token_contract_address_hash=token,
            amount=None if amounts is not None else amount,
            amounts=amounts,
            token_ids=token_ids,
            token_type=token_type,
            block_consensus=consensus if block_consensus == "same" else block_consensus,
        )
        self.session.add(transfer)
        self.session.flush()
        return transfer

    def log(self, block_number: int, index: int, tx_hash: str,
            first_topic: str = TRANSFER_SIGNATURE, consensus: bool = True) -> Log:
        log = Log(
            transaction_hash=tx_hash,
            block_hash=block_hash(block_number, consensus),
            index=index,
            block_number=block_number,
            first_topic=first_topic,
            address_hash=TOKEN,
        )
        self.session.add(log)
        self.session.flush()
        return log


@pytest.fixture
def factory(session):
    return LedgerFactory(session)
