# tokenledger/core/config.py

import os
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv
from msgspec import Struct

from ..types import DatabaseConfig, ConfigurationError, KNOWN_TRANSFER_SIGNATURES, DEFAULT_PAGE_SIZE, EvmHash
from .logging import LedgerLogger, log_with_context, INFO

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class LedgerConfig(Struct, kw_only=True):
    database: DatabaseConfig
    replica: Optional[DatabaseConfig] = None
    default_page_size: int = DEFAULT_PAGE_SIZE
    consensus_denormalized: bool = False
    token_type_denormalized: bool = False
    reconciliation_chunk_size: int = 1000
    transfer_signatures: Tuple[EvmHash, ...] = KNOWN_TRANSFER_SIGNATURES
    log_level: str = "INFO"
    log_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.reconciliation_chunk_size <= 0:
            raise ConfigurationError(
                f"reconciliation_chunk_size must be positive, got {self.reconciliation_chunk_size}"
            )
        if self.default_page_size <= 0:
            raise ConfigurationError(f"default_page_size must be positive, got {self.default_page_size}")

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> 'LedgerConfig':
        if env is None:
            load_dotenv()
            env = os.environ

        url = env.get("LEDGER_DB_URL")
        if not url:
            raise ConfigurationError("LEDGER_DB_URL must be set")

        pool_size = _int(env, "LEDGER_DB_POOL_SIZE", 5)
        max_overflow = _int(env, "LEDGER_DB_MAX_OVERFLOW", 10)
        timeout = _int(env, "LEDGER_STATEMENT_TIMEOUT_MS", None)

        database = DatabaseConfig(url=url, pool_size=pool_size, max_overflow=max_overflow,
                                  statement_timeout_ms=timeout)

        replica = None
        replica_url = env.get("LEDGER_REPLICA_DB_URL")
        if replica_url:
            replica = DatabaseConfig(url=replica_url, pool_size=pool_size, max_overflow=max_overflow,
                                     statement_timeout_ms=timeout)

        log_dir = env.get("LEDGER_LOG_DIR")

        config = cls(
            database=database,
            replica=replica,
            default_page_size=_int(env, "LEDGER_DEFAULT_PAGE_SIZE", DEFAULT_PAGE_SIZE),
            consensus_denormalized=_bool(env, "LEDGER_TT_CONSENSUS_DENORMALIZED"),
            token_type_denormalized=_bool(env, "LEDGER_TT_TOKEN_TYPE_DENORMALIZED"),
            reconciliation_chunk_size=_int(env, "LEDGER_RECONCILE_CHUNK_SIZE", 1000),
            log_level=env.get("LEDGER_LOG_LEVEL", "INFO").upper(),
            log_dir=Path(log_dir) if log_dir else None,
        )

        logger = LedgerLogger.get_logger('core.config')
        log_with_context(logger, INFO, "Ledger configuration loaded",
                         replica=replica is not None,
                         mode="denormalized" if config.consensus_denormalized else "block_join")
        return config


def _int(env: Mapping[str, str], key: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}")


def _bool(env: Mapping[str, str], key: str) -> bool:
    raw = env.get(key, "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ConfigurationError(f"{key} must be a boolean flag, got {raw!r}")
