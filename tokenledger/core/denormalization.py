# tokenledger/core/denormalization.py
"""
Process-wide migration flags.

Each flag records that a backfill onto `token_transfers` has finished:

- consensus_finished: every row carries `block_consensus`
- token_type_finished: every row carries `token_type`

Flags only move from False to True. Callers take a `snapshot()` once per
request and use it for the whole request.
"""

from msgspec import Struct

from .logging import LedgerLogger, log_with_context, INFO


class DenormalizationSnapshot(Struct, frozen=True):
    consensus_finished: bool = False
    token_type_finished: bool = False


class DenormalizationState:
    def __init__(self, consensus_finished: bool = False, token_type_finished: bool = False):
        self._consensus_finished = bool(consensus_finished)
        self._token_type_finished = bool(token_type_finished)
        self.logger = LedgerLogger.get_logger('core.denormalization')

    @property
    def consensus_finished(self) -> bool:
        return self._consensus_finished

    @property
    def token_type_finished(self) -> bool:
        return self._token_type_finished

    def mark_consensus_finished(self) -> None:
        if not self._consensus_finished:
            self._consensus_finished = True
            log_with_context(self.logger, INFO, "block_consensus backfill marked finished")

    def mark_token_type_finished(self) -> None:
        if not self._token_type_finished:
            self._token_type_finished = True
            log_with_context(self.logger, INFO, "token_type backfill marked finished")

    def apply(self, consensus_finished: bool, token_type_finished: bool) -> None:
        # False never clears a finished flag
        if consensus_finished:
            self.mark_consensus_finished()
        if token_type_finished:
            self.mark_token_type_finished()

    def snapshot(self) -> DenormalizationSnapshot:
        return DenormalizationSnapshot(
            consensus_finished=self._consensus_finished,
            token_type_finished=self._token_type_finished,
        )


denormalization = DenormalizationState()


def configure_denormalization(config) -> DenormalizationState:
    """Seed the process-wide flags from a LedgerConfig at startup."""
    denormalization.apply(config.consensus_denormalized, config.token_type_denormalized)
    return denormalization
