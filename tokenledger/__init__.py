# tokenledger/__init__.py

from pathlib import Path
from typing import Mapping, Optional

from .core.config import LedgerConfig
from .core.container import LedgerContainer
from .core.denormalization import DenormalizationState, denormalization
from .core.logging import LedgerLogger, log_with_context, INFO


def create_ledger(env: Optional[Mapping[str, str]] = None,
                  state: Optional[DenormalizationState] = None,
                  initialize: bool = True) -> LedgerContainer:
    config = LedgerConfig.from_env(env)
    _configure_logging_early(config)

    logger = LedgerLogger.get_logger('core.init')
    log_with_context(logger, INFO, "Creating ledger container")

    container = LedgerContainer(config, state)
    if initialize:
        container.initialize()
    return container


def _configure_logging_early(config: LedgerConfig) -> None:
    LedgerLogger.configure(
        log_dir=Path(config.log_dir) if config.log_dir else None,
        log_level=config.log_level,
        console_enabled=True,
        file_enabled=config.log_dir is not None,
        structured_format=True,
    )


__all__ = [
    'create_ledger',
    'LedgerConfig',
    'LedgerContainer',
    'DenormalizationState',
    'denormalization',
]
