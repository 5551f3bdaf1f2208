# tokenledger/cli/context.py

from typing import Mapping, Optional

from ..core.container import LedgerContainer
from ..core.logging import LedgerLogger


class CLIContext:
    """Builds the ledger container on first use so `--help` never touches the database"""

    def __init__(self, env: Optional[Mapping[str, str]] = None):
        self.env = env
        self.logger = LedgerLogger.get_logger('cli.context')
        self._container: Optional[LedgerContainer] = None

    @property
    def container(self) -> LedgerContainer:
        if self._container is None:
            from .. import create_ledger
            self._container = create_ledger(self.env)
        return self._container

    def close(self) -> None:
        if self._container is not None:
            self._container.shutdown()
            self._container = None
