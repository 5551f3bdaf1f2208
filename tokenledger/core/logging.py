# tokenledger/core/logging.py
"""
Logging for the ledger.

Everything logs under the `tokenledger` logger tree. Query and scan
outcomes carry keyword context (token, address, mode, row counts) that
LedgerFormatter appends to the line.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

DEBUG = logging.DEBUG
INFO = logging.INFO
ERROR = logging.ERROR

ROOT_LOGGER = 'tokenledger'


class LedgerFormatter(logging.Formatter):
    context_attrs = ('token', 'token_id', 'address', 'direction', 'page_size', 'mode',
                     'row_count', 'signature_count', 'replica', 'error', 'exception_type')

    def __init__(self, include_context: bool = True):
        super().__init__()
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        line = f"{stamp} - {record.name} - {record.levelname} - {record.getMessage()}"
        if not self.include_context:
            return line

        context = [f"{attr}={getattr(record, attr)}" for attr in self.context_attrs if hasattr(record, attr)]
        return f"{line} | {' '.join(context)}" if context else line


class LedgerLogger:
    """One-time configuration of the `tokenledger` logger tree"""

    _configured = False

    @classmethod
    def configure(cls,
                  log_dir: Optional[Path] = None,
                  log_level: str = "INFO",
                  console_enabled: bool = True,
                  file_enabled: bool = True,
                  structured_format: bool = True) -> None:
        if cls._configured:
            return

        level = getattr(logging, log_level.upper())
        root = logging.getLogger(ROOT_LOGGER)
        root.setLevel(level)
        root.handlers.clear()

        if console_enabled:
            console = logging.StreamHandler(sys.stderr)
            console.setLevel(level)
            if structured_format:
                console.setFormatter(LedgerFormatter())
            else:
                console.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            root.addHandler(console)

        if file_enabled and log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)
            formatter = LedgerFormatter()

            file_handler = logging.FileHandler(log_dir / 'tokenledger.log')
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

            errors = logging.FileHandler(log_dir / 'tokenledger_errors.log')
            errors.setLevel(logging.ERROR)
            errors.setFormatter(formatter)
            root.addHandler(errors)

        cls._configured = True

    @classmethod
    def reset(cls) -> None:
        root = logging.getLogger(ROOT_LOGGER)
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        cls._configured = False

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not name.startswith(ROOT_LOGGER):
            name = f'{ROOT_LOGGER}.{name}'
        return logging.getLogger(name)


def get_class_logger(instance) -> logging.Logger:
    module = type(instance).__module__
    if module.startswith(ROOT_LOGGER + '.'):
        module = module[len(ROOT_LOGGER) + 1:]
    return LedgerLogger.get_logger(f"{module}.{type(instance).__name__}")


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    if not logger.isEnabledFor(level):
        return
    record = logger.makeRecord(logger.name, level, "", 0, message, (), None)
    for key, value in context.items():
        setattr(record, key, value)
    logger.handle(record)


class LoggingMixin:
    """Per-class logger plus context-aware helpers"""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = get_class_logger(self)
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, INFO, message, **context)
