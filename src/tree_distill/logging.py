"""Logging utilities for tree_distill.

The package logs through loguru and is silent by default.  Call
:func:`enable_logging` to route tree_distill records to stderr.
"""

from __future__ import annotations

import contextlib
import sys
import threading
from typing import TYPE_CHECKING, ClassVar, Literal

from loguru import logger

if TYPE_CHECKING:
    from types import TracebackType

    from loguru import Record

PACKAGE_NAME = __name__.split(".")[0]

# Drop loguru's default stderr handler (id 0) so enable_logging() output is
# not duplicated; a no-op if the application already removed it.
with contextlib.suppress(ValueError):
    logger.remove(0)

LogLevel = Literal["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)


class LoggingHandle:
    """Handle returned by :func:`enable_logging`.

    Removes its handler on :meth:`disable` or when used as a context manager.
    The package logger is disabled again once the last handle goes away.
    """

    _active_ids: ClassVar[set[int]] = set()
    _lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(self, handler_id: int) -> None:
        self.handler_id: int | None = handler_id
        with LoggingHandle._lock:
            LoggingHandle._active_ids.add(handler_id)

    def disable(self) -> None:
        with LoggingHandle._lock:
            if self.handler_id is None:
                return
            LoggingHandle._active_ids.discard(self.handler_id)
            with contextlib.suppress(ValueError):
                logger.remove(self.handler_id)
            self.handler_id = None
            if not LoggingHandle._active_ids:
                logger.disable(PACKAGE_NAME)

    def __enter__(self) -> LoggingHandle:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.disable()

    @classmethod
    def get_active_handle_count(cls) -> int:
        with cls._lock:
            return len(cls._active_ids)


def enable_logging(*, level: LogLevel = "INFO", sink=sys.stderr) -> LoggingHandle:
    """Enable tree_distill logging.

    Parameters
    ----------
    level : str, default "INFO"
        Minimum level.  ``"DEBUG"`` shows per-node split decisions.
    sink : file-like or callable, default ``sys.stderr``
        Any loguru sink.

    Returns
    -------
    LoggingHandle
    """
    logger.enable(PACKAGE_NAME)
    handler_id = logger.add(sink, level=level, filter=_is_package_record, format=_FORMAT)
    return LoggingHandle(handler_id)


def _is_package_record(record: Record) -> bool:
    name = record["name"]
    return name is not None and name.startswith(PACKAGE_NAME)
