"""
Opt-in logging for the patch engine.

Engine entry points take ``logger=None, log=False`` and resolve them here:

    from patchforge._logging import resolve_logger

    def apply_diff(content, diff, *, logger=None, log: bool = False):
        log = resolve_logger(logger=logger, enabled=log, name=__name__)
        log.debug("parsed %d segments", n)   # silent unless opted in

Nothing is printed by library code and nothing is configured globally;
orchestration modules use plain ``logging.getLogger(__name__)``.
"""
from __future__ import annotations

import logging

ROOT_LOGGER_NAME = "patchforge"


class NoopLogger:
    """Accepts the logging.Logger call surface and drops everything."""

    def debug(self, *args, **kwargs):  # type: ignore[no-untyped-def]
        pass

    info = warning = error = exception = critical = debug

    def isEnabledFor(self, level: int) -> bool:  # noqa: N802 - mirrors logging.Logger
        return False


def resolve_logger(
    logger: logging.Logger | None = None,
    *,
    enabled: bool = False,
    name: str | None = None,
    level: int = logging.DEBUG,
) -> logging.Logger | NoopLogger:
    """
    Pick the logger an engine call should use.

    - An explicit ``logger`` always wins.
    - ``enabled=True`` returns the named logger (default ``patchforge``),
      lowered to ``level`` and left propagating so pytest's caplog sees it.
    - Otherwise a NoopLogger.
    """
    if logger is not None:
        return logger
    if enabled:
        lg = logging.getLogger(name or ROOT_LOGGER_NAME)
        lg.setLevel(level)
        lg.propagate = True
        return lg
    return NoopLogger()
