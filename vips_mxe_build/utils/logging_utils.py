"""RU: Утилиты настройки логирования.

EN: Logging setup utilities.
"""

from __future__ import annotations

import logging
from typing import Final

import coloredlogs

DEFAULT_LOGGER_NAME: Final = "vips-build"


def setup_logging(*, verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """RU: Настраивает логирование c учётом флагов.

    EN: Configure logging according to verbosity flags.

    Quiet wins over verbose. Calling this again only adjusts the level.
    """
    level = logging.INFO
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG

    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    logger.setLevel(level)

    # RU: Избегаем двойных handlers при повторном вызове.
    # EN: Avoid double handlers if called multiple times.
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    fmt = "%(asctime)s %(levelname)s %(message)s"
    coloredlogs.install(level=level, logger=logger, fmt=fmt)
    return logger


def status(msg: str, *, quiet: bool) -> None:
    """RU: Печатает короткое статус-сообщение (если не quiet).

    EN: Emit a short status line.
    """
    if not quiet:
        print(msg, flush=True)
