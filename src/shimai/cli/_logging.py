"""CLI 用ログ設定。

ログは Rich ハンドラ経由で stderr に出力する。stdout はコマンド結果専用。
ルートロガーではなく shimai パッケージロガーにのみハンドラを設定する。
"""

from __future__ import annotations

import logging
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

from shimai.models.config import LogLevel

_PACKAGE_LOGGER: Final[str] = "shimai"

_LEVELS: Final[dict[LogLevel, int]] = {
    LogLevel.DEBUG: logging.DEBUG,
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
}


def configure_logging(level: LogLevel) -> logging.Logger:
    """shimai パッケージロガーに Rich ハンドラを設定する。

    繰り返し呼ばれた場合は以前に追加した RichHandler を置き換える。

    Args:
        level: ログレベル。

    Returns:
        設定済みのパッケージロガー。
    """
    package_logger = logging.getLogger(_PACKAGE_LOGGER)
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    package_logger.addHandler(handler)
    package_logger.setLevel(_LEVELS[level])
    return package_logger
