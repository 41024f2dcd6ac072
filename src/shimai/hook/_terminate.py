"""プロセス終了プリミティブ。"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import suppress
from typing import NoReturn

from shimai.models.exit_code import ExitCode


def terminate_process(exit_code: int = ExitCode.SUCCESS) -> NoReturn:
    """出力をフラッシュしてプロセス全体を即座に終了する。

    バックグラウンドスレッドから sys.exit() を呼んでもそのスレッドが終わるだけなので、
    os._exit() で終了する。atexit ハンドラや finally ブロックは実行されない。
    呼び出し前にクリーンアップが完了していることは呼び出し側が保証する。

    Args:
        exit_code: プロセス終了コード。
    """
    logging.shutdown()
    for stream in (sys.stdout, sys.stderr):
        if stream is not None:
            with suppress(OSError, ValueError):
                stream.flush()
    os._exit(int(exit_code))
