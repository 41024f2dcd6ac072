"""デモワークロード -- ファイルへ書き込み続ける長時間タスク。

停止トリガーを受けるまで（または指定回数に達するまで）カウンタを
ファイルに書き込む。クリーンアップはファイルハンドルを閉じて
出力ファイルを削除する。

正常終了時は finally ブロックから run_cleanup() を呼び、
シグナル経路と同じ一回限りガードを共有する。
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from itertools import count
from pathlib import Path
from typing import TextIO

from shimai.hook import ShutdownCoordinator, install_shutdown_hook, terminate_process
from shimai.models.config import ShimaiConfig

logger = logging.getLogger(__name__)


class WorkloadError(Exception):
    """ワークロードの出力ファイルを開けない。"""


class FileWritingWorkload:
    """出力ファイルにカウンタを書き込み続けるワークロード。

    Args:
        path: 出力ファイルのパス。
        interval: 書き込み間隔（秒）。
        iterations: 書き込み回数。None の場合は無限。
    """

    def __init__(
        self,
        path: Path,
        *,
        interval: float,
        iterations: int | None = None,
    ) -> None:
        self._path = path
        self._interval = interval
        self._iterations = iterations
        self._handle: TextIO | None = None
        self._lock = threading.Lock()
        self._opened = False
        self._written = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def written(self) -> int:
        """書き込み済みの行数。"""
        return self._written

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._handle is not None

    def open(self) -> None:
        """出力ファイルを書き込みモードで開く（既存内容は破棄）。

        Raises:
            WorkloadError: ファイルを開けない場合。
        """
        try:
            handle = self._path.open("w", encoding="utf-8")
        except OSError as e:
            raise WorkloadError(
                f"Cannot open output file {self._path}: {e}\n"
                "Check that the directory exists and is writable, "
                "or pass a different path with --output."
            ) from e
        with self._lock:
            self._handle = handle
            self._opened = True

    def run(self, hook: ShutdownCoordinator) -> int:
        """書き込みループを実行する。未オープンなら先にファイルを開く。

        ループを抜けた場合（回数到達・クリーンアップによるハンドル解放・例外）は
        必ず hook.run_cleanup() を呼ぶ。

        Returns:
            書き込んだ行数。

        Raises:
            WorkloadError: ファイルを開けない場合。
        """
        if not self._opened:
            self.open()
        try:
            for i in count(1):
                if self._iterations is not None and i > self._iterations:
                    break
                if not self._write(i):
                    break
                time.sleep(self._interval)
        finally:
            hook.run_cleanup()
        return self._written

    def _write(self, value: int) -> bool:
        """1行書き込む。ハンドルが解放済みなら False を返す。"""
        with self._lock:
            if self._handle is None:
                return False
            self._handle.write(f"{value}\n")
            self._handle.flush()
            self._written += 1
        logger.debug("Wrote %d to %s", value, self._path)
        return True

    def cleanup(self) -> None:
        """ファイルハンドルを閉じ、出力ファイルを削除する。

        何度呼ばれても安全。どのスレッドから呼ばれたかをログに残す。
        """
        logger.debug(
            "cleanup() called from thread %s", threading.current_thread().name
        )
        with self._lock:
            handle, self._handle = self._handle, None
        if handle is not None:
            try:
                handle.close()
            except OSError:
                logger.exception("Unable to close %s", self._path)
        if self._path.is_file():
            self._path.unlink(missing_ok=True)
            logger.info("Removed %s", self._path)


def run_demo(
    config: ShimaiConfig,
    *,
    stream: TextIO | None = None,
    terminate: Callable[[int], object] = terminate_process,
    on_armed: Callable[[ShutdownCoordinator], object] | None = None,
) -> int:
    """設定に従ってデモワークロードをシャットダウンフック付きで実行する。

    Args:
        config: 解決済みの設定。
        stream: 制御入力ストリーム。None の場合は sys.stdin。
        terminate: プロセス終了プリミティブ。
        on_armed: フック構築直後に呼ばれるコールバック（CLI の案内表示用）。

    Returns:
        書き込んだ行数（正常終了経路の場合のみ戻る）。

    Raises:
        WorkloadError: 出力ファイルを開けない場合。
    """
    workload = FileWritingWorkload(
        Path(config.demo.output_file),
        interval=config.demo.interval,
        iterations=config.demo.iterations,
    )
    workload.open()
    hook = install_shutdown_hook(
        workload.cleanup,
        config=config,
        stream=stream,
        terminate=terminate,
    )
    if on_armed is not None:
        on_armed(hook)
    return workload.run(hook)
