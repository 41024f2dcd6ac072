"""ShutdownCoordinator -- クリーンアップとプロセス終了の調停。

シグナル経路: トリガー受信 → クリーンアップ（高々一回） → プロセス終了。
正常終了経路: ワークロード自身が run_cleanup() を呼び、自然に return する。

両経路は同じ RunOnce ガードを共有するため、同時に到達しても
クリーンアップ本体は一度しか実行されない。
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from types import TracebackType
from typing import TextIO

from shimai.hook._listener import SignalListener
from shimai.hook._once import RunOnce
from shimai.hook._terminate import terminate_process
from shimai.models.exit_code import ExitCode
from shimai.models.state import CoordinatorState
from shimai.models.trigger import HookConfigurationError, validate_trigger

logger = logging.getLogger(__name__)


class ShutdownCoordinator:
    """トリガートークン受信時にクリーンアップを実行してプロセスを終了する。

    構築時に active が真ならリスナーを起動する（ARMED）。
    偽なら DISARMED となり、以後どんな入力があっても何もしない。

    リスナースレッドのハンドルは保持するが join はしない。リスナーは
    トリガー一致・入力終端・プロセス終了のいずれかで自然に終わる。

    一つの制御ストリームにつきコーディネーターは一つにすること。複数のリスナーが
    同じストリームを読むと、トリガー行を受け取るのはそのうち一つだけになる。
    複数のクリーンアップは CleanupRegistry にまとめて一つのコーディネーターに渡す。

    Args:
        trigger: 入力行と完全一致で比較するトリガートークン。
        cleanup: 引数なしのクリーンアップアクション。バックグラウンドスレッドから
            呼ばれても安全でなければならない。
        active: アクティベーション判定の結果。構築時に一度だけ評価済みの値。
        stream: 制御入力ストリーム。None の場合は sys.stdin。
        terminate: プロセス終了プリミティブ。終了コードを受け取る。

    Raises:
        HookConfigurationError: trigger が不正、または cleanup が呼び出し不可能な場合。
    """

    def __init__(
        self,
        trigger: str,
        cleanup: Callable[[], object],
        *,
        active: bool = True,
        stream: TextIO | None = None,
        terminate: Callable[[int], object] = terminate_process,
    ) -> None:
        self._trigger = validate_trigger(trigger)
        if not callable(cleanup):
            msg = f"Cleanup action must be callable, got {type(cleanup).__name__}"
            raise HookConfigurationError(msg)

        self._cleanup = RunOnce(cleanup)
        self._terminate = terminate
        self._lock = threading.Lock()
        self._state = CoordinatorState.IDLE
        self._listener = SignalListener(stream)

        if not active:
            self._set_state(CoordinatorState.DISARMED)
            logger.debug("Shutdown hook disarmed, not listening for %r", trigger)
            return

        # ARMED を先に設定し、即時トリガーで状態が巻き戻らないようにする
        self._set_state(CoordinatorState.ARMED)
        self._listener.start(self._trigger, self._on_trigger)

    @property
    def trigger(self) -> str:
        return self._trigger

    @property
    def state(self) -> CoordinatorState:
        with self._lock:
            return self._state

    @property
    def cleanup_ran(self) -> bool:
        """いずれかの経路がクリーンアップの実行権を確保していれば True。

        実行中（未完了）の場合も True になる。
        """
        return self._cleanup.ran

    @property
    def listener(self) -> SignalListener:
        """バックグラウンドリスナーのライフサイクルハンドル。"""
        return self._listener

    def _set_state(self, state: CoordinatorState) -> None:
        with self._lock:
            self._state = state

    def run_cleanup(self) -> bool:
        """正常終了経路からクリーンアップを実行する。

        シグナル経路が先に実行していればスキップする。実行中であれば完了まで待つ。
        クリーンアップの失敗はログに記録され、例外は送出しない。

        Returns:
            この呼び出しでクリーンアップを実行した場合 True。
        """
        return self._cleanup()

    def _on_trigger(self) -> None:
        """シグナル経路。リスナースレッド上で実行される。"""
        self._set_state(CoordinatorState.TRIGGERED)
        logger.debug("Running cleanup before shutdown")
        try:
            self._cleanup()
        except BaseException:
            # sys.exit() や KeyboardInterrupt でも終了ステップまで進める
            logger.exception("Cleanup interrupted, shutting down anyway")
        self._set_state(CoordinatorState.CLEANUP_RAN)
        self._set_state(CoordinatorState.TERMINATED)
        self._terminate(ExitCode.SUCCESS)

    def __enter__(self) -> ShutdownCoordinator:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.run_cleanup()
