"""SignalListener -- 制御入力ストリームの監視。

バックグラウンドスレッドで入力を一行ずつ読み、トリガートークンと
完全一致した行を受け取ったら on_trigger を一度だけ呼び出す。

ストリームの終端・読み取りエラーはリスナーの停止として扱い、
主ワークロードには一切伝播しない。
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable
from typing import Final, TextIO

from shimai.models.state import ListenerState
from shimai.models.trigger import strip_line_ending, validate_trigger

logger = logging.getLogger(__name__)

LISTENER_THREAD_NAME: Final[str] = "shimai-listener"


class ListenerStateError(RuntimeError):
    """start() が同一インスタンスで二度呼ばれた。"""


class SignalListener:
    """制御入力ストリームからトリガートークンを待ち受けるリスナー。

    Args:
        stream: 行指向のテキストストリーム。None の場合は start() 時点の
            sys.stdin を使用する。
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._state = ListenerState.INACTIVE
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None

    @property
    def state(self) -> ListenerState:
        with self._lock:
            return self._state

    def _set_state(self, state: ListenerState) -> None:
        with self._lock:
            self._state = state

    def start(self, trigger: str, on_trigger: Callable[[], object]) -> None:
        """リスナースレッドを起動する。

        スレッドはデーモンとして起動するため、主ワークロードが自然終了すれば
        ブロック中の読み取りごとプロセスと共に破棄される。

        Args:
            trigger: 入力行と完全一致で比較するトリガートークン。
            on_trigger: トリガー受信時にリスナースレッド上で呼ばれる手続き。

        Raises:
            HookConfigurationError: trigger が空、または改行を含む場合。
            ListenerStateError: 既に start() が呼ばれている場合。
        """
        validate_trigger(trigger)
        with self._lock:
            if self._thread is not None:
                raise ListenerStateError(
                    "SignalListener.start() may only be called once per instance"
                )
            stream = self._stream if self._stream is not None else sys.stdin
            self._thread = threading.Thread(
                target=self._listen,
                args=(stream, trigger, on_trigger),
                name=LISTENER_THREAD_NAME,
                daemon=True,
            )
            self._state = ListenerState.LISTENING
        self._thread.start()
        logger.debug("Listening for exit signal %r on control stream", trigger)

    def is_alive(self) -> bool:
        """リスナースレッドが実行中なら True。"""
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        """リスナースレッドの終了を待つ。未起動の場合は何もしない。"""
        if self._thread is not None:
            self._thread.join(timeout)

    def _listen(
        self,
        stream: TextIO | None,
        trigger: str,
        on_trigger: Callable[[], object],
    ) -> None:
        if stream is None:
            logger.debug("No control stream available, listener stopped")
            self._set_state(ListenerState.STOPPED)
            return

        try:
            matched = _read_until_trigger(stream, trigger)
        except (OSError, ValueError) as e:
            logger.debug("Error reading from control stream, listener stopped: %s", e)
            self._set_state(ListenerState.STOPPED)
            return

        if not matched:
            logger.debug("Control stream closed before exit signal %r", trigger)
            self._set_state(ListenerState.STOPPED)
            return

        self._set_state(ListenerState.TRIGGERED)
        logger.info('Received exit signal "%s", shutting down', trigger)
        handled = False
        try:
            on_trigger()
            handled = True
        except Exception:
            logger.exception("Exit signal handler failed")
        finally:
            # TERMINATED は on_trigger が最後まで戻った場合のみ
            self._set_state(
                ListenerState.TERMINATED if handled else ListenerState.STOPPED
            )


def _read_until_trigger(stream: TextIO, trigger: str) -> bool:
    """trigger と一致する行まで読み進める。

    Returns:
        一致する行を読んだ場合 True。一致前に EOF に達した場合 False。

    Raises:
        OSError: ストリームの読み取りに失敗した場合。
        ValueError: クローズ済みストリーム、デコードエラー等。
    """
    while True:
        line = stream.readline()
        if not line:
            return False
        if strip_line_ending(line) == trigger:
            return True
