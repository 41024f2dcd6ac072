"""RunOnce -- クリーンアップアクションの一回限り実行ガード。

シグナル経路と正常終了経路の両方から同時に呼ばれても、
アクション本体は高々一回しか実行されない。
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RunOnce:
    """引数なしアクションを高々一回だけ実行する呼び出し可能オブジェクト。

    最初の呼び出し元がフラグを確保し、ロックを保持したままアクションを実行する。
    並行する他の呼び出し元は実行完了まで待機した後、実行せずに False を返す。
    そのため呼び出しから戻った時点で、アクションは必ず完了している。

    アクション内部からの再入呼び出しは RLock により即座に False を返す。

    アクションが Exception を送出した場合はトレースバック付きで error ログを出力し、
    例外は呼び出し元に伝播しない。失敗した場合も「実行済み」として扱う。
    """

    def __init__(self, action: Callable[[], object], *, name: str | None = None) -> None:
        self._action = action
        self._name = name or getattr(action, "__qualname__", repr(action))
        self._lock = threading.RLock()
        self._ran = False

    @property
    def ran(self) -> bool:
        """アクションの実行権が確保済みなら True。

        実行中（未完了）でも True を返し、完了を待たない。
        """
        return self._ran

    def __call__(self) -> bool:
        """アクションを実行する。

        Returns:
            この呼び出しでアクションを実行した場合 True。
            既に実行済み（または実行中の再入呼び出し）の場合 False。
        """
        with self._lock:
            if self._ran:
                logger.debug("Cleanup action %s already ran, skipping", self._name)
                return False
            self._ran = True
            try:
                self._action()
            except Exception:
                logger.exception("Cleanup action %s failed", self._name)
            return True
