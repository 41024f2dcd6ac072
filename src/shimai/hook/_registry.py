"""CleanupRegistry -- 複数のクリーンアップを一つのコーディネーターに束ねる。

制御ストリームを読むリスナーは一つだけにし、トリガー受信時には
その時点で登録されている全クリーンアップを実行する。
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from shimai.hook._once import RunOnce


class CleanupRegistry:
    """登録済みクリーンアップの集合。それ自体が引数なしのクリーンアップになる。

    各クリーンアップは個別の RunOnce で包まれるため、登録元が正常終了経路で
    先に実行していれば、トリガー受信時には再実行されない。
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[RunOnce] = []

    def register(
        self, cleanup: Callable[[], object], *, name: str | None = None
    ) -> RunOnce:
        """クリーンアップを登録し、その一回限りガードを返す。

        返された RunOnce を呼ぶと正常終了経路として実行される。
        """
        entry = RunOnce(cleanup, name=name)
        with self._lock:
            self._entries.append(entry)
        return entry

    def unregister(self, entry: RunOnce) -> None:
        """登録を解除する。未登録なら何もしない。"""
        with self._lock:
            if entry in self._entries:
                self._entries.remove(entry)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __call__(self) -> None:
        """登録済みの全クリーンアップを登録と逆順に実行する。

        あるクリーンアップが BaseException で中断しても残りは実行し、
        最初の例外を最後に送出する。
        """
        with self._lock:
            entries = list(reversed(self._entries))
        pending: BaseException | None = None
        for entry in entries:
            try:
                entry()
            except BaseException as e:
                if pending is None:
                    pending = e
        if pending is not None:
            raise pending
