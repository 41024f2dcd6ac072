"""アクティベーション判定。

コーディネーターは bool しか受け取らない。実行環境を調べて
ActivationPolicy を bool に変換するのはこのモジュールの責務。
"""

from __future__ import annotations

import sys
from typing import Final, TextIO, assert_never

from shimai.models.config import ActivationPolicy

_DEBUGGER_MODULES: Final[tuple[str, ...]] = ("pydevd", "debugpy")


def is_debugger_attached() -> bool:
    """デバッガがアタッチされているかを推定する。

    トレース関数の設定、sys.monitoring のデバッガツール登録、
    pydevd / debugpy のロードのいずれかで判定する。
    sys.settrace を使うカバレッジ計測下でも True になる。
    """
    if sys.gettrace() is not None:
        return True
    if sys.monitoring.get_tool(sys.monitoring.DEBUGGER_ID) is not None:
        return True
    return any(name in sys.modules for name in _DEBUGGER_MODULES)


def is_interactive(stream: TextIO | None = None) -> bool:
    """制御入力ストリームが TTY に接続されていれば True。

    Args:
        stream: 判定対象のストリーム。None の場合は sys.stdin。
    """
    target = stream if stream is not None else sys.stdin
    if target is None:
        return False
    try:
        return target.isatty()
    except (OSError, ValueError):
        return False


def evaluate_activation(
    policy: ActivationPolicy,
    stream: TextIO | None = None,
) -> bool:
    """ActivationPolicy を一度だけ評価して bool を返す。

    Args:
        policy: 判定方針。
        stream: INTERACTIVE 判定に使う制御入力ストリーム。

    Returns:
        リスナーを起動すべきなら True。
    """
    if policy == ActivationPolicy.ALWAYS:
        return True
    if policy == ActivationPolicy.NEVER:
        return False
    if policy == ActivationPolicy.INTERACTIVE:
        return is_interactive(stream)
    if policy == ActivationPolicy.DEBUG:
        return is_debugger_attached()
    assert_never(policy)
