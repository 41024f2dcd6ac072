"""シャットダウンフック。

制御入力ストリームからトリガートークンを受け取ると、登録された
クリーンアップを一度だけ実行してからプロセスを終了する。

1. アクティベーション判定（evaluate_activation）
2. リスナー起動（SignalListener）
3. トリガー一致 → クリーンアップ（RunOnce）
   複数のクリーンアップは CleanupRegistry で一つにまとめる
4. プロセス終了（terminate_process）
"""

from shimai.hook._activation import (
    evaluate_activation,
    is_debugger_attached,
    is_interactive,
)
from shimai.hook._coordinator import ShutdownCoordinator
from shimai.hook._install import install_shutdown_hook
from shimai.hook._listener import ListenerStateError, SignalListener
from shimai.hook._once import RunOnce
from shimai.hook._registry import CleanupRegistry
from shimai.hook._terminate import terminate_process
from shimai.models.trigger import HookConfigurationError

__all__ = [
    "CleanupRegistry",
    "HookConfigurationError",
    "ListenerStateError",
    "RunOnce",
    "ShutdownCoordinator",
    "SignalListener",
    "evaluate_activation",
    "install_shutdown_hook",
    "is_debugger_attached",
    "is_interactive",
    "terminate_process",
]
