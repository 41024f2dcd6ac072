"""shimai -- 標準入力から停止できる長時間プロセスのためのシャットダウンフック。

公開 API:
    ShutdownCoordinator: トリガー受信時にクリーンアップしてプロセスを終了する。
    install_shutdown_hook: 設定からコーディネーターを構築する。
"""

from shimai.hook import (
    CleanupRegistry,
    HookConfigurationError,
    ListenerStateError,
    RunOnce,
    ShutdownCoordinator,
    SignalListener,
    install_shutdown_hook,
)


def main() -> None:
    """パッケージエントリポイント。cli.main() に委譲する。

    pyproject.toml の [project.scripts] は shimai.cli:main を直接参照するため、
    この関数はプログラムから shimai.main() として呼び出す場合の互換用。
    """
    from shimai.cli import main as cli_main

    cli_main()


__all__ = [
    "CleanupRegistry",
    "HookConfigurationError",
    "ListenerStateError",
    "RunOnce",
    "ShutdownCoordinator",
    "SignalListener",
    "install_shutdown_hook",
    "main",
]
