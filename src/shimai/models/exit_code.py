"""ExitCode -- 終了コードの定義。

シグナル経路のプロセス終了は常に SUCCESS。
EXECUTION_ERROR と INPUT_ERROR は CLI 層でのみ使用する。
"""

from enum import IntEnum


class ExitCode(IntEnum):
    """プロセス終了コード。"""

    SUCCESS = 0
    EXECUTION_ERROR = 1
    INPUT_ERROR = 2
