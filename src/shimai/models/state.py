"""リスナーとコーディネーターの状態定義。"""

from enum import StrEnum


class ListenerState(StrEnum):
    """SignalListener のライフサイクル状態。

    INACTIVE → LISTENING → TRIGGERED → TERMINATED が正常なシグナル経路。
    STOPPED はトリガー一致なしで読み取りを終えた終端状態（EOF・読み取りエラー）。
    """

    INACTIVE = "inactive"
    LISTENING = "listening"
    TRIGGERED = "triggered"
    TERMINATED = "terminated"
    STOPPED = "stopped"


class CoordinatorState(StrEnum):
    """ShutdownCoordinator のライフサイクル状態。

    IDLE → ARMED → TRIGGERED → CLEANUP_RAN → TERMINATED がシグナル経路。
    IDLE → DISARMED はアクティベーション判定が偽だった場合の終端状態。
    """

    IDLE = "idle"
    ARMED = "armed"
    DISARMED = "disarmed"
    TRIGGERED = "triggered"
    CLEANUP_RAN = "cleanup_ran"
    TERMINATED = "terminated"
