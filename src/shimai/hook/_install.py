"""設定からシャットダウンフックを構築するファサード。"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TextIO

from shimai.config import resolve_config
from shimai.hook._activation import evaluate_activation
from shimai.hook._coordinator import ShutdownCoordinator
from shimai.hook._terminate import terminate_process
from shimai.models.config import ShimaiConfig

logger = logging.getLogger(__name__)


def install_shutdown_hook(
    cleanup: Callable[[], object],
    *,
    config: ShimaiConfig | None = None,
    stream: TextIO | None = None,
    terminate: Callable[[int], object] = terminate_process,
) -> ShutdownCoordinator:
    """ShimaiConfig に従って ShutdownCoordinator を構築する。

    アクティベーション方針はここで一度だけ評価され、
    結果の bool がコーディネーターに渡される。

    Args:
        cleanup: 引数なしのクリーンアップアクション。
        config: 解決済みの設定。None の場合はカレントディレクトリから解決する。
        stream: 制御入力ストリーム。None の場合は sys.stdin。
        terminate: プロセス終了プリミティブ。

    Returns:
        構築済みの ShutdownCoordinator（ARMED または DISARMED）。

    Raises:
        pydantic.ValidationError: config 省略時に解決した設定が不正な場合。
    """
    effective = config if config is not None else resolve_config()
    active = evaluate_activation(effective.activation, stream)
    logger.debug(
        "Activation policy %s evaluated to %s", effective.activation.value, active
    )
    return ShutdownCoordinator(
        effective.trigger,
        cleanup,
        active=active,
        stream=stream,
        terminate=terminate,
    )
