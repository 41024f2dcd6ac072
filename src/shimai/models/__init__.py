"""shimai ドメインモデルパッケージ。"""

from shimai.models._base import ShimaiBaseModel
from shimai.models.config import (
    DEFAULT_TRIGGER,
    ActivationPolicy,
    DemoConfig,
    LogLevel,
    ShimaiConfig,
)
from shimai.models.exit_code import ExitCode
from shimai.models.state import CoordinatorState, ListenerState
from shimai.models.trigger import (
    HookConfigurationError,
    strip_line_ending,
    validate_trigger,
)

__all__ = [
    "DEFAULT_TRIGGER",
    "ActivationPolicy",
    "CoordinatorState",
    "DemoConfig",
    "ExitCode",
    "HookConfigurationError",
    "ListenerState",
    "LogLevel",
    "ShimaiBaseModel",
    "ShimaiConfig",
    "strip_line_ending",
    "validate_trigger",
]
