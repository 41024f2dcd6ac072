"""設定管理モデル。

設定項目の定義とバリデーション仕様。
全モデルは ShimaiBaseModel を継承する。
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

from pydantic import Field, field_validator

from shimai.models._base import ShimaiBaseModel, coerce_choice
from shimai.models.trigger import HookConfigurationError, validate_trigger

DEFAULT_TRIGGER: Final[str] = "q"
DEFAULT_OUTPUT_FILE: Final[str] = "some.file"
DEFAULT_INTERVAL_SECONDS: Final[float] = 0.5


class ActivationPolicy(StrEnum):
    """リスナーを起動するかどうかの判定方針。

    判定は構築時に一度だけ行われ、結果の bool のみがコーディネーターに渡る。
    """

    ALWAYS = "always"
    NEVER = "never"
    INTERACTIVE = "interactive"
    DEBUG = "debug"


class LogLevel(StrEnum):
    """CLI のログレベル。"""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class DemoConfig(ShimaiBaseModel):
    """デモワークロード設定。

    iterations が None の場合は停止トリガーを受けるまで書き込みを続ける。
    """

    output_file: str = Field(default=DEFAULT_OUTPUT_FILE, min_length=1)
    interval: float = Field(default=DEFAULT_INTERVAL_SECONDS, gt=0)
    iterations: int | None = Field(default=None, gt=0)


class ShimaiConfig(ShimaiBaseModel):
    """全設定項目を統合した不変モデル。

    デフォルト値のみで有効なインスタンスを構築可能。
    """

    # フック設定
    trigger: str = DEFAULT_TRIGGER
    activation: ActivationPolicy = ActivationPolicy.ALWAYS

    # ログ設定
    log_level: LogLevel = LogLevel.INFO

    # デモワークロード設定
    demo: DemoConfig = Field(default_factory=DemoConfig)

    @field_validator("trigger")
    @classmethod
    def validate_trigger_token(cls, v: str) -> str:
        """トリガートークンの形式を検証する。"""
        try:
            return validate_trigger(v)
        except HookConfigurationError as e:
            raise ValueError(str(e)) from e

    @field_validator("activation", mode="before")
    @classmethod
    def normalize_activation(cls, v: object) -> object:
        """activation を case-insensitive で受け付ける。"""
        return coerce_choice(v, ActivationPolicy)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """log_level を case-insensitive で受け付ける。"""
        return coerce_choice(v, LogLevel)
