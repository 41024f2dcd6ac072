"""設定モデルの基底クラスと選択肢の正規化。"""

from enum import StrEnum
from typing import TypeVar

from pydantic import BaseModel, ConfigDict


class ShimaiBaseModel(BaseModel):
    """設定・結果モデルの基底クラス。

    未知のキーは設定ファイルの書き間違いとして拒否し、
    解決後の設定は実行中に書き換えられないよう不変にする。
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


E = TypeVar("E", bound=StrEnum)


def coerce_choice(v: object, choices: type[E]) -> object:
    """設定ファイル・CLI から来た選択肢を大文字小文字を区別せず enum メンバーに変換する。

    "ALWAYS" や "Debug" も受け付ける。どのメンバーにも一致しない値は
    そのまま返し、エラー報告は Pydantic に任せる。
    """
    if isinstance(v, choices) or not isinstance(v, str):
        return v
    try:
        return choices(v.lower())
    except ValueError:
        return v
