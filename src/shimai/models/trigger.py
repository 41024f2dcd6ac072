"""トリガートークンの検証。

トリガーは改行を除去した入力行と完全一致で比較されるため、
空文字列や改行を含む値は決して一致しない。構築時に即座に拒否する。
"""

from __future__ import annotations

from typing import Final

_LINE_BREAK_CHARS: Final[tuple[str, ...]] = ("\n", "\r")


class HookConfigurationError(ValueError):
    """シャットダウンフックの構成エラー。

    実行時条件ではなくプログラミングエラーを表すため、構築時に送出する。
    """


def validate_trigger(trigger: str) -> str:
    """トリガートークンを検証し、そのまま返す。

    Args:
        trigger: 検証対象のトリガートークン。

    Returns:
        検証済みのトリガートークン（変換は行わない）。

    Raises:
        HookConfigurationError: str でない、空、または改行を含む場合。
    """
    if not isinstance(trigger, str):
        msg = f"Trigger token must be a str, got {type(trigger).__name__}"
        raise HookConfigurationError(msg)
    if not trigger:
        raise HookConfigurationError("Trigger token must not be empty")
    if any(ch in trigger for ch in _LINE_BREAK_CHARS):
        msg = f"Trigger token must not contain line breaks: {trigger!r}"
        raise HookConfigurationError(msg)
    return trigger


def strip_line_ending(line: str) -> str:
    """入力行から行末の改行のみを除去する。

    "\\n"、"\\r\\n"、末尾の単独 "\\r" を取り除く。空白等のトリミングは行わない。
    """
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line
