"""TOML 設定ファイルの読み込み。

値の検証はしない（_resolver.py と ShimaiConfig の責務）。
ファイルアクセスと TOML 構文のエラーは呼び出し元にそのまま送出する。
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Final

_PYPROJECT_TABLE: Final[tuple[str, ...]] = ("tool", "shimai")


def load_toml_config(path: Path) -> dict[str, object]:
    """TOML ファイル全体を辞書として読み込む。

    Raises:
        tomllib.TOMLDecodeError: TOML 構文エラーの場合。
        PermissionError: 読み取り権限がない場合。
        FileNotFoundError: ファイルが存在しない場合。
    """
    return tomllib.loads(path.read_text(encoding="utf-8"))


def load_pyproject_config(path: Path) -> dict[str, object] | None:
    """pyproject.toml の [tool.shimai] テーブルを返す。

    途中のキーが欠けている、またはテーブルでない場合は None。
    """
    node: object = load_toml_config(path)
    for key in _PYPROJECT_TABLE:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, dict) else None
