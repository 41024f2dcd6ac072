"""プロジェクト探索。

.shimai/ ディレクトリと pyproject.toml をカレント→親方向に探索する。
ユーザーグローバル設定のパスは ~/.config/shimai/config.toml に固定。
"""

from __future__ import annotations

import stat as stat_module
from collections.abc import Callable
from pathlib import Path

PROJECT_DIR_NAME: str = ".shimai"
CONFIG_FILE_NAME: str = "config.toml"
_PYPROJECT_FILE_NAME: str = "pyproject.toml"


def _find_ancestor(
    start: Path,
    target_name: str,
    check: Callable[[int], bool],
) -> Path | None:
    """start から親方向に target_name を探索し、最初にマッチした候補パスを返す。

    Args:
        start: 探索開始ディレクトリ。
        target_name: 探索対象の名前（例: ".shimai", "pyproject.toml"）。
        check: stat.st_mode に適用する種別チェック関数（例: stat.S_ISDIR）。

    Returns:
        最初にマッチした候補パス（start/…/target_name）。見つからなければ None。

    Raises:
        OSError: 探索パス上のアクセス権限エラー等。
    """
    current = start.resolve()
    while True:
        candidate = current / target_name
        try:
            st = candidate.stat()
        except FileNotFoundError:
            pass
        else:
            if check(st.st_mode):
                return candidate
        parent = current.parent
        if parent == current:
            return None
        current = parent


def find_project_root(start: Path) -> Path | None:
    """start ディレクトリから親方向に .shimai/ を探索しプロジェクトルートを返す。

    Args:
        start: 探索開始ディレクトリ。

    Returns:
        .shimai/ ディレクトリを含むパス。見つからなければ None。
    """
    result = _find_ancestor(start, PROJECT_DIR_NAME, stat_module.S_ISDIR)
    return result.parent if result is not None else None


def find_config_file(start: Path) -> Path | None:
    """.shimai/config.toml のパスを構築する（存在チェックは行わない）。

    Returns:
        config.toml のフルパス。プロジェクトルートが見つからなければ None。
    """
    project_root = find_project_root(start)
    if project_root is None:
        return None
    return project_root / PROJECT_DIR_NAME / CONFIG_FILE_NAME


def find_pyproject_toml(start: Path) -> Path | None:
    """start ディレクトリから親方向に pyproject.toml を探索する。"""
    return _find_ancestor(start, _PYPROJECT_FILE_NAME, stat_module.S_ISREG)


def get_user_config_path() -> Path:
    """ユーザーグローバル設定ファイルのパスを返す。

    Raises:
        RuntimeError: ホームディレクトリを特定できない場合。
    """
    return Path.home() / ".config" / "shimai" / CONFIG_FILE_NAME
