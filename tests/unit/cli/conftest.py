"""CLI テスト共通フィクスチャ・ヘルパー。"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from rich.logging import RichHandler

PATCH_RUN_DEMO = "shimai.cli._app.run_demo"
PATCH_RESOLVE_CONFIG = "shimai.cli._app.resolve_config"
PATCH_RUN_INIT = "shimai.cli._app.run_init"
PATCH_USER_CONFIG_PATH = "shimai.config._resolver.get_user_config_path"


@pytest.fixture(autouse=True)
def _isolated_project(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """カレントディレクトリを tmp_path に移し、ユーザー設定を読まないようにする。"""
    monkeypatch.chdir(tmp_path)
    with patch(PATCH_USER_CONFIG_PATH, return_value=tmp_path / "no-user-config.toml"):
        yield tmp_path


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """configure_logging が追加したハンドラとレベルをテストごとに戻す。"""
    package_logger = logging.getLogger("shimai")
    level = package_logger.level
    yield
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.setLevel(level)


def write_project_config(root: Path, content: str) -> Path:
    """root/.shimai/config.toml を書き込む。"""
    config_dir = root / ".shimai"
    config_dir.mkdir(exist_ok=True)
    path = config_dir / "config.toml"
    path.write_text(content, encoding="utf-8")
    return path
