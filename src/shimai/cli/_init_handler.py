"""InitHandler -- init サブコマンドのビジネスロジック。

.shimai/config.toml をコメント付きテンプレートで生成する。
既存ファイルはスキップし、--force 指定時のみ上書きする。
"""

from __future__ import annotations

from pathlib import Path

from shimai.config._locator import CONFIG_FILE_NAME, PROJECT_DIR_NAME
from shimai.models._base import ShimaiBaseModel
from shimai.models.config import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_OUTPUT_FILE,
    DEFAULT_TRIGGER,
)


class InitError(Exception):
    """init コマンドのエラー。

    エラーメッセージは解決方法のヒントを含む。
    """


class InitResult(ShimaiBaseModel):
    """init コマンドの実行結果。

    Attributes:
        created: 新規作成されたファイルのパスタプル。
        skipped: 既存のためスキップされたファイルのパスタプル。
    """

    created: tuple[Path, ...] = ()
    skipped: tuple[Path, ...] = ()


_CONFIG_TEMPLATE: str = """\
# shimai configuration
# Uncomment and modify settings as needed.

# --- Shutdown Hook Settings ---

# Line that stops the process when typed on stdin (exact, case-sensitive)
# trigger = "{trigger}"

# When to listen: "always", "never", "interactive" (stdin is a TTY)
# or "debug" (a debugger is attached)
# activation = "always"

# --- Logging ---

# Log level: "debug", "info", "warning" or "error"
# log_level = "info"

# --- Demo Workload Settings ---

# [demo]
# output_file = "{output_file}"
# interval = {interval}
# iterations = 100
"""


def _generate_config_template() -> str:
    """コメント付き config.toml テンプレートを生成する。"""
    return _CONFIG_TEMPLATE.format(
        trigger=DEFAULT_TRIGGER,
        output_file=DEFAULT_OUTPUT_FILE,
        interval=DEFAULT_INTERVAL_SECONDS,
    )


def run_init(project_root: Path, *, force: bool = False) -> InitResult:
    """init コマンドのビジネスロジックを実行する。

    手順:
    1. .shimai/ ディレクトリ作成
    2. .shimai/config.toml 生成（コメント付きテンプレート）

    Args:
        project_root: プロジェクトルートディレクトリ。
        force: True の場合、既存ファイルを上書きする。

    Returns:
        InitResult: 作成・スキップされたファイル情報。

    Raises:
        InitError: ファイルシステム操作エラー。
    """
    shimai_dir = project_root / PROJECT_DIR_NAME
    config_path = shimai_dir / CONFIG_FILE_NAME

    created: list[Path] = []
    skipped: list[Path] = []

    try:
        shimai_dir.mkdir(parents=True, exist_ok=True)

        if config_path.exists() and not force:
            skipped.append(config_path)
        else:
            config_path.write_text(_generate_config_template(), encoding="utf-8")
            created.append(config_path)
    except OSError as e:
        raise InitError(
            f"Failed to initialize {PROJECT_DIR_NAME}/: {e}\n"
            "Check directory permissions and available disk space."
        ) from e

    return InitResult(created=tuple(created), skipped=tuple(skipped))
