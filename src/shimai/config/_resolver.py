"""設定リゾルバー。

5層の設定ソースを階層解決し、項目単位でマージする。
CLI オプションの None 値は未指定として除外する。
"""

from __future__ import annotations

from pathlib import Path

from shimai.config._loader import load_pyproject_config, load_toml_config
from shimai.config._locator import (
    find_config_file,
    find_pyproject_toml,
    get_user_config_path,
)
from shimai.models.config import ShimaiConfig

_DEMO_KEY: str = "demo"


def _merge_section(
    key: str,
    base: dict[str, object] | None,
    override: object,
) -> dict[str, object]:
    """テーブルセクションをフィールド単位でマージする。

    Raises:
        TypeError: override が dict でない場合。
    """
    if not isinstance(override, dict):
        msg = f"'{key}' must be a table, got {type(override).__name__}"
        raise TypeError(msg)
    merged: dict[str, object] = dict(base) if base is not None else {}
    merged.update(override)
    return merged


def merge_config_layers(
    *layers: dict[str, object] | None,
) -> dict[str, object]:
    """複数の設定レイヤーを項目単位でマージする。

    後のレイヤーが先のレイヤーを上書きする。
    demo セクションはフィールド単位でマージする。
    None のレイヤーはスキップされる。

    Args:
        layers: マージ対象の設定辞書。低優先度から高優先度の順。

    Returns:
        マージ済みの設定辞書。

    Raises:
        TypeError: demo セクションがテーブルでない場合。
    """
    result: dict[str, object] = {}
    for layer in layers:
        if layer is None:
            continue
        for key, value in layer.items():
            if key == _DEMO_KEY:
                result[_DEMO_KEY] = _merge_section(
                    _DEMO_KEY,
                    result.get(_DEMO_KEY),  # type: ignore[arg-type]
                    value,
                )
            else:
                result[key] = value
    return result


def filter_cli_overrides(cli_options: dict[str, object]) -> dict[str, object]:
    """CLI オプション辞書から None 値を除外する。

    ネストした demo セクション内の None 値も除外し、空になったセクションは削除する。
    """
    filtered: dict[str, object] = {}
    for key, value in cli_options.items():
        if value is None:
            continue
        if key == _DEMO_KEY and isinstance(value, dict):
            section = {k: v for k, v in value.items() if v is not None}
            if section:
                filtered[key] = section
            continue
        filtered[key] = value
    return filtered


def resolve_config(
    start_dir: Path | None = None,
    cli_overrides: dict[str, object] | None = None,
) -> ShimaiConfig:
    """5層の設定ソースを解決し ShimaiConfig を構築する。

    優先順位: CLI > .shimai/config.toml > pyproject.toml [tool.shimai]
    > ~/.config/shimai/config.toml > デフォルト値

    設定ファイルが存在しない場合は該当レイヤーをスキップする。

    Args:
        start_dir: 探索開始ディレクトリ。None の場合はカレントディレクトリ。
        cli_overrides: CLI オプションの辞書。None 値は未指定扱い。

    Returns:
        解決済みの ShimaiConfig インスタンス。

    Raises:
        pydantic.ValidationError: マージ後の設定が不正な場合。
        tomllib.TOMLDecodeError: 設定ファイルの TOML 構文が不正な場合。
        PermissionError: 設定ファイルの読み取り権限がない場合。
        TypeError: demo セクションがテーブルでない場合。
    """
    effective_start = start_dir if start_dir is not None else Path.cwd()

    # Layer 1 (最低優先): ユーザーグローバル設定
    user_layer: dict[str, object] | None = None
    try:
        user_layer = load_toml_config(get_user_config_path())
    except FileNotFoundError:
        pass

    # Layer 2: pyproject.toml [tool.shimai]
    pyproject_layer: dict[str, object] | None = None
    pyproject_path = find_pyproject_toml(effective_start)
    if pyproject_path is not None:
        pyproject_layer = load_pyproject_config(pyproject_path)

    # Layer 3: .shimai/config.toml
    config_layer: dict[str, object] | None = None
    config_path = find_config_file(effective_start)
    if config_path is not None:
        # .shimai/ はあるが config.toml が未作成のケース
        try:
            config_layer = load_toml_config(config_path)
        except FileNotFoundError:
            pass

    # Layer 4 (最高優先): CLI overrides
    cli_layer: dict[str, object] | None = None
    if cli_overrides is not None:
        cli_layer = filter_cli_overrides(cli_overrides)

    merged = merge_config_layers(user_layer, pyproject_layer, config_layer, cli_layer)

    # Layer 5: デフォルト値 -- ShimaiConfig のフィールドデフォルトが適用される
    return ShimaiConfig(**merged)  # type: ignore[arg-type]
