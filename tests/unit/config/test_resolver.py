"""設定リゾルバーのテスト。

merge_config_layers: 空レイヤー, 上書き, None スキップ, demo マージ
filter_cli_overrides: None 除外, demo セクション内の None 除外
resolve_config: 5層統合, デフォルト値, 優先順位, エラー伝播
"""

from __future__ import annotations

import contextlib
import tomllib
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from shimai.config._resolver import (
    filter_cli_overrides,
    merge_config_layers,
    resolve_config,
)
from shimai.models.config import ActivationPolicy, ShimaiConfig

_PROJECT_DIR_NAME = ".shimai"


# ---------------------------------------------------------------------------
# merge_config_layers
# ---------------------------------------------------------------------------


class TestMergeConfigLayers:
    """merge_config_layers の項目単位マージ。"""

    def test_no_layers_returns_empty_dict(self) -> None:
        assert merge_config_layers() == {}

    def test_none_layers_skipped(self) -> None:
        assert merge_config_layers(None, {"trigger": "x"}, None) == {"trigger": "x"}

    def test_later_layer_wins(self) -> None:
        merged = merge_config_layers({"trigger": "a"}, {"trigger": "b"})
        assert merged == {"trigger": "b"}

    def test_demo_section_merged_per_field(self) -> None:
        """demo セクションはフィールド単位でマージされる。"""
        merged = merge_config_layers(
            {"demo": {"interval": 1.0, "output_file": "a.txt"}},
            {"demo": {"interval": 2.0}},
        )
        assert merged == {"demo": {"interval": 2.0, "output_file": "a.txt"}}

    def test_demo_section_not_table_raises_type_error(self) -> None:
        with pytest.raises(TypeError, match="'demo' must be a table"):
            merge_config_layers({"demo": "fast"})

    def test_input_layers_not_mutated(self) -> None:
        base: dict[str, object] = {"demo": {"interval": 1.0}}
        merge_config_layers(base, {"demo": {"iterations": 3}})
        assert base == {"demo": {"interval": 1.0}}


# ---------------------------------------------------------------------------
# filter_cli_overrides
# ---------------------------------------------------------------------------


class TestFilterCliOverrides:
    """filter_cli_overrides の None 除外。"""

    def test_none_values_removed(self) -> None:
        assert filter_cli_overrides({"trigger": None, "activation": "never"}) == {
            "activation": "never"
        }

    def test_empty_dict(self) -> None:
        assert filter_cli_overrides({}) == {}

    def test_demo_none_values_removed(self) -> None:
        result = filter_cli_overrides({"demo": {"interval": None, "iterations": 2}})
        assert result == {"demo": {"iterations": 2}}

    def test_demo_all_none_dropped(self) -> None:
        assert filter_cli_overrides({"demo": {"interval": None}}) == {}


# ---------------------------------------------------------------------------
# resolve_config
# ---------------------------------------------------------------------------


def _write_toml(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def _create_config_toml(base: Path, content: str) -> Path:
    """.shimai/config.toml を作成しパスを返す。"""
    return _write_toml(base / _PROJECT_DIR_NAME / "config.toml", content)


def _nonexistent_user_config(
    tmp_path: Path,
) -> contextlib.AbstractContextManager[object]:
    """get_user_config_path を存在しないパスに差し替える patch を返す。"""
    return patch(
        "shimai.config._resolver.get_user_config_path",
        return_value=tmp_path / "nonexistent" / "config.toml",
    )


class TestResolveConfigNoFiles:
    """設定ファイルなし → デフォルト値。"""

    def test_returns_default_config(self, tmp_path: Path) -> None:
        with _nonexistent_user_config(tmp_path):
            config = resolve_config(start_dir=tmp_path)
        assert config == ShimaiConfig()

    def test_project_dir_without_config_toml(self, tmp_path: Path) -> None:
        """.shimai/ はあるが config.toml がない場合、該当レイヤーをスキップ。"""
        (tmp_path / _PROJECT_DIR_NAME).mkdir()
        with _nonexistent_user_config(tmp_path):
            config = resolve_config(start_dir=tmp_path)
        assert config == ShimaiConfig()


class TestResolveConfigSingleSource:
    """単一ソースの反映。"""

    def test_config_toml_values_applied(self, tmp_path: Path) -> None:
        _create_config_toml(tmp_path, 'trigger = "stop"\n')
        with _nonexistent_user_config(tmp_path):
            config = resolve_config(start_dir=tmp_path)
        assert config.trigger == "stop"
        assert config.activation == ActivationPolicy.ALWAYS

    def test_pyproject_values_applied(self, tmp_path: Path) -> None:
        _write_toml(tmp_path / "pyproject.toml", '[tool.shimai]\nactivation = "never"\n')
        with _nonexistent_user_config(tmp_path):
            config = resolve_config(start_dir=tmp_path)
        assert config.activation == ActivationPolicy.NEVER

    def test_user_global_values_applied(self, tmp_path: Path) -> None:
        user_config = _write_toml(
            tmp_path / "home" / ".config" / "shimai" / "config.toml",
            "[demo]\niterations = 7\n",
        )
        with patch(
            "shimai.config._resolver.get_user_config_path", return_value=user_config
        ):
            config = resolve_config(start_dir=tmp_path)
        assert config.demo.iterations == 7


class TestResolveConfigPriority:
    """CLI > config.toml > pyproject.toml > user global > default。"""

    def test_five_layer_priority(self, tmp_path: Path) -> None:
        user_config = _write_toml(
            tmp_path / "home" / ".config" / "shimai" / "config.toml",
            'trigger = "user"\nlog_level = "warning"\n[demo]\ninterval = 9.0\n',
        )
        _write_toml(
            tmp_path / "pyproject.toml",
            '[tool.shimai]\ntrigger = "pyproject"\nactivation = "never"\n',
        )
        _create_config_toml(
            tmp_path, 'trigger = "project"\n[demo]\noutput_file = "p.txt"\n'
        )
        with patch(
            "shimai.config._resolver.get_user_config_path", return_value=user_config
        ):
            config = resolve_config(
                start_dir=tmp_path,
                cli_overrides={"trigger": "cli", "activation": None},
            )
        assert config.trigger == "cli"
        assert config.activation == ActivationPolicy.NEVER
        assert config.log_level == "warning"
        # demo はフィールド単位でマージされる
        assert config.demo.interval == 9.0
        assert config.demo.output_file == "p.txt"


class TestResolveConfigErrors:
    """エラーは呼び出し元に伝播する。"""

    def test_invalid_value_raises_validation_error(self, tmp_path: Path) -> None:
        _create_config_toml(tmp_path, 'trigger = ""\n')
        with _nonexistent_user_config(tmp_path), pytest.raises(ValidationError):
            resolve_config(start_dir=tmp_path)

    def test_syntax_error_propagates(self, tmp_path: Path) -> None:
        _create_config_toml(tmp_path, "trigger = = \n")
        with (
            _nonexistent_user_config(tmp_path),
            pytest.raises(tomllib.TOMLDecodeError),
        ):
            resolve_config(start_dir=tmp_path)

    def test_uses_cwd_when_start_dir_none(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _create_config_toml(tmp_path, 'trigger = "cwd"\n')
        monkeypatch.chdir(tmp_path)
        with _nonexistent_user_config(tmp_path):
            config = resolve_config()
        assert config.trigger == "cwd"
