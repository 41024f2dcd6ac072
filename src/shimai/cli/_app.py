"""CliApp -- Typer アプリケーション定義。

demo: シャットダウンフック付きでデモワークロードを実行する。
init: .shimai/config.toml テンプレートを生成する。
config: 解決済みの設定を JSON で表示する。

進捗・ログ・エラーは stderr、コマンド結果は stdout に出力する。
エラーメッセージには解決方法を含める。
"""

from __future__ import annotations

import importlib.metadata
import sys
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from shimai.cli._init_handler import InitError, run_init
from shimai.cli._logging import configure_logging
from shimai.config import resolve_config
from shimai.demo import WorkloadError, run_demo
from shimai.hook import ShutdownCoordinator
from shimai.models.config import ActivationPolicy, LogLevel, ShimaiConfig
from shimai.models.exit_code import ExitCode
from shimai.models.state import CoordinatorState

app = typer.Typer(
    name="shimai",
    help=(
        "Operator-triggered graceful shutdown for long-running processes.\n\n"
        "Type the trigger token on stdin to run cleanup and exit."
    ),
    add_completion=False,
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    """--version 指定時にバージョン番号を出力して終了する。"""
    if value:
        print(importlib.metadata.version("shimai"))
        raise typer.Exit()


def main() -> None:
    """CLI エントリポイント。pyproject.toml の [project.scripts] から呼び出される。"""
    app()


@app.callback()
def root_callback(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Operator-triggered graceful shutdown for long-running processes."""


def _resolve_or_exit(config_overrides: dict[str, object]) -> ShimaiConfig:
    """設定を解決する。失敗時はヒント付きメッセージを出して終了コード 2 で終了する。"""
    try:
        return resolve_config(cli_overrides=config_overrides)
    except (ValidationError, tomllib.TOMLDecodeError, TypeError) as e:
        print(
            f"Error: Invalid configuration: {e}\n"
            "Check .shimai/config.toml and [tool.shimai] in pyproject.toml "
            "for syntax errors or invalid values.",
            file=sys.stderr,
        )
        raise typer.Exit(code=ExitCode.INPUT_ERROR) from None
    except PermissionError as e:
        print(
            f"Error: Cannot read configuration file: {e}\n"
            "Check file permissions for .shimai/config.toml.",
            file=sys.stderr,
        )
        raise typer.Exit(code=ExitCode.INPUT_ERROR) from None


def _build_config_overrides(
    *,
    trigger: str | None,
    activation: ActivationPolicy | None,
    log_level: LogLevel | None,
    output: Path | None,
    interval: float | None,
    iterations: int | None,
) -> dict[str, object]:
    """CLI オプションから config_overrides 辞書を構築する。

    None 値は「未指定」として除外する。--output は demo.output_file に対応する。
    """
    demo: dict[str, object] = {
        "output_file": str(output) if output is not None else None,
        "interval": interval,
        "iterations": iterations,
    }
    raw: dict[str, object] = {
        "trigger": trigger,
        "activation": activation,
        "log_level": log_level,
        "demo": {k: v for k, v in demo.items() if v is not None},
    }
    return {k: v for k, v in raw.items() if v is not None and v != {}}


def _announce(config: ShimaiConfig) -> Callable[[ShutdownCoordinator], None]:
    """フック構築直後に操作案内を stderr に表示するコールバックを返す。"""

    def _on_armed(hook: ShutdownCoordinator) -> None:
        if hook.state == CoordinatorState.DISARMED:
            print(
                f"Shutdown hook disarmed (activation: {config.activation.value}). "
                "Stop the process by other means.",
                file=sys.stderr,
            )
        else:
            print(
                f"Type '{hook.trigger}' and press Enter to stop.",
                file=sys.stderr,
            )

    return _on_armed


@app.command()
def demo(
    trigger: Annotated[
        str | None, typer.Option(help="Line that stops the workload.")
    ] = None,
    activation: Annotated[
        ActivationPolicy | None,
        typer.Option(help="When to listen for the trigger on stdin."),
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", help="File the workload writes to.")
    ] = None,
    interval: Annotated[
        float | None,
        typer.Option(help="Seconds between writes (positive number).", min=0.001),
    ] = None,
    iterations: Annotated[
        int | None,
        typer.Option(help="Stop after this many writes (default: run forever).", min=1),
    ] = None,
    log_level: Annotated[
        LogLevel | None, typer.Option("--log-level", help="Log level.")
    ] = None,
) -> None:
    """Run a file-writing workload that can be stopped from stdin."""
    config_overrides = _build_config_overrides(
        trigger=trigger,
        activation=activation,
        log_level=log_level,
        output=output,
        interval=interval,
        iterations=iterations,
    )
    config = _resolve_or_exit(config_overrides)
    configure_logging(config.log_level)

    try:
        written = run_demo(config, on_armed=_announce(config))
    except WorkloadError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.EXECUTION_ERROR) from None

    print(f"Workload completed after {written} write(s).", file=sys.stderr)


@app.command()
def init(
    force: Annotated[
        bool, typer.Option("--force", help="Overwrite existing files with defaults.")
    ] = False,
) -> None:
    """Initialize .shimai/ directory with a default configuration file."""
    try:
        result = run_init(Path.cwd(), force=force)
    except InitError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise typer.Exit(code=ExitCode.INPUT_ERROR) from None

    for path in result.created:
        print(f"  Created: {path}", file=sys.stderr)
    for path in result.skipped:
        print(f"  Skipped (already exists): {path}", file=sys.stderr)

    if result.created:
        print(
            f"\nInitialized .shimai/ "
            f"({len(result.created)} created, {len(result.skipped)} skipped).",
            file=sys.stderr,
        )
    else:
        print(
            "\nAll files already exist. Use --force to overwrite.",
            file=sys.stderr,
        )


@app.command()
def config() -> None:
    """Show the resolved configuration as JSON."""
    resolved = _resolve_or_exit({})
    print(resolved.model_dump_json(indent=2))
