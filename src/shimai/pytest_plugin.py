"""pytest 連携 -- 長時間テストを標準入力から停止する。

``-p shimai.pytest_plugin`` で有効化する。リスナーが標準入力を読むには
キャプチャを無効化（``-s``）する必要がある。キャプチャ有効時は標準入力の
読み取りが失敗し、リスナーは何もせずに停止する。

リスナーとコーディネーターはセッションに一つだけ作り、各テストの
クリーンアップは CleanupRegistry に登録する。トリガー受信時は登録中の
全クリーンアップを実行してから終了する。テスト終了時（正常終了経路）には
そのテストのクリーンアップを実行して登録を解除する。
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TextIO

import pytest

from shimai.config import resolve_config
from shimai.hook import (
    CleanupRegistry,
    RunOnce,
    ShutdownCoordinator,
    install_shutdown_hook,
    terminate_process,
)
from shimai.models.config import ActivationPolicy

RegisterHook = Callable[[Callable[[], object]], RunOnce]


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("shimai", "stop long-running tests from stdin")
    group.addoption(
        "--shimai-trigger",
        default=None,
        help="Line that stops the test run (default: from shimai configuration).",
    )
    group.addoption(
        "--shimai-activation",
        default=None,
        choices=[policy.value for policy in ActivationPolicy],
        help="When to listen for the trigger on stdin.",
    )


@pytest.fixture(scope="session")
def shimai_stream() -> TextIO | None:
    """制御入力ストリーム。None は sys.stdin。conftest.py で上書きできる。"""
    return None


@pytest.fixture(scope="session")
def shimai_terminate() -> Callable[[int], object]:
    """プロセス終了プリミティブ。conftest.py で上書きできる。"""
    return terminate_process


@pytest.fixture(scope="session")
def shimai_registry() -> CleanupRegistry:
    """セッション中に登録されたクリーンアップの集合。"""
    return CleanupRegistry()


@pytest.fixture(scope="session")
def shimai_coordinator(
    request: pytest.FixtureRequest,
    shimai_registry: CleanupRegistry,
    shimai_stream: TextIO | None,
    shimai_terminate: Callable[[int], object],
) -> Iterator[ShutdownCoordinator]:
    """セッション唯一のシャットダウンフック。最初の shutdown_hook 使用時に起動する。"""
    config = resolve_config(
        start_dir=request.config.rootpath,
        cli_overrides={
            "trigger": request.config.getoption("shimai_trigger"),
            "activation": request.config.getoption("shimai_activation"),
        },
    )
    hook = install_shutdown_hook(
        shimai_registry,
        config=config,
        stream=shimai_stream,
        terminate=shimai_terminate,
    )
    yield hook
    hook.run_cleanup()


@pytest.fixture
def shutdown_hook(
    shimai_registry: CleanupRegistry,
    shimai_coordinator: ShutdownCoordinator,
) -> Iterator[RegisterHook]:
    """クリーンアップをセッションのシャットダウンフックに登録するファクトリ。

    戻り値の RunOnce を呼べばテスト中に正常終了経路として実行できる。

    使用例::

        def test_forever(shutdown_hook):
            handle = open("some.file", "w")
            shutdown_hook(handle.close)
            while True:
                ...
    """
    entries: list[RunOnce] = []

    def _register(cleanup: Callable[[], object]) -> RunOnce:
        entry = shimai_registry.register(cleanup)
        entries.append(entry)
        return entry

    yield _register

    for entry in reversed(entries):
        try:
            entry()
        finally:
            shimai_registry.unregister(entry)
