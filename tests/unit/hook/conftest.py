"""フックテスト共通フィクスチャ・ヘルパー。"""

from __future__ import annotations

import io
import os
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TextIO

import pytest

JOIN_TIMEOUT_SECONDS = 5.0


@dataclass
class Pipe:
    """os.pipe() 上のテキストストリーム組。reader はリスナー、writer はテストが使う。"""

    reader: TextIO
    writer: TextIO

    def send(self, *lines: str) -> None:
        """行を書き込んでフラッシュする。"""
        for line in lines:
            self.writer.write(f"{line}\n")
        self.writer.flush()

    def close_writer(self) -> None:
        """書き込み側を閉じて EOF を送る。"""
        if not self.writer.closed:
            self.writer.close()


@pytest.fixture
def pipe() -> Iterator[Pipe]:
    """ブロッキング読み取り可能な制御ストリーム。

    テストはリスナーを join してから終了すること。
    """
    read_fd, write_fd = os.pipe()
    p = Pipe(
        reader=os.fdopen(read_fd, "r", encoding="utf-8"),
        writer=os.fdopen(write_fd, "w", encoding="utf-8"),
    )
    yield p
    p.close_writer()
    p.reader.close()


class CountingStream(io.StringIO):
    """readline() の呼び出し回数を数える StringIO。"""

    def __init__(self, initial_value: str = "") -> None:
        super().__init__(initial_value)
        self.lines_read = 0

    def readline(self, size: int | None = -1, /) -> str:  # type: ignore[override]
        line = super().readline(-1 if size is None else size)
        if line:
            self.lines_read += 1
        return line


class FailingStream(io.StringIO):
    """readline() で指定の例外を送出するストリーム。"""

    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    def readline(self, size: int | None = -1, /) -> str:  # type: ignore[override]
        raise self.error
