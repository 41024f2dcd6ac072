"""ShimaiBaseModel と coerce_choice のテスト。"""

import pytest
from pydantic import ValidationError

from shimai.models._base import ShimaiBaseModel, coerce_choice
from shimai.models.config import ActivationPolicy, LogLevel


class SampleModel(ShimaiBaseModel):
    """テスト用のサブクラス。"""

    name: str
    value: int


class TestShimaiBaseModel:
    """未知キーの拒否と不変性。"""

    def test_valid_fields_accepted(self) -> None:
        model = SampleModel(name="test", value=42)
        assert model.name == "test"
        assert model.value == 42

    def test_unknown_key_rejected(self) -> None:
        """設定ファイルの書き間違いは ValidationError になる。"""
        with pytest.raises(ValidationError, match="extra_forbidden"):
            SampleModel(name="test", value=42, unknown_field="x")  # type: ignore[call-arg]

    def test_assignment_rejected(self) -> None:
        model = SampleModel(name="test", value=42)
        with pytest.raises(ValidationError, match="frozen"):
            model.name = "changed"


class TestCoerceChoice:
    """coerce_choice の変換。"""

    @pytest.mark.parametrize("raw", ["ALWAYS", "Always", "always"])
    def test_case_insensitive(self, raw: str) -> None:
        assert coerce_choice(raw, ActivationPolicy) is ActivationPolicy.ALWAYS

    def test_member_passed_through(self) -> None:
        assert coerce_choice(LogLevel.DEBUG, LogLevel) is LogLevel.DEBUG

    def test_unknown_string_returned_as_is(self) -> None:
        assert coerce_choice("sometimes", ActivationPolicy) == "sometimes"

    def test_non_string_returned_as_is(self) -> None:
        assert coerce_choice(42, ActivationPolicy) == 42
