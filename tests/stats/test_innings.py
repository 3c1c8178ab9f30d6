import logging

import pytest

from split_macros.stats.innings import add_innings, innings_to_outs, outs_to_innings, true_innings


class TestInningsToOuts:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [("5.2", 17), ("6", 18), ("6.0", 18), ("0.1", 1), (7, 21), (None, 0), ("", 0)],
    )
    def test_converts_to_total_outs(self, value: str | int | None, expected: int) -> None:
        assert innings_to_outs(value) == expected

    def test_float_input(self) -> None:
        assert innings_to_outs(5.2) == 17

    def test_invalid_outs_digit_counts_whole_innings(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="split_macros.stats.innings"):
            assert innings_to_outs("5.4") == 15
        assert "Invalid outs" in caplog.text

    def test_unparseable_counts_zero(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="split_macros.stats.innings"):
            assert innings_to_outs("six") == 0
        assert "Unparseable" in caplog.text

    def test_negative_counts_zero(self) -> None:
        assert innings_to_outs("-1.0") == 0


class TestOutsToInnings:
    def test_formats_partial_inning(self) -> None:
        assert outs_to_innings(17) == "5.2"

    def test_formats_whole_innings(self) -> None:
        assert outs_to_innings(27) == "9.0"

    def test_zero(self) -> None:
        assert outs_to_innings(0) == "0.0"


class TestAddInnings:
    def test_partial_innings_carry(self) -> None:
        assert add_innings("5.2", "3.1") == "9.0"

    def test_not_decimal_addition(self) -> None:
        assert add_innings("0.2", "0.2") == "1.1"

    def test_single_value(self) -> None:
        assert add_innings("4.1") == "4.1"


class TestTrueInnings:
    def test_thirds(self) -> None:
        assert true_innings(17) == pytest.approx(5 + 2 / 3)
