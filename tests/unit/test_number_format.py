"""Unit tests for six-decimal float formatting."""

import pytest
from dxm_converter.utils.number_format import format_float, format_vector


@pytest.mark.parametrize("value, expected", [
    (0.0, "0"),
    (2.0, "2"),
    (1.5, "1.5"),
    (-0.25, "-0.25"),
    (1 / 3, "0.333333"),
    (2 / 3, "0.666667"),
    (1234567.0, "1234567"),
    (1e20, "100000000000000000000"),
])
def test_format_float(value, expected):
    """Test trailing zeros and the decimal point are stripped."""
    assert format_float(value) == expected


def test_format_float_tiny_values_round_to_zero():
    """Test values below the sixth decimal collapse to zero, keeping the sign."""
    assert format_float(1e-7) == "0"
    assert format_float(-1e-7) == "-0"
    assert format_float(-0.0) == "-0"


def test_format_float_never_uses_exponent():
    """Test small and large magnitudes are written positionally."""
    assert "e" not in format_float(1.5e-5).lower()
    assert format_float(1.5e-5) == "0.000015"
    assert "e" not in format_float(3.0e15).lower()


def test_format_float_float32_noise_is_hidden():
    """Test a float32 round trip prints as the short decimal."""
    # 0.1 stored as float32
    assert format_float(0.10000000149011612) == "0.1"


def test_format_float_non_finite():
    """Test NaN and infinities have stable text forms."""
    assert format_float(float("nan")) == "NaN"
    assert format_float(float("inf")) == "Infinity"
    assert format_float(float("-inf")) == "-Infinity"


def test_format_vector():
    """Test components are joined with single spaces."""
    assert format_vector((1.0, -0.5, 0.0)) == "1 -0.5 0"
    assert format_vector([]) == ""
