###############################################################################
#
# MIT License
#
# Copyright (c) 2026 Advanced Micro Devices, Inc.
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
###############################################################################
import pytest

from gpumetricscraper.gpumetrics import (
    SENTINEL_U16,
    SENTINEL_U32,
    SENTINEL_U64,
    UNAVAILABLE,
    format_counter,
    format_field,
    format_link_speed,
    sentinel_for_width,
)


def test_sentinels():
    assert SENTINEL_U16 == 0xFFFF
    assert SENTINEL_U32 == 0xFFFFFFFF
    assert SENTINEL_U64 == 0xFFFFFFFFFFFFFFFF
    assert sentinel_for_width(8) == 0xFF


@pytest.mark.parametrize("unit", [" C", " %", " W", " mV", " MHz", " RPM", ""])
def test_format_field_unavailable(unit):
    value = format_field(0xFFFF, 16, unit)
    assert not value.available
    assert value.value is None
    assert value.raw == 0xFFFF
    assert str(value) == UNAVAILABLE == "N/A"


@pytest.mark.parametrize(
    "raw, unit, exp_text",
    [
        (0, " C", "0 C"),
        (45, " C", "45 C"),
        (220, " W", "220 W"),
        (0xFFFE, " MHz", "65534 MHz"),
        (16, "", "16"),
    ],
)
def test_format_field(raw, unit, exp_text):
    value = format_field(raw, 16, unit)
    assert value.available
    assert value.value == raw
    assert value.text == exp_text


def test_format_field_width():
    assert format_field(0xFFFF, 32).available
    assert not format_field(0xFFFFFFFF, 32).available
    assert format_field(0xFF, 16, " C").text == "255 C"


def test_format_counter_has_no_sentinel():
    assert format_counter(0xFFFFFFFFFFFFFFFF).text == "18446744073709551615"
    assert format_counter(0xFFFFFFFF).available
    assert format_counter(12345, " ns").text == "12345 ns"
    assert format_counter(7, " (10ns)").text == "7 (10ns)"


@pytest.mark.parametrize(
    "raw, exp_value, exp_text",
    [
        (30, 3.0, "3.0 GT/s"),
        (160, 16.0, "16.0 GT/s"),
        (25, 2.5, "2.5 GT/s"),
        (0, 0.0, "0.0 GT/s"),
        (0xFFFF, 6553.5, "6553.5 GT/s"),
    ],
)
def test_format_link_speed(raw, exp_value, exp_text):
    value = format_link_speed(raw)
    assert value.available
    assert value.raw == raw
    assert value.value == exp_value
    assert str(value) == exp_text
