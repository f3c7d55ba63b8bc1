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
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

UNAVAILABLE = "N/A"


def sentinel_for_width(bits: int) -> int:
    """All bits set at the given width, the value firmware uses for "not reported"

    Args:
        bits (int): field width in bits

    Returns:
        int: sentinel value
    """
    return (1 << bits) - 1


SENTINEL_U16 = sentinel_for_width(16)
SENTINEL_U32 = sentinel_for_width(32)
SENTINEL_U64 = sentinel_for_width(64)


class FieldValue(BaseModel):
    """A decoded field, either a value with its unit or unavailable"""

    model_config = ConfigDict(frozen=True)

    raw: int
    value: Optional[Union[int, float]] = None
    unit: str = ""

    @property
    def available(self) -> bool:
        return self.value is not None

    @property
    def text(self) -> str:
        if self.value is None:
            return UNAVAILABLE
        if isinstance(self.value, float):
            return f"{self.value:.1f}{self.unit}"
        return f"{self.value}{self.unit}"

    def __str__(self) -> str:
        return self.text


def format_field(raw: int, width: int = 16, unit: str = "") -> FieldValue:
    """Format a sentinel aware scalar

    Args:
        raw (int): raw unsigned value
        width (int, optional): field width in bits. Defaults to 16.
        unit (str, optional): unit suffix, including any leading space. Defaults to "".

    Returns:
        FieldValue: unavailable if raw is all ones at the given width, otherwise the value
    """
    if raw == sentinel_for_width(width):
        return FieldValue(raw=raw, unit=unit)
    return FieldValue(raw=raw, value=raw, unit=unit)


def format_counter(raw: int, unit: str = "") -> FieldValue:
    """Format an accumulator or counter, these have no sentinel"""
    return FieldValue(raw=raw, value=raw, unit=unit)


def format_link_speed(raw: int) -> FieldValue:
    """Link speed is reported in tenths of GT/s and is never treated as unavailable"""
    return FieldValue(raw=raw, value=raw / 10, unit=" GT/s")
