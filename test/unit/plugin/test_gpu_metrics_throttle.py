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
from pydantic import ValidationError

from gpumetricscraper.gpumetrics import (
    ALDEBARAN_THROTTLE_BITS,
    INDEP_THROTTLER_BITS,
    BitDescription,
    BitTable,
    ThrottleState,
    ThrottleVocabulary,
    decode_bitmask,
    get_asic_bit_table,
    ppt_domains,
)

ASIC = ThrottleVocabulary.ASIC_SPECIFIC
NORMALIZED = ThrottleVocabulary.ASIC_NORMALIZED


def test_tables():
    assert INDEP_THROTTLER_BITS.vocabulary == ThrottleVocabulary.ASIC_NORMALIZED
    assert INDEP_THROTTLER_BITS.width == 64
    assert INDEP_THROTTLER_BITS.sentinel == 0xFFFFFFFFFFFFFFFF
    assert len(INDEP_THROTTLER_BITS.entries) == 34
    assert INDEP_THROTTLER_BITS.entries[-1] == BitDescription(
        bit=57, label="FIT", description="reliability limit"
    )

    assert ALDEBARAN_THROTTLE_BITS.vocabulary == ThrottleVocabulary.ASIC_SPECIFIC
    assert ALDEBARAN_THROTTLE_BITS.width == 32
    assert ALDEBARAN_THROTTLE_BITS.sentinel is None
    assert [entry.bit for entry in ALDEBARAN_THROTTLE_BITS.entries] == [
        0, 1, 2, 3, 4, 6, 7, 11, 12, 13, 19
    ]


def test_same_bit_different_meaning():
    asic = decode_bitmask(1 << 2, ALDEBARAN_THROTTLE_BITS, ASIC)
    indep = decode_bitmask(1 << 2, INDEP_THROTTLER_BITS, NORMALIZED)
    assert asic.labels == ["TDC_GFX"]
    assert indep.labels == ["PPT2"]


def test_decode_zero_is_none():
    for table in (ALDEBARAN_THROTTLE_BITS, INDEP_THROTTLER_BITS):
        decoded = decode_bitmask(0, table, table.vocabulary)
        assert decoded.state == ThrottleState.NONE
        assert decoded.reasons == ()
        assert decoded.summary == "none"


def test_decode_sentinel_is_unavailable():
    decoded = decode_bitmask(0xFFFFFFFFFFFFFFFF, INDEP_THROTTLER_BITS, NORMALIZED)
    assert decoded.state == ThrottleState.UNAVAILABLE
    assert decoded.reasons == ()
    assert decoded.summary == "unavailable"
    assert decoded.hex == "0xffffffffffffffff"


def test_decode_sentinel_skips_table():
    table = BitTable(
        name="test",
        vocabulary=NORMALIZED,
        width=64,
        sentinel=0xFFFFFFFFFFFFFFFF,
        entries=(BitDescription(bit=63, label="TOP", description="top bit"),),
    )
    assert decode_bitmask(0xFFFFFFFFFFFFFFFF, table, NORMALIZED).state == ThrottleState.UNAVAILABLE
    assert decode_bitmask(1 << 63, table, NORMALIZED).labels == ["TOP"]


def test_64bit_table_without_sentinel_is_unavailable_at_all_ones():
    table = BitTable(
        name="test",
        vocabulary=NORMALIZED,
        width=64,
        entries=(BitDescription(bit=63, label="TOP", description="top bit"),),
    )
    assert table.sentinel == 0xFFFFFFFFFFFFFFFF

    decoded = decode_bitmask(0xFFFFFFFFFFFFFFFF, table, NORMALIZED)
    assert decoded.state == ThrottleState.UNAVAILABLE
    assert decoded.reasons == ()
    assert decode_bitmask(1 << 63, table, NORMALIZED).labels == ["TOP"]


def test_decode_32bit_all_ones_is_not_unavailable():
    decoded = decode_bitmask(0xFFFFFFFF, ALDEBARAN_THROTTLE_BITS, ASIC)
    assert decoded.state == ThrottleState.REASONS
    assert len(decoded.reasons) == len(ALDEBARAN_THROTTLE_BITS.entries)
    assert decoded.hex == "0xffffffff"


def test_decode_single_bit():
    decoded = decode_bitmask(1 << 19, ALDEBARAN_THROTTLE_BITS, ASIC)
    assert decoded.state == ThrottleState.REASONS
    assert decoded.reasons == (
        BitDescription(bit=19, label="APCC", description="reliability limit"),
    )
    assert decoded.summary == "APCC (reliability limit)"


def test_decode_ignores_unknown_bits():
    decoded = decode_bitmask((1 << 5) | (1 << 31), ALDEBARAN_THROTTLE_BITS, ASIC)
    assert decoded.state == ThrottleState.NONE
    assert decoded.raw == (1 << 5) | (1 << 31)

    decoded = decode_bitmask((1 << 5) | (1 << 6), ALDEBARAN_THROTTLE_BITS, ASIC)
    assert decoded.labels == ["TEMP_GPU"]

    decoded = decode_bitmask((1 << 60) | (1 << 35), INDEP_THROTTLER_BITS, NORMALIZED)
    assert decoded.labels == ["TEMP_EDGE"]


def test_decode_table_order():
    table = BitTable(
        name="test",
        vocabulary=ASIC,
        width=32,
        entries=(
            BitDescription(bit=9, label="HIGH", description="listed first"),
            BitDescription(bit=1, label="LOW", description="listed second"),
        ),
    )
    decoded = decode_bitmask((1 << 1) | (1 << 9), table, ASIC)
    assert decoded.labels == ["HIGH", "LOW"]
    assert decoded.summary == "HIGH (listed first), LOW (listed second)"

    decoded = decode_bitmask((1 << 57) | (1 << 32) | 1, INDEP_THROTTLER_BITS, NORMALIZED)
    assert decoded.labels == ["PPT0", "TEMP_GPU", "FIT"]


def test_decode_vocabulary_mismatch():
    with pytest.raises(ValueError, match="aldebaran decodes ASIC_SPECIFIC"):
        decode_bitmask(1, ALDEBARAN_THROTTLE_BITS, NORMALIZED)
    with pytest.raises(ValueError):
        decode_bitmask(1, INDEP_THROTTLER_BITS, ASIC)

    decoded = decode_bitmask(1, INDEP_THROTTLER_BITS, NORMALIZED)
    assert decoded.vocabulary == NORMALIZED


def test_decode_requires_vocabulary():
    with pytest.raises(TypeError):
        decode_bitmask(1, INDEP_THROTTLER_BITS)


def test_bit_table_validation():
    with pytest.raises(ValidationError):
        BitTable(
            name="bad",
            vocabulary=ThrottleVocabulary.ASIC_SPECIFIC,
            width=32,
            entries=(BitDescription(bit=32, label="X", description="too wide"),),
        )


def test_asic_tables():
    assert get_asic_bit_table() is ALDEBARAN_THROTTLE_BITS
    assert get_asic_bit_table("Aldebaran") is ALDEBARAN_THROTTLE_BITS
    with pytest.raises(ValueError, match="No throttle bit table"):
        get_asic_bit_table("navi31")


def test_ppt_domains():
    assert [str(entry) for entry in ppt_domains(ALDEBARAN_THROTTLE_BITS)] == [
        "PPT0 (pkg power (avg/filtered))",
        "PPT1 (pkg power (raw/spike))",
    ]
    assert [entry.label for entry in ppt_domains(INDEP_THROTTLER_BITS)] == [
        "PPT0",
        "PPT1",
        "PPT2",
        "PPT3",
    ]

    many_ppt = BitTable(
        name="test",
        vocabulary=ThrottleVocabulary.ASIC_SPECIFIC,
        width=32,
        entries=tuple(
            BitDescription(bit=bit, label=f"PPT{bit}", description="power") for bit in range(6)
        ),
    )
    assert len(ppt_domains(many_ppt)) == 4
