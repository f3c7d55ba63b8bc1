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
from enum import auto, unique
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from gpumetricscraper.utils import AutoNameStrEnum

from .fields import SENTINEL_U64


@unique
class ThrottleVocabulary(AutoNameStrEnum):
    """Which bit vocabulary a throttle mask is written in
    - ASIC_SPECIFIC
        raw SMU firmware bits of throttle_status, only valid for one ASIC family
    - ASIC_NORMALIZED
        common SMU_THROTTLER_* bits of indep_throttle_status
    """

    ASIC_SPECIFIC = auto()
    ASIC_NORMALIZED = auto()


@unique
class ThrottleState(AutoNameStrEnum):
    """Outcome of decoding a throttle mask"""

    REASONS = auto()
    NONE = auto()
    UNAVAILABLE = auto()


class BitDescription(BaseModel):
    """A single throttle bit"""

    model_config = ConfigDict(frozen=True)

    bit: int
    label: str
    description: str

    def __str__(self) -> str:
        return f"{self.label} ({self.description})"


class BitTable(BaseModel):
    """Ordered bit descriptions for one throttle vocabulary.

    Entry order is the order in which matched reasons are reported.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    vocabulary: ThrottleVocabulary
    width: int
    sentinel: Optional[int] = None
    entries: tuple[BitDescription, ...]

    @model_validator(mode="before")
    @classmethod
    def default_sentinel(cls, data):
        """64 bit masks always reserve all ones for "unavailable", even if a bit table claims
        bit 63
        """
        if isinstance(data, dict) and data.get("width") == 64 and data.get("sentinel") is None:
            data = {**data, "sentinel": SENTINEL_U64}
        return data

    @model_validator(mode="after")
    def validate_bits(self) -> "BitTable":
        for entry in self.entries:
            if not 0 <= entry.bit < self.width:
                raise ValueError(
                    f"bit {entry.bit} ({entry.label}) does not fit in a {self.width} bit mask"
                )
        return self


def _bits(*entries: tuple[int, str, str]) -> tuple[BitDescription, ...]:
    return tuple(
        BitDescription(bit=bit, label=label, description=desc) for bit, label, desc in entries
    )


# SMU_THROTTLER_* positions from amdgpu_smu.h, stable across ASICs
INDEP_THROTTLER_BITS = BitTable(
    name="indep_throttle_status",
    vocabulary=ThrottleVocabulary.ASIC_NORMALIZED,
    width=64,
    sentinel=SENTINEL_U64,
    entries=_bits(
        (0, "PPT0", "pkg power (avg/filtered)"),
        (1, "PPT1", "pkg power (raw/spike)"),
        (2, "PPT2", "power limit"),
        (3, "PPT3", "power limit"),
        (4, "SPL", "socket power limit"),
        (5, "FPPT", "fast power limit"),
        (6, "SPPT", "sustained power limit"),
        (7, "SPPT_APU", "APU power limit"),
        (16, "TDC_GFX", "current limit (gfx)"),
        (17, "TDC_SOC", "current limit (soc)"),
        (18, "TDC_MEM", "current limit (mem)"),
        (19, "TDC_VDD", "current limit (vdd)"),
        (20, "TDC_CVIP", "current limit (cvip)"),
        (21, "EDC_CPU", "current limit (cpu)"),
        (22, "EDC_GFX", "current limit (gfx)"),
        (23, "APCC", "reliability limit"),
        (32, "TEMP_GPU", "temperature (gpu)"),
        (33, "TEMP_CORE", "temperature (core)"),
        (34, "TEMP_MEM", "temperature (mem)"),
        (35, "TEMP_EDGE", "temperature (edge)"),
        (36, "TEMP_HOTSPOT", "temperature (hotspot)"),
        (37, "TEMP_SOC", "temperature (soc)"),
        (38, "TEMP_VR_GFX", "temperature (vr gfx)"),
        (39, "TEMP_VR_SOC", "temperature (vr soc)"),
        (40, "TEMP_VR_MEM0", "temperature (vr mem0)"),
        (41, "TEMP_VR_MEM1", "temperature (vr mem1)"),
        (42, "TEMP_LIQUID0", "temperature (liquid0)"),
        (43, "TEMP_LIQUID1", "temperature (liquid1)"),
        (44, "VRHOT0", "vr hot"),
        (45, "VRHOT1", "vr hot"),
        (46, "PROCHOT_CPU", "cpu prochot"),
        (47, "PROCHOT_GFX", "gpu prochot"),
        (56, "PPM", "power management"),
        (57, "FIT", "reliability limit"),
    ),
)

# Aldebaran (MI200, SMU13 firmware 68.xx) raw throttle_status bits
ALDEBARAN_THROTTLE_BITS = BitTable(
    name="aldebaran",
    vocabulary=ThrottleVocabulary.ASIC_SPECIFIC,
    width=32,
    entries=_bits(
        (0, "PPT0", "pkg power (avg/filtered)"),
        (1, "PPT1", "pkg power (raw/spike)"),
        (2, "TDC_GFX", "current limit (gfx)"),
        (3, "TDC_SOC", "current limit (soc)"),
        (4, "TDC_HBM", "current limit (hbm)"),
        (6, "TEMP_GPU", "temperature (gpu)"),
        (7, "TEMP_MEM", "temperature (mem)"),
        (11, "TEMP_VR_GFX", "temperature (vr gfx)"),
        (12, "TEMP_VR_SOC", "temperature (vr soc)"),
        (13, "TEMP_VR_MEM", "temperature (vr mem)"),
        (19, "APCC", "reliability limit"),
    ),
)

ASIC_THROTTLE_TABLES: dict[str, BitTable] = {
    "aldebaran": ALDEBARAN_THROTTLE_BITS,
}

DEFAULT_ASIC = "aldebaran"

MAX_PPT_DOMAINS = 4


def get_asic_bit_table(asic: str = DEFAULT_ASIC) -> BitTable:
    """Look up the throttle_status table for an ASIC family

    Args:
        asic (str, optional): ASIC id. Defaults to DEFAULT_ASIC.

    Raises:
        ValueError: if there is no table for the ASIC

    Returns:
        BitTable: ASIC specific bit table
    """
    table = ASIC_THROTTLE_TABLES.get(asic.strip().lower())
    if table is None:
        raise ValueError(
            f"No throttle bit table for ASIC '{asic}', known ASICs: {sorted(ASIC_THROTTLE_TABLES)}"
        )
    return table


def ppt_domains(table: BitTable) -> list[BitDescription]:
    """Package power limiters defined by a table, at most MAX_PPT_DOMAINS"""
    return [entry for entry in table.entries if entry.label.startswith("PPT")][:MAX_PPT_DOMAINS]


class ThrottleDecode(BaseModel):
    """Decoded throttle mask"""

    model_config = ConfigDict(frozen=True)

    raw: int
    width: int
    vocabulary: ThrottleVocabulary
    state: ThrottleState
    reasons: tuple[BitDescription, ...] = ()

    @property
    def labels(self) -> list[str]:
        return [reason.label for reason in self.reasons]

    @property
    def hex(self) -> str:
        return f"0x{self.raw:0{self.width // 4}x}"

    @property
    def summary(self) -> str:
        if self.state == ThrottleState.UNAVAILABLE:
            return "unavailable"
        if self.state == ThrottleState.NONE:
            return "none"
        return ", ".join(str(reason) for reason in self.reasons)


def decode_bitmask(
    value: int, table: BitTable, vocabulary: ThrottleVocabulary
) -> ThrottleDecode:
    """Match the set bits of a throttle mask against a bit table

    Reasons are returned in table order. Bits with no table entry are ignored.

    Args:
        value (int): raw mask
        table (BitTable): table for the vocabulary the mask is written in
        vocabulary (ThrottleVocabulary): vocabulary the mask is written in, must be the
            table's

    Raises:
        ValueError: if vocabulary does not match the table

    Returns:
        ThrottleDecode: REASONS with the matched bits, NONE if nothing matched, or UNAVAILABLE
        if the value is the table's sentinel
    """
    if vocabulary != table.vocabulary:
        raise ValueError(
            f"{table.name} decodes {table.vocabulary.value} masks, not {vocabulary.value}"
        )

    if table.sentinel is not None and value == table.sentinel:
        return ThrottleDecode(
            raw=value,
            width=table.width,
            vocabulary=table.vocabulary,
            state=ThrottleState.UNAVAILABLE,
        )

    reasons = tuple(entry for entry in table.entries if value & (1 << entry.bit))
    return ThrottleDecode(
        raw=value,
        width=table.width,
        vocabulary=table.vocabulary,
        state=ThrottleState.REASONS if reasons else ThrottleState.NONE,
        reasons=reasons,
    )
