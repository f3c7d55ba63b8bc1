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
import struct
from enum import auto, unique
from typing import NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, model_validator

from gpumetricscraper.utils import AutoNameStrEnum

from .errors import ShortRead
from .throttle import ThrottleVocabulary


@unique
class FieldKind(AutoNameStrEnum):
    """How a record field is interpreted when it is reported"""

    HEADER = auto()
    SCALAR = auto()
    COUNTER = auto()
    LINK_SPEED = auto()
    THROTTLE = auto()
    PADDING = auto()


@unique
class SentinelPolicy(AutoNameStrEnum):
    """Whether a field reserves a raw value for "not reported"
    - ALL_ONES
        all bits set at the field width means unavailable
    - NONE
        every raw value is a reading, used for counters and link speed
    """

    ALL_ONES = auto()
    NONE = auto()


class MetricField(NamedTuple):
    """One entry of the gpu_metrics layout"""

    name: str
    code: str
    width: int
    kind: FieldKind
    label: str = ""
    unit: str = ""
    count: int = 1
    vocabulary: Optional[ThrottleVocabulary] = None
    sentinel: SentinelPolicy = SentinelPolicy.ALL_ONES


def _temp(name: str, label: str) -> MetricField:
    return MetricField(name, "H", 16, FieldKind.SCALAR, label, " C")


def _clock(name: str, label: str) -> MetricField:
    return MetricField(name, "H", 16, FieldKind.SCALAR, label, " MHz")


def _counter(name: str, code: str, width: int, label: str, unit: str = "") -> MetricField:
    return MetricField(
        name, code, width, FieldKind.COUNTER, label, unit, sentinel=SentinelPolicy.NONE
    )


# struct gpu_metrics_v1_3 from kgd_pp_interface.h, in declaration order
GPU_METRICS_V1_3_FIELDS: tuple[MetricField, ...] = (
    MetricField("structure_size", "H", 16, FieldKind.HEADER, "Structure Size", " bytes"),
    MetricField("format_version", "B", 8, FieldKind.HEADER, "Format Version"),
    MetricField("content_version", "B", 8, FieldKind.HEADER, "Content Version"),
    _temp("temperature_edge", "Temperature (Edge)"),
    _temp("temperature_hotspot", "Temperature (Hotspot)"),
    _temp("temperature_mem", "Temperature (Memory)"),
    _temp("temperature_vrgfx", "Temperature (VR GFX)"),
    _temp("temperature_vrsoc", "Temperature (VR SoC)"),
    _temp("temperature_vrmem", "Temperature (VR MEM)"),
    MetricField("average_gfx_activity", "H", 16, FieldKind.SCALAR, "Average GFX Activity", " %"),
    MetricField("average_umc_activity", "H", 16, FieldKind.SCALAR, "Average UMC Activity", " %"),
    MetricField("average_mm_activity", "H", 16, FieldKind.SCALAR, "Average MM Activity", " %"),
    MetricField("average_socket_power", "H", 16, FieldKind.SCALAR, "Average Socket Power", " W"),
    _counter("energy_accumulator", "Q", 64, "Energy Accumulator"),
    _counter("system_clock_counter", "Q", 64, "System Clock Counter", " ns"),
    _clock("average_gfxclk_frequency", "Average GFX Clock"),
    _clock("average_socclk_frequency", "Average SOC Clock"),
    _clock("average_uclk_frequency", "Average UCLK"),
    _clock("average_vclk0_frequency", "Average VCLK0"),
    _clock("average_dclk0_frequency", "Average DCLK0"),
    _clock("average_vclk1_frequency", "Average VCLK1"),
    _clock("average_dclk1_frequency", "Average DCLK1"),
    _clock("current_gfxclk", "Current GFX Clock"),
    _clock("current_socclk", "Current SOC Clock"),
    _clock("current_uclk", "Current UCLK"),
    _clock("current_vclk0", "Current VCLK0"),
    _clock("current_dclk0", "Current DCLK0"),
    _clock("current_vclk1", "Current VCLK1"),
    _clock("current_dclk1", "Current DCLK1"),
    MetricField(
        "throttle_status",
        "I",
        32,
        FieldKind.THROTTLE,
        "throttle_status",
        vocabulary=ThrottleVocabulary.ASIC_SPECIFIC,
        sentinel=SentinelPolicy.NONE,
    ),
    MetricField("current_fan_speed", "H", 16, FieldKind.SCALAR, "Fan Speed", " RPM"),
    MetricField("pcie_link_width", "H", 16, FieldKind.SCALAR, "PCIe Link Width"),
    MetricField(
        "pcie_link_speed",
        "H",
        16,
        FieldKind.LINK_SPEED,
        "PCIe Link Speed",
        " GT/s",
        sentinel=SentinelPolicy.NONE,
    ),
    MetricField("padding", "H", 16, FieldKind.PADDING),
    _counter("gfx_activity_acc", "I", 32, "GFX Activity Acc"),
    _counter("mem_activity_acc", "I", 32, "MEM Activity Acc"),
    MetricField(
        "temperature_hbm", "H", 16, FieldKind.SCALAR, "Temperature (HBM{index})", " C", count=4
    ),
    _counter("firmware_timestamp", "Q", 64, "Firmware Timestamp", " (10ns)"),
    MetricField("voltage_soc", "H", 16, FieldKind.SCALAR, "Voltage (SoC)", " mV"),
    MetricField("voltage_gfx", "H", 16, FieldKind.SCALAR, "Voltage (GFX)", " mV"),
    MetricField("voltage_mem", "H", 16, FieldKind.SCALAR, "Voltage (Memory)", " mV"),
    MetricField("padding1", "H", 16, FieldKind.PADDING),
    MetricField(
        "indep_throttle_status",
        "Q",
        64,
        FieldKind.THROTTLE,
        "indep_throttle_status",
        vocabulary=ThrottleVocabulary.ASIC_NORMALIZED,
    ),
)

# little endian, no implicit alignment, padding is explicit in the layout
GPU_METRICS_V1_3_STRUCT = struct.Struct(
    "<" + "".join(f"{field.count}{field.code}" for field in GPU_METRICS_V1_3_FIELDS)
)
GPU_METRICS_V1_3_SIZE = GPU_METRICS_V1_3_STRUCT.size

GPU_METRICS_FORMAT_VERSION = 1
GPU_METRICS_CONTENT_VERSION = 3


class GpuMetricsRecord(BaseModel):
    """gpu_metrics v1.3 record as read from the amdgpu driver.

    Values are the raw unsigned integers of the binary layout, sentinel values included.
    """

    model_config = ConfigDict(frozen=True)

    structure_size: int
    format_version: int
    content_version: int

    temperature_edge: int
    temperature_hotspot: int
    temperature_mem: int
    temperature_vrgfx: int
    temperature_vrsoc: int
    temperature_vrmem: int

    average_gfx_activity: int
    average_umc_activity: int
    average_mm_activity: int

    average_socket_power: int
    energy_accumulator: int

    system_clock_counter: int

    average_gfxclk_frequency: int
    average_socclk_frequency: int
    average_uclk_frequency: int
    average_vclk0_frequency: int
    average_dclk0_frequency: int
    average_vclk1_frequency: int
    average_dclk1_frequency: int

    current_gfxclk: int
    current_socclk: int
    current_uclk: int
    current_vclk0: int
    current_dclk0: int
    current_vclk1: int
    current_dclk1: int

    throttle_status: int

    current_fan_speed: int

    pcie_link_width: int
    pcie_link_speed: int  # tenths of GT/s

    padding: int = 0

    gfx_activity_acc: int
    mem_activity_acc: int

    temperature_hbm: tuple[int, int, int, int]

    firmware_timestamp: int  # 10ns resolution

    voltage_soc: int
    voltage_gfx: int
    voltage_mem: int

    padding1: int = 0

    indep_throttle_status: int

    @model_validator(mode="after")
    def validate_widths(self) -> "GpuMetricsRecord":
        """Ensure every value fits the width it has in the binary layout

        Raises:
            ValueError: if a value is negative or too large for its field

        Returns:
            GpuMetricsRecord: validated record
        """
        for field in GPU_METRICS_V1_3_FIELDS:
            value = getattr(self, field.name)
            values = value if field.count > 1 else (value,)
            for item in values:
                if not 0 <= item < (1 << field.width):
                    raise ValueError(
                        f"{field.name} value {item} does not fit in {field.width} bits"
                    )
        return self

    def to_bytes(self) -> bytes:
        """Encode the record in the gpu_metrics v1.3 binary layout

        Returns:
            bytes: GPU_METRICS_V1_3_SIZE bytes
        """
        values: list[int] = []
        for field in GPU_METRICS_V1_3_FIELDS:
            value = getattr(self, field.name)
            if field.count > 1:
                values.extend(value)
            else:
                values.append(value)
        return GPU_METRICS_V1_3_STRUCT.pack(*values)


def parse_gpu_metrics(buffer: Union[bytes, bytearray, memoryview]) -> GpuMetricsRecord:
    """Decode a gpu_metrics v1.3 buffer.

    Only the length is checked, field values are passed through as read. structure_size is not
    used for framing. Bytes past GPU_METRICS_V1_3_SIZE are ignored.

    Args:
        buffer (Union[bytes, bytearray, memoryview]): raw content of a gpu_metrics file

    Raises:
        ShortRead: if the buffer is shorter than GPU_METRICS_V1_3_SIZE

    Returns:
        GpuMetricsRecord: decoded record
    """
    if len(buffer) < GPU_METRICS_V1_3_SIZE:
        raise ShortRead(expected=GPU_METRICS_V1_3_SIZE, actual=len(buffer))

    raw_values = GPU_METRICS_V1_3_STRUCT.unpack_from(buffer)
    record: dict[str, Union[int, tuple[int, ...]]] = {}
    offset = 0
    for field in GPU_METRICS_V1_3_FIELDS:
        if field.count > 1:
            record[field.name] = tuple(raw_values[offset : offset + field.count])
        else:
            record[field.name] = raw_values[offset]
        offset += field.count
    return GpuMetricsRecord(**record)
