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
from .errors import ShortRead
from .fields import (
    SENTINEL_U16,
    SENTINEL_U32,
    SENTINEL_U64,
    UNAVAILABLE,
    FieldValue,
    format_counter,
    format_field,
    format_link_speed,
    sentinel_for_width,
)
from .legend import build_legend
from .record import (
    GPU_METRICS_V1_3_FIELDS,
    GPU_METRICS_V1_3_SIZE,
    FieldKind,
    GpuMetricsRecord,
    MetricField,
    SentinelPolicy,
    parse_gpu_metrics,
)
from .render import render_report, render_throttle
from .report import DecodedReport, ReportField, build_report
from .throttle import (
    ALDEBARAN_THROTTLE_BITS,
    ASIC_THROTTLE_TABLES,
    DEFAULT_ASIC,
    INDEP_THROTTLER_BITS,
    BitDescription,
    BitTable,
    ThrottleDecode,
    ThrottleState,
    ThrottleVocabulary,
    decode_bitmask,
    get_asic_bit_table,
    ppt_domains,
)

__all__ = [
    "ShortRead",
    "SENTINEL_U16",
    "SENTINEL_U32",
    "SENTINEL_U64",
    "UNAVAILABLE",
    "FieldValue",
    "format_counter",
    "format_field",
    "format_link_speed",
    "sentinel_for_width",
    "build_legend",
    "GPU_METRICS_V1_3_FIELDS",
    "GPU_METRICS_V1_3_SIZE",
    "FieldKind",
    "GpuMetricsRecord",
    "MetricField",
    "SentinelPolicy",
    "parse_gpu_metrics",
    "render_report",
    "render_throttle",
    "DecodedReport",
    "ReportField",
    "build_report",
    "ALDEBARAN_THROTTLE_BITS",
    "ASIC_THROTTLE_TABLES",
    "DEFAULT_ASIC",
    "INDEP_THROTTLER_BITS",
    "BitDescription",
    "BitTable",
    "ThrottleDecode",
    "ThrottleState",
    "ThrottleVocabulary",
    "decode_bitmask",
    "get_asic_bit_table",
    "ppt_domains",
]
