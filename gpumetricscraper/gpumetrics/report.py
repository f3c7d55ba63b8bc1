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
from pydantic import BaseModel, ConfigDict

from .fields import FieldValue, format_counter, format_field, format_link_speed
from .record import (
    GPU_METRICS_V1_3_FIELDS,
    FieldKind,
    GpuMetricsRecord,
    MetricField,
    SentinelPolicy,
)
from .throttle import (
    DEFAULT_ASIC,
    INDEP_THROTTLER_BITS,
    BitTable,
    ThrottleDecode,
    ThrottleVocabulary,
    decode_bitmask,
    get_asic_bit_table,
)


class ReportField(BaseModel):
    """A labelled, decoded field of a report"""

    model_config = ConfigDict(frozen=True)

    name: str
    label: str
    value: FieldValue


class DecodedReport(BaseModel):
    """Decoded snapshot of one gpu_metrics record"""

    model_config = ConfigDict(frozen=True)

    structure_size: int
    format_version: int
    content_version: int
    asic: str
    fields: tuple[ReportField, ...]
    throttle_status: ThrottleDecode
    indep_throttle_status: ThrottleDecode

    def field(self, name: str) -> FieldValue:
        """Get a decoded field by name, HBM stacks are temperature_hbm0 to temperature_hbm3

        Args:
            name (str): field name

        Raises:
            KeyError: if the report has no field with that name

        Returns:
            FieldValue: decoded value
        """
        for report_field in self.fields:
            if report_field.name == name:
                return report_field.value
        raise KeyError(name)


def _format(field: MetricField, raw: int) -> FieldValue:
    if field.kind == FieldKind.LINK_SPEED:
        return format_link_speed(raw)
    if field.sentinel == SentinelPolicy.NONE:
        return format_counter(raw, field.unit)
    return format_field(raw, field.width, field.unit)


def _report_fields(field: MetricField, value) -> list[ReportField]:
    if field.count == 1:
        return [ReportField(name=field.name, label=field.label, value=_format(field, value))]
    return [
        ReportField(
            name=f"{field.name}{index}",
            label=field.label.format(index=index),
            value=_format(field, raw),
        )
        for index, raw in enumerate(value)
    ]


def build_report(record: GpuMetricsRecord, asic: str = DEFAULT_ASIC) -> DecodedReport:
    """Decode every field of a record

    Args:
        record (GpuMetricsRecord): parsed record
        asic (str, optional): ASIC id used to pick the throttle_status table.
            Defaults to DEFAULT_ASIC.

    Returns:
        DecodedReport: decoded report
    """
    tables: dict[ThrottleVocabulary, BitTable] = {
        ThrottleVocabulary.ASIC_SPECIFIC: get_asic_bit_table(asic),
        ThrottleVocabulary.ASIC_NORMALIZED: INDEP_THROTTLER_BITS,
    }

    fields: list[ReportField] = []
    throttle: dict[str, ThrottleDecode] = {}
    for field in GPU_METRICS_V1_3_FIELDS:
        value = getattr(record, field.name)
        if field.kind in (FieldKind.HEADER, FieldKind.PADDING):
            continue
        if field.kind == FieldKind.THROTTLE:
            throttle[field.name] = decode_bitmask(
                value, tables[field.vocabulary], vocabulary=field.vocabulary
            )
            continue
        fields.extend(_report_fields(field, value))

    return DecodedReport(
        structure_size=record.structure_size,
        format_version=record.format_version,
        content_version=record.content_version,
        asic=asic,
        fields=tuple(fields),
        throttle_status=throttle["throttle_status"],
        indep_throttle_status=throttle["indep_throttle_status"],
    )
