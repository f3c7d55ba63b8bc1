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
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .gpu_metrics_data import GpuMetricsDataModel

# temperature fields checked against each threshold
TEMPERATURE_LIMIT_FIELDS = {
    "max_temperature_edge": ("temperature_edge",),
    "max_temperature_hotspot": ("temperature_hotspot",),
    "max_temperature_mem": ("temperature_mem",),
    "max_temperature_hbm": tuple(f"temperature_hbm{index}" for index in range(4)),
}


class GpuMetricsAnalyzerArgs(BaseModel):
    """Arguments for gpu_metrics analyzer, temperatures are in degrees C"""

    max_temperature_edge: Optional[int] = None
    max_temperature_hotspot: Optional[int] = None
    max_temperature_mem: Optional[int] = None
    max_temperature_hbm: Optional[int] = None

    allowed_throttle_reasons: list[str] = Field(default_factory=list)
    """indep_throttle_status labels which are not reported, e.g. ["PPT0", "SPL"]"""

    check_asic_throttle: bool = True
    """Also report reasons decoded from the ASIC specific throttle_status"""

    @field_validator("allowed_throttle_reasons", mode="before")
    @classmethod
    def validate_allowed_throttle_reasons(cls, reasons: str | list) -> list:
        """support str or list input and compare labels in upper case

        Args:
            reasons (str | list): throttle labels

        Returns:
            list: upper case labels
        """
        if isinstance(reasons, str):
            reasons = [reasons]

        return [reason.strip().upper() for reason in reasons]

    @classmethod
    def build_from_model(cls, datamodel: GpuMetricsDataModel) -> "GpuMetricsAnalyzerArgs":
        """build analyzer args from data model, current maximums become the thresholds and
        currently active reasons are allowed

        Args:
            datamodel (GpuMetricsDataModel): data model for plugin

        Returns:
            GpuMetricsAnalyzerArgs: instance of analyzer args class
        """
        limits: dict[str, Optional[int]] = {}
        allowed: list[str] = []
        for report in datamodel.reports().values():
            for arg_name, field_names in TEMPERATURE_LIMIT_FIELDS.items():
                for field_name in field_names:
                    value = report.field(field_name)
                    if not value.available:
                        continue
                    current = limits.get(arg_name)
                    limits[arg_name] = value.value if current is None else max(current, value.value)

            for label in report.indep_throttle_status.labels:
                if label not in allowed:
                    allowed.append(label)

        return cls(**limits, allowed_throttle_reasons=allowed)
