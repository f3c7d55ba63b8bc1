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

from gpumetricscraper.gpumetrics import DEFAULT_ASIC, get_asic_bit_table

SYS_CLASS_DRM_DIR = "/sys/class/drm"


class GpuMetricsCollectorArgs(BaseModel):
    """Arguments for gpu_metrics collection"""

    card: Optional[int] = Field(default=None, ge=0)
    """Only collect this drm card index, None collects every card"""

    drm_path: str = SYS_CLASS_DRM_DIR

    asic: str = DEFAULT_ASIC
    """ASIC family used to decode throttle_status"""

    @field_validator("asic")
    @classmethod
    def validate_asic(cls, asic: str) -> str:
        """ensure there is a throttle_status table for the ASIC

        Args:
            asic (str): ASIC id

        Returns:
            str: normalized ASIC id
        """
        get_asic_bit_table(asic)
        return asic.strip().lower()

    @field_validator("drm_path")
    @classmethod
    def validate_drm_path(cls, drm_path: str) -> str:
        return drm_path.rstrip("/") or "/"
