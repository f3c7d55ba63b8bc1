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
import os

from pydantic import BaseModel, Field

from gpumetricscraper.gpumetrics import (
    DEFAULT_ASIC,
    DecodedReport,
    GpuMetricsRecord,
    build_report,
    render_report,
)
from gpumetricscraper.models import DataModel

from .collector_args import SYS_CLASS_DRM_DIR


class GpuCardMetrics(BaseModel):
    """gpu_metrics record read for one drm card"""

    card_id: int
    path: str
    metrics: GpuMetricsRecord


class GpuMetricsDataModel(DataModel):
    """Data model for amdgpu gpu_metrics.

    One record per drm card which exposed a complete device/gpu_metrics file.
    """

    drm_path: str = SYS_CLASS_DRM_DIR
    asic: str = DEFAULT_ASIC
    cards: list[GpuCardMetrics] = Field(default_factory=list)

    def reports(self) -> dict[int, DecodedReport]:
        """Decode the record of every card

        Returns:
            dict[int, DecodedReport]: decoded reports keyed by card id
        """
        return {card.card_id: build_report(card.metrics, asic=self.asic) for card in self.cards}

    def log_model(self, log_path: str):
        """Log data model as json along with the rendered text reports

        Args:
            log_path (str): log path
        """
        super().log_model(log_path)
        log_name = os.path.join(log_path, "gpu_metrics.log")
        with open(log_name, "w", encoding="utf-8") as log_file:
            log_file.write(
                "\n\n".join(
                    render_report(card_id, report) for card_id, report in self.reports().items()
                )
            )
            log_file.write("\n")
