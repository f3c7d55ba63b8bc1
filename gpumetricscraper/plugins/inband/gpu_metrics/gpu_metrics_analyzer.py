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

from gpumetricscraper.enums import EventCategory, EventPriority, ExecutionStatus
from gpumetricscraper.gpumetrics import DecodedReport, ThrottleState
from gpumetricscraper.interfaces import DataAnalyzer
from gpumetricscraper.models import TaskResult

from .analyzer_args import TEMPERATURE_LIMIT_FIELDS, GpuMetricsAnalyzerArgs
from .gpu_metrics_data import GpuMetricsDataModel


class GpuMetricsAnalyzer(DataAnalyzer[GpuMetricsDataModel, GpuMetricsAnalyzerArgs]):
    """Check gpu_metrics temperatures and throttle reasons"""

    DATA_MODEL = GpuMetricsDataModel
    ANALYZER_ARGS = GpuMetricsAnalyzerArgs

    def _check_temperatures(
        self, card_id: int, report: DecodedReport, args: GpuMetricsAnalyzerArgs
    ) -> int:
        violations = 0
        for arg_name, field_names in TEMPERATURE_LIMIT_FIELDS.items():
            limit = getattr(args, arg_name)
            if limit is None:
                continue
            for field_name in field_names:
                value = report.field(field_name)
                if not value.available or value.value <= limit:
                    continue
                violations += 1
                self._log_event(
                    category=EventCategory.PLATFORM,
                    description=f"Card {card_id} {field_name} above limit",
                    data={
                        "card": card_id,
                        "field": field_name,
                        "actual": value.value,
                        "limit": limit,
                    },
                    priority=EventPriority.ERROR,
                    console_log=True,
                )
        return violations

    def _check_throttle(
        self, card_id: int, report: DecodedReport, args: GpuMetricsAnalyzerArgs
    ) -> int:
        warnings = 0
        indep = report.indep_throttle_status
        if indep.state == ThrottleState.UNAVAILABLE:
            self._log_event(
                category=EventCategory.COMPUTE,
                description=f"Card {card_id} indep_throttle_status not reported by firmware",
                data={"card": card_id, "raw": indep.hex},
                priority=EventPriority.INFO,
            )
        else:
            active = [
                reason
                for reason in indep.reasons
                if reason.label not in args.allowed_throttle_reasons
            ]
            if active:
                warnings += 1
                self._log_event(
                    category=EventCategory.COMPUTE,
                    description=f"Card {card_id} throttling: "
                    + ", ".join(reason.label for reason in active),
                    data={
                        "card": card_id,
                        "raw": indep.hex,
                        "reasons": [str(reason) for reason in active],
                    },
                    priority=EventPriority.WARNING,
                    console_log=True,
                )

        asic_throttle = report.throttle_status
        if args.check_asic_throttle and asic_throttle.state == ThrottleState.REASONS:
            warnings += 1
            self._log_event(
                category=EventCategory.COMPUTE,
                description=f"Card {card_id} {report.asic} throttle_status: "
                + ", ".join(asic_throttle.labels),
                data={
                    "card": card_id,
                    "asic": report.asic,
                    "raw": asic_throttle.hex,
                    "reasons": [str(reason) for reason in asic_throttle.reasons],
                },
                priority=EventPriority.WARNING,
                console_log=True,
            )
        return warnings

    def analyze_data(
        self, data: GpuMetricsDataModel, args: Optional[GpuMetricsAnalyzerArgs] = None
    ) -> TaskResult:
        """Check every card against temperature limits and report active throttle reasons.

        Args:
            data (GpuMetricsDataModel): decoded gpu_metrics for each card
            args (Optional[GpuMetricsAnalyzerArgs], optional): limits and allowed throttle
                reasons. Defaults to None.

        Returns:
            TaskResult: ERROR if a temperature is above its limit, WARNING if a card is throttling
        """
        if not args:
            args = GpuMetricsAnalyzerArgs()

        summary = []
        errors = 0
        warnings = 0
        for card_id, report in data.reports().items():
            card_errors = self._check_temperatures(card_id, report, args)
            card_warnings = self._check_throttle(card_id, report, args)
            errors += card_errors
            warnings += card_warnings
            summary.append(
                f"card{card_id}: throttle {report.indep_throttle_status.summary}, "
                f"{card_errors} temperature violation(s)"
            )

        if errors:
            self.result.status = ExecutionStatus.ERROR
        elif warnings:
            self.result.status = ExecutionStatus.WARNING
        else:
            self.result.status = ExecutionStatus.OK

        self.result.message = "; ".join(summary) if summary else "No gpu_metrics to analyze"
        return self.result
