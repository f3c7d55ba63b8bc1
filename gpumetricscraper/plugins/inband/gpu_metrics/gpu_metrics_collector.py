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
import re
import shlex
from typing import Optional

from gpumetricscraper.enums import EventCategory, EventPriority, ExecutionStatus
from gpumetricscraper.gpumetrics import ShortRead, parse_gpu_metrics
from gpumetricscraper.interfaces import DataCollector
from gpumetricscraper.models import TaskResult

from .collector_args import GpuMetricsCollectorArgs
from .gpu_metrics_data import GpuCardMetrics, GpuMetricsDataModel

# only real cards, connector entries such as card0-DP-1 are skipped
CARD_METRICS_RE = re.compile(r"/card(\d+)/device/gpu_metrics$")


class GpuMetricsCollector(DataCollector[GpuMetricsDataModel, GpuMetricsCollectorArgs]):
    """Read and decode device/gpu_metrics for each amdgpu drm card"""

    DATA_MODEL = GpuMetricsDataModel
    COLLECTOR_ARGS = GpuMetricsCollectorArgs

    CMD_LIST = "ls -1 {drm_path}/card*/device/gpu_metrics"

    def _find_metrics_files(self, drm_path: str) -> list[tuple[int, str]]:
        """List gpu_metrics files below the drm class directory

        Args:
            drm_path (str): drm class directory

        Returns:
            list[tuple[int, str]]: (card id, path) pairs sorted by card id
        """
        res = self._run_sut_cmd(self.CMD_LIST.format(drm_path=shlex.quote(drm_path)))
        if res.exit_code != 0:
            # ls exits non zero when the glob matches nothing
            return []

        files = []
        for line in res.stdout.splitlines():
            path = line.strip()
            match = CARD_METRICS_RE.search(path)
            if match:
                files.append((int(match.group(1)), path))
        return sorted(files)

    def collect_data(
        self, args: Optional[GpuMetricsCollectorArgs] = None
    ) -> tuple[TaskResult, Optional[GpuMetricsDataModel]]:
        """Collect gpu_metrics for all cards, or only the requested card

        Args:
            args (Optional[GpuMetricsCollectorArgs], optional): collection args. Defaults to None.

        Returns:
            tuple[TaskResult, Optional[GpuMetricsDataModel]]: result and data, data is None when
            no record could be decoded
        """
        if args is None:
            args = GpuMetricsCollectorArgs()

        metrics_files = self._find_metrics_files(args.drm_path)
        if args.card is not None:
            metrics_files = [entry for entry in metrics_files if entry[0] == args.card]

        if not metrics_files:
            if args.card is not None:
                self._log_event(
                    category=EventCategory.SW_DRIVER,
                    description=f"Card {args.card} not found or no gpu_metrics available",
                    data={"card": args.card, "drm_path": args.drm_path},
                    priority=EventPriority.ERROR,
                    console_log=True,
                )
                self.result.status = ExecutionStatus.ERROR
                self.result.message = f"Card {args.card} not found or no gpu_metrics available"
            else:
                self._log_event(
                    category=EventCategory.SW_DRIVER,
                    description=f"No gpu_metrics files found under {args.drm_path}",
                    priority=EventPriority.WARNING,
                    console_log=True,
                )
                self.result.status = ExecutionStatus.NOT_RAN
                self.result.message = f"No gpu_metrics files found under {args.drm_path}"
            return self.result, None

        cards = []
        for card_id, path in metrics_files:
            try:
                file_res = self._read_sut_file(path)
            except OSError as e:
                self._log_event(
                    category=EventCategory.SW_DRIVER,
                    description=f"Error opening {path}: {e}",
                    data={"card": card_id, "path": path},
                    priority=EventPriority.ERROR,
                    console_log=True,
                )
                continue

            contents = file_res.contents
            self.result.artifacts.append(
                file_res.model_copy(update={"filename": f"card{card_id}_gpu_metrics.bin"})
            )
            try:
                record = parse_gpu_metrics(contents)
            except ShortRead as e:
                self._log_event(
                    category=EventCategory.SW_DRIVER,
                    description=f"Error reading GPU metrics for card {card_id}: {e}",
                    data={"card": card_id, "path": path, "expected": e.expected, "actual": e.actual},
                    priority=EventPriority.ERROR,
                    console_log=True,
                )
                continue

            cards.append(GpuCardMetrics(card_id=card_id, path=path, metrics=record))

        if not cards:
            self.result.status = ExecutionStatus.ERROR
            self.result.message = "No gpu_metrics record could be decoded"
            return self.result, None

        self.result.message = f"Decoded gpu_metrics for {len(cards)} card(s)"
        return self.result, GpuMetricsDataModel(drm_path=args.drm_path, asic=args.asic, cards=cards)
