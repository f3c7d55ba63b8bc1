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
import json

from gpumetricscraper.connection.inband import BinaryFileArtifact, CommandArtifact
from gpumetricscraper.enums import ExecutionStatus
from gpumetricscraper.models import DataModel, Event, PluginResult, TaskResult
from gpumetricscraper.resultcollators.tablesummary import TableSummary, gen_str_table
from gpumetricscraper.taskresulthooks import FileSystemLogHook


class HookDataModel(DataModel):
    value: str


def test_process_result(tmp_path):
    result = TaskResult(
        task="GpuMetricsCollector",
        parent="GpuMetricsPlugin",
        status=ExecutionStatus.OK,
        artifacts=[
            CommandArtifact(command="ls", stdout="card0", stderr="", exit_code=0),
            BinaryFileArtifact(filename="card0_gpu_metrics.bin", contents=b"\x78\x00"),
        ],
        events=[Event(category="OS", description="test", priority="INFO")],
    )

    hook = FileSystemLogHook(log_base_path=str(tmp_path))
    hook.process_result(result, data=HookDataModel(value="test"))

    log_dir = tmp_path / "gpu_metrics_plugin" / "gpu_metrics_collector"
    assert json.loads((log_dir / "result.json").read_text())["status"] == "OK"
    assert (log_dir / "card0_gpu_metrics.bin").read_bytes() == b"\x78\x00"
    assert json.loads((log_dir / "command_artifacts.json").read_text())[0]["stdout"] == "card0"
    assert json.loads((log_dir / "events.json").read_text())[0]["description"] == "test"
    assert json.loads((log_dir / "hookdatamodel.json").read_text()) == {"value": "test"}
    assert str(log_dir / "card0_gpu_metrics.bin") in result.artifact_file_paths


def test_process_result_unique_names(tmp_path):
    hook = FileSystemLogHook(log_base_path=str(tmp_path))
    for _ in range(2):
        hook.process_result(
            TaskResult(
                task="GpuMetricsCollector",
                artifacts=[BinaryFileArtifact(filename="card0_gpu_metrics.bin", contents=b"\x00")],
            )
        )

    log_dir = tmp_path / "gpu_metrics_collector"
    assert (log_dir / "card0_gpu_metrics.bin").exists()
    assert (log_dir / "card0_gpu_metrics(1).bin").exists()


def test_gen_str_table():
    table = gen_str_table(["Plugin", "Status"], [["GpuMetricsPlugin", "OK"]])
    assert table.splitlines() == [
        "+------------------+--------+",
        "| Plugin           | Status |",
        "+------------------+--------+",
        "| GpuMetricsPlugin | OK     |",
        "+------------------+--------+",
    ]


def test_table_summary(logger):
    tables = TableSummary(logger=logger).collate_results(
        [PluginResult(status=ExecutionStatus.OK, source="GpuMetricsPlugin", message="done")],
        [TaskResult(task="InBandConnectionManager", status=ExecutionStatus.OK, message="ok")],
    )
    assert "| Connection              | Status | Message |" in tables
    assert "| GpuMetricsPlugin | OK     | done    |" in tables
