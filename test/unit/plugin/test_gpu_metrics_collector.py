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
import pytest

from gpumetricscraper.connection.inband import BinaryFileArtifact, CommandArtifact
from gpumetricscraper.enums import EventPriority, ExecutionStatus, OSFamily
from gpumetricscraper.interfaces import SystemCompatibilityError
from gpumetricscraper.plugins.inband.gpu_metrics import (
    GpuMetricsCollector,
    GpuMetricsDataModel,
)

LS_OUTPUT = (
    "/sys/class/drm/card1/device/gpu_metrics\n"
    "/sys/class/drm/card0/device/gpu_metrics\n"
    "/sys/class/drm/card0-DP-1/device/gpu_metrics\n"
)


@pytest.fixture
def collector(system_info, conn_mock):
    return GpuMetricsCollector(system_info=system_info, connection=conn_mock)


@pytest.fixture
def drm_files(metrics_bytes) -> dict[str, bytes]:
    return {
        "/sys/class/drm/card0/device/gpu_metrics": metrics_bytes,
        "/sys/class/drm/card1/device/gpu_metrics": metrics_bytes,
    }


@pytest.fixture
def mock_drm(conn_mock, drm_files):
    def mock_run_command(command, **kwargs):
        return CommandArtifact(command=command, stdout=LS_OUTPUT, stderr="", exit_code=0)

    def mock_read_file(filename):
        if filename not in drm_files:
            raise FileNotFoundError(filename)
        return BinaryFileArtifact(filename=filename, contents=drm_files[filename])

    conn_mock.run_command.side_effect = mock_run_command
    conn_mock.read_file.side_effect = mock_read_file
    return conn_mock


def test_collect_all_cards(collector, mock_drm, metrics_record):
    result, data = collector.collect_data()

    assert result.status == ExecutionStatus.OK
    assert result.message == "Decoded gpu_metrics for 2 card(s)"
    assert isinstance(data, GpuMetricsDataModel)
    assert [card.card_id for card in data.cards] == [0, 1]
    assert data.cards[0].path == "/sys/class/drm/card0/device/gpu_metrics"
    assert data.cards[0].metrics == metrics_record
    assert data.asic == "aldebaran"

    command = mock_drm.run_command.call_args.kwargs["command"]
    assert command == "ls -1 /sys/class/drm/card*/device/gpu_metrics"
    assert mock_drm.read_file.call_count == 2

    binaries = [art for art in result.artifacts if isinstance(art, BinaryFileArtifact)]
    assert [art.filename for art in binaries] == [
        "card0_gpu_metrics.bin",
        "card1_gpu_metrics.bin",
    ]


def test_collect_single_card(collector, mock_drm):
    result, data = collector.collect_data({"card": 1})

    assert result.status == ExecutionStatus.OK
    assert [card.card_id for card in data.cards] == [1]
    assert mock_drm.read_file.call_count == 1


def test_collect_drm_path(collector, mock_drm):
    collector.collect_data({"drm_path": "/tmp/drm/", "card": 5})
    command = mock_drm.run_command.call_args.kwargs["command"]
    assert command == "ls -1 /tmp/drm/card*/device/gpu_metrics"


def test_collect_drm_path_is_quoted(collector, mock_drm):
    collector.collect_data({"drm_path": "/tmp/my drm; rm -rf x"})
    command = mock_drm.run_command.call_args.kwargs["command"]
    assert command == "ls -1 '/tmp/my drm; rm -rf x'/card*/device/gpu_metrics"


def test_collect_missing_card(collector, mock_drm):
    result, data = collector.collect_data({"card": 7})

    assert data is None
    assert result.status == ExecutionStatus.ERROR
    assert result.message.startswith("Card 7 not found or no gpu_metrics available")
    assert result.events[0].priority == EventPriority.ERROR
    mock_drm.read_file.assert_not_called()


def test_collect_no_files(collector, conn_mock):
    conn_mock.run_command.return_value = CommandArtifact(
        command="ls",
        stdout="",
        stderr="ls: cannot access '/sys/class/drm/card*/device/gpu_metrics': No such file",
        exit_code=2,
    )

    result, data = collector.collect_data()

    assert data is None
    assert result.status == ExecutionStatus.NOT_RAN
    assert "No gpu_metrics files found under /sys/class/drm" in result.message
    assert result.events[0].priority == EventPriority.WARNING


def test_collect_short_read(collector, mock_drm, drm_files, metrics_bytes):
    drm_files["/sys/class/drm/card1/device/gpu_metrics"] = metrics_bytes[:100]

    result, data = collector.collect_data()

    assert [card.card_id for card in data.cards] == [0]
    assert result.status == ExecutionStatus.ERROR
    assert len(result.events) == 1
    event = result.events[0]
    assert event.priority == EventPriority.ERROR
    assert event.description == (
        "Error reading GPU metrics for card 1: expected 120 bytes, read 100 bytes"
    )
    assert event.data["expected"] == 120
    assert event.data["actual"] == 100
    assert "card1_gpu_metrics.bin" in [art.filename for art in result.artifacts]


def test_collect_all_cards_fail(collector, mock_drm, drm_files):
    for path in drm_files:
        drm_files[path] = b"\x00" * 8

    result, data = collector.collect_data()

    assert data is None
    assert result.status == ExecutionStatus.ERROR
    assert result.message.startswith("No gpu_metrics record could be decoded")
    assert len(result.events) == 2


def test_collect_read_error(collector, mock_drm, drm_files):
    del drm_files["/sys/class/drm/card0/device/gpu_metrics"]

    result, data = collector.collect_data()

    assert [card.card_id for card in data.cards] == [1]
    assert result.status == ExecutionStatus.ERROR
    assert result.events[0].description.startswith(
        "Error opening /sys/class/drm/card0/device/gpu_metrics"
    )


def test_collect_invalid_args(collector, mock_drm):
    result, data = collector.collect_data({"asic": "navi31"})

    assert data is None
    assert result.status == ExecutionStatus.EXECUTION_FAILURE
    assert result.events[0].priority == EventPriority.CRITICAL
    mock_drm.run_command.assert_not_called()


def test_collect_unknown_os_not_supported(system_info, conn_mock):
    system_info.os_family = OSFamily.UNKNOWN
    with pytest.raises(SystemCompatibilityError):
        GpuMetricsCollector(system_info=system_info, connection=conn_mock)
