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
import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from gpumetricscraper.enums import ExecutionStatus, OSFamily
from gpumetricscraper.gpumetrics import GpuMetricsRecord
from gpumetricscraper.interfaces import DataAnalyzer
from gpumetricscraper.models import DataModel, SystemInfo, TaskResult

NA16 = 0xFFFF


@pytest.fixture
def system_info():
    return SystemInfo(name="test_host", os_family=OSFamily.LINUX)


@pytest.fixture
def conn_mock():
    return MagicMock()


class DummyDataModel(DataModel):
    foo: int


class DummyArg(BaseModel):
    value: int


@pytest.fixture
def dummy_data_model():
    return DummyDataModel


@pytest.fixture
def dummy_arg():
    return DummyArg


@pytest.fixture
def mock_analyzer():
    class MockAnalyzer(DataAnalyzer[DummyDataModel, DummyArg]):
        DATA_MODEL = DummyDataModel
        ANALYZER_ARGS = DummyArg

        def analyze_data(
            self, data: DummyDataModel, args: DummyArg | dict | None = None
        ) -> TaskResult:
            self.result.status = ExecutionStatus.OK
            return self.result

    return MockAnalyzer


@pytest.fixture
def logger():
    return logging.getLogger("test_logger")


@pytest.fixture
def framework_fixtures_path():
    return Path(__file__).parent / "framework" / "fixtures"


@pytest.fixture
def metrics_values() -> dict:
    """Raw values of a plausible MI250X gpu_metrics v1.3 snapshot"""
    return {
        "structure_size": 120,
        "format_version": 1,
        "content_version": 3,
        "temperature_edge": 45,
        "temperature_hotspot": 60,
        "temperature_mem": 50,
        "temperature_vrgfx": 40,
        "temperature_vrsoc": 42,
        "temperature_vrmem": 38,
        "average_gfx_activity": 87,
        "average_umc_activity": 25,
        "average_mm_activity": NA16,
        "average_socket_power": 220,
        "energy_accumulator": 123456789012,
        "system_clock_counter": 987654321,
        "average_gfxclk_frequency": 1700,
        "average_socclk_frequency": 1090,
        "average_uclk_frequency": 1600,
        "average_vclk0_frequency": NA16,
        "average_dclk0_frequency": NA16,
        "average_vclk1_frequency": NA16,
        "average_dclk1_frequency": NA16,
        "current_gfxclk": 1700,
        "current_socclk": 1090,
        "current_uclk": 1600,
        "current_vclk0": 29,
        "current_dclk0": 22,
        "current_vclk1": 29,
        "current_dclk1": 22,
        "throttle_status": 0,
        "current_fan_speed": NA16,
        "pcie_link_width": 16,
        "pcie_link_speed": 160,
        "padding": 0,
        "gfx_activity_acc": 4000000,
        "mem_activity_acc": 1000000,
        "temperature_hbm": (48, 49, NA16, 50),
        "firmware_timestamp": 555,
        "voltage_soc": 900,
        "voltage_gfx": 850,
        "voltage_mem": 1200,
        "padding1": 0,
        "indep_throttle_status": 0,
    }


@pytest.fixture
def metrics_record(metrics_values) -> GpuMetricsRecord:
    return GpuMetricsRecord(**metrics_values)


@pytest.fixture
def metrics_bytes(metrics_record) -> bytes:
    return metrics_record.to_bytes()
