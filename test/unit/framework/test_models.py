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
import datetime
import json
import logging

import pytest
from pydantic import ValidationError

from gpumetricscraper.enums import EventCategory, EventPriority, ExecutionStatus
from gpumetricscraper.models import DataModel, Event, PluginResult, TaskResult


class SampleDataModel(DataModel):
    value: int


def test_event_category_and_priority():
    event = Event(category=EventCategory.SW_DRIVER, description="short read", priority="error")
    assert event.category == "SW_DRIVER"
    assert event.priority == EventPriority.ERROR
    assert event.log_level == logging.ERROR
    assert event.reporter == "GPU_METRICS_SCRAPER"

    event = Event(category="sw driver", description="test", priority=EventPriority.INFO)
    assert event.category == "SW_DRIVER"
    assert event.model_dump(mode="json")["priority"] == "INFO"


def test_event_invalid():
    with pytest.raises(ValidationError):
        Event(category="OS", description="test", priority="not_a_priority")

    with pytest.raises(ValidationError):
        Event(
            category="OS",
            description="test",
            priority="INFO",
            timestamp=datetime.datetime(2026, 1, 1),
        )

    with pytest.raises(ValidationError):
        Event(category="OS", description="a" * 2048, priority="INFO")


def test_event_timestamp_utc():
    timestamp = datetime.datetime(
        2026, 1, 1, 12, tzinfo=datetime.timezone(datetime.timedelta(hours=2))
    )
    event = Event(category="OS", description="test", priority="INFO", timestamp=timestamp)
    assert event.timestamp.utcoffset().total_seconds() == 0
    assert event.timestamp.hour == 10


@pytest.mark.parametrize(
    "priorities, exp_status, exp_message",
    [
        ([], ExecutionStatus.OK, "task completed successfully"),
        ([EventPriority.INFO], ExecutionStatus.OK, "task completed successfully"),
        (
            [EventPriority.WARNING, EventPriority.WARNING],
            ExecutionStatus.WARNING,
            "task completed with warnings (2 warnings)",
        ),
        (
            [EventPriority.WARNING, EventPriority.ERROR],
            ExecutionStatus.ERROR,
            "task detected errors (1 warnings|1 errors)",
        ),
    ],
)
def test_task_result_finalize(priorities, exp_status, exp_message):
    result = TaskResult(task="TestTask")
    for priority in priorities:
        result.events.append(Event(category="OS", description="test", priority=priority))

    result.finalize()
    assert result.status == exp_status
    assert result.message == exp_message


def test_task_result_keeps_status(caplog):
    result = TaskResult(task="TestTask", status=ExecutionStatus.NOT_RAN)
    with caplog.at_level(logging.INFO, logger="test_logger"):
        result.finalize(logging.getLogger("test_logger"))

    assert result.status == ExecutionStatus.NOT_RAN
    assert result.message == "task skipped"
    assert "(TestTask) task skipped" in caplog.text
    assert json.loads(result.model_dump_json())["status"] == "NOT_RAN"


def test_data_model_import(tmp_path):
    model = SampleDataModel(value=3)
    model.log_model(str(tmp_path))

    log_file = tmp_path / "sampledatamodel.json"
    assert log_file.exists()
    assert SampleDataModel.import_model(str(log_file)) == model
    assert SampleDataModel.import_model({"value": 3}) == model

    with pytest.raises(ValueError):
        SampleDataModel.import_model(3)


def test_plugin_result_serializes_status():
    result = PluginResult(
        status=ExecutionStatus.WARNING,
        source="GpuMetricsPlugin",
        message="Collection: ok",
        system_data=SampleDataModel(value=1),
    )
    dumped = result.model_dump(mode="json")
    assert dumped["status"] == "WARNING"
    assert dumped["collection_result"] is None
