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
import logging
from collections import Counter
from typing import Optional

from pydantic import BaseModel, Field, field_serializer

from gpumetricscraper.enums import EventPriority, ExecutionStatus

from .event import Event

DEFAULT_MESSAGES = {
    ExecutionStatus.NOT_RAN: "task skipped",
    ExecutionStatus.OK: "task completed successfully",
    ExecutionStatus.WARNING: "task completed with warnings",
    ExecutionStatus.ERROR: "task detected errors",
    ExecutionStatus.EXECUTION_FAILURE: "task failed to run",
}


class TaskResult(BaseModel):
    """Outcome of one connection, collection or analysis task"""

    status: ExecutionStatus = ExecutionStatus.UNSET
    message: str = ""
    task: Optional[str] = None
    parent: Optional[str] = None
    artifacts: list[BaseModel] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)
    artifact_file_paths: list[str] = Field(default_factory=list)
    start_time: datetime.datetime = Field(default_factory=datetime.datetime.now)
    end_time: datetime.datetime = Field(default_factory=datetime.datetime.now)

    @field_serializer("status")
    def serialize_status(self, status: ExecutionStatus, _info) -> str:
        return status.name

    @property
    def log_level(self) -> int:
        if self.status == ExecutionStatus.EXECUTION_FAILURE:
            return logging.CRITICAL
        if self.status in (ExecutionStatus.WARNING, ExecutionStatus.ERROR):
            return logging.getLevelName(self.status.name)
        return logging.INFO

    def status_from_events(self) -> ExecutionStatus:
        """ERROR if any event is ERROR or CRITICAL, WARNING if any is WARNING, else OK"""
        worst = max((event.priority for event in self.events), default=EventPriority.INFO)
        if worst >= EventPriority.ERROR:
            return ExecutionStatus.ERROR
        if worst == EventPriority.WARNING:
            return ExecutionStatus.WARNING
        return ExecutionStatus.OK

    def event_summary(self) -> str:
        """Warning and error counts, e.g. "1 warnings|2 errors", empty if there are none"""
        counts = Counter(
            "errors" if event.priority >= EventPriority.ERROR else "warnings"
            for event in self.events
            if event.priority >= EventPriority.WARNING
        )
        return "|".join(f"{counts[kind]} {kind}" for kind in ("warnings", "errors") if counts[kind])

    def finalize(self, logger: Optional[logging.Logger] = None) -> None:
        """Close the result: stamp the end time, derive an unset status from the events, fill
        in a default message with the event counts and log it

        Args:
            logger (Optional[logging.Logger], optional): logger for the outcome line.
                Defaults to None.
        """
        self.end_time = datetime.datetime.now()

        if self.status == ExecutionStatus.UNSET:
            self.status = self.status_from_events()
        if not self.message:
            self.message = DEFAULT_MESSAGES[self.status]

        summary = self.event_summary()
        if summary:
            self.message += f" ({summary})"

        if logger:
            logger.log(self.log_level, "(%s) %s", self.task or "TaskResult", self.message)
