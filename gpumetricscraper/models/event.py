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
import re
import uuid
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from gpumetricscraper.constants import DEFAULT_EVENT_REPORTER
from gpumetricscraper.enums import EventPriority

MAX_DESCRIPTION_BYTES = 2048


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class Event(BaseModel):
    """Something a task observed, e.g. a throttle reason or an unreadable gpu_metrics file"""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    timestamp: datetime.datetime = Field(default_factory=_utc_now)
    reporter: str = DEFAULT_EVENT_REPORTER
    category: str
    description: str
    data: dict = Field(default_factory=dict)
    priority: EventPriority
    system_id: Optional[str] = None

    @property
    def log_level(self) -> int:
        return logging.getLevelName(self.priority.name)

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, timestamp: datetime.datetime) -> datetime.datetime:
        """Reject naive timestamps and store aware ones in UTC"""
        if timestamp.utcoffset() is None:
            raise ValueError("timestamp must be timezone aware")
        return timestamp.astimezone(datetime.timezone.utc)

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, category: str | Enum) -> str:
        """EventCategory.SW_DRIVER, "sw driver" and "sw-driver" are all stored as SW_DRIVER"""
        if isinstance(category, Enum):
            category = category.value
        return re.sub(r"[\s-]+", "_", category.strip()).upper()

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, priority: str | EventPriority) -> EventPriority:
        """Accept a priority name in any case"""
        if not isinstance(priority, str):
            return priority
        try:
            return EventPriority[priority.upper()]
        except KeyError as e:
            raise ValueError(
                f"unknown priority {priority!r}, expected one of {[p.name for p in EventPriority]}"
            ) from e

    @field_validator("description")
    @classmethod
    def validate_description(cls, description: str) -> str:
        if len(description.encode("utf-8")) >= MAX_DESCRIPTION_BYTES:
            raise ValueError(f"description must be smaller than {MAX_DESCRIPTION_BYTES} bytes")
        return description

    @field_serializer("priority")
    def serialize_priority(self, priority: EventPriority, _info) -> str:
        return priority.name
