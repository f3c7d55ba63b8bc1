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
import abc
import inspect
import logging
from typing import Optional

from gpumetricscraper.constants import DEFAULT_LOGGER
from gpumetricscraper.enums import EventCategory, EventPriority, ExecutionStatus
from gpumetricscraper.models import Event, SystemInfo, TaskResult

from .taskhook import TaskHook


class SystemCompatibilityError(Exception):
    """Raised when a task can not run against the target, e.g. collection on a non Linux node"""


class Task(abc.ABC):
    """Shared base of the connection manager, collectors and analyzers

    Each run starts from a fresh TaskResult. Events are capped at max_event_priority_level,
    and the finalized result is handed to every task hook.
    """

    def __init__(
        self,
        system_info: SystemInfo,
        logger: Optional[logging.Logger] = None,
        max_event_priority_level: EventPriority | str = EventPriority.CRITICAL,
        parent: Optional[str] = None,
        task_hooks: Optional[list[TaskHook]] = None,
    ):
        """
        Args:
            system_info (SystemInfo): target system
            logger (Optional[logging.Logger], optional): logger, the package logger if None.
                Defaults to None.
            max_event_priority_level (EventPriority | str, optional): highest priority an event
                of this task can have, higher ones are lowered to it. Defaults to CRITICAL.
            parent (Optional[str], optional): name of the plugin running the task.
                Defaults to None.
            task_hooks (Optional[list[TaskHook]], optional): result hooks. Defaults to None.
        """
        self.system_info = system_info
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER)
        if isinstance(max_event_priority_level, str):
            max_event_priority_level = EventPriority[max_event_priority_level.upper()]
        self.max_event_priority_level = max_event_priority_level
        self.parent = parent
        self.task_hooks = list(task_hooks or [])
        self.result = self._init_result()

    @classmethod
    def _require_class_vars(cls, *names: str) -> None:
        """Fail at class definition when a concrete task leaves a required class var unset"""
        if inspect.isabstract(cls):
            return
        missing = [name for name in names if getattr(cls, name, None) is None]
        if missing:
            raise TypeError(f"{cls.__name__} does not set {', '.join(missing)}")

    def _init_result(self) -> TaskResult:
        return TaskResult(task=type(self).__name__, parent=self.parent)

    def _log_event(
        self,
        category: EventCategory | str,
        description: str,
        data: Optional[dict] = None,
        priority: EventPriority = EventPriority.INFO,
        console_log: bool = False,
    ) -> Event:
        """Add an event to the current result

        Args:
            category (EventCategory | str): event category
            description (str): one line description
            data (Optional[dict], optional): structured details. Defaults to None.
            priority (EventPriority, optional): requested priority. Defaults to INFO.
            console_log (bool, optional): also log the description. Defaults to False.

        Returns:
            Event: the added event
        """
        event = Event(
            category=category,
            description=description,
            data=data or {},
            priority=min(priority, self.max_event_priority_level),
            system_id=self.system_info.name,
        )
        self.result.events.append(event)

        if console_log:
            self.logger.log(event.log_level, "(%s) %s", type(self).__name__, description)
        return event

    def _log_failure(self, description: str, data: dict) -> None:
        """Record that the task itself failed, as opposed to a finding about the target"""
        self._log_event(
            category=EventCategory.RUNTIME,
            description=description,
            data=data,
            priority=EventPriority.CRITICAL,
            console_log=True,
        )
        self.result.status = ExecutionStatus.EXECUTION_FAILURE

    def _complete(self, **hook_kwargs) -> TaskResult:
        """Finalize the current result and pass it to the hooks"""
        self.result.finalize(self.logger)
        for hook in self.task_hooks:
            hook.process_result(self.result, **hook_kwargs)
        return self.result
