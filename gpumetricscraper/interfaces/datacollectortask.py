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
from __future__ import annotations

import abc
import logging
from functools import wraps
from typing import TYPE_CHECKING, Callable, ClassVar, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gpumetricscraper.enums import EventPriority, ExecutionStatus, OSFamily
from gpumetricscraper.models import DataModel, SystemInfo, TaskResult
from gpumetricscraper.models.datamodel import TDataModel
from gpumetricscraper.utils import exception_event_data

from .task import SystemCompatibilityError, Task
from .taskhook import TaskHook

if TYPE_CHECKING:
    from gpumetricscraper.connection.inband import (
        BinaryFileArtifact,
        CommandArtifact,
        InBandConnection,
    )

TCollectArg = TypeVar("TCollectArg", bound=BaseModel)


def collect_decorator(
    func: Callable[..., tuple[TaskResult, Optional[TDataModel]]],
) -> Callable[..., tuple[TaskResult, Optional[TDataModel]]]:
    """Wrap collect_data so that dict args are validated into COLLECTOR_ARGS, exceptions become
    CRITICAL events, and the finalized result reaches the hooks together with the data
    """

    @wraps(func)
    def wrapper(
        collector: DataCollector, args: Optional[BaseModel | dict] = None
    ) -> tuple[TaskResult, Optional[TDataModel]]:
        collector.logger.info("Running data collector: %s", type(collector).__name__)
        collector.result = collector._init_result()

        data = None
        try:
            if isinstance(args, dict):
                args = collector.COLLECTOR_ARGS.model_validate(args)
            collector.result, data = func(collector, args)
        except ValidationError as exception:
            collector._log_failure(
                "Pydantic validation error", exception_event_data(exception, with_traceback=False)
            )
        except Exception as exception:
            collector._log_failure(f"Exception: {exception}", exception_event_data(exception))

        if data is None and collector.result.status == ExecutionStatus.UNSET:
            collector.result.status = ExecutionStatus.EXECUTION_FAILURE

        return collector._complete(data=data), data

    return wrapper


class DataCollector(Task, abc.ABC, Generic[TDataModel, TCollectArg]):
    """Reads raw data from the target over an in band connection and builds a data model"""

    DATA_MODEL: ClassVar[Type[DataModel]]
    COLLECTOR_ARGS: ClassVar[Type[BaseModel]]
    SUPPORTED_OS_FAMILY: ClassVar[set[OSFamily]] = {OSFamily.LINUX}

    def __init__(
        self,
        system_info: SystemInfo,
        connection: InBandConnection,
        logger: Optional[logging.Logger] = None,
        max_event_priority_level: EventPriority | str = EventPriority.CRITICAL,
        parent: Optional[str] = None,
        task_hooks: Optional[list[TaskHook]] = None,
    ):
        """
        Args:
            system_info (SystemInfo): target system
            connection (InBandConnection): open shell on the target
            logger (Optional[logging.Logger], optional): logger. Defaults to None.
            max_event_priority_level (EventPriority | str, optional): event priority cap.
                Defaults to CRITICAL.
            parent (Optional[str], optional): plugin running the collector. Defaults to None.
            task_hooks (Optional[list[TaskHook]], optional): result hooks. Defaults to None.

        Raises:
            SystemCompatibilityError: if the target OS family is not supported
        """
        super().__init__(system_info, logger, max_event_priority_level, parent, task_hooks)
        if system_info.os_family not in self.SUPPORTED_OS_FAMILY:
            raise SystemCompatibilityError(
                f"{system_info.os_family.name} OS family is not supported by "
                f"{type(self).__name__}"
            )
        self.connection = connection

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._require_class_vars("DATA_MODEL", "COLLECTOR_ARGS")
        if "collect_data" in cls.__dict__:
            cls.collect_data = collect_decorator(cls.collect_data)

    def _run_sut_cmd(
        self, command: str, sudo: bool = False, timeout: int = 300, log_artifact: bool = True
    ) -> CommandArtifact:
        """Run a command on the target, the command artifact is kept unless log_artifact is off"""
        res = self.connection.run_command(command=command, sudo=sudo, timeout=timeout)
        if log_artifact:
            self.result.artifacts.append(res)
        return res

    def _read_sut_file(self, filename: str) -> BinaryFileArtifact:
        """Read a file from the target as raw bytes

        Raises:
            OSError: if the file can not be read
        """
        return self.connection.read_file(filename=filename)

    @abc.abstractmethod
    def collect_data(
        self, args: Optional[TCollectArg] = None
    ) -> tuple[TaskResult, Optional[TDataModel]]:
        """Collect data from the target

        Returns:
            tuple[TaskResult, Optional[TDataModel]]: result, and data or None when nothing
            usable was collected
        """
