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
from functools import wraps
from typing import Callable, ClassVar, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gpumetricscraper.models import DataModel, TaskResult
from gpumetricscraper.models.datamodel import TDataModel
from gpumetricscraper.utils import exception_event_data

from .task import Task

TAnalyzeArg = TypeVar("TAnalyzeArg", bound=BaseModel)


def analyze_decorator(func: Callable[..., TaskResult]) -> Callable[..., TaskResult]:
    """Wrap analyze_data so that data of the wrong type and failing args end the run with
    EXECUTION_FAILURE instead of raising
    """

    @wraps(func)
    def wrapper(
        analyzer: DataAnalyzer, data: DataModel, args: Optional[BaseModel | dict] = None
    ) -> TaskResult:
        analyzer.logger.info("Running data analyzer: %s", type(analyzer).__name__)
        analyzer.result = analyzer._init_result()

        if not isinstance(data, analyzer.DATA_MODEL):
            analyzer._log_failure(
                "Analyzer passed invalid data",
                {"data_type": type(data).__name__, "expected": analyzer.DATA_MODEL.__name__},
            )
            analyzer.result.message = "Invalid data input"
            return analyzer._complete()

        try:
            if isinstance(args, dict):
                args = analyzer.ANALYZER_ARGS.model_validate(args)
            func(analyzer, data, args)
        except ValidationError as exception:
            analyzer._log_failure(
                "Validation error during analysis",
                exception_event_data(exception, with_traceback=False),
            )
        except Exception as exception:
            analyzer._log_failure(
                f"Exception during data analysis: {exception}", exception_event_data(exception)
            )

        return analyzer._complete()

    return wrapper


class DataAnalyzer(Task, abc.ABC, Generic[TDataModel, TAnalyzeArg]):
    """Checks collected data against analyzer args and reports findings as events"""

    DATA_MODEL: ClassVar[Type[DataModel]]
    ANALYZER_ARGS: ClassVar[Type[BaseModel]]

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._require_class_vars("DATA_MODEL", "ANALYZER_ARGS")
        if "analyze_data" in cls.__dict__:
            cls.analyze_data = analyze_decorator(cls.analyze_data)

    @abc.abstractmethod
    def analyze_data(self, data: TDataModel, args: Optional[TAnalyzeArg] = None) -> TaskResult:
        """Analyze data, findings are added to self.result as events"""
