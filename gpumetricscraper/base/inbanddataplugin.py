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
from typing import ClassVar, Generic, Optional, Type

from gpumetricscraper.connection.inband import InBandConnectionManager, SSHConnectionParams
from gpumetricscraper.constants import DEFAULT_LOGGER
from gpumetricscraper.enums import EventPriority, ExecutionStatus
from gpumetricscraper.interfaces import DataAnalyzer, DataCollector, SystemCompatibilityError
from gpumetricscraper.interfaces.dataanalyzertask import TAnalyzeArg
from gpumetricscraper.interfaces.datacollectortask import TCollectArg
from gpumetricscraper.interfaces.taskhook import TaskHook
from gpumetricscraper.models import DataModel, PluginResult, SystemInfo, TaskResult
from gpumetricscraper.models.datamodel import TDataModel


class InBandDataPlugin(Generic[TDataModel, TCollectArg, TAnalyzeArg]):
    """Runs a collector over an in band connection, then an analyzer on what it collected

    Subclasses set DATA_MODEL, COLLECTOR and ANALYZER. Analysis can also run alone on a
    data model passed to analyze() or run().
    """

    DATA_MODEL: ClassVar[Type[DataModel]]
    COLLECTOR: ClassVar[Type[DataCollector]]
    ANALYZER: ClassVar[Type[DataAnalyzer]]

    def __init__(
        self,
        system_info: Optional[SystemInfo] = None,
        logger: Optional[logging.Logger] = None,
        connection_manager: Optional[InBandConnectionManager] = None,
        connection_args: Optional[SSHConnectionParams | dict] = None,
        task_hooks: Optional[list[TaskHook]] = None,
    ):
        """
        Args:
            system_info (Optional[SystemInfo], optional): target system, this host if None.
                Defaults to None.
            logger (Optional[logging.Logger], optional): logger. Defaults to None.
            connection_manager (Optional[InBandConnectionManager], optional): manager to use,
                one is built from connection_args if None. Defaults to None.
            connection_args (Optional[SSHConnectionParams | dict], optional): ssh login for
                REMOTE targets. Defaults to None.
            task_hooks (Optional[list[TaskHook]], optional): hooks for every task result.
                Defaults to None.
        """
        self.system_info = system_info or SystemInfo()
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER)
        self.task_hooks = list(task_hooks or [])
        self.connection_manager = connection_manager or InBandConnectionManager(
            system_info=self.system_info,
            logger=self.logger,
            parent=type(self).__name__,
            task_hooks=self.task_hooks,
            connection_args=connection_args,
        )

        self.data: Optional[TDataModel] = None
        self.collection_result = self._task_result(
            self.COLLECTOR, ExecutionStatus.NOT_RAN, "Data collection not ran"
        )
        self.analysis_result = self._task_result(
            self.ANALYZER, ExecutionStatus.NOT_RAN, "Data analysis not ran"
        )

    def _task_result(self, task: type, status: ExecutionStatus, message: str) -> TaskResult:
        return TaskResult(
            task=task.__name__, parent=type(self).__name__, status=status, message=message
        )

    def collect(
        self,
        max_event_priority_level: EventPriority | str = EventPriority.CRITICAL,
        preserve_connection: bool = False,
        collection_args: Optional[TCollectArg | dict] = None,
    ) -> TaskResult:
        """Connect if needed, then run the collector

        Collection is NOT_RAN when the connection result is not OK, or when the collector
        does not support the target OS.

        Args:
            max_event_priority_level (EventPriority | str, optional): event priority cap.
                Defaults to CRITICAL.
            preserve_connection (bool, optional): keep the connection open afterwards.
                Defaults to False.
            collection_args (Optional[TCollectArg | dict], optional): collector args.
                Defaults to None.

        Returns:
            TaskResult: collection result
        """
        manager = self.connection_manager
        try:
            if manager.connection is None:
                manager.connect()

            if manager.result.status != ExecutionStatus.OK:
                self.collection_result = self._task_result(
                    self.COLLECTOR,
                    ExecutionStatus.NOT_RAN,
                    "Connection not available, data collection skipped",
                )
                return self.collection_result

            collector = self.COLLECTOR(
                system_info=self.system_info,
                connection=manager.connection,
                logger=self.logger,
                max_event_priority_level=max_event_priority_level,
                parent=type(self).__name__,
                task_hooks=self.task_hooks,
            )
            self.collection_result, self.data = collector.collect_data(collection_args)
        except SystemCompatibilityError as e:
            self.collection_result = self._task_result(
                self.COLLECTOR, ExecutionStatus.NOT_RAN, str(e)
            )
        except Exception as e:
            self.logger.exception("Unhandled exception running %s", self.COLLECTOR.__name__)
            self.collection_result = self._task_result(
                self.COLLECTOR,
                ExecutionStatus.EXECUTION_FAILURE,
                f"Unhandled exception running data collector: {e}",
            )
        finally:
            if not preserve_connection:
                manager.disconnect()

        return self.collection_result

    def analyze(
        self,
        max_event_priority_level: EventPriority | str = EventPriority.CRITICAL,
        analysis_args: Optional[TAnalyzeArg | dict] = None,
        data: Optional[TDataModel] = None,
    ) -> TaskResult:
        """Run the analyzer on data, or on the collected data when data is None

        Returns:
            TaskResult: analysis result, NOT_RAN when there is nothing to analyze
        """
        if data is not None:
            self.data = data

        if self.data is None:
            self.analysis_result = self._task_result(
                self.ANALYZER,
                ExecutionStatus.NOT_RAN,
                f"No data available to analyze for {type(self).__name__}",
            )
            return self.analysis_result

        analyzer = self.ANALYZER(
            self.system_info,
            logger=self.logger,
            max_event_priority_level=max_event_priority_level,
            parent=type(self).__name__,
            task_hooks=self.task_hooks,
        )
        self.analysis_result = analyzer.analyze_data(self.data, analysis_args)
        return self.analysis_result

    def run(
        self,
        collection: bool = True,
        analysis: bool = True,
        max_event_priority_level: EventPriority | str = EventPriority.CRITICAL,
        preserve_connection: bool = False,
        data: Optional[TDataModel] = None,
        collection_args: Optional[TCollectArg | dict] = None,
        analysis_args: Optional[TAnalyzeArg | dict] = None,
    ) -> PluginResult:
        """Collect and/or analyze, the plugin status is the worse of the two task statuses"""
        self.logger.info("Running plugin %s", type(self).__name__)
        if collection:
            self.collect(
                max_event_priority_level=max_event_priority_level,
                preserve_connection=preserve_connection,
                collection_args=collection_args,
            )
        if analysis:
            self.analyze(
                max_event_priority_level=max_event_priority_level,
                analysis_args=analysis_args,
                data=data,
            )

        return PluginResult(
            status=max(self.collection_result.status, self.analysis_result.status),
            source=type(self).__name__,
            message=self._result_message(),
            system_data=self.data,
            collection_result=self.collection_result,
            analysis_result=self.analysis_result,
        )

    def _result_message(self) -> str:
        steps = (("Collection", self.collection_result), ("Analysis", self.analysis_result))
        messages = [
            f"{step}: {result.message}"
            for step, result in steps
            if result.status != ExecutionStatus.NOT_RAN
        ]
        return " | ".join(messages) or self.collection_result.message
