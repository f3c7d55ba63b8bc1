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

import logging
from typing import Optional

from gpumetricscraper.enums import (
    EventCategory,
    EventPriority,
    OSFamily,
    SystemLocation,
)
from gpumetricscraper.interfaces.task import Task
from gpumetricscraper.interfaces.taskhook import TaskHook
from gpumetricscraper.models import SystemInfo, TaskResult
from gpumetricscraper.utils import exception_event_data

from .inband import InBandConnection
from .inbandlocal import LocalShell
from .inbandremote import RemoteShell, SSHConnectionError
from .sshparams import SSHConnectionParams


class InBandConnectionManager(Task):
    """Opens the shell the collector reads through

    LOCAL targets get a LocalShell, REMOTE targets an ssh RemoteShell built from
    connection_args. After opening, the OS family of the target is detected with uname.
    """

    def __init__(
        self,
        system_info: SystemInfo,
        logger: Optional[logging.Logger] = None,
        max_event_priority_level: EventPriority | str = EventPriority.CRITICAL,
        parent: Optional[str] = None,
        task_hooks: Optional[list[TaskHook]] = None,
        connection_args: Optional[SSHConnectionParams | dict] = None,
    ):
        super().__init__(
            system_info, logger, max_event_priority_level, parent or "CONNECTION", task_hooks
        )
        if isinstance(connection_args, dict):
            connection_args = SSHConnectionParams.model_validate(connection_args)
        self.connection_args = connection_args
        self.connection: Optional[InBandConnection] = None

    def connect(self) -> TaskResult:
        """Open the connection, the result is OK only when a usable Linux shell is open

        Returns:
            TaskResult: connection result
        """
        self.logger.info("Initializing connection: %s", type(self).__name__)
        self.result = self._init_result()

        try:
            if self.system_info.location == SystemLocation.LOCAL:
                self.logger.info("Using local shell")
                self.connection = LocalShell()
            elif self.connection_args is None:
                self._log_failure("No SSH credentials provided", {})
            else:
                self.connection = self._open_ssh(self.connection_args)

            if self.connection is not None:
                self._detect_os_family()
        except SSHConnectionError as exception:
            self._log_event(
                category=EventCategory.SSH,
                description=f"Exception during SSH: {exception}",
                data=exception_event_data(exception),
                priority=EventPriority.CRITICAL,
                console_log=True,
            )
        except Exception as exception:
            self.connection = None
            self._log_failure(f"Exception: {exception}", exception_event_data(exception))

        return self._complete()

    def _open_ssh(self, ssh_params: SSHConnectionParams) -> RemoteShell:
        self.logger.info("Initializing SSH connection to %s", ssh_params.hostname)
        shell = RemoteShell(ssh_params)
        shell.connect_ssh()
        return shell

    def _detect_os_family(self) -> None:
        res = self.connection.run_command("uname -s")
        if res.exit_code == 0 and res.stdout.lower() == "linux":
            self.system_info.os_family = OSFamily.LINUX
        else:
            self._log_event(
                category=EventCategory.OS,
                description="Unable to determine target system OS",
                data={"stdout": res.stdout, "stderr": res.stderr, "exit_code": res.exit_code},
                priority=EventPriority.WARNING,
            )
        self.logger.info("OS family: %s", self.system_info.os_family.name)

    def disconnect(self) -> None:
        if isinstance(self.connection, RemoteShell):
            self.connection.close()
        self.connection = None
