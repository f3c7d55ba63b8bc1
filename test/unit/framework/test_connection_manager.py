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
from unittest.mock import MagicMock, patch

import pytest

from gpumetricscraper.connection.inband import (
    CommandArtifact,
    InBandConnectionManager,
    LocalShell,
    RemoteShell,
    SSHConnectionError,
)
from gpumetricscraper.enums import ExecutionStatus, OSFamily, SystemLocation
from gpumetricscraper.models import SystemInfo


def uname(stdout: str, exit_code: int = 0) -> CommandArtifact:
    return CommandArtifact(command="uname -s", stdout=stdout, stderr="", exit_code=exit_code)


@pytest.fixture
def remote_info():
    return SystemInfo(name="node1", location=SystemLocation.REMOTE)


def test_local_connect_detects_linux(logger):
    system_info = SystemInfo(name="local")
    manager = InBandConnectionManager(system_info, logger=logger)

    with patch.object(LocalShell, "run_command", return_value=uname("Linux")):
        result = manager.connect()

    assert result.status == ExecutionStatus.OK
    assert result.task == "InBandConnectionManager"
    assert isinstance(manager.connection, LocalShell)
    assert system_info.os_family == OSFamily.LINUX


def test_local_connect_unknown_os(logger):
    system_info = SystemInfo(name="local")
    manager = InBandConnectionManager(system_info, logger=logger)

    with patch.object(LocalShell, "run_command", return_value=uname("Darwin")):
        result = manager.connect()

    assert result.status == ExecutionStatus.WARNING
    assert result.events[0].category == "OS"
    assert system_info.os_family == OSFamily.UNKNOWN


def test_remote_without_credentials(remote_info, logger):
    manager = InBandConnectionManager(remote_info, logger=logger)
    result = manager.connect()

    assert result.status == ExecutionStatus.EXECUTION_FAILURE
    assert result.events[0].description == "No SSH credentials provided"
    assert manager.connection is None


def test_remote_ssh_failure(remote_info, logger):
    manager = InBandConnectionManager(
        remote_info, logger=logger, connection_args={"hostname": "node1", "username": "u"}
    )
    with patch.object(
        RemoteShell, "connect_ssh", side_effect=SSHConnectionError("SSH authentication failed")
    ):
        result = manager.connect()

    assert result.status == ExecutionStatus.ERROR
    assert result.events[0].category == "SSH"
    assert result.events[0].description == "Exception during SSH: SSH authentication failed"
    assert manager.connection is None


def test_remote_connect_and_disconnect(remote_info, logger):
    manager = InBandConnectionManager(
        remote_info, logger=logger, connection_args={"hostname": "node1", "username": "u"}
    )
    with (
        patch.object(RemoteShell, "connect_ssh"),
        patch.object(RemoteShell, "run_command", return_value=uname("Linux")),
        patch.object(RemoteShell, "close") as mock_close,
    ):
        result = manager.connect()
        assert result.status == ExecutionStatus.OK
        assert isinstance(manager.connection, RemoteShell)

        manager.disconnect()

    mock_close.assert_called_once()
    assert manager.connection is None


def test_connect_runs_hooks(logger):
    hook = MagicMock()
    manager = InBandConnectionManager(SystemInfo(name="local"), logger=logger, task_hooks=[hook])

    with patch.object(LocalShell, "run_command", return_value=uname("Linux")):
        result = manager.connect()

    hook.process_result.assert_called_once_with(result)
