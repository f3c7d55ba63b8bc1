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
import posixpath
import socket

import paramiko
from paramiko.ssh_exception import AuthenticationException, BadHostKeyException, SSHException

from .inband import BinaryFileArtifact, CommandArtifact, InBandConnection
from .sshparams import SSHConnectionParams

# checked in order, subclasses before the SSHException they derive from
CONNECT_ERROR_MESSAGES = (
    (socket.timeout, "SSH request timed out"),
    (socket.gaierror, "Hostname could not be resolved"),
    (AuthenticationException, "SSH authentication failed"),
    (BadHostKeyException, "Unable to verify the server host key"),
    (ConnectionResetError, "Connection reset by peer"),
    (SSHException, "Unable to establish SSH connection"),
    (EOFError, "Connection closed during the SSH handshake"),
)

# exit code reported for a command that hit its timeout, as coreutils timeout does
TIMEOUT_EXIT_CODE = 124


class SSHConnectionError(Exception):
    """The ssh session to the remote node could not be opened"""


class RemoteShell(InBandConnection):
    """Commands over an ssh session and file reads over sftp"""

    def __init__(self, ssh_params: SSHConnectionParams) -> None:
        self.ssh_params = ssh_params
        self.client = paramiko.SSHClient()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())

    def connect_ssh(self) -> None:
        """Open the session

        Raises:
            SSHConnectionError: if paramiko or the socket layer refused the connection
        """
        try:
            self.client.connect(
                **self.ssh_params.connect_kwargs(), auth_timeout=60, banner_timeout=200
            )
        except (OSError, SSHException, EOFError) as e:
            for error_type, message in CONNECT_ERROR_MESSAGES:
                if isinstance(e, error_type):
                    raise SSHConnectionError(message) from e
            raise SSHConnectionError(f"Unable to connect to {self.ssh_params.hostname}: {e}") from e

    def close(self) -> None:
        self.client.close()

    def run_command(self, command: str, sudo: bool = False, timeout: int = 300) -> CommandArtifact:
        sudo_password = self.ssh_params.sudo_password if sudo else None
        if sudo_password:
            command = f"sudo -S -p '' {command}"
        elif sudo:
            command = f"sudo {command}"

        try:
            stdin, stdout, stderr = self.client.exec_command(command, timeout=timeout)
            if sudo_password:
                stdin.write(f"{sudo_password}\n")
                stdin.flush()
                stdin.channel.shutdown_write()

            out = stdout.read().decode("utf-8", errors="replace")
            err = stderr.read().decode("utf-8", errors="replace")
            exit_code = stdout.channel.recv_exit_status()
        except TimeoutError:
            out, err, exit_code = "", "Command timed out", TIMEOUT_EXIT_CODE

        return CommandArtifact(
            command=command, stdout=out.strip(), stderr=err.strip(), exit_code=exit_code
        )

    def read_file(self, filename: str) -> BinaryFileArtifact:
        with self.client.open_sftp() as sftp, sftp.open(filename, "rb") as remote_file:
            contents = remote_file.read()
        return BinaryFileArtifact(filename=posixpath.basename(filename), contents=contents)
