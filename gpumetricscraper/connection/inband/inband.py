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
import os
from typing import Optional

from pydantic import BaseModel


class CommandArtifact(BaseModel):
    """A shell command run on the target and what it returned, output is stripped"""

    command: str
    stdout: str
    stderr: str
    exit_code: int


class BinaryFileArtifact(BaseModel):
    """Raw bytes of a file read from the target, e.g. one gpu_metrics record"""

    filename: str
    contents: bytes

    def log_model(self, log_path: str, filename: Optional[str] = None) -> str:
        """Write the contents unchanged to log_path

        Args:
            log_path (str): directory to write to
            filename (Optional[str], optional): name to use instead of self.filename.
                Defaults to None.

        Returns:
            str: path of the written file
        """
        path = os.path.join(log_path, filename or self.filename)
        with open(path, "wb") as dump_file:
            dump_file.write(self.contents)
        return path


class InBandConnection(abc.ABC):
    """Shell access to the node whose gpu_metrics are read"""

    @abc.abstractmethod
    def run_command(self, command: str, sudo: bool = False, timeout: int = 300) -> CommandArtifact:
        """Run a shell command

        Args:
            command (str): command line, run through the shell
            sudo (bool, optional): prefix the command with sudo. Defaults to False.
            timeout (int, optional): seconds before the command is abandoned. Defaults to 300.

        Returns:
            CommandArtifact: stripped output and exit code
        """

    @abc.abstractmethod
    def read_file(self, filename: str) -> BinaryFileArtifact:
        """Read a whole file as bytes, sysfs files report a bogus size so read to EOF

        Args:
            filename (str): absolute path on the target

        Raises:
            OSError: if the file can not be opened or read

        Returns:
            BinaryFileArtifact: contents, named after the file's basename
        """
