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
from typing import Optional, Union

from paramiko import PKey
from pydantic import BaseModel, ConfigDict, Field, SecretStr
from pydantic.networks import IPvAnyAddress


class SSHConnectionParams(BaseModel):
    """Login for a remote node, usually loaded from the --connection-config json

    Without password, key_filename or pkey paramiko falls back to the ssh agent and the
    default keys in ~/.ssh.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    hostname: Union[IPvAnyAddress, str]
    username: str
    password: Optional[SecretStr] = None
    key_filename: Optional[str] = None
    pkey: Optional[PKey] = None
    port: int = Field(default=22, gt=0, lt=65536)
    connect_timeout: float = Field(default=10, gt=0)

    @property
    def sudo_password(self) -> Optional[str]:
        """Password to feed to sudo -S, None for root and for key based logins"""
        if self.username == "root" or self.password is None:
            return None
        return self.password.get_secret_value()

    def connect_kwargs(self) -> dict:
        """Keyword arguments for paramiko.SSHClient.connect"""
        return {
            "hostname": str(self.hostname),
            "port": self.port,
            "username": self.username,
            "password": self.password.get_secret_value() if self.password else None,
            "key_filename": self.key_filename,
            "pkey": self.pkey,
            "timeout": self.connect_timeout,
            "look_for_keys": True,
        }
