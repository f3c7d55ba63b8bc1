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
from enum import auto, unique

from gpumetricscraper.utils import AutoNameStrEnum


@unique
class EventCategory(AutoNameStrEnum):
    """Area an event belongs to
    - SSH
        remote session could not be opened
    - OS
        target operating system could not be identified
    - PLATFORM
        board temperatures outside the configured limits
    - COMPUTE
        active throttle reasons from throttle_status or indep_throttle_status
    - SW_DRIVER
        amdgpu sysfs problems, missing cards or short gpu_metrics reads
    - RUNTIME
        the scraper itself failed, bad arguments or an unexpected exception
    """

    SSH = auto()
    OS = auto()
    PLATFORM = auto()
    COMPUTE = auto()
    SW_DRIVER = auto()
    RUNTIME = auto()
