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
import os
import re
import traceback
from enum import Enum

# position before each capital that follows a lower case letter or digit
_WORD_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


class AutoNameStrEnum(Enum):
    """Enum whose auto() values are the member names"""

    @staticmethod
    def _generate_next_value_(name, start, count, last_values):
        return name


def exception_event_data(exception: Exception, with_traceback: bool = True) -> dict:
    """Describe an exception for the data field of an event

    Args:
        exception (Exception): caught exception
        with_traceback (bool, optional): include the exception type and formatted traceback,
            otherwise only the message, cut to 1000 characters. Defaults to True.

    Returns:
        dict: event data
    """
    if not with_traceback:
        return {"details": str(exception)[:1000]}
    return {
        "exception_type": type(exception).__name__,
        "traceback": traceback.format_tb(exception.__traceback__),
    }


def get_unique_filename(directory: str, filename: str) -> str:
    """Pick a name that is not taken in directory, card0.bin then card0(1).bin, card0(2).bin

    Args:
        directory (str): target directory
        filename (str): preferred name

    Returns:
        str: free file name
    """
    stem, ext = os.path.splitext(filename)
    candidate = filename
    index = 0
    while os.path.exists(os.path.join(directory, candidate)):
        index += 1
        candidate = f"{stem}({index}){ext}"
    return candidate


def pascal_to_snake(name: str) -> str:
    """GpuMetricsCollector -> gpu_metrics_collector"""
    return _WORD_BOUNDARY_RE.sub("_", name).lower()
