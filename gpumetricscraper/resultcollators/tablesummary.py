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
from typing import Optional

from gpumetricscraper.constants import DEFAULT_LOGGER
from gpumetricscraper.models import PluginResult, TaskResult


def gen_str_table(headers: list[str], rows: list[list[str]]) -> str:
    """Render rows as a text table with +---+ borders, each column as wide as its widest cell"""
    lines = [[str(cell) for cell in row] for row in (headers, *rows)]
    widths = [max(len(line[column]) for line in lines) for column in range(len(headers))]
    border = "+" + "+".join("-" * (width + 2) for width in widths) + "+"
    rendered = [
        "| " + " | ".join(cell.ljust(width) for cell, width in zip(line, widths)) + " |"
        for line in lines
    ]
    return "\n".join([border, rendered[0], border, *rendered[1:], border])


class TableSummary:
    """Log the connection and plugin outcome of a run as text tables"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(DEFAULT_LOGGER)

    def collate_results(
        self, plugin_results: list[PluginResult], connection_results: list[TaskResult]
    ) -> str:
        """Log one table of connection results and one of plugin results

        Returns:
            str: the logged tables, empty when both lists are empty
        """
        tables = []
        if connection_results:
            rows = [[res.task, res.status.name, res.message] for res in connection_results]
            tables.append(gen_str_table(["Connection", "Status", "Message"], rows))
        if plugin_results:
            rows = [[res.source, res.status.name, res.message] for res in plugin_results]
            tables.append(gen_str_table(["Plugin", "Status", "Message"], rows))

        summary = "".join(f"\n\n{table}" for table in tables)
        if summary:
            self.logger.info("%s\n", summary)
        return summary
