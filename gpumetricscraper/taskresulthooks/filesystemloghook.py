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
import json
import os
from typing import Optional

from gpumetricscraper.connection.inband.inband import BinaryFileArtifact
from gpumetricscraper.interfaces.taskhook import TaskHook
from gpumetricscraper.models import DataModel, TaskResult
from gpumetricscraper.utils import get_unique_filename, pascal_to_snake


class FileSystemLogHook(TaskHook):
    """Mirror each task result to <log_base_path>/<plugin>/<task>/

    The directory gets result.json, events.json, the raw gpu_metrics dumps, the commands that
    were run and the collected data model. Dumps never overwrite an earlier file of the same
    name.
    """

    def __init__(self, log_base_path: str) -> None:
        self.log_base_path = log_base_path

    def _task_dir(self, task_result: TaskResult) -> str:
        names = [pascal_to_snake(name) for name in (task_result.parent, task_result.task) if name]
        task_dir = os.path.join(self.log_base_path, *names)
        os.makedirs(task_dir, exist_ok=True)
        return task_dir

    @staticmethod
    def _write_json(path: str, payload) -> str:
        with open(path, "w", encoding="utf-8") as json_file:
            json.dump(payload, json_file, indent=2)
        return path

    def process_result(
        self, task_result: TaskResult, data: Optional[DataModel] = None, **kwargs
    ) -> None:
        task_dir = self._task_dir(task_result)
        written = [
            self._write_json(
                os.path.join(task_dir, "result.json"),
                task_result.model_dump(mode="json", exclude={"artifacts", "events"}),
            )
        ]

        commands = []
        for artifact in task_result.artifacts:
            if isinstance(artifact, BinaryFileArtifact):
                written.append(
                    artifact.log_model(task_dir, get_unique_filename(task_dir, artifact.filename))
                )
            else:
                commands.append(artifact.model_dump(mode="json"))

        if commands:
            name = get_unique_filename(task_dir, "command_artifacts.json")
            written.append(self._write_json(os.path.join(task_dir, name), commands))

        if task_result.events:
            name = get_unique_filename(task_dir, "events.json")
            events = [
                event.model_dump(mode="json", exclude_none=True) for event in task_result.events
            ]
            written.append(self._write_json(os.path.join(task_dir, name), events))

        if data is not None:
            data.log_model(task_dir)

        task_result.artifact_file_paths.extend(written)
