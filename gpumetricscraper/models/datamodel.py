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
from typing import TypeVar

from pydantic import BaseModel

from gpumetricscraper.utils import get_unique_filename

TDataModel = TypeVar("TDataModel", bound="DataModel")


class DataModel(BaseModel):
    """Data returned by a collector, it can be written to json and read back for analysis"""

    def log_model(self, log_path: str):
        """Write the model to <lower case class name>.json in log_path"""
        file_name = get_unique_filename(log_path, f"{type(self).__name__.lower()}.json")
        with open(os.path.join(log_path, file_name), "w", encoding="utf-8") as model_file:
            model_file.write(self.model_dump_json(indent=2))

    @classmethod
    def import_model(cls: type[TDataModel], model_input: dict | str) -> TDataModel:
        """Load a model from a dict, or from the path of a json file written by log_model

        Args:
            model_input (dict | str): field values or json path

        Raises:
            ValueError: if model_input is neither a dict nor a path

        Returns:
            TDataModel: loaded model
        """
        if isinstance(model_input, str):
            with open(model_input, "r", encoding="utf-8") as model_file:
                model_input = json.load(model_file)

        if not isinstance(model_input, dict):
            raise ValueError(f"Can not import {cls.__name__} from {type(model_input).__name__}")

        return cls.model_validate(model_input)
