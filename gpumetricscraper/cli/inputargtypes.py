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
import argparse
import json
from typing import Callable, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

TModel = TypeVar("TModel", bound=BaseModel)


def log_path_arg(log_path: str) -> Optional[str]:
    """Log path arg, 'none' in any case disables file logging"""
    return None if log_path.lower() == "none" else log_path


def card_index_arg(str_input: str) -> int:
    """drm card index arg

    Raises:
        argparse.ArgumentTypeError: if the input is not a non negative decimal integer

    Returns:
        int: card index
    """
    if not (str_input.isascii() and str_input.isdigit()):
        raise argparse.ArgumentTypeError(f"Invalid card index: {str_input}")
    return int(str_input)


def json_arg(json_path: str) -> dict:
    """Load a json object from a file

    Raises:
        argparse.ArgumentTypeError: if the file is missing, is not json, or does not hold an
            object

    Returns:
        dict: loaded object
    """
    try:
        with open(json_path, "r", encoding="utf-8") as input_file:
            data = json.load(input_file)
    except FileNotFoundError as e:
        raise argparse.ArgumentTypeError(f"Unable to find file: {json_path}") from e
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"File {json_path} contains invalid JSON") from e

    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError(f"File {json_path} must contain a JSON object")
    return data


def model_file_arg(model: Type[TModel]) -> Callable[[str], TModel]:
    """Build an arg type that loads a json file into a pydantic model

    Args:
        model (Type[TModel]): model class

    Returns:
        Callable[[str], TModel]: type function for argparse
    """

    def load(file_path: str) -> TModel:
        try:
            return model.model_validate(json_arg(file_path))
        except ValidationError as e:
            raise argparse.ArgumentTypeError(
                f"Validation errors when processing {file_path}: {e.errors()}"
            ) from e

    # argparse names the type function in its error messages
    load.__name__ = model.__name__
    return load
