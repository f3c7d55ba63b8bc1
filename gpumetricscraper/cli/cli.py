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
import datetime
import logging
import os
import platform
import sys
from typing import Optional

from gpumetricscraper.constants import DEFAULT_LOGGER
from gpumetricscraper.enums import ExecutionStatus, SystemLocation
from gpumetricscraper.gpumetrics import (
    ASIC_THROTTLE_TABLES,
    DEFAULT_ASIC,
    build_legend,
    render_report,
)
from gpumetricscraper.models import SystemInfo
from gpumetricscraper.plugins.inband.gpu_metrics import (
    GpuMetricsAnalyzerArgs,
    GpuMetricsCollectorArgs,
    GpuMetricsPlugin,
)
from gpumetricscraper.plugins.inband.gpu_metrics.collector_args import SYS_CLASS_DRM_DIR
from gpumetricscraper.resultcollators.tablesummary import TableSummary
from gpumetricscraper.taskresulthooks import FileSystemLogHook

from .constants import META_VAR_MAP
from .inputargtypes import card_index_arg, json_arg, log_path_arg, model_file_arg


def build_parser() -> argparse.ArgumentParser:
    """Build an argument parser

    Returns:
        argparse.ArgumentParser: parser for the gpu metrics CLI
    """
    parser = argparse.ArgumentParser(
        description="Decode amdgpu gpu_metrics and throttle status",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--all",
        dest="card",
        action="store_const",
        const=None,
        help="Scan all cards under the drm class directory (default)",
    )

    parser.add_argument(
        "-c",
        "--card",
        dest="card",
        type=card_index_arg,
        default=None,
        help="Show only card N",
        metavar="N",
    )

    parser.add_argument(
        "--legend",
        action="store_true",
        help="Print glossary and ASCII map, then continue",
    )

    parser.add_argument(
        "--asic",
        type=str.lower,
        choices=sorted(ASIC_THROTTLE_TABLES),
        default=DEFAULT_ASIC,
        help="ASIC family used to decode throttle_status",
    )

    parser.add_argument(
        "--drm-path",
        default=SYS_CLASS_DRM_DIR,
        help="drm class directory to scan for gpu_metrics",
        metavar=META_VAR_MAP[str],
    )

    parser.add_argument(
        "--analyze",
        action="store_true",
        help="Check temperatures and throttle reasons after decoding",
    )

    parser.add_argument(
        "--analysis-args",
        type=model_file_arg(GpuMetricsAnalyzerArgs),
        required=False,
        help="Path to analyzer args json, implies --analyze",
        metavar=META_VAR_MAP[str],
    )

    parser.add_argument(
        "--sys-name", default=platform.node(), help="System name", metavar=META_VAR_MAP[str]
    )

    parser.add_argument(
        "--sys-location",
        type=str.upper,
        choices=[e.name for e in SystemLocation],
        default="LOCAL",
        help="Location of target system",
    )

    parser.add_argument(
        "--system-config",
        type=model_file_arg(SystemInfo),
        required=False,
        help="Path to system config json",
        metavar=META_VAR_MAP[str],
    )

    parser.add_argument(
        "--connection-config",
        type=json_arg,
        required=False,
        help="Path to ssh connection config json",
        metavar=META_VAR_MAP[str],
    )

    parser.add_argument(
        "--log-path",
        default=None,
        type=log_path_arg,
        help="Local path for task logs and gpu_metrics dumps, 'none' disables file logging",
        metavar=META_VAR_MAP[str],
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=logging._nameToLevel,
        help="Change python log level",
    )

    return parser


LOG_FORMAT = "%(asctime)25s %(levelname)10s %(name)25s | %(message)s"


def setup_logger(log_level: str = "INFO", log_path: Optional[str] = None) -> logging.Logger:
    """Configure the root logger for a CLI run, to stdout and to log_path when given

    Returns:
        logging.Logger: scraper logger
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(stream=sys.stdout)]
    if log_path:
        handlers.append(
            logging.FileHandler(
                os.path.join(log_path, "gpumetricscraper.log"), mode="wt", encoding="utf-8"
            )
        )

    logging.basicConfig(
        level=logging.getLevelName(log_level),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S %Z",
        handlers=handlers,
        force=True,
    )
    # paramiko logs every transport step at INFO
    logging.getLogger("paramiko").setLevel(logging.ERROR)
    return logging.getLogger(DEFAULT_LOGGER)


def get_system_info(args: argparse.Namespace) -> SystemInfo:
    """Target system from --system-config, overridden by --sys-name and --sys-location

    Raises:
        argparse.ArgumentTypeError: if the system location is unknown

    Returns:
        SystemInfo: target system
    """
    system_info = args.system_config or SystemInfo()

    if args.sys_name:
        system_info.name = args.sys_name

    if args.sys_location:
        try:
            system_info.location = SystemLocation[args.sys_location]
        except KeyError as e:
            raise argparse.ArgumentTypeError(
                f"Invalid system location: {args.sys_location}"
            ) from e

    return system_info


def get_exit_code(plugin: GpuMetricsPlugin, analyzed: bool) -> int:
    """Exit code for a run, a missing requested card or a failed connection is a failure,
    finding no gpu_metrics files at all is not

    Args:
        plugin (GpuMetricsPlugin): plugin after run
        analyzed (bool): analysis was requested

    Returns:
        int: 0 on success, 1 on failure
    """
    if plugin.connection_manager.result.status >= ExecutionStatus.ERROR:
        return 1

    if plugin.data is None and plugin.collection_result.status >= ExecutionStatus.ERROR:
        return 1

    if analyzed and plugin.analysis_result.status >= ExecutionStatus.ERROR:
        return 1

    return 0


def main(arg_input: Optional[list[str]] = None):
    if arg_input is None:
        arg_input = sys.argv[1:]

    parser = build_parser()
    parsed_args = parser.parse_args(arg_input)

    if parsed_args.log_path:
        log_path = os.path.join(
            parsed_args.log_path,
            f"gpu_metrics_logs_{datetime.datetime.now().strftime('%Y_%m_%d-%I_%M_%S_%p')}",
        )
        os.makedirs(log_path)
    else:
        log_path = None

    logger = setup_logger(parsed_args.log_level, log_path)
    if log_path:
        logger.info("Log path: %s", log_path)

    if parsed_args.legend:
        print(build_legend(parsed_args.asic))  # noqa: T201

    analyze = parsed_args.analyze or parsed_args.analysis_args is not None

    plugin = GpuMetricsPlugin(
        system_info=get_system_info(parsed_args),
        logger=logger,
        connection_args=parsed_args.connection_config,
        task_hooks=[FileSystemLogHook(log_base_path=log_path)] if log_path else None,
    )

    try:
        result = plugin.run(
            collection=True,
            analysis=analyze,
            collection_args=GpuMetricsCollectorArgs(
                card=parsed_args.card, drm_path=parsed_args.drm_path, asic=parsed_args.asic
            ),
            analysis_args=parsed_args.analysis_args,
        )
    except KeyboardInterrupt:
        logger.info("Received Ctrl+C. Shutting down...")
        sys.exit(130)

    if plugin.data:
        for card_id, report in plugin.data.reports().items():
            print(f"\n{render_report(card_id, report)}")  # noqa: T201

    TableSummary(logger=logger).collate_results([result], [plugin.connection_manager.result])

    sys.exit(get_exit_code(plugin, analyze))


if __name__ == "__main__":
    main()
