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
from .fields import FieldValue
from .report import DecodedReport
from .throttle import ThrottleDecode, ThrottleState

INDENT = "  "


def _value_text(name: str, value: FieldValue) -> str:
    if name == "pcie_link_speed":
        return f"{value.text} (raw {value.raw})"
    return value.text


def render_throttle(label: str, decoded: ThrottleDecode) -> list[str]:
    """Render a throttle mask as hex followed by its reasons

    Args:
        label (str): field label
        decoded (ThrottleDecode): decoded mask

    Returns:
        list[str]: output lines
    """
    if decoded.state == ThrottleState.UNAVAILABLE:
        return [f"{INDENT}{label}: {decoded.hex} (unavailable)"]
    return [
        f"{INDENT}{label}: {decoded.hex}",
        f"{INDENT}{label} reasons: {decoded.summary}",
    ]


def render_report(card_id: int, report: DecodedReport) -> str:
    """Render a decoded report as text, one line per field

    Args:
        card_id (int): drm card index
        report (DecodedReport): decoded report

    Returns:
        str: report text
    """
    lines = [
        f"GPU Metrics for Card {card_id}:",
        f"{INDENT}Structure Size: {report.structure_size} bytes",
        f"{INDENT}Format Version: {report.format_version}",
        f"{INDENT}Content Version: {report.content_version}",
    ]
    lines.extend(
        f"{INDENT}{field.label}: {_value_text(field.name, field.value)}" for field in report.fields
    )
    lines.append(
        f"{INDENT}Note: throttle_status is ASIC-dependent; indep_throttle_status is normalized."
    )
    lines.extend(render_throttle("throttle_status", report.throttle_status))
    lines.extend(render_throttle("indep_throttle_status", report.indep_throttle_status))
    return "\n".join(lines)
