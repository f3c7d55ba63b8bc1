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
from gpumetricscraper.gpumetrics import (
    GpuMetricsRecord,
    ThrottleVocabulary,
    build_legend,
    build_report,
    decode_bitmask,
    render_report,
    render_throttle,
)
from gpumetricscraper.gpumetrics.legend import MAP_INNER_WIDTH, map_line, ppt_domains_line
from gpumetricscraper.gpumetrics.throttle import ALDEBARAN_THROTTLE_BITS, INDEP_THROTTLER_BITS


def test_render_report(metrics_values):
    metrics_values.update(throttle_status=0b11, indep_throttle_status=0xFFFFFFFFFFFFFFFF)
    text = render_report(2, build_report(GpuMetricsRecord(**metrics_values)))
    lines = text.splitlines()

    assert lines[:4] == [
        "GPU Metrics for Card 2:",
        "  Structure Size: 120 bytes",
        "  Format Version: 1",
        "  Content Version: 3",
    ]
    assert "  Temperature (Edge): 45 C" in lines
    assert "  Average MM Activity: N/A" in lines
    assert "  Average Socket Power: 220 W" in lines
    assert "  PCIe Link Speed: 16.0 GT/s (raw 160)" in lines
    assert "  Temperature (HBM2): N/A" in lines
    assert "  Voltage (Memory): 1200 mV" in lines
    assert lines[-4].startswith("  Note: throttle_status is ASIC-dependent")
    assert lines[-3:] == [
        "  throttle_status: 0x00000003",
        "  throttle_status reasons: PPT0 (pkg power (avg/filtered)), "
        "PPT1 (pkg power (raw/spike))",
        "  indep_throttle_status: 0xffffffffffffffff (unavailable)",
    ]


def test_render_report_field_order(metrics_record):
    lines = render_report(0, build_report(metrics_record)).splitlines()
    edge = lines.index("  Temperature (Edge): 45 C")
    hotspot = lines.index("  Temperature (Hotspot): 60 C")
    fan = lines.index("  Fan Speed: N/A")
    assert edge < hotspot < fan


def test_render_throttle_none():
    decoded = decode_bitmask(0, INDEP_THROTTLER_BITS, ThrottleVocabulary.ASIC_NORMALIZED)
    assert render_throttle("indep_throttle_status", decoded) == [
        "  indep_throttle_status: 0x0000000000000000",
        "  indep_throttle_status reasons: none",
    ]


def test_render_throttle_reasons():
    decoded = decode_bitmask(1 << 19, ALDEBARAN_THROTTLE_BITS, ThrottleVocabulary.ASIC_SPECIFIC)
    assert render_throttle("throttle_status", decoded) == [
        "  throttle_status: 0x00080000",
        "  throttle_status reasons: APCC (reliability limit)",
    ]


def test_ppt_domains_line():
    assert ppt_domains_line() == (
        "  PPT domains present (ASIC map): "
        "PPT0 (pkg power (avg/filtered)), PPT1 (pkg power (raw/spike))"
    )


def test_map_line():
    assert map_line("HBM") == f"  | {'HBM'.ljust(MAP_INNER_WIDTH)} |"
    assert len(map_line("x" * 100)) == MAP_INNER_WIDTH + 6


def test_build_legend():
    lines = build_legend().splitlines()
    assert lines[0] == "GPU metrics quick glossary:"
    assert any(line.startswith("  PPT domains present (ASIC map): PPT0") for line in lines)
    assert "  N/A: firmware did not report this field (value 0xFFFF)." in lines
    assert "Approximate physical map (not to scale):" in lines

    start = lines.index("Approximate physical map (not to scale):")
    box = lines[start + 1 :]
    assert box[0] == box[-1] == "  +" + "-" * (MAP_INNER_WIDTH + 2) + "+"
    assert len(box[0]) == 75
    assert all(len(line) == 75 for line in box[1:-1])
    assert box[1] == map_line("GPU package")
