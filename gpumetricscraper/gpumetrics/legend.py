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
from .throttle import DEFAULT_ASIC, get_asic_bit_table, ppt_domains

MAP_INNER_WIDTH = 69

GLOSSARY_HEAD = (
    "GPU metrics quick glossary:",
    "  GFX: GPU graphics/compute engine (the main shader cores).",
    "  SoC: System-on-Chip logic (display/IO/media/control).",
    "  MM: Multimedia/VCN block (video encode/decode).",
    "  UMC: Unified Memory Controller (HBM/VRAM controller).",
    "  HBM: High Bandwidth Memory stacks on-package.",
    "  VR: Voltage regulator (power delivery components).",
    "  UCLK: memory clock (HBM/VRAM).",
    "  VCLK/DCLK: video encode/decode clocks (0 = first instance, 1 = second).",
    "  Edge temp: near the GPU edge sensor (cooler, slower-changing).",
    "  Hotspot temp: hottest on-die sensor (most conservative).",
    "  PPT0..PPT3: package power limiters (ASIC-dependent).",
    "    MI250X/Aldebaran: PPT0 = filtered/average package power,",
    "    PPT1 = raw/spike package power (per AMD SMI docs).",
)

GLOSSARY_TAIL = (
    "    Reference: https://rocmdocs.amd.com/en/latest/reference/rocm-smi.html",
    "  APCC: firmware reliability limiter (adaptive power/current control).",
    "  TDC/EDC: sustained/short-term current limits.",
    "  PROCHOT: platform over-temperature/power alarm.",
    "  GFX Activity Acc: accumulator (firmware-defined units; use deltas).",
    "  MEM Activity Acc: accumulator (firmware-defined units; use deltas).",
    "  N/A: firmware did not report this field (value 0xFFFF).",
)

PACKAGE_MAP = (
    "GPU package",
    "",
    "[GFX/Compute]    [SoC/IO]                 [HBM0][HBM1][HBM2][HBM3]",
    "    |                |                        |   |   |   |",
    "Edge/Hotspot       SoC temp                     HBM temps",
    "    |                |",
    " VR GFX            VR SoC                VR MEM (power delivery)",
    "",
    "PCIe link (width/speed)",
)


def ppt_domains_line(asic: str = DEFAULT_ASIC) -> str:
    """Summarize the package power limiters the ASIC throttle table defines"""
    domains = ppt_domains(get_asic_bit_table(asic))
    if not domains:
        return "  PPT domains present (ASIC map): none detected"
    return "  PPT domains present (ASIC map): " + ", ".join(str(domain) for domain in domains)


def map_border() -> str:
    return "  +" + "-" * (MAP_INNER_WIDTH + 2) + "+"


def map_line(text: str) -> str:
    """Box a line of the package map, clipped or padded to MAP_INNER_WIDTH"""
    return f"  | {text[:MAP_INNER_WIDTH]:<{MAP_INNER_WIDTH}} |"


def build_legend(asic: str = DEFAULT_ASIC) -> str:
    """Build the glossary and package map printed with --legend

    Args:
        asic (str, optional): ASIC id used for the PPT domain line. Defaults to DEFAULT_ASIC.

    Returns:
        str: legend text
    """
    lines = list(GLOSSARY_HEAD)
    lines.append(ppt_domains_line(asic))
    lines.extend(GLOSSARY_TAIL)
    lines.append("")
    lines.append("Approximate physical map (not to scale):")
    lines.append(map_border())
    lines.extend(map_line(text) for text in PACKAGE_MAP)
    lines.append(map_border())
    return "\n".join(lines)
