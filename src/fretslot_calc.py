#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
fretslot_calc.py
================

Fret slot calculator & fabrication template generator
-----------------------------------------------------
This script computes 12-TET fret-slot positions and the tapered fretboard
outline for a single-scale instrument neck, and emits:
  • Markdown (measurement table to stdout),
  • CSV (positions, spacings, widths),
  • JSON (full geometry, millimeters),
  • SVG (1:1 printable template) or DXF (2D LINE entities) drawings.

COORDINATES & CONVENTIONS
-------------------------
• Every length is canonicalized to millimeters before any geometry is
  computed. --unit only controls how values are read and displayed.

• Fret distances from the nut are built iteratively: the remaining string
  length is divided by the 12th root of 2 once per fret,
    L_0 = scale,  L_n = L_(n-1) / 2**(1/12),  d(n) = scale - L_n
  The bridge sits at d = scale exactly.

• Fretboard width is interpolated along the nut→bridge axis, either
  linearly between nut and bridge width, or in two linear segments through
  a reference width at scale/2 (nominal 12th fret) when --reference-width
  is given.

• Drawings use the nut center as origin, x along the scale, y across the
  board, symmetric about y = 0.

• Strings keep a fixed edge padding (4.3mm for a 6-string, scaled by string
  count) at the nut and sit at --string-spacing at the bridge, so they fan
  slightly when nut and bridge widths differ.

USAGE EXAMPLES
--------------
# Strat-like neck → Markdown table
python fretslot_calc.py --scale 648mm --frets 22 --nut-width 42mm --bridge-width 56mm

# Two-segment taper through a 51.5mm 12th-fret width → SVG + DXF
python fretslot_calc.py --scale 25.5in --frets 22 --nut-width 42mm   --reference-width 51.5mm --name "Fender Stratocaster"   --svg out/ --dxf out/board.dxf
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import math
import os
import re
from dataclasses import asdict, dataclass
from typing import List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

log = logging.getLogger("fretslot_calc")

IN_PER_MM = 1.0 / 25.4
MM_PER_IN = 25.4

UNITS = ("mm", "inches")

# Each fret divides the remaining vibrating length by the 12th root of 2.
FRET_RATIO = 2.0 ** (1.0 / 12.0)

# Edge padding between the outer strings and the board edge on a 6-string.
REFERENCE_EDGE_PADDING_MM = 4.3
REFERENCE_STRING_COUNT = 6

DEFAULT_FRET_THICKNESS_MM = 2.0
DEFAULT_STRING_SPACING_MM = 10.5

APP_TITLE = "Fret Slot Calculator"
SVG_PADDING_MM = 20.0
DXF_OUTLINE_LAYER = "0"
DXF_STRING_LAYER = "1"

Segment = Tuple[float, float, float, float]


class ConfigurationError(ValueError):
    """Raised for instrument parameters that cannot describe a neck."""


class LayoutDegradedWarning(UserWarning):
    """Raised when string offsets cannot be laid out from the given parameters."""


# ----------------------------------------------------------------------
# Units
# ----------------------------------------------------------------------


def mm_to_inches(mm: float) -> float:
    return mm / MM_PER_IN


def inches_to_mm(inches: float) -> float:
    return inches * MM_PER_IN


def format_measurement(value, units: str) -> str:
    """Render a millimeter value for display, "12.34mm" or "0.4858\"".

    Missing, non-numeric and non-finite values render as zero.
    """
    try:
        num = float(value)
    except (TypeError, ValueError):
        num = float("nan")
    if not math.isfinite(num):
        num = 0.0
    if units == "inches":
        return f'{mm_to_inches(num):.4f}"'
    return f"{num:.2f}mm"


def parse_length_with_unit(text: str, default_unit: str) -> Tuple[float, str]:
    t = text.strip().lower()
    inch_suffixes = ("inches", "inch", "in", '"')
    mm_suffixes = ("mm",)
    unit = default_unit
    for suf in inch_suffixes:
        if t.endswith(suf):
            t, unit = t[: -len(suf)].strip(), "inches"
            break
    else:
        for suf in mm_suffixes:
            if t.endswith(suf):
                t, unit = t[: -len(suf)].strip(), "mm"
                break
    try:
        return float(t), unit
    except ValueError as exc:
        raise ConfigurationError(f"Invalid length: {text!r}") from exc


def to_mm(value: float, unit: str) -> float:
    if unit == "mm":
        return value
    if unit == "inches":
        return inches_to_mm(value)
    raise ConfigurationError(f"Unsupported unit: {unit!r} (expected one of {UNITS})")


def parse_len_mm(text: str, unit: str) -> float:
    v, u = parse_length_with_unit(text, unit)
    return to_mm(v, u)


# ----------------------------------------------------------------------
# Data model
# ----------------------------------------------------------------------


def _require(ok: bool, message: str) -> None:
    if not ok:
        raise ConfigurationError(message)


def _is_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _is_count(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class InstrumentSpec:
    """Instrument parameters. All lengths are millimeters; units is display only."""

    scale_length_mm: float
    num_frets: int
    neck_width_mm: float
    bridge_width_mm: float
    reference_fret_width_mm: float = 0.0
    use_reference_width: bool = False
    fret_thickness_mm: float = DEFAULT_FRET_THICKNESS_MM
    strings_number: int = REFERENCE_STRING_COUNT
    string_spacing_mm: float = DEFAULT_STRING_SPACING_MM
    units: str = "mm"

    def __post_init__(self):
        _require(self.units in UNITS, f"units must be one of {UNITS}, got {self.units!r}")
        _require(
            _is_number(self.scale_length_mm) and self.scale_length_mm > 0,
            f"Scale length must be > 0 (got {self.scale_length_mm!r}).",
        )
        _require(
            _is_count(self.num_frets) and self.num_frets >= 1,
            f"Number of frets must be >= 1 (got {self.num_frets!r}).",
        )
        for field_name in ("neck_width_mm", "bridge_width_mm", "fret_thickness_mm"):
            value = getattr(self, field_name)
            _require(
                _is_number(value) and value > 0,
                f"{field_name} must be > 0 (got {value!r}).",
            )
        _require(
            _is_number(self.reference_fret_width_mm)
            and self.reference_fret_width_mm >= 0,
            f"reference_fret_width_mm must be >= 0 (got {self.reference_fret_width_mm!r}).",
        )
        _require(
            _is_count(self.strings_number) and self.strings_number >= 2,
            f"Number of strings must be >= 2 (got {self.strings_number!r}).",
        )
        # zero spacing is accepted here and handled as a degraded string layout
        _require(
            _is_number(self.string_spacing_mm) and self.string_spacing_mm >= 0,
            f"string_spacing_mm must be >= 0 (got {self.string_spacing_mm!r}).",
        )

    @property
    def uses_reference_width(self) -> bool:
        return bool(self.use_reference_width) and self.reference_fret_width_mm > 0

    @classmethod
    def from_units(
        cls,
        units: str,
        scale_length: float,
        num_frets: int,
        neck_width: float,
        bridge_width: float,
        reference_fret_width: float = 0.0,
        use_reference_width: bool = False,
        fret_thickness: Optional[float] = None,
        strings_number: int = REFERENCE_STRING_COUNT,
        string_spacing: Optional[float] = None,
    ) -> "InstrumentSpec":
        """Build a spec from lengths given in ``units``.

        Omitted fret thickness and string spacing fall back to the millimeter
        defaults regardless of ``units``.
        """
        if units not in UNITS:
            raise ConfigurationError(f"units must be one of {UNITS}, got {units!r}")

        def mm(value):
            return to_mm(value, units) if _is_number(value) else value

        return cls(
            scale_length_mm=mm(scale_length),
            num_frets=num_frets,
            neck_width_mm=mm(neck_width),
            bridge_width_mm=mm(bridge_width),
            reference_fret_width_mm=mm(reference_fret_width),
            use_reference_width=use_reference_width,
            fret_thickness_mm=(
                DEFAULT_FRET_THICKNESS_MM if fret_thickness is None else mm(fret_thickness)
            ),
            strings_number=strings_number,
            string_spacing_mm=(
                DEFAULT_STRING_SPACING_MM if string_spacing is None else mm(string_spacing)
            ),
            units=units,
        )


@dataclass(frozen=True)
class FretRecord:
    position: int  # 0 = nut, num_frets + 1 = bridge
    distance_from_nut_mm: float
    width_mm: float


@dataclass(frozen=True)
class StringLayout:
    nut_offsets_mm: Tuple[float, ...]
    bridge_offsets_mm: Tuple[float, ...]
    nut_spacing_mm: float
    degraded: bool = False


@dataclass(frozen=True)
class FretboardGeometry:
    spec: InstrumentSpec
    frets: Tuple[FretRecord, ...]
    strings: StringLayout


# ----------------------------------------------------------------------
# Fret geometry
# ----------------------------------------------------------------------


def width_at_distance(
    distance: float,
    scale_length: float,
    neck_width: float,
    bridge_width: float,
    reference_width: float = 0.0,
    use_reference_width: bool = False,
) -> float:
    """Fretboard width at ``distance`` from the nut.

    With a reference width the taper is two linear segments pivoting at
    scale_length / 2. The pivot is the nominal 12th fret, not the computed one.
    """
    if use_reference_width and reference_width > 0:
        pivot = scale_length / 2.0
        if distance <= pivot:
            return neck_width + (reference_width - neck_width) * (distance / pivot)
        t = (distance - pivot) / (scale_length - pivot)
        return reference_width + (bridge_width - reference_width) * t
    return neck_width + (bridge_width - neck_width) * (distance / scale_length)


def fret_positions(spec: InstrumentSpec) -> List[FretRecord]:
    scale = spec.scale_length_mm

    def width(d: float) -> float:
        return width_at_distance(
            d,
            scale,
            spec.neck_width_mm,
            spec.bridge_width_mm,
            spec.reference_fret_width_mm,
            spec.use_reference_width,
        )

    records = [FretRecord(0, 0.0, spec.neck_width_mm)]
    remaining = scale
    for n in range(1, spec.num_frets + 1):
        remaining = remaining / FRET_RATIO
        d = scale - remaining
        records.append(FretRecord(n, d, width(d)))
    records.append(FretRecord(spec.num_frets + 1, scale, spec.bridge_width_mm))
    log.debug(
        "Computed %d frets over %.3fmm (%s taper)",
        spec.num_frets,
        scale,
        "two-segment" if spec.uses_reference_width else "linear",
    )
    return records


def fret_spacings(frets: Sequence[FretRecord]) -> List[float]:
    out = [0.0]
    for i in range(1, len(frets)):
        out.append(frets[i].distance_from_nut_mm - frets[i - 1].distance_from_nut_mm)
    return out


# ----------------------------------------------------------------------
# String layout
# ----------------------------------------------------------------------


def string_edge_padding(strings_number: int) -> float:
    return REFERENCE_EDGE_PADDING_MM * (strings_number / REFERENCE_STRING_COUNT)


def estimate_bridge_width(string_spacing: float, strings_number: int) -> float:
    """Suggested bridge width: string span plus edge padding on both sides."""
    span = string_spacing * (strings_number - 1)
    return span + 2.0 * string_edge_padding(strings_number)


def _centered(count: int, spacing: float) -> Tuple[float, ...]:
    start = -(spacing * (count - 1)) / 2.0
    return tuple(start + i * spacing for i in range(count))


def _strictly_increasing(values: Sequence[float]) -> bool:
    return all(math.isfinite(v) for v in values) and all(
        a < b for a, b in zip(values, values[1:])
    )


def string_layout(
    strings_number: int, string_spacing: float, neck_width: float
) -> StringLayout:
    """Lateral string offsets at the nut and at the bridge, centered on 0.

    Raises LayoutDegradedWarning when the offsets would not be strictly
    increasing, e.g. zero spacing or a nut narrower than its edge padding.
    """
    if strings_number < 2:
        raise ConfigurationError(
            f"String spacing is undefined for {strings_number} string(s); need >= 2."
        )
    padding = string_edge_padding(strings_number)
    nut_spacing = (neck_width - 2.0 * padding) / (strings_number - 1)
    nut = _centered(strings_number, nut_spacing)
    bridge = _centered(strings_number, string_spacing)
    if not _strictly_increasing(nut):
        raise LayoutDegradedWarning(
            f"Nut width {neck_width!r}mm leaves no room for {strings_number} strings "
            f"inside {padding:.2f}mm edge padding."
        )
    if not _strictly_increasing(bridge):
        raise LayoutDegradedWarning(
            f"Bridge string spacing {string_spacing!r}mm cannot separate strings."
        )
    return StringLayout(nut, bridge, nut_spacing)


def fallback_string_layout(strings_number: int, bridge_width: float) -> StringLayout:
    """Straight, evenly spaced strings across 80% of the bridge width."""
    top = -bridge_width / 2.0 * 0.8
    bottom = bridge_width / 2.0 * 0.8
    step = (bottom - top) / ((strings_number - 1) or 1)
    offsets = tuple(top + i * step for i in range(strings_number))
    return StringLayout(offsets, offsets, step, degraded=True)


def resolve_string_layout(spec: InstrumentSpec) -> StringLayout:
    try:
        return string_layout(
            spec.strings_number, spec.string_spacing_mm, spec.neck_width_mm
        )
    except LayoutDegradedWarning as exc:
        log.warning("String layout degraded, drawing straight strings instead: %s", exc)
        return fallback_string_layout(spec.strings_number, spec.bridge_width_mm)


def compute_geometry(spec: InstrumentSpec) -> FretboardGeometry:
    return FretboardGeometry(
        spec=spec,
        frets=tuple(fret_positions(spec)),
        strings=resolve_string_layout(spec),
    )


# ----------------------------------------------------------------------
# Document emitters
# ----------------------------------------------------------------------


def _num(value: float) -> str:
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def suggested_basename(name: str, spec: InstrumentSpec) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-") or "fretboard"
    scale = format_measurement(spec.scale_length_mm, spec.units).replace('"', "in")
    return f"{slug}-{scale}"


def outline_path(frets: Sequence[FretRecord]) -> str:
    """Closed outline: left edge nut→bridge, across the bridge, right edge back."""
    nut, bridge = frets[0], frets[-1]
    parts = [f"M 0 {_num(-nut.width_mm / 2.0)}"]
    for f in frets:
        parts.append(f"L {_num(f.distance_from_nut_mm)} {_num(-f.width_mm / 2.0)}")
    parts.append(f"L {_num(bridge.distance_from_nut_mm)} {_num(bridge.width_mm / 2.0)}")
    for f in reversed(frets[:-1]):
        parts.append(f"L {_num(f.distance_from_nut_mm)} {_num(f.width_mm / 2.0)}")
    parts.append("Z")
    return " ".join(parts)


def svg_document(
    geometry: FretboardGeometry, name: str = "Custom", include_strings: bool = True
) -> str:
    spec = geometry.spec
    frets = geometry.frets
    scale = spec.scale_length_mm
    max_width = max(f.width_mm for f in frets)
    doc_w = scale + 2.0 * SVG_PADDING_MM
    doc_h = max_width + 2.0 * SVG_PADDING_MM
    scale_text = format_measurement(scale, spec.units)
    title = escape(name)

    def line_el(x1, y1, x2, y2, attrs: str) -> str:
        return (
            f'    <line x1="{_num(x1)}" y1="{_num(y1)}" '
            f'x2="{_num(x2)}" y2="{_num(y2)}" {attrs} />'
        )

    out = [
        '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(doc_w)}mm" '
        f'height="{_num(doc_h)}mm" viewBox="0 0 {_num(doc_w)} {_num(doc_h)}">',
        f"  <desc>{APP_TITLE} - {title} - Scale Length: {scale_text}, "
        f"{spec.num_frets} frets</desc>",
        f'  <g transform="translate({_num(SVG_PADDING_MM)}, '
        f'{_num(SVG_PADDING_MM + max_width / 2.0)})">',
        "    <!-- Neck outline -->",
        f'    <path d="{outline_path(frets)}" fill="none" stroke="black" stroke-width="0.5" />',
        "    <!-- Nut -->",
        line_el(
            0.0,
            -spec.neck_width_mm / 2.0,
            0.0,
            spec.neck_width_mm / 2.0,
            'stroke="black" stroke-width="3" stroke-linecap="round"',
        ),
        "    <!-- Bridge -->",
        line_el(
            scale,
            -spec.bridge_width_mm / 2.0,
            scale,
            spec.bridge_width_mm / 2.0,
            'stroke="black" stroke-width="3" stroke-linecap="round"',
        ),
    ]
    fret_attrs = (
        f'stroke="black" stroke-width="{_num(spec.fret_thickness_mm)}" '
        'stroke-linecap="round"'
    )
    for f in frets[1:-1]:
        d, half = f.distance_from_nut_mm, f.width_mm / 2.0
        out.append(f"    <!-- Fret {f.position} -->")
        out.append(line_el(d, -half, d, half, fret_attrs))
        out.append(
            f'    <text x="{_num(d - 4.0)}" y="{_num(-half - 5.0)}" font-family="Arial" '
            f'font-size="8" text-anchor="middle">{f.position}</text>'
        )
    if spec.uses_reference_width:
        fret12 = next((f for f in frets[1:-1] if f.position == 12), None)
        if fret12 is not None:
            out.append("    <!-- 12th Fret Special Mark -->")
            out.append(
                f'    <circle cx="{_num(fret12.distance_from_nut_mm)}" cy="0" r="3" fill="red" />'
            )
    if include_strings:
        layout = geometry.strings
        suffix = " (fallback)" if layout.degraded else ""
        pairs = zip(layout.nut_offsets_mm, layout.bridge_offsets_mm)
        for i, (y_nut, y_bridge) in enumerate(pairs, start=1):
            out.append(f"    <!-- String {i}{suffix} -->")
            out.append(
                line_el(
                    0.0,
                    y_nut,
                    scale,
                    y_bridge,
                    'stroke="#888888" stroke-width="0.5" stroke-dasharray="5,5"',
                )
            )
    out.append(
        f'    <text x="{_num(scale / 2.0)}" y="{_num(max_width / 2.0 + 15.0)}" '
        f'font-family="Arial" font-size="10" text-anchor="middle">{APP_TITLE} - {title} '
        f"- Scale: {scale_text} - {spec.num_frets} frets</text>"
    )
    out.append("  </g>")
    out.append("</svg>")
    return "\n".join(out) + "\n"


def dxf_line(x1: float, y1: float, x2: float, y2: float, layer: str) -> str:
    return (
        "0\nLINE\n"
        f"8\n{layer}\n"
        f"10\n{_num(x1)}\n20\n{_num(y1)}\n30\n0\n"
        f"11\n{_num(x2)}\n21\n{_num(y2)}\n31\n0\n"
    )


def dxf_segments(
    geometry: FretboardGeometry, include_strings: bool = True
) -> List[Tuple[Segment, str]]:
    """LINE segments in drawing order, each paired with its layer."""
    spec = geometry.spec
    frets = geometry.frets
    scale = spec.scale_length_mm
    segs: List[Tuple[Segment, str]] = [
        ((0.0, -spec.neck_width_mm / 2.0, 0.0, spec.neck_width_mm / 2.0), DXF_OUTLINE_LAYER),
        ((scale, -spec.bridge_width_mm / 2.0, scale, spec.bridge_width_mm / 2.0), DXF_OUTLINE_LAYER),
    ]
    for f in frets[1:-1]:
        d, half = f.distance_from_nut_mm, f.width_mm / 2.0
        segs.append(((d, -half, d, half), DXF_OUTLINE_LAYER))
    for side in (-1.0, 1.0):
        for a, b in zip(frets, frets[1:]):
            segs.append(
                (
                    (
                        a.distance_from_nut_mm,
                        side * a.width_mm / 2.0,
                        b.distance_from_nut_mm,
                        side * b.width_mm / 2.0,
                    ),
                    DXF_OUTLINE_LAYER,
                )
            )
    if include_strings:
        layout = geometry.strings
        for y_nut, y_bridge in zip(layout.nut_offsets_mm, layout.bridge_offsets_mm):
            segs.append(((0.0, y_nut, scale, y_bridge), DXF_STRING_LAYER))
    return segs


def dxf_document(geometry: FretboardGeometry, include_strings: bool = True) -> str:
    parts = [
        "0\nSECTION\n2\nHEADER\n",
        "9\n$ACADVER\n1\nAC1021\n",
        "9\n$INSUNITS\n70\n4\n",  # 4 = millimeters
        "0\nENDSEC\n",
        "0\nSECTION\n2\nENTITIES\n",
    ]
    for (x1, y1, x2, y2), layer in dxf_segments(geometry, include_strings):
        parts.append(dxf_line(x1, y1, x2, y2, layer))
    parts.append("0\nENDSEC\n0\nEOF\n")
    return "".join(parts)


# ----------------------------------------------------------------------
# Tables & data files
# ----------------------------------------------------------------------


def fret_label(record: FretRecord, bridge_position: int) -> str:
    if record.position == 0:
        return "Nut"
    if record.position == bridge_position:
        return "Bridge"
    return str(record.position)


def make_markdown_table(
    frets: Sequence[FretRecord], units: str, title: str = "Fret Positions"
) -> str:
    bridge_position = frets[-1].position
    spacings = fret_spacings(frets)
    lines = [
        f"## {title}",
        "| Fret | Distance from nut | Spacing | Width |",
        "| --- | --- | --- | --- |",
    ]
    for rec, gap in zip(frets, spacings):
        row = [
            fret_label(rec, bridge_position),
            format_measurement(rec.distance_from_nut_mm, units),
            format_measurement(gap, units),
            format_measurement(rec.width_mm, units),
        ]
        lines.append("| " + " | ".join(row) + " |")
    return "\n".join(lines)


def write_csv_file(
    filename: str, frets: Sequence[FretRecord], units: str, decimals: int
):
    bridge_position = frets[-1].position
    unit_label = "in" if units == "inches" else "mm"

    def conv(mm: float) -> str:
        value = mm_to_inches(mm) if units == "inches" else mm
        return f"{value:.{decimals}f}"

    with open(filename, "w", newline="") as f:
        w = csv.writer(f)
        w.writerow(
            [
                "Fret",
                f"Distance from nut ({unit_label})",
                f"Spacing ({unit_label})",
                f"Width ({unit_label})",
            ]
        )
        for rec, gap in zip(frets, fret_spacings(frets)):
            w.writerow(
                [
                    fret_label(rec, bridge_position),
                    conv(rec.distance_from_nut_mm),
                    conv(gap),
                    conv(rec.width_mm),
                ]
            )


def geometry_to_dict(geometry: FretboardGeometry, name: str) -> dict:
    layout = geometry.strings
    return {
        "name": name,
        "unit": "mm",
        "display_units": geometry.spec.units,
        "spec": asdict(geometry.spec),
        "frets": [asdict(f) for f in geometry.frets],
        "fret_spacings": fret_spacings(geometry.frets),
        "strings": {
            "nut_offsets_mm": list(layout.nut_offsets_mm),
            "bridge_offsets_mm": list(layout.bridge_offsets_mm),
            "nut_spacing_mm": layout.nut_spacing_mm,
            "degraded": layout.degraded,
        },
    }


def write_json_file(filename: str, geometry: FretboardGeometry, name: str):
    with open(filename, "w") as f:
        json.dump(geometry_to_dict(geometry, name), f, indent=2)


def write_text_file(filename: str, text: str):
    with open(filename, "w", encoding="utf-8") as f:
        f.write(text)


# ----------------------------------------------------------------------
# Command line
# ----------------------------------------------------------------------


def build_arg_parser():
    p = argparse.ArgumentParser(
        description="Fret slot calculator + fabrication template (SVG/DXF) generator"
    )
    p.add_argument(
        "--scale",
        type=str,
        required=True,
        help='Scale length, e.g. "648mm" or "25.5in".',
    )
    p.add_argument("--frets", type=int, required=True, help="Number of frets (>=1).")
    p.add_argument(
        "--unit",
        choices=list(UNITS),
        default="mm",
        help="Unit for unsuffixed lengths and for displayed values.",
    )
    p.add_argument(
        "--nut-width", type=str, default="43mm", help='Board width at nut, e.g. "42mm".'
    )
    p.add_argument(
        "--bridge-width",
        type=str,
        default=None,
        help="Board width at bridge. Estimated from string spacing when omitted.",
    )
    p.add_argument(
        "--reference-width",
        type=str,
        default=None,
        help="Board width at the 12th fret; enables the two-segment taper.",
    )
    p.add_argument(
        "--fret-thickness",
        type=str,
        default=f"{DEFAULT_FRET_THICKNESS_MM}mm",
        help="Drawn fret slot thickness.",
    )
    p.add_argument("--strings", type=int, default=6, help="Number of strings (>=2).")
    p.add_argument(
        "--string-spacing",
        type=str,
        default=f"{DEFAULT_STRING_SPACING_MM}mm",
        help="Center-to-center string spacing at the bridge.",
    )
    p.add_argument("--name", type=str, default="Custom", help="Instrument name.")
    p.add_argument("--decimals", type=int, default=3, help="Decimal places for CSV.")
    p.add_argument("--markdown", action="store_true", help="Force Markdown to stdout.")
    p.add_argument("--csv", type=str, help="Write CSV file.")
    p.add_argument("--json", type=str, help="Write JSON file.")
    p.add_argument(
        "--svg", type=str, help="Write SVG template (file path or existing directory)."
    )
    p.add_argument(
        "--dxf", type=str, help="Write DXF drawing (file path or existing directory)."
    )
    p.add_argument(
        "--no-strings",
        action="store_true",
        help="Leave string guide lines out of the drawings.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return p


def spec_from_args(args) -> InstrumentSpec:
    nut_width = parse_len_mm(args.nut_width, args.unit)
    spacing = parse_len_mm(args.string_spacing, args.unit)
    if args.bridge_width:
        bridge_width = parse_len_mm(args.bridge_width, args.unit)
    else:
        bridge_width = estimate_bridge_width(spacing, args.strings)
        log.debug("Estimated bridge width %.3fmm", bridge_width)
    reference = (
        parse_len_mm(args.reference_width, args.unit) if args.reference_width else 0.0
    )
    return InstrumentSpec(
        scale_length_mm=parse_len_mm(args.scale, args.unit),
        num_frets=args.frets,
        neck_width_mm=nut_width,
        bridge_width_mm=bridge_width,
        reference_fret_width_mm=reference,
        use_reference_width=reference > 0,
        fret_thickness_mm=parse_len_mm(args.fret_thickness, args.unit),
        strings_number=args.strings,
        string_spacing_mm=spacing,
        units=args.unit,
    )


def output_path(path: str, basename: str, ext: str) -> str:
    if os.path.isdir(path):
        return os.path.join(path, basename + ext)
    return path


def main(argv: Optional[Sequence[str]] = None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        spec = spec_from_args(args)
    except ConfigurationError as exc:
        raise SystemExit(str(exc))
    geometry = compute_geometry(spec)
    include_strings = not args.no_strings
    basename = suggested_basename(args.name, spec)
    if args.csv:
        write_csv_file(args.csv, geometry.frets, spec.units, args.decimals)
        print(f"CSV written to {args.csv}")
    if args.json:
        write_json_file(args.json, geometry, args.name)
        print(f"JSON written to {args.json}")
    if args.markdown or not (args.csv or args.json or args.svg or args.dxf):
        mode = "Two-segment taper" if spec.uses_reference_width else "Linear taper"
        print(f"# {args.name} ({mode})")
        print(
            f"**Scale:** {format_measurement(spec.scale_length_mm, spec.units)}  |  "
            f"**Frets:** {spec.num_frets}  |  "
            f"**Nut Width:** {format_measurement(spec.neck_width_mm, spec.units)}  |  "
            f"**Bridge Width:** {format_measurement(spec.bridge_width_mm, spec.units)}"
        )
        print(
            "**String offsets at bridge:** "
            + " | ".join(
                format_measurement(y, spec.units)
                for y in geometry.strings.bridge_offsets_mm
            )
            + "\n"
        )
        print(make_markdown_table(geometry.frets, spec.units))
    if args.svg:
        path = output_path(args.svg, basename, ".svg")
        write_text_file(path, svg_document(geometry, args.name, include_strings))
        print(f"SVG written to {path}")
    if args.dxf:
        path = output_path(args.dxf, basename, ".dxf")
        write_text_file(path, dxf_document(geometry, include_strings))
        print(f"DXF written to {path}")


if __name__ == "__main__":
    main()
