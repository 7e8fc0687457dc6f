"""Tests for the command line entry point."""

from __future__ import annotations

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from fretslot_calc import build_arg_parser, main, spec_from_args

STRAT_ARGS = [
    "--scale", "648mm",
    "--frets", "22",
    "--nut-width", "42mm",
    "--bridge-width", "56mm",
]


def run(argv):
    out = io.StringIO()
    with redirect_stdout(out):
        main(argv)
    return out.getvalue()


class TestSpecFromArgs(unittest.TestCase):

    def parse(self, argv):
        return spec_from_args(build_arg_parser().parse_args(argv))

    def test_mm_arguments(self):
        spec = self.parse(STRAT_ARGS)
        self.assertEqual(spec.scale_length_mm, 648.0)
        self.assertEqual(spec.num_frets, 22)
        self.assertEqual(spec.bridge_width_mm, 56.0)
        self.assertFalse(spec.uses_reference_width)

    def test_inch_unit_is_converted_once(self):
        spec = self.parse(
            ["--unit", "inches", "--scale", "25.5", "--frets", "21",
             "--nut-width", "1.65", "--bridge-width", "56mm"]
        )
        self.assertAlmostEqual(spec.scale_length_mm, 647.7)
        self.assertAlmostEqual(spec.neck_width_mm, 41.91)
        self.assertEqual(spec.bridge_width_mm, 56.0)
        self.assertEqual(spec.units, "inches")

    def test_bridge_width_estimated(self):
        spec = self.parse(["--scale", "648mm", "--frets", "22"])
        self.assertAlmostEqual(spec.bridge_width_mm, 10.5 * 5 + 2 * 4.3)

    def test_reference_width_enables_two_segment(self):
        spec = self.parse(STRAT_ARGS + ["--reference-width", "51.5mm"])
        self.assertTrue(spec.uses_reference_width)
        self.assertEqual(spec.reference_fret_width_mm, 51.5)


class TestMain(unittest.TestCase):

    def test_markdown_by_default(self):
        out = run(STRAT_ARGS + ["--name", "Strat"])
        self.assertIn("# Strat (Linear taper)", out)
        self.assertIn("| Nut | 0.00mm |", out)
        self.assertIn("| Bridge | 648.00mm |", out)
        self.assertIn("-26.25mm", out)

    def test_invalid_frets_exit(self):
        with self.assertRaises(SystemExit) as cm:
            run(["--scale", "648mm", "--frets", "0"])
        self.assertIn("frets", str(cm.exception.code))

    def test_invalid_scale_exit(self):
        with self.assertRaises(SystemExit):
            run(["--scale", "0", "--frets", "22"])

    def test_bad_length_exit(self):
        with self.assertRaises(SystemExit):
            run(["--scale", "long", "--frets", "22"])

    def test_writes_drawings_into_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = run(STRAT_ARGS + ["--name", "Fender Strat", "--svg", tmp, "--dxf", tmp])
            svg_path = os.path.join(tmp, "fender-strat-648.00mm.svg")
            dxf_path = os.path.join(tmp, "fender-strat-648.00mm.dxf")
            self.assertTrue(os.path.isfile(svg_path))
            self.assertTrue(os.path.isfile(dxf_path))
            with open(svg_path, encoding="utf-8") as f:
                self.assertIn("Fender Strat", f.read())
            with open(dxf_path, encoding="utf-8") as f:
                self.assertIn("$INSUNITS", f.read())
        self.assertIn("SVG written to", out)
        self.assertNotIn("## Fret Positions", out)

    def test_writes_named_files(self):
        with tempfile.TemporaryDirectory() as tmp:
            dxf_path = os.path.join(tmp, "board.dxf")
            json_path = os.path.join(tmp, "board.json")
            csv_path = os.path.join(tmp, "board.csv")
            run(STRAT_ARGS + ["--dxf", dxf_path, "--json", json_path,
                              "--csv", csv_path, "--no-strings"])
            with open(dxf_path, encoding="utf-8") as f:
                self.assertNotIn("\n8\n1\n10\n", f.read())
            with open(json_path) as f:
                self.assertEqual(len(json.load(f)["frets"]), 24)
            self.assertTrue(os.path.isfile(csv_path))


if __name__ == "__main__":
    unittest.main()
