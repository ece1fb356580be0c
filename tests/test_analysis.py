"""Tests for whole-dataset analysis, synthetic data, plotting, config and CLI."""

import json
import os
import tempfile
import unittest

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import yaml

from simpsons_package.analysis import simpsons_analysis
from simpsons_package.cli import main
from simpsons_package.config import AnalysisSettings, load_settings
from simpsons_package.data_io import load_dataset, report_to_dict
from simpsons_package.detector import detect_simpsons_paradox, has_simpsons_paradox
from simpsons_package.errors import GenerationFailed
from simpsons_package.synthetic import make_kidney_stone_data, make_paradox_data
from simpsons_package.visualization import (
    CLUSTER_PALETTE, cluster_color, plot_by_factor, plot_clusters, plot_elbow
)


class SyntheticDataTests(unittest.TestCase):

    def test_round_trip_reports_paradox(self):
        df, triple = make_paradox_data(random_state=0)
        self.assertEqual(triple, ("cause", "effect", "factor"))
        self.assertTrue(has_simpsons_paradox(df, *triple, verbose=False))

    def test_custom_names_and_continuous_factor(self):
        df, triple = make_paradox_data(
            n_groups=3, cause_column="dose", effect_column="response", factor_column="age",
            continuous_factor=True, random_state=1,
        )
        self.assertEqual(triple, ("dose", "response", "age"))
        report = detect_simpsons_paradox(df, *triple, verbose=False, random_state=1)
        self.assertTrue(report.paradox_detected)
        self.assertEqual(report.grouping.strategy, "clustered")

    def test_attempt_cap(self):
        with self.assertRaises(GenerationFailed):
            make_paradox_data(random_state=0, max_attempts=0)

    def test_slopes_must_oppose(self):
        with self.assertRaises(ValueError):
            make_paradox_data(within_slope=1.0, between_slope=2.0)

    def test_kidney_stone_counts(self):
        df = make_kidney_stone_data()
        self.assertEqual(len(df), 700)
        self.assertEqual(int(df["Atreatment"].sum()), 350)
        self.assertEqual(int(df["recovery"].sum()), 562)


class AnalysisTests(unittest.TestCase):

    def setUp(self):
        self.df = make_kidney_stone_data().assign(
            ward=lambda d: np.where(np.arange(len(d)) % 2 == 0, "east", "west")
        )
        self.quiet = AnalysisSettings(verbose=False, random_state=0)

    def tearDown(self):
        plt.close("all")

    def test_every_other_column_is_tried(self):
        summary = simpsons_analysis(self.df, "Atreatment", "recovery", show_plots=False, settings=self.quiet)
        self.assertEqual(set(summary.reports), {"kidney_stone_size", "ward"})
        self.assertIn("kidney_stone_size", summary.paradox_factors)
        self.assertLess(summary.overall_slope, 0)
        self.assertIn("Simpson's paradox found", summary.narrative)
        self.assertEqual(summary.summary_df["factor"].tolist(), ["kidney_stone_size", "ward"])

    def test_category_dtype_factor_is_analyzed(self):
        df = self.df.assign(site=pd.Categorical(["north"] * len(self.df)))
        summary = simpsons_analysis(df, "Atreatment", "recovery", show_plots=False, settings=self.quiet)
        self.assertIn("site", summary.reports)
        self.assertNotIn("site", summary.errors)
        self.assertIn("kidney_stone_size", summary.paradox_factors)

    def test_failed_factor_is_recorded(self):
        df = self.df.assign(notes=["x"] * (len(self.df) - 1) + [None])
        summary = simpsons_analysis(df, "Atreatment", "recovery", show_plots=False, settings=self.quiet)
        self.assertIn("notes", summary.errors)
        self.assertIn("notes", summary.narrative)

    def test_figures_built_when_requested(self):
        summary = simpsons_analysis(
            self.df, "Atreatment", "recovery", show_plots=True,
            factors=["kidney_stone_size"], settings=self.quiet,
        )
        self.assertIn("kidney_stone_size_grouping", summary.figures)
        self.assertIn("all_columns_clusters", summary.figures)

    def test_verbose_narrative_goes_to_printer(self):
        lines = []
        simpsons_analysis(
            self.df, "Atreatment", "recovery", show_plots=False,
            factors=["kidney_stone_size"], settings=AnalysisSettings(), printer=lines.append,
        )
        self.assertEqual(lines[0], "--- factor: kidney_stone_size ---")
        self.assertTrue(lines[-1].startswith("Overall, Atreatment trends negative"))


class VisualizationTests(unittest.TestCase):

    def tearDown(self):
        plt.close("all")

    def test_palette_wraps(self):
        self.assertEqual(cluster_color(1), CLUSTER_PALETTE[0])
        self.assertEqual(cluster_color(len(CLUSTER_PALETTE) + 1), cluster_color(1))

    def test_plot_clusters_has_one_axis_per_k(self):
        fig = plot_clusters(make_kidney_stone_data(), "Atreatment", "recovery", maxclusters=4, random_state=0)
        self.assertEqual(len(fig.axes), 3)

    def test_plot_by_factor(self):
        fig = plot_by_factor(make_kidney_stone_data(), "Atreatment", "recovery", "kidney_stone_size", random_state=0)
        self.assertEqual(len(fig.axes), 1)

    def test_plot_elbow(self):
        df, triple = make_paradox_data(continuous_factor=True, random_state=2)
        report = detect_simpsons_paradox(df, *triple, verbose=False, random_state=2)
        fig = plot_elbow(report.grouping.elbow)
        self.assertEqual(len(fig.axes), 1)


class ConfigTests(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def _write(self, content) -> str:
        path = os.path.join(self.tmp.name, "settings.yaml")
        with open(path, "w") as f:
            yaml.safe_dump(content, f)
        return path

    def test_defaults(self):
        settings = load_settings()
        self.assertEqual((settings.continuous_threshold, settings.cmin, settings.cmax), (5, 1, 5))
        self.assertTrue(settings.verbose)

    def test_yaml_with_overrides(self):
        path = self._write({"analysis": {"cmax": 4, "random_state": 3}})
        settings = load_settings(path, random_state=None, verbose=False)
        self.assertEqual(settings.cmax, 4)
        self.assertEqual(settings.random_state, 3)
        self.assertFalse(settings.verbose)

    def test_unknown_key(self):
        with self.assertRaises(ValueError):
            load_settings(self._write({"clusters": 3}))

    def test_bad_bounds(self):
        with self.assertRaises(ValueError):
            AnalysisSettings(cmin=4, cmax=3)

    def test_missing_file(self):
        with self.assertRaises(FileNotFoundError):
            load_settings(os.path.join(self.tmp.name, "nope.yaml"))


class CliAndIoTests(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.csv = os.path.join(self.tmp.name, "kidney.csv")
        make_kidney_stone_data().to_csv(self.csv, index=False)

    def tearDown(self):
        self.tmp.cleanup()
        plt.close("all")

    def _detect(self, *extra):
        return main(["detect", self.csv, "--cause", "Atreatment", "--effect", "recovery", "--quiet", *extra])

    def test_detect_exit_codes(self):
        self.assertEqual(self._detect("--factor", "kidney_stone_size"), 1)
        self.assertEqual(self._detect("--factor", "missing"), 2)

    def test_detect_writes_json(self):
        out = os.path.join(self.tmp.name, "report.json")
        self._detect("--factor", "kidney_stone_size", "--json", out)
        with open(out) as f:
            record = json.load(f)
        self.assertTrue(record["paradox_detected"])
        self.assertEqual([s["subgroup"] for s in record["subgroups"]], ["small", "large"])

    def test_analyze_saves_plots(self):
        plots = os.path.join(self.tmp.name, "plots")
        code = main(["analyze", self.csv, "--cause", "Atreatment", "--effect", "recovery",
                     "--quiet", "--seed", "0", "--plots", plots])
        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(os.path.join(plots, "kidney_stone_size_grouping.png")))

    def test_units_row(self):
        path = os.path.join(self.tmp.name, "cars.csv")
        with open(path, "w") as f:
            f.write("Car,Weight,MPG\nSTRING,lbs,mpg\nchevrolet,3504,18\nbuick,3693,15\n")
        df = load_dataset(path, units_row=True)
        self.assertEqual(len(df), 2)
        self.assertTrue(pd.api.types.is_numeric_dtype(df["Weight"]))
        self.assertEqual(df["Car"].tolist(), ["chevrolet", "buick"])

    def test_report_dict_is_json_ready(self):
        df, triple = make_paradox_data(continuous_factor=True, random_state=4)
        report = detect_simpsons_paradox(df, *triple, verbose=False, random_state=4)
        record = report_to_dict(report)
        json.dumps(record)
        self.assertEqual(record["grouping_strategy"], "clustered")
        self.assertIn("k", record["elbow"])


if __name__ == "__main__":
    unittest.main()
