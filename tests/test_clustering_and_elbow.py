"""Checks for k-means partitioning and elbow selection."""

import unittest

import numpy as np

from simpsons_package.clustering import cluster_points, cost_curve
from simpsons_package.elbow import chord_distances, select_elbow
from simpsons_package.errors import InvalidClusterCount


def three_blobs():
    # Three tight, well separated groups on one axis, plus the zero placeholder column
    values = np.concatenate([c + np.linspace(-0.5, 0.5, 20) for c in (0.0, 10.0, 20.0)])
    return np.column_stack([values, np.zeros_like(values)])


class ClusteringTests(unittest.TestCase):

    def test_assignments_are_one_based(self):
        result = cluster_points(three_blobs(), 3, random_state=0)
        self.assertEqual(sorted(np.unique(result.assignments).tolist()), [1, 2, 3])
        self.assertEqual(len(result.assignments), 60)
        self.assertEqual(sum(result.sizes.values()), 60)

    def test_single_cluster_cost_is_total_sum_of_squares(self):
        features = three_blobs()
        result = cluster_points(features, 1, random_state=0)
        expected = ((features - features.mean(axis=0)) ** 2).sum()
        self.assertAlmostEqual(result.cost, expected, places=6)

    def test_one_dimensional_input(self):
        result = cluster_points([1.0, 1.1, 9.0, 9.2], 2, random_state=0)
        self.assertEqual(result.assignments[0], result.assignments[1])
        self.assertNotEqual(result.assignments[0], result.assignments[2])

    def test_invalid_cluster_counts(self):
        with self.assertRaises(InvalidClusterCount):
            cluster_points([1.0, 2.0, 3.0], 0)
        with self.assertRaises(InvalidClusterCount):
            cluster_points([1.0, 1.0, 2.0], 3)

    def test_seeded_runs_repeat(self):
        first = cluster_points(three_blobs(), 2, random_state=3)
        second = cluster_points(three_blobs(), 2, random_state=3)
        np.testing.assert_array_equal(first.assignments, second.assignments)
        self.assertEqual(first.cost, second.cost)

    def test_parallel_curve_keeps_k_order(self):
        serial = cost_curve(three_blobs(), range(1, 7), random_state=0)
        parallel = cost_curve(three_blobs(), range(1, 7), random_state=0, max_workers=3)
        self.assertEqual([r.k for r in parallel], [1, 2, 3, 4, 5, 6])
        for a, b in zip(serial, parallel):
            self.assertAlmostEqual(a.cost, b.cost, delta=1e-6 * max(1.0, a.cost))


class ElbowTests(unittest.TestCase):

    def test_sharp_bend_selects_two(self):
        choice = select_elbow([100, 40, 38, 37, 36, 35], cmin=1, cmax=5)
        self.assertEqual(choice.k, 2)
        self.assertEqual(choice.min_cost_k, 6)
        self.assertFalse(choice.guarded)
        self.assertIsNone(choice.result)

    def test_distances_match_point_to_line_formula(self):
        distances = chord_distances([100, 40, 38, 37, 36, 35])
        norm = np.hypot(65, 5)
        self.assertAlmostEqual(distances[2], 235 / norm)
        self.assertAlmostEqual(distances[5], 60 / norm)
        self.assertEqual(sorted(distances), [2, 3, 4, 5])

    def test_minimum_before_elbow_falls_back_to_minimum(self):
        # Elbow is at k=3 but the lowest cost is at k=1
        choice = select_elbow([0, 10, 50, 10, 20], cmin=1, cmax=4)
        self.assertEqual(choice.elbow_k, 3)
        self.assertEqual(choice.min_cost_k, 1)
        self.assertTrue(choice.guarded)
        self.assertEqual(choice.k, 1)

    def test_fallback_never_goes_below_cmin(self):
        choice = select_elbow([0, 10, 50, 10, 20], cmin=2, cmax=4)
        self.assertEqual(choice.k, 2)

    def test_uses_precomputed_results(self):
        curve = cost_curve(three_blobs(), range(1, 7), random_state=0)
        choice = select_elbow(curve, cmin=1, cmax=5)
        self.assertEqual(choice.k, 3)
        self.assertIs(choice.result, curve[2])

    def test_single_candidate_range(self):
        self.assertEqual(select_elbow([10.0, 1.0], cmin=1, cmax=1).k, 1)

    def test_invalid_bounds(self):
        with self.assertRaises(InvalidClusterCount):
            select_elbow([3, 2, 1], cmin=3, cmax=2)
        with self.assertRaises(ValueError):
            select_elbow([3, 2, 1], cmin=1, cmax=5)


if __name__ == "__main__":
    unittest.main()
