"""
Unit tests for distance functions
"""

import pytest
import numpy as np

from bayesian_int.distances import linear_distance, logarithmic_distance


@pytest.mark.parametrize("distance", [linear_distance, logarithmic_distance])
class TestDistanceProperties:
    """Properties shared by both distances."""

    def test_identity(self, distance, rng):
        x = rng.uniform(0.1, 2.0, 100)
        assert distance(x, x) == pytest.approx(0.0, abs=1e-10)

    def test_symmetric_and_positive(self, distance, rng):
        x = rng.uniform(0.1, 2.0, 100)
        y = rng.uniform(0.1, 2.0, 100)
        d = distance(x, y)

        assert isinstance(d, float)
        assert d > 0
        assert d == pytest.approx(distance(y, x))

    def test_shape_mismatch(self, distance):
        with pytest.raises(ValueError):
            distance(np.ones(3), np.ones(4))

    def test_empty(self, distance):
        with pytest.raises(ValueError):
            distance(np.array([]), np.array([]))


class TestDistanceValues:
    """Known values."""

    def test_linear(self):
        assert linear_distance([1.0, 0.5], [0.0, 0.5]) == pytest.approx(0.5)

    def test_logarithmic(self):
        # One decade apart everywhere
        assert logarithmic_distance([10.0, 100.0], [1.0, 10.0]) == pytest.approx(1.0)

    def test_logarithmic_needs_positive(self):
        with pytest.raises(ValueError):
            logarithmic_distance([1.0, 0.0], [1.0, 1.0])
