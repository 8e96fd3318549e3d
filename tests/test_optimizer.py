"""Tests for coefficient refinement."""

import numpy as np
from sacseg.sample_consensus.models import PlaneModel, SphereModel
from sacseg.sample_consensus.optimizer import CoefficientOptimizer


class TestCoefficientOptimizer:
    """Test least-squares refinement."""

    def test_optimizer_initialization(self):
        """Test default iteration limit."""
        assert CoefficientOptimizer().max_iters == 100

    def test_refines_noisy_plane(self):
        """Test refinement moves a perturbed plane back to the data."""
        rng = np.random.default_rng(0)
        xy = rng.uniform(-1, 1, (200, 2))
        z = 0.1 * xy[:, 0] + 0.2 * xy[:, 1] + 1.0 + rng.normal(0, 0.001, 200)
        points = np.column_stack([xy, z])
        model = PlaneModel(points)

        truth = np.array([0.1, 0.2, -1.0, 1.0])
        truth = truth / np.linalg.norm(truth[:3])
        start = truth + np.array([0.02, -0.02, 0.0, 0.05])

        refined = CoefficientOptimizer().optimize(model, start, model.indices)
        assert np.isclose(np.linalg.norm(refined[:3]), 1.0)
        if np.dot(refined[:3], truth[:3]) < 0:
            refined = -refined
        assert np.abs(model.residuals(refined, model.indices)).mean() < \
            np.abs(model.residuals(start, model.indices)).mean()
        assert np.allclose(refined, truth, atol=0.01)

    def test_refines_sphere(self):
        """Test sphere refinement."""
        rng = np.random.default_rng(1)
        directions = rng.normal(size=(100, 3))
        directions /= np.linalg.norm(directions, axis=1, keepdims=True)
        points = np.array([1.0, -1.0, 2.0]) + 0.5 * directions
        model = SphereModel(points)

        refined = CoefficientOptimizer().optimize(model, np.array([1.05, -0.95, 2.0, 0.45]),
                                                  model.indices)
        assert np.allclose(refined, [1.0, -1.0, 2.0, 0.5], atol=1e-6)

    def test_too_few_inliers(self):
        """Test the input is returned when the problem is underdetermined."""
        points = np.array([[0, 0, 0], [1, 0, 0], [0, 1, 0]], dtype=float)
        model = PlaneModel(points)
        coefficients = np.array([0.0, 0.0, 1.0, 0.0])

        refined = CoefficientOptimizer().optimize(model, coefficients, np.array([0, 1, 2]))
        assert np.array_equal(refined, coefficients)
