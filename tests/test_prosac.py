"""Tests for the PROSAC estimator."""

import logging

import numpy as np
import pytest
from sacseg.exceptions import ConfigurationError
from sacseg.sample_consensus.model import SampleConsensusModel
from sacseg.sample_consensus.models import PlaneModel
from sacseg.sample_consensus.prosac import ProgressiveSampleConsensus
from sacseg.sample_consensus.sac import SampleConsensus
from sacseg.sample_consensus.sampler import MAX_TRIALS


class NeverFitsModel(SampleConsensusModel):
    """Model whose every subset is degenerate at fit time."""

    sample_size = 3
    model_size = 4

    def compute_model_coefficients(self, samples):
        return None

    def get_distances_to_model(self, coefficients):
        return np.zeros(len(self.indices))

    def residuals(self, coefficients, point_indices):
        return np.zeros(len(point_indices))


class RecordingPlaneModel(PlaneModel):
    """Plane model that records the pools it was asked to sample from."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.pool_sizes = []

    def get_samples(self, pool, rng):
        self.pool_sizes.append(len(pool))
        return super().get_samples(pool, rng)


class TestProgressiveSampleConsensus:
    """Test PROSAC model estimation."""

    def test_initialization(self, plane_cloud):
        """Test default parameters."""
        prosac = ProgressiveSampleConsensus(PlaneModel(plane_cloud))
        assert prosac.threshold is None
        assert prosac.max_iterations == 1000
        assert prosac.max_trials == MAX_TRIALS
        assert prosac.iterations == 0

    def test_recovers_plane(self, plane_cloud, ground_truth_plane):
        """Test an exact plane with 5% outliers is recovered."""
        model = PlaneModel(plane_cloud)
        prosac = ProgressiveSampleConsensus(model, threshold=1e-6, max_iterations=1000,
                                            random_state=42)
        assert prosac.compute_model()

        coefficients = prosac.get_model_coefficients()
        if np.dot(coefficients[:3], ground_truth_plane[:3]) < 0:
            coefficients = -coefficients
        assert np.allclose(coefficients, ground_truth_plane, atol=1e-6)

        inliers = prosac.get_inliers()
        assert len(np.intersect1d(inliers, np.arange(95))) >= 0.9 * 95
        assert len(prosac.get_model()) == 3
        assert set(prosac.get_model()) <= set(inliers)

    def test_budget_shrinks(self, plane_cloud):
        """Test a clean prefix stops the run long before max_iterations."""
        prosac = ProgressiveSampleConsensus(PlaneModel(plane_cloud), threshold=1e-6,
                                            max_iterations=1000, random_state=0)
        assert prosac.compute_model()

        ctx = prosac.context
        assert ctx.k_n_star >= 2 * ctx.m
        assert ctx.k_n_star < MAX_TRIALS
        assert ctx.n_star <= 95
        assert prosac.iterations == ctx.k_n_star
        assert prosac.iterations < 1000

    def test_deterministic_with_seed(self, make_cloud):
        """Test two seeded runs give identical models."""
        points = make_cloud(n_inliers=70, n_outliers=30, seed=7)
        indices = np.random.default_rng(1).permutation(len(points))

        results = []
        for _ in range(2):
            prosac = ProgressiveSampleConsensus(PlaneModel(points, indices), threshold=1e-6,
                                                max_iterations=200, random_state=123)
            prosac.compute_model()
            results.append(prosac.result())

        assert results[0].success == results[1].success
        assert np.array_equal(results[0].selection, results[1].selection)
        assert np.array_equal(results[0].coefficients, results[1].coefficients)
        assert np.array_equal(results[0].inliers, results[1].inliers)
        assert results[0].iterations == results[1].iterations

    def test_unsorted_input_still_converges(self, make_cloud, ground_truth_plane):
        """Test a shuffled sequence degrades to random sampling but still works."""
        points = make_cloud(n_inliers=80, n_outliers=20, seed=3)
        indices = np.random.default_rng(5).permutation(len(points))
        prosac = ProgressiveSampleConsensus(PlaneModel(points, indices), threshold=1e-6,
                                            max_iterations=2000, random_state=11)

        assert prosac.compute_model()
        assert len(prosac.get_inliers()) == 80

    def test_no_threshold(self, plane_cloud):
        """Test a missing threshold fails before any trial."""
        model = RecordingPlaneModel(plane_cloud)
        prosac = ProgressiveSampleConsensus(model)

        with pytest.raises(ConfigurationError):
            prosac.compute_model()
        assert prosac.iterations == 0
        assert model.pool_sizes == []

    def test_no_threshold_after_successful_run(self, plane_cloud):
        """Test a rejected rerun does not report the previous result."""
        prosac = ProgressiveSampleConsensus(PlaneModel(plane_cloud), threshold=1e-6,
                                            random_state=42)
        assert prosac.compute_model()
        assert prosac.iterations > 0

        prosac.threshold = None
        with pytest.raises(ConfigurationError):
            prosac.compute_model()
        assert prosac.iterations == 0
        assert prosac.context is None
        assert not prosac.result().success
        assert len(prosac.get_inliers()) == 0
        assert len(prosac.get_model_coefficients()) == 0

    def test_base_classes_are_abstract(self, plane_cloud):
        """Test the model and estimator bases cannot be used directly."""
        with pytest.raises(TypeError):
            SampleConsensusModel(plane_cloud)
        with pytest.raises(TypeError):
            SampleConsensus(PlaneModel(plane_cloud), threshold=0.1)

    def test_every_fit_degenerate(self, plane_cloud):
        """Test a run without any valid fit fails cleanly."""
        prosac = ProgressiveSampleConsensus(NeverFitsModel(plane_cloud), threshold=0.1,
                                            max_iterations=100, random_state=0)

        assert not prosac.compute_model()
        assert len(prosac.get_inliers()) == 0
        assert len(prosac.get_model()) == 0
        assert len(prosac.get_model_coefficients()) == 0
        assert prosac.iterations == 101
        assert not prosac.result().success

    def test_every_sample_degenerate(self):
        """Test identical points end in failure through sampling exhaustion."""
        model = PlaneModel(np.zeros((20, 3)), max_sample_checks=10)
        prosac = ProgressiveSampleConsensus(model, threshold=0.1, random_state=0)

        assert not prosac.compute_model()
        assert len(prosac.get_inliers()) == 0
        assert prosac.iterations == 0

    def test_too_few_points(self):
        """Test fewer points than the sample size fail."""
        prosac = ProgressiveSampleConsensus(PlaneModel(np.eye(3)[:2]), threshold=0.1)
        assert not prosac.compute_model()

    def test_samples_drawn_from_pool(self, make_cloud):
        """Test samples come from a non-decreasing pool within N."""
        points = make_cloud(n_inliers=30, n_outliers=70, seed=2)
        model = RecordingPlaneModel(points)
        prosac = ProgressiveSampleConsensus(model, threshold=1e-6, max_iterations=300,
                                            random_state=4, max_trials=2000)
        prosac.compute_model()

        assert model.pool_sizes[0] == 3
        assert all(a <= b for a, b in zip(model.pool_sizes, model.pool_sizes[1:]))
        assert max(model.pool_sizes) <= len(points)
        assert np.array_equal(model.indices, np.arange(len(points)))

    def test_max_iterations_cap(self, make_cloud):
        """Test the hard cap ends a run whose budget is still large."""
        points = make_cloud(n_inliers=20, n_outliers=80, seed=9)
        indices = np.random.default_rng(0).permutation(len(points))
        prosac = ProgressiveSampleConsensus(PlaneModel(points, indices), threshold=1e-6,
                                            max_iterations=10, random_state=0)
        prosac.compute_model()
        assert prosac.iterations <= 11

    def test_debug_trace(self, plane_cloud, caplog):
        """Test per-trial diagnostics are logged at high verbosity."""
        prosac = ProgressiveSampleConsensus(PlaneModel(plane_cloud), threshold=1e-6,
                                            random_state=0)
        with caplog.at_level(logging.DEBUG, logger='sacseg'):
            prosac.compute_model(debug_verbosity_level=2)

        trials = [r for r in caplog.records if 'Trial' in r.getMessage()]
        assert len(trials) == prosac.iterations
        assert any('Model:' in r.getMessage() for r in caplog.records)

    def test_quiet_by_default(self, plane_cloud, caplog):
        """Test no per-trial trace without verbosity."""
        prosac = ProgressiveSampleConsensus(PlaneModel(plane_cloud), threshold=1e-6,
                                            random_state=0)
        with caplog.at_level(logging.DEBUG, logger='sacseg'):
            prosac.compute_model()
        assert not any('Trial' in r.getMessage() for r in caplog.records)
