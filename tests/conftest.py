"""Shared fixtures for sacseg tests."""

import numpy as np
import pytest

GROUND_TRUTH_PLANE = np.array([0.5, -0.2, -1.0, 0.3])


def make_plane_cloud(n_inliers=95, n_outliers=5, seed=42):
    """Points on z = 0.5x - 0.2y + 0.3, inliers first, outliers last."""
    rng = np.random.default_rng(seed)
    xy = rng.uniform(-1.0, 1.0, (n_inliers, 2))
    z = 0.5 * xy[:, 0] - 0.2 * xy[:, 1] + 0.3
    inliers = np.column_stack([xy, z])
    outliers = rng.uniform(-1.0, 1.0, (n_outliers, 3)) + np.array([0.0, 0.0, 2.0])
    return np.vstack([inliers, outliers])


@pytest.fixture
def plane_cloud():
    return make_plane_cloud()


@pytest.fixture
def make_cloud():
    return make_plane_cloud


@pytest.fixture
def ground_truth_plane():
    return GROUND_TRUTH_PLANE / np.linalg.norm(GROUND_TRUTH_PLANE[:3])
