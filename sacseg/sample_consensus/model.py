"""Base class for geometric models scored by sample consensus estimators."""

from abc import ABC, abstractmethod
from typing import Optional

import numpy as np


class SampleConsensusModel(ABC):
    """
    A model that can be fitted to a minimal subset of points and scored
    against every point of an ordered index sequence.

    The index sequence is the order in which observations are presented to
    the estimator. PROSAC expects it sorted by descending quality; the model
    itself never reorders or mutates it.
    """

    sample_size = 0
    model_size = 0

    def __init__(self, points: np.ndarray, indices: Optional[np.ndarray] = None,
                 max_sample_checks: int = 1000):
        """
        Args:
            points: (N, D) array of observations
            indices: Ordered observation indices (defaults to all points)
            max_sample_checks: Draw attempts before giving up on a
                non-degenerate sample
        """
        self.points = np.asarray(points, dtype=np.float64)
        if indices is None:
            indices = np.arange(len(self.points))
        self.indices = np.asarray(indices, dtype=np.int64)
        self.max_sample_checks = max_sample_checks

        # Position of every point in the index sequence (-1 when absent)
        self._rank = np.full(len(self.points), -1, dtype=np.int64)
        self._rank[self.indices] = np.arange(len(self.indices))

    def get_sample_size(self) -> int:
        return self.sample_size

    def get_model_size(self) -> int:
        return self.model_size

    def get_observation_count(self) -> int:
        return len(self.indices)

    def rank_of(self, point_indices: np.ndarray) -> np.ndarray:
        """Positions of the given point indices in the index sequence."""
        return self._rank[np.asarray(point_indices, dtype=np.int64)]

    def get_samples(self, pool: np.ndarray, rng: np.random.Generator) -> np.ndarray:
        """
        Draw a non-degenerate subset of ``sample_size`` distinct indices.

        Args:
            pool: Restricted view of the index sequence to sample from
            rng: Random generator driving the draw

        Returns:
            Array of point indices, empty if no valid subset was found
        """
        pool = np.asarray(pool, dtype=np.int64)
        if len(pool) < self.sample_size:
            return np.array([], dtype=np.int64)

        for _ in range(self.max_sample_checks):
            samples = rng.choice(pool, self.sample_size, replace=False)
            if self.is_sample_good(samples):
                return samples

        return np.array([], dtype=np.int64)

    def is_sample_good(self, samples: np.ndarray) -> bool:
        """Check that a subset is not degenerate for this model."""
        return True

    @abstractmethod
    def compute_model_coefficients(self, samples: np.ndarray) -> Optional[np.ndarray]:
        """Fit coefficients to a minimal subset, or None if degenerate."""

    @abstractmethod
    def get_distances_to_model(self, coefficients: np.ndarray) -> np.ndarray:
        """Distances of every point of the index sequence to the model."""

    @abstractmethod
    def residuals(self, coefficients: np.ndarray, point_indices: np.ndarray) -> np.ndarray:
        """Signed residuals used by least-squares refinement."""

    def normalize_coefficients(self, coefficients: np.ndarray) -> np.ndarray:
        return coefficients

    def is_model_valid(self, coefficients: Optional[np.ndarray]) -> bool:
        return coefficients is not None and len(coefficients) == self.model_size

    def select_within_distance(self, coefficients: np.ndarray, threshold: float) -> np.ndarray:
        """Indices of the points within ``threshold`` of the model."""
        if not self.is_model_valid(coefficients):
            return np.array([], dtype=np.int64)
        distances = self.get_distances_to_model(coefficients)
        return self.indices[distances < threshold]

    def count_within_distance(self, coefficients: np.ndarray, threshold: float) -> int:
        if not self.is_model_valid(coefficients):
            return 0
        return int(np.count_nonzero(self.get_distances_to_model(coefficients) < threshold))
