"""Shared state and results for sample consensus estimators."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from sacseg.exceptions import ConfigurationError
from .model import SampleConsensusModel

logger = logging.getLogger(__name__)


@dataclass
class ConsensusResult:
    """Outcome of one estimation call."""
    success: bool
    selection: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))
    coefficients: np.ndarray = field(default_factory=lambda: np.array([]))
    inliers: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))
    iterations: int = 0


class SampleConsensus(ABC):
    """Base class for estimators that search a model by repeated sampling."""

    def __init__(self, model: SampleConsensusModel, threshold: Optional[float] = None,
                 max_iterations: int = 1000, probability: float = 0.99,
                 random_state: Union[int, np.random.Generator, None] = None):
        """
        Args:
            model: Model provider to sample, fit and score
            threshold: Maximum point-to-model distance of an inlier (required)
            max_iterations: Hard cap on the number of trials
            probability: Desired probability of drawing one outlier-free sample
            random_state: Seed or generator for reproducible sampling
        """
        self.model = model
        self.threshold = threshold
        self.max_iterations = max_iterations
        self.probability = probability
        self.rng = np.random.default_rng(random_state)

        self.iterations = 0
        self._clear_result()

    def _clear_result(self):
        self.selection = np.array([], dtype=np.int64)
        self.coefficients = np.array([])
        self.inliers = np.array([], dtype=np.int64)

    def _check_threshold(self):
        if self.threshold is None:
            logger.error("[%s.compute_model] No threshold set!", type(self).__name__)
            raise ConfigurationError("Distance threshold must be set before computing a model")

    @abstractmethod
    def compute_model(self, debug_verbosity_level: int = 0) -> bool:
        """Search the best model; True if one was found."""

    def get_model(self) -> np.ndarray:
        """Indices of the sample subset that produced the best model."""
        return self.selection

    def get_model_coefficients(self) -> np.ndarray:
        return self.coefficients

    def get_inliers(self) -> np.ndarray:
        return self.inliers

    def result(self) -> ConsensusResult:
        return ConsensusResult(
            success=len(self.selection) > 0,
            selection=self.selection.copy(),
            coefficients=self.coefficients.copy(),
            inliers=self.inliers.copy(),
            iterations=self.iterations,
        )
