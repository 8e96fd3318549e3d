"""Geometric models for sample consensus estimation."""

import numpy as np
from typing import Optional, Sequence

from .model import SampleConsensusModel


def _angle_between(v1: np.ndarray, v2: np.ndarray) -> np.ndarray:
    """Unsigned angle between line directions, in [0, pi/2]."""
    v1 = np.atleast_2d(v1)
    norms = np.linalg.norm(v1, axis=1) * np.linalg.norm(v2)
    with np.errstate(invalid='ignore', divide='ignore'):
        cos_angle = np.abs(v1 @ v2) / norms
    cos_angle = np.nan_to_num(cos_angle, nan=1.0)
    return np.arccos(np.clip(cos_angle, 0.0, 1.0))


class PlaneModel(SampleConsensusModel):
    """Plane ``a*x + b*y + c*z + d = 0`` with unit normal ``[a, b, c]``."""

    sample_size = 3
    model_size = 4

    def is_sample_good(self, samples: np.ndarray) -> bool:
        p0, p1, p2 = self.points[samples]
        return np.linalg.norm(np.cross(p1 - p0, p2 - p0)) > 1e-12

    def compute_model_coefficients(self, samples: np.ndarray) -> Optional[np.ndarray]:
        if len(samples) != self.sample_size:
            return None

        p0, p1, p2 = self.points[samples]
        normal = np.cross(p1 - p0, p2 - p0)
        norm = np.linalg.norm(normal)
        if norm <= 1e-12:
            return None

        normal = normal / norm
        coefficients = np.append(normal, -np.dot(normal, p0))
        return coefficients if self.is_model_valid(coefficients) else None

    def get_distances_to_model(self, coefficients: np.ndarray) -> np.ndarray:
        pts = self.points[self.indices]
        return np.abs(pts @ coefficients[:3] + coefficients[3])

    def residuals(self, coefficients: np.ndarray, point_indices: np.ndarray) -> np.ndarray:
        pts = self.points[point_indices]
        return (pts @ coefficients[:3] + coefficients[3]) / np.linalg.norm(coefficients[:3])

    def normalize_coefficients(self, coefficients: np.ndarray) -> np.ndarray:
        return coefficients / np.linalg.norm(coefficients[:3])


class PerpendicularPlaneModel(PlaneModel):
    """Plane perpendicular to a given axis, up to ``eps_angle`` radians."""

    def __init__(self, points: np.ndarray, indices: Optional[np.ndarray] = None,
                 axis: Sequence[float] = (0.0, 0.0, 1.0), eps_angle: float = 0.0,
                 max_sample_checks: int = 1000):
        super().__init__(points, indices, max_sample_checks)
        self.axis = np.asarray(axis, dtype=np.float64)
        self.eps_angle = eps_angle

    def is_model_valid(self, coefficients: Optional[np.ndarray]) -> bool:
        if not super().is_model_valid(coefficients):
            return False
        # A zero axis or zero tolerance disables the constraint
        if self.eps_angle <= 0.0 or not np.any(self.axis):
            return True
        return float(_angle_between(coefficients[:3], self.axis)[0]) <= self.eps_angle


class NormalPlaneModel(PlaneModel):
    """
    Plane scored with a blend of Euclidean and surface-normal distance.

    For each point the angular deviation between its normal and the plane
    normal is mixed with the point-to-plane distance using
    ``w = normal_distance_weight * (1 - curvature)``.
    """

    def __init__(self, points: np.ndarray, normals: np.ndarray,
                 indices: Optional[np.ndarray] = None,
                 normal_distance_weight: float = 0.1,
                 curvatures: Optional[np.ndarray] = None,
                 max_sample_checks: int = 1000):
        super().__init__(points, indices, max_sample_checks)
        self.normals = np.asarray(normals, dtype=np.float64)
        if self.normals.shape != self.points.shape:
            raise ValueError("normals must have the same shape as points")
        if curvatures is None:
            curvatures = np.zeros(len(self.points))
        self.curvatures = np.asarray(curvatures, dtype=np.float64)
        self.normal_distance_weight = normal_distance_weight

    def get_distances_to_model(self, coefficients: np.ndarray) -> np.ndarray:
        euclid = super().get_distances_to_model(coefficients)
        angular = _angle_between(self.normals[self.indices], coefficients[:3])
        weight = self.normal_distance_weight * (1.0 - self.curvatures[self.indices])
        return np.abs(weight * angular + (1.0 - weight) * euclid)


class LineModel(SampleConsensusModel):
    """3D line given as ``[px, py, pz, dx, dy, dz]`` with unit direction."""

    sample_size = 2
    model_size = 6

    def is_sample_good(self, samples: np.ndarray) -> bool:
        p0, p1 = self.points[samples]
        return np.linalg.norm(p1 - p0) > 1e-12

    def compute_model_coefficients(self, samples: np.ndarray) -> Optional[np.ndarray]:
        if len(samples) != self.sample_size:
            return None

        p0, p1 = self.points[samples]
        direction = p1 - p0
        norm = np.linalg.norm(direction)
        if norm <= 1e-12:
            return None
        return np.concatenate([p0, direction / norm])

    def _offsets(self, coefficients: np.ndarray, pts: np.ndarray) -> np.ndarray:
        direction = coefficients[3:] / np.linalg.norm(coefficients[3:])
        return np.cross(pts - coefficients[:3], direction)

    def get_distances_to_model(self, coefficients: np.ndarray) -> np.ndarray:
        return np.linalg.norm(self._offsets(coefficients, self.points[self.indices]), axis=1)

    def residuals(self, coefficients: np.ndarray, point_indices: np.ndarray) -> np.ndarray:
        return self._offsets(coefficients, self.points[point_indices]).ravel()

    def normalize_coefficients(self, coefficients: np.ndarray) -> np.ndarray:
        direction = coefficients[3:] / np.linalg.norm(coefficients[3:])
        return np.concatenate([coefficients[:3], direction])


class SphereModel(SampleConsensusModel):
    """Sphere ``[cx, cy, cz, r]`` with optional radius limits."""

    sample_size = 4
    model_size = 4

    def __init__(self, points: np.ndarray, indices: Optional[np.ndarray] = None,
                 radius_min: float = -np.inf, radius_max: float = np.inf,
                 max_sample_checks: int = 1000):
        super().__init__(points, indices, max_sample_checks)
        self.radius_min = radius_min
        self.radius_max = radius_max

    def compute_model_coefficients(self, samples: np.ndarray) -> Optional[np.ndarray]:
        if len(samples) != self.sample_size:
            return None

        pts = self.points[samples]
        # |p_i - c|^2 = r^2 for all i, differenced against p_0
        A = 2.0 * (pts[1:] - pts[0])
        b = np.sum(pts[1:] ** 2, axis=1) - np.sum(pts[0] ** 2)
        if abs(np.linalg.det(A)) < 1e-12:
            return None

        center = np.linalg.solve(A, b)
        radius = np.linalg.norm(pts[0] - center)
        coefficients = np.append(center, radius)
        return coefficients if self.is_model_valid(coefficients) else None

    def is_model_valid(self, coefficients: Optional[np.ndarray]) -> bool:
        if not super().is_model_valid(coefficients):
            return False
        return self.radius_min <= coefficients[3] <= self.radius_max

    def get_distances_to_model(self, coefficients: np.ndarray) -> np.ndarray:
        return np.abs(self.residuals(coefficients, self.indices))

    def residuals(self, coefficients: np.ndarray, point_indices: np.ndarray) -> np.ndarray:
        pts = self.points[point_indices]
        return np.linalg.norm(pts - coefficients[:3], axis=1) - coefficients[3]

    def normalize_coefficients(self, coefficients: np.ndarray) -> np.ndarray:
        coefficients = coefficients.copy()
        coefficients[3] = abs(coefficients[3])
        return coefficients
