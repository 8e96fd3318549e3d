"""Accuracy metrics for segmentation results."""

import numpy as np
from typing import Dict


class InlierMetrics:
    """Compare estimated inliers and coefficients against ground truth."""

    @staticmethod
    def calculate_precision_recall(predicted_inliers: np.ndarray,
                                   true_inliers: np.ndarray) -> Dict[str, float]:
        """Calculate precision, recall, and F1 score of an inlier set."""
        predicted = set(np.asarray(predicted_inliers, dtype=int).tolist())
        truth = set(np.asarray(true_inliers, dtype=int).tolist())

        true_positives = len(predicted & truth)
        false_positives = len(predicted - truth)
        false_negatives = len(truth - predicted)

        precision = true_positives / (true_positives + false_positives) if (true_positives + false_positives) > 0 else 0
        recall = true_positives / (true_positives + false_negatives) if (true_positives + false_negatives) > 0 else 0
        f1 = 2 * (precision * recall) / (precision + recall) if (precision + recall) > 0 else 0

        return {
            'precision': precision,
            'recall': recall,
            'f1_score': f1
        }

    @staticmethod
    def plane_coefficient_error(estimated: np.ndarray,
                                ground_truth: np.ndarray) -> Dict[str, float]:
        """Angle between plane normals (radians) and offset difference.

        Both planes are given as ``[a, b, c, d]``; the sign ambiguity of the
        normal is resolved before comparing offsets.
        """
        est = np.asarray(estimated, dtype=float)
        gt = np.asarray(ground_truth, dtype=float)
        est = est / np.linalg.norm(est[:3])
        gt = gt / np.linalg.norm(gt[:3])
        if np.dot(est[:3], gt[:3]) < 0:
            est = -est

        cos_angle = np.clip(np.dot(est[:3], gt[:3]), -1.0, 1.0)
        return {
            'normal_angle': float(np.arccos(cos_angle)),
            'offset_error': float(abs(est[3] - gt[3]))
        }
