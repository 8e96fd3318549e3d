"""Basic usage example for sacseg."""

import numpy as np
from sacseg.sample_consensus.method_types import SAC_PROSAC
from sacseg.sample_consensus.model_types import SACMODEL_PLANE
from sacseg.segmentation.sac_segmentation import SACSegmentation
from sacseg.utils.io_handler import JSONWriter


def make_scene(seed: int = 0):
    """Noisy ground plane with clutter, plus a confidence score per point."""
    rng = np.random.default_rng(seed)
    xy = rng.uniform(-5, 5, (500, 2))
    z = 0.1 * xy[:, 0] + rng.normal(0, 0.002, 500)
    plane = np.column_stack([xy, z])
    clutter = rng.uniform(-5, 5, (500, 3))
    points = np.vstack([plane, clutter])
    confidence = np.concatenate([rng.uniform(0.4, 1.0, 500), rng.uniform(0.0, 0.6, 500)])
    return points, confidence


def main():
    """Run PROSAC plane segmentation."""
    points, confidence = make_scene()

    # PROSAC expects the most confident points first
    order = np.argsort(-confidence)

    print("Segmenting plane...")
    seg = SACSegmentation(SACMODEL_PLANE, SAC_PROSAC, distance_threshold=0.01,
                          max_iterations=1000, random_state=0)
    inliers, coefficients = seg.segment(points, order)

    if len(inliers) == 0:
        print("Error: no plane found")
        return

    print(f"Found {len(inliers)} inliers after {seg.sac.iterations} trials")
    print(f"Plane coefficients: {np.round(coefficients, 4)}")

    output_path = "output/basic_segmentation.json"
    JSONWriter.save_results({
        'coefficients': coefficients,
        'inliers': inliers,
        'iterations': seg.sac.iterations
    }, output_path)
    print(f"Results saved to {output_path}")


if __name__ == "__main__":
    main()
