"""Batch example: segment several point clouds from a YAML config."""

import sys
from pathlib import Path

import numpy as np
from sacseg.config import load_config
from sacseg.segmentation.sac_segmentation import SACSegmentation
from sacseg.utils.io_handler import JSONWriter
from sacseg.utils.logger import setup_logger_from_config


def main(config_path: str = None):
    """Segment every .npy cloud in data/clouds."""
    config = load_config(config_path)
    logger = setup_logger_from_config(config, 'batch_segmentation')

    if config['segmentation']['distance_threshold'] is None:
        config['segmentation']['distance_threshold'] = 0.01

    clouds_dir = Path("data/clouds")
    cloud_files = sorted(p for p in clouds_dir.glob("*.npy") if not p.name.endswith(".scores.npy"))
    logger.info(f"Processing {len(cloud_files)} clouds...")

    results = []
    for i, cloud_path in enumerate(cloud_files):
        logger.info(f"Processing cloud {i+1}/{len(cloud_files)}: {cloud_path.name}")

        points = np.load(cloud_path)
        if points.ndim != 2 or points.shape[1] != 3:
            logger.warning(f"Skipping {cloud_path}: expected an (N, 3) array")
            continue

        # Optional per-point confidence, best first for PROSAC
        scores_path = cloud_path.with_suffix('.scores.npy')
        order = np.argsort(-np.load(scores_path)) if scores_path.exists() else None

        seg = SACSegmentation.from_config(config)
        inliers, coefficients = seg.segment(points, order)
        results.append({
            'cloud_name': cloud_path.name,
            'inliers_found': len(inliers),
            'coefficients': coefficients
        })

    JSONWriter.save_results(results, "output/batch_results.json")
    logger.info("Batch segmentation complete!")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
