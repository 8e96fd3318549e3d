"""
sacseg - Sample consensus segmentation

Robust estimation of geometric models (planes, lines, spheres) from noisy
point sets, with classic RANSAC and progressive sample consensus (PROSAC).
"""

from .sample_consensus.prosac import ProgressiveSampleConsensus
from .sample_consensus.ransac import RandomSampleConsensus
from .segmentation.sac_segmentation import SACSegmentation, SACSegmentationFromNormals

__all__ = [
    'ProgressiveSampleConsensus',
    'RandomSampleConsensus',
    'SACSegmentation',
    'SACSegmentationFromNormals',
]
__version__ = '1.0.0'
