"""Sample consensus estimators and geometric models."""

from .method_types import SAC_RANSAC, SAC_PROSAC
from .model_types import (
    SACMODEL_PLANE,
    SACMODEL_LINE,
    SACMODEL_SPHERE,
    SACMODEL_PERPENDICULAR_PLANE,
    SACMODEL_NORMAL_PLANE,
)
from .model import SampleConsensusModel
from .models import PlaneModel, PerpendicularPlaneModel, NormalPlaneModel, LineModel, SphereModel
from .sac import SampleConsensus, ConsensusResult
from .ransac import RandomSampleConsensus
from .prosac import ProgressiveSampleConsensus
