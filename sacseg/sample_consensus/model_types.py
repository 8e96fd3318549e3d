"""Sample consensus model identifiers."""

SACMODEL_PLANE = "plane"
SACMODEL_LINE = "line"
SACMODEL_SPHERE = "sphere"
SACMODEL_PERPENDICULAR_PLANE = "perpendicular_plane"
SACMODEL_NORMAL_PLANE = "normal_plane"

MODEL_TYPES = (
    SACMODEL_PLANE,
    SACMODEL_LINE,
    SACMODEL_SPHERE,
    SACMODEL_PERPENDICULAR_PLANE,
    SACMODEL_NORMAL_PLANE,
)
