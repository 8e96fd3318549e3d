"""Sample consensus method identifiers."""

SAC_RANSAC = "ransac"
SAC_PROSAC = "prosac"

METHOD_TYPES = (SAC_RANSAC, SAC_PROSAC)
