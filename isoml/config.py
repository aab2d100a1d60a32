"""
Library-wide defaults.

Centralizes the constants used by the isolation trees, the estimators built
on top of them and the logging setup. Estimators take these as default
argument values, so changing a value here changes the default everywhere.
"""

import os
import sys

# Euler-Mascheroni constant used by the average path length estimate.
EULER_MASCHERONI = 0.5772156649

# Isolation tree
DEFAULT_MAX_DEPTH = sys.maxsize
DEFAULT_MAX_LEAF_SIZE = 5

# Score given to every leaf of a tree grown on a single sample. With one
# sample the normalization constant is 0 and no path length can tell
# samples apart.
DEGENERATE_SCORE = 1.0

# Isolation forest
ENSEMBLE_SIZE = 100
SUBSAMPLE_SIZE = 256
FOREST_MAX_LEAF_SIZE = 1
ANOMALY_THRESHOLD = 0.5

# Robust z score
ROBUST_Z_LAMBDA = 0.6745
ROBUST_Z_TOLERANCE = 3.0
ROBUST_Z_THRESHOLD = 3.5

# Added to denominators that can legitimately be zero.
EPSILON = 1e-8

LOG_LEVEL = os.environ.get("ISOML_LOG_LEVEL", "WARNING")
