"""
Constants for Motion Data Analysis

This module defines path constants, CSV column names, and the physical
constants used by the speed fusion pipeline.
"""

import os
from pathlib import Path

# Motion Data folder is one level up from motionpath/
DATA_DIR = Path(os.environ.get("MOTIONPATH_DATA_DIR", Path(__file__).parent.parent / "Motion Data"))

REQUIRED_COLUMNS = ("timestamp", "accel_x", "accel_y", "accel_z", "gyro_x", "gyro_y", "gyro_z")
GPS_COLUMNS = ("lat", "lng")

GRAVITY_MPS2 = 9.81
EARTH_RADIUS_M = 6371000.0

MAX_INTERVAL_S = 1.0    # longer gaps are treated as stale
ACCEL_WEIGHT = 0.3
GPS_WEIGHT = 0.7
DECAY_FACTOR = 0.95     # per-step damping (friction/drag)

MISSING_TIME_LABEL = "--:--:--"
