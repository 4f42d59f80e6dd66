"""
Time Series Ordering for Motion Data Analysis

This module puts parsed samples into chronological order and converts sample
lists into flat DataFrames suitable for export and plotting.
"""

import math
from typing import List, Sequence

import numpy as np
import pandas as pd

from .models import MotionSample

FRAME_COLUMNS = [
    "timestamp",
    "accel_x", "accel_y", "accel_z",
    "gyro_x", "gyro_y", "gyro_z",
    "lat", "lng",
    "estimated_speed",
]


def _sort_key(sample: MotionSample):
    ts = sample.timestamp
    if isinstance(ts, float) and math.isnan(ts):
        return (1, 0)
    return (0, ts)


def sort_chronologically(samples: Sequence[MotionSample]) -> List[MotionSample]:
    """
    Return a new list sorted by ascending timestamp.

    The sort is stable, so samples sharing a timestamp keep their original
    relative order. Samples whose timestamp could not be parsed (NaN) are
    placed after all others. The input sequence is not modified.

    Args:
        samples: Samples in any order.

    Returns:
        New list of the same samples in chronological order.
    """
    return sorted(samples, key=_sort_key)


def samples_to_frame(samples: Sequence[MotionSample]) -> pd.DataFrame:
    """
    Flatten samples into a DataFrame with one row per sample.

    Absent GPS fixes and speed estimates become NaN.

    Args:
        samples: Samples, typically already sorted and speed-annotated.

    Returns:
        DataFrame with columns timestamp, accel_x/y/z, gyro_x/y/z, lat, lng,
        estimated_speed.
    """
    rows = []

    for sample in samples:
        lat, lng = sample.gps if sample.gps is not None else (np.nan, np.nan)
        rows.append({
            "timestamp": sample.timestamp,
            "accel_x": sample.accel[0],
            "accel_y": sample.accel[1],
            "accel_z": sample.accel[2],
            "gyro_x": sample.gyro[0],
            "gyro_y": sample.gyro[1],
            "gyro_z": sample.gyro[2],
            "lat": lat,
            "lng": lng,
            "estimated_speed": np.nan if sample.estimated_speed is None else sample.estimated_speed,
        })

    return pd.DataFrame(rows, columns=FRAME_COLUMNS)
