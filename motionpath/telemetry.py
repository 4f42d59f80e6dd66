"""
Series Projection for Motion Data Analysis

This module converts speed-annotated samples into parallel per-channel
series and summary statistics suitable for charting and API responses.
"""

from typing import Dict, Sequence

import numpy as np
import pandas as pd

from . import constants
from . import utils
from .fusion import acceleration_magnitude
from .models import MotionSample, ProcessedSeries


def format_time_label(timestamp_ms) -> str:
    """
    Render a millisecond timestamp as a UTC wall-clock label (HH:MM:SS).

    Args:
        timestamp_ms: Milliseconds since the Unix epoch.

    Returns:
        Time label, or MISSING_TIME_LABEL when the timestamp is NaN.
    """
    if utils.is_missing(timestamp_ms):
        return constants.MISSING_TIME_LABEL
    try:
        return pd.Timestamp(int(timestamp_ms), unit="ms", tz="UTC").strftime("%H:%M:%S")
    except (OverflowError, ValueError):
        # outside the datetime64 range
        return str(int(timestamp_ms))


def build_processed_series(samples: Sequence[MotionSample]) -> ProcessedSeries:
    """
    Project speed-annotated samples into a ProcessedSeries.

    Acceleration magnitude is recomputed here for every sample. GPS
    coordinates are appended only for samples with a fix, and speed only for
    samples with an estimate, so those lists may be shorter than the others.

    Args:
        samples: Chronologically ordered, speed-annotated samples.

    Returns:
        ProcessedSeries holding the per-channel lists.
    """
    series = ProcessedSeries()

    for sample in samples:
        series.timestamps.append(sample.timestamp)
        series.time_labels.append(format_time_label(sample.timestamp))

        # Acceleration
        series.acceleration.x.append(sample.accel[0])
        series.acceleration.y.append(sample.accel[1])
        series.acceleration.z.append(sample.accel[2])
        series.acceleration.magnitude.append(acceleration_magnitude(sample))

        # Gyroscope
        series.gyroscope.x.append(sample.gyro[0])
        series.gyroscope.y.append(sample.gyro[1])
        series.gyroscope.z.append(sample.gyro[2])

        # GPS
        if sample.gps is not None:
            series.gps.lat.append(sample.gps[0])
            series.gps.lng.append(sample.gps[1])

        # Speed
        if sample.estimated_speed is not None:
            series.speed.append(sample.estimated_speed)

    return series


def summarize_speed(series: ProcessedSeries) -> Dict:
    """
    Compute the summary statistics shown next to the charts.

    Average and maximum ignore NaN speeds and are 0.0 when no finite speed
    exists. The time range uses the first and last finite timestamps.

    Args:
        series: Output of build_processed_series().

    Returns:
        Dictionary with avg_speed_mps, max_speed_mps, sample_count,
        gps_fix_count, start_ms, end_ms, duration_s, start_label, end_label.
    """
    speeds = np.asarray(series.speed, dtype=float)
    speeds = speeds[np.isfinite(speeds)]
    timestamps = [ts for ts in series.timestamps if not utils.is_missing(ts)]

    start_ms = timestamps[0] if timestamps else None
    end_ms = timestamps[-1] if timestamps else None

    return {
        "avg_speed_mps": float(np.mean(speeds)) if speeds.size else 0.0,
        "max_speed_mps": float(np.max(speeds)) if speeds.size else 0.0,
        "sample_count": len(series),
        "gps_fix_count": len(series.gps.lat),
        "start_ms": start_ms,
        "end_ms": end_ms,
        "duration_s": (end_ms - start_ms) / 1000.0 if timestamps else 0.0,
        "start_label": format_time_label(start_ms) if timestamps else constants.MISSING_TIME_LABEL,
        "end_label": format_time_label(end_ms) if timestamps else constants.MISSING_TIME_LABEL,
    }

