"""
Export Functions for Motion Data Analysis

This module provides functions to export processed runs to CSV and JSON
for external analysis or backup.
"""

import csv
import io
import json
from typing import Dict, Sequence

from . import utils
from .fusion import acceleration_magnitude
from .models import MotionSample
from .telemetry import format_time_label

CSV_HEADER = [
    "timestamp",
    "time_label",
    "accel_x",
    "accel_y",
    "accel_z",
    "accel_magnitude",
    "gyro_x",
    "gyro_y",
    "gyro_z",
    "lat",
    "lng",
    "estimated_speed",
]


def _cell(value):
    return "" if utils.is_missing(value) else value


def export_series_csv(samples: Sequence[MotionSample]) -> str:
    """
    Export processed samples to CSV format.
    
    Args:
        samples: Sorted, speed-annotated samples from process_motion_data().
        
    Returns:
        CSV string with one row per sample. Missing GPS fixes, missing speed
        estimates and NaN values are written as empty cells.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    
    # Write header
    writer.writerow(CSV_HEADER)
    
    # Write data rows
    for sample in samples:
        lat, lng = sample.gps if sample.gps is not None else (None, None)
        writer.writerow([
            _cell(sample.timestamp),
            format_time_label(sample.timestamp),
            _cell(sample.accel[0]),
            _cell(sample.accel[1]),
            _cell(sample.accel[2]),
            _cell(acceleration_magnitude(sample)),
            _cell(sample.gyro[0]),
            _cell(sample.gyro[1]),
            _cell(sample.gyro[2]),
            _cell(lat),
            _cell(lng),
            _cell(sample.estimated_speed),
        ])
    
    return buffer.getvalue()


def export_session_json(session: Dict) -> str:
    """
    Serialize a session payload to pretty-printed JSON.
    
    NaN and Inf values are written as null.
    """
    return json.dumps(utils.json_safe(session), indent=2)
