"""
Motion Data Analysis Module

This module processes raw accelerometer, gyroscope and GPS samples, estimating
speed by sensor fusion and projecting the result into per-channel series.

It imports and re-exports the public functions of the modular structure so
callers can use a single import.
"""

# Import constants
from .constants import DATA_DIR, REQUIRED_COLUMNS, GPS_COLUMNS

# Import data model
from .models import (
    MotionSample,
    FusionState,
    FusionStep,
    ProcessedSeries,
)

# Import utility functions
from .utils import (
    safe_float,
    round_float,
    json_safe,
)

# Import data loading functions
from .data_loading import (
    ValidationError,
    MalformedValueError,
    parse_motion_csv,
    load_motion_file,
)

# Import time series functions
from .time_series import (
    sort_chronologically,
    samples_to_frame,
)

# Import fusion functions
from .fusion import (
    haversine_m,
    acceleration_magnitude,
    fuse_step,
    fusion_trace,
    estimate_speed,
)

# Import telemetry functions
from .telemetry import (
    format_time_label,
    build_processed_series,
    summarize_speed,
)

# Import export functions
from .export import (
    export_series_csv,
    export_session_json,
)

# Import session builder functions
from .session import (
    process_motion_data,
    series_payload,
    build_session_payload,
)

__all__ = [
    # Constants
    "DATA_DIR",
    "REQUIRED_COLUMNS",
    "GPS_COLUMNS",
    # Data model
    "MotionSample",
    "FusionState",
    "FusionStep",
    "ProcessedSeries",
    # Utilities
    "safe_float",
    "round_float",
    "json_safe",
    # Data loading
    "ValidationError",
    "MalformedValueError",
    "parse_motion_csv",
    "load_motion_file",
    # Time series
    "sort_chronologically",
    "samples_to_frame",
    # Fusion
    "haversine_m",
    "acceleration_magnitude",
    "fuse_step",
    "fusion_trace",
    "estimate_speed",
    # Telemetry
    "format_time_label",
    "build_processed_series",
    "summarize_speed",
    # Export
    "export_series_csv",
    "export_session_json",
    # Session builder
    "process_motion_data",
    "series_payload",
    "build_session_payload",
]
