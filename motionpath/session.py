"""
Session Builder for Motion Data Analysis

This module orchestrates the complete analysis pipeline, combining all
processing steps to build a session payload for one input file.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from . import data_loading
from . import fusion
from . import telemetry
from . import time_series
from . import utils
from .models import MotionSample, ProcessedSeries

logger = logging.getLogger(__name__)


def process_motion_data(samples: Sequence[MotionSample]) -> Tuple[List[MotionSample], ProcessedSeries]:
    """
    Sort, speed-annotate and project parsed samples.
    
    Args:
        samples: Samples in file order from the parser.
        
    Returns:
        Tuple of (sorted speed-annotated samples, ProcessedSeries).
    """
    ordered = time_series.sort_chronologically(samples)
    annotated = fusion.estimate_speed(ordered)
    series = telemetry.build_processed_series(annotated)
    return annotated, series


def series_payload(series: ProcessedSeries) -> Dict:
    """
    Wrap a ProcessedSeries and its summary into a JSON-ready dictionary.
    
    NaN values are replaced with None.
    """
    return utils.json_safe({
        "series": series.to_dict(),
        "summary": telemetry.summarize_speed(series),
        "sample_count": len(series),
        "has_gps": bool(series.gps.lat),
    })


def build_session_payload(text: Optional[str] = None, data_file: Optional[Path] = None,
                          strict: bool = False) -> Dict:
    """
    Build a complete session payload from CSV text or a CSV file.
    
    Main entry point that runs the whole pipeline:
    1. Parses and validates the CSV input
    2. Sorts samples chronologically
    3. Estimates speed by fusing acceleration and GPS
    4. Projects the per-channel series
    5. Summarizes speed and time range
    
    Args:
        text: Raw CSV text. Takes precedence over data_file.
        data_file: Path to a CSV file, used when text is None.
        strict: Reject non-numeric fields instead of keeping NaN.
        
    Returns:
        JSON-ready dictionary containing:
        - series: per-channel lists (ProcessedSeries.to_dict())
        - summary: average/maximum speed and time range
        - sample_count: number of parsed samples
        - has_gps: whether any sample carries a GPS fix
        
    Raises:
        ValueError: If neither text nor data_file is given.
        ValidationError: If the CSV header is invalid.
    """
    if text is not None:
        samples = data_loading.parse_motion_csv(text, strict=strict)
    elif data_file is not None:
        samples = data_loading.load_motion_file(data_file, strict=strict)
    else:
        raise ValueError("Either text or data_file must be provided.")
    
    _, series = process_motion_data(samples)
    payload = series_payload(series)
    logger.info("Processed %d samples, max speed %.2f m/s",
                payload["sample_count"], payload["summary"]["max_speed_mps"])
    return payload
