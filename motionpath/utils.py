"""
Utility Functions for Motion Data Analysis

This module provides helper functions for lenient numeric conversion and for
rounding values before they are serialized to JSON.
"""

import math
from typing import Optional

import numpy as np


def safe_float(value) -> float:
    """
    Safely convert a value to float, returning NaN on failure.
    
    Empty strings and None also map to NaN.
    
    Args:
        value: Value to convert (string, number, etc.).
        
    Returns:
        Float value, or np.nan if conversion fails.
    """
    if value is None:
        return np.nan
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return np.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return np.nan


def safe_timestamp(value):
    """
    Convert a timestamp field to integer milliseconds.
    
    Returns:
        int when the value is a finite number, np.nan otherwise.
    """
    number = safe_float(value)
    if not math.isfinite(number):
        return np.nan
    return int(number)


def is_missing(value) -> bool:
    """True for None and for float NaN."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def round_float(value, digits: int = 3) -> Optional[float]:
    """
    Round a float value, handling None, NaN, and Inf.
    
    Args:
        value: Value to round.
        digits: Number of decimal places. Default 3.
        
    Returns:
        Rounded float, or None if value is None, NaN, or Inf.
    """
    if value is None or (isinstance(value, float) and (np.isnan(value) or np.isinf(value))):
        return None
    return round(float(value), digits)


def json_safe(value):
    """
    Recursively replace NaN/Inf floats with None so the result is valid JSON.
    """
    if isinstance(value, dict):
        return {key: json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    if isinstance(value, (float, np.floating)):
        value = float(value)
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, np.integer):
        return int(value)
    return value
