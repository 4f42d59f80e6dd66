"""
Speed Fusion for Motion Data Analysis

This module estimates a scalar speed for every sample by dead-reckoning the
net linear acceleration and blending the result with the ground speed implied
by consecutive GPS fixes.

The estimate is a strictly sequential fold: each step depends on the speed
produced by the step before it. The fold state is an explicit FusionState so
any step can be replayed from a checkpoint.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

import numpy as np

from . import constants
from .models import FusionState, FusionStep, MotionSample

logger = logging.getLogger(__name__)


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate the great-circle distance between two points on Earth.

    Uses the Haversine formula to compute distance along the surface of a sphere.

    Args:
        lat1, lon1: Latitude and longitude of first point in degrees.
        lat2, lon2: Latitude and longitude of second point in degrees.

    Returns:
        Distance in meters between the two points.
    """
    R = constants.EARTH_RADIUS_M
    lat1_rad, lon1_rad = np.deg2rad(lat1), np.deg2rad(lon1)
    lat2_rad, lon2_rad = np.deg2rad(lat2), np.deg2rad(lon2)

    dlat = lat2_rad - lat1_rad
    dlon = lon2_rad - lon1_rad

    a = np.sin(dlat / 2) ** 2 + np.cos(lat1_rad) * np.cos(lat2_rad) * np.sin(dlon / 2) ** 2
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return float(R * c)


def acceleration_magnitude(sample: MotionSample) -> float:
    """Euclidean norm of the accelerometer vector in m/s^2."""
    ax, ay, az = sample.accel
    return float(np.sqrt(ax * ax + ay * ay + az * az))


def _non_negative(value: float) -> float:
    # np.maximum keeps NaN, unlike the builtin max
    return float(np.maximum(0.0, value))


def gps_speed(previous: MotionSample, current: MotionSample, dt: float) -> float:
    """
    Ground speed implied by two consecutive GPS fixes.

    Returns:
        Distance between the fixes divided by dt, or 0.0 when either sample
        has no fix.
    """
    if previous.gps is None or current.gps is None:
        return 0.0
    distance = haversine_m(previous.gps[0], previous.gps[1], current.gps[0], current.gps[1])
    return distance / dt


def _step(state: FusionState, previous: MotionSample, current: MotionSample,
          index: int) -> Tuple[FusionState, FusionStep]:
    dt = (current.timestamp - previous.timestamp) / 1000.0

    # NaN dt fails this comparison too and is treated as stale
    if not (0 < dt <= constants.MAX_INTERVAL_S):
        speed = state.current_speed
        return state, FusionStep(index, dt, speed, 0.0, speed, speed, True)

    net_accel = acceleration_magnitude(current) - constants.GRAVITY_MPS2
    speed_from_accel = _non_negative(state.current_speed + net_accel * dt)
    speed_from_gps = gps_speed(previous, current, dt)

    if speed_from_gps > 0:
        fused = constants.ACCEL_WEIGHT * speed_from_accel + constants.GPS_WEIGHT * speed_from_gps
    else:
        fused = speed_from_accel

    speed = _non_negative(fused * constants.DECAY_FACTOR)
    step = FusionStep(index, dt, speed_from_accel, speed_from_gps, fused, speed, False)
    return FusionState(current_speed=speed), step


def fuse_step(state: FusionState, previous: MotionSample,
              current: MotionSample) -> Tuple[FusionState, float]:
    """
    Run a single fold step over one consecutive pair of samples.

    Intervals that are non-positive or longer than MAX_INTERVAL_S leave the
    state untouched and carry the last speed forward.

    Args:
        state: Fold state after the previous sample.
        previous: Earlier sample of the pair.
        current: Later sample of the pair.

    Returns:
        Tuple of (new state, speed estimate for `current`).
    """
    new_state, step = _step(state, previous, current, index=0)
    return new_state, step.speed


def fusion_trace(samples: Sequence[MotionSample],
                 state: Optional[FusionState] = None) -> List[FusionStep]:
    """
    Run the fold and return the intermediate values of every step.

    Args:
        samples: Chronologically ordered samples.
        state: Optional seed state. Defaults to a standing start.

    Returns:
        One FusionStep per consecutive pair; step.index is the position of
        the later sample.
    """
    state = state or FusionState()
    steps = []
    for index in range(1, len(samples)):
        state, step = _step(state, samples[index - 1], samples[index], index)
        steps.append(step)
    return steps


def estimate_speed(samples: Sequence[MotionSample],
                   state: Optional[FusionState] = None) -> List[MotionSample]:
    """
    Annotate chronologically ordered samples with an estimated speed.

    The first sample never receives an estimate; every later sample gets the
    speed produced by its fold step. The input samples are not modified.

    Args:
        samples: Chronologically ordered samples.
        state: Optional seed state, for resuming a fold from a checkpoint.

    Returns:
        New list of samples with estimated_speed set on all but index 0.
    """
    result = list(samples)
    if len(result) < 2:
        return result

    steps = fusion_trace(result, state)
    for step in steps:
        result[step.index] = replace(result[step.index], estimated_speed=step.speed)

    stale = sum(1 for step in steps if step.stale)
    if stale:
        logger.debug("%d of %d intervals were stale, speed carried forward", stale, len(steps))
    return result
