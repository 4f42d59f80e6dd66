"""
Data Models for Motion Data Analysis

Samples and fold state are immutable; every pipeline stage returns new
objects instead of mutating its input.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

Vector3 = Tuple[float, float, float]
GpsFix = Tuple[float, float]   # (lat, lng) in decimal degrees


@dataclass(frozen=True)
class MotionSample:
    """One instant of sensor data."""
    timestamp: int                  # ms since an arbitrary epoch (NaN if malformed)
    accel: Vector3                  # m/s^2
    gyro: Vector3                   # unit passed through unchanged
    gps: Optional[GpsFix] = None
    estimated_speed: Optional[float] = None   # m/s, set by fusion only


@dataclass(frozen=True)
class FusionState:
    """Running speed estimate carried between fold steps."""
    current_speed: float = 0.0


@dataclass(frozen=True)
class FusionStep:
    """Intermediate values of a single fold step."""
    index: int
    dt: float
    speed_from_accel: float
    speed_from_gps: float
    fused: float
    speed: float
    stale: bool


@dataclass
class AccelerationSeries:
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    z: List[float] = field(default_factory=list)
    magnitude: List[float] = field(default_factory=list)


@dataclass
class GyroscopeSeries:
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    z: List[float] = field(default_factory=list)


@dataclass
class GpsSeries:
    lat: List[float] = field(default_factory=list)
    lng: List[float] = field(default_factory=list)


@dataclass
class ProcessedSeries:
    """
    Parallel per-channel sequences ready for charting.

    `gps` only holds samples with a fix and `speed` only holds samples with an
    estimate, so neither is positionally aligned with `timestamps`.
    """
    timestamps: List[int] = field(default_factory=list)
    time_labels: List[str] = field(default_factory=list)
    acceleration: AccelerationSeries = field(default_factory=AccelerationSeries)
    gyroscope: GyroscopeSeries = field(default_factory=GyroscopeSeries)
    gps: GpsSeries = field(default_factory=GpsSeries)
    speed: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.timestamps)

    def to_dict(self) -> Dict:
        """Nested structure with the key names the presentation layer reads."""
        return {
            "timestamps": list(self.timestamps),
            "timeLabels": list(self.time_labels),
            "acceleration": {
                "x": list(self.acceleration.x),
                "y": list(self.acceleration.y),
                "z": list(self.acceleration.z),
                "magnitude": list(self.acceleration.magnitude),
            },
            "gyroscope": {
                "x": list(self.gyroscope.x),
                "y": list(self.gyroscope.y),
                "z": list(self.gyroscope.z),
            },
            "gps": {
                "lat": list(self.gps.lat),
                "lng": list(self.gps.lng),
            },
            "speed": list(self.speed),
        }
