"""
Data Loading and Parsing for Motion Data Analysis

This module handles loading and parsing raw motion CSV text into typed
MotionSample records. Columns are located by name, so their order in the file
does not matter.
"""

import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from . import constants
from . import utils
from .models import MotionSample

logger = logging.getLogger(__name__)


class ValidationError(ValueError):
    """Raised when motion CSV input cannot be accepted."""


class MalformedValueError(ValidationError):
    """Raised in strict mode when a field fails numeric conversion."""

    def __init__(self, line_number: int, column: str, raw_value: Optional[str]):
        self.line_number = line_number
        self.column = column
        self.raw_value = raw_value
        super().__init__(
            f"Line {line_number}: column '{column}' has non-numeric value {raw_value!r}"
        )


def parse_header(header_line: str, delimiter: str = ",") -> Dict[str, int]:
    """
    Map column names to their position in the header.

    Names are stripped of surrounding whitespace. When a name repeats, the
    first occurrence wins.

    Args:
        header_line: First line of the CSV text.
        delimiter: Field delimiter. Default ",".

    Returns:
        Dictionary mapping column name to column index.
    """
    columns = {}
    for idx, name in enumerate(header_line.split(delimiter)):
        columns.setdefault(name.strip(), idx)
    return columns


def validate_header(columns: Dict[str, int]) -> None:
    """
    Check that every required column is present.

    Raises:
        ValidationError: If one or more required columns are missing.
    """
    missing = [name for name in constants.REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise ValidationError(
            "CSV file is missing required columns: "
            f"{', '.join(missing)}. Required format: {','.join(constants.REQUIRED_COLUMNS)}"
        )


def has_gps_columns(columns: Dict[str, int]) -> bool:
    """GPS is read only when both lat and lng are in the header."""
    return all(name in columns for name in constants.GPS_COLUMNS)


def _field(values: Sequence[str], columns: Dict[str, int], name: str) -> Optional[str]:
    idx = columns[name]
    if idx >= len(values):
        return None
    return values[idx]


def parse_row(values: Sequence[str], columns: Dict[str, int], with_gps: bool,
              line_number: int, strict: bool = False) -> MotionSample:
    """
    Convert one split CSV row into a MotionSample.

    Malformed or missing numeric fields become NaN, unless `strict` is set,
    in which case the first bad field raises MalformedValueError.

    Args:
        values: Fields of the row, already split on the delimiter.
        columns: Column name to index mapping from parse_header().
        with_gps: Whether the header carries both GPS columns.
        line_number: 1-based line number, used in error messages.
        strict: Reject malformed fields instead of keeping NaN.

    Returns:
        MotionSample with estimated_speed unset.
    """
    def number(name: str) -> float:
        raw = _field(values, columns, name)
        value = utils.safe_float(raw)
        if strict and math.isnan(value):
            raise MalformedValueError(line_number, name, raw)
        return value

    timestamp_raw = _field(values, columns, "timestamp")
    timestamp = utils.safe_timestamp(timestamp_raw)
    if strict and utils.is_missing(timestamp):
        raise MalformedValueError(line_number, "timestamp", timestamp_raw)

    gps = None
    if with_gps:
        gps = (number("lat"), number("lng"))

    return MotionSample(
        timestamp=timestamp,
        accel=(number("accel_x"), number("accel_y"), number("accel_z")),
        gyro=(number("gyro_x"), number("gyro_y"), number("gyro_z")),
        gps=gps,
    )


def _row_has_nan(sample: MotionSample) -> bool:
    values = [sample.timestamp, *sample.accel, *sample.gyro]
    if sample.gps is not None:
        values.extend(sample.gps)
    return any(utils.is_missing(v) for v in values)


def parse_motion_csv(text: str, delimiter: str = ",", strict: bool = False) -> List[MotionSample]:
    """
    Parse delimited motion text into MotionSample records.

    The first line names the columns. Blank lines are skipped, and rows are
    returned in file order.

    Args:
        text: Raw CSV text.
        delimiter: Field delimiter. Default ",".
        strict: Raise MalformedValueError on non-numeric fields instead of
            keeping NaN.

    Returns:
        List of MotionSample, one per non-blank data row.

    Raises:
        ValidationError: If the input is empty or required columns are missing.
    """
    lines = text.lstrip("\ufeff").strip().splitlines()
    if not lines:
        raise ValidationError("CSV input is empty")

    columns = parse_header(lines[0], delimiter)
    validate_header(columns)
    with_gps = has_gps_columns(columns)
    if not with_gps:
        logger.debug("No lat/lng columns in header, GPS fusion disabled")

    samples = []
    rows_with_nan = 0

    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue
        sample = parse_row(line.split(delimiter), columns, with_gps, line_number, strict)
        if _row_has_nan(sample):
            rows_with_nan += 1
        samples.append(sample)

    if rows_with_nan:
        logger.warning("%d of %d rows contain non-numeric fields (kept as NaN)",
                       rows_with_nan, len(samples))
    logger.info("Parsed %d motion samples (gps=%s)", len(samples), with_gps)
    return samples


def load_motion_file(file_path: Path, strict: bool = False) -> List[MotionSample]:
    """
    Load and parse a motion CSV file.

    Args:
        file_path: Path to a UTF-8 CSV file.
        strict: Passed through to parse_motion_csv().

    Returns:
        List of MotionSample in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValidationError: If the file is not UTF-8 text or the header is invalid.
    """
    try:
        with Path(file_path).open("r", encoding="utf-8-sig") as file:
            text = file.read()
    except UnicodeDecodeError as exc:
        raise ValidationError(f"{Path(file_path).name} is not UTF-8 text") from exc
    return parse_motion_csv(text, strict=strict)
