"""
Motion Data Analysis CLI

Parses a motion CSV file, estimates speed by fusing acceleration with GPS,
prints a summary, and optionally writes CSV/JSON exports and a chart.
"""

import argparse
import logging
import sys
from pathlib import Path

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from motionpath import analyze_motion_data as amd
from motionpath.constants import GRAVITY_MPS2

logger = logging.getLogger("analyze_motion_data")


def print_summary(summary: dict, data_file: Path) -> None:
    """Print the speed and time range summary as a small table."""
    print(f"\n{'='*60}")
    print(f"MOTION SUMMARY: {data_file.name}")
    print(f"{'='*60}")
    print(f"{'Samples':<24}{summary['sample_count']}")
    print(f"{'GPS fixes':<24}{summary['gps_fix_count']}")
    print(f"{'Time range':<24}{summary['start_label']} - {summary['end_label']}")
    print(f"{'Duration (s)':<24}{amd.round_float(summary['duration_s'], 2)}")
    print(f"{'Average speed (m/s)':<24}{amd.round_float(summary['avg_speed_mps'], 2)}")
    print(f"{'Max speed (m/s)':<24}{amd.round_float(summary['max_speed_mps'], 2)}")
    print(f"{'='*60}\n")


def create_speed_plot(samples, output_path: Path) -> None:
    """
    Plot acceleration magnitude and estimated speed against elapsed time.

    Args:
        samples: Sorted, speed-annotated samples.
        output_path: PNG file to write.
    """
    df = amd.samples_to_frame(samples)
    df["accel_magnitude"] = [amd.acceleration_magnitude(s) for s in samples]
    elapsed_s = (df["timestamp"] - df["timestamp"].iloc[0]) / 1000.0

    fig, (ax_accel, ax_speed) = plt.subplots(2, 1, figsize=(12, 7), sharex=True)

    ax_accel.plot(elapsed_s, df["accel_magnitude"], color="tab:blue", linewidth=1)
    ax_accel.axhline(GRAVITY_MPS2, color="gray", linestyle="--", linewidth=0.8, label="gravity")
    ax_accel.set_ylabel("|accel| (m/s²)")
    ax_accel.legend(loc="upper right")
    ax_accel.grid(True, alpha=0.3)

    ax_speed.plot(elapsed_s, df["estimated_speed"], color="tab:green", linewidth=1.5)
    ax_speed.set_ylabel("Estimated speed (m/s)")
    ax_speed.set_xlabel("Elapsed time (s)")
    ax_speed.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    print(f"Saved speed plot to: {output_path}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Estimate speed from accelerometer/gyroscope/GPS CSV data"
    )
    parser.add_argument(
        "data_file",
        type=Path,
        help="CSV file with timestamp,accel_x,accel_y,accel_z,gyro_x,gyro_y,gyro_z[,lat,lng]"
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject rows with non-numeric fields instead of keeping NaN"
    )
    parser.add_argument(
        "--json",
        type=Path,
        default=None,
        help="Write the session payload as JSON to this path"
    )
    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="Write the processed samples as CSV to this path"
    )
    parser.add_argument(
        "--plot",
        type=Path,
        default=None,
        help="Write an acceleration/speed chart (PNG) to this path"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s - %(levelname)s - %(message)s",
    )

    if not args.data_file.exists():
        print(f"Error: Data file not found: {args.data_file}")
        return 1

    try:
        samples = amd.load_motion_file(args.data_file, strict=args.strict)
    except amd.ValidationError as exc:
        print(f"Error: {exc}")
        return 2

    annotated, series = amd.process_motion_data(samples)
    summary = amd.summarize_speed(series)
    print_summary(summary, args.data_file)

    if args.json:
        payload = amd.series_payload(series)
        args.json.write_text(amd.export_session_json(payload), encoding="utf-8")
        print(f"Saved session JSON to: {args.json}")

    if args.csv:
        args.csv.write_text(amd.export_series_csv(annotated), encoding="utf-8")
        print(f"Saved processed CSV to: {args.csv}")

    if args.plot:
        if annotated:
            create_speed_plot(annotated, args.plot)
        else:
            logger.warning("No samples to plot")

    return 0


if __name__ == "__main__":
    sys.exit(main())
