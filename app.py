"""
FastAPI Web Application for Motion Data Analysis

This module provides a REST API for processing motion CSV data and for
viewing and exporting the processed series of stored datasets. Charts are
rendered by an external front end that reads these endpoints.
"""

import logging
from typing import Dict, Tuple

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from motionpath import analyze_motion_data

logger = logging.getLogger(__name__)


# ============================================================================
# APPLICATION SETUP
# ============================================================================

app = FastAPI(title="Motion Path Visualizer API")


# ============================================================================
# DATASET DISCOVERY
# ============================================================================

def get_available_datasets() -> list:
    """
    Discover available motion data files in the Motion Data directory.

    Returns:
        List of dictionaries with 'filename' and 'display_name' keys, sorted
        by filename.
    """
    data_dir = analyze_motion_data.DATA_DIR
    datasets = []

    if not data_dir.exists():
        return datasets

    for file_path in data_dir.glob("*.csv"):
        display_name = file_path.stem.replace("_", " ").title()
        datasets.append({
            "filename": file_path.name,
            "display_name": display_name,
        })

    datasets.sort(key=lambda x: x["filename"])
    return datasets


# ============================================================================
# SESSION LOADING & CACHING
# ============================================================================

# Cache for loaded sessions (dataset_filename -> session_data)
session_cache: Dict[str, dict] = {}
# Sorted, speed-annotated samples behind each cached session
samples_cache: Dict[str, list] = {}


def load_dataset(dataset_filename: str) -> Tuple[list, dict]:
    """
    Load, process and cache a stored motion dataset.

    The file is parsed and fused once; later requests reuse both the
    annotated samples and the session payload.

    Args:
        dataset_filename: Name of a CSV file inside DATA_DIR.

    Returns:
        Tuple of (sorted speed-annotated samples, session payload).

    Raises:
        HTTPException: 404 if the dataset does not exist, 422 if it is not
        UTF-8 text or fails validation.
    """
    if dataset_filename in session_cache and dataset_filename in samples_cache:
        return samples_cache[dataset_filename], session_cache[dataset_filename]

    data_dir = analyze_motion_data.DATA_DIR
    data_file = data_dir / dataset_filename
    # Reject names that escape the data directory
    if data_file.resolve().parent != data_dir.resolve() or not data_file.is_file():
        raise HTTPException(status_code=404, detail=f"Dataset file not found: {dataset_filename}")

    try:
        samples = analyze_motion_data.load_motion_file(data_file)
    except analyze_motion_data.ValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    annotated, series = analyze_motion_data.process_motion_data(samples)
    session = analyze_motion_data.series_payload(series)

    samples_cache[dataset_filename] = annotated
    session_cache[dataset_filename] = session
    return annotated, session


def load_session(dataset_filename: str) -> dict:
    """
    Session payload of a stored dataset, see load_dataset().
    """
    return load_dataset(dataset_filename)[1]


# ============================================================================
# API ROUTES - DATASET MANAGEMENT
# ============================================================================

@app.get("/api/datasets")
def get_datasets():
    """
    Get list of available datasets.
    """
    return get_available_datasets()


# ============================================================================
# API ROUTES - DATA RETRIEVAL
# ============================================================================

@app.get("/api/session")
def get_session(dataset: str = Query(..., description="Dataset filename to load")):
    """
    Get the complete session payload (series and summary) for a dataset.
    """
    return load_session(dataset)


@app.get("/api/series")
def get_series(dataset: str = Query(..., description="Dataset filename to load")):
    """
    Get the per-channel series for a dataset.

    The gps and speed lists may be shorter than timestamps.
    """
    return load_session(dataset)["series"]


@app.get("/api/summary")
def get_summary(dataset: str = Query(..., description="Dataset filename to load")):
    """
    Get average/maximum speed and the time range for a dataset.
    """
    return load_session(dataset)["summary"]


@app.post("/api/process")
async def process_upload(request: Request,
                         strict: bool = Query(False, description="Reject non-numeric fields")):
    """
    Process CSV text posted as the request body.

    Returns:
        Session payload for the uploaded data.

    Raises:
        HTTPException: 400 if the body is not UTF-8, 422 if validation fails.
    """
    body = await request.body()
    try:
        text = body.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise HTTPException(status_code=400, detail="Request body must be UTF-8 text") from exc

    try:
        return await run_in_threadpool(
            analyze_motion_data.build_session_payload, text=text, strict=strict
        )
    except analyze_motion_data.ValidationError as exc:
        logger.info("Rejected upload: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


# ============================================================================
# API ROUTES - EXPORT
# ============================================================================

@app.get("/api/export/csv")
def export_csv(dataset: str = Query(..., description="Dataset filename to export")):
    """
    Export the processed samples of a dataset as CSV.

    Returns:
        PlainTextResponse: CSV file with Content-Disposition header for
        download. Filename: <dataset stem>_processed.csv
    """
    annotated, _ = load_dataset(dataset)
    csv_body = analyze_motion_data.export_series_csv(annotated)

    stem = dataset.rsplit(".", 1)[0]
    headers = {"Content-Disposition": f"attachment; filename={stem}_processed.csv"}
    return PlainTextResponse(
        csv_body,
        media_type="text/csv",
        headers=headers
    )


# ============================================================================
# RUN INSTRUCTIONS
# ============================================================================
# Run with: uvicorn app:app --reload
