# belote_engine/paths.py
from __future__ import annotations

from pathlib import Path

# Generated CSVs, transcripts and plots all land here by default.
RESULTS_DIR = Path(__file__).resolve().parent / "results" / "output"


def ensure_results_dir() -> Path:
    """Create the results directory if it does not exist and return it."""
    RESULTS_DIR.mkdir(parents=True, exist_ok=True)
    return RESULTS_DIR


def resolve_results_path(path_like: str | Path) -> Path:
    """
    Anchor a relative path inside RESULTS_DIR.

    Absolute paths are returned unchanged.
    """
    path = Path(path_like)
    if path.is_absolute():
        return path
    ensure_results_dir()
    return RESULTS_DIR / path
