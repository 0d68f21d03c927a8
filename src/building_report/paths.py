"""
Path configuration for the NYC Building Report project.

This module provides standardized paths to the registry input, saved reports
and logs, so the library and the scripts agree on where files live.
"""

from datetime import date
from pathlib import Path

# Project root directory (parent of src/)
PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
REGISTRY_DIR = DATA_DIR / "registry"

# Output directories
OUTPUTS_DIR = PROJECT_ROOT / "outputs"
REPORTS_DIR = OUTPUTS_DIR / "reports"

# Logs
LOGS_DIR = PROJECT_ROOT / "logs"


def ensure_dirs_exist() -> None:
    """Create all project directories if they don't exist."""
    for d in (REGISTRY_DIR, REPORTS_DIR, LOGS_DIR):
        d.mkdir(parents=True, exist_ok=True)


def get_registry_path() -> Path:
    """Return the default location of the rent-stabilized registry CSV."""
    return REGISTRY_DIR / "rent_stabilized_buildings.csv"


def get_dated_filename(base_name: str, extension: str = "json") -> str:
    """
    Generate a filename with today's date stamp.

    Args:
        base_name: Base name for the file (e.g., '350_5TH_AVENUE')
        extension: File extension without dot (e.g., 'json', 'csv')

    Returns:
        Filename with date stamp (e.g., '350_5TH_AVENUE_2025-01-15.json')
    """
    today = date.today().isoformat()
    return f"{base_name}_{today}.{extension}"


if __name__ == "__main__":
    print(f"PROJECT_ROOT: {PROJECT_ROOT}")
    print(f"REGISTRY_DIR: {REGISTRY_DIR}")
    print(f"REPORTS_DIR: {REPORTS_DIR}")
    print(f"LOGS_DIR: {LOGS_DIR}")
