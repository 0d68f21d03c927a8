"""
I/O utilities for the NYC Building Report project.

This module reads the rent-stabilized registry export and writes finished
reports, with consistent error handling and logging.
"""

import json
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from .logging_utils import log_dataframe_info
from .models import RegistryEntry

logger = logging.getLogger(__name__)

# Column order of the registry spreadsheet export
REGISTRY_COLUMNS = ["number", "street", "borough", "zip"]


def read_csv(filepath: Path, **kwargs) -> pd.DataFrame:
    """
    Read a CSV file with standard settings.

    Args:
        filepath: Path to CSV file
        **kwargs: Additional arguments passed to pd.read_csv

    Returns:
        DataFrame with the CSV contents
    """
    return pd.read_csv(filepath, **kwargs)


def load_registry_csv(filepath: Path) -> list[RegistryEntry]:
    """
    Load the community registry of rent-stabilized buildings.

    The export has a header row and positional columns: number, street,
    borough, zip. Values are trimmed; rows without a number or street are
    dropped.

    Args:
        filepath: Path to the registry CSV export

    Returns:
        Registry entries in file order
    """
    df = read_csv(filepath, dtype=str, keep_default_na=False)
    if len(df.columns) < 3:
        raise ValueError(
            f"Registry file {filepath} has {len(df.columns)} columns; expected number, street, borough[, zip]"
        )
    df = df.iloc[:, : len(REGISTRY_COLUMNS)].copy()
    df.columns = REGISTRY_COLUMNS[: len(df.columns)]
    if "zip" not in df.columns:
        df["zip"] = ""
    log_dataframe_info(logger, df, "Registry")

    for col in REGISTRY_COLUMNS:
        df[col] = df[col].astype(str).str.strip()

    valid = (df["number"] != "") & (df["street"] != "")
    dropped = int((~valid).sum())
    if dropped:
        logger.warning(f"Dropping {dropped:,} registry rows without a number or street")

    return [
        RegistryEntry(number=row.number, street=row.street, borough=row.borough, zip=row.zip)
        for row in df[valid].itertuples(index=False)
    ]


def write_report_json(data: dict[str, Any], filepath: Path) -> None:
    """
    Write a rendered report to JSON.

    Args:
        data: Output of ``report_to_dict``
        filepath: Output path
    """
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as f:
        json.dump(data, f, indent=2)
