"""Input validation utilities for rnareadsim."""

import logging
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from rnareadsim.utils.config import FASTA_SUFFIXES

logger = logging.getLogger(__name__)


def validate_file_exists(filepath: str, description: str = "File") -> None:
    """
    Validate that a file exists.

    Args:
        filepath: Path to check
        description: Description for error message

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not Path(filepath).exists():
        raise FileNotFoundError(f"{description} not found: {filepath}")


def validate_fasta_path(filepath: str) -> None:
    """Check a transcript FASTA path exists; warn on an unusual suffix."""
    validate_file_exists(filepath, "Transcript FASTA")
    if not str(filepath).lower().endswith(FASTA_SUFFIXES):
        logger.warning(f"Unexpected FASTA suffix: {filepath}")


def missing_ids(df: pd.DataFrame, ids: Sequence[str]) -> List[str]:
    """
    Return the ids absent from a table's index, in the given order.

    Args:
        df: Table indexed by transcript id
        ids: Required ids
    """
    present = set(df.index)
    return [i for i in ids if i not in present]


def validate_group_sizes(group_sizes: Sequence[int]) -> List[int]:
    """
    Validate replicate counts per group.

    Raises:
        ValueError: If no groups are given or any group is empty
    """
    sizes = [int(g) for g in group_sizes]
    if not sizes:
        raise ValueError("At least one group is required")
    if any(g < 1 for g in sizes):
        raise ValueError(f"Each group must contain at least one sample: {sizes}")
    return sizes
