"""File I/O utilities for rnareadsim."""

import logging
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from rnareadsim.utils.config import table_separator

logger = logging.getLogger(__name__)


def create_output_dirs(
    base_dir: Union[str, Path],
    subdirs: Optional[List[str]] = None,
) -> dict:
    """
    Create output directory structure.

    Args:
        base_dir: Base output directory
        subdirs: List of subdirectory names (default: none)

    Returns:
        Dictionary mapping "base" and each subdir name to Path objects
    """
    base_dir = Path(base_dir)
    base_dir.mkdir(parents=True, exist_ok=True)

    dirs = {"base": base_dir}
    for subdir in subdirs or []:
        dir_path = base_dir / subdir
        dir_path.mkdir(parents=True, exist_ok=True)
        dirs[subdir] = dir_path

    return dirs


def load_table(
    filepath: Union[str, Path],
    index_col: Optional[int] = 0,
) -> pd.DataFrame:
    """
    Load a TSV/CSV table, choosing the separator from the file suffix.

    Args:
        filepath: Path to the table
        index_col: Column to use as row index (default: first column)

    Returns:
        DataFrame; the index is converted to strings

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the table has no data columns
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    df = pd.read_csv(filepath, sep=table_separator(filepath), index_col=index_col)
    if df.shape[1] == 0:
        raise ValueError(f"No data columns in {filepath.name}")
    if index_col is not None:
        df.index = df.index.astype(str)

    logger.info(f"Loaded {len(df)} records from {filepath.name}")
    return df


def load_fold_changes(filepath: Union[str, Path]) -> pd.DataFrame:
    """
    Load a fold-change table.

    First column is the transcript id; one further column gives a two-group
    fold change, several columns give one multiplier per group.
    """
    df = load_table(filepath)
    return df.apply(pd.to_numeric, errors="raise")


def load_count_matrix(filepath: Union[str, Path]) -> pd.DataFrame:
    """Load a count matrix table (transcript id index, one column per sample)."""
    df = load_table(filepath)
    return df.apply(pd.to_numeric, errors="raise")


def load_size_table(filepath: Union[str, Path]) -> pd.Series:
    """Load a per-transcript negative binomial size table (first data column)."""
    df = load_table(filepath)
    return pd.to_numeric(df.iloc[:, 0], errors="raise")


def save_table(
    df: pd.DataFrame,
    filepath: Union[str, Path],
    index: bool = True,
) -> None:
    """
    Save DataFrame as TSV/CSV according to the file suffix.

    Args:
        df: DataFrame to save
        filepath: Output file path
        index: Write row index
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(filepath, sep=table_separator(filepath), index=index)
    logger.info(f"Saved {len(df)} records to {filepath}")
