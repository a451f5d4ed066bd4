"""Utility modules for rnareadsim."""

from rnareadsim.utils.config import (
    DEFAULT_ERROR_RATE,
    DEFAULT_FRAGLEN_MEAN,
    DEFAULT_FRAGLEN_SD,
    DEFAULT_GROUP_SIZES,
    DEFAULT_READ_LENGTH,
    DEFAULT_READS_PER_TRANSCRIPT,
    DEFAULT_THREADS,
    table_separator,
)
from rnareadsim.utils.io import (
    create_output_dirs,
    load_count_matrix,
    load_fold_changes,
    load_size_table,
    load_table,
    save_table,
)
from rnareadsim.utils.validation import (
    missing_ids,
    validate_fasta_path,
    validate_file_exists,
    validate_group_sizes,
)
from rnareadsim.utils.logging_utils import setup_logger
