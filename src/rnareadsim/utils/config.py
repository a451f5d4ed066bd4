"""Configuration constants for rnareadsim."""

# Default simulation parameters
DEFAULT_READ_LENGTH = 100
DEFAULT_FRAGLEN_MEAN = 250.0
DEFAULT_FRAGLEN_SD = 25.0
DEFAULT_ERROR_RATE = 0.005
DEFAULT_READS_PER_TRANSCRIPT = 300.0
DEFAULT_GROUP_SIZES = (10, 10)
DEFAULT_THREADS = 1

# Accepted table and sequence suffixes
FASTA_SUFFIXES = (".fa", ".fasta", ".fna", ".fa.gz", ".fasta.gz", ".fna.gz")
CSV_SUFFIXES = (".csv", ".csv.gz")


def table_separator(filepath) -> str:
    """Field separator for a table path: comma for .csv, tab otherwise."""
    name = str(filepath).lower()
    return "," if name.endswith(CSV_SUFFIXES) else "\t"
