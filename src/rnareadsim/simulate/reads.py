"""
Simulate RNA-seq reads from transcript sequences.

File-level entry points wrapping the readsim package:
1. Count model - negative binomial counts per transcript and sample
   (or a user-supplied count matrix)
2. Fragment generation - normal fragment lengths, uniform start positions
3. Strand/mate selection - random strand, inward-facing mate pairs
4. Sequencing errors - uniform substitutions
5. Output - one FASTA (or FASTA pair) per sample plus info tables
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

import numpy as np

from rnareadsim.utils.config import DEFAULT_GROUP_SIZES, DEFAULT_READS_PER_TRANSCRIPT

logger = logging.getLogger(__name__)


def load_config(config_file: Optional[str] = None):
    """Load a YAML/JSON config file, or the defaults when none is given."""
    from .readsim.config import SimConfig, get_default_config

    if not config_file:
        return get_default_config()
    config_path = Path(config_file)
    if config_path.suffix in ['.yaml', '.yml']:
        return SimConfig.from_yaml(config_file)
    return SimConfig.from_json(config_file)


def apply_overrides(config, **overrides):
    """
    Override config values with explicitly given parameters.

    Parameters left as None keep the config file value.
    """
    targets = {
        "read_length": (config.reads, "read_length"),
        "paired": (config.reads, "paired"),
        "strand_specific": (config.reads, "strand_specific"),
        "fraglen_mean": (config.fragments, "fraglen_mean"),
        "fraglen_sd": (config.fragments, "fraglen_sd"),
        "error_rate": (config.errors, "error_rate"),
        "error_model": (config.errors, "model"),
        "reads_per_transcript": (config.counts, "reads_per_transcript"),
        "group_sizes": (config.counts, "group_sizes"),
        "size": (config.counts, "size"),
        "lib_sizes": (config.counts, "lib_sizes"),
        "fold_changes_file": (config.counts, "fold_changes_path"),
        "count_matrix_file": (config.counts, "count_matrix_path"),
        "size_file": (config.counts, "size_path"),
        "output_dir": (config.output, "output_dir"),
        "compress": (config.output, "compress"),
        "write_info": (config.output, "write_info"),
        "seed": (config, "seed"),
        "threads": (config, "threads"),
    }
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in targets:
            raise KeyError(f"Unknown config override: {key}")
        obj, attr = targets[key]
        if isinstance(value, tuple):
            value = list(value)
        setattr(obj, attr, value)

    if overrides.get("count_matrix_file") is not None:
        config.counts.mode = "matrix"
    return config


def _aligned(df, transcript_ids, description):
    from rnareadsim.utils.validation import missing_ids
    from .readsim.errors import ConfigError

    missing = missing_ids(df, transcript_ids)
    if missing:
        raise ConfigError(
            f"{description} is missing {len(missing)} transcript(s), e.g. {missing[:3]}"
        )
    return df.loc[list(transcript_ids)]


def design_from_config(config, transcripts):
    """
    Build the count design described by a config, loading its tables.

    Args:
        config: SimConfig
        transcripts: Transcripts in output row order

    Returns:
        NegativeBinomialDesign or CountMatrixDesign
    """
    from rnareadsim.utils.io import (
        load_count_matrix,
        load_fold_changes,
        load_size_table,
    )
    from .readsim.counts import CountMatrixDesign, NegativeBinomialDesign

    counts = config.counts
    transcript_ids = [t.id for t in transcripts]

    if counts.mode == "matrix":
        matrix = load_count_matrix(counts.count_matrix_path)
        return CountMatrixDesign(counts=matrix, lib_sizes=counts.lib_sizes)

    fold_changes = None
    if counts.fold_changes_path:
        fc = _aligned(load_fold_changes(counts.fold_changes_path), transcript_ids, "Fold-change table")
        fold_changes = fc.iloc[:, 0].to_numpy(dtype=float) if fc.shape[1] == 1 \
            else fc.to_numpy(dtype=float)

    size = counts.size
    if counts.size_path:
        sizes = load_size_table(counts.size_path).to_frame()
        size = _aligned(sizes, transcript_ids, "Size table").iloc[:, 0].to_numpy(dtype=float)

    return NegativeBinomialDesign(
        reads_per_transcript=counts.reads_per_transcript,
        group_sizes=list(counts.group_sizes),
        fold_changes=fold_changes,
        size=size,
        lib_sizes=counts.lib_sizes,
    )


def run_read_simulation(
    input_file: str,
    output_dir: Optional[str] = None,
    # Count model
    reads_per_transcript: Optional[float] = None,
    group_sizes: Optional[Sequence[int]] = None,
    fold_changes_file: Optional[str] = None,
    count_matrix_file: Optional[str] = None,
    size: Optional[float] = None,
    size_file: Optional[str] = None,
    lib_sizes: Optional[Sequence[float]] = None,
    # Reads
    read_length: Optional[int] = None,
    paired: Optional[bool] = None,
    strand_specific: Optional[bool] = None,
    fraglen_mean: Optional[float] = None,
    fraglen_sd: Optional[float] = None,
    error_rate: Optional[float] = None,
    error_model: Optional[str] = None,
    # Run
    threads: Optional[int] = None,
    seed: Optional[int] = None,
    config_file: Optional[str] = None,
    compress: Optional[bool] = None,
    write_info: Optional[bool] = None,
    verbose: bool = False,
    log_file: Optional[str] = None,
):
    """
    Simulate RNA-seq reads from a transcript FASTA.

    Args:
        input_file: Transcript FASTA (plain or gzipped)
        output_dir: Output directory
        reads_per_transcript: Baseline mean reads per transcript
        group_sizes: Replicates per group
        fold_changes_file: Fold-change table (TSV/CSV)
        count_matrix_file: Count matrix table; replaces the negative binomial design
        size: Negative binomial size for all transcripts
        size_file: Per-transcript size table
        lib_sizes: Library size factor per sample
        read_length: Read length
        paired: Paired-end (True) or single-end (False)
        strand_specific: Always sample the sense strand
        fraglen_mean: Fragment length mean
        fraglen_sd: Fragment length standard deviation
        error_rate: Per-base substitution probability
        error_model: "uniform" or "identity"
        threads: Number of worker processes (0=auto)
        seed: Random seed
        config_file: YAML/JSON config file; explicit parameters override it
        compress: Compress output FASTA (gzip)
        write_info: Write info tables and config_used.yaml
        verbose: Enable verbose logging
        log_file: Optional log file

    Outputs:
        - sample_NN.fasta, or sample_NN_1.fasta + sample_NN_2.fasta when paired
        - sim_tx_info.txt, sim_rep_info.txt, sim_counts_matrix.tsv
        - config_used.yaml: Configuration used for simulation

    Returns:
        SimulationReport
    """
    from rnareadsim.utils.logging_utils import setup_logger
    from rnareadsim.utils.validation import validate_fasta_path
    from .readsim.errors import ConfigError
    from .readsim.io_utils import parse_fasta, summarize_transcripts
    from .readsim.simulator import simulate_experiment

    setup_logger(level=logging.DEBUG if verbose else logging.INFO, log_file=log_file)

    logger.info("RNA-seq read simulation")
    logger.info(f"Input: {input_file}")

    config = load_config(config_file)
    apply_overrides(
        config,
        read_length=read_length,
        paired=paired,
        strand_specific=strand_specific,
        fraglen_mean=fraglen_mean,
        fraglen_sd=fraglen_sd,
        error_rate=error_rate,
        error_model=error_model,
        reads_per_transcript=reads_per_transcript,
        group_sizes=group_sizes,
        size=size,
        lib_sizes=lib_sizes,
        fold_changes_file=fold_changes_file,
        count_matrix_file=count_matrix_file,
        size_file=size_file,
        output_dir=output_dir,
        compress=compress,
        write_info=write_info,
        seed=seed,
        threads=threads,
    )
    problems = config.validate()
    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))

    logger.info(f"Output: {config.output.output_dir}")
    logger.info(
        f"Reads: {'paired' if config.paired else 'single'}-end, "
        f"length {config.read_length}, fragments {config.fraglen_mean}+/-{config.fraglen_sd}, "
        f"error rate {config.error_rate}"
    )

    validate_fasta_path(input_file)
    transcripts = parse_fasta(input_file)
    logger.info(summarize_transcripts(transcripts))

    design = design_from_config(config, transcripts)

    report = simulate_experiment(transcripts, design, config, config.output.output_dir)
    logger.info("Simulation completed successfully!")
    return report


def run_count_simulation(
    input_file: str,
    output_file: str,
    reads_per_transcript: float = DEFAULT_READS_PER_TRANSCRIPT,
    group_sizes: Sequence[int] = DEFAULT_GROUP_SIZES,
    fold_changes_file: Optional[str] = None,
    size: Optional[float] = None,
    size_file: Optional[str] = None,
    lib_sizes: Optional[Sequence[float]] = None,
    seed: Optional[int] = None,
    verbose: bool = False,
):
    """
    Simulate a negative binomial count matrix without generating reads.

    Args:
        input_file: Transcript FASTA (only ids are used for row names)
        output_file: Output table (TSV, or CSV by suffix)
        reads_per_transcript: Baseline mean reads per transcript
        group_sizes: Replicates per group
        fold_changes_file: Fold-change table
        size: Negative binomial size for all transcripts
        size_file: Per-transcript size table
        lib_sizes: Library size factor per sample
        seed: Random seed
        verbose: Enable verbose logging

    Returns:
        CountMatrix
    """
    from rnareadsim.utils.io import save_table
    from rnareadsim.utils.logging_utils import setup_logger
    from rnareadsim.utils.validation import validate_fasta_path, validate_group_sizes
    from .readsim.counts import build_count_matrix
    from .readsim.errors import ConfigError
    from .readsim.io_utils import parse_fasta
    from .readsim.random_streams import resolve_entropy

    setup_logger(level=logging.DEBUG if verbose else logging.INFO)

    try:
        group_sizes = validate_group_sizes(group_sizes)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    config = load_config()
    apply_overrides(
        config,
        reads_per_transcript=reads_per_transcript,
        group_sizes=group_sizes,
        fold_changes_file=fold_changes_file,
        size=size,
        size_file=size_file,
        lib_sizes=lib_sizes,
    )
    problems = config.validate()
    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))

    validate_fasta_path(input_file)
    transcripts = parse_fasta(input_file)
    design = design_from_config(config, transcripts)

    entropy = resolve_entropy(seed)
    count_matrix = build_count_matrix(design, transcripts, seed=entropy)
    save_table(count_matrix.to_frame(), output_file)

    totals = count_matrix.values.sum(axis=0)
    logger.info(
        f"Count matrix: {count_matrix.num_transcripts} transcripts x "
        f"{count_matrix.num_samples} samples, reads per sample "
        f"{int(np.min(totals))}-{int(np.max(totals))}"
    )
    return count_matrix
