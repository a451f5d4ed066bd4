"""
rnareadsim CLI - Command Line Interface for RNA-seq read simulation.

Usage:
    rnasim <command> [options]

Each command is an independent tool.
"""

import logging
import os
import sys

# Must run before numpy is imported; worker processes use single-threaded BLAS
for _var in ("OMP_NUM_THREADS", "OPENBLAS_NUM_THREADS", "MKL_NUM_THREADS",
             "VECLIB_MAXIMUM_THREADS", "NUMEXPR_NUM_THREADS"):
    os.environ.setdefault(_var, "1")

import click

from rnareadsim import __version__
from rnareadsim.utils.config import DEFAULT_GROUP_SIZES, DEFAULT_READS_PER_TRANSCRIPT

logger = logging.getLogger(__name__)


def _parse_number_list(ctx, param, value):
    """Parse a comma-separated list such as "10,10" or "1,1.5,0.8"."""
    if value is None:
        return None
    cast = int if param.name == "group_sizes" else float
    try:
        return [cast(x) for x in value.split(",") if x.strip()]
    except ValueError:
        raise click.BadParameter(f"expected comma-separated numbers, got {value!r}")


@click.group()
@click.version_option(version=__version__, prog_name="rnareadsim")
def main():
    """rnareadsim - RNA-seq read simulation from transcript sequences.

    Each command is an independent tool. Use 'rnasim <command> --help'
    for detailed usage of each command.
    """
    pass


# ============================================================================
# Simulation Commands
# ============================================================================

@main.command()
@click.option("-i", "--input", "input_file", required=True, help="Transcript FASTA file")
@click.option("-o", "--output", help="Output directory (default: reads)")
@click.option("--reads-per-transcript", type=float,
              help="Baseline mean reads per transcript (default: 300)")
@click.option("--group-sizes", callback=_parse_number_list,
              help="Replicates per group, comma-separated (default: 10,10)")
@click.option("--fold-changes", "fold_changes_file",
              help="Fold-change table (transcript id + one column per group)")
@click.option("--count-matrix", "count_matrix_file",
              help="Count matrix table; replaces the negative binomial design")
@click.option("--size", type=float, help="Negative binomial size (default: mean/3)")
@click.option("--size-table", "size_file", help="Per-transcript size table")
@click.option("--lib-sizes", callback=_parse_number_list,
              help="Library size factor per sample, comma-separated")
@click.option("-l", "--read-length", type=int, help="Read length (default: 100)")
@click.option("--paired/--single-end", default=None, help="Paired-end or single-end reads")
@click.option("--strand-specific/--unstranded", default=None,
              help="Always sample the sense strand")
@click.option("--fraglen-mean", type=float, help="Fragment length mean (default: 250)")
@click.option("--fraglen-sd", type=float, help="Fragment length SD (default: 25)")
@click.option("-e", "--error-rate", type=float, help="Substitution rate (default: 0.005)")
@click.option("--error-model", type=click.Choice(["uniform", "identity"]),
              help="Error model")
@click.option("-t", "--threads", type=int, help="Number of worker processes (0=auto)")
@click.option("--seed", type=int, help="Random seed")
@click.option("--config", "config_file", help="Config file (YAML/JSON)")
@click.option("--compress/--no-compress", default=None, help="Compress output (gzip)")
@click.option("--info/--no-info", "write_info", default=None,
              help="Write info tables and config_used.yaml")
@click.option("--log-file", help="Also write the log to this file")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def simulate(input_file, output, reads_per_transcript, group_sizes, fold_changes_file,
             count_matrix_file, size, size_file, lib_sizes, read_length, paired,
             strand_specific, fraglen_mean, fraglen_sd, error_rate, error_model,
             threads, seed, config_file, compress, write_info, log_file, verbose):
    """Simulate RNA-seq reads from transcript sequences.

    Reads per transcript and sample come from a negative binomial model
    (baseline mean, fold changes, replicate groups) or from --count-matrix.
    Each sample is written to sample_NN.fasta, or sample_NN_1.fasta and
    sample_NN_2.fasta for paired-end reads.

    Command-line options override values from --config.
    """
    from rnareadsim.simulate.reads import run_read_simulation
    from rnareadsim.simulate.readsim.errors import ReadSimError

    try:
        run_read_simulation(
            input_file=input_file,
            output_dir=output,
            reads_per_transcript=reads_per_transcript,
            group_sizes=group_sizes,
            fold_changes_file=fold_changes_file,
            count_matrix_file=count_matrix_file,
            size=size,
            size_file=size_file,
            lib_sizes=lib_sizes,
            read_length=read_length,
            paired=paired,
            strand_specific=strand_specific,
            fraglen_mean=fraglen_mean,
            fraglen_sd=fraglen_sd,
            error_rate=error_rate,
            error_model=error_model,
            threads=threads,
            seed=seed,
            config_file=config_file,
            compress=compress,
            write_info=write_info,
            verbose=verbose,
            log_file=log_file,
        )
    except (ReadSimError, FileNotFoundError) as e:
        logger.error(str(e))
        sys.exit(1)


@main.command()
@click.option("-i", "--input", "input_file", required=True, help="Transcript FASTA file")
@click.option("-o", "--output", required=True, help="Output count matrix (TSV/CSV)")
@click.option("--reads-per-transcript", default=DEFAULT_READS_PER_TRANSCRIPT, type=float,
              help="Baseline mean reads per transcript")
@click.option("--group-sizes", default=",".join(map(str, DEFAULT_GROUP_SIZES)),
              callback=_parse_number_list, help="Replicates per group, comma-separated")
@click.option("--fold-changes", "fold_changes_file", help="Fold-change table")
@click.option("--size", type=float, help="Negative binomial size (default: mean/3)")
@click.option("--size-table", "size_file", help="Per-transcript size table")
@click.option("--lib-sizes", callback=_parse_number_list,
              help="Library size factor per sample, comma-separated")
@click.option("--seed", type=int, help="Random seed")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def counts(input_file, output, reads_per_transcript, group_sizes, fold_changes_file,
           size, size_file, lib_sizes, seed, verbose):
    """Simulate a negative binomial count matrix without generating reads."""
    from rnareadsim.simulate.reads import run_count_simulation
    from rnareadsim.simulate.readsim.errors import ReadSimError

    try:
        run_count_simulation(
            input_file=input_file,
            output_file=output,
            reads_per_transcript=reads_per_transcript,
            group_sizes=group_sizes,
            fold_changes_file=fold_changes_file,
            size=size,
            size_file=size_file,
            lib_sizes=lib_sizes,
            seed=seed,
            verbose=verbose,
        )
    except (ReadSimError, FileNotFoundError) as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
