"""
rnareadsim: RNA-seq read simulation.

This package provides tools for:
- Negative binomial count simulation with differential expression
- Fragment, strand and mate simulation from transcript sequences
- Uniform sequencing error injection
- Per-sample FASTA output with ground-truth read headers
"""

__version__ = "1.0.0"
__author__ = "rnareadsim Team"
