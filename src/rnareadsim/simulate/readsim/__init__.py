"""
RNA-seq read simulator.

从转录本序列出发，按负二项计数模型（或给定计数矩阵）
为每个样本模拟片段化、链方向选择和测序错误，输出FASTA。
"""

from .config import SimConfig, get_default_config, get_single_end_config
from .counts import (
    CountMatrix,
    CountMatrixDesign,
    NegativeBinomialDesign,
    build_count_matrix,
    draw_negative_binomial,
    sample_counts,
)
from .errors import (
    BoundaryCondition,
    ConfigError,
    InputError,
    OutputError,
    ReadSimError,
    SimulationError,
)
from .fragments import FragmentGenerator, generate_fragments
from .io_utils import FastaReadWriter, build_transcripts, parse_fasta
from .models import Fragment, Sample, SampleResult, SimulatedRead, Strand, Transcript, parse_read_header
from .simulator import SimulationReport, simulate_experiment
from .strand import StrandSelector, orient

__version__ = "1.0.0"
__all__ = [
    'SimConfig',
    'get_default_config',
    'get_single_end_config',
    'CountMatrix',
    'CountMatrixDesign',
    'NegativeBinomialDesign',
    'build_count_matrix',
    'draw_negative_binomial',
    'sample_counts',
    'BoundaryCondition',
    'ConfigError',
    'InputError',
    'OutputError',
    'ReadSimError',
    'SimulationError',
    'FragmentGenerator',
    'generate_fragments',
    'FastaReadWriter',
    'build_transcripts',
    'parse_fasta',
    'Fragment',
    'Sample',
    'SampleResult',
    'SimulatedRead',
    'Strand',
    'Transcript',
    'parse_read_header',
    'SimulationReport',
    'simulate_experiment',
    'StrandSelector',
    'orient',
]
