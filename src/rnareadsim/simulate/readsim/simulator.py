"""
模拟入口

计数设计 → 计数矩阵 → 按样本生成read → 汇总表

配置和输入错误在任何抽样之前检测；单个样本失败不影响其它样本，
全部样本结束后统一抛出 SimulationError。
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Union

from .config import SimConfig, get_default_config
from .counts import CountDesign, CountMatrix, NegativeBinomialDesign, build_count_matrix
from rnareadsim.utils.io import create_output_dirs

from .errors import ConfigError, OutputError, SimulationError
from .info import write_info_tables
from .io_utils import check_transcripts
from .models import SampleResult, Transcript
from .parallel import get_optimal_workers, run_samples
from .random_streams import resolve_entropy

logger = logging.getLogger(__name__)


@dataclass
class SimulationReport:
    """一次运行的结果"""
    count_matrix: CountMatrix
    results: List[SampleResult] = field(default_factory=list)
    entropy: int = 0
    output_dir: Optional[Path] = None

    @property
    def failed(self) -> List[SampleResult]:
        return [r for r in self.results if not r.ok]

    @property
    def total_reads(self) -> int:
        return sum(r.reads_written for r in self.results)

    @property
    def skipped(self) -> List[str]:
        """至少在一个样本中被跳过的转录本"""
        seen = []
        for r in self.results:
            for tx_id in r.skipped:
                if tx_id not in seen:
                    seen.append(tx_id)
        return seen


def simulate_experiment(
    transcripts: Sequence[Transcript],
    design: CountDesign,
    config: Optional[SimConfig] = None,
    output_dir: Optional[Union[str, Path]] = None
) -> SimulationReport:
    """
    运行完整模拟

    Args:
        transcripts: 转录本（大写序列，ID唯一）
        design: NegativeBinomialDesign 或 CountMatrixDesign
        config: 模拟配置；None 使用默认值
        output_dir: 输出目录；None 使用 config.output.output_dir

    Returns:
        SimulationReport

    Raises:
        ConfigError: 配置无效
        InputError: 无转录本、重复ID、空序列或非法字符
        OutputError: 输出目录不可创建
        SimulationError: 有样本失败（在其它样本完成之后）
    """
    if config is None:
        config = get_default_config()

    problems = config.validate()
    if problems:
        raise ConfigError("Invalid configuration: " + "; ".join(problems))
    transcripts = check_transcripts(transcripts)

    # 记录解析后的种子，不修改调用方的配置
    config = SimConfig.from_dict(config.to_dict())
    entropy = resolve_entropy(config.seed)
    config.seed = entropy

    logger.info("Step 1: Building count matrix...")
    count_matrix = build_count_matrix(design, transcripts, seed=entropy)
    logger.info(
        f"Count matrix: {count_matrix.num_transcripts} transcripts x "
        f"{count_matrix.num_samples} samples, {count_matrix.total_reads()} fragments"
    )

    output_path = Path(output_dir if output_dir is not None else config.output.output_dir)
    try:
        create_output_dirs(output_path)
    except OSError as e:
        raise OutputError(f"Cannot create output directory {output_path}: {e}") from e

    logger.info("Step 2: Generating reads...")
    num_workers = get_optimal_workers(config.threads, num_tasks=count_matrix.num_samples)
    results = run_samples(
        transcripts, count_matrix, config, entropy, output_path, num_workers
    )
    report = SimulationReport(
        count_matrix=count_matrix,
        results=results,
        entropy=entropy,
        output_dir=output_path
    )

    if config.output.write_info:
        logger.info("Step 3: Writing info tables...")
        fold_changes = None
        if isinstance(design, NegativeBinomialDesign):
            fold_changes = design.fold_change_table(count_matrix.num_transcripts)
        write_info_tables(output_path, count_matrix, config, fold_changes)

    if report.skipped:
        logger.warning(
            f"{len(report.skipped)} transcript(s) shorter than the minimum fragment "
            f"length were skipped"
        )
    if report.failed:
        raise SimulationError([r.label for r in report.failed])

    logger.info(f"Simulation complete: {report.total_reads} reads written to {output_path}")
    return report
