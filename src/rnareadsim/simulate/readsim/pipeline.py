"""
单样本read生成流水线

对一个样本依次处理每个转录本：
片段生成 → 链方向/mate → 测序错误 → 写出

每个(转录本, 样本)单元使用独立子流；read生成后立即写出，不在内存中累积。
"""

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from .config import SimConfig
from .errors import BoundaryCondition
from .error_models import BaseErrorModel, get_error_model
from .fragments import FragmentGenerator
from .io_utils import open_sample_writer
from .models import Sample, SampleResult, SimulatedRead, Transcript
from .random_streams import read_rng
from .strand import StrandSelector

logger = logging.getLogger(__name__)


def make_error_model(config: SimConfig, rng: np.random.Generator) -> BaseErrorModel:
    """根据配置创建错误模型（错误率为0时等价于identity）"""
    if config.errors.model == "identity" or config.error_rate == 0:
        return get_error_model("identity", rng=rng)
    return get_error_model(config.errors.model, error_rate=config.error_rate, rng=rng)


def simulate_transcript_reads(
    transcript: Transcript,
    read_count: int,
    config: SimConfig,
    rng: np.random.Generator,
    sample_id: int = 1,
    error_model: Optional[BaseErrorModel] = None
):
    """
    为一个(转录本, 样本)单元逐条产生read

    Args:
        transcript: 转录本
        read_count: 片段数
        config: 模拟配置
        rng: 该单元的随机子流
        sample_id: 样本编号（写入read）
        error_model: 错误模型；None时按配置创建（共用rng）

    Returns:
        SimulatedRead 生成器

    Raises:
        BoundaryCondition: read_count > 0 且转录本过短
    """
    generator = FragmentGenerator(
        config.fraglen_mean,
        config.fraglen_sd,
        config.read_length,
        config.paired,
        rng=rng
    )
    selector = StrandSelector(
        config.read_length,
        config.paired,
        strand_specific=config.reads.strand_specific,
        rng=rng
    )
    if error_model is None:
        error_model = make_error_model(config, rng)

    fragments = generator.iter_fragments(transcript, read_count)

    def _reads():
        for read_index, fragment in enumerate(fragments, start=1):
            fragment, mates = selector.orient(fragment, transcript.seq)
            yield SimulatedRead(
                transcript_id=transcript.id,
                read_index=read_index,
                sample_id=sample_id,
                fragment=fragment,
                mates=tuple(error_model.apply(m) for m in mates)
            )

    return _reads()


def simulate_sample(
    transcripts: Sequence[Transcript],
    counts: Sequence[int],
    sample: Sample,
    sample_index: int,
    config: SimConfig,
    entropy: int,
    output_dir: Union[str, Path]
) -> SampleResult:
    """
    生成一个样本的全部read并写出

    转录本过短时跳过该转录本并记录；写出失败时丢弃该样本的未完成文件，
    错误记录在结果中，不影响其它样本。

    Args:
        transcripts: 全部转录本（行顺序）
        counts: 该样本每个转录本的read数
        sample: 样本
        sample_index: 样本列序号（0-based，用于子流）
        config: 模拟配置
        entropy: 运行种子
        output_dir: 输出目录
    """
    result = SampleResult(sample_id=sample.sample_id, label=sample.label)
    try:
        writer = open_sample_writer(
            output_dir, sample, config.paired, compress=config.output.compress
        )
        with writer:
            for t_idx, (transcript, n_reads) in enumerate(zip(transcripts, counts)):
                n_reads = int(n_reads)
                if n_reads == 0:
                    continue

                rng = read_rng(entropy, t_idx, sample_index)
                error_model = make_error_model(config, rng)
                try:
                    reads = simulate_transcript_reads(
                        transcript, n_reads, config, rng,
                        sample_id=sample.sample_id,
                        error_model=error_model
                    )
                except BoundaryCondition as e:
                    logger.warning(f"{sample.label}: skipping {transcript.id}: {e}")
                    result.skipped.append(transcript.id)
                    continue

                for read in reads:
                    writer.write(read)
                result.fragments += n_reads
                result.substitutions += error_model.substitutions

        result.reads_written = writer.records_written * (2 if config.paired else 1)
        result.files = [str(p) for p in writer.paths]
    except OSError as e:
        result.error = str(e)
        logger.error(f"{sample.label}: {e}")

    logger.info(result.summary())
    return result
