"""
随机数子流

每个(转录本, 样本)单元使用独立的、由运行种子确定的子流，
保证结果与执行顺序和并行度无关。
"""

import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

# spawn_key首位区分用途
COUNT_STREAM = 0
READ_STREAM = 1


def resolve_entropy(seed: Optional[int]) -> int:
    """种子为None时抽取新熵并记录日志，便于复现"""
    if seed is not None:
        return int(seed)
    entropy = np.random.SeedSequence().entropy
    logger.info(f"No seed given; using generated seed {entropy}")
    return entropy


def count_rng(entropy: int, sample_index: int) -> np.random.Generator:
    """样本列的计数子流（sample_index为0-based）"""
    seq = np.random.SeedSequence(entropy, spawn_key=(COUNT_STREAM, sample_index))
    return np.random.default_rng(seq)


def read_rng(entropy: int, transcript_index: int, sample_index: int) -> np.random.Generator:
    """(转录本, 样本)单元的read生成子流（均为0-based）"""
    seq = np.random.SeedSequence(
        entropy, spawn_key=(READ_STREAM, transcript_index, sample_index)
    )
    return np.random.default_rng(seq)
