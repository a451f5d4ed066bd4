"""
并行处理模块

按样本划分任务：每个样本由一个worker独立完成并写出自己的文件，
因此不需要锁。转录本在worker初始化时安装一次。
"""

import multiprocessing as mp
from pathlib import Path
from typing import List, Optional, Sequence, Union
import logging

from .config import SimConfig
from .counts import CountMatrix
from .models import SampleResult, Transcript
from .pipeline import simulate_sample

logger = logging.getLogger(__name__)

_TRANSCRIPTS: Optional[List[Transcript]] = None


def get_optimal_workers(requested: int = 0, num_tasks: Optional[int] = None) -> int:
    """
    获取最优worker数量

    Args:
        requested: 请求的worker数，0表示自动
        num_tasks: 任务数（worker数不超过任务数）

    Returns:
        实际使用的worker数
    """
    cpu_count = mp.cpu_count()

    if requested <= 0:
        # 自动：使用 CPU 核数 - 1，至少1个
        workers = max(1, cpu_count - 1)
    else:
        # 限制在 [1, CPU数] 范围内
        workers = min(max(1, requested), cpu_count)

    if num_tasks is not None:
        workers = max(1, min(workers, num_tasks))
    return workers


def _init_sample_worker(transcripts: List[Transcript]):
    global _TRANSCRIPTS
    _TRANSCRIPTS = transcripts


def _worker_simulate_sample(counts, sample, sample_index, config, entropy, output_dir):
    if _TRANSCRIPTS is None:
        raise RuntimeError("Transcripts not initialized in worker process")
    return simulate_sample(
        _TRANSCRIPTS, counts, sample, sample_index, config, entropy, output_dir
    )


def run_samples(
    transcripts: Sequence[Transcript],
    count_matrix: CountMatrix,
    config: SimConfig,
    entropy: int,
    output_dir: Union[str, Path],
    num_workers: int = 1
) -> List[SampleResult]:
    """
    生成全部样本的read

    结果按样本顺序返回；由于每个(转录本, 样本)使用独立子流，
    输出与worker数量无关。

    Args:
        transcripts: 转录本（与计数矩阵行顺序一致）
        count_matrix: 计数矩阵
        config: 模拟配置
        entropy: 运行种子
        output_dir: 输出目录
        num_workers: worker数量
    """
    samples = count_matrix.samples
    transcripts = list(transcripts)

    if num_workers <= 1 or len(samples) <= 1:
        tracker = ProgressTracker(len(samples), "Samples")
        results = []
        for s_idx, sample in enumerate(samples):
            results.append(simulate_sample(
                transcripts, count_matrix.column(s_idx), sample, s_idx,
                config, entropy, output_dir
            ))
            tracker.update()
        tracker.close()
        return results

    logger.info(f"Using {num_workers} workers for parallel read generation")

    tasks = [
        (count_matrix.column(s_idx).copy(), sample, s_idx, config, entropy, str(output_dir))
        for s_idx, sample in enumerate(samples)
    ]

    with mp.Pool(
        num_workers,
        initializer=_init_sample_worker,
        initargs=(transcripts,)
    ) as pool:
        results = pool.starmap(_worker_simulate_sample, tasks)

    return results


class ProgressTracker:
    """进度跟踪器（用于显示进度）"""

    def __init__(self, total: int, desc: str = "Processing"):
        self.total = total
        self.desc = desc
        self.current = 0
        self._last_percent = -1

    def update(self, n: int = 1):
        """更新进度"""
        self.current += n
        if self.total <= 0:
            return
        percent = int(100 * self.current / self.total)
        if percent != self._last_percent and percent % 10 == 0:
            logger.info(f"{self.desc}: {percent}% ({self.current}/{self.total})")
            self._last_percent = percent

    def close(self):
        """完成"""
        if self.current < self.total:
            self.current = self.total
        logger.debug(f"{self.desc}: done ({self.total}/{self.total})")
