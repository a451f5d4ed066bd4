"""
计数模型

每个(转录本, 样本)的read数服从负二项分布：
    count ~ NB(mean, size),  var = mean + mean^2 / size

两个前端产生同一种CountMatrix：
- NegativeBinomialDesign: 基线均值 + fold change + 分组 → 随机抽样
- CountMatrixDesign: 用户直接给定矩阵，仅做校验
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from .errors import ConfigError
from .models import Sample, Transcript, samples_from_groups
from .random_streams import count_rng, resolve_entropy

logger = logging.getLogger(__name__)

# 默认 size = mean / DEFAULT_SIZE_DIVISOR
DEFAULT_SIZE_DIVISOR = 3.0


# =============================================================================
# CountMatrix
# =============================================================================

class CountMatrix:
    """转录本 × 样本 的非负整数read数矩阵（只读）"""

    def __init__(
        self,
        values: np.ndarray,
        transcript_ids: Sequence[str],
        samples: Sequence[Sample],
    ):
        self._values = np.array(values, dtype=np.int64)
        self._values.setflags(write=False)
        self.transcript_ids = list(transcript_ids)
        self.samples = list(samples)

    @classmethod
    def from_array(
        cls,
        values,
        transcript_ids: Sequence[str],
        samples: Optional[Sequence[Sample]] = None,
    ) -> 'CountMatrix':
        """
        用户给定矩阵的入口：不抽样，只校验

        Args:
            values: 二维数组（转录本 × 样本）
            transcript_ids: 转录本ID（行顺序）
            samples: 样本列表；None时按列编号为无分组样本

        Raises:
            ConfigError: 维度不符、含负数/非整数/非有限值
        """
        arr = np.asarray(values, dtype=float)
        if arr.ndim != 2:
            raise ConfigError(f"Count matrix must be 2-dimensional, got {arr.ndim} dimension(s)")
        n_tx, n_samples = arr.shape
        if n_tx != len(transcript_ids):
            raise ConfigError(
                f"Count matrix has {n_tx} rows but {len(transcript_ids)} transcripts were given"
            )
        if samples is None:
            samples = [Sample(sample_id=i + 1) for i in range(n_samples)]
        if n_samples != len(samples):
            raise ConfigError(
                f"Count matrix has {n_samples} columns but {len(samples)} samples were given"
            )
        if n_samples == 0:
            raise ConfigError("Count matrix has no sample columns")
        if not np.all(np.isfinite(arr)):
            raise ConfigError("Count matrix contains non-finite values")
        if np.any(arr < 0):
            raise ConfigError("Count matrix contains negative values")
        if np.any(arr != np.round(arr)):
            raise ConfigError("Count matrix contains non-integer values")
        return cls(arr.astype(np.int64), transcript_ids, samples)

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def shape(self):
        return self._values.shape

    @property
    def num_transcripts(self) -> int:
        return self._values.shape[0]

    @property
    def num_samples(self) -> int:
        return self._values.shape[1]

    def column(self, sample_index: int) -> np.ndarray:
        """样本列（0-based）"""
        return self._values[:, sample_index]

    def __getitem__(self, key):
        return self._values[key]

    def total_reads(self) -> int:
        return int(self._values.sum())

    def to_frame(self) -> pd.DataFrame:
        """转换为DataFrame（行: 转录本ID，列: 样本标签）"""
        return pd.DataFrame(
            self._values,
            index=pd.Index(self.transcript_ids, name="transcript_id"),
            columns=[s.label for s in self.samples],
        )


# =============================================================================
# 负二项抽样
# =============================================================================

def draw_negative_binomial(
    mean,
    size,
    n: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """
    按 mean/size 参数化抽取负二项随机数

    numpy 使用 (n, p) 参数化：n = size, p = size / (size + mean)。
    mean == 0 的位置确定返回 0。

    Args:
        mean: 均值（标量或数组）
        size: 离散参数（标量或数组，>0）
        n: 样本数（mean/size为标量时使用）
        rng: 随机数生成器
    """
    if rng is None:
        rng = np.random.default_rng()

    mean = np.asarray(mean, dtype=float)
    size = np.asarray(size, dtype=float)
    if n is not None:
        mean = np.broadcast_to(mean, (n,))
        size = np.broadcast_to(size, (n,))
    mean, size = np.broadcast_arrays(mean, size)

    out = np.zeros(mean.shape, dtype=np.int64)
    active = mean > 0
    if np.any(active):
        m = mean[active]
        k = size[active]
        out[active] = rng.negative_binomial(k, k / (k + m))
    return out


def fold_change_multipliers(fold_changes) -> np.ndarray:
    """
    将fold change转换为 转录本 × 组 的均值乘数矩阵

    向量（两组设计）采用以基线为锚的约定：
        fc >= 1: 组1 = 基线 × fc，组2 = 基线
        fc <  1: 组1 = 基线，     组2 = 基线 / fc
    两组均值之比恒等于 fc。
    矩阵（多组设计）直接作为各组乘数。
    """
    fc = np.asarray(fold_changes, dtype=float)
    if fc.ndim == 2:
        return fc.copy()
    up = fc >= 1
    with np.errstate(divide="ignore"):
        group1 = np.where(up, fc, 1.0)
        group2 = np.where(up, 1.0, 1.0 / fc)
    return np.column_stack([group1, group2])


def sample_counts(
    baseline_mean,
    fold_changes,
    dispersion,
    group_assignment: Sequence[int],
    num_samples: int,
    seed: Optional[int] = None,
    lib_sizes: Optional[Sequence[float]] = None,
    transcript_ids: Optional[Sequence[str]] = None,
) -> CountMatrix:
    """
    由负二项模型抽样得到计数矩阵

    Args:
        baseline_mean: 每个转录本的基线均值（标量或长度T向量）
        fold_changes: 长度T向量（两组）或 T×G 矩阵；None 表示全为1
        dispersion: 每个转录本的size（标量或长度T向量）；None 表示 size = 组均值/3
        group_assignment: 每个样本所属组（1-based），长度为num_samples
        num_samples: 样本数
        seed: 运行种子（已解析的熵）
        lib_sizes: 每个样本的文库大小因子，默认全为1
        transcript_ids: 行名；None时用 transcript_1..T

    Returns:
        CountMatrix
    """
    group_assignment = [int(g) for g in group_assignment]
    if len(group_assignment) != num_samples:
        raise ConfigError(
            f"Group assignment has {len(group_assignment)} entries for {num_samples} samples"
        )

    baseline = np.atleast_1d(np.asarray(baseline_mean, dtype=float))
    if transcript_ids is not None and baseline.size == 1:
        baseline = np.full(len(transcript_ids), baseline[0])
    n_tx = baseline.size

    if fold_changes is None:
        fold_changes = np.ones(n_tx)
    multipliers = fold_change_multipliers(fold_changes)
    if multipliers.shape[0] != n_tx:
        raise ConfigError(
            f"Fold change has {multipliers.shape[0]} rows for {n_tx} transcripts"
        )
    n_groups = multipliers.shape[1]
    if any(g < 1 or g > n_groups for g in group_assignment):
        raise ConfigError(f"Group labels must be within 1..{n_groups}")

    if lib_sizes is None:
        lib_sizes = np.ones(num_samples)
    lib_sizes = np.asarray(lib_sizes, dtype=float)
    if lib_sizes.size != num_samples:
        raise ConfigError(f"lib_sizes has {lib_sizes.size} entries for {num_samples} samples")

    _check_count_params(baseline, multipliers, dispersion, lib_sizes, n_tx)
    seed = resolve_entropy(seed)

    if transcript_ids is None:
        transcript_ids = [f"transcript_{i + 1}" for i in range(n_tx)]

    group_means = baseline[:, None] * multipliers        # T × G
    if dispersion is None:
        group_sizes = group_means / DEFAULT_SIZE_DIVISOR
    else:
        size = np.broadcast_to(np.asarray(dispersion, dtype=float), (n_tx,))
        group_sizes = np.repeat(size[:, None], n_groups, axis=1)

    values = np.zeros((n_tx, num_samples), dtype=np.int64)
    for s, group in enumerate(group_assignment):
        mean = group_means[:, group - 1] * lib_sizes[s]
        size = group_sizes[:, group - 1]
        values[:, s] = draw_negative_binomial(mean, size, rng=count_rng(seed, s))

    samples = [
        Sample(sample_id=s + 1, group=g, lib_size=float(lib_sizes[s]))
        for s, g in enumerate(group_assignment)
    ]
    logger.debug(f"Sampled count matrix {values.shape}, total reads {values.sum()}")
    return CountMatrix(values, transcript_ids, samples)


def _check_count_params(baseline, multipliers, dispersion, lib_sizes, n_tx):
    if not np.all(np.isfinite(baseline)) or np.any(baseline < 0):
        raise ConfigError("Baseline mean must be finite and non-negative")
    if not np.all(np.isfinite(multipliers)) or np.any(multipliers <= 0):
        raise ConfigError("Fold changes must be finite and positive")
    if dispersion is not None:
        size = np.atleast_1d(np.asarray(dispersion, dtype=float))
        if size.size not in (1, n_tx):
            raise ConfigError(f"Dispersion has {size.size} entries for {n_tx} transcripts")
        if not np.all(np.isfinite(size)) or np.any(size <= 0):
            raise ConfigError("Dispersion (size) must be finite and positive")
    if not np.all(np.isfinite(lib_sizes)) or np.any(lib_sizes <= 0):
        raise ConfigError("Library size factors must be finite and positive")


# =============================================================================
# 计数设计（两种前端）
# =============================================================================

@dataclass
class NegativeBinomialDesign:
    """负二项计数设计"""
    reads_per_transcript: Union[float, Sequence[float]] = 300.0
    group_sizes: Sequence[int] = (10, 10)
    fold_changes: Optional[object] = None        # 向量或矩阵
    size: Optional[Union[float, Sequence[float]]] = None
    lib_sizes: Optional[Sequence[float]] = None

    def samples(self) -> List[Sample]:
        return samples_from_groups(list(self.group_sizes), self.lib_sizes)

    def fold_change_table(self, n_tx: int) -> np.ndarray:
        """用于汇总表的fold change：两组设计为向量，多组设计为 转录本 × 组 矩阵"""
        if self.fold_changes is None:
            return np.ones(n_tx)
        return np.asarray(self.fold_changes, dtype=float)


@dataclass
class CountMatrixDesign:
    """用户给定计数矩阵的设计"""
    counts: object                               # 二维数组或DataFrame
    lib_sizes: Optional[Sequence[float]] = None


CountDesign = Union[NegativeBinomialDesign, CountMatrixDesign]


def build_count_matrix(
    design: CountDesign,
    transcripts: Sequence[Transcript],
    seed: Optional[int] = None,
) -> CountMatrix:
    """
    根据设计构建计数矩阵

    Args:
        design: NegativeBinomialDesign 或 CountMatrixDesign
        transcripts: 转录本（行顺序）
        seed: 运行种子（已解析的熵；仅负二项设计使用）
    """
    transcript_ids = [t.id for t in transcripts]

    if isinstance(design, CountMatrixDesign):
        counts = design.counts
        if isinstance(counts, pd.DataFrame):
            missing = [t for t in transcript_ids if t not in counts.index]
            if missing:
                raise ConfigError(
                    f"Count matrix is missing {len(missing)} transcript(s), e.g. {missing[:3]}"
                )
            counts = counts.loc[transcript_ids].to_numpy()
        arr = np.asarray(counts)
        n_samples = arr.shape[1] if arr.ndim == 2 else 0
        lib_sizes = design.lib_sizes
        if lib_sizes is not None and len(lib_sizes) != n_samples:
            raise ConfigError(f"lib_sizes has {len(lib_sizes)} entries for {n_samples} samples")
        samples = [
            Sample(
                sample_id=i + 1,
                lib_size=1.0 if lib_sizes is None else float(lib_sizes[i]),
            )
            for i in range(n_samples)
        ]
        return CountMatrix.from_array(arr, transcript_ids, samples)

    if isinstance(design, NegativeBinomialDesign):
        if not design.group_sizes or any(int(g) < 1 for g in design.group_sizes):
            raise ConfigError("Each group must contain at least one sample")
        fc = design.fold_changes
        if fc is not None:
            fc_arr = np.asarray(fc, dtype=float)
            if fc_arr.ndim == 1 and len(design.group_sizes) != 2:
                raise ConfigError(
                    "A fold-change vector requires exactly two groups; "
                    f"got {len(design.group_sizes)}"
                )
            if fc_arr.ndim == 2 and fc_arr.shape[1] != len(design.group_sizes):
                raise ConfigError(
                    f"Fold-change matrix has {fc_arr.shape[1]} columns for "
                    f"{len(design.group_sizes)} groups"
                )
        elif len(design.group_sizes) > 2:
            fc = np.ones((len(transcripts), len(design.group_sizes)))

        baseline = np.asarray(design.reads_per_transcript, dtype=float)
        if baseline.ndim == 0:
            baseline = np.full(len(transcripts), float(baseline))
        if baseline.size != len(transcripts):
            raise ConfigError(
                f"reads_per_transcript has {baseline.size} entries for "
                f"{len(transcripts)} transcripts"
            )

        if design.lib_sizes is not None and len(design.lib_sizes) != sum(design.group_sizes):
            raise ConfigError(
                f"lib_sizes has {len(design.lib_sizes)} entries for "
                f"{sum(design.group_sizes)} samples"
            )

        samples = design.samples()
        return sample_counts(
            baseline,
            fc,
            design.size,
            [s.group for s in samples],
            len(samples),
            seed=seed,
            lib_sizes=design.lib_sizes,
            transcript_ids=transcript_ids,
        )

    raise TypeError(f"Unknown count design: {type(design).__name__}")
