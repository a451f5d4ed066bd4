"""
片段生成模块

- 片段长度 ~ Normal(fraglen_mean, fraglen_sd)，取整后截断到 [最小长度, 转录本长度]
- 起点在 [0, 转录本长度 - 片段长度] 上均匀抽取
- 最小长度：单端为 read_length，双端为 2 * read_length（两条mate不重叠）
"""

from typing import Iterator, List, Optional
import numpy as np

from .errors import BoundaryCondition, ConfigError
from .models import Fragment, Transcript


def min_fragment_length(read_length: int, paired: bool) -> int:
    """满足放置约束的最小片段长度"""
    return 2 * read_length if paired else read_length


class FragmentGenerator:
    """片段生成器"""

    def __init__(
        self,
        fraglen_mean: float,
        fraglen_sd: float,
        read_length: int,
        paired: bool,
        rng: Optional[np.random.Generator] = None
    ):
        if read_length <= 0:
            raise ConfigError(f"read_length must be > 0, got {read_length}")
        if not np.isfinite(fraglen_mean) or fraglen_mean <= 0:
            raise ConfigError(f"fraglen_mean must be > 0, got {fraglen_mean}")
        if not np.isfinite(fraglen_sd) or fraglen_sd < 0:
            raise ConfigError(f"fraglen_sd must be >= 0, got {fraglen_sd}")

        self.fraglen_mean = fraglen_mean
        self.fraglen_sd = fraglen_sd
        self.read_length = read_length
        self.paired = paired
        self.rng = rng if rng is not None else np.random.default_rng()

    @property
    def min_length(self) -> int:
        return min_fragment_length(self.read_length, self.paired)

    def check_transcript(self, transcript: Transcript):
        """
        检查转录本能否放置片段

        Raises:
            BoundaryCondition: 转录本短于最小片段长度
        """
        if transcript.length < self.min_length:
            raise BoundaryCondition(transcript.id, transcript.length, self.min_length)

    def sample_lengths(self, n: int, max_length: int) -> np.ndarray:
        """采样n个片段长度"""
        lengths = self.rng.normal(self.fraglen_mean, self.fraglen_sd, n)
        lengths = np.rint(lengths)
        return np.clip(lengths, self.min_length, max_length).astype(np.int64)

    def iter_fragments(self, transcript: Transcript, read_count: int) -> Iterator[Fragment]:
        """
        逐个产生片段

        Args:
            transcript: 转录本
            read_count: 片段数（单端每片段1条read，双端每片段1对read）
        """
        if read_count <= 0:
            return iter(())
        self.check_transcript(transcript)

        lengths = self.sample_lengths(read_count, transcript.length)
        # high为开区间上界，对应 [0, L - F] 闭区间
        starts = self.rng.integers(0, transcript.length - lengths + 1)

        return (
            Fragment(transcript_id=transcript.id, start=int(start), length=int(length))
            for start, length in zip(starts, lengths)
        )

    def generate(self, transcript: Transcript, read_count: int) -> List[Fragment]:
        return list(self.iter_fragments(transcript, read_count))


def generate_fragments(
    transcript: Transcript,
    read_count: int,
    fraglen_mean: float,
    fraglen_sd: float,
    read_length: int,
    paired: bool,
    rng: Optional[np.random.Generator] = None
) -> List[Fragment]:
    """
    为一个转录本生成 read_count 个片段

    Raises:
        BoundaryCondition: read_count > 0 且转录本短于最小片段长度
    """
    generator = FragmentGenerator(fraglen_mean, fraglen_sd, read_length, paired, rng)
    return generator.generate(transcript, read_count)
