"""
配置模块

参数分组：
A. read参数: read_length, paired, strand_specific
B. 片段参数: fraglen_mean, fraglen_sd
C. 错误参数: error_rate, model
D. 计数参数: mode, reads_per_transcript, group_sizes, size, lib_sizes, 各表格路径
E. 输出参数: output_dir, compress, write_info
"""

from dataclasses import dataclass, field
from typing import List, Literal, Optional
import json
import math

import yaml


@dataclass
class ReadParams:
    """A. read参数"""
    read_length: int = 100
    paired: bool = True
    strand_specific: bool = False   # True时所有片段取正义链


@dataclass
class FragmentParams:
    """B. 片段长度参数（正态分布）"""
    fraglen_mean: float = 250.0
    fraglen_sd: float = 25.0


@dataclass
class ErrorParams:
    """C. 测序错误参数"""
    error_rate: float = 0.005
    model: Literal["uniform", "identity"] = "uniform"


@dataclass
class CountParams:
    """
    D. 计数参数

    mode:
    - "negative_binomial": 由 reads_per_transcript、fold change、分组抽样
    - "matrix": 直接读取 count_matrix_path
    """
    mode: Literal["negative_binomial", "matrix"] = "negative_binomial"
    reads_per_transcript: float = 300.0
    group_sizes: List[int] = field(default_factory=lambda: [10, 10])
    size: Optional[float] = None               # None: size = 组均值 / 3
    lib_sizes: Optional[List[float]] = None    # 每个样本的文库大小因子
    fold_changes_path: Optional[str] = None
    count_matrix_path: Optional[str] = None
    size_path: Optional[str] = None            # 每个转录本的size表


@dataclass
class OutputParams:
    """E. 输出参数"""
    output_dir: str = "reads"
    compress: bool = False
    write_info: bool = True


# =============================================================================
# 完整配置
# =============================================================================

@dataclass
class SimConfig:
    """完整模拟配置"""

    reads: ReadParams = field(default_factory=ReadParams)
    fragments: FragmentParams = field(default_factory=FragmentParams)
    errors: ErrorParams = field(default_factory=ErrorParams)
    counts: CountParams = field(default_factory=CountParams)
    output: OutputParams = field(default_factory=OutputParams)

    seed: Optional[int] = None
    threads: int = 1                # 0 表示自动

    # =========================================================================
    # 便捷属性访问（扁平化）
    # =========================================================================

    @property
    def read_length(self) -> int:
        return self.reads.read_length

    @property
    def paired(self) -> bool:
        return self.reads.paired

    @property
    def fraglen_mean(self) -> float:
        return self.fragments.fraglen_mean

    @property
    def fraglen_sd(self) -> float:
        return self.fragments.fraglen_sd

    @property
    def error_rate(self) -> float:
        return self.errors.error_rate

    # =========================================================================
    # 序列化/反序列化
    # =========================================================================

    def to_dict(self) -> dict:
        """转换为字典（支持 round-trip 序列化）"""
        return {
            "reads": {
                "read_length": self.reads.read_length,
                "paired": self.reads.paired,
                "strand_specific": self.reads.strand_specific
            },
            "fragments": {
                "fraglen_mean": self.fragments.fraglen_mean,
                "fraglen_sd": self.fragments.fraglen_sd
            },
            "errors": {
                "error_rate": self.errors.error_rate,
                "model": self.errors.model
            },
            "counts": {
                "mode": self.counts.mode,
                "reads_per_transcript": self.counts.reads_per_transcript,
                "group_sizes": list(self.counts.group_sizes),
                "size": self.counts.size,
                "lib_sizes": list(self.counts.lib_sizes) if self.counts.lib_sizes is not None else None,
                "fold_changes_path": self.counts.fold_changes_path,
                "count_matrix_path": self.counts.count_matrix_path,
                "size_path": self.counts.size_path
            },
            "output": {
                "output_dir": self.output.output_dir,
                "compress": self.output.compress,
                "write_info": self.output.write_info
            },
            "seed": self.seed,
            "threads": self.threads
        }

    @classmethod
    def from_dict(cls, d: dict) -> 'SimConfig':
        """从字典创建"""
        config = cls()

        if "reads" in d:
            config.reads = ReadParams(**d["reads"])
        if "fragments" in d:
            config.fragments = FragmentParams(**d["fragments"])
        if "errors" in d:
            config.errors = ErrorParams(**d["errors"])
        if "counts" in d:
            config.counts = CountParams(**d["counts"])
        if "output" in d:
            config.output = OutputParams(**d["output"])
        if "seed" in d:
            config.seed = d["seed"]
        if "threads" in d:
            config.threads = d["threads"]

        return config

    @classmethod
    def from_yaml(cls, path: str) -> 'SimConfig':
        """从YAML文件加载"""
        with open(path, 'r') as f:
            d = yaml.safe_load(f) or {}
        return cls.from_dict(d)

    def to_yaml(self, path: str):
        """保存为YAML文件"""
        with open(path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False)

    @classmethod
    def from_json(cls, path: str) -> 'SimConfig':
        """从JSON文件加载"""
        with open(path, 'r') as f:
            d = json.load(f)
        return cls.from_dict(d)

    def to_json(self, path: str):
        """保存为JSON文件"""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    # =========================================================================
    # 验证
    # =========================================================================

    def validate(self) -> list:
        """验证配置有效性，返回问题列表（空列表表示通过）"""
        problems = []

        # read
        if not isinstance(self.read_length, int) or self.read_length <= 0:
            problems.append(f"read_length must be a positive integer, got {self.read_length}")

        # 片段
        if not _finite(self.fraglen_mean) or self.fraglen_mean <= 0:
            problems.append(f"fraglen_mean must be finite and > 0, got {self.fraglen_mean}")
        if not _finite(self.fraglen_sd) or self.fraglen_sd < 0:
            problems.append(f"fraglen_sd must be finite and >= 0, got {self.fraglen_sd}")

        # 错误
        if not _finite(self.error_rate) or not 0 <= self.error_rate <= 1:
            problems.append(f"error_rate must be within [0, 1], got {self.error_rate}")
        if self.errors.model not in ["uniform", "identity"]:
            problems.append(f"Unknown error model: {self.errors.model}")

        # 计数
        counts = self.counts
        if counts.mode == "negative_binomial":
            if not _finite(counts.reads_per_transcript) or counts.reads_per_transcript < 0:
                problems.append(
                    f"reads_per_transcript must be finite and >= 0, got {counts.reads_per_transcript}"
                )
            if not counts.group_sizes or any(int(g) < 1 for g in counts.group_sizes):
                problems.append(f"group_sizes must be positive, got {counts.group_sizes}")
            if counts.size is not None and (not _finite(counts.size) or counts.size <= 0):
                problems.append(f"size must be finite and > 0, got {counts.size}")
            if counts.lib_sizes is not None and counts.group_sizes and \
                    len(counts.lib_sizes) != sum(counts.group_sizes):
                problems.append(
                    f"lib_sizes has {len(counts.lib_sizes)} entries for "
                    f"{sum(counts.group_sizes)} samples"
                )
        elif counts.mode == "matrix":
            if counts.count_matrix_path is None:
                problems.append("counts.mode 'matrix' requires count_matrix_path")
        else:
            problems.append(f"Unknown counts.mode: {counts.mode}")
        if counts.lib_sizes is not None and any(
            not _finite(x) or x <= 0 for x in counts.lib_sizes
        ):
            problems.append("lib_sizes must be finite and > 0")

        # 运行
        if self.threads < 0:
            problems.append(f"threads must be >= 0, got {self.threads}")

        return problems


def _finite(value) -> bool:
    try:
        return math.isfinite(float(value))
    except (TypeError, ValueError):
        return False


def get_default_config() -> SimConfig:
    """获取默认配置"""
    return SimConfig()


def get_single_end_config() -> SimConfig:
    """单端配置"""
    config = SimConfig()
    config.reads.paired = False
    return config
