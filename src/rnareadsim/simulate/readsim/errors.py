"""
异常类型定义

- ConfigError / InputError: 采样开始前检测，直接中止运行
- BoundaryCondition: 单个转录本无法放置片段，按转录本跳过
- OutputError: 输出目录或样本输出流不可写
- SimulationError: 运行结束后汇总失败的样本
"""

from typing import List


class ReadSimError(Exception):
    """模拟器异常基类"""


class ConfigError(ReadSimError, ValueError):
    """参数配置错误（维度不匹配、取值越界、非有限值）"""


class InputError(ReadSimError, ValueError):
    """输入转录本错误（空序列、非法字符、重复ID）"""


class BoundaryCondition(ReadSimError):
    """转录本短于最小片段长度，无法满足放置约束"""

    def __init__(self, transcript_id: str, transcript_length: int, min_length: int):
        self.transcript_id = transcript_id
        self.transcript_length = transcript_length
        self.min_length = min_length
        super().__init__(
            f"Transcript '{transcript_id}' ({transcript_length} bp) is shorter than "
            f"the minimum fragment length ({min_length} bp)"
        )


class OutputError(ReadSimError, OSError):
    """输出目标不可创建或不可写"""


class SimulationError(ReadSimError, RuntimeError):
    """部分样本模拟失败"""

    def __init__(self, failed_samples: List[str]):
        self.failed_samples = list(failed_samples)
        super().__init__(
            f"Simulation failed for {len(self.failed_samples)} sample(s): "
            f"{', '.join(self.failed_samples)}"
        )
