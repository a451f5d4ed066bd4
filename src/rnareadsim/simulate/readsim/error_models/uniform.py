"""
均匀替换错误模型

特点：
- 每个位置以 error_rate 独立出错
- 出错时在另外三种碱基中均匀选择（不会替换成原碱基）
- 非ACGT碱基（N及其它简并碱基）不参与替换，原样保留
"""

from typing import Optional, Tuple
import numpy as np

from ..errors import ConfigError
from .base import BaseErrorModel

_BASES = np.frombuffer(b"ACGT", dtype=np.uint8)

# ASCII → 碱基序号（A=0, C=1, G=2, T=3；其它为-1）
_BASE_INDEX = np.full(256, -1, dtype=np.int8)
for _i, _b in enumerate(b"ACGT"):
    _BASE_INDEX[_b] = _i


def inject_errors_counted(
    sequence: str,
    error_rate: float,
    rng: Optional[np.random.Generator] = None
) -> Tuple[str, int]:
    """
    引入均匀替换错误并返回替换数

    Returns:
        (带错误的序列, 替换位点数)
    """
    if not 0.0 <= error_rate <= 1.0:
        raise ConfigError(f"error_rate must be within [0, 1], got {error_rate}")
    if error_rate == 0.0 or not sequence:
        return sequence, 0
    if rng is None:
        rng = np.random.default_rng()

    seq_array = np.frombuffer(sequence.encode("ascii"), dtype=np.uint8).copy()
    idx = _BASE_INDEX[seq_array]

    errors = (rng.random(seq_array.size) < error_rate) & (idx >= 0)
    n_errors = int(errors.sum())
    if n_errors == 0:
        return sequence, 0

    # 偏移1..3保证新碱基与原碱基不同，且在其余三种中均匀
    shift = rng.integers(1, 4, n_errors)
    seq_array[errors] = _BASES[(idx[errors] + shift) % 4]
    return seq_array.tobytes().decode("ascii"), n_errors


def inject_errors(
    sequence: str,
    error_rate: float,
    rng: Optional[np.random.Generator] = None
) -> str:
    """引入均匀替换错误（长度不变）"""
    return inject_errors_counted(sequence, error_rate, rng)[0]


class UniformErrorModel(BaseErrorModel):
    """均匀替换错误模型"""

    def __init__(self, error_rate: float = 0.005, rng: Optional[np.random.Generator] = None):
        super().__init__(rng)
        if not 0.0 <= error_rate <= 1.0:
            raise ConfigError(f"error_rate must be within [0, 1], got {error_rate}")
        self.error_rate = error_rate

    def apply(self, sequence: str) -> str:
        result, n_errors = inject_errors_counted(sequence, self.error_rate, self.rng)
        self.substitutions += n_errors
        return result

    @property
    def name(self) -> str:
        return "uniform"
