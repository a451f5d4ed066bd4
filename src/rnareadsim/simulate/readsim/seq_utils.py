"""
序列工具函数
"""

# 标准碱基与IUPAC简并碱基
NUCLEOTIDES = "ACGT"
AMBIGUITY_CODES = "NRYSWKMBDHV"
VALID_BASES = frozenset(NUCLEOTIDES + AMBIGUITY_CODES)

_COMPLEMENT = str.maketrans(
    "ACGTRYSWKMBDHVNacgtryswkmbdhvn",
    "TGCAYRSWMKVHDBNtgcayrswmkvhdbn",
)


def reverse_complement(seq: str) -> str:
    """反向互补（简并碱基按IUPAC互补，N保持不变）"""
    return seq.translate(_COMPLEMENT)[::-1]


def extract_region(seq: str, start: int, length: int) -> str:
    """
    提取线性序列区域

    Args:
        seq: 序列
        start: 起始偏移（0-based）
        length: 提取长度

    Returns:
        子序列

    Raises:
        IndexError: 区域超出序列边界
    """
    if start < 0 or length < 0 or start + length > len(seq):
        raise IndexError(
            f"Region [{start}, {start + length}) outside sequence of length {len(seq)}"
        )
    return seq[start:start + length]


def invalid_bases(seq: str) -> set:
    """返回序列中不属于允许字母表的字符"""
    return set(seq) - VALID_BASES


def gc_content(seq: str) -> float:
    """计算GC含量"""
    if len(seq) == 0:
        return 0.0
    gc = sum(1 for b in seq.upper() if b in 'GC')
    return gc / len(seq)
