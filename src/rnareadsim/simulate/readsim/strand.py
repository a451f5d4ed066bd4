"""
链方向与mate选择

- 每个片段以1/2概率取正义链或反义链（反义链取反向互补）
- 单端：取定向后片段的前 read_length 个碱基
- 双端：mate1 为前 read_length 个碱基；mate2 为后 read_length 个碱基的反向互补
        （两条mate相向，即标准FR方向）
"""

from dataclasses import replace
from typing import Optional, Tuple
import numpy as np

from .models import Fragment, Strand
from .seq_utils import extract_region, reverse_complement


def orient(
    fragment: Fragment,
    transcript_sequence: str,
    paired: bool,
    read_length: int,
    rng: Optional[np.random.Generator] = None,
    strand_specific: bool = False
) -> Tuple[Fragment, Tuple[str, ...]]:
    """
    为片段选择链方向并切出mate序列

    Args:
        fragment: 片段（strand字段会被覆盖）
        transcript_sequence: 转录本序列
        paired: 是否双端
        read_length: read长度
        rng: 随机数生成器
        strand_specific: 链特异文库，总取正义链

    Returns:
        (带strand的片段, mate序列元组)
    """
    if strand_specific:
        strand = Strand.SENSE
    else:
        if rng is None:
            rng = np.random.default_rng()
        strand = Strand.SENSE if rng.random() < 0.5 else Strand.ANTISENSE

    frag_seq = extract_region(transcript_sequence, fragment.start, fragment.length)
    if strand == Strand.ANTISENSE:
        frag_seq = reverse_complement(frag_seq)

    mate1 = frag_seq[:read_length]
    if not paired:
        return replace(fragment, strand=strand), (mate1,)

    mate2 = reverse_complement(frag_seq[-read_length:])
    return replace(fragment, strand=strand), (mate1, mate2)


class StrandSelector:
    """链方向选择器"""

    def __init__(
        self,
        read_length: int,
        paired: bool,
        strand_specific: bool = False,
        rng: Optional[np.random.Generator] = None
    ):
        self.read_length = read_length
        self.paired = paired
        self.strand_specific = strand_specific
        self.rng = rng if rng is not None else np.random.default_rng()

    def orient(self, fragment: Fragment, transcript_sequence: str) -> Tuple[Fragment, Tuple[str, ...]]:
        return orient(
            fragment,
            transcript_sequence,
            self.paired,
            self.read_length,
            rng=self.rng,
            strand_specific=self.strand_specific
        )
