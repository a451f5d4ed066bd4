"""
核心数据结构定义

设计原则：
1. 不可变数据用dataclass(frozen=True)
2. 坐标一律0-based半开区间，输出header时转换为1-based闭区间
3. Fragment/Read只在生成单条read期间存在，不在内存中累积
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple
import re


class Strand(Enum):
    """链方向"""
    SENSE = "+"
    ANTISENSE = "-"


# =============================================================================
# 输入数据结构
# =============================================================================

@dataclass(frozen=True)
class Transcript:
    """转录本模板"""
    id: str
    seq: str

    @property
    def length(self) -> int:
        return len(self.seq)


@dataclass(frozen=True)
class Sample:
    """
    样本

    group: 分组设计中的组号（1-based）；矩阵设计中为None，
           此时列序号即时间点序号
    """
    sample_id: int
    group: Optional[int] = None
    lib_size: float = 1.0

    @property
    def label(self) -> str:
        return f"sample_{self.sample_id:02d}"


def samples_from_groups(
    group_sizes: List[int],
    lib_sizes: Optional[List[float]] = None
) -> List[Sample]:
    """按组大小依次编号样本：前group_sizes[0]个属于组1，以此类推"""
    samples = []
    sample_id = 1
    for group, size in enumerate(group_sizes, start=1):
        for _ in range(size):
            lib = 1.0 if lib_sizes is None else float(lib_sizes[sample_id - 1])
            samples.append(Sample(sample_id=sample_id, group=group, lib_size=lib))
            sample_id += 1
    return samples


# =============================================================================
# 片段与read
# =============================================================================

@dataclass(frozen=True)
class Fragment:
    """转录本上的一个片段"""
    transcript_id: str
    start: int                     # 0-based
    length: int
    strand: Strand = Strand.SENSE

    @property
    def end(self) -> int:
        """片段终点（不含）"""
        return self.start + self.length


@dataclass
class SimulatedRead:
    """
    模拟得到的read（单端1条mate，双端2条mate）

    read_index在每个样本内、每个转录本内从1开始计数
    """
    transcript_id: str
    read_index: int
    sample_id: int
    fragment: Fragment
    mates: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_paired(self) -> bool:
        return len(self.mates) == 2

    def header(self, mate: Optional[int] = None) -> str:
        """
        生成header（不含'>'）

        格式: {transcript_id}/{read_index}[/{mate}];frag={start}-{end};strand={+|-}
        片段坐标为1-based闭区间
        """
        name = f"{self.transcript_id}/{self.read_index}"
        if mate is not None:
            name += f"/{mate}"
        frag = self.fragment
        return f"{name};frag={frag.start + 1}-{frag.end};strand={frag.strand.value}"

    def to_fasta(self, mate: int = 1) -> str:
        """转换为FASTA记录"""
        seq = self.mates[mate - 1]
        if self.is_paired:
            return f">{self.header(mate)}\n{seq}\n"
        return f">{self.header()}\n{seq}\n"


_FRAG_TAIL = r";frag=(?P<start>\d+)-(?P<end>\d+);strand=(?P<strand>[+-])$"
_HEADER_PATTERNS = {
    # 未知布局：优先按双端解析
    None: re.compile(
        r"^>?(?P<transcript_id>.+?)/(?P<read_index>\d+)(?:/(?P<mate>[12]))?" + _FRAG_TAIL
    ),
    # 已知布局：ID贪婪匹配，允许ID以 /数字 结尾
    False: re.compile(r"^>?(?P<transcript_id>.+)/(?P<read_index>\d+)" + _FRAG_TAIL),
    True: re.compile(r"^>?(?P<transcript_id>.+)/(?P<read_index>\d+)/(?P<mate>[12])" + _FRAG_TAIL),
}


def parse_read_header(header: str, paired: Optional[bool] = None) -> Dict[str, object]:
    """
    解析read header

    Args:
        header: header字符串（可带'>'）
        paired: 文件是否双端；None 时按格式推断，
                单端且ID以 /数字 结尾的header会被误判为双端

    Returns:
        dict: transcript_id, read_index, mate（单端为None）,
              start（0-based）, length, strand
    """
    m = _HEADER_PATTERNS[paired].match(header.strip())
    if m is None:
        raise ValueError(f"Unrecognized read header: {header!r}")
    start = int(m.group("start")) - 1
    end = int(m.group("end"))
    mate = m.groupdict().get("mate")
    return {
        "transcript_id": m.group("transcript_id"),
        "read_index": int(m.group("read_index")),
        "mate": int(mate) if mate is not None else None,
        "start": start,
        "length": end - start,
        "strand": Strand(m.group("strand")),
    }


# =============================================================================
# 统计
# =============================================================================

@dataclass
class SampleResult:
    """单个样本的模拟结果"""
    sample_id: int
    label: str
    reads_written: int = 0
    fragments: int = 0
    substitutions: int = 0
    skipped: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def summary(self) -> str:
        if not self.ok:
            return f"{self.label}: FAILED ({self.error})"
        return (
            f"{self.label}: {self.fragments} fragments, {self.reads_written} reads, "
            f"{self.substitutions} substitutions, {len(self.skipped)} transcripts skipped"
        )
