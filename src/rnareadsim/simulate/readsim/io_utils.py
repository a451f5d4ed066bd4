"""
输入输出工具模块

- 转录本FASTA读取与校验
- 按样本写出read FASTA（单端1个文件，双端2个文件）
"""

import gzip
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, List, TextIO, Union

import numpy as np

from .errors import InputError, OutputError
from .models import Sample, SimulatedRead, Transcript
from .seq_utils import gc_content, invalid_bases

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".partial"


def validate_sequence(seq: str, seq_id: str) -> str:
    """
    验证并规范化序列

    Args:
        seq: 序列字符串
        seq_id: 序列ID（用于错误消息）

    Returns:
        规范化后的序列（大写，去除空白）

    Raises:
        InputError: 空序列或含非法字符
    """
    seq = "".join(seq.split()).upper()
    if not seq:
        raise InputError(f"Transcript '{seq_id}' has an empty sequence")

    invalid_chars = invalid_bases(seq)
    if invalid_chars:
        raise InputError(
            f"Transcript '{seq_id}' contains characters outside the nucleotide "
            f"alphabet: {sorted(invalid_chars)}"
        )
    return seq


def build_transcripts(sequences: Union[Dict[str, str], Iterable]) -> List[Transcript]:
    """
    由 {id: seq} 或 (id, seq) 序列构建并校验转录本

    Raises:
        InputError: 无转录本、重复ID、序列非法
    """
    items = sequences.items() if isinstance(sequences, dict) else sequences
    transcripts = []
    seen = set()
    for tx_id, seq in items:
        if tx_id in seen:
            raise InputError(f"Duplicate transcript id: '{tx_id}'")
        seen.add(tx_id)
        transcripts.append(Transcript(id=tx_id, seq=validate_sequence(seq, tx_id)))

    if not transcripts:
        raise InputError("No transcripts given")
    return transcripts


def check_transcripts(transcripts: Iterable[Transcript]) -> List[Transcript]:
    """
    校验已构建的转录本（不做规范化）

    序列必须是非空的大写字母表字符串，ID不可重复

    Raises:
        InputError: 无转录本、重复ID、空序列或非法字符（含小写）
    """
    transcripts = list(transcripts)
    if not transcripts:
        raise InputError("No transcripts given")

    seen = set()
    for tx in transcripts:
        if tx.id in seen:
            raise InputError(f"Duplicate transcript id: '{tx.id}'")
        seen.add(tx.id)
        if not tx.seq:
            raise InputError(f"Transcript '{tx.id}' has an empty sequence")
        invalid_chars = invalid_bases(tx.seq)
        if invalid_chars:
            raise InputError(
                f"Transcript '{tx.id}' contains characters outside the upper-case "
                f"nucleotide alphabet: {sorted(invalid_chars)}"
            )
    return transcripts


def parse_fasta(path: Union[str, Path]) -> List[Transcript]:
    """
    解析转录本FASTA文件

    支持.fa, .fasta, .fa.gz, .fasta.gz；header第一个空白前的字段作为ID

    Args:
        path: FASTA文件路径

    Returns:
        Transcript列表（保持文件顺序）
    """
    path = Path(path)

    opener = gzip.open if path.suffix == '.gz' else open
    mode = 'rt' if path.suffix == '.gz' else 'r'

    records = []
    current_id = None
    current_seq = []

    with opener(path, mode) as f:
        for line in f:
            line = line.strip()
            if not line:
                continue

            if line.startswith('>'):
                if current_id is not None:
                    records.append((current_id, "".join(current_seq)))
                fields = line[1:].split()
                if not fields:
                    raise InputError(f"Empty FASTA header in {path}")
                current_id = fields[0]
                current_seq = []
            else:
                if current_id is None:
                    raise InputError(f"Sequence data before first header in {path}")
                current_seq.append(line)

    if current_id is not None:
        records.append((current_id, "".join(current_seq)))

    if not records:
        raise InputError(f"No sequences found in {path}")

    return build_transcripts(records)


def summarize_transcripts(transcripts: List[Transcript]) -> str:
    """转录本集合概要"""
    lengths = np.array([t.length for t in transcripts])
    gc = np.mean([gc_content(t.seq) for t in transcripts])
    return (
        f"Transcripts: {len(transcripts)}, "
        f"length min/median/max = {lengths.min()}/{int(np.median(lengths))}/{lengths.max()}, "
        f"mean GC = {gc:.3f}"
    )


# =============================================================================
# read写出
# =============================================================================

def sample_output_paths(
    output_dir: Union[str, Path],
    sample: Sample,
    paired: bool,
    compress: bool = False
) -> List[Path]:
    """样本输出文件路径：sample_NN.fasta 或 sample_NN_1/_2.fasta"""
    output_dir = Path(output_dir)
    suffix = ".fasta.gz" if compress else ".fasta"
    if paired:
        return [
            output_dir / f"{sample.label}_1{suffix}",
            output_dir / f"{sample.label}_2{suffix}",
        ]
    return [output_dir / f"{sample.label}{suffix}"]


class FastaReadWriter:
    """
    单个样本的read写出器

    先写入 *.partial 临时文件，commit() 时原子重命名为正式文件，
    discard() 删除临时文件；上下文管理器在异常时自动丢弃。
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        sample: Sample,
        paired: bool,
        compress: bool = False
    ):
        self.sample = sample
        self.paired = paired
        self.compress = compress
        self.paths = sample_output_paths(output_dir, sample, paired, compress)
        self._partial_paths = [Path(str(p) + PARTIAL_SUFFIX) for p in self.paths]
        self._handles: List[TextIO] = []
        self.records_written = 0

    def open(self):
        """打开输出流"""
        opener = gzip.open if self.compress else open
        try:
            for path in self._partial_paths:
                self._handles.append(opener(path, 'wt'))
        except OSError as e:
            self._close_handles()
            self._remove_partials()
            raise OutputError(f"Cannot open output for {self.sample.label}: {e}") from e
        return self

    def write(self, read: SimulatedRead):
        """写入一条read（双端时两条mate分别写入两个文件）"""
        if not self._handles:
            raise RuntimeError("Writer not opened")
        try:
            for mate, handle in enumerate(self._handles, start=1):
                handle.write(read.to_fasta(mate))
        except OSError as e:
            raise OutputError(f"Write failed for {self.sample.label}: {e}") from e
        self.records_written += 1

    def commit(self) -> List[Path]:
        """
        关闭并将临时文件重命名为正式文件

        双端时两个文件要么都提交，要么都不保留：
        任一重命名失败则删除已提交的文件和剩余临时文件
        """
        self._close_handles()
        committed = []
        try:
            for partial, final in zip(self._partial_paths, self.paths):
                os.replace(partial, final)
                committed.append(final)
        except OSError as e:
            for final in committed:
                final.unlink()
            self._remove_partials()
            raise OutputError(f"Cannot finalize output for {self.sample.label}: {e}") from e
        return list(self.paths)

    def discard(self):
        """关闭并删除未完成的输出"""
        self._close_handles()
        self._remove_partials()
        logger.warning(f"Discarded incomplete output for {self.sample.label}")

    def _close_handles(self):
        for handle in self._handles:
            handle.close()
        self._handles = []

    def _remove_partials(self):
        for partial in self._partial_paths:
            if partial.is_file():
                partial.unlink()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.discard()
        return False


def open_sample_writer(
    output_dir: Union[str, Path],
    sample: Sample,
    paired: bool,
    compress: bool = False
) -> FastaReadWriter:
    """创建写出器；若正式文件已存在则先删除，避免残留旧结果"""
    writer = FastaReadWriter(output_dir, sample, paired, compress)
    for path in writer.paths:
        if path.exists():
            path.unlink()
    return writer
