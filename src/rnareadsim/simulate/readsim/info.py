"""
模拟汇总表

- sim_tx_info.txt: 转录本ID、fold change、是否差异表达（DEstatus）
- sim_rep_info.txt: 样本编号、分组、文库大小因子
- sim_counts_matrix.tsv: 实际使用的计数矩阵
- config_used.yaml: 本次运行的完整配置（含解析后的种子）
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd

from .config import SimConfig
from .counts import CountMatrix

logger = logging.getLogger(__name__)

TX_INFO_FILE = "sim_tx_info.txt"
REP_INFO_FILE = "sim_rep_info.txt"
COUNTS_FILE = "sim_counts_matrix.tsv"
CONFIG_FILE = "config_used.yaml"


def transcript_info(
    count_matrix: CountMatrix,
    fold_changes: Optional[np.ndarray] = None
) -> pd.DataFrame:
    """
    转录本汇总表

    fold_changes 为向量时输出单列 foldchange；为矩阵时每组一列
    foldchange.1 .. foldchange.G。任一值不等于1即视为差异表达。
    未给出时（矩阵设计）foldchange 为空、DEstatus 为 False。
    """
    df = pd.DataFrame({"transcriptid": count_matrix.transcript_ids})

    if fold_changes is None:
        df["foldchange"] = np.nan
        df["DEstatus"] = False
        return df

    fc = np.asarray(fold_changes, dtype=float)
    if fc.ndim == 1:
        df["foldchange"] = fc
        df["DEstatus"] = fc != 1
    else:
        for g in range(fc.shape[1]):
            df[f"foldchange.{g + 1}"] = fc[:, g]
        df["DEstatus"] = np.any(fc != 1, axis=1)
    return df


def replicate_info(count_matrix: CountMatrix) -> pd.DataFrame:
    """样本汇总表（矩阵设计中 group 为空）"""
    return pd.DataFrame({
        "rep_id": [s.sample_id for s in count_matrix.samples],
        "group": pd.array([s.group for s in count_matrix.samples], dtype="Int64"),
        "lib_sizes": [s.lib_size for s in count_matrix.samples],
    })


def write_info_tables(
    output_dir: Union[str, Path],
    count_matrix: CountMatrix,
    config: SimConfig,
    fold_changes: Optional[np.ndarray] = None
) -> Dict[str, Path]:
    """
    写出全部汇总表

    Returns:
        {名称: 路径}
    """
    output_dir = Path(output_dir)
    paths = {
        "tx_info": output_dir / TX_INFO_FILE,
        "rep_info": output_dir / REP_INFO_FILE,
        "counts": output_dir / COUNTS_FILE,
        "config": output_dir / CONFIG_FILE,
    }

    transcript_info(count_matrix, fold_changes).to_csv(
        paths["tx_info"], sep="\t", index=False
    )
    replicate_info(count_matrix).to_csv(paths["rep_info"], sep="\t", index=False)
    count_matrix.to_frame().to_csv(paths["counts"], sep="\t")
    config.to_yaml(str(paths["config"]))

    logger.info(f"Info tables written to {output_dir}")
    return paths
