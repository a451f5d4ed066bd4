"""Tests for utility modules."""

import logging

import pandas as pd
import pytest

from rnareadsim.utils.config import table_separator
from rnareadsim.utils.io import (
    create_output_dirs,
    load_count_matrix,
    load_fold_changes,
    load_size_table,
    save_table,
)
from rnareadsim.utils.logging_utils import setup_logger
from rnareadsim.utils.validation import (
    missing_ids,
    validate_file_exists,
    validate_group_sizes,
)


class TestTables:
    """Test table loading and saving."""

    def test_separator(self):
        assert table_separator("a.csv") == ","
        assert table_separator("a.tsv") == "\t"
        assert table_separator("a.txt") == "\t"

    def test_load_fold_changes(self, tmp_path):
        path = tmp_path / "fc.tsv"
        path.write_text("transcript\tfc\ntx1\t2\ntx2\t0.5\n")
        df = load_fold_changes(path)
        assert list(df.index) == ["tx1", "tx2"]
        assert df["fc"].tolist() == [2.0, 0.5]

    def test_load_count_matrix_csv(self, tmp_path):
        path = tmp_path / "counts.csv"
        path.write_text("id,s1,s2\n1,3,0\n2,5,1\n")
        df = load_count_matrix(path)
        # numeric ids are read as strings
        assert list(df.index) == ["1", "2"]
        assert df.shape == (2, 2)

    def test_load_size_table(self, tmp_path):
        path = tmp_path / "size.tsv"
        path.write_text("transcript\tsize\ntx1\t4\n")
        sizes = load_size_table(path)
        assert sizes["tx1"] == 4

    def test_non_numeric_rejected(self, tmp_path):
        path = tmp_path / "fc.tsv"
        path.write_text("transcript\tfc\ntx1\thigh\n")
        with pytest.raises(ValueError):
            load_fold_changes(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_count_matrix(tmp_path / "nope.tsv")

    def test_save_table(self, tmp_path):
        df = pd.DataFrame({"a": [1, 2]}, index=["x", "y"])
        out = tmp_path / "sub" / "t.tsv"
        save_table(df, out)
        assert out.read_text().splitlines()[1] == "x\t1"


class TestValidation:
    """Test validation helpers."""

    def test_validate_file_exists(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Transcript FASTA"):
            validate_file_exists(str(tmp_path / "x.fa"), "Transcript FASTA")

    def test_missing_ids(self):
        df = pd.DataFrame({"v": [1]}, index=["tx1"])
        assert missing_ids(df, ["tx1", "tx2", "tx3"]) == ["tx2", "tx3"]

    def test_validate_group_sizes(self):
        assert validate_group_sizes(("3", 2)) == [3, 2]
        with pytest.raises(ValueError):
            validate_group_sizes([])
        with pytest.raises(ValueError):
            validate_group_sizes([2, 0])


class TestEnvironment:
    """Test directories and logging."""

    def test_create_output_dirs(self, tmp_path):
        dirs = create_output_dirs(tmp_path / "out", ["logs"])
        assert dirs["base"].is_dir()
        assert dirs["logs"].is_dir()

    def test_setup_logger(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logger("rnareadsim.test", log_file=str(log_file), level=logging.DEBUG)
        logger.debug("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
