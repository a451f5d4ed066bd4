"""Tests for simulation configuration."""

import pytest
import yaml

from rnareadsim.simulate.readsim.config import (
    SimConfig,
    get_default_config,
    get_single_end_config,
)
from rnareadsim.utils import config as defaults


class TestDefaults:
    """Test default values."""

    def test_default_config(self):
        config = get_default_config()
        assert config.read_length == 100
        assert config.paired is True
        assert config.fraglen_mean == 250.0
        assert config.fraglen_sd == 25.0
        assert config.error_rate == 0.005
        assert config.counts.reads_per_transcript == 300.0
        assert config.counts.group_sizes == [10, 10]
        assert config.threads == 1
        assert config.validate() == []

    def test_matches_package_constants(self):
        config = get_default_config()
        assert config.read_length == defaults.DEFAULT_READ_LENGTH
        assert config.fraglen_mean == defaults.DEFAULT_FRAGLEN_MEAN
        assert config.fraglen_sd == defaults.DEFAULT_FRAGLEN_SD
        assert config.error_rate == defaults.DEFAULT_ERROR_RATE
        assert config.counts.reads_per_transcript == defaults.DEFAULT_READS_PER_TRANSCRIPT
        assert tuple(config.counts.group_sizes) == defaults.DEFAULT_GROUP_SIZES
        assert config.threads == defaults.DEFAULT_THREADS

    def test_single_end_config(self):
        assert get_single_end_config().paired is False

    def test_defaults_not_shared(self):
        a = SimConfig()
        b = SimConfig()
        a.counts.group_sizes.append(5)
        assert b.counts.group_sizes == [10, 10]


class TestSerialization:
    """Test dict/YAML/JSON round trips."""

    def test_yaml_round_trip(self, tmp_path):
        config = SimConfig()
        config.reads.read_length = 75
        config.reads.paired = False
        config.counts.fold_changes_path = "fc.tsv"
        config.counts.lib_sizes = [1.0] * 20
        config.seed = 123

        path = tmp_path / "config.yaml"
        config.to_yaml(str(path))
        loaded = SimConfig.from_yaml(str(path))
        assert loaded.to_dict() == config.to_dict()

    def test_json_round_trip(self, tmp_path):
        config = SimConfig()
        config.errors.error_rate = 0.0
        path = tmp_path / "config.json"
        config.to_json(str(path))
        assert SimConfig.from_json(str(path)).to_dict() == config.to_dict()

    def test_partial_yaml(self, tmp_path):
        """Sections missing from the file keep their defaults."""
        path = tmp_path / "partial.yaml"
        path.write_text(yaml.dump({"fragments": {"fraglen_mean": 300.0}, "seed": 5}))
        config = SimConfig.from_yaml(str(path))
        assert config.fraglen_mean == 300.0
        assert config.fraglen_sd == 25.0
        assert config.seed == 5
        assert config.read_length == 100

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert SimConfig.from_yaml(str(path)).to_dict() == SimConfig().to_dict()

    def test_unknown_key(self):
        with pytest.raises(TypeError):
            SimConfig.from_dict({"reads": {"read_len": 50}})


class TestValidation:
    """Test configuration checks."""

    @pytest.mark.parametrize("section,attr,value", [
        ("reads", "read_length", 0),
        ("fragments", "fraglen_mean", 0.0),
        ("fragments", "fraglen_sd", -1.0),
        ("fragments", "fraglen_mean", float("nan")),
        ("errors", "error_rate", 1.5),
        ("errors", "model", "nanopore"),
        ("counts", "reads_per_transcript", -5.0),
        ("counts", "group_sizes", [10, 0]),
        ("counts", "size", 0.0),
        ("counts", "mode", "poisson"),
    ])
    def test_invalid_values(self, section, attr, value):
        config = SimConfig()
        setattr(getattr(config, section), attr, value)
        assert len(config.validate()) == 1

    def test_lib_sizes_length(self):
        config = SimConfig()
        config.counts.lib_sizes = [1.0, 1.0]
        problems = config.validate()
        assert any("lib_sizes" in p for p in problems)

    def test_matrix_mode_requires_path(self):
        config = SimConfig()
        config.counts.mode = "matrix"
        assert config.validate() == ["counts.mode 'matrix' requires count_matrix_path"]

    def test_negative_threads(self):
        config = SimConfig(threads=-1)
        assert len(config.validate()) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
