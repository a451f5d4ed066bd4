"""Tests for the negative binomial count model and count designs."""

import numpy as np
import pandas as pd
import pytest

from rnareadsim.simulate.readsim.counts import (
    CountMatrix,
    CountMatrixDesign,
    NegativeBinomialDesign,
    build_count_matrix,
    draw_negative_binomial,
    fold_change_multipliers,
    sample_counts,
)
from rnareadsim.simulate.readsim.errors import ConfigError
from rnareadsim.simulate.readsim.models import Transcript


@pytest.fixture
def transcripts():
    """Three short transcripts."""
    return [Transcript(id=f"tx{i}", seq="ACGT" * 100) for i in range(1, 4)]


class TestNegativeBinomial:
    """Test the negative binomial draw."""

    def test_mean_and_variance(self):
        """Sample moments converge to mean and mean + mean^2/size."""
        rng = np.random.default_rng(42)
        mean, size = 50.0, 5.0
        draws = draw_negative_binomial(mean, size, n=100_000, rng=rng)

        assert draws.shape == (100_000,)
        assert abs(draws.mean() - mean) < 0.5
        expected_var = mean + mean ** 2 / size
        assert abs(draws.var() - expected_var) / expected_var < 0.05

    def test_zero_mean(self):
        """Mean 0 gives count 0 without consuming randomness."""
        draws = draw_negative_binomial(np.array([0.0, 0.0]), 1.0)
        assert draws.tolist() == [0, 0]

    def test_non_negative_integers(self):
        draws = draw_negative_binomial(3.0, 0.5, n=1000, rng=np.random.default_rng(1))
        assert draws.dtype == np.int64
        assert (draws >= 0).all()


class TestFoldChangeMultipliers:
    """Test the baseline-anchored fold-change convention."""

    def test_vector(self):
        mult = fold_change_multipliers([4.0, 0.5, 1.0])
        np.testing.assert_allclose(mult, [[4.0, 1.0], [1.0, 2.0], [1.0, 1.0]])

    def test_ratio_is_fold_change(self):
        fc = np.array([3.0, 0.2, 1.0, 7.5])
        mult = fold_change_multipliers(fc)
        np.testing.assert_allclose(mult[:, 0] / mult[:, 1], fc)

    def test_matrix_passthrough(self):
        fc = np.array([[1.0, 2.0, 3.0]])
        np.testing.assert_allclose(fold_change_multipliers(fc), fc)


class TestSampleCounts:
    """Test count matrix sampling."""

    def test_shape_and_samples(self):
        cm = sample_counts(
            [100.0, 50.0], None, None, [1, 1, 2, 2], 4, seed=7
        )
        assert cm.shape == (2, 4)
        assert [s.group for s in cm.samples] == [1, 1, 2, 2]
        assert cm.samples[0].label == "sample_01"

    def test_fold_change_ratio_converges(self):
        """Group mean ratio converges to the fold change."""
        n_per_group = 2000
        groups = [1] * n_per_group + [2] * n_per_group
        fc = [4.0, 0.25, 1.0]
        cm = sample_counts(100.0, fc, 10.0, groups, len(groups), seed=42,
                           transcript_ids=["a", "b", "c"])

        values = cm.values.astype(float)
        g1 = values[:, :n_per_group].mean(axis=1)
        g2 = values[:, n_per_group:].mean(axis=1)
        np.testing.assert_allclose(g1 / g2, fc, rtol=0.05)
        # baseline-anchored: the unchanged group sits at the baseline
        assert abs(g2[0] - 100.0) / 100.0 < 0.05
        assert abs(g1[1] - 100.0) / 100.0 < 0.05

    def test_lib_sizes_scale_mean(self):
        n = 3000
        cm = sample_counts(
            [200.0], None, 20.0, [1] * (2 * n), 2 * n, seed=3,
            lib_sizes=[1.0] * n + [2.0] * n
        )
        low = cm.values[0, :n].mean()
        high = cm.values[0, n:].mean()
        assert abs(high / low - 2.0) < 0.1

    def test_deterministic(self):
        a = sample_counts([30.0, 60.0], [2.0, 0.5], None, [1, 2], 2, seed=11)
        b = sample_counts([30.0, 60.0], [2.0, 0.5], None, [1, 2], 2, seed=11)
        np.testing.assert_array_equal(a.values, b.values)

    def test_zero_baseline(self):
        cm = sample_counts([0.0, 10.0], None, None, [1, 2], 2, seed=1)
        assert cm.values[0].tolist() == [0, 0]

    def test_invalid_parameters(self):
        with pytest.raises(ConfigError):
            sample_counts([-1.0], None, None, [1], 1, seed=1)
        with pytest.raises(ConfigError):
            sample_counts([10.0], [0.0], None, [1], 1, seed=1)
        with pytest.raises(ConfigError):
            sample_counts([10.0], None, -2.0, [1], 1, seed=1)
        with pytest.raises(ConfigError):
            sample_counts([10.0], None, None, [1, 2], 1, seed=1)
        with pytest.raises(ConfigError):
            sample_counts([10.0], [[1.0, 1.0]], None, [3], 1, seed=1)


class TestCountMatrix:
    """Test explicit count matrix validation."""

    def test_from_array(self):
        cm = CountMatrix.from_array([[1, 2], [0, 5]], ["a", "b"])
        assert cm.num_transcripts == 2
        assert cm.num_samples == 2
        assert cm.total_reads() == 8
        assert cm.column(1).tolist() == [2, 5]
        assert cm.samples[0].group is None

    def test_read_only(self):
        cm = CountMatrix.from_array([[1, 2]], ["a"])
        with pytest.raises(ValueError):
            cm.values[0, 0] = 10

    @pytest.mark.parametrize("values", [
        [[1, -1]],
        [[1.5, 2]],
        [[np.nan, 1]],
        [1, 2],
    ])
    def test_rejects_invalid(self, values):
        with pytest.raises(ConfigError):
            CountMatrix.from_array(values, ["a"])

    def test_row_mismatch(self):
        with pytest.raises(ConfigError):
            CountMatrix.from_array([[1, 2]], ["a", "b"])

    def test_to_frame(self):
        cm = CountMatrix.from_array([[1, 2]], ["a"])
        df = cm.to_frame()
        assert list(df.columns) == ["sample_01", "sample_02"]
        assert df.index.name == "transcript_id"
        assert df.loc["a", "sample_02"] == 2


class TestBuildCountMatrix:
    """Test count design dispatch."""

    def test_negative_binomial_design(self, transcripts):
        design = NegativeBinomialDesign(
            reads_per_transcript=20.0, group_sizes=[2, 3], fold_changes=[2.0, 1.0, 0.5]
        )
        cm = build_count_matrix(design, transcripts, seed=5)
        assert cm.shape == (3, 5)
        assert cm.transcript_ids == ["tx1", "tx2", "tx3"]

    def test_multi_group_defaults_to_no_change(self, transcripts):
        design = NegativeBinomialDesign(reads_per_transcript=10.0, group_sizes=[1, 1, 1])
        cm = build_count_matrix(design, transcripts, seed=5)
        assert cm.shape == (3, 3)
        assert [s.group for s in cm.samples] == [1, 2, 3]

    def test_vector_requires_two_groups(self, transcripts):
        design = NegativeBinomialDesign(group_sizes=[1, 1, 1], fold_changes=[1.0, 1.0, 1.0])
        with pytest.raises(ConfigError):
            build_count_matrix(design, transcripts, seed=1)

    def test_matrix_columns_must_match_groups(self, transcripts):
        design = NegativeBinomialDesign(group_sizes=[1, 1], fold_changes=np.ones((3, 3)))
        with pytest.raises(ConfigError):
            build_count_matrix(design, transcripts, seed=1)

    def test_lib_sizes_length(self, transcripts):
        design = NegativeBinomialDesign(group_sizes=[2, 2], lib_sizes=[1.0, 1.0])
        with pytest.raises(ConfigError):
            build_count_matrix(design, transcripts, seed=1)

    def test_count_matrix_design_dataframe(self, transcripts):
        """DataFrame rows are reordered to transcript order."""
        df = pd.DataFrame(
            {"s1": [3, 1, 2], "s2": [0, 0, 0]}, index=["tx3", "tx1", "tx2"]
        )
        cm = build_count_matrix(CountMatrixDesign(counts=df), transcripts)
        assert cm.column(0).tolist() == [1, 2, 3]
        assert cm.samples[1].group is None

    def test_count_matrix_design_missing_transcript(self, transcripts):
        df = pd.DataFrame({"s1": [1, 2]}, index=["tx1", "tx2"])
        with pytest.raises(ConfigError, match="missing"):
            build_count_matrix(CountMatrixDesign(counts=df), transcripts)

    def test_unknown_design(self, transcripts):
        with pytest.raises(TypeError):
            build_count_matrix(object(), transcripts)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
