"""Tests for sequence utilities and transcript loading."""

import gzip

import pytest

from rnareadsim.simulate.readsim.errors import InputError
from rnareadsim.simulate.readsim.io_utils import (
    build_transcripts,
    check_transcripts,
    parse_fasta,
    validate_sequence,
)
from rnareadsim.simulate.readsim.models import Transcript
from rnareadsim.simulate.readsim.seq_utils import (
    extract_region,
    gc_content,
    invalid_bases,
    reverse_complement,
)


class TestReverseComplement:
    """Test reverse complement."""

    def test_basic(self):
        assert reverse_complement("AACGT") == "ACGTT"

    def test_involution(self):
        """Applying twice returns the original sequence."""
        seq = "ACGTNRYACGGT"
        assert reverse_complement(reverse_complement(seq)) == seq

    def test_ambiguity_codes(self):
        """IUPAC codes complement to their partners; N stays N."""
        assert reverse_complement("NRY") == "RYN"
        assert reverse_complement("KM") == "KM"

    def test_empty(self):
        assert reverse_complement("") == ""


class TestExtractRegion:
    """Test region extraction."""

    def test_inside(self):
        assert extract_region("ACGTACGT", 2, 4) == "GTAC"

    def test_full_length(self):
        assert extract_region("ACGT", 0, 4) == "ACGT"

    def test_out_of_bounds(self):
        with pytest.raises(IndexError):
            extract_region("ACGT", 2, 3)
        with pytest.raises(IndexError):
            extract_region("ACGT", -1, 2)


class TestSequenceChecks:
    """Test alphabet checks and GC content."""

    def test_invalid_bases(self):
        assert invalid_bases("ACGTN") == set()
        assert invalid_bases("ACGU*") == {"U", "*"}

    def test_gc_content(self):
        assert gc_content("GGCC") == 1.0
        assert gc_content("ATGC") == 0.5
        assert gc_content("") == 0.0

    def test_validate_sequence_normalizes(self):
        """Lowercase and whitespace are normalized."""
        assert validate_sequence("acg t\nn", "tx") == "ACGTN"

    def test_validate_sequence_rejects_empty(self):
        with pytest.raises(InputError):
            validate_sequence("  ", "tx")

    def test_validate_sequence_rejects_invalid(self):
        with pytest.raises(InputError, match="tx1"):
            validate_sequence("ACGU", "tx1")


class TestBuildTranscripts:
    """Test transcript construction."""

    def test_from_dict(self):
        transcripts = build_transcripts({"a": "ACGT", "b": "GGGG"})
        assert [t.id for t in transcripts] == ["a", "b"]
        assert transcripts[0].length == 4

    def test_duplicate_ids(self):
        with pytest.raises(InputError, match="Duplicate"):
            build_transcripts([("a", "ACGT"), ("a", "ACGT")])

    def test_empty(self):
        with pytest.raises(InputError):
            build_transcripts({})


class TestCheckTranscripts:
    """Test checks on already-built transcripts."""

    def test_valid_passes_through(self):
        transcripts = build_transcripts({"a": "acgtn", "b": "GGRY"})
        assert check_transcripts(iter(transcripts)) == transcripts

    def test_lowercase_rejected(self):
        with pytest.raises(InputError, match="upper-case"):
            check_transcripts([Transcript(id="a", seq="acgt")])

    def test_empty_sequence(self):
        with pytest.raises(InputError, match="empty"):
            check_transcripts([Transcript(id="a", seq="")])

    def test_duplicate_ids(self):
        with pytest.raises(InputError, match="Duplicate"):
            check_transcripts([Transcript(id="a", seq="ACGT"), Transcript(id="a", seq="GG")])

    def test_no_transcripts(self):
        with pytest.raises(InputError):
            check_transcripts([])


class TestParseFasta:
    """Test FASTA parsing."""

    def test_multiline_records(self, tmp_path):
        path = tmp_path / "tx.fa"
        path.write_text(">tx1 some description\nACGT\nacgt\n\n>tx2\nGGCC\n")
        transcripts = parse_fasta(path)
        assert [t.id for t in transcripts] == ["tx1", "tx2"]
        assert transcripts[0].seq == "ACGTACGT"

    def test_gzipped(self, tmp_path):
        path = tmp_path / "tx.fa.gz"
        with gzip.open(path, "wt") as f:
            f.write(">tx1\nACGTACGT\n")
        transcripts = parse_fasta(path)
        assert transcripts[0].seq == "ACGTACGT"

    def test_data_before_header(self, tmp_path):
        path = tmp_path / "bad.fa"
        path.write_text("ACGT\n>tx1\nACGT\n")
        with pytest.raises(InputError):
            parse_fasta(path)

    def test_no_records(self, tmp_path):
        path = tmp_path / "empty.fa"
        path.write_text("\n")
        with pytest.raises(InputError):
            parse_fasta(path)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
