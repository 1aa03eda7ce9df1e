"""Tests for mfqe.pipeline module."""

import gzip

import pandas as pd
import pytest
from mfqe.config import ExtractionConfig, SequenceFormat
from mfqe.errors import (
    ConfigurationError,
    CountMismatch,
    DuplicateNameInList,
    SourceDecodeError,
)
from mfqe.pipeline import run_extraction

FASTQ = (
    b"@random_sequence_length_5_1 1\n"
    b"TAGGG\n"
    b"+\n"
    b"AAAAA\n"
    b"@random_sequence_length_5_2 2\n"
    b"TTTCA\n"
    b"+\n"
    b"ATGCA\n"
    b"@random_sequence_length_5_3 3\n"
    b"GGCAT\n"
    b"+\n"
    b"AAAAA\n"
)

READ1 = b"@random_sequence_length_5_1 1\nTAGGG\n+\nAAAAA\n"
READ2 = b"@random_sequence_length_5_2 2\nTTTCA\n+\nATGCA\n"

FASTA = b">random_sequence_length_5_1\nGGTGT\n>random_sequence_length_5_2\nAAC\nGT\n"


@pytest.fixture
def fastq_input(tmp_path):
    path = tmp_path / "input.fq"
    path.write_bytes(FASTQ)
    return path


def name_list(tmp_path, filename, *names):
    path = tmp_path / filename
    path.write_text("".join(f"{n}\n" for n in names))
    return path


def fastq_config(tmp_path, input_path, lists, outputs, **kwargs):
    return ExtractionConfig(
        sequence_format=SequenceFormat.FASTQ,
        name_lists=lists,
        output_paths=outputs,
        input_path=input_path,
        **kwargs,
    )


class TestRunExtraction:
    """Test end-to-end extraction runs."""

    def test_single_list_gzip(self, tmp_path, fastq_input):
        """Test one name extracted to a gzip output."""
        names = name_list(tmp_path, "names", "random_sequence_length_5_1")
        out = tmp_path / "out.fq.gz"

        summary = run_extraction(fastq_config(tmp_path, fastq_input, [names], [out]))

        assert gzip.decompress(out.read_bytes()) == READ1
        assert summary.total_records == 3
        assert summary.extracted_records == 1

    def test_multiple_lists(self, tmp_path, fastq_input):
        """Test each list is written to its paired output."""
        a = name_list(tmp_path, "a", "random_sequence_length_5_1")
        b = name_list(tmp_path, "b", "random_sequence_length_5_2")
        out_a, out_b = tmp_path / "a.fq", tmp_path / "b.fq"

        summary = run_extraction(fastq_config(
            tmp_path, fastq_input, [a, b], [out_a, out_b], compress=False))

        assert out_a.read_bytes() == READ1
        assert out_b.read_bytes() == READ2
        assert summary.observed_counts == (1, 1)

    def test_fan_out(self, tmp_path, fastq_input):
        """Test a name in two lists appears in both outputs once."""
        a = name_list(tmp_path, "a", "random_sequence_length_5_1", "random_sequence_length_5_2")
        b = name_list(tmp_path, "b", "random_sequence_length_5_2")
        out_a, out_b = tmp_path / "a.fq", tmp_path / "b.fq"

        summary = run_extraction(fastq_config(
            tmp_path, fastq_input, [a, b], [out_a, out_b], compress=False))

        assert out_a.read_bytes() == READ1 + READ2
        assert out_b.read_bytes() == READ2
        assert summary.observed_counts == (2, 1)
        assert summary.extracted_records == 3

    def test_blank_lines_in_list(self, tmp_path, fastq_input):
        """Test blank lines in a name list are ignored."""
        names = tmp_path / "names"
        names.write_text("\nrandom_sequence_length_5_1\n\n")
        out = tmp_path / "out.fq.gz"

        summary = run_extraction(fastq_config(tmp_path, fastq_input, [names], [out]))

        assert summary.expected_counts == (1,)
        assert gzip.decompress(out.read_bytes()) == READ1

    def test_missing_name_raises_count_mismatch(self, tmp_path, fastq_input):
        """Test a name absent from the input fails the run."""
        names = name_list(tmp_path, "names", "readX")
        out = tmp_path / "out.fq.gz"

        with pytest.raises(CountMismatch) as excinfo:
            run_extraction(fastq_config(tmp_path, fastq_input, [names], [out]))

        assert excinfo.value.expected == [1]
        assert excinfo.value.observed == [0]

    def test_duplicate_name_fails_before_reading_input(self, tmp_path):
        """Test duplicate list entries fail before any output is opened."""
        names = name_list(tmp_path, "names", "readY", "readY")
        out = tmp_path / "out.fq.gz"
        missing_input = tmp_path / "not_there.fq"

        with pytest.raises(DuplicateNameInList):
            run_extraction(fastq_config(tmp_path, missing_input, [names], [out]))

        assert not out.exists()

    def test_list_output_count_mismatch(self, tmp_path, fastq_input):
        """Test unequal numbers of lists and outputs fail up front."""
        names = name_list(tmp_path, "names", "random_sequence_length_5_1")
        outs = [tmp_path / "a.fq.gz", tmp_path / "b.fq.gz"]

        with pytest.raises(ConfigurationError, match="must be equal"):
            run_extraction(fastq_config(tmp_path, fastq_input, [names], outs))

        assert not any(p.exists() for p in outs)

    def test_shared_output_rejected(self, tmp_path, fastq_input):
        """Test two lists writing the same output fail before writing."""
        a = name_list(tmp_path, "a", "random_sequence_length_5_1")
        b = name_list(tmp_path, "b", "random_sequence_length_5_2")
        out = tmp_path / "out.fq.gz"

        with pytest.raises(ConfigurationError, match="more than once"):
            run_extraction(fastq_config(tmp_path, fastq_input, [a, b], [out, out]))

        assert not out.exists()

    def test_output_equal_to_input_rejected(self, tmp_path, fastq_input):
        """Test the input is not truncated when named as an output."""
        names = name_list(tmp_path, "names", "random_sequence_length_5_1")

        with pytest.raises(ConfigurationError, match="input"):
            run_extraction(fastq_config(
                tmp_path, fastq_input, [names], [fastq_input], compress=False))

        assert fastq_input.read_bytes() == FASTQ

    def test_malformed_input_raises(self, tmp_path):
        """Test a decode error aborts the run."""
        bad = tmp_path / "bad.fq"
        bad.write_bytes(READ1 + b"not a record\n")
        names = name_list(tmp_path, "names", "random_sequence_length_5_1")

        with pytest.raises(SourceDecodeError):
            run_extraction(fastq_config(tmp_path, bad, [names], [tmp_path / "out.fq.gz"]))

    def test_truncate_is_idempotent(self, tmp_path, fastq_input):
        """Test two truncating runs give identical output."""
        names = name_list(tmp_path, "names", "random_sequence_length_5_2")
        out = tmp_path / "out.fq.gz"
        config = fastq_config(tmp_path, fastq_input, [names], [out])

        run_extraction(config)
        first = gzip.decompress(out.read_bytes())
        run_extraction(config)
        second = gzip.decompress(out.read_bytes())

        assert first == second == READ2

    def test_append_accumulates(self, tmp_path, fastq_input):
        """Test two appending runs give the single-run output twice."""
        names = name_list(tmp_path, "names", "random_sequence_length_5_1",
                          "random_sequence_length_5_2")
        out = tmp_path / "out.fq.gz"
        config = fastq_config(tmp_path, fastq_input, [names], [out], append=True)

        run_extraction(config)
        run_extraction(config)

        assert gzip.decompress(out.read_bytes()) == (READ1 + READ2) * 2

    def test_gzip_input(self, tmp_path):
        """Test compressed input is read transparently."""
        gz_input = tmp_path / "input.fq.gz"
        gz_input.write_bytes(gzip.compress(FASTQ))
        names = name_list(tmp_path, "names", "random_sequence_length_5_2")
        out = tmp_path / "out.fq"

        run_extraction(fastq_config(tmp_path, gz_input, [names], [out], compress=False))

        assert out.read_bytes() == READ2

    def test_sequence_prefix(self, tmp_path, fastq_input):
        """Test prefix is added to output names but not used for matching."""
        names = name_list(tmp_path, "names", "random_sequence_length_5_1")
        out = tmp_path / "out.fq"

        run_extraction(fastq_config(
            tmp_path, fastq_input, [names], [out], compress=False, sequence_prefix="S1_"))

        assert out.read_bytes() == b"@S1_random_sequence_length_5_1 1\nTAGGG\n+\nAAAAA\n"

    def test_fasta(self, tmp_path):
        """Test FASTA extraction keeps sequence lines."""
        fasta = tmp_path / "a.fasta"
        fasta.write_bytes(FASTA)
        names = name_list(tmp_path, "names", "random_sequence_length_5_2")
        out = tmp_path / "out.fa.gz"

        config = ExtractionConfig(
            sequence_format=SequenceFormat.FASTA,
            name_lists=[names],
            output_paths=[out],
            input_path=fasta,
        )
        run_extraction(config)

        assert gzip.decompress(out.read_bytes()) == b">random_sequence_length_5_2\nAAC\nGT\n"

    def test_summary_written_on_mismatch(self, tmp_path, fastq_input):
        """Test the count report is written even when counts mismatch."""
        names = name_list(tmp_path, "names", "random_sequence_length_5_1", "readX")
        report = tmp_path / "counts.tsv"

        with pytest.raises(CountMismatch):
            run_extraction(fastq_config(
                tmp_path, fastq_input, [names], [tmp_path / "out.fq.gz"],
                summary_path=report))

        df = pd.read_csv(report, sep='\t')
        assert df.loc[0, 'expected'] == 2
        assert df.loc[0, 'observed'] == 1
        assert df.loc[0, 'status'] == 'MISMATCH'


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
