"""Tests for lcmsspectator.readers.fasta."""
import pytest

from lcmsspectator.readers import FastaEntry, FastaFormatError, read_fasta, write_fasta


class TestReadFasta:
    def test_read(self, tmp_path):
        path = tmp_path / "db.fasta"
        path.write_text(">ProtA Kinase domain\nMPEP\nTIDE\n\n>ProtB\nKKKK\n")
        entries = read_fasta(path)
        assert entries == [
            FastaEntry("ProtA", "Kinase", "MPEPTIDE"),
            FastaEntry("ProtB", "", "KKKK"),
        ]

    def test_header_without_name(self, tmp_path):
        path = tmp_path / "bad.fasta"
        path.write_text("> Kinase\nMPEP\n")
        with pytest.raises(FastaFormatError) as err:
            read_fasta(path)
        assert err.value.line_number == 1

    def test_sequence_before_header(self, tmp_path):
        path = tmp_path / "bad.fasta"
        path.write_text("MPEP\n>ProtA\nMPEP\n")
        with pytest.raises(FastaFormatError):
            read_fasta(path)


class TestWriteFasta:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "out.fasta"
        entries = [FastaEntry("ProtA", "Kinase", "MPEPTIDE"), None, FastaEntry("ProtB", "Other", "KKKK")]
        write_fasta(entries, path)
        assert path.read_text() == ">ProtA Kinase\nMPEPTIDE\n>ProtB Other\nKKKK\n"
        assert read_fasta(path) == [entries[0], entries[2]]
