"""Tests for lcmsspectator.readers.formats and reader dispatch."""
import pytest

from lcmsspectator.readers import (
    BruteForceSearchReader,
    FormatInferenceFailure,
    IdFileFormat,
    MSGFPlusReader,
    MSGFSynopsisReader,
    MSPathFinderReader,
    MtdbReader,
    MzIdentMlReader,
    compound_extension,
    create_reader,
    load_identifications,
    sniff_format,
)


class TestCompoundExtension:
    def test_extensions(self):
        test_cases = [
            ("Results.mzid.gz", ".mzid.gz"),
            ("Results.MZID", ".mzid"),
            ("dir.v2/Results_IcTda.tsv", ".tsv"),
            ("Results", ""),
        ]
        for path, expected in test_cases:
            assert compound_extension(path) == expected


class TestSniffFormat:
    def test_name_only(self, tmp_path):
        assert sniff_format(tmp_path / "Data_IcTsv.zip") is IdFileFormat.MSPATHFINDER_ZIP
        assert sniff_format(tmp_path / "Data.mzid") is IdFileFormat.MZIDENTML
        assert sniff_format(tmp_path / "Data.mzid.gz") is IdFileFormat.MZIDENTML
        assert sniff_format(tmp_path / "Data.mtdb") is IdFileFormat.MTDB
        assert sniff_format(tmp_path / "Data.raw") is None
        assert sniff_format(tmp_path / "Data.gz") is None

    def test_empty_path(self):
        assert sniff_format("") is None
        assert sniff_format("   ") is None
        assert create_reader("") is None

    def test_synopsis_by_name(self, write_table):
        path = write_table("Data_syn.txt", [["ResultID", "Scan", "Charge", "Peptide", "Protein"]])
        assert sniff_format(path) is IdFileFormat.PHRP_SYNOPSIS

    def test_header_sniffing(self, write_table):
        test_cases = [
            (["Scan", "MSGFScore", "SpecEValue"], IdFileFormat.MSGF_PLUS_TSV),
            (["Scan", "Sequence", "#MatchedFragments"], IdFileFormat.MSPATHFINDER_TSV),
            (["Scan", "Score", "Protein"], IdFileFormat.BRUTE_FORCE_TSV),
            (["Scan", "Nothing"], None),
        ]
        for i, (header, expected) in enumerate(test_cases):
            path = write_table(f"table{i}.tsv", [header])
            assert sniff_format(path) is expected

    def test_missing_tabular_file(self, tmp_path):
        with pytest.raises(OSError):
            sniff_format(tmp_path / "absent.tsv")


class TestCreateReader:
    def test_reader_types(self, tmp_path, write_table):
        test_cases = [
            (write_table("a.tsv", [["MSGFScore"]]), MSGFPlusReader),
            (write_table("b.txt", [["#MatchedFragments"]]), MSPathFinderReader),
            (write_table("c.tsv", [["Score"]]), BruteForceSearchReader),
            (write_table("d_syn.txt", [["Scan"]]), MSGFSynopsisReader),
            (tmp_path / "e.zip", MSPathFinderReader),
            (tmp_path / "f.mzid.gz", MzIdentMlReader),
            (tmp_path / "g.mtdb", MtdbReader),
        ]
        for path, reader_type in test_cases:
            assert type(create_reader(path)) is reader_type

    def test_unknown(self, tmp_path):
        assert create_reader(tmp_path / "h.csv") is None
        with pytest.raises(FormatInferenceFailure):
            load_identifications(tmp_path / "h.csv")
