"""Tests for lcmsspectator.readers.targets."""
import io

from lcmsspectator.identification import Target
from lcmsspectator.readers import read_targets


class TestReadTargets:
    def test_read_path(self, tmp_path):
        path = tmp_path / "targets.tsv"
        path.write_text("Sequence\tCharge\nPEPTIDE\t2\nPEPM[Oxidation]TIDE\n\nKKKK\t\n")
        assert read_targets(path) == [Target("PEPTIDE", 2), Target("PEPM[Oxidation]TIDE", 0), Target("KKKK", 0)]

    def test_read_stream_left_open(self):
        stream = io.StringIO("PEPTIDE\t3\n")
        assert read_targets(stream) == [Target("PEPTIDE", 3)]
        assert not stream.closed
