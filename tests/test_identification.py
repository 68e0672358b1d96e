"""Tests for lcmsspectator.identification."""
from lcmsspectator.identification import IdentificationTree
from lcmsspectator.prsm import PrSm
from lcmsspectator.readers.fasta import FastaEntry
from lcmsspectator.sequence import Sequence


def make_prsm(scan, protein="ProtA", sequence="PEPTIDE", charge=2, score=10.0):
    return PrSm(scan=scan, charge=charge, sequence_text=sequence, sequence=Sequence.from_text(sequence),
                protein_name=protein, score=score)


class TestIdentificationTree:
    def test_grouping(self):
        tree = IdentificationTree([
            make_prsm(1),
            make_prsm(2, charge=3),
            make_prsm(3, sequence="PEPTIDES"),
            make_prsm(4, protein="ProtB"),
        ])
        assert set(tree.proteins) == {"ProtA", "ProtB"}
        protein = tree.proteins["ProtA"]
        assert set(protein.proteoforms) == {"PEPTIDE", "PEPTIDES"}
        assert set(protein.proteoforms["PEPTIDE"].charge_states) == {2, 3}
        assert len(tree) == 4

    def test_best_match_per_scan(self):
        weaker = make_prsm(1, score=5.0)
        stronger = make_prsm(1, score=50.0)
        tree = IdentificationTree([weaker, stronger])
        assert tree.identified_prsms() == [stronger]

    def test_placeholders_replaced(self):
        placeholder = PrSm(scan=9)
        tree = IdentificationTree([placeholder])
        assert tree.all_prsms() == [placeholder]
        identified = make_prsm(9)
        tree.add(identified)
        assert tree.all_prsms() == [identified]
        tree.add(PrSm(scan=9))
        assert tree.all_prsms() == [identified]

    def test_highest_scoring(self):
        tree = IdentificationTree([make_prsm(1, score=1.0), make_prsm(2, score=3.0), make_prsm(3, score=2.0)])
        assert tree.get_highest_scoring_prsm().scan == 2
        assert IdentificationTree().get_highest_scoring_prsm() is None

    def test_remove_and_contains(self):
        prsm = make_prsm(1)
        tree = IdentificationTree([prsm])
        assert prsm in tree
        assert tree.remove(prsm)
        assert prsm not in tree
        assert "ProtA" in tree.proteins
        assert not tree.proteins["ProtA"].proteoforms

    def test_fasta_entries_and_clear(self):
        tree = IdentificationTree([make_prsm(1), make_prsm(2, protein="ProtB")])
        tree.add_fasta_entries([FastaEntry("ProtA", "Kinase", "MPEPTIDEK")])
        assert tree.proteins["ProtA"].protein_desc == "Kinase"
        tree.clear_ids()
        assert list(tree.proteins) == ["ProtA"]
        assert tree.all_prsms() == []
