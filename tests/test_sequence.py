"""Tests for lcmsspectator.sequence."""
import pytest

from pyteomics import mass as pyteomics_mass

from lcmsspectator.modification import InvalidModificationNameError
from lcmsspectator.sequence import AminoAcid, Sequence, SequenceReader, trim_flanking


class TestTrimFlanking:
    def test_trim(self):
        test_cases = [
            ("K.PEPTIDE.R", "PEPTIDE"),
            ("-.PEPTIDE.-", "PEPTIDE"),
            ("K.PEPM+15.995TIDE.R", "PEPM+15.995TIDE"),
            ("PEPTIDE", "PEPTIDE"),
            ("PEPM+15.995TIDE", "PEPM+15.995TIDE"),
        ]
        for text, expected in test_cases:
            assert trim_flanking(text) == expected


class TestSequenceReader:
    def test_named_notation(self, registry):
        sequence = SequenceReader(registry).read("PEPM[Oxidation]TIDE")
        assert sequence.unmodified_text == "PEPMTIDE"
        assert [(i, mod.name) for i, mod in sequence.modifications] == [(3, "Oxidation")]
        assert str(sequence) == "PEPM[Oxidation]TIDE"

    def test_leading_modification_attaches_to_first_residue(self, registry):
        sequence = SequenceReader(registry).read("[Acetyl]PEPTIDE")
        assert sequence[0] == AminoAcid("P", (registry.get("Acetyl"), ))

    def test_unknown_name(self, registry):
        with pytest.raises(InvalidModificationNameError) as err:
            SequenceReader(registry).read("PEP[Mystery]TIDE")
        assert err.value.modification_name == "Mystery"

    def test_mass_shift_notation(self, registry):
        sequence = SequenceReader(registry).read("PEPM+15.995TIDE")
        assert str(sequence) == "PEPM[Oxidation]TIDE"

    def test_unknown_mass_shift_is_registered(self, registry):
        reader = SequenceReader(registry)
        sequence = reader.read("PEPK+123.456TIDE")
        mod = sequence[3].modifications[0]
        assert mod.name == "+123.456"
        assert mod.mass == pytest.approx(123.456)
        assert reader.new_modifications == [mod]
        reader.read("PEPK+123.456TIDE")
        assert reader.new_modifications == [mod]

    def test_trim_annotations(self, registry):
        sequence = SequenceReader(registry, trim_annotations=True).read("K.PEPM+15.995TIDE.R")
        assert sequence.unmodified_text == "PEPMTIDE"

    def test_empty(self, registry):
        assert len(SequenceReader(registry).read("")) == 0


class TestSequence:
    def test_mass(self):
        sequence = Sequence.from_text("PEPTIDE")
        expected = pyteomics_mass.calculate_mass(sequence="PEPTIDE") - pyteomics_mass.calculate_mass(formula="H2O")
        assert sequence.mass == pytest.approx(expected, abs=1e-6)

    def test_with_modification_and_locations(self, registry):
        sequence = Sequence.from_text("PEPMTIDE").with_modification(3, registry.get("Oxidation"))
        assert sequence.modification_locations() == "M4[Oxidation] "
        assert sequence != Sequence.from_text("PEPMTIDE")
        assert sequence == "PEPM[Oxidation]TIDE"

    def test_slicing(self):
        sequence = Sequence.from_text("PEPTIDE")
        assert isinstance(sequence[1:3], Sequence)
        assert sequence[1:3].unmodified_text == "EP"

    def test_to_proforma(self, registry):
        sequence = Sequence.from_text("PEPMTIDE").with_modification(3, registry.get("Oxidation"))
        assert sequence.proforma_string() == "PEPM[+15.9949]TIDE"
        peptide = sequence.to_proforma()
        assert peptide.mass == pytest.approx(sequence.mass + pyteomics_mass.calculate_mass(formula="H2O"), abs=1e-3)


class TestSequenceReaderWithVocabulary:
    def test_resolved_name_is_reported(self, unimod_registry):
        reader = SequenceReader(unimod_registry)
        sequence = reader.read("PEPY[Bromo]TIDE")
        assert [(i, mod.name) for i, mod in sequence.modifications] == [(3, "Bromo")]
        assert [mod.name for mod in reader.new_modifications] == ["Bromo"]
        reader.read("PEPY[Bromo]TIDE")
        assert len(reader.new_modifications) == 1

    def test_known_name_is_not_reported(self, unimod_registry):
        reader = SequenceReader(unimod_registry)
        reader.read("PEPM[Oxidation]TIDE")
        assert reader.new_modifications == []
