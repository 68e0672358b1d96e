"""Tests for lcmsspectator.prsm."""
import math

import pytest

from pyteomics import mass as pyteomics_mass

from lcmsspectator.prsm import PrSm, sort_by_scan, sort_by_score
from lcmsspectator.sequence import Sequence


class TestPrSm:
    def test_mass_and_precursor_mz(self):
        prsm = PrSm(scan=5, charge=2, sequence_text="PEPTIDE", sequence=Sequence.from_text("PEPTIDE"))
        expected = pyteomics_mass.calculate_mass(sequence="PEPTIDE")
        assert prsm.mass == pytest.approx(expected, abs=1e-6)
        assert prsm.precursor_mz == pytest.approx(pyteomics_mass.calculate_mass(sequence="PEPTIDE", charge=2), abs=1e-4)

    def test_placeholder(self):
        prsm = PrSm(scan=5)
        assert math.isnan(prsm.mass)
        assert math.isnan(prsm.precursor_mz)
        assert not prsm.identified

    def test_derived_text(self, registry):
        prsm = PrSm(scan=7, protein_name="ProtA", protein_desc="Kinase",
                    sequence=Sequence.from_text("PEPMTIDE").with_modification(3, registry.get("Oxidation")))
        assert prsm.protein_name_desc == "ProtA Kinase"
        assert prsm.scan_text == "7"
        assert prsm.modification_locations == "M4[Oxidation] "

    def test_is_better_than(self):
        assert PrSm(score=10).is_better_than(PrSm(score=5))
        assert PrSm(score=1e-10, use_golf_scoring=True).is_better_than(PrSm(score=1e-5, use_golf_scoring=True))
        assert not PrSm().is_better_than(PrSm(score=1))
        assert PrSm(score=1).is_better_than(PrSm())

    def test_sorting(self):
        golf = [PrSm(scan=3, score=1e-3, use_golf_scoring=True), PrSm(scan=1, score=1e-9, use_golf_scoring=True)]
        assert [p.scan for p in sort_by_score(golf)] == [1, 3]
        higher = [PrSm(scan=1, score=2.0), PrSm(scan=2, score=9.0), PrSm(scan=3)]
        assert [p.scan for p in sort_by_score(higher)] == [2, 1, 3]
        assert [p.scan for p in sort_by_scan(higher[::-1])] == [1, 2, 3]
