"""The protein-spectrum match record shared by every identification reader."""

import math

from dataclasses import dataclass, field
from typing import Iterable, List

from pyteomics import mass as pyteomics_mass

from lcmsspectator.averagine import most_abundant_isotope_mz
from lcmsspectator.const import WATER_FORMULA
from lcmsspectator.sequence import Sequence


WATER_MASS = pyteomics_mass.calculate_mass(formula=WATER_FORMULA)


@dataclass
class PrSm:
    """
    A protein-spectrum match: one candidate peptide or proteoform sequence
    matched to an MS/MS spectrum, attributed to one protein accession.

    Attributes
    ----------
    scan : int
        The MS/MS scan number.
    charge : int
        The precursor charge. ``0`` marks a placeholder with no identification.
    sequence_text : str
        The sequence text as written by the search tool, possibly annotated.
    sequence : Sequence
        The parsed residues and their modifications.
    protein_name : str
        The protein accession.
    protein_desc : str
        The protein description, if the source provides one.
    score : float
        The search engine's score.
    use_golf_scoring : bool
        Whether lower scores are better.
    q_value : float
        The false discovery rate estimate for this match.
    raw_file_name : str
        The raw file the scan came from. Readers leave this empty.
    heavy : bool
        Whether this match is for the heavy-labeled form.
    """

    scan: int = 0
    charge: int = 0
    sequence_text: str = ""
    sequence: Sequence = field(default_factory=Sequence)
    protein_name: str = ""
    protein_desc: str = ""
    score: float = float("nan")
    use_golf_scoring: bool = False
    q_value: float = float("nan")
    raw_file_name: str = ""
    heavy: bool = False

    @property
    def mass(self) -> float:
        """The neutral monoisotopic mass of the modified sequence, or NaN when there is no sequence."""
        if not self.sequence:
            return float("nan")
        return self.sequence.mass + WATER_MASS

    @property
    def precursor_mz(self) -> float:
        """The m/z of the most abundant isotope at :attr:`charge`."""
        if not self.sequence or self.charge <= 0:
            return float("nan")
        return most_abundant_isotope_mz(self.mass, self.charge)

    @property
    def protein_name_desc(self) -> str:
        return f"{self.protein_name} {self.protein_desc}".strip()

    @property
    def scan_text(self) -> str:
        return str(self.scan) if self.scan > 0 else ""

    @property
    def modification_locations(self) -> str:
        return self.sequence.modification_locations()

    @property
    def identified(self) -> bool:
        return len(self.sequence) > 0

    def is_better_than(self, other: 'PrSm') -> bool:
        """
        Compare scores in this record's scoring direction.

        NaN scores are never better than anything.
        """
        if math.isnan(self.score):
            return False
        if math.isnan(other.score):
            return True
        if self.use_golf_scoring:
            return self.score < other.score
        return self.score > other.score

    def score_sort_key(self) -> float:
        """A key that sorts matches best-first, regardless of scoring direction."""
        if math.isnan(self.score):
            return math.inf
        return self.score if self.use_golf_scoring else -self.score


def sort_by_score(prsms: Iterable[PrSm]) -> List[PrSm]:
    """Order matches best-first."""
    return sorted(prsms, key=PrSm.score_sort_key)


def sort_by_scan(prsms: Iterable[PrSm]) -> List[PrSm]:
    return sorted(prsms, key=lambda prsm: prsm.scan)
