"""
Aggregation of identifications by protein, proteoform and charge state.

An :class:`IdentificationTree` nests matches as::

    ProteinId -> ProteoformId -> ChargeStateId -> PrSm

and keeps scans that have no identification as placeholders.
"""
import logging

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from lcmsspectator.prsm import PrSm, sort_by_score

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


ScanKey = Tuple[str, int]


def _scan_key(prsm: PrSm) -> ScanKey:
    return (prsm.raw_file_name, prsm.scan)


@dataclass
class Target:
    """A sequence of interest, optionally at a specific charge."""

    sequence_text: str
    charge: int = 0


@dataclass
class ChargeStateId:
    """The best match for each scan of one proteoform at one charge."""

    charge: int
    prsms: Dict[ScanKey, PrSm] = field(default_factory=dict)

    def add(self, prsm: PrSm):
        key = _scan_key(prsm)
        current = self.prsms.get(key)
        if current is None or prsm.is_better_than(current):
            self.prsms[key] = prsm

    def remove(self, prsm: PrSm) -> bool:
        key = _scan_key(prsm)
        if self.prsms.get(key) is prsm:
            del self.prsms[key]
            return True
        return False

    def __iter__(self) -> Iterator[PrSm]:
        return iter(self.prsms.values())

    def __len__(self):
        return len(self.prsms)


@dataclass
class ProteoformId:
    sequence_text: str
    charge_states: Dict[int, ChargeStateId] = field(default_factory=dict)

    def add(self, prsm: PrSm):
        charge_state = self.charge_states.get(prsm.charge)
        if charge_state is None:
            charge_state = self.charge_states[prsm.charge] = ChargeStateId(prsm.charge)
        charge_state.add(prsm)

    def remove(self, prsm: PrSm) -> bool:
        charge_state = self.charge_states.get(prsm.charge)
        if charge_state is None or not charge_state.remove(prsm):
            return False
        if not charge_state:
            del self.charge_states[prsm.charge]
        return True

    def __iter__(self) -> Iterator[PrSm]:
        for charge_state in self.charge_states.values():
            yield from charge_state

    def __len__(self):
        return sum(map(len, self.charge_states.values()))


@dataclass
class ProteinId:
    """
    A protein and the proteoforms identified for it.

    The description and sequence are filled in from a FASTA database when one
    is attached with :meth:`IdentificationTree.add_fasta_entries`.
    """

    protein_name: str
    protein_desc: str = ""
    protein_sequence_text: str = ""
    proteoforms: Dict[str, ProteoformId] = field(default_factory=dict)

    def add(self, prsm: PrSm):
        proteoform = self.proteoforms.get(prsm.sequence_text)
        if proteoform is None:
            proteoform = self.proteoforms[prsm.sequence_text] = ProteoformId(prsm.sequence_text)
        proteoform.add(prsm)

    def remove(self, prsm: PrSm) -> bool:
        proteoform = self.proteoforms.get(prsm.sequence_text)
        if proteoform is None or not proteoform.remove(prsm):
            return False
        if not proteoform:
            del self.proteoforms[prsm.sequence_text]
        return True

    def __iter__(self) -> Iterator[PrSm]:
        for proteoform in self.proteoforms.values():
            yield from proteoform

    def __len__(self):
        return sum(map(len, self.proteoforms.values()))


class IdentificationTree(object):
    """
    Group :class:`~lcmsspectator.prsm.PrSm` records into a protein hierarchy.

    Parameters
    ----------
    prsms : Iterable[PrSm], optional
        Records to add immediately.
    """

    proteins: Dict[str, ProteinId]
    placeholders: Dict[ScanKey, PrSm]

    def __init__(self, prsms: Optional[Iterable[PrSm]] = None):
        self.proteins = {}
        self.placeholders = {}
        if prsms is not None:
            self.add_all(prsms)

    def add(self, prsm: PrSm):
        """
        Add a record. Records without a sequence are kept as placeholders for
        their scan until an identified record for the same scan arrives.
        """
        key = _scan_key(prsm)
        if not prsm.identified:
            if not self._has_identification_for(key):
                self.placeholders[key] = prsm
            return
        self.placeholders.pop(key, None)
        protein = self.proteins.get(prsm.protein_name)
        if protein is None:
            protein = self.proteins[prsm.protein_name] = ProteinId(prsm.protein_name, prsm.protein_desc)
        protein.add(prsm)

    def add_all(self, prsms: Iterable[PrSm]):
        for prsm in prsms:
            self.add(prsm)

    def add_fasta_entries(self, entries: Iterable):
        """Attach descriptions and protein sequences from :class:`~lcmsspectator.readers.fasta.FastaEntry` objects."""
        for entry in entries:
            protein = self.proteins.get(entry.protein_name)
            if protein is None:
                protein = self.proteins[entry.protein_name] = ProteinId(entry.protein_name)
            protein.protein_desc = entry.protein_description
            protein.protein_sequence_text = entry.protein_sequence_text

    def remove(self, prsm: PrSm) -> bool:
        key = _scan_key(prsm)
        if self.placeholders.get(key) is prsm:
            del self.placeholders[key]
            return True
        protein = self.proteins.get(prsm.protein_name)
        if protein is None:
            return False
        return protein.remove(prsm)

    def contains(self, prsm: PrSm) -> bool:
        return any(p is prsm for p in self.all_prsms())

    __contains__ = contains

    def _has_identification_for(self, key: ScanKey) -> bool:
        return any(_scan_key(prsm) == key for prsm in self.identified_prsms())

    def identified_prsms(self) -> List[PrSm]:
        return [prsm for protein in self.proteins.values() for prsm in protein]

    def all_prsms(self) -> List[PrSm]:
        return list(self.placeholders.values()) + self.identified_prsms()

    def get_highest_scoring_prsm(self) -> Optional[PrSm]:
        ranked = sort_by_score(self.identified_prsms())
        if not ranked:
            return None
        return ranked[0]

    def clear_ids(self):
        """Drop every record, keeping the proteins attached from a FASTA database."""
        self.placeholders.clear()
        for name in list(self.proteins):
            protein = self.proteins[name]
            if protein.protein_sequence_text:
                protein.proteoforms.clear()
            else:
                del self.proteins[name]

    def __len__(self):
        return len(self.placeholders) + sum(map(len, self.proteins.values()))

    def __repr__(self):
        return f"{self.__class__.__name__}({len(self.proteins)} proteins, {len(self)} matches)"
