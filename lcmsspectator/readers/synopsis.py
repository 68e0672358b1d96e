"""
Read PHRP synopsis files (``*_syn.txt``) produced from MS-GF+ results.

A synopsis file is accompanied by optional companion tables sharing its
prefix:

``<prefix>_syn_ModSummary.txt``
    The modification symbols used in the ``Peptide`` column, their masses,
    target residues, type and mass correction tag.
``<prefix>_syn_ResultToSeqMap.txt`` and ``<prefix>_syn_SeqToProteinMap.txt``
    Map each result to every protein containing its peptide.
"""
import os
import logging
import warnings

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from lcmsspectator.const import (
    MAP_PROTEIN_NAME,
    MAP_RESULT_ID,
    MAP_UNIQUE_SEQ_ID,
    MOD_SUMMARY_MASS,
    MOD_SUMMARY_RESIDUES,
    MOD_SUMMARY_SUFFIX,
    MOD_SUMMARY_SYMBOL,
    MOD_SUMMARY_TAG,
    MOD_SUMMARY_TYPE,
    MSGF_SPEC_EVALUE,
    MSGF_SPEC_PROB,
    MSGFDB_SPEC_EVALUE,
    RESULT_TO_SEQ_MAP_SUFFIX,
    SEQ_TO_PROTEIN_MAP_SUFFIX,
    SYN_CHARGE,
    SYN_PEPTIDE,
    SYN_PROTEIN,
    SYN_RESULT_ID,
    SYN_SCAN,
    SYNOPSIS_SUFFIX,
)
from lcmsspectator.modification import Modification
from lcmsspectator.prsm import PrSm
from lcmsspectator.sequence import AminoAcid, Sequence, RESIDUE_CHARACTERS, trim_flanking
from lcmsspectator.readers.base import IdFileReaderBase
from lcmsspectator.readers.formats import IdFileFormat
from lcmsspectator.readers.utils import (
    ProgressCallback,
    Row,
    file_size,
    ignored_by_substring,
    iter_table,
    open_stream,
    parse_int,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


N_TERMINUS = "<"
C_TERMINUS = ">"
STATIC_TYPES = ("S", "T", "P")


@dataclass
class SynopsisModification:
    """One row of a ``_syn_ModSummary.txt`` table, resolved to a :class:`Modification`."""

    symbol: str
    target_residues: str
    modification_type: str
    modification: Modification

    @property
    def is_static(self) -> bool:
        return self.modification_type in STATIC_TYPES


class MSGFSynopsisReader(IdFileReaderBase):
    """
    Reader for PHRP MS-GF+ synopsis files.

    Dynamic modifications are written as symbols following their residue,
    ``K.PEPM*TIDE.R``, and are decoded with the modification summary. Static
    modifications are applied to every target residue. Modifications the
    registry cannot resolve by mass correction tag or by mass are registered
    and listed in :attr:`modifications`.
    """

    format_name = "phrp-synopsis"
    formats = (IdFileFormat.PHRP_SYNOPSIS, )
    use_golf_scoring = True

    _required_columns = [SYN_SCAN, SYN_CHARGE, SYN_PEPTIDE, SYN_PROTEIN]
    _score_columns = [MSGFDB_SPEC_EVALUE, MSGF_SPEC_EVALUE, MSGF_SPEC_PROB]

    dynamic_modifications: Dict[str, SynopsisModification]
    static_modifications: List[SynopsisModification]
    protein_map: Dict[str, List[str]]

    def __init__(self, filename, modification_registry=None):
        super().__init__(filename, modification_registry=modification_registry)
        self.dynamic_modifications = {}
        self.static_modifications = []
        self.protein_map = {}
        self._warned_symbols: Set[str] = set()

    @property
    def prefix(self) -> str:
        if self.filename.lower().endswith(SYNOPSIS_SUFFIX.lower()):
            return self.filename[:-len(SYNOPSIS_SUFFIX)]
        return os.path.splitext(self.filename)[0]

    def companion_path(self, suffix: str) -> str:
        return self.prefix + suffix

    def _read_file(self, mod_ignore_list: List[str], progress: Optional[ProgressCallback]) -> List[PrSm]:
        self._read_modification_summary()
        self._read_protein_map()
        prsms = []
        with open_stream(self.filename, "rt") as stream:
            for row in iter_table(stream, file_size(self.filename), progress, filename=self.filename,
                                  required_columns=self._required_columns):
                prsms.extend(self._create_prsms(row, mod_ignore_list))
        return prsms

    def _resolve(self, tag: str, mass: float) -> Modification:
        known = tag in self.modification_registry
        mod = self.modification_registry.get(tag)
        if mod is not None:
            if not known:
                self._note_new_modifications([mod])
            return mod
        candidates = self.modification_registry.get_from_mass(mass)
        if candidates:
            return candidates[0]
        return self._register_modification(tag, mass=mass)

    def _read_modification_summary(self):
        path = self.companion_path(MOD_SUMMARY_SUFFIX)
        self.dynamic_modifications = {}
        self.static_modifications = []
        if not os.path.exists(path):
            logger.debug("No modification summary found at %s", path)
            return
        required = [MOD_SUMMARY_SYMBOL, MOD_SUMMARY_MASS, MOD_SUMMARY_RESIDUES, MOD_SUMMARY_TYPE, MOD_SUMMARY_TAG]
        with open_stream(path, "rt") as stream:
            for row in iter_table(stream, filename=path, required_columns=required):
                entry = SynopsisModification(
                    symbol=row[MOD_SUMMARY_SYMBOL].strip(),
                    target_residues=row[MOD_SUMMARY_RESIDUES].strip(),
                    modification_type=row[MOD_SUMMARY_TYPE].strip().upper(),
                    modification=self._resolve(row[MOD_SUMMARY_TAG].strip(), row.parse(MOD_SUMMARY_MASS, float)),
                )
                if entry.is_static:
                    self.static_modifications.append(entry)
                else:
                    self.dynamic_modifications[entry.symbol] = entry

    def _read_protein_map(self):
        result_path = self.companion_path(RESULT_TO_SEQ_MAP_SUFFIX)
        protein_path = self.companion_path(SEQ_TO_PROTEIN_MAP_SUFFIX)
        self.protein_map = {}
        if not (os.path.exists(result_path) and os.path.exists(protein_path)):
            return
        seq_to_proteins: Dict[str, List[str]] = {}
        with open_stream(protein_path, "rt") as stream:
            for row in iter_table(stream, filename=protein_path,
                                  required_columns=[MAP_UNIQUE_SEQ_ID, MAP_PROTEIN_NAME]):
                proteins = seq_to_proteins.setdefault(row[MAP_UNIQUE_SEQ_ID].strip(), [])
                name = row[MAP_PROTEIN_NAME].strip()
                if name not in proteins:
                    proteins.append(name)
        with open_stream(result_path, "rt") as stream:
            for row in iter_table(stream, filename=result_path,
                                  required_columns=[MAP_RESULT_ID, MAP_UNIQUE_SEQ_ID]):
                proteins = seq_to_proteins.get(row[MAP_UNIQUE_SEQ_ID].strip())
                if proteins:
                    self.protein_map[row[MAP_RESULT_ID].strip()] = proteins

    def parse_peptide(self, peptide: str) -> Sequence:
        """Decode a PHRP peptide with modification symbols into a :class:`Sequence`."""
        residues: List[AminoAcid] = []
        leading: List[Modification] = []
        for char in trim_flanking(peptide.strip()):
            if char in RESIDUE_CHARACTERS:
                residues.append(AminoAcid(char, tuple(leading)))
                leading = []
            elif char in self.dynamic_modifications:
                mod = self.dynamic_modifications[char].modification
                if residues:
                    residues[-1] = residues[-1].modify(mod)
                else:
                    leading.append(mod)
            elif not char.isspace() and char not in self._warned_symbols:
                self._warned_symbols.add(char)
                warnings.warn(f"Skipping unknown modification symbol {char!r} in {self.filename}")
        for entry in self.static_modifications:
            residues = self._apply_static(residues, entry)
        return Sequence(residues)

    def _apply_static(self, residues: List[AminoAcid], entry: SynopsisModification) -> List[AminoAcid]:
        if not residues:
            return residues
        residues = list(residues)
        for target in entry.target_residues:
            if target == N_TERMINUS:
                residues[0] = residues[0].modify(entry.modification)
            elif target == C_TERMINUS:
                residues[-1] = residues[-1].modify(entry.modification)
            else:
                for i, aa in enumerate(residues):
                    if aa.residue == target:
                        residues[i] = aa.modify(entry.modification)
        return residues

    def _proteins_for(self, row: Row) -> List[str]:
        result_id = row.get(SYN_RESULT_ID)
        if result_id is not None:
            proteins = self.protein_map.get(result_id.strip())
            if proteins:
                return proteins
        return [row[SYN_PROTEIN].strip()]

    def _create_prsms(self, row: Row, mod_ignore_list: List[str]) -> List[PrSm]:
        sequence = self.parse_peptide(row[SYN_PEPTIDE])
        modification_names = " ".join(mod.name for _, mod in sequence.modifications)
        if ignored_by_substring(modification_names, mod_ignore_list):
            return []
        scan = row.parse(SYN_SCAN, parse_int)
        charge = row.parse(SYN_CHARGE, parse_int)
        score = row.parse_first(self._score_columns, float, float("nan"))
        return [
            PrSm(
                scan=scan,
                charge=charge,
                sequence_text=str(sequence),
                sequence=sequence,
                protein_name=protein,
                protein_desc="",
                score=score,
                use_golf_scoring=self.use_golf_scoring,
                q_value=0.0,
            )
            for protein in self._proteins_for(row)
        ]
