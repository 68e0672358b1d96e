"""
Read MTDB Creator SQLite3 databases.

The tables read are::

    ConsensusTarget(Id, Sequence)
    Evidence(Id, ConsensusId, Charge, Scan)
    ProteinInformation(Id, ProteinName)
    EvidenceProtein(EvidenceId, ProteinId)
    PostTranslationalModification(Id, Name, Formula, Mass)
    EvidencePtm(EvidenceId, PtmId, Location)

Target sequences are stored with two flanking characters on each side,
``K.PEPTIDE.R``, and PTM locations are one-based residue positions in the
unflanked sequence.
"""
import os
import logging
import sqlite3

from pathlib import Path
from typing import List, Mapping, Optional

from pyteomics.auxiliary import PyteomicsError

from lcmsspectator.modification import Modification
from lcmsspectator.prsm import PrSm
from lcmsspectator.sequence import Sequence
from lcmsspectator.readers.base import IdFileReaderBase
from lcmsspectator.readers.formats import IdFileFormat
from lcmsspectator.readers.utils import ProgressCallback, ignored_by_substring

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


FLANK_WIDTH = 2


def strip_flanks(sequence: str) -> str:
    """Remove the two flanking characters from both ends of a stored target sequence."""
    if len(sequence) <= 2 * FLANK_WIDTH:
        return ""
    return sequence[FLANK_WIDTH:-FLANK_WIDTH]


def residue_index(flanked_sequence: str, location: int) -> int:
    """
    Map a one-based PTM location onto a zero-based residue index of the
    unflanked sequence, through the position of the first '.' in the flanked
    sequence.
    """
    offset = flanked_sequence.find(".")
    if offset < 0:
        offset = FLANK_WIDTH - 1
    return location + offset - FLANK_WIDTH


class MtdbReader(IdFileReaderBase):
    """
    Reader for MTDB Creator databases, producing one record per evidence and protein.

    A missing database yields no records.
    """

    format_name = "mtdb"
    formats = (IdFileFormat.MTDB, )
    use_golf_scoring = False

    def _connect(self) -> sqlite3.Connection:
        uri = Path(os.path.abspath(self.filename)).as_uri() + "?mode=ro"
        connection = sqlite3.connect(uri, uri=True)
        connection.row_factory = sqlite3.Row
        return connection

    def _read_file(self, mod_ignore_list: List[str], progress: Optional[ProgressCallback]) -> List[PrSm]:
        if not os.path.exists(self.filename):
            logger.info("%s does not exist", self.filename)
            return []
        connection = self._connect()
        try:
            prsms = self._read_targets(connection, mod_ignore_list)
        finally:
            connection.close()
        if progress is not None:
            progress(100.0)
        return prsms

    def _modification_for(self, row: Mapping) -> Modification:
        name = row["Name"]
        formula = row["Formula"]
        if formula:
            try:
                return self._register_modification(name, formula=formula)
            except PyteomicsError:
                logger.debug("Could not parse formula %r for %s, using its mass", formula, name)
        return self._register_modification(name, mass=row["Mass"])

    def _read_targets(self, connection: sqlite3.Connection, mod_ignore_list: List[str]) -> List[PrSm]:
        prsms = []
        targets = connection.execute("SELECT Id, Sequence FROM ConsensusTarget ORDER BY Id").fetchall()
        for target in targets:
            sequence_text = strip_flanks(target["Sequence"])
            evidences = connection.execute(
                "SELECT Id, Charge, Scan FROM Evidence WHERE ConsensusId = ? ORDER BY Id",
                (target["Id"], )).fetchall()
            for evidence in evidences:
                sequence = Sequence.from_text(sequence_text)
                ptms = connection.execute(
                    """SELECT p.Name, p.Formula, p.Mass, e.Location
                    FROM EvidencePtm e JOIN PostTranslationalModification p ON e.PtmId = p.Id
                    WHERE e.EvidenceId = ? ORDER BY e.Location""", (evidence["Id"], )).fetchall()
                for ptm in ptms:
                    index = residue_index(target["Sequence"], ptm["Location"])
                    if not 0 <= index < len(sequence):
                        raise ValueError(
                            f"PTM {ptm['Name']} at {ptm['Location']} is outside {target['Sequence']!r} in {self.filename}")
                    sequence = sequence.with_modification(index, self._modification_for(ptm))
                modification_names = " ".join(mod.name for _, mod in sequence.modifications)
                if ignored_by_substring(modification_names, mod_ignore_list):
                    continue
                proteins = connection.execute(
                    """SELECT p.ProteinName FROM EvidenceProtein ep
                    JOIN ProteinInformation p ON ep.ProteinId = p.Id
                    WHERE ep.EvidenceId = ? ORDER BY p.Id""", (evidence["Id"], )).fetchall()
                for protein in proteins:
                    prsms.append(PrSm(
                        scan=evidence["Scan"],
                        charge=evidence["Charge"],
                        sequence_text=sequence_text,
                        sequence=sequence,
                        protein_name=protein["ProteinName"],
                        score=0.0,
                        use_golf_scoring=self.use_golf_scoring,
                    ))
        return prsms
