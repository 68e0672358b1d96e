"""
Read mzIdentML identification files with :mod:`pyteomics.mzid`.

Plain ``.mzid`` and gzip-compressed ``.mzid.gz`` files are both supported.
Scores are taken from the MS-GF+ user parameters.
"""
import io
import re
import logging

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from pyteomics import mzid

from lcmsspectator.prsm import PrSm
from lcmsspectator.sequence import SequenceReader, trim_flanking
from lcmsspectator.readers.base import IdFileReaderBase
from lcmsspectator.readers.formats import IdFileFormat
from lcmsspectator.readers.utils import ProgressCallback, ignored_by_substring, open_stream, test_gzipped

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


SPEC_EVALUE = "MS-GF:SpecEValue"
QVALUE = "MS-GF:QValue"
SCAN_NUMBERS = "scan number(s)"

SPECTRUM_ID_SCAN_PATTERN = re.compile(r"(?:scan|index)=(\d+)")


@dataclass
class MzIdentMlOptions:
    """
    Filters applied while reading mzIdentML.

    Attributes
    ----------
    max_q_value : float
        Items with a larger ``MS-GF:QValue`` are skipped.
    max_spec_prob : float
        Items with a larger ``MS-GF:SpecEValue`` are skipped.
    """

    max_q_value: float = 1.0
    max_spec_prob: float = 1.0


def _scan_number(result: Dict[str, Any]) -> int:
    value = result.get(SCAN_NUMBERS)
    if value is not None:
        if isinstance(value, (list, tuple)):
            value = value[0]
        return int(float(value))
    match = SPECTRUM_ID_SCAN_PATTERN.search(str(result.get("spectrumID", "")))
    if match:
        return int(match.group(1))
    return 0


def _flanked_peptide_text(item: Dict[str, Any], evidence: Dict[str, Any]) -> str:
    peptide = item.get("PeptideSequence", "")
    shifts: Dict[int, List[float]] = {}
    for mod in item.get("Modification", []):
        location = int(mod.get("location", 0))
        location = min(max(location, 1), len(peptide))
        shifts.setdefault(location, []).append(float(mod.get("monoisotopicMassDelta", 0.0)))
    parts = []
    for i, residue in enumerate(peptide, 1):
        parts.append(residue)
        for delta in shifts.get(i, []):
            parts.append(f"{delta:+.3f}")
    pre = evidence.get("pre", "-") or "-"
    post = evidence.get("post", "-") or "-"
    return f"{pre}.{''.join(parts)}.{post}"


class MzIdentMlReader(IdFileReaderBase):
    """
    Reader for mzIdentML files, producing one record per peptide evidence.

    Parameters
    ----------
    filename : str
        The file to read.
    modification_registry : ModificationRegistry, optional
        Where mass shifts are resolved.
    options : MzIdentMlOptions, optional
        Q-value and spectral probability thresholds.
    """

    format_name = "mzidentml"
    formats = (IdFileFormat.MZIDENTML, )
    use_golf_scoring = True

    options: MzIdentMlOptions

    def __init__(self, filename, modification_registry=None, options: Optional[MzIdentMlOptions] = None):
        super().__init__(filename, modification_registry=modification_registry)
        if options is None:
            options = MzIdentMlOptions()
        self.options = options

    def _open_source(self):
        if test_gzipped(self.filename):
            with open_stream(self.filename, "rb") as stream:
                return io.BytesIO(stream.read())
        return self.filename

    def _read_file(self, mod_ignore_list: List[str], progress: Optional[ProgressCallback]) -> List[PrSm]:
        sequence_reader = SequenceReader(self.modification_registry)
        prsms = []
        with mzid.MzIdentML(self._open_source(), retrieve_refs=True, iterative=True, read_schema=False) as reader:
            for result in reader:
                scan = _scan_number(result)
                for item in result.get("SpectrumIdentificationItem", []):
                    prsms.extend(self._create_prsms(scan, item, sequence_reader, mod_ignore_list))
        self._note_new_modifications(sequence_reader.new_modifications)
        if progress is not None:
            progress(100.0)
        return prsms

    def _passes_thresholds(self, score: float, q_value: float) -> bool:
        return not (q_value > self.options.max_q_value or score > self.options.max_spec_prob)

    def _create_prsms(self, scan: int, item: Dict[str, Any], sequence_reader: SequenceReader,
                      mod_ignore_list: List[str]) -> List[PrSm]:
        score = float(item.get(SPEC_EVALUE, float("nan")))
        q_value = float(item.get(QVALUE, -1.0))
        if not self._passes_thresholds(score, q_value):
            return []
        evidences = item.get("PeptideEvidenceRef") or [{}]
        sequence_text = trim_flanking(_flanked_peptide_text(item, evidences[0]))
        sequence = sequence_reader.read(sequence_text)
        modification_names = " ".join(mod.name for _, mod in sequence.modifications)
        if ignored_by_substring(modification_names, mod_ignore_list):
            return []
        charge = int(item.get("chargeState", 0))
        return [
            PrSm(
                scan=scan,
                charge=charge,
                sequence_text=sequence_text,
                sequence=sequence,
                protein_name=evidence.get("accession", ""),
                protein_desc=evidence.get("protein description", ""),
                score=score,
                use_golf_scoring=self.use_golf_scoring,
                q_value=q_value,
            )
            for evidence in evidences
        ]
