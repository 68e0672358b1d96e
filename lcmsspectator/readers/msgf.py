"""Read MS-GF+ TSV result tables."""

import logging

from typing import List, Optional

from lcmsspectator.const import (
    MSGF_CHARGE,
    MSGF_PEPTIDE,
    MSGF_PROTEIN,
    MSGF_QVALUE,
    MSGF_SCAN,
    MSGF_SCAN_NUM,
    MSGF_SPEC_EVALUE,
    MSGFDB_SPEC_EVALUE,
    QVALUE_ROUNDING_DIGITS,
    SYNOPSIS_MARKER,
)
from lcmsspectator.prsm import PrSm
from lcmsspectator.sequence import SequenceReader
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


class MSGFPlusReader(IdFileReaderBase):
    """
    Reader for MS-GF+ TSV output.

    Peptides are written with mass-shift modifications, ``K.PEPM+15.995TIDE.R``
    in PHRP-processed tables, and lower spectral E-values are better.
    """

    format_name = "ms-gf+"
    formats = (IdFileFormat.MSGF_PLUS_TSV, )
    use_golf_scoring = True

    _required_columns = [MSGF_PROTEIN, MSGF_PEPTIDE, MSGF_CHARGE, MSGF_QVALUE]

    _score_columns = [MSGF_SPEC_EVALUE, MSGFDB_SPEC_EVALUE]
    _scan_columns = [MSGF_SCAN_NUM, MSGF_SCAN]

    def _read_file(self, mod_ignore_list: List[str], progress: Optional[ProgressCallback]) -> List[PrSm]:
        sequence_reader = SequenceReader(
            self.modification_registry, trim_annotations=SYNOPSIS_MARKER in self.filename)
        prsms = []
        with open_stream(self.filename, "rt") as stream:
            for row in iter_table(stream, file_size(self.filename), progress, filename=self.filename,
                                  required_columns=self._required_columns):
                prsms.extend(self._create_prsms(row, sequence_reader, mod_ignore_list))
        self._note_new_modifications(sequence_reader.new_modifications)
        return prsms

    def _create_prsms(self, row: Row, sequence_reader: SequenceReader, mod_ignore_list: List[str]) -> List[PrSm]:
        sequence_text = row[MSGF_PEPTIDE].strip()
        if ignored_by_substring(sequence_text, mod_ignore_list):
            return []
        sequence = sequence_reader.read(sequence_text)
        scan = row.parse_first(self._scan_columns, parse_int, 0)
        charge = row.parse(MSGF_CHARGE, parse_int)
        score = row.parse_first(self._score_columns, float, 0.0)
        q_value = round(row.parse(MSGF_QVALUE, float), QVALUE_ROUNDING_DIGITS)
        return [
            PrSm(
                scan=scan,
                charge=charge,
                sequence_text=sequence_text,
                sequence=sequence,
                protein_name=name,
                protein_desc="",
                score=score,
                use_golf_scoring=self.use_golf_scoring,
                q_value=q_value,
            )
            for name in row[MSGF_PROTEIN].split(";")
        ]
