"""Read generic brute-force search result tables."""

import logging

from typing import List, Optional

from lcmsspectator.const import (
    BRUTE_DESCRIPTION,
    BRUTE_MODIFICATIONS,
    BRUTE_PROTEIN,
    BRUTE_SCAN,
    BRUTE_SCORE,
    BRUTE_SEQUENCE,
    SCORE_ROUNDING_DIGITS,
)
from lcmsspectator.prsm import PrSm
from lcmsspectator.sequence import SequenceReader
from lcmsspectator.readers.base import IdFileReaderBase, UnsupportedExtensionError
from lcmsspectator.readers.formats import IdFileFormat, TABULAR_EXTENSIONS, compound_extension
from lcmsspectator.readers.utils import (
    ProgressCallback,
    Row,
    file_size,
    ignored_by_suffix_match,
    iter_table,
    open_stream,
    parse_int,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class BruteForceSearchReader(IdFileReaderBase):
    """
    Reader for tab-separated brute-force search results.

    Every match is reported at charge 1.
    """

    format_name = "brute-force"
    formats = (IdFileFormat.BRUTE_FORCE_TSV, )
    use_golf_scoring = False

    _required_columns = [BRUTE_SCORE, BRUTE_PROTEIN, BRUTE_DESCRIPTION, BRUTE_SEQUENCE, BRUTE_SCAN]

    def _read_file(self, mod_ignore_list: List[str], progress: Optional[ProgressCallback]) -> List[PrSm]:
        ext = compound_extension(self.filename)
        if ext not in TABULAR_EXTENSIONS:
            raise UnsupportedExtensionError(f"Cannot read file with extension {ext!r}", ext)
        sequence_reader = SequenceReader(self.modification_registry)
        prsms = []
        with open_stream(self.filename, "rt") as stream:
            for row in iter_table(stream, file_size(self.filename), progress, filename=self.filename,
                                  required_columns=self._required_columns):
                prsms.extend(self._create_prsms(row, sequence_reader, mod_ignore_list))
        self._note_new_modifications(sequence_reader.new_modifications)
        return prsms

    def _create_prsms(self, row: Row, sequence_reader: SequenceReader, mod_ignore_list: List[str]) -> List[PrSm]:
        if BRUTE_MODIFICATIONS in row and ignored_by_suffix_match(row[BRUTE_MODIFICATIONS], mod_ignore_list):
            return []
        sequence_text = row[BRUTE_SEQUENCE].strip()
        sequence = sequence_reader.read(sequence_text)
        scan = row.parse(BRUTE_SCAN, parse_int)
        score = round(row.parse(BRUTE_SCORE, float), SCORE_ROUNDING_DIGITS)
        protein_names = row[BRUTE_PROTEIN].split(";")
        descriptions = row[BRUTE_DESCRIPTION].split(";")
        if len(descriptions) != len(protein_names):
            descriptions = [descriptions[0]] * len(protein_names)
        return [
            PrSm(
                scan=scan,
                charge=1,
                sequence_text=sequence_text,
                sequence=sequence,
                protein_name=name,
                protein_desc=desc,
                score=score,
                use_golf_scoring=self.use_golf_scoring,
                heavy=False,
            )
            for name, desc in zip(protein_names, descriptions)
        ]
