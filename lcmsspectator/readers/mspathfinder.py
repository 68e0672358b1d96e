"""
Read MSPathFinder ``_IcTda.tsv`` result tables, either directly or from the
``_IcTsv.zip`` archives MSPathFinder produces.
"""
import io
import os
import logging
import warnings
import zipfile

from typing import Iterable, List, Optional, Tuple

from lcmsspectator.const import (
    IC_CHARGE,
    IC_DECOY_MARKER,
    IC_MATCHED_FRAGMENTS,
    IC_MODIFICATIONS,
    IC_PROTEIN_DESC,
    IC_PROTEIN_NAME,
    IC_QVALUE,
    IC_SCAN,
    IC_SCORE,
    IC_SEQUENCE,
    IC_TARGET_MARKER,
    IC_TDA_ENTRY_SUFFIX,
    IC_TSV_ARCHIVE_SUFFIX,
    QVALUE_ROUNDING_DIGITS,
    SCORE_ROUNDING_DIGITS,
)
from lcmsspectator.modification import InvalidModificationNameError, Modification, ModificationRegistry
from lcmsspectator.prsm import PrSm
from lcmsspectator.sequence import SequenceReader
from lcmsspectator.readers.base import IdFileReaderBase, UnsupportedExtensionError
from lcmsspectator.readers.formats import IdFileFormat, TABULAR_EXTENSIONS, compound_extension
from lcmsspectator.readers.utils import (
    FieldParseError,
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


def parse_modification_list(text: str, registry: ModificationRegistry,
                            new_modifications: Optional[List[Modification]] = None
                            ) -> List[Tuple[Modification, int]]:
    """
    Parse an MSPathFinder modification column, ``"Oxidation 3,Phospho 7"``.

    Names the registry did not know before, but resolved through its
    vocabulary, are appended to ``new_modifications`` when it is given.

    Raises
    ------
    InvalidModificationNameError
        When a modification name is not registered.
    ValueError
        When an entry is not a name followed by an integer position.
    """
    result = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        parts = token.split()
        if len(parts) != 2:
            raise ValueError(f"Expected \"name position\", got {token!r}")
        name, position = parts
        known = name in registry
        mod = registry.get(name)
        if mod is None:
            raise InvalidModificationNameError(
                f"Found an unrecognized modification: {name}", name)
        if not known and new_modifications is not None and mod not in new_modifications:
            new_modifications.append(mod)
        result.append((mod, int(position)))
    return result


def annotate_sequence(sequence: str, modifications: Iterable[Tuple[Modification, int]]) -> str:
    """Insert ``[name]`` labels into ``sequence`` at each modification's position, highest position first."""
    for mod, position in sorted(modifications, key=lambda pair: pair[1], reverse=True):
        sequence = f"{sequence[:position]}[{mod.name}]{sequence[position:]}"
    return sequence


class MSPathFinderReader(IdFileReaderBase):
    """
    Reader for MSPathFinder identification tables.

    ``.tsv`` and ``.txt`` files are read as text. For ``.zip`` archives the
    entry ``<name>_IcTda.tsv`` is read, where ``<name>`` is the archive name
    without a trailing ``_IcTsv``. Target-only and decoy-only tables
    (``_IcTarget``/``_IcDecoy``) have no Q-value column.
    """

    format_name = "mspathfinder"
    formats = (IdFileFormat.MSPATHFINDER_TSV, IdFileFormat.MSPATHFINDER_ZIP)
    use_golf_scoring = False

    _required_columns = [
        IC_MATCHED_FRAGMENTS,
        IC_PROTEIN_NAME,
        IC_MODIFICATIONS,
        IC_SEQUENCE,
        IC_SCAN,
        IC_CHARGE,
        IC_PROTEIN_DESC,
    ]

    @property
    def has_q_values(self) -> bool:
        lowered = self.filename.lower()
        return IC_TARGET_MARKER not in lowered and IC_DECOY_MARKER not in lowered

    @property
    def required_columns(self) -> List[str]:
        columns = list(self._required_columns)
        if self.has_q_values:
            columns.append(IC_QVALUE)
        return columns

    def _read_file(self, mod_ignore_list: List[str], progress: Optional[ProgressCallback]) -> List[PrSm]:
        ext = compound_extension(self.filename)
        if ext in TABULAR_EXTENSIONS:
            with open_stream(self.filename, "rt") as stream:
                return self._read_stream(stream, file_size(self.filename), mod_ignore_list, progress)
        elif ext == ".zip":
            return self._read_archive(mod_ignore_list, progress)
        raise UnsupportedExtensionError(f"Cannot read file with extension {ext!r}", ext)

    def archive_entry_name(self) -> str:
        stem = os.path.splitext(os.path.basename(self.filename))[0]
        if stem.endswith(IC_TSV_ARCHIVE_SUFFIX):
            stem = stem[:-len(IC_TSV_ARCHIVE_SUFFIX)]
        return stem + IC_TDA_ENTRY_SUFFIX

    def _read_archive(self, mod_ignore_list: List[str], progress: Optional[ProgressCallback]) -> List[PrSm]:
        entry_name = self.archive_entry_name()
        with zipfile.ZipFile(self.filename) as archive:
            try:
                info = archive.getinfo(entry_name)
            except KeyError:
                warnings.warn(f"{self.filename} does not contain {entry_name}")
                return []
            with archive.open(info) as raw, io.TextIOWrapper(raw, encoding="utf-8-sig") as stream:
                return self._read_stream(stream, info.file_size, mod_ignore_list, progress)

    def _read_stream(self, stream, total_size: int, mod_ignore_list: List[str],
                     progress: Optional[ProgressCallback]) -> List[PrSm]:
        prsms = []
        for row in iter_table(stream, total_size, progress, filename=self.filename,
                              required_columns=self.required_columns):
            prsms.extend(self._create_prsms(row, mod_ignore_list))
        return prsms

    def _create_prsms(self, row: Row, mod_ignore_list: List[str]) -> List[PrSm]:
        modification_text = row[IC_MODIFICATIONS]
        if ignored_by_suffix_match(modification_text, mod_ignore_list):
            return []
        new_modifications = []
        try:
            modifications = parse_modification_list(
                modification_text, self.modification_registry, new_modifications)
        except ValueError as err:
            raise FieldParseError(self.filename, row.line_number, IC_MODIFICATIONS,
                                  modification_text, str(err)) from err
        self._note_new_modifications(new_modifications)
        sequence_text = annotate_sequence(row[IC_SEQUENCE].strip(), modifications)
        sequence = SequenceReader(self.modification_registry).read(sequence_text)

        scan = row.parse(IC_SCAN, parse_int)
        charge = row.parse(IC_CHARGE, parse_int)
        score_column = IC_SCORE if IC_SCORE in row else IC_MATCHED_FRAGMENTS
        score = round(row.parse(score_column, float), SCORE_ROUNDING_DIGITS)
        q_value = float("nan")
        if self.has_q_values:
            q_value = round(row.parse(IC_QVALUE, float), QVALUE_ROUNDING_DIGITS)

        protein_names = row[IC_PROTEIN_NAME].split(";")
        descriptions = row[IC_PROTEIN_DESC].split(";")
        if len(descriptions) != len(protein_names):
            descriptions = [descriptions[0]] * len(protein_names)

        return [
            PrSm(
                scan=scan,
                charge=charge,
                sequence_text=sequence_text,
                sequence=sequence,
                protein_name=name,
                protein_desc=desc,
                score=score,
                use_golf_scoring=self.use_golf_scoring,
                q_value=q_value,
            )
            for name, desc in zip(protein_names, descriptions)
        ]
