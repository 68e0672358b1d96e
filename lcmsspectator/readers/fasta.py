"""Read and write FASTA protein databases."""

import os
import logging

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from lcmsspectator.readers.utils import open_stream

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class FastaFormatError(ValueError):
    """Raised when a FASTA file is malformed."""

    line_number: int

    def __init__(self, message: str, line_number: int = 0):
        super().__init__(message)
        self.line_number = line_number


@dataclass
class FastaEntry:
    protein_name: str
    protein_description: str = ""
    protein_sequence_text: str = ""

    @property
    def formatted_entry(self) -> str:
        return f">{self.protein_name} {self.protein_description}\n{self.protein_sequence_text}"


def read_fasta(path: Union[str, os.PathLike]) -> List[FastaEntry]:
    """
    Read every entry in a FASTA file.

    The header is split on single spaces: the first token, without ``>``, is
    the protein name and the second, if any, the description. Sequence lines
    are concatenated and blank lines are ignored.

    Raises
    ------
    FastaFormatError
        If a header has no name, or sequence lines precede the first header.
    """
    entries: List[FastaEntry] = []
    current: Optional[FastaEntry] = None
    sequence_parts: List[str] = []
    with open_stream(path, "rt") as stream:
        for line_number, line in enumerate(stream, 1):
            line = line.strip()
            if not line:
                continue
            if line.startswith(">"):
                if current is not None:
                    current.protein_sequence_text = "".join(sequence_parts)
                    entries.append(current)
                parts = line.split(" ")
                if len(parts[0]) == 1:
                    raise FastaFormatError(f"Invalid FASTA header at line {line_number} of {path}", line_number)
                description = parts[1] if len(parts) > 1 else ""
                current = FastaEntry(parts[0][1:], description)
                sequence_parts = []
            elif current is None:
                raise FastaFormatError(
                    f"Sequence data before the first header at line {line_number} of {path}", line_number)
            else:
                sequence_parts.append(line)
    if current is not None:
        current.protein_sequence_text = "".join(sequence_parts)
        entries.append(current)
    logger.debug("Read %d FASTA entries from %s", len(entries), path)
    return entries


def write_fasta(entries: Iterable[Optional[FastaEntry]], path: Union[str, os.PathLike]):
    """Write ``entries`` to ``path``, creating its directory if needed. ``None`` entries are skipped."""
    directory = os.path.dirname(os.fspath(path))
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "wt", encoding="utf8") as stream:
        for entry in entries:
            if entry is None:
                continue
            stream.write(entry.formatted_entry)
            stream.write("\n")
