"""Read target lists: one sequence per line, optionally followed by a tab and a charge."""

import io
import os
import logging

from typing import List, Union

from lcmsspectator.identification import Target
from lcmsspectator.readers.utils import open_stream, parse_int

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def read_targets(source: Union[str, os.PathLike, io.IOBase]) -> List[Target]:
    """
    Read every target in ``source``.

    A header row whose first field is ``Sequence`` is skipped, and a missing
    charge is read as 0.
    """
    if isinstance(source, io.TextIOBase):
        return _parse_targets(source)
    with open_stream(source, "rt") as stream:
        return _parse_targets(stream)


def _parse_targets(stream) -> List[Target]:
    targets = []
    for line in stream:
        parts = line.rstrip("\r\n").split("\t")
        sequence = parts[0].strip()
        if not sequence or sequence == "Sequence":
            continue
        charge = 0
        if len(parts) > 1 and parts[1].strip():
            charge = parse_int(parts[1].strip())
        targets.append(Target(sequence, charge))
    logger.debug("Read %d targets", len(targets))
    return targets
