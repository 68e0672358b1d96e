"""Write identifications as MSPathFinder-style TSV tables."""

import os
import logging

from typing import Iterable, Union

from lcmsspectator.const import (
    IC_CHARGE,
    IC_MATCHED_FRAGMENTS,
    IC_MODIFICATIONS,
    IC_PROTEIN_DESC,
    IC_PROTEIN_NAME,
    IC_QVALUE,
    IC_SCAN,
    IC_SCORE,
    IC_SEQUENCE,
)
from lcmsspectator.prsm import PrSm, sort_by_score

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


COLUMNS = [
    IC_SCAN,
    IC_SEQUENCE,
    IC_MODIFICATIONS,
    IC_PROTEIN_NAME,
    IC_PROTEIN_DESC,
    IC_CHARGE,
    IC_SCORE,
    IC_MATCHED_FRAGMENTS,
    IC_QVALUE,
]


def format_modifications(prsm: PrSm) -> str:
    """Render modifications as ``"name position"`` pairs, with one-based positions, comma separated."""
    return ",".join(f"{mod.name} {index + 1}" for index, mod in prsm.sequence.modifications)


def _format_number(value: float) -> str:
    return repr(float(value))


def format_row(prsm: PrSm) -> str:
    fields = [
        str(prsm.scan),
        prsm.sequence.unmodified_text,
        format_modifications(prsm),
        prsm.protein_name,
        prsm.protein_desc,
        str(prsm.charge),
        _format_number(prsm.score),
        "0",
        _format_number(prsm.q_value),
    ]
    return "\t".join(fields)


def write_identifications(path: Union[str, os.PathLike], prsms: Iterable[PrSm]) -> int:
    """
    Write ``prsms`` best-first to ``path``.

    The result can be read again with
    :class:`~lcmsspectator.readers.mspathfinder.MSPathFinderReader`.

    Returns
    -------
    int
        The number of rows written.
    """
    ranked = sort_by_score(prsms)
    with open(path, "wt", encoding="utf8", newline="") as stream:
        stream.write("\t".join(COLUMNS))
        stream.write("\n")
        for prsm in ranked:
            stream.write(format_row(prsm))
            stream.write("\n")
    logger.debug("Wrote %d identifications to %s", len(ranked), path)
    return len(ranked)
