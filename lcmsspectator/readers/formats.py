"""
Identification file format detection.

:func:`sniff_format` decides which reader a file needs from its name and, for
delimited text, its first line.
"""
import os
import logging

from enum import Enum
from typing import Optional, Union

from lcmsspectator.const import MSGF_SCORE, IC_MATCHED_FRAGMENTS, BRUTE_SCORE, SYNOPSIS_SUFFIX
from lcmsspectator.readers.utils import open_stream

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class IdFileFormat(Enum):
    MSPATHFINDER_TSV = "mspathfinder.tsv"
    MSPATHFINDER_ZIP = "mspathfinder.zip"
    MSGF_PLUS_TSV = "msgf+.tsv"
    PHRP_SYNOPSIS = "phrp.syn.txt"
    BRUTE_FORCE_TSV = "brute-force.tsv"
    MZIDENTML = "mzidentml"
    MTDB = "mtdb"


TABULAR_EXTENSIONS = (".tsv", ".txt")
MZIDENTML_EXTENSIONS = (".mzid", ".mzid.gz")


def compound_extension(path: Union[str, os.PathLike]) -> str:
    """
    Get the lower-cased extension of ``path``, including the inner extension of
    gzip-compressed files (``"Results.mzid.gz"`` gives ``".mzid.gz"``).
    """
    stem, ext = os.path.splitext(os.fspath(path))
    ext = ext.lower()
    if ext == ".gz":
        inner = os.path.splitext(stem)[1].lower()
        ext = inner + ext
    return ext


def sniff_tabular_header(path: Union[str, os.PathLike]) -> Optional[IdFileFormat]:
    """Choose a delimited-text format from the first line of ``path``."""
    with open_stream(path, "rt") as stream:
        line = stream.readline()
    if MSGF_SCORE in line:
        return IdFileFormat.MSGF_PLUS_TSV
    elif IC_MATCHED_FRAGMENTS in line:
        return IdFileFormat.MSPATHFINDER_TSV
    elif BRUTE_SCORE in line:
        return IdFileFormat.BRUTE_FORCE_TSV
    return None


def sniff_format(path: Union[str, os.PathLike]) -> Optional[IdFileFormat]:
    """
    Determine the identification format of ``path``.

    Parameters
    ----------
    path : str or os.PathLike
        The file to inspect.

    Returns
    -------
    Optional[IdFileFormat]
        :const:`None` when the name or header matches no supported format.

    Raises
    ------
    OSError
        When a delimited text file cannot be opened to read its header.
    """
    if path is None:
        return None
    path = os.fspath(path)
    if not path.strip():
        return None
    ext = compound_extension(path)
    if ext == ".zip":
        result = IdFileFormat.MSPATHFINDER_ZIP
    elif ext in TABULAR_EXTENSIONS:
        if path.lower().endswith(SYNOPSIS_SUFFIX.lower()):
            result = IdFileFormat.PHRP_SYNOPSIS
        else:
            result = sniff_tabular_header(path)
    elif ext in MZIDENTML_EXTENSIONS:
        result = IdFileFormat.MZIDENTML
    elif ext == ".mtdb":
        result = IdFileFormat.MTDB
    else:
        result = None
    logger.debug("Detected %s for %s", result, path)
    return result
