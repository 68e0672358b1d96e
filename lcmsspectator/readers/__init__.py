"""
Identification File Readers
---------------------------

"""

from .base import (
    create_reader,
    load_identifications,
    list_formats,
    IdFileReaderBase,
    FormatInferenceFailure,
    UnsupportedExtensionError,
)
from .formats import IdFileFormat, sniff_format, compound_extension
from .utils import MissingColumnError, FieldParseError, open_stream
from .mspathfinder import MSPathFinderReader
from .msgf import MSGFPlusReader
from .synopsis import MSGFSynopsisReader
from .bruteforce import BruteForceSearchReader
from .mzidentml import MzIdentMlReader, MzIdentMlOptions
from .mtdb import MtdbReader
from .fasta import FastaEntry, FastaFormatError, read_fasta, write_fasta
from .features import read_features, parse_envelope
from .targets import read_targets
from .writer import write_identifications
