"""Identification file ingestion for LC-MS/MS proteomics results."""

from lcmsspectator.modification import (
    Modification,
    ModificationRegistry,
    InvalidModificationNameError,
    default_registry,
)
from lcmsspectator.sequence import AminoAcid, Sequence, SequenceReader
from lcmsspectator.prsm import PrSm, sort_by_score, sort_by_scan
from lcmsspectator.feature import Feature, FeaturePoint, Isotope
from lcmsspectator.identification import IdentificationTree, Target

from lcmsspectator.readers import (
    create_reader,
    load_identifications,
    sniff_format,
    IdFileFormat,
    read_fasta,
    write_fasta,
    read_features,
    read_targets,
    write_identifications,
)
