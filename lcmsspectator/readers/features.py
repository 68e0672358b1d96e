"""Read MS1 feature tables (ProMex ``.ms1ft`` and similar)."""

import os
import logging

from typing import List, Optional, Union

from lcmsspectator.averagine import most_abundant_isotope_mz
from lcmsspectator.const import (
    FEATURE_ABUNDANCE,
    FEATURE_ENVELOPE,
    FEATURE_ID,
    FEATURE_LIKELIHOOD_RATIO,
    FEATURE_MAX_CHARGE,
    FEATURE_MAX_SCAN,
    FEATURE_MIN_CHARGE,
    FEATURE_MIN_SCAN,
    FEATURE_MONO_MASS,
    FEATURE_PROBABILITY,
    FEATURE_SUMMED_CORR,
)
from lcmsspectator.feature import Feature, FeaturePoint, Isotope
from lcmsspectator.readers.utils import Row, iter_table, open_stream, parse_int

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


REQUIRED_COLUMNS = [
    FEATURE_MONO_MASS,
    FEATURE_ABUNDANCE,
    FEATURE_ENVELOPE,
    FEATURE_MIN_CHARGE,
    FEATURE_MAX_CHARGE,
    FEATURE_MIN_SCAN,
    FEATURE_MAX_SCAN,
]
SCORE_COLUMNS = [FEATURE_LIKELIHOOD_RATIO, FEATURE_PROBABILITY]


def parse_envelope(text: str) -> List[Optional[Isotope]]:
    """
    Parse an isotope envelope written as ``"index,ratio;index,ratio"``.

    Malformed entries are kept as :const:`None` so that positions are preserved.
    """
    isotopes: List[Optional[Isotope]] = []
    for token in text.split(";"):
        parts = token.split(",")
        if len(parts) < 2:
            isotopes.append(None)
            continue
        try:
            isotopes.append(Isotope(int(parts[0]), float(parts[1])))
        except ValueError:
            isotopes.append(None)
    return isotopes


def _make_point(row: Row, scan_column: str, charge_column: str, envelope: List[Optional[Isotope]]) -> FeaturePoint:
    mass = row.parse(FEATURE_MONO_MASS, float)
    charge = row.parse(charge_column, parse_int)
    return FeaturePoint(
        id=row.parse_first([FEATURE_ID], parse_int, -1),
        scan=row.parse(scan_column, parse_int),
        mass=mass,
        charge=charge,
        mz=most_abundant_isotope_mz(mass, charge) if charge > 0 else float("nan"),
        abundance=row.parse(FEATURE_ABUNDANCE, float),
        score=row.parse_first(SCORE_COLUMNS, float, float("nan")),
        isotopes=envelope,
        correlation=row.parse_first([FEATURE_SUMMED_CORR], float, 0.0),
    )


def read_features(path: Union[str, os.PathLike], delimiter: str = "\t") -> List[Feature]:
    """
    Read every feature in a delimited feature table.

    Raises
    ------
    MissingColumnError
        If a required column is absent, or neither ``LikelihoodRatio`` nor
        ``Probability`` is present.
    """
    features = []
    with open_stream(path, "rt") as stream:
        for row in iter_table(stream, delimiter=delimiter, filename=os.fspath(path),
                              required_columns=REQUIRED_COLUMNS, alternative_columns=SCORE_COLUMNS):
            envelope = parse_envelope(row[FEATURE_ENVELOPE])
            min_point = _make_point(row, FEATURE_MIN_SCAN, FEATURE_MIN_CHARGE, envelope)
            max_point = _make_point(row, FEATURE_MAX_SCAN, FEATURE_MAX_CHARGE, envelope)
            features.append(Feature(min_point, max_point, id=min_point.id))
    logger.debug("Read %d features from %s", len(features), path)
    return features
