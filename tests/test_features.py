"""Tests for lcmsspectator.readers.features."""
import math

import pytest

from lcmsspectator.averagine import most_abundant_isotope_mz
from lcmsspectator.feature import Isotope
from lcmsspectator.readers import MissingColumnError, parse_envelope, read_features
from lcmsspectator.readers.features import REQUIRED_COLUMNS

HEADER = ["FeatureID", "MinScan", "MaxScan", "MinCharge", "MaxCharge", "MonoMass", "Abundance",
          "Envelope", "LikelihoodRatio", "SummedCorr"]


class TestParseEnvelope:
    def test_parse(self):
        assert parse_envelope("0,1;1,0.55;bad;3,x") == [Isotope(0, 1.0), Isotope(1, 0.55), None, None]


class TestReadFeatures:
    def test_read(self, write_table):
        path = write_table("Dataset.ms1ft", [
            HEADER,
            [7, 100, 150, 2, 5, 9999.5, 1.5e6, "0,0.6;1,1;2,0.8", 120.5, 0.95],
        ])
        feature, = read_features(path)
        assert feature.id == 7
        assert feature.min_point.scan == 100
        assert feature.max_point.scan == 150
        assert feature.min_point.charge == 2
        assert feature.max_point.charge == 5
        assert feature.min_point.mz == pytest.approx(most_abundant_isotope_mz(9999.5, 2))
        assert feature.max_point.mz == pytest.approx(most_abundant_isotope_mz(9999.5, 5))
        assert feature.min_point.isotopes[1] == Isotope(1, 1.0)
        assert feature.score == 120.5
        assert feature.min_point.correlation == 0.95
        assert feature.min_point.feature is feature
        assert feature.max_point.feature is feature

    def test_optional_columns(self, write_table):
        header = [c for c in HEADER if c not in ("FeatureID", "SummedCorr", "LikelihoodRatio")] + ["Probability"]
        path = write_table("Dataset.tsv", [header, [100, 150, 0, 3, 5000.0, 10.0, "0,1", 0.9]])
        feature, = read_features(path)
        assert feature.id == -1
        assert feature.min_point.correlation == 0.0
        assert feature.score == 0.9
        assert math.isnan(feature.min_point.mz)

    def test_comma_delimited(self, write_table):
        path = write_table("Dataset.csv", [
            [c for c in HEADER if c != "Envelope"] + ["Envelope"],
            [1, 10, 20, 1, 2, 1000.0, 5.0, 3.0, 0.5, "0"],
        ], delimiter=",")
        feature, = read_features(path, delimiter=",")
        assert feature.min_point.isotopes == [None]

    def test_missing_score_column(self, write_table):
        header = [c for c in HEADER if c != "LikelihoodRatio"]
        path = write_table("Dataset.tsv", [header, [7, 100, 150, 2, 5, 9999.5, 1.5e6, "0,1", 0.95]])
        with pytest.raises(MissingColumnError) as err:
            read_features(path)
        assert err.value.column == "LikelihoodRatio"

    def test_missing_score_column_without_rows(self, write_table):
        path = write_table("Empty.tsv", [[c for c in HEADER if c != "LikelihoodRatio"]])
        with pytest.raises(MissingColumnError) as err:
            read_features(path)
        assert err.value.column == "LikelihoodRatio"

    @pytest.mark.parametrize("column", REQUIRED_COLUMNS)
    def test_missing_column(self, write_table, column):
        path = write_table("Broken.tsv", [[c for c in HEADER if c != column]])
        with pytest.raises(MissingColumnError) as err:
            read_features(path)
        assert err.value.column == column
