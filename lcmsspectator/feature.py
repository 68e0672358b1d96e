"""LC-MS features: isotope envelopes traced across a scan range."""

from dataclasses import dataclass, field
from typing import Any, List, NamedTuple, Optional


class Isotope(NamedTuple):
    """An observed isotope peak, by offset from the monoisotopic peak and relative intensity."""

    index: int
    ratio: float


@dataclass
class FeaturePoint:
    """One end of a :class:`Feature`, at a particular scan and charge."""

    id: int = -1
    scan: int = 0
    mass: float = 0.0
    charge: int = 0
    mz: float = 0.0
    abundance: float = 0.0
    score: float = 0.0
    isotopes: List[Optional[Isotope]] = field(default_factory=list)
    correlation: float = 0.0
    retention_time: float = 0.0
    feature: Optional['Feature'] = field(default=None, repr=False, compare=False)


@dataclass
class Feature:
    """
    A feature spanning from :attr:`min_point` to :attr:`max_point`.

    Both points refer back to the feature once it is constructed.
    """

    min_point: FeaturePoint
    max_point: FeaturePoint
    id: int = -1
    associated_prsms: List[Any] = field(default_factory=list, repr=False)
    associated_ms2: List[int] = field(default_factory=list, repr=False)

    def __post_init__(self):
        self.min_point.feature = self
        self.max_point.feature = self

    @property
    def mass(self) -> float:
        return self.min_point.mass

    @property
    def abundance(self) -> float:
        return self.min_point.abundance

    @property
    def score(self) -> float:
        return self.min_point.score
