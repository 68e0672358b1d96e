"""
Averagine isotopic envelope model.

Approximates the isotope distribution of a peptide or proteoform of a given
monoisotopic mass by scaling the averagine residue to that mass and convolving
the natural isotope abundances of each element.
"""
import logging

from functools import lru_cache
from typing import Dict, Tuple

import numpy as np

from pyteomics import mass as pyteomics_mass

from lcmsspectator.const import (
    AVERAGINE_COMPOSITION,
    AVERAGINE_MONOISOTOPIC_MASS,
    C13_MINUS_C12,
    PROTON,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


MIN_ISOTOPES = 50
ISOTOPES_PER_KILODALTON = 1.0
MIN_RELATIVE_INTENSITY = 1e-3


def _element_distribution(element: str) -> np.ndarray:
    isotopes = {
        number: abundance for number, (_mass, abundance) in pyteomics_mass.nist_mass[element].items()
        if number != 0 and abundance > 0
    }
    lightest = min(isotopes)
    dist = np.zeros(max(isotopes) - lightest + 1)
    for number, abundance in isotopes.items():
        dist[number - lightest] = abundance
    return dist


def isotope_count(monoisotopic_mass: float) -> int:
    """
    The number of isotope peaks computed for ``monoisotopic_mass``.

    Grows by one peak per kDa, ahead of the envelope apex, which moves out by
    about one peak per 1.8 kDa. Truncating a convolution to its first ``n``
    peaks leaves those peaks exact.
    """
    return MIN_ISOTOPES + int(max(monoisotopic_mass, 0) / 1000 * ISOTOPES_PER_KILODALTON)


def _convolve(a: np.ndarray, b: np.ndarray, size: int) -> np.ndarray:
    result = np.convolve(a, b)[:size]
    return result / result.max()


def _power(dist: np.ndarray, count: int, size: int) -> np.ndarray:
    result = np.array([1.0])
    base = dist
    while count > 0:
        if count & 1:
            result = _convolve(result, base, size)
        count >>= 1
        if count:
            base = _convolve(base, base, size)
    return result


def averagine_composition(monoisotopic_mass: float) -> Dict[str, int]:
    """Scale the averagine residue to ``monoisotopic_mass``, rounding each element count."""
    units = monoisotopic_mass / AVERAGINE_MONOISOTOPIC_MASS
    return {element: int(round(ratio * units)) for element, ratio in AVERAGINE_COMPOSITION.items()}


@lru_cache(maxsize=4096)
def _isotope_distribution(nominal_mass: int) -> Tuple[float, ...]:
    size = isotope_count(nominal_mass)
    dist = np.array([1.0])
    for element, count in averagine_composition(nominal_mass).items():
        if count > 0:
            dist = _convolve(dist, _power(_element_distribution(element), count, size), size)
    return tuple(dist.tolist())


def isotope_distribution(monoisotopic_mass: float) -> np.ndarray:
    """
    Compute the relative isotope abundances for ``monoisotopic_mass``.

    Parameters
    ----------
    monoisotopic_mass : float
        The neutral monoisotopic mass.

    Returns
    -------
    np.ndarray
        Abundances indexed by isotope offset from the monoisotopic peak,
        scaled so the most abundant isotope is 1.0 and truncated once they
        fall below :const:`MIN_RELATIVE_INTENSITY`.
    """
    if monoisotopic_mass <= 0:
        return np.array([1.0])
    dist = np.array(_isotope_distribution(int(round(monoisotopic_mass))))
    apex = int(np.argmax(dist))
    keep = len(dist)
    for i in range(apex, len(dist)):
        if dist[i] < MIN_RELATIVE_INTENSITY:
            keep = i
            break
    return dist[:keep]


def most_abundant_isotope_index(monoisotopic_mass: float) -> int:
    """The isotope offset of the tallest peak in the envelope of ``monoisotopic_mass``."""
    return int(np.argmax(isotope_distribution(monoisotopic_mass)))


def isotope_mz(monoisotopic_mass: float, charge: int, isotope_index: int) -> float:
    """The m/z of isotope ``isotope_index`` of ``monoisotopic_mass`` at ``charge``."""
    return (monoisotopic_mass + isotope_index * C13_MINUS_C12) / charge + PROTON


def most_abundant_isotope_mz(monoisotopic_mass: float, charge: int) -> float:
    """
    Compute the m/z of the most abundant isotope.

    Raises
    ------
    ValueError
        If ``charge`` is not positive.
    """
    if charge <= 0:
        raise ValueError(f"Charge must be positive, got {charge}")
    return isotope_mz(monoisotopic_mass, charge, most_abundant_isotope_index(monoisotopic_mass))
