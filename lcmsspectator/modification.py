"""
Post-translational modifications and the registry that names them.

Readers resolve modification names and mass shifts through a
:class:`ModificationRegistry`. A process-wide instance is returned by
:func:`default_registry`, but every reader accepts its own registry so that
independent reads do not have to share state.
"""
import logging
import threading

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from pyteomics import mass as pyteomics_mass

from lcmsspectator.const import MASS_ROUNDING_DIGITS

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class InvalidModificationNameError(LookupError):
    """Raised when a modification name cannot be resolved to a known modification."""

    modification_name: str

    def __init__(self, message: str, modification_name: str):
        super().__init__(message)
        self.modification_name = modification_name

    def __str__(self):
        return self.args[0]


@dataclass(frozen=True)
class Modification:
    """
    A named mass shift applied to a residue.

    Attributes
    ----------
    name : str
        The name the modification is registered under, usually a Unimod
        PSI-MS name or a PHRP mass correction tag.
    mass : float
        The monoisotopic mass shift in Daltons.
    formula : str, optional
        The elemental composition change, in :mod:`pyteomics.mass` formula
        notation, when known.
    """

    name: str
    mass: float
    formula: Optional[str] = None

    def __str__(self):
        return self.name


def _mass_from_formula(formula: str) -> float:
    return pyteomics_mass.calculate_mass(formula=formula)


def _mass_key(value: float) -> float:
    return round(value, MASS_ROUNDING_DIGITS)


class ModificationRegistry:
    """
    A thread-safe collection of :class:`Modification` objects indexed by name
    and by rounded mass.

    Parameters
    ----------
    modifications : Iterable[Modification], optional
        Modifications to seed the registry with.
    resolver : :class:`~lcmsspectator.ontology.UnimodResolver`, optional
        A fallback used by :meth:`get` to look up names the registry does not
        know yet. Names it resolves are registered on first use.
    """

    _by_name: Dict[str, Modification]
    _lock: threading.RLock

    def __init__(self, modifications=None, resolver=None):
        self._by_name = {}
        self._lock = threading.RLock()
        self.resolver = resolver
        if modifications is not None:
            for mod in modifications:
                self._by_name[mod.name] = mod

    def get(self, name: str) -> Optional[Modification]:
        """
        Look up a modification by its exact name.

        The resolver, when one is attached, is consulted without holding the
        registry's lock, so a slow vocabulary load does not block other readers.

        Returns
        -------
        Optional[Modification]
        """
        with self._lock:
            mod = self._by_name.get(name)
        resolver = self.resolver
        if mod is not None or resolver is None:
            return mod
        delta = resolver.mass_of(name)
        if delta is None:
            return None
        logger.debug("Resolved modification %r to %f through %r", name, delta, resolver)
        return self.register(name, mass=delta)

    resolve_by_name = get

    def get_from_mass(self, mass: float) -> List[Modification]:
        """
        Find every registered modification whose mass matches ``mass`` to three
        decimal places.
        """
        key = _mass_key(mass)
        with self._lock:
            return [mod for mod in self._by_name.values() if _mass_key(mod.mass) == key]

    resolve_by_mass = get_from_mass

    def register(self, name: str, mass: Optional[float] = None, formula: Optional[str] = None) -> Modification:
        """
        Register a new modification, or return the existing one with the same name.

        Parameters
        ----------
        name : str
            The modification's name.
        mass : float, optional
            The mass shift. Computed from ``formula`` when not given.
        formula : str, optional
            The composition change.

        Returns
        -------
        Modification
        """
        with self._lock:
            existing = self._by_name.get(name)
            if existing is not None:
                return existing
            mod = self._build(name, mass, formula)
            self._by_name[name] = mod
            logger.debug("Registered modification %r (%f)", name, mod.mass)
            return mod

    def update(self, name: str, mass: Optional[float] = None, formula: Optional[str] = None) -> Modification:
        """Register ``name``, replacing any modification already registered under it."""
        with self._lock:
            mod = self._build(name, mass, formula)
            self._by_name[name] = mod
            return mod

    def unregister(self, modification) -> bool:
        """
        Remove a modification, given either the object or its name.

        Returns
        -------
        bool
            Whether anything was removed.
        """
        name = modification.name if isinstance(modification, Modification) else modification
        with self._lock:
            return self._by_name.pop(name, None) is not None

    def copy(self) -> 'ModificationRegistry':
        with self._lock:
            return self.__class__(self._by_name.values(), resolver=self.resolver)

    def _build(self, name: str, mass: Optional[float], formula: Optional[str]) -> Modification:
        if mass is None:
            if formula is None:
                raise ValueError(f"A mass or a formula is required to register {name!r}")
            mass = _mass_from_formula(formula)
        return Modification(name, float(mass), formula)

    def __contains__(self, name) -> bool:
        if isinstance(name, Modification):
            name = name.name
        with self._lock:
            return name in self._by_name

    def __iter__(self) -> Iterator[Modification]:
        with self._lock:
            return iter(list(self._by_name.values()))

    def __len__(self):
        with self._lock:
            return len(self._by_name)

    def __repr__(self):
        return f"{self.__class__.__name__}({len(self)} modifications)"


COMMON_MODIFICATIONS = [
    Modification("Carbamidomethyl", 57.021464, "H3C2NO"),
    Modification("Oxidation", 15.994915, "O"),
    Modification("Phospho", 79.966331, "HPO3"),
    Modification("Acetyl", 42.010565, "H2C2O"),
    Modification("Methyl", 14.01565, "H2C"),
    Modification("Dimethyl", 28.0313, "H4C2"),
    Modification("Trimethyl", 42.04695, "H6C3"),
    Modification("Deamidated", 0.984016, "H-1N-1O"),
    Modification("Gln->pyro-Glu", -17.026549, "H-3N-1"),
    Modification("Glu->pyro-Glu", -18.010565, "H-2O-1"),
    Modification("Amidated", -0.984016, "HNO-1"),
    Modification("Dehydro", -1.007825, "H-1"),
    Modification("Nitrosyl", 28.990164, "H-1NO"),
    Modification("Cysteinyl", 119.004099, "H5C3NO2S"),
    Modification("Glutathione", 305.068156, "H15C10N3O6S"),
    Modification("GlyGly", 114.042927, "H6C4N2O2"),
    Modification("Formyl", 27.994915, "CO"),
    Modification("Sulfo", 79.956815, "O3S"),
    Modification("iTRAQ4plex", 144.102063),
    Modification("TMT6plex", 229.162932),
    Modification("Label:13C(6)15N(2)", 8.014199),
    Modification("Label:13C(6)15N(4)", 10.008269),
]


_default_registry: Optional[ModificationRegistry] = None
_default_registry_lock = threading.Lock()


def default_registry() -> ModificationRegistry:
    """Get the process-wide :class:`ModificationRegistry`, creating it on first use."""
    global _default_registry
    with _default_registry_lock:
        if _default_registry is None:
            _default_registry = ModificationRegistry(COMMON_MODIFICATIONS)
        return _default_registry
