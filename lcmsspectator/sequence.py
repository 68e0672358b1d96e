"""
Modified peptide and proteoform sequences.

Two textual notations are understood by :class:`SequenceReader`:

- Named modifications in square brackets following their residue,
  ``PEPM[Oxidation]TIDE``, as written by LcMsSpectator and MSPathFinder.
- Signed mass shifts following their residue, ``PEPM+15.995TIDE``, as written
  by MS-GF+.

In both, a modification written before the first residue is attached to the
first residue.
"""
import re
import logging

from collections.abc import Sequence as _SequenceABC
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from pyteomics import mass as pyteomics_mass
from pyteomics import proforma

from lcmsspectator.const import MASS_ROUNDING_DIGITS
from lcmsspectator.modification import (
    InvalidModificationNameError,
    Modification,
    ModificationRegistry,
    default_registry,
)

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


RESIDUE_CHARACTERS = "".join(sorted(k for k in pyteomics_mass.std_aa_mass if len(k) == 1 and k.isupper()))

NAMED_TOKEN_PATTERN = re.compile(r"([%s])|\[([^\]]+)\]" % RESIDUE_CHARACTERS)
MASS_SHIFT_TOKEN_PATTERN = re.compile(r"([%s])|([+-]?\d+\.\d+)" % RESIDUE_CHARACTERS)
FLANKED_SEQUENCE_PATTERN = re.compile(r"^[A-Za-z\-_*]?\.(.+)\.[A-Za-z\-_*]?$")


@dataclass(frozen=True)
class AminoAcid:
    """A residue and the modifications applied to it."""

    residue: str
    modifications: Tuple[Modification, ...] = ()

    @property
    def mass(self) -> float:
        return pyteomics_mass.std_aa_mass[self.residue] + sum(mod.mass for mod in self.modifications)

    def modify(self, modification: Modification) -> 'AminoAcid':
        return self.__class__(self.residue, self.modifications + (modification, ))

    def __str__(self):
        return self.residue + "".join(f"[{mod.name}]" for mod in self.modifications)


class Sequence(_SequenceABC):
    """
    An immutable list of :class:`AminoAcid` residues.

    The textual form, :meth:`__str__`, uses the named-modification notation.
    """

    residues: Tuple[AminoAcid, ...]

    def __init__(self, residues: Iterable[AminoAcid] = ()):
        self.residues = tuple(residues)

    @classmethod
    def from_text(cls, text: str) -> 'Sequence':
        """Build an unmodified sequence from a plain residue string."""
        return cls(AminoAcid(c) for c in text)

    def __getitem__(self, i):
        if isinstance(i, slice):
            return self.__class__(self.residues[i])
        return self.residues[i]

    def __len__(self):
        return len(self.residues)

    def __iter__(self) -> Iterator[AminoAcid]:
        return iter(self.residues)

    def __eq__(self, other):
        if isinstance(other, Sequence):
            return self.residues == other.residues
        if isinstance(other, str):
            return str(self) == other
        return NotImplemented

    def __hash__(self):
        return hash(self.residues)

    def __str__(self):
        return "".join(map(str, self.residues))

    def __repr__(self):
        return f"{self.__class__.__name__}({str(self)!r})"

    @property
    def mass(self) -> float:
        """The summed residue mass, without terminal water."""
        return sum(aa.mass for aa in self.residues)

    @property
    def unmodified_text(self) -> str:
        return "".join(aa.residue for aa in self.residues)

    @property
    def modifications(self) -> List[Tuple[int, Modification]]:
        """Each modification paired with the zero-based index of its residue."""
        return [(i, mod) for i, aa in enumerate(self.residues) for mod in aa.modifications]

    def with_modification(self, index: int, modification: Modification) -> 'Sequence':
        """Return a copy of this sequence with ``modification`` added at ``index``."""
        residues = list(self.residues)
        residues[index] = residues[index].modify(modification)
        return self.__class__(residues)

    def modification_locations(self) -> str:
        """Render each modification as ``{residue}{position}[{name}]``, one-based, space separated."""
        return "".join(
            f"{aa.residue}{i + 1}[{mod.name}] "
            for i, aa in enumerate(self.residues)
            for mod in aa.modifications)

    def proforma_string(self) -> str:
        parts = []
        for aa in self.residues:
            parts.append(aa.residue)
            for mod in aa.modifications:
                parts.append(f"[{mod.mass:+.4f}]")
        return "".join(parts)

    def to_proforma(self) -> proforma.ProForma:
        """Convert this sequence into a :class:`pyteomics.proforma.ProForma` with mass-shift modifications."""
        return proforma.ProForma.parse(self.proforma_string())


def trim_flanking(text: str) -> str:
    """
    Remove the flanking residues from a ``K.PEPTIDE.R`` style sequence.

    Text without flanking residues is returned unchanged.
    """
    match = FLANKED_SEQUENCE_PATTERN.match(text)
    if match is None:
        return text
    return match.group(1)


class SequenceReader(object):
    """
    Parse sequence text into a :class:`Sequence`, dispatching on notation.

    Parameters
    ----------
    modification_registry : ModificationRegistry, optional
        Where modification names and mass shifts are resolved. Defaults to
        :func:`~lcmsspectator.modification.default_registry`.
    trim_annotations : bool
        Whether to strip flanking residues (``K.PEPTIDE.R``) before parsing.

    Attributes
    ----------
    new_modifications : List[Modification]
        Modifications the registry did not know before parsing, either
        registered for unmatched mass shifts or resolved by name through the
        registry's vocabulary.
    """

    modification_registry: ModificationRegistry
    trim_annotations: bool
    new_modifications: List[Modification]

    def __init__(self, modification_registry: Optional[ModificationRegistry] = None, trim_annotations: bool = False):
        if modification_registry is None:
            modification_registry = default_registry()
        self.modification_registry = modification_registry
        self.trim_annotations = trim_annotations
        self.new_modifications = []

    def read(self, text: str) -> Sequence:
        """
        Parse ``text``.

        Raises
        ------
        InvalidModificationNameError
            When a bracketed modification name is not registered, or a mass
            shift cannot be read.
        """
        if not text:
            return Sequence()
        if self.trim_annotations:
            text = trim_flanking(text)
        if "[" in text:
            return self._assemble(self._named_tokens(text))
        return self._assemble(self._mass_shift_tokens(text))

    __call__ = read

    def _named_tokens(self, text: str) -> Iterator[Union[str, Modification]]:
        for match in NAMED_TOKEN_PATTERN.finditer(text):
            residue, name = match.groups()
            if residue is not None:
                yield residue
                continue
            known = name in self.modification_registry
            mod = self.modification_registry.get(name)
            if mod is None:
                raise InvalidModificationNameError(
                    f"Found an unrecognized modification: {name}", name)
            if not known:
                self._note_new(mod)
            yield mod

    def _mass_shift_tokens(self, text: str) -> Iterator[Union[str, Modification]]:
        for match in MASS_SHIFT_TOKEN_PATTERN.finditer(text):
            residue, shift = match.groups()
            if residue is not None:
                yield residue
                continue
            yield self._resolve_mass_shift(shift)

    def _resolve_mass_shift(self, token: str) -> Modification:
        try:
            delta = round(float(token), MASS_ROUNDING_DIGITS)
        except ValueError:
            raise InvalidModificationNameError(
                f"Cannot parse the mass shift {token}", token) from None
        candidates = self.modification_registry.get_from_mass(delta)
        if candidates:
            return candidates[0]
        known = token in self.modification_registry
        mod = self.modification_registry.register(token, mass=delta)
        if not known:
            self._note_new(mod)
        return mod

    def _note_new(self, mod: Modification):
        if mod not in self.new_modifications:
            self.new_modifications.append(mod)

    def _assemble(self, tokens: Iterable[Union[str, Modification]]) -> Sequence:
        residues: List[AminoAcid] = []
        leading: List[Modification] = []
        for token in tokens:
            if isinstance(token, Modification):
                if residues:
                    residues[-1] = residues[-1].modify(token)
                else:
                    leading.append(token)
            else:
                if not residues and leading:
                    residues.append(AminoAcid(token, tuple(leading)))
                    leading = []
                else:
                    residues.append(AminoAcid(token))
        return Sequence(residues)
