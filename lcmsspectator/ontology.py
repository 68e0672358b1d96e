"""Tools for looking up modifications in the Unimod controlled vocabulary."""

import re
import logging
from typing import Callable, Dict, Optional

from psims.controlled_vocabulary import Entity, ControlledVocabulary
from psims.controlled_vocabulary.controlled_vocabulary import load_unimod

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


DELTA_MONO_MASS_PATTERN = re.compile(r"delta_mono_mass\s*\"?([-+]?\d+(?:\.\d+)?)")


def _delta_mass_from_xrefs(term: Entity) -> Optional[float]:
    xrefs = term.get("xref", [])
    if not isinstance(xrefs, (list, tuple)):
        xrefs = [xrefs]
    for xref in xrefs:
        match = DELTA_MONO_MASS_PATTERN.search(str(xref))
        if match:
            return float(match.group(1))
    return None


class UnimodResolver(object):
    """
    Resolve modification names to monoisotopic mass shifts using Unimod.

    The vocabulary is loaded on first use, which may query the internet or an
    on-disk cache, and is then kept in memory for the life of the resolver.

    Parameters
    ----------
    loader : Callable[[], ControlledVocabulary], optional
        The function used to load the vocabulary. Defaults to
        :func:`psims.controlled_vocabulary.controlled_vocabulary.load_unimod`.
    """

    loader: Callable[[], ControlledVocabulary]
    _vocabulary: Optional[ControlledVocabulary]
    _cache: Dict[str, Optional[float]]

    def __init__(self, loader=None):
        if loader is None:
            loader = load_unimod
        self.loader = loader
        self._vocabulary = None
        self._cache = {}

    @property
    def vocabulary(self) -> ControlledVocabulary:
        if self._vocabulary is None:
            logger.debug("Loading Unimod with %r", self.loader)
            self._vocabulary = self.loader()
        return self._vocabulary

    def find_term_by_name(self, name: str) -> Entity:
        """
        Find the Unimod term for ``name``.

        Raises
        ------
        KeyError
            If Unimod has no term by that name.
        """
        return self.vocabulary[name]

    def mass_of(self, name: str) -> Optional[float]:
        """
        Get the ``delta_mono_mass`` of the Unimod term named ``name``.

        Returns
        -------
        Optional[float]
            :const:`None` when the name is not in Unimod or the term carries no mass.
        """
        if name in self._cache:
            return self._cache[name]
        try:
            term = self.find_term_by_name(name)
        except KeyError:
            value = None
        else:
            value = _delta_mass_from_xrefs(term)
        self._cache[name] = value
        return value

    def __repr__(self):
        return f"{self.__class__.__name__}()"
