import os
import asyncio
import logging

from abc import ABCMeta, abstractmethod
from functools import partial
from typing import ClassVar, Dict, Iterable, List, Optional, Tuple, Type, Union

from lcmsspectator.modification import Modification, ModificationRegistry, default_registry
from lcmsspectator.prsm import PrSm
from lcmsspectator.readers.formats import IdFileFormat, sniff_format
from lcmsspectator.readers.utils import ProgressCallback

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class FormatInferenceFailure(ValueError):
    """Indicates that we failed to infer the format type for an identification file"""


class UnsupportedExtensionError(ValueError):
    """Raised when a reader is asked to read a file whose extension it does not handle."""

    extension: str

    def __init__(self, message: str, extension: str):
        super().__init__(message)
        self.extension = extension


class SubclassRegisteringMetaclass(ABCMeta):
    """Record each concrete reader class against the formats it declares."""

    def __new__(mcs, name, parents, attrs):
        new_type = ABCMeta.__new__(mcs, name, parents, attrs)
        if not hasattr(new_type, "_format_to_implementation"):
            new_type._format_to_implementation = dict()
        for file_format in attrs.get("formats", ()):
            new_type._format_to_implementation[file_format] = new_type
        return new_type

    def type_for_format(cls, file_format: IdFileFormat) -> Optional[Type['IdFileReaderBase']]:
        return cls._format_to_implementation.get(file_format)


class IdFileReaderBase(metaclass=SubclassRegisteringMetaclass):
    """
    A base class for identification file readers.

    Subclasses implement :meth:`_read_file` and declare the
    :class:`~lcmsspectator.readers.formats.IdFileFormat` values they serve in
    :attr:`formats`.

    Parameters
    ----------
    filename : str or os.PathLike
        The file to read.
    modification_registry : ModificationRegistry, optional
        Where modification names and masses are resolved and new modifications
        are registered. Defaults to the process-wide registry.

    Attributes
    ----------
    modifications : List[Modification]
        Modifications this reader registered because the registry did not know
        them yet.
    """

    format_name: ClassVar[str] = None
    formats: ClassVar[Tuple[IdFileFormat, ...]] = ()
    use_golf_scoring: ClassVar[bool] = False

    filename: str
    modification_registry: ModificationRegistry
    modifications: List[Modification]

    def __init__(self, filename: Union[str, os.PathLike], modification_registry: Optional[ModificationRegistry] = None):
        if modification_registry is None:
            modification_registry = default_registry()
        self.filename = os.fspath(filename)
        self.modification_registry = modification_registry
        self.modifications = []

    def read(self, mod_ignore_list: Optional[Iterable[str]] = None, progress: Optional[ProgressCallback] = None,
             scan_start: int = 0, scan_end: int = 0) -> List[PrSm]:
        """
        Read every identification in the file.

        Parameters
        ----------
        mod_ignore_list : Iterable[str], optional
            Modification names. Matches carrying any of them are skipped, using
            the format's own matching rule.
        progress : Callable[[float], None], optional
            Called with the percentage of the file processed so far.
        scan_start, scan_end : int
            When ``scan_start`` is positive, only matches with scans in
            ``[scan_start, scan_end]`` are returned. A ``scan_end`` below
            ``scan_start`` is raised to ``scan_start``.

        Returns
        -------
        List[PrSm]
        """
        mod_ignore_list = list(mod_ignore_list) if mod_ignore_list else []
        if scan_start > 0 and scan_end < scan_start:
            scan_end = scan_start
        logger.debug("Reading %s as %s", self.filename, self.format_name)
        prsms = self._read_file(mod_ignore_list, progress)
        if scan_start > 0:
            prsms = [prsm for prsm in prsms if scan_start <= prsm.scan <= scan_end]
        logger.info("Read %d identifications from %s", len(prsms), self.filename)
        return prsms

    async def read_async(self, mod_ignore_list: Optional[Iterable[str]] = None,
                         progress: Optional[ProgressCallback] = None,
                         scan_start: int = 0, scan_end: int = 0) -> List[PrSm]:
        """Run :meth:`read` in the event loop's default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, partial(self.read, mod_ignore_list, progress, scan_start, scan_end))

    @abstractmethod
    def _read_file(self, mod_ignore_list: List[str], progress: Optional[ProgressCallback]) -> List[PrSm]:
        raise NotImplementedError()

    def _note_new_modifications(self, modifications: Iterable[Modification]):
        for mod in modifications:
            if mod not in self.modifications:
                self.modifications.append(mod)

    def _register_modification(self, name: str, mass: Optional[float] = None,
                               formula: Optional[str] = None) -> Modification:
        known = name in self.modification_registry
        mod = self.modification_registry.register(name, mass=mass, formula=formula)
        if not known:
            self._note_new_modifications([mod])
        return mod

    def __repr__(self):
        return f"{self.__class__.__name__}({self.filename!r})"


def create_reader(path: Union[str, os.PathLike],
                  modification_registry: Optional[ModificationRegistry] = None) -> Optional[IdFileReaderBase]:
    """
    Build the reader for ``path``.

    Returns
    -------
    Optional[IdFileReaderBase]
        :const:`None` when the file is not a recognized identification format.
    """
    file_format = sniff_format(path)
    if file_format is None:
        return None
    reader_type = IdFileReaderBase.type_for_format(file_format)
    if reader_type is None:
        return None
    return reader_type(path, modification_registry=modification_registry)


def load_identifications(path: Union[str, os.PathLike], mod_ignore_list: Optional[Iterable[str]] = None,
                         progress: Optional[ProgressCallback] = None,
                         modification_registry: Optional[ModificationRegistry] = None,
                         scan_start: int = 0, scan_end: int = 0) -> List[PrSm]:
    """
    Read the identifications in ``path`` with whichever reader its format needs.

    Raises
    ------
    FormatInferenceFailure
        When the format cannot be determined.
    """
    reader = create_reader(path, modification_registry=modification_registry)
    if reader is None:
        raise FormatInferenceFailure(f"Could not infer identification file format for {path}")
    return reader.read(mod_ignore_list, progress, scan_start=scan_start, scan_end=scan_end)


def list_formats() -> Dict[IdFileFormat, Type[IdFileReaderBase]]:
    return dict(IdFileReaderBase._format_to_implementation)
