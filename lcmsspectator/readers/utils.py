"""Helper module for I/O operations"""

import os
import io
import gzip
import logging

from typing import Callable, Dict, Iterable, Iterator, Optional, Sequence, TypeVar, Union

DEFAULT_BUFFER_SIZE = int(2e6)
GZIP_MAGIC = b"\037\213"

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

T = TypeVar("T")

ProgressCallback = Callable[[float], None]
HeaderMap = Dict[str, int]


class MissingColumnError(KeyError):
    """Raised when a delimited file lacks a column its reader requires."""

    column: str
    filename: str

    def __init__(self, column: str, filename: str = ""):
        super().__init__(column)
        self.column = column
        self.filename = filename

    def __str__(self):
        return f"Missing expected column header \"{self.column}\" in {self.filename or 'file'}"


class FieldParseError(ValueError):
    """Raised when a field cannot be converted to the type its column requires."""

    filename: str
    line_number: int
    column: str
    value: str

    def __init__(self, filename: str, line_number: int, column: str, value: str, reason: str = ""):
        self.filename = filename
        self.line_number = line_number
        self.column = column
        self.value = value
        message = f"Cannot parse {value!r} in column \"{column}\" of {filename}, line {line_number}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


def test_gzipped(f) -> bool:
    """
    Checks the first two bytes of the
    passed file for gzip magic numbers

    Parameters
    ----------
    f : file-like or path-like
        The file to test

    Returns
    -------
    bool
    """
    if isinstance(f, (str, os.PathLike)):
        with io.open(f, "rb") as fh:
            return fh.read(2) == GZIP_MAGIC
    try:
        current = f.tell()
    except OSError:
        return False
    f.seek(0)
    magic = f.read(2)
    f.seek(current)
    return magic == GZIP_MAGIC


def open_stream(
    f: Union[io.IOBase, os.PathLike, str],
    mode="rt",
    buffer_size: Optional[int] = None,
    encoding: Optional[str] = "utf-8-sig",
    newline=None,
):
    """
    Select the file reading type for the given path or stream.

    Detects whether the file is gzip encoded, and wraps binary handles in a
    text decoder unless a binary ``mode`` is requested. The returned handle
    owns ``f`` and closes it when it is closed.
    """
    if "r" not in mode:
        raise NotImplementedError(
            "Haven't implemented automatic output stream determination"
        )
    if buffer_size is None:
        buffer_size = DEFAULT_BUFFER_SIZE
    if not hasattr(f, "read"):
        f = io.open(f, "rb", buffering=buffer_size)
    elif isinstance(f, io.TextIOBase):
        return f
    elif not isinstance(f, io.BufferedIOBase):
        f = io.BufferedReader(f, buffer_size)
    if test_gzipped(f):
        handle = gzip.GzipFile(fileobj=f, mode="rb")
    else:
        handle = f
    if "b" not in mode:
        handle = io.TextIOWrapper(handle, encoding=encoding, newline=newline)
    return handle


def file_size(path: Union[str, os.PathLike]) -> int:
    return os.stat(path).st_size


def read_header(line: str, delimiter: str = "\t", filename: str = "") -> HeaderMap:
    """
    Map each column name in a header line to its index.

    When a column name repeats, the first occurrence wins.
    """
    headers: HeaderMap = {}
    for i, name in enumerate(line.rstrip("\r\n").split(delimiter)):
        name = name.strip()
        if name in headers:
            logger.warning("Duplicate column %r in %s, keeping the first", name, filename or "header")
            continue
        headers[name] = i
    return headers


def require_columns(headers: HeaderMap, columns: Iterable[str], filename: str = ""):
    """
    Raises
    ------
    MissingColumnError
        For the first of ``columns`` not present in ``headers``.
    """
    for column in columns:
        if column not in headers:
            raise MissingColumnError(column, filename)


def require_any_column(headers: HeaderMap, columns: Sequence[str], filename: str = ""):
    """
    Raises
    ------
    MissingColumnError
        Naming the first of ``columns``, when none of them is in ``headers``.
    """
    if columns and not any(column in headers for column in columns):
        raise MissingColumnError(columns[0], filename)


def iter_table(
    stream: Iterable[str],
    total_size: int = 0,
    progress: Optional[ProgressCallback] = None,
    delimiter: str = "\t",
    filename: str = "",
    required_columns: Iterable[str] = (),
    alternative_columns: Sequence[str] = (),
) -> Iterator['Row']:
    """
    Iterate over the rows of a delimited text table.

    The first non-blank line is taken as the header and blank lines are
    skipped. Progress is reported after each data row has been consumed, as the
    percentage of ``total_size`` bytes read so far, counting two bytes of line
    terminator per line.

    Raises
    ------
    MissingColumnError
        As soon as the header is read, if it lacks any of ``required_columns``
        or all of ``alternative_columns``.

    Yields
    ------
    Row
    """
    headers = None
    bytes_read = 0
    for line_number, line in enumerate(stream, 1):
        line = line.rstrip("\r\n")
        bytes_read += len(line) + 2
        if not line.strip():
            continue
        if headers is None:
            headers = read_header(line, delimiter, filename)
            require_columns(headers, required_columns, filename)
            require_any_column(headers, alternative_columns, filename)
            continue
        yield Row(headers, line.split(delimiter), line_number, filename)
        if progress is not None and total_size > 0:
            progress(bytes_read / total_size * 100)


class Row(object):
    """
    Field access for one row of a delimited table, by column name, with
    errors that name the file, line and column.
    """

    __slots__ = ("headers", "fields", "line_number", "filename")

    def __init__(self, headers: HeaderMap, fields: Sequence[str], line_number: int = 0, filename: str = ""):
        self.headers = headers
        self.fields = fields
        self.line_number = line_number
        self.filename = filename

    def __contains__(self, column: str) -> bool:
        return column in self.headers

    def get(self, column: str, default: Optional[str] = None) -> Optional[str]:
        index = self.headers.get(column)
        if index is None or index >= len(self.fields):
            return default
        return self.fields[index]

    def __getitem__(self, column: str) -> str:
        index = self.headers.get(column)
        if index is None:
            raise MissingColumnError(column, self.filename)
        if index >= len(self.fields):
            raise FieldParseError(self.filename, self.line_number, column, "", "the row is too short")
        return self.fields[index]

    def parse(self, column: str, converter: Callable[[str], T]) -> T:
        """
        Convert the field in ``column`` with ``converter``.

        Raises
        ------
        FieldParseError
            When ``converter`` raises :class:`ValueError`.
        """
        value = self[column]
        try:
            return converter(value.strip())
        except ValueError as err:
            raise FieldParseError(self.filename, self.line_number, column, value, str(err)) from err

    def parse_first(self, columns: Sequence[str], converter: Callable[[str], T], default: T) -> T:
        """Convert the first of ``columns`` present in the header, or return ``default`` when none is."""
        for column in columns:
            if column in self.headers:
                return self.parse(column, converter)
        return default


def parse_int(value: str) -> int:
    """Parse an integer, accepting integral values written as decimals (``"3.0"``)."""
    try:
        return int(value)
    except ValueError:
        as_float = float(value)
        if not as_float.is_integer():
            raise
        return int(as_float)


def ignored_by_suffix_match(text: str, ignore_list: Optional[Iterable[str]]) -> bool:
    """Test whether any ``token`` in ``ignore_list`` occurs in ``text`` followed by a space."""
    if not ignore_list:
        return False
    return any(f"{token} " in text for token in ignore_list)


def ignored_by_substring(text: str, ignore_list: Optional[Iterable[str]]) -> bool:
    """Test whether any token in ``ignore_list`` occurs anywhere in ``text``."""
    if not ignore_list:
        return False
    return any(token in text for token in ignore_list)
