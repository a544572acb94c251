"""Save decoding on top of d2lib.

d2lib reads from a path, so byte payloads are staged in a private temporary
directory for the duration of one decode.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Final, Mapping

from construct import Const, ConstructError, Int32ul, Struct
from d2lib.errors import D2SFileParseError, ItemParseError, StashFileParseError
from d2lib.files import D2SFile, D2XFile, SSSFile

from .tables import ConstantDataError, get_constant_data

D2S_MAGIC: Final[bytes] = b"\x55\xaa\x55\xaa"

D2S_PREAMBLE = Struct(
    Const(D2S_MAGIC),
    "version" / Int32ul,
    "file_size" / Int32ul,
)

# PlugY stash pages carry no schema version; they are read with the 1.10 tables.
STASH_SCHEMA_VERSION: Final[int] = 96

STASH_DECODERS: Final[Mapping[str, Callable[[str], object]]] = MappingProxyType(
    {
        "sss": SSSFile,
        "d2x": D2XFile,
    }
)

# d2lib does not guard every read: short or garbled data also surfaces as
# builtin errors.
_MALFORMED: Final[tuple[type[Exception], ...]] = (
    D2SFileParseError,
    StashFileParseError,
    ItemParseError,
    ArithmeticError,
    AttributeError,
    LookupError,
    TypeError,
    ValueError,
)


class DecodeError(ValueError):
    pass


def _decode_with(factory: Callable[[str], object], data: bytes, suffix: str):
    try:
        with tempfile.TemporaryDirectory(prefix="runetally-", ignore_cleanup_errors=True) as tmp:
            path = Path(tmp) / f"save.{suffix}"
            path.write_bytes(data)
            return factory(str(path))
    except _MALFORMED as exc:
        raise DecodeError(str(exc) or type(exc).__name__) from exc
    except OSError as exc:
        raise DecodeError(f"could not stage save for decoding: {exc}") from exc


def require_constant_data(version: int) -> None:
    try:
        get_constant_data(version)
    except ConstantDataError as exc:
        raise DecodeError(f"unsupported save version {int(version)}: no constant data") from exc


def read_preamble(data: bytes):
    """Parse and check the fixed `.d2s` header fields d2lib does not verify."""

    try:
        header = D2S_PREAMBLE.parse(data)
    except ConstructError as exc:
        raise DecodeError(f"not a character save: {exc}") from exc
    # d2lib keeps reading zeros past the end of a short file.
    if int(header.file_size) != len(data):
        raise DecodeError(f"character save is {len(data)} bytes, header says {int(header.file_size)}")
    return header


def decode_character(data: bytes) -> D2SFile:
    header = read_preamble(data)
    require_constant_data(int(header.version))
    return _decode_with(D2SFile, data, "d2s")


def decode_stash(data: bytes, suffix: str):
    factory = STASH_DECODERS.get(suffix)
    if factory is None:
        raise DecodeError(f"no decoder for .{suffix} stashes")
    require_constant_data(STASH_SCHEMA_VERSION)
    return _decode_with(factory, data, suffix)
