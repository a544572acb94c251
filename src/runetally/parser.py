from __future__ import annotations

import asyncio
import logging
from enum import Enum
from types import MappingProxyType
from typing import Callable, Final, Iterable, Mapping

from .decoder import DecodeError, decode_character, decode_stash
from .runes import classify
from .sources import SaveSource
from .summary import FileOutcome, RuneTally

logger = logging.getLogger(__name__)


class SaveFormat(Enum):
    CHARACTER = "character"
    STASH = "stash"


SUFFIX_FORMATS: Final[Mapping[str, SaveFormat]] = MappingProxyType(
    {
        "d2s": SaveFormat.CHARACTER,
        "sss": SaveFormat.STASH,
        "d2x": SaveFormat.STASH,
        "d2i": SaveFormat.STASH,
    }
)


class UnrecognizedFormat(ValueError):
    pass


def file_suffix(name: str) -> str:
    return str(name).lower().rsplit(".", 1)[-1]


def save_format(name: str) -> SaveFormat | None:
    return SUFFIX_FORMATS.get(file_suffix(name))


def count_runes(items: Iterable[object]) -> RuneTally:
    runes: RuneTally = {}
    for item in items:
        name = classify(item)
        if name is None:
            continue
        runes[name] = runes.get(name, 0) + 1
    return runes


def _character_items(data: bytes, suffix: str) -> list:
    save = decode_character(data)
    # merc_items is None for classic characters.
    return [*save.items, *(save.merc_items or ()), *save.corpse_items]


def _stash_items(data: bytes, suffix: str) -> list:
    stash = decode_stash(data, suffix)
    return [item for page in stash.stash for item in page["items"]]


_ITEM_READERS: Final[Mapping[SaveFormat, Callable[[bytes, str], list]]] = MappingProxyType(
    {
        SaveFormat.CHARACTER: _character_items,
        SaveFormat.STASH: _stash_items,
    }
)


def runes_from_save(name: str, data: bytes) -> RuneTally:
    suffix = file_suffix(name)
    fmt = SUFFIX_FORMATS.get(suffix)
    if fmt is None:
        raise UnrecognizedFormat(f"not a save file: {name!r}")
    return count_runes(_ITEM_READERS[fmt](bytes(data), suffix))


def parse_file(name: str, data: bytes) -> FileOutcome:
    """Count the runes in one file's bytes. Never raises for bad input."""

    try:
        runes = runes_from_save(name, data)
    except UnrecognizedFormat:
        logger.debug("skipping %s: unrecognized file type", name)
        return FileOutcome.skipped()
    except DecodeError as exc:
        logger.warning("could not decode %s: %s", name, exc)
        return FileOutcome.error(name)
    return FileOutcome.read(name, runes)


async def _read_and_parse(source: SaveSource, name: str) -> FileOutcome:
    try:
        data = await source.read_bytes()
    except Exception as exc:
        # A source that cannot produce bytes is a read error for that file only.
        logger.warning("could not read %s: %s", name, exc)
        return FileOutcome.error(name)
    return await asyncio.to_thread(parse_file, name, data)


async def parse_source(source: SaveSource, *, timeout: float | None = None) -> FileOutcome:
    name = source.name
    # Non-save files are skipped before touching the disk.
    if save_format(name) is None:
        logger.debug("skipping %s: unrecognized file type", name)
        return FileOutcome.skipped()
    try:
        async with asyncio.timeout(timeout):
            return await _read_and_parse(source, name)
    except TimeoutError:
        logger.warning("timed out reading %s after %ss", name, timeout)
        return FileOutcome.error(name)
