from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class SaveSource(Protocol):
    @property
    def name(self) -> str: ...

    async def read_bytes(self) -> bytes: ...


@dataclass(frozen=True, slots=True)
class PathSource:
    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    async def read_bytes(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)


@dataclass(frozen=True, slots=True)
class MemorySource:
    """Bytes already in memory, e.g. an upload. `error` makes the read fail."""

    name: str
    data: bytes = b""
    error: OSError | None = None

    async def read_bytes(self) -> bytes:
        if self.error is not None:
            raise self.error
        return bytes(self.data)


def _iter_dir(path: Path, *, recursive: bool) -> list[Path]:
    entries = path.rglob("*") if recursive else path.iterdir()
    return sorted(entry for entry in entries if entry.is_file())


def sources_from_paths(paths: Iterable[Path], *, recursive: bool = True) -> list[PathSource]:
    # Missing paths are kept; reading them later is recorded as a read error.
    sources: list[PathSource] = []
    for path in paths:
        path = Path(path)
        if path.is_dir():
            sources.extend(PathSource(entry) for entry in _iter_dir(path, recursive=recursive))
        else:
            sources.append(PathSource(path))
    return sources
