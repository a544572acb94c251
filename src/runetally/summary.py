from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .runes import RUNE_NAMES

RuneTally = dict[str, int]

_RUNE_ORDER: dict[str, int] = {name: idx for idx, name in enumerate(RUNE_NAMES)}


def add_tallies(left: Mapping[str, int], right: Mapping[str, int]) -> RuneTally:
    out: RuneTally = dict(left)
    for name, count in right.items():
        out[name] = out.get(name, 0) + int(count)
    return out


def _rune_sort_key(name: str) -> tuple[int, str]:
    return (_RUNE_ORDER.get(name, len(_RUNE_ORDER)), name)


@dataclass(frozen=True, slots=True)
class FileOutcome:
    """Result of processing one file.

    A read file lands in `read_files`, a failed one in `read_errors`, and a
    skipped (non-save) file in neither.
    """

    runes: RuneTally = field(default_factory=dict)
    read_files: tuple[str, ...] = ()
    read_errors: tuple[str, ...] = ()

    @classmethod
    def read(cls, name: str, runes: Mapping[str, int]) -> FileOutcome:
        return cls(runes=dict(runes), read_files=(str(name),))

    @classmethod
    def error(cls, name: str) -> FileOutcome:
        return cls(read_errors=(str(name),))

    @classmethod
    def skipped(cls) -> FileOutcome:
        return cls()


@dataclass(frozen=True, slots=True)
class RunesSummary:
    runes: RuneTally = field(default_factory=dict)
    read_files: tuple[str, ...] = ()
    read_errors: tuple[str, ...] = ()

    @classmethod
    def empty(cls) -> RunesSummary:
        return cls()

    def merge(self, outcome: FileOutcome | RunesSummary) -> RunesSummary:
        return RunesSummary(
            runes=add_tallies(self.runes, outcome.runes),
            read_files=self.read_files + tuple(outcome.read_files),
            read_errors=self.read_errors + tuple(outcome.read_errors),
        )

    @property
    def total(self) -> int:
        return sum(int(count) for count in self.runes.values())

    def sorted_runes(self) -> list[tuple[str, int]]:
        return [(name, int(self.runes[name])) for name in sorted(self.runes, key=_rune_sort_key)]

    def to_dict(self) -> dict[str, object]:
        return {
            "runes": dict(self.sorted_runes()),
            "readFiles": list(self.read_files),
            "readErrors": list(self.read_errors),
        }
