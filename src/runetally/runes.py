from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

RUNES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "r01": "el",
        "r02": "eld",
        "r03": "tir",
        "r04": "nef",
        "r05": "eth",
        "r06": "ith",
        "r07": "tal",
        "r08": "ral",
        "r09": "ort",
        "r10": "thul",
        "r11": "amn",
        "r12": "sol",
        "r13": "shael",
        "r14": "dol",
        "r15": "hel",
        "r16": "io",
        "r17": "lum",
        "r18": "ko",
        "r19": "fal",
        "r20": "lem",
        "r21": "pul",
        "r22": "um",
        "r23": "mal",
        "r24": "ist",
        "r25": "gul",
        "r26": "vex",
        "r27": "ohm",
        "r28": "lo",
        "r29": "sur",
        "r30": "ber",
        "r31": "jah",
        "r32": "cham",
        "r33": "zod",
    }
)

RUNE_NAMES: Final[tuple[str, ...]] = tuple(RUNES.values())

_CODES_BY_NAME: Final[Mapping[str, str]] = MappingProxyType({name: code for code, name in RUNES.items()})


def rune_name(code: str) -> str | None:
    return RUNES.get(code)


def rune_code(name: str) -> str | None:
    return _CODES_BY_NAME.get(str(name).lower())


def classify(item: object) -> str | None:
    """Return the canonical rune name for `item`, or None when it is not a rune.

    Items are matched on their `code` (d2lib `Item.code`). Only exact table
    codes count: `r00` or `r34` look like runes but are not.
    """

    code = getattr(item, "code", None)
    if not isinstance(code, str) or not code:
        return None
    return RUNES.get(code)
