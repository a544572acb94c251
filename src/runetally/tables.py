from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Callable, Final, Mapping

from d2lib.items_storage import ItemsDataStorage

logger = logging.getLogger(__name__)

SCHEMA_VERSIONS: Final[tuple[int, ...]] = (96, 97, 98, 99)

# d2lib ships a single item data set (1.10 layout). Versions without a dedicated
# table reuse the nearest earlier one.
CONSTANT_TABLES: Final[Mapping[int, Callable[[], ItemsDataStorage]]] = MappingProxyType(
    {
        96: ItemsDataStorage,
    }
)


class ConstantDataError(KeyError):
    pass


_CONSTANTS: dict[int, ItemsDataStorage] = {}
_REGISTER_LOCK = threading.Lock()


def has_constant_data(version: int) -> bool:
    return int(version) in _CONSTANTS


def get_constant_data(version: int) -> ItemsDataStorage:
    try:
        return _CONSTANTS[int(version)]
    except KeyError as exc:
        raise ConstantDataError(f"no constant data registered for schema version {int(version)}") from exc


def set_constant_data(version: int, data: ItemsDataStorage) -> None:
    _CONSTANTS[int(version)] = data


def registered_versions() -> tuple[int, ...]:
    return tuple(sorted(_CONSTANTS))


def clear_constant_data() -> None:
    _CONSTANTS.clear()


def constants_for(version: int) -> ItemsDataStorage | None:
    earlier = [known for known in CONSTANT_TABLES if known <= int(version)]
    if not earlier:
        return None
    return CONSTANT_TABLES[max(earlier)]()


def ensure_constant_data() -> tuple[int, ...]:
    """Register constant tables for every supported schema version.

    Safe to call repeatedly; versions that are already registered are left
    alone. Returns the versions registered by this call.
    """

    registered: list[int] = []
    with _REGISTER_LOCK:
        for version in SCHEMA_VERSIONS:
            if has_constant_data(version):
                continue
            constants = constants_for(version)
            if constants is None:
                logger.warning("no constant table available for schema version %d", version)
                continue
            set_constant_data(version, constants)
            registered.append(version)
    if registered:
        logger.debug("registered constant data for versions %s", ", ".join(str(v) for v in registered))
    return tuple(registered)
