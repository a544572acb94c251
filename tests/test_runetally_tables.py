from __future__ import annotations

import pytest
from d2lib.items_storage import ItemsDataStorage

from d2bytes import character_save
from runetally import tables
from runetally.decoder import DecodeError, decode_character


def test_constants_for_falls_back_to_nearest_earlier_table() -> None:
    for version in (96, 97, 98, 99, 120):
        assert tables.constants_for(version) is ItemsDataStorage()
    assert tables.constants_for(95) is None


def test_constants_for_prefers_the_closest_table(monkeypatch) -> None:
    early, late = object(), object()
    monkeypatch.setattr(tables, "CONSTANT_TABLES", {96: lambda: early, 98: lambda: late})
    assert tables.constants_for(97) is early
    assert tables.constants_for(98) is late
    assert tables.constants_for(99) is late


def test_ensure_constant_data_registers_once(no_constant_data) -> None:
    assert tables.registered_versions() == ()
    assert tables.ensure_constant_data() == (96, 97, 98, 99)
    assert tables.ensure_constant_data() == ()
    assert tables.registered_versions() == (96, 97, 98, 99)
    assert tables.get_constant_data(98) is ItemsDataStorage()


def test_ensure_constant_data_keeps_existing_registration(no_constant_data) -> None:
    marker = object()
    tables.set_constant_data(99, marker)
    assert tables.ensure_constant_data() == (96, 97, 98)
    assert tables.get_constant_data(99) is marker


def test_missing_registration_is_reported_by_query(no_constant_data) -> None:
    assert not tables.has_constant_data(96)
    with pytest.raises(tables.ConstantDataError):
        tables.get_constant_data(96)


def test_decoding_requires_registration(no_constant_data) -> None:
    with pytest.raises(DecodeError, match="unsupported save version 96"):
        decode_character(character_save("r01"))
    tables.ensure_constant_data()
    assert [item.code for item in decode_character(character_save("r01")).items] == ["r01"]


def test_unsupported_future_version_is_not_registered() -> None:
    tables.ensure_constant_data()
    assert not tables.has_constant_data(100)
    with pytest.raises(DecodeError):
        decode_character(character_save("r01", version=100))
