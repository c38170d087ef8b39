"""Tests for Enum — lookup, decode/encode, and the KeySpace methods."""

import enum
import logging

import pytest

from refinekit.enums import Enum
from refinekit.result import Err, Ok


class TestFind:
    def test_round_trip_every_value(self, pet_enum: Enum) -> None:
        for pet in pet_enum.values:
            assert pet_enum.find(pet_enum.to_string(pet)) is pet

    @pytest.mark.parametrize("text", ["Fish", "dog", "", " Dog"])
    def test_unknown_string(self, pet_enum: Enum, text: str) -> None:
        assert pet_enum.find(text) is None

    def test_colliding_renders_return_first_defined(self) -> None:
        colliding = Enum.make(["a", "A", "b"], str.lower)
        assert colliding.find("a") == "a"

    def test_values_keep_definition_order(self) -> None:
        numbers = Enum.make([3, 1, 2], str)
        assert numbers.values == (3, 1, 2)


class TestDecode:
    def test_known_value(self, pet_enum: Enum, pet_cls: type[enum.Enum]) -> None:
        assert pet_enum.decode("Dog") == Ok(pet_cls.DOG)

    def test_unknown_value_names_input(self, pet_enum: Enum) -> None:
        result = pet_enum.decode("Fish")
        assert isinstance(result, Err)
        assert result.error.code == "unknown_value"
        assert "Fish" in result.error.message

    def test_non_string_input(self, pet_enum: Enum) -> None:
        result = pet_enum.decode(3)
        assert isinstance(result, Err)
        assert result.error.code == "type"

    def test_decoder_from_json_text(self, pet_enum: Enum, pet_cls: type[enum.Enum]) -> None:
        assert pet_enum.decoder.decode_string('"Snake"') == Ok(pet_cls.SNAKE)
        assert pet_enum.decoder.decode_string('"Fish"').is_err()


class TestEncode:
    def test_encode_is_to_string(self, pet_enum: Enum, pet_cls: type[enum.Enum]) -> None:
        assert pet_enum.encode(pet_cls.SPIDER) == "Spider"
        assert pet_enum.encoder(pet_cls.CAT) == "Cat"


class TestKeySpace:
    def test_to_key_string(self, pet_enum: Enum, pet_cls: type[enum.Enum]) -> None:
        assert pet_enum.to_key_string(pet_cls.CAT) == "Cat"

    def test_from_key_string(self, pet_enum: Enum, pet_cls: type[enum.Enum]) -> None:
        assert pet_enum.from_key_string("Cat") == Ok(pet_cls.CAT)
        result = pet_enum.from_key_string("Fish")
        assert isinstance(result, Err)
        assert "Fish" in result.error


class TestFromMembers:
    def test_str_enum_renders_value(self, pet_cls: type[enum.Enum]) -> None:
        pets = Enum.from_members(pet_cls)
        assert pets.values == tuple(pet_cls)
        assert pets.find("Spider") is pet_cls.SPIDER

    def test_int_enum_renders_name(self) -> None:
        class Level(enum.IntEnum):
            LOW = 1
            HIGH = 2

        levels = Enum.from_members(Level)
        assert levels.to_string(Level.HIGH) == "HIGH"
        assert levels.find("LOW") is Level.LOW
        assert levels.find("1") is None


class TestProtocols:
    def test_len_iter_contains(self, pet_enum: Enum, pet_cls: type[enum.Enum]) -> None:
        assert len(pet_enum) == 4
        assert list(pet_enum) == list(pet_enum.values)
        assert pet_cls.DOG in pet_enum
        assert "Fish" not in pet_enum

    def test_repr(self) -> None:
        assert repr(Enum.make([1, 2], str)) == "Enum([1, 2])"


class TestDistinctnessDiagnostic:
    def test_off_by_default(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="refinekit"):
            Enum.make(["a", "A"], str.lower)
        assert caplog.records == []

    def test_warns_when_enabled(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv("REFINEKIT_CHECK_ENUM_DISTINCT", "true")
        with caplog.at_level(logging.WARNING, logger="refinekit"):
            colliding = Enum.make(["a", "A", "b"], str.lower)
        assert "render to the same string" in caplog.text
        assert "'a'" in caplog.text
        # Behaviour is unchanged: first-defined still wins.
        assert colliding.find("a") == "a"
