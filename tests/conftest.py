"""Shared pytest fixtures for refinekit tests."""

from __future__ import annotations

from collections.abc import Generator
from enum import StrEnum
from functools import partial

import pytest

from refinekit.config.settings import reset_settings
from refinekit.enums import Enum
from refinekit.guards import (
    gte,
    int_error_to_string,
    lte,
    max_length,
    min_length,
    regex_match,
    string_error_to_string,
)
from refinekit.refined import Opaque, Refined
from refinekit.result import Result


class Pet(StrEnum):
    CAT = "Cat"
    DOG = "Dog"
    SNAKE = "Snake"
    SPIDER = "Spider"


class Percent(Opaque[int]):
    """1..100 inclusive."""


class Username(Opaque[str]):
    """Lowercased, 3-12 chars, starts with a letter."""


def percent_guard(value: int) -> Result[int, object]:
    return gte(1, value).and_then(partial(lte, 100))


def username_guard(value: str) -> Result[str, object]:
    normalized = value.strip().lower()
    return (
        min_length(3, normalized)
        .and_then(partial(max_length, 12))
        .and_then(partial(regex_match, r"^[a-z][a-z0-9_]*$"))
    )


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None]:
    """Drop cached settings around each test so env overrides take effect."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def pet_cls() -> type[Pet]:
    return Pet


@pytest.fixture
def pet_enum() -> Enum[Pet]:
    """Enum over Cat, Dog, Snake, Spider rendering each as its own name."""
    return Enum.make([Pet.CAT, Pet.DOG, Pet.SNAKE, Pet.SPIDER], lambda pet: pet.value)


@pytest.fixture
def percent_cls() -> type[Percent]:
    return Percent


@pytest.fixture
def percent() -> Refined[int, Percent, object]:
    """Int-backed refined type guarded by gte(1) then lte(100)."""
    return Refined.opaque(Percent, int, percent_guard, int_error_to_string)


@pytest.fixture
def username() -> Refined[str, Username, object]:
    """Str-backed refined type that normalizes before validating."""
    return Refined.opaque(Username, str, username_guard, string_error_to_string)
