"""Tests for src.core.registry — identity and alias resolution."""

import pytest

from src.core.errors import UnknownIdentityError
from src.core.registry import DEFAULT_IDENTITIES, Registry
from src.data.models import FixedOffset, Identity


@pytest.fixture
def registry():
    return Registry([
        Identity(username="HeSong07", location=FixedOffset(start_row=6), aliases=("he",)),
        Identity(username="boewu28", location=FixedOffset(start_row=24), aliases=("aaron",)),
    ])


class TestResolve:
    def test_exact_username(self, registry):
        assert registry.resolve("boewu28").username == "boewu28"

    def test_strips_at_sign(self, registry):
        assert registry.resolve("@boewu28").username == "boewu28"

    def test_alias_any_case(self, registry):
        assert registry.resolve("Aaron").username == "boewu28"
        assert registry.resolve("HE").username == "HeSong07"

    def test_username_any_case(self, registry):
        assert registry.resolve("hesong07").username == "HeSong07"

    def test_unknown_lists_all_options(self, registry):
        with pytest.raises(UnknownIdentityError) as exc_info:
            registry.resolve("XYZ")
        assert exc_info.value.options == ["@HeSong07", "@boewu28", "he", "aaron"]
        message = str(exc_info.value)
        assert "@XYZ" in message
        for option in exc_info.value.options:
            assert option in message


class TestResolveCaller:
    def test_registered_handle(self, registry):
        assert registry.resolve_caller("boewu28").username == "boewu28"

    def test_handle_any_case(self, registry):
        assert registry.resolve_caller("hesong07").username == "HeSong07"

    def test_alias_is_not_a_handle(self, registry):
        with pytest.raises(UnknownIdentityError, match="not registered"):
            registry.resolve_caller("aaron")

    def test_missing_handle(self, registry):
        with pytest.raises(UnknownIdentityError, match="Could not determine"):
            registry.resolve_caller(None)


class TestRegistryConfig:
    def test_duplicate_username_rejected(self):
        ident = Identity(username="a", location=FixedOffset(start_row=1))
        with pytest.raises(ValueError):
            Registry([ident, ident])

    def test_duplicate_alias_rejected(self):
        with pytest.raises(ValueError):
            Registry([
                Identity(username="a", location=FixedOffset(start_row=1), aliases=("x",)),
                Identity(username="b", location=FixedOffset(start_row=9), aliases=("X",)),
            ])

    def test_alias_commands(self, registry):
        assert [(alias, ident.username) for alias, ident in registry.alias_commands()] == [
            ("he", "HeSong07"),
            ("aaron", "boewu28"),
        ]

    def test_others_excludes_self(self, registry):
        he = registry.resolve("he")
        assert [i.username for i in registry.others(he)] == ["boewu28"]

    def test_default_registry(self):
        registry = Registry()
        assert len(registry) == len(DEFAULT_IDENTITIES) == 2
        assert registry.resolve("he").username == "hesong07"
        assert registry.resolve("aaron").username == "boewu28"
