"""Tests for resolvers and axis assignment parsing."""

from __future__ import annotations

import pytest

from roperty.domain.resolver import (
    NULL_RESOLVER,
    DomainResolver,
    MappingResolver,
    parse_assignments,
)


class TestMappingResolver:
    def test_mapping_and_kwargs_merge(self) -> None:
        resolver = MappingResolver({"country": "DE"}, locale="de_DE")
        assert resolver.get_domain_value("country") == "DE"
        assert resolver.get_domain_value("locale") == "de_DE"

    def test_unknown_axis_is_none(self) -> None:
        assert NULL_RESOLVER.get_domain_value("country") is None

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MappingResolver(), DomainResolver)


class TestParseAssignments:
    def test_parses_pairs(self) -> None:
        assert parse_assignments(["country=DE", " locale = de_DE "]) == {
            "country": "DE",
            "locale": "de_DE",
        }

    def test_value_may_contain_equals(self) -> None:
        assert parse_assignments(["partner=a=b"]) == {"partner": "a=b"}

    @pytest.mark.parametrize("pair", ["country", "=DE"])
    def test_rejects_bad_entries(self, pair: str) -> None:
        with pytest.raises(ValueError, match="axis=value"):
            parse_assignments([pair])
