"""Tests for the legacy domain descriptor codec."""

from __future__ import annotations

import pytest

from roperty.domain.codec import (
    decode_domain_key,
    encode_domain_key,
    prefix,
    strip_prefix,
    suffix,
)
from roperty.domain.errors import MalformedDomainKey
from roperty.domain.vector import WILDCARD, DomainVector


class TestHelpers:
    def test_prefix(self) -> None:
        assert prefix("LOCALE_de_DE") == "LOCALE"

    def test_strip_prefix(self) -> None:
        assert strip_prefix("COUNTRY_DE") == "DE"
        assert strip_prefix("PARTNER_103_de_AT") == "103_de_AT"

    def test_suffix(self) -> None:
        assert suffix("LOCALE_de_DE") == "DE"


class TestDecode:
    def test_country(self) -> None:
        vector = decode_domain_key("COUNTRY_DE", "container")
        assert vector.to_values() == ["container", "DE"]

    def test_locale(self) -> None:
        vector = decode_domain_key("LOCALE_de_DE", "container")
        assert vector.to_values() == ["container", "DE", "de_DE"]

    def test_orientation(self) -> None:
        vector = decode_domain_key("ORIENTATION_GAY_es_MX", "container")
        assert vector.to_values() == ["container", "MX", "es_MX", "GAY"]

    def test_partner_wildcards_orientation(self) -> None:
        vector = decode_domain_key("PARTNER_103_de_AT", "container")
        assert vector.to_values() == ["container", "AT", "de_AT", "*", "103"]
        assert vector.slot(3) is WILDCARD
        assert vector.specificity() == 4

    def test_uses_given_container(self) -> None:
        assert decode_domain_key("COUNTRY_DE", "shop").to_values() == ["shop", "DE"]

    def test_deterministic(self) -> None:
        assert decode_domain_key("LOCALE_de_DE", "c") == decode_domain_key("LOCALE_de_DE", "c")

    @pytest.mark.parametrize(
        "descriptor",
        [
            "REGION_EU",
            "COUNTRY",
            "COUNTRY_DE_AT",
            "LOCALE_de",
            "ORIENTATION_es_MX",
            "PARTNER_103_de_AT_x",
            "LOCALE_de_",
            "",
        ],
    )
    def test_malformed(self, descriptor: str) -> None:
        with pytest.raises(MalformedDomainKey) as exc_info:
            decode_domain_key(descriptor, "container")
        assert exc_info.value.descriptor == descriptor

    def test_empty_container_rejected(self) -> None:
        with pytest.raises(MalformedDomainKey, match="container"):
            decode_domain_key("COUNTRY_DE", "")

    def test_malformed_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode_domain_key("NOPE_1", "container")


class TestEncode:
    @pytest.mark.parametrize(
        "descriptor",
        ["COUNTRY_DE", "LOCALE_de_DE", "ORIENTATION_GAY_es_MX", "PARTNER_103_de_AT"],
    )
    def test_decoded_vectors_encode_back(self, descriptor: str) -> None:
        vector = decode_domain_key(descriptor, "shop")
        assert encode_domain_key(vector, "shop") == descriptor

    def test_other_container_rejected(self) -> None:
        vector = decode_domain_key("COUNTRY_DE", "shop")
        with pytest.raises(MalformedDomainKey, match="container slot"):
            encode_domain_key(vector, "other")

    def test_container_only_vector_has_no_spelling(self) -> None:
        with pytest.raises(MalformedDomainKey):
            encode_domain_key(DomainVector.from_values(["shop"]), "shop")

    def test_country_not_matching_locale_rejected(self) -> None:
        vector = DomainVector.from_values(["shop", "AT", "de_DE"])
        with pytest.raises(MalformedDomainKey, match="legacy layout"):
            encode_domain_key(vector, "shop")

    def test_wildcard_country_rejected(self) -> None:
        vector = DomainVector.from_values(["shop", "*", "de_DE"])
        with pytest.raises(MalformedDomainKey):
            encode_domain_key(vector, "shop")
