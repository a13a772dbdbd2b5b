"""Tests for SqlPersistence — legacy rows, round trips, failure mapping."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from sqlalchemy import insert, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError

from roperty.domain.codec import LEGACY_AXES, decode_domain_key
from roperty.domain.errors import MalformedDomainKey, PersistenceUnavailable
from roperty.domain.record import PropertyRecord, as_vector
from roperty.domain.resolver import MappingResolver
from roperty.domain.values import ValueType
from roperty.infrastructure.database.schema import base_property, domain_property
from roperty.infrastructure.persistence import SqlPersistence


def _legacy_row(
    engine: Engine,
    name: str,
    default: str,
    *,
    converter: str | None = None,
    container: str = "shop",
    overrides: dict[str, str] | None = None,
) -> None:
    """Insert rows the way an older deployment would have written them."""
    with engine.begin() as conn:
        base_id = conn.execute(
            insert(base_property).values(
                property_name=name,
                container_name=container,
                default_value=default,
                converter_class=converter,
            )
        ).inserted_primary_key[0]
        for descriptor, value in (overrides or {}).items():
            conn.execute(
                insert(domain_property).values(
                    base_property=base_id, domain=descriptor, overridden_value=value
                )
            )


class TestConstruction:
    def test_container_required(self, db_engine: Engine) -> None:
        with pytest.raises(ValueError):
            SqlPersistence(db_engine, "")


class TestLoad:
    def test_missing_key(self, persistence: SqlPersistence) -> None:
        assert persistence.load("nope") is None

    def test_legacy_row_without_converter_is_string(
        self, db_engine: Engine, persistence: SqlPersistence
    ) -> None:
        _legacy_row(db_engine, "greeting", "Hello", overrides={"LOCALE_de_DE": "Hallo"})
        record = persistence.load("greeting")
        assert record is not None
        assert record.default == "Hello"
        assert record.overrides[0].vector == decode_domain_key("LOCALE_de_DE", "shop")
        resolver = MappingResolver(container="shop", country="DE", locale="de_DE")
        assert record.resolve(LEGACY_AXES, resolver) == "Hallo"

    def test_malformed_override_skipped(
        self, db_engine: Engine, persistence: SqlPersistence, caplog: pytest.LogCaptureFixture
    ) -> None:
        _legacy_row(
            db_engine,
            "greeting",
            "Hello",
            overrides={"REGION_EU": "Hi", "COUNTRY_AT": "Servus"},
        )
        record = persistence.load("greeting")
        assert record is not None
        assert [o.value for o in record.overrides] == ["Servus"]
        assert "Skipping override" in caplog.text

    def test_typed_values(self, db_engine: Engine, persistence: SqlPersistence) -> None:
        _legacy_row(db_engine, "limit", "10", converter="integer", overrides={"COUNTRY_DE": "20"})
        record = persistence.load("limit")
        assert record is not None
        assert record.default == 10
        assert record.overrides[0].value == 20
        assert record.value_type is ValueType.INTEGER

    def test_unconvertible_override_skipped(
        self, db_engine: Engine, persistence: SqlPersistence
    ) -> None:
        _legacy_row(db_engine, "limit", "10", converter="integer", overrides={"COUNTRY_DE": "x"})
        record = persistence.load("limit")
        assert record is not None
        assert record.overrides == ()

    def test_unknown_converter_treated_as_string(
        self, db_engine: Engine, persistence: SqlPersistence
    ) -> None:
        _legacy_row(db_engine, "legacy", "42", converter="com.example.MoneyConverter")
        record = persistence.load("legacy")
        assert record is not None
        assert record.default == "42"

    def test_other_container_invisible(
        self, db_engine: Engine, persistence: SqlPersistence
    ) -> None:
        _legacy_row(db_engine, "greeting", "Hello", container="other")
        assert persistence.load("greeting") is None
        assert persistence.load_all() == {}

    def test_load_all(self, db_engine: Engine, persistence: SqlPersistence) -> None:
        _legacy_row(db_engine, "a", "1", overrides={"COUNTRY_DE": "2"})
        _legacy_row(db_engine, "b", "3")
        records = persistence.load_all()
        assert sorted(records) == ["a", "b"]
        assert len(records["a"].overrides) == 1
        assert records["b"].overrides == ()


class TestStore:
    def test_round_trip(self, persistence: SqlPersistence) -> None:
        record = PropertyRecord(5, description="page size")
        record.put(10, decode_domain_key("COUNTRY_DE", "shop"))
        record.put(20, decode_domain_key("PARTNER_103_de_AT", "shop"))
        persistence.store("page.size", record)

        loaded = persistence.load("page.size")
        assert loaded is not None
        assert loaded.to_dict() == record.to_dict()

    def test_update_bumps_version_and_replaces_overrides(
        self, db_engine: Engine, persistence: SqlPersistence
    ) -> None:
        record = PropertyRecord("a")
        record.put("de", decode_domain_key("COUNTRY_DE", "shop"))
        persistence.store("k", record)
        persistence.store("k", PropertyRecord("b"))

        with db_engine.connect() as conn:
            row = conn.execute(select(base_property)).one()
            overrides = conn.execute(select(domain_property)).fetchall()
        assert row.version == 1
        assert row.default_value == "b"
        assert row.change_user == "tests"
        assert row.app_version
        assert row.last_changed is not None
        assert overrides == []

    def test_string_type_stores_null_converter(
        self, db_engine: Engine, persistence: SqlPersistence
    ) -> None:
        persistence.store("k", PropertyRecord("text"))
        persistence.store("flag", PropertyRecord(True))
        with db_engine.connect() as conn:
            rows = {
                r.property_name: r
                for r in conn.execute(select(base_property)).fetchall()
            }
        assert rows["k"].converter_class is None
        assert rows["flag"].converter_class == "boolean"
        assert rows["flag"].default_value == "true"

    def test_unspellable_override_writes_nothing(
        self, db_engine: Engine, persistence: SqlPersistence
    ) -> None:
        record = PropertyRecord("a")
        record.put("x", "shop")
        with pytest.raises(MalformedDomainKey):
            persistence.store("k", record)
        with db_engine.connect() as conn:
            assert conn.execute(select(base_property)).fetchall() == []

    def test_validate(self, persistence: SqlPersistence) -> None:
        persistence.validate(decode_domain_key("PARTNER_103_de_AT", "shop"))
        with pytest.raises(MalformedDomainKey):
            persistence.validate(as_vector(["shop"]))


class TestFailures:
    def _broken_engine(self) -> MagicMock:
        engine = MagicMock()
        error = OperationalError("SELECT 1", {}, Exception("database is locked"))
        engine.connect.side_effect = error
        engine.begin.side_effect = error
        return engine

    def test_load_raises_persistence_unavailable(self) -> None:
        persistence = SqlPersistence(self._broken_engine(), "shop")
        with pytest.raises(PersistenceUnavailable) as exc_info:
            persistence.load("k")
        assert exc_info.value.operation == "load"
        assert exc_info.value.key == "k"

    def test_load_all_raises_persistence_unavailable(self) -> None:
        with pytest.raises(PersistenceUnavailable):
            SqlPersistence(self._broken_engine(), "shop").load_all()

    def test_store_raises_persistence_unavailable(self) -> None:
        with pytest.raises(PersistenceUnavailable, match="store"):
            SqlPersistence(self._broken_engine(), "shop").store("k", PropertyRecord("v"))

    def test_missing_primary_key_raises_persistence_unavailable(self) -> None:
        conn = MagicMock()
        conn.execute.return_value.first.return_value = None
        conn.execute.return_value.inserted_primary_key = None
        engine = MagicMock()
        engine.begin.return_value.__enter__.return_value = conn
        with pytest.raises(PersistenceUnavailable, match="store"):
            SqlPersistence(engine, "shop").store("k", PropertyRecord("v"))
