"""Tests for TableStore (kpi_portal/database/repos/tables.py)."""

from unittest.mock import patch

import pytest

from kpi_portal.database.repos import (
    NO_ROWS,
    TOO_MANY_ROWS,
    UNDEFINED_TABLE,
    StoreError,
    TableStore,
)


def _add_company(store, code, active=True):
    return store.insert(
        "companies",
        {"name": f"Company {code}", "code": code, "is_active": active},
        returning="id, code",
    )


def test_select_empty_table(store):
    result = store.select("companies", limit=1)
    assert result.ok
    assert result.data == []


def test_select_missing_table(tmp_db):
    result = TableStore(tmp_db).select("companies", limit=1)
    assert not result.ok
    assert result.error.code == UNDEFINED_TABLE
    assert result.error.is_undefined_table
    assert result.error.message == 'relation "companies" does not exist'


def test_insert_returns_requested_columns(store):
    result = _add_company(store, "ACME")
    assert result.ok
    assert set(result.data) == {"id", "code"}
    assert result.data["code"] == "ACME"


def test_insert_constraint_violation_is_error_value(store):
    _add_company(store, "DUP")
    result = _add_company(store, "DUP")
    assert not result.ok
    assert not result.error.is_undefined_table
    assert result.error.message


def test_select_filters_order_and_limit(store):
    _add_company(store, "B")
    _add_company(store, "A")
    _add_company(store, "OFF", active=False)

    result = store.select("companies", columns="code", filters={"is_active": True}, order_by="code")
    assert [row["code"] for row in result.data] == ["A", "B"]

    result = store.select("companies", columns="code", order_by="code", ascending=False, limit=2)
    assert [row["code"] for row in result.data] == ["OFF", "B"]


def test_maybe_single(store):
    assert store.maybe_single("companies", limit=1).data is None

    _add_company(store, "ONE")
    row = store.maybe_single("companies", columns="code", limit=1).data
    assert row == {"code": "ONE"}


def test_maybe_single_rejects_many_rows(store):
    _add_company(store, "X1")
    _add_company(store, "X2")
    result = store.maybe_single("companies", columns="code")
    assert result.error.code == TOO_MANY_ROWS


@pytest.mark.parametrize("name", ["companies; DROP TABLE roles", "1abc", "", "a-b"])
def test_invalid_identifiers_raise(store, name):
    with pytest.raises(ValueError):
        store.select(name)


def test_invalid_column_raises(store):
    with pytest.raises(ValueError):
        store.insert("companies", {"name; --": "x"})


def test_store_error_classification():
    assert StoreError("XX000", 'relation "kpis" does not exist').is_undefined_table
    assert not StoreError("XX000", "connection refused").is_undefined_table
    assert StoreError(NO_ROWS, "no rows").is_no_rows


def test_reads_and_writes_use_matching_connections(provisioned_db):
    store = TableStore(provisioned_db)
    assert store.db is provisioned_db

    with patch.object(provisioned_db, "get_connection", wraps=provisioned_db.get_connection) as write_spy, \
            patch.object(provisioned_db, "get_read_connection", wraps=provisioned_db.get_read_connection) as read_spy:
        _add_company(store, "ACME")
        store.select("companies")

    write_spy.assert_called_once_with()
    read_spy.assert_called_once_with()
