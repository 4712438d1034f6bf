"""Tests for the HTTP endpoints through FastAPI's TestClient."""

import pytest

from errors import StorageError

PREFIX = "/api/v1"
TEXT_PLAIN = "text/plain; charset=utf-8"


# ---------------------------------------------------------------------------
# /hello
# ---------------------------------------------------------------------------

class TestHello:
    def test_greeting(self, client):
        r = client.get(f"{PREFIX}/hello")
        assert r.status_code == 200
        assert r.text == "Hello Chameleon"
        assert r.headers["content-type"] == TEXT_PLAIN

    def test_ignores_query(self, client):
        r = client.get(f"{PREFIX}/hello", params={"a": "1", "b": "x", "c": ""})
        assert r.status_code == 200
        assert r.text == "Hello Chameleon"

    def test_unknown_path_outside_prefix(self, client):
        assert client.get("/hello").status_code == 404


# ---------------------------------------------------------------------------
# /sum
# ---------------------------------------------------------------------------

class TestSum:
    @pytest.mark.parametrize("a,b", [(2, 3), (-10, 4), (0, 0), (2**40, 2**40)])
    def test_adds(self, client, a, b):
        r = client.get(f"{PREFIX}/sum", params={"a": a, "b": b})
        assert r.status_code == 200
        assert r.text == str(a + b)
        assert r.headers["content-type"] == TEXT_PLAIN

    def test_order_independent(self, client):
        r1 = client.get(f"{PREFIX}/sum?a=7&b=-2")
        r2 = client.get(f"{PREFIX}/sum?b=-2&a=7")
        assert r1.text == r2.text == "5"

    def test_any_param_names(self, client):
        assert client.get(f"{PREFIX}/sum?foo=1&bar=2").text == "3"

    @pytest.mark.parametrize("qs", ["", "?a=1", "?a=1&b=2&c=3"])
    def test_wrong_param_count(self, client, qs):
        r = client.get(f"{PREFIX}/sum{qs}")
        assert r.status_code == 500
        assert "two integers" in r.text

    def test_repeated_key_counts_once(self, client):
        r = client.get(f"{PREFIX}/sum?a=1&a=2")
        assert r.status_code == 500

    def test_invalid_value_named(self, client):
        r = client.get(f"{PREFIX}/sum?a=1&b=abc")
        assert r.status_code == 500
        assert r.headers["content-type"] == TEXT_PLAIN
        assert '"abc"' in r.text
        assert '"b"' in r.text

    def test_empty_value_invalid(self, client):
        assert client.get(f"{PREFIX}/sum?a=&b=1").status_code == 500


# ---------------------------------------------------------------------------
# /sumdb
# ---------------------------------------------------------------------------

class TestSumDB:
    def test_counts_serial_calls(self, client, tmp_store):
        for n in range(1, 6):
            r = client.get(f"{PREFIX}/sumdb", params={"a": n, "b": n})
            assert r.status_code == 200
            assert r.text == str(n)
        assert tmp_store.count_sums() == 5

    def test_end_to_end(self, client, tmp_store):
        assert client.get(f"{PREFIX}/sumdb?a=4&b=5").text == "1"
        assert client.get(f"{PREFIX}/sumdb?a=1&b=1").text == "2"

        r = client.get(f"{PREFIX}/reset")
        assert r.status_code == 204
        assert r.content == b""
        assert tmp_store.count_sums() == 0

        assert client.get(f"{PREFIX}/sumdb?x=10&y=20").text == "1"
        rows = tmp_store.list_sums()
        assert len(rows) == 1
        assert {rows[0].first_number, rows[0].second_number} == {10, 20}
        assert rows[0].total == 30

    def test_stores_in_query_order(self, client, tmp_store):
        client.get(f"{PREFIX}/sumdb?y=20&x=10")
        row = tmp_store.list_sums()[0]
        assert (row.first_number, row.second_number) == (20, 10)

    def test_invalid_input_not_stored(self, client, tmp_store):
        assert client.get(f"{PREFIX}/sumdb?a=1").status_code == 500
        r = client.get(f"{PREFIX}/sumdb?a=1&b=x")
        assert r.status_code == 500
        assert '"x"' in r.text
        assert tmp_store.count_sums() == 0

    def test_storage_failure(self, client, tmp_store, monkeypatch):
        def boom(a, b):
            raise StorageError("disk I/O error")
        monkeypatch.setattr(tmp_store, "record_sum", boom)
        r = client.get(f"{PREFIX}/sumdb?a=1&b=2")
        assert r.status_code == 500
        assert "disk I/O error" in r.text


# ---------------------------------------------------------------------------
# /reset
# ---------------------------------------------------------------------------

class TestReset:
    def test_empty_db(self, client):
        r = client.get(f"{PREFIX}/reset")
        assert r.status_code == 204
        assert r.content == b""

    def test_reset_then_sumdb(self, client, tmp_store):
        client.get(f"{PREFIX}/sumdb?a=9&b=9")
        client.get(f"{PREFIX}/reset")
        assert client.get(f"{PREFIX}/sumdb?a=2&b=3").text == "1"
        row = tmp_store.list_sums()[0]
        assert (row.first_number, row.second_number, row.total) == (2, 3, 5)

    def test_storage_failure_is_500(self, client, tmp_store, monkeypatch):
        def boom():
            raise StorageError("database is locked")
        monkeypatch.setattr(tmp_store, "reset_all", boom)
        r = client.get(f"{PREFIX}/reset")
        assert r.status_code == 500
        assert "database is locked" in r.text
