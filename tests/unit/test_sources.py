"""Unit tests for reading price book inputs from files and URLs."""

from __future__ import annotations

import pytest
import requests

from pricebook_csv.errors import InvalidInputKind, UnreadableInput
from pricebook_csv.sources import check_input_kind, read_source, source_name


class FakeResponse:
    def __init__(self, content=b"", status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class TestCheckInputKind:
    @pytest.mark.parametrize("name", ["prices.xml", "PRICES.XML", "dir/usd-list.xml"])
    def test_accepts_xml(self, name):
        check_input_kind(name)

    @pytest.mark.parametrize("name", ["prices.csv", "prices", "prices.xml.gz"])
    def test_rejects_other_kinds(self, name):
        with pytest.raises(InvalidInputKind):
            check_input_kind(name)

    def test_custom_extensions(self):
        check_input_kind("export.pricebook", allowed_extensions=[".pricebook"])


class TestSourceName:
    def test_path(self):
        assert source_name("/tmp/exports/usd.xml") == "usd.xml"

    def test_url_ignores_query(self):
        assert source_name("https://example.com/exports/usd.xml?token=abc") == "usd.xml"


class TestReadSource:
    def test_reads_local_file(self, tmp_path, sample_xml):
        path = tmp_path / "usd.xml"
        path.write_text(sample_xml, encoding="utf-8")

        doc = read_source(str(path))

        assert doc.name == "usd.xml"
        assert doc.content == sample_xml.encode("utf-8")

    def test_missing_file(self, tmp_path):
        with pytest.raises(UnreadableInput):
            read_source(str(tmp_path / "missing.xml"))

    def test_directory_is_unreadable(self, tmp_path):
        with pytest.raises(UnreadableInput):
            read_source(str(tmp_path))

    def test_size_limit(self, tmp_path):
        path = tmp_path / "big.xml"
        path.write_bytes(b"<a>" + b"x" * 100 + b"</a>")

        with pytest.raises(UnreadableInput):
            read_source(str(path), max_bytes=50)

    def test_fetches_url(self, monkeypatch, sample_xml):
        calls = []

        def fake_get(url, headers=None, timeout=None):
            calls.append((url, timeout))
            return FakeResponse(sample_xml.encode("utf-8"))

        monkeypatch.setattr(requests, "get", fake_get)

        doc = read_source("https://example.com/exports/usd.xml", timeout=5)

        assert doc.name == "usd.xml"
        assert doc.content.startswith(b"<?xml")
        assert calls == [("https://example.com/exports/usd.xml", 5)]

    def test_http_error(self, monkeypatch):
        monkeypatch.setattr(requests, "get", lambda url, **kw: FakeResponse(status_code=404))

        with pytest.raises(UnreadableInput):
            read_source("https://example.com/missing.xml")

    def test_connection_error(self, monkeypatch):
        def fake_get(url, **kw):
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(requests, "get", fake_get)

        with pytest.raises(UnreadableInput) as exc_info:
            read_source("http://localhost:1/usd.xml")

        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)
