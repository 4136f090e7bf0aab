"""Pytest configuration and fixtures for pricebook-csv tests.

Provides sample price book documents.
"""

from __future__ import annotations

import pytest

PRICEBOOK_NS = "http://www.demandware.com/xml/impex/pricebook/2006-10-31"


def make_pricebook(entries, pricebook_id="PB1", currency="USD", ns=True) -> str:
    """Build a price book export with one price-table per (product_id, amount)."""
    xmlns = f' xmlns="{PRICEBOOK_NS}"' if ns else ""
    tables = "\n".join(
        f'      <price-table product-id="{pid}">\n'
        f'        <amount quantity="1">{amount}</amount>\n'
        f"      </price-table>"
        for pid, amount in entries
    )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<pricebooks{xmlns}>\n"
        "  <pricebook>\n"
        f'    <header pricebook-id="{pricebook_id}">\n'
        f"      <currency>{currency}</currency>\n"
        '      <display-name xml:lang="x-default">List Prices</display-name>\n'
        "      <online-flag>true</online-flag>\n"
        "    </header>\n"
        "    <price-tables>\n"
        f"{tables}\n"
        "    </price-tables>\n"
        "  </pricebook>\n"
        "</pricebooks>\n"
    )


@pytest.fixture
def sample_xml() -> str:
    """The two-product USD price book."""
    return make_pricebook([("P1", "10.00"), ("P2", "20.00")])


@pytest.fixture
def sample_csv() -> str:
    return "Price Book ID,Currency,Product Id,Amount\nPB1,USD,P1,10.00\nPB1,USD,P2,20.00"


@pytest.fixture
def malformed_xml() -> str:
    """Unclosed <price-tables> element."""
    return (
        "<pricebooks><pricebook>"
        '<header pricebook-id="PB1"><currency>USD</currency></header>'
        '<price-tables><price-table product-id="P1"><amount>10.00</amount></price-table>'
        "</pricebook></pricebooks>"
    )


@pytest.fixture
def pricebook_factory():
    """make_pricebook(entries, pricebook_id=..., currency=..., ns=...)"""
    return make_pricebook
