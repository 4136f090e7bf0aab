"""
ROW ACCUMULATOR
---------------
Turns the tag event stream of one price book into CSV row records.

Each row is a snapshot of the price book wide fields (id, currency) taken when
its <price-table> opens, completed by the first non-blank text seen while an
amount is expected:

    <header pricebook-id="usd-list-prices">      -> base id
      <currency>USD</currency>                   -> base currency
    <price-table product-id="P1">                -> pending row (PB, USD, P1)
      <amount quantity="1">10.00</amount>        -> row finalized with 10.00

Text is routed by the active field, not by nesting depth. Amount routing only
starts when <amount> opens inside a pending price-table, so text of siblings
such as <online-from> never becomes an amount. The routing lives in
`TRANSITIONS` so each (state, event kind) pair can be read and tested on its
own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .errors import OutOfOrderDocument
from .events import ElementClosed, ElementOpened, TagEvent, Text

logger = logging.getLogger(__name__)

HEADER_TAG = "header"
CURRENCY_TAG = "currency"
PRICE_TABLE_TAG = "price-table"
AMOUNT_TAG = "amount"

PRICEBOOK_ID_ATTR = "pricebook-id"
PRODUCT_ID_ATTR = "product-id"


class ActiveField(Enum):
    NONE = "none"
    CURRENCY = "currency"
    AMOUNT = "amount"


@dataclass
class BaseFields:
    price_book_id: Optional[str] = None
    currency: Optional[str] = None


@dataclass(frozen=True)
class Row:
    price_book_id: Optional[str]
    currency: Optional[str]
    product_id: Optional[str]
    amount: Optional[str] = None

    def values(self) -> Tuple[Optional[str], ...]:
        return (self.price_book_id, self.currency, self.product_id, self.amount)


def is_blank(text: str) -> bool:
    return not text or not text.strip()


class RowAccumulator:
    """
    State machine over tag events. One instance per document.

    With strict=False the accumulator never raises: missing attributes become
    None and odd orderings only produce warnings. With strict=True the two
    ordering problems below raise OutOfOrderDocument instead:
      - a <price-table> opening before the header id and currency were seen
      - a <price-table> opening while the previous one still waits for its amount
    """

    def __init__(self, strict: bool = False):
        self.strict = strict
        self.base_fields = BaseFields()
        self.pending: Optional[Row] = None
        self.state = ActiveField.NONE
        self.rows: List[Row] = []
        self._warned_missing_base = False

    # -- open handlers, chosen by element name ------------------------------

    def _open_header(self, event: ElementOpened):
        self.base_fields.price_book_id = event.attributes.get(PRICEBOOK_ID_ATTR)

    def _open_currency(self, event: ElementOpened):
        self.state = ActiveField.CURRENCY

    def _open_price_table(self, event: ElementOpened):
        product_id = event.attributes.get(PRODUCT_ID_ATTR)
        base = self.base_fields

        if base.price_book_id is None or base.currency is None:
            if self.strict:
                raise OutOfOrderDocument(
                    f"price-table for product {product_id!r} opened before "
                    f"the price book id and currency were declared"
                )
            if not self._warned_missing_base:
                logger.warning(
                    "price-table for product %r opened with pricebook-id=%r currency=%r; "
                    "rows keep these values",
                    product_id, base.price_book_id, base.currency,
                )
                self._warned_missing_base = True

        if self.pending is not None:
            if self.strict:
                raise OutOfOrderDocument(
                    f"price-table for product {product_id!r} opened while product "
                    f"{self.pending.product_id!r} is still waiting for its amount"
                )
            logger.warning("Dropping product %r: no amount before the next price-table", self.pending.product_id)

        self.pending = Row(base.price_book_id, base.currency, product_id)
        self.state = ActiveField.NONE

    def _open_amount(self, event: ElementOpened):
        # an <amount> outside a pending price-table routes nothing
        if self.pending is not None:
            self.state = ActiveField.AMOUNT

    # -- per-state handlers ------------------------------------------------

    def _open(self, event: ElementOpened):
        handler = OPEN_HANDLERS.get(event.name)
        if handler is not None:
            handler(self, event)

    def _ignore(self, event: TagEvent):
        pass

    def _set_currency(self, event: Text):
        self.base_fields.currency = event.content

    def _finalize_row(self, event: Text):
        if self.pending is None:
            self.state = ActiveField.NONE
            return
        self.rows.append(replace(self.pending, amount=event.content))
        self.pending = None
        self.state = ActiveField.NONE

    def _close_currency(self, event: ElementClosed):
        if event.name == CURRENCY_TAG:
            self.state = ActiveField.NONE

    def _close_amount(self, event: ElementClosed):
        # an empty <amount/> leaves the row pending
        if event.name == AMOUNT_TAG:
            self.state = ActiveField.NONE

    # -- driving -----------------------------------------------------------

    def feed(self, event: TagEvent):
        if isinstance(event, Text) and is_blank(event.content):
            return
        handler = TRANSITIONS[(self.state, type(event))]
        handler(self, event)

    def finish(self) -> List[Row]:
        if self.pending is not None:
            logger.debug("Discarding product %r: document ended before its amount", self.pending.product_id)
            self.pending = None
        return list(self.rows)


OPEN_HANDLERS: Dict[str, Callable[[RowAccumulator, ElementOpened], None]] = {
    HEADER_TAG: RowAccumulator._open_header,
    CURRENCY_TAG: RowAccumulator._open_currency,
    PRICE_TABLE_TAG: RowAccumulator._open_price_table,
    AMOUNT_TAG: RowAccumulator._open_amount,
}

# (active field, event kind) -> effect. Blank text never reaches the table.
TRANSITIONS: Dict[Tuple[ActiveField, type], Callable] = {
    (ActiveField.NONE, ElementOpened): RowAccumulator._open,
    (ActiveField.NONE, Text): RowAccumulator._ignore,
    (ActiveField.NONE, ElementClosed): RowAccumulator._ignore,
    (ActiveField.CURRENCY, ElementOpened): RowAccumulator._open,
    (ActiveField.CURRENCY, Text): RowAccumulator._set_currency,
    (ActiveField.CURRENCY, ElementClosed): RowAccumulator._close_currency,
    (ActiveField.AMOUNT, ElementOpened): RowAccumulator._open,
    (ActiveField.AMOUNT, Text): RowAccumulator._finalize_row,
    (ActiveField.AMOUNT, ElementClosed): RowAccumulator._close_amount,
}


def accumulate_rows(events: Iterable[TagEvent], strict: bool = False) -> List[Row]:
    acc = RowAccumulator(strict=strict)
    for event in events:
        acc.feed(event)
    return acc.finish()
