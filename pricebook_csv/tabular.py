"""
CSV rendering for price book rows.

Fields are joined as-is: no quoting, no escaping. A value that itself holds a
comma or a newline will shift the columns of its line; such values are only
reported at DEBUG level.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from .accumulator import Row

logger = logging.getLogger(__name__)

CSV_HEADER = ("Price Book ID", "Currency", "Product Id", "Amount")

FIELD_SEPARATOR = ","
ROW_SEPARATOR = "\n"


def render_field(value: Optional[str]) -> str:
    if value is None:
        return ""
    if FIELD_SEPARATOR in value or ROW_SEPARATOR in value:
        logger.debug("Value %r contains a separator and will split its CSV line", value)
    return value


def render_line(values: Iterable[Optional[str]]) -> str:
    return FIELD_SEPARATOR.join(render_field(v) for v in values)


def render_rows(rows: Iterable[Row], header: Sequence[str] = CSV_HEADER) -> str:
    """
    Header line first, then one line per row in the given order.
    Lines are joined with ROW_SEPARATOR; there is no trailing newline.
    """
    lines = [render_line(header)]
    lines.extend(render_line(row.values()) for row in rows)
    return ROW_SEPARATOR.join(lines)
