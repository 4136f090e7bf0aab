"""
PIPELINE
--------
XML text -> tag events -> rows -> CSV text -> sink.

`PipelineDriver` runs one conversion at a time. A request that arrives while
another is running gets a BUSY outcome back; the lock is released after every
attempt, whether it succeeded or not.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Callable, List, Optional, Union

from .accumulator import Row, accumulate_rows
from .errors import ConversionError
from .events import DEFAULT_CHUNK_SIZE, iter_events
from .tabular import render_rows

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = "output.csv"

XML_SUFFIX_RE = re.compile(r"\.xml$", re.IGNORECASE)

Sink = Callable[[str, str], object]


def parse_document(
    document: Union[bytes, str],
    strict: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> List[Row]:
    return accumulate_rows(iter_events(document, chunk_size=chunk_size), strict=strict)


def convert_document(
    document: Union[bytes, str],
    strict: bool = False,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    """Parse the whole document first; render only once parsing succeeded."""
    rows = parse_document(document, strict=strict, chunk_size=chunk_size)
    return render_rows(rows)


def output_name_for(base_name: Optional[str], default: str = DEFAULT_OUTPUT_NAME) -> str:
    """
    'pricebook-usd.xml' -> 'pricebook-usd.csv'
    anything else       -> default
    """
    if not base_name:
        return default
    name = PurePath(base_name.replace("\\", "/")).name
    if XML_SUFFIX_RE.search(name) and len(name) > len(".xml"):
        return XML_SUFFIX_RE.sub(".csv", name)
    return default


class ConversionStatus(Enum):
    COMPLETED = "completed"
    BUSY = "busy"
    FAILED = "failed"


@dataclass(frozen=True)
class ConversionOutcome:
    status: ConversionStatus
    output_name: Optional[str] = None
    row_count: int = 0
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.status is ConversionStatus.COMPLETED

    @property
    def message(self) -> str:
        if self.status is ConversionStatus.FAILED:
            return "Conversion failed"
        if self.status is ConversionStatus.BUSY:
            return "Conversion already in progress"
        return ""


class PipelineDriver:
    def __init__(
        self,
        sink: Sink,
        strict: bool = False,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        default_output_name: str = DEFAULT_OUTPUT_NAME,
    ):
        self.sink = sink
        self.strict = strict
        self.chunk_size = chunk_size
        self.default_output_name = default_output_name
        self._lock = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def convert(self, document: Union[bytes, str], base_name: Optional[str] = None) -> ConversionOutcome:
        if not self._lock.acquire(blocking=False):
            logger.info("Rejected %r: another conversion is in progress", base_name)
            return ConversionOutcome(ConversionStatus.BUSY)

        try:
            output_name = output_name_for(base_name, self.default_output_name)
            try:
                rows = parse_document(document, strict=self.strict, chunk_size=self.chunk_size)
                text = render_rows(rows)
                self.sink(text, output_name)
            except (ConversionError, OSError) as e:
                logger.error("Converting %r failed: %s", base_name, e)
                return ConversionOutcome(ConversionStatus.FAILED, output_name=output_name, error=e)

            logger.info("Converted %r: %d rows -> %s", base_name, len(rows), output_name)
            return ConversionOutcome(ConversionStatus.COMPLETED, output_name=output_name, row_count=len(rows))
        finally:
            self._lock.release()
