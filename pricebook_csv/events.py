"""
TAG EVENTS
----------
Walks a price book XML document and yields a flat, typed sequence of
open / text / close events in document order.

The walker is an lxml feed parser with a collecting target: the document is
fed in chunks and whatever the target gathered is handed out before the next
chunk goes in, so callers pull events one by one instead of registering
callbacks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Union

from lxml import etree

from .errors import MalformedDocument

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class ElementOpened:
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class ElementClosed:
    name: str


TagEvent = Union[ElementOpened, Text, ElementClosed]


def local_name(tag: str) -> str:
    """'{http://www.demandware.com/...}price-table' -> 'price-table'"""
    if tag and tag[0] == "{":
        return tag.rsplit("}", 1)[1]
    return tag


class _CollectingTarget:
    """lxml parser target that buffers events until the reader drains them."""

    def __init__(self):
        self.events: List[TagEvent] = []
        self.seen_root = False
        self._text: List[str] = []

    def _flush_text(self):
        if self._text:
            self.events.append(Text("".join(self._text)))
            self._text = []

    def start(self, tag, attrib):
        self._flush_text()
        self.seen_root = True
        attrs = {local_name(k): v for k, v in attrib.items()}
        self.events.append(ElementOpened(local_name(tag), attrs))

    def data(self, data):
        self._text.append(data)

    def end(self, tag):
        self._flush_text()
        self.events.append(ElementClosed(local_name(tag)))

    def close(self):
        self._flush_text()

    def drain(self) -> List[TagEvent]:
        out, self.events = self.events, []
        return out


def iter_events(document: Union[bytes, str], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[TagEvent]:
    """
    Yield tag events for `document`.

    Bytes are handed to libxml2 untouched so the XML declaration picks the
    encoding; text is encoded as UTF-8 and parsed as such.

    Raises:
        MalformedDocument: if the markup is not well formed (the error is
            raised at the point of the walk where it was detected)
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    parser_kwargs = {}
    if isinstance(document, str):
        document = document.encode("utf-8")
        parser_kwargs["encoding"] = "utf-8"

    target = _CollectingTarget()
    parser = etree.XMLParser(
        target=target,
        resolve_entities=False,
        no_network=True,
        huge_tree=True,
        **parser_kwargs,
    )

    try:
        for start in range(0, len(document), chunk_size):
            parser.feed(document[start:start + chunk_size])
            yield from target.drain()
        parser.close()
        if not target.seen_root:
            # empty, blank or non-markup input never opened an element
            raise MalformedDocument("document has no root element")
    except etree.XMLSyntaxError as e:
        logger.debug("XML syntax error: %s", e)
        raise MalformedDocument(f"Cannot parse price book XML: {e}") from e

    yield from target.drain()
