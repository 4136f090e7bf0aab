"""
INPUT SOURCES
-------------
Gets the raw bytes of a price book export from a local file or an http(s) URL.
Nothing here parses XML; the pipeline does that.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import Iterable, Optional
from urllib.parse import urlparse

import requests

from .errors import InvalidInputKind, UnreadableInput

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"User-Agent": "PricebookCsv/1.0 (+https://example.com/contact)"}
DEFAULT_TIMEOUT = 25
XML_EXTENSIONS = (".xml",)


@dataclass(frozen=True)
class InputDocument:
    content: bytes
    name: str


def is_url(location: str) -> bool:
    return urlparse(location).scheme in ("http", "https")


def source_name(location: str) -> str:
    """Last path segment of a file path or URL."""
    if is_url(location):
        return urlparse(location).path.rstrip("/").split("/")[-1]
    return Path(location).name


def check_input_kind(name: str, allowed_extensions: Iterable[str] = XML_EXTENSIONS):
    suffix = PurePath(name).suffix.lower()
    allowed = {ext.lower() for ext in allowed_extensions}
    if suffix not in allowed:
        raise InvalidInputKind(f"{name!r} is not a price book export (expected {', '.join(sorted(allowed))})")


def fetch(url: str, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    r = requests.get(url, headers=DEFAULT_HEADERS, timeout=timeout)
    r.raise_for_status()
    return r.content


def read_source(location: str, timeout: float = DEFAULT_TIMEOUT, max_bytes: Optional[int] = None) -> InputDocument:
    """
    Read a whole document into memory.

    Raises:
        UnreadableInput: on any I/O or HTTP failure, or when the document is
            larger than max_bytes
    """
    try:
        if is_url(location):
            content = fetch(location, timeout=timeout)
        else:
            content = Path(location).expanduser().read_bytes()
    except requests.RequestException as e:
        raise UnreadableInput(f"Cannot fetch {location}: {e}") from e
    except OSError as e:
        raise UnreadableInput(f"Cannot read {location}: {e}") from e

    logger.debug("Read %d bytes from %s", len(content), location)

    if max_bytes is not None and len(content) > max_bytes:
        raise UnreadableInput(f"{location} is {len(content)} bytes, limit is {max_bytes}")

    return InputDocument(content=content, name=source_name(location))
