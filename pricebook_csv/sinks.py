"""Where finished CSV text goes: a directory on disk or an open text stream."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import List, TextIO

logger = logging.getLogger(__name__)


class DirectorySink:
    """
    Writes each CSV to `output_dir / output_name`.

    The text goes to a temporary file next to the target first and is moved
    into place only once fully written, so a failed write leaves no CSV behind.
    """

    def __init__(self, output_dir):
        self.output_dir = Path(output_dir)
        self.written: List[Path] = []

    def __call__(self, text: str, output_name: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / output_name

        fd, tmp_name = tempfile.mkstemp(dir=self.output_dir, prefix=f".{output_name}.", suffix=".tmp")
        try:
            with open(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        self.written.append(path)
        logger.debug("Wrote %s", path)
        return path


class StreamSink:
    def __init__(self, stream: TextIO):
        self.stream = stream

    def __call__(self, text: str, output_name: str):
        self.stream.write(text)
        self.stream.write("\n")
        self.stream.flush()
