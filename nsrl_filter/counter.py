# ==================================================
# nsrl_filter/counter.py
# ==================================================
from __future__ import annotations

import os
from typing import BinaryIO

from .const import CHUNK_SIZE
from .errors import ArtifactError


def count_lines(stream: BinaryIO, chunk_size: int = CHUNK_SIZE) -> int:
    """
    Count b"\\n" bytes from the current position to EOF.

    • reads at most `chunk_size` bytes at a time, never the whole stream
    • a final line with no trailing newline is NOT counted; this is raw
      newline counting, so such a file is undercounted by one
    • read errors propagate unchanged
    """
    count = 0
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return count
        count += chunk.count(b"\n")


def count_file_lines(path: str | os.PathLike, chunk_size: int = CHUNK_SIZE) -> int:
    try:
        with open(path, "rb") as f:
            return count_lines(f, chunk_size)
    except FileNotFoundError:
        raise ArtifactError("file not found", path) from None
