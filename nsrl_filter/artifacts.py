# ==================================================
# nsrl_filter/artifacts.py
# ==================================================
"""
Read/write the persisted artifact pair.

    LINECOUNT   8 bytes, u64 little-endian: line count seen at build time
    nsrl.bloom  serialized Bloom (see Bloom.to_bytes)

The pair is a unit: the filter was provisioned for exactly the count in
LINECOUNT. There is no rollback, so a crashed build can leave a fresh
LINECOUNT next to a stale (or missing) nsrl.bloom; load_artifacts() catches
the sizing mismatch.
"""
from __future__ import annotations

import logging
import os
import struct
from pathlib import Path
from typing import Tuple

from .bloom import Bloom
from .config import FilterConfig
from .const import COUNT_FMT, COUNT_SIZE
from .errors import ArtifactError, ArtifactMismatchError

logger = logging.getLogger(__name__)


# -------- record count ----------------------------------------------------
def write_record_count(path: str | os.PathLike, count: int):
    Path(path).write_bytes(struct.pack(COUNT_FMT, count))
    logger.debug("wrote record count %d to %s", count, path)

def read_record_count(path: str | os.PathLike) -> int:
    try:
        with open(path, "rb") as f:
            raw = f.read(COUNT_SIZE)
    except FileNotFoundError:
        raise ArtifactError("record count not found", path) from None
    if len(raw) < COUNT_SIZE:
        raise ArtifactError(f"record count truncated ({len(raw)} of {COUNT_SIZE} bytes)", path)
    return struct.unpack(COUNT_FMT, raw)[0]


# -------- filter blob -----------------------------------------------------
def write_filter(path: str | os.PathLike, bloom: Bloom):
    blob = bloom.to_bytes()
    Path(path).write_bytes(blob)
    logger.debug("wrote bloom filter (%d bytes on disk, %d bits) to %s",
                 len(blob), bloom.m, path)

def read_filter(path: str | os.PathLike) -> Bloom:
    try:
        data = Path(path).read_bytes()
    except FileNotFoundError:
        raise ArtifactError("bloom filter not found", path) from None
    try:
        return Bloom.from_bytes(data)
    except ArtifactError as e:
        raise ArtifactError(str(e), path) from e


# ----------------------------------------------------------------------
def load_artifacts(config: FilterConfig) -> Tuple[int, Bloom]:
    count = read_record_count(config.linecount_path)
    logger.debug("Number of lines in %s: %d", config.dataset_path.name, count)
    bloom = read_filter(config.bloom_path)
    if bloom.n_items != count:
        raise ArtifactMismatchError(
            f"filter was sized for {bloom.n_items} items but LINECOUNT says {count}",
            config.db)
    return count, bloom
