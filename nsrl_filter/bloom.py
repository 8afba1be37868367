# ==================================================
# nsrl_filter/bloom.py
# ==================================================
from __future__ import annotations

import struct
from math import ceil, exp, log
from typing import Iterable, Optional

import numpy as np
import xxhash

from .compression import pack_bits, unpack_bits
from .const import HEADER_FMT, HEADER_SIZE, MAGIC, NO_COLUMN, VERSION
from .errors import ArtifactError, ConfigError

_BIT = np.array([1 << i for i in range(8)], dtype=np.uint8)
_THREE = np.uint64(3)
_SEVEN = np.uint64(7)
_POPCOUNT_CHUNK = 1 << 20


def _split(pos: np.ndarray):
    """Bit positions -> (byte index, bit mask) arrays."""
    return (pos >> _THREE).astype(np.intp), _BIT[(pos & _SEVEN).astype(np.intp)]


class Bloom:
    """Fixed-size bloom filter over opaque byte keys.

    Sized once from the expected item count and target false-positive rate.
    Inserting more than `n_items` keys never grows the bit array; it only
    pushes the real false-positive rate above `fp_rate`.
    """

    def __init__(self, n_items: int, fp_rate: float = 0.001, bits: Optional[np.ndarray] = None,
                 column: Optional[int] = None):
        self.n_items = int(n_items)
        self.fp_rate = float(fp_rate)
        if not 0.0 < self.fp_rate < 1.0:
            raise ConfigError(f"fp_rate must be in (0, 1), got {fp_rate}")
        if self.n_items < 0:
            raise ConfigError(f"n_items must be >= 0, got {n_items}")
        self.column = column      # dataset column the keys came from, if any
        n = max(1, self.n_items)      # empty dataset still gets a valid filter
        m = ceil(-(n * log(fp_rate)) / (log(2) ** 2))
        k = ceil((m / n) * log(2))

        self.m = m
        self.k = k
        self.count = 0
        self.bits = bits if bits is not None else np.zeros((m + 7) // 8, dtype=np.uint8)

    # -- hashing helpers ---------------------------------------------------
    def _offsets(self) -> np.ndarray:
        return np.arange(self.k, dtype=np.uint64)

    def _positions(self, key: bytes) -> np.ndarray:
        h1, h2 = struct.unpack("<QQ", xxhash.xxh3_128_digest(key))
        return (np.uint64(h1) + self._offsets() * np.uint64(h2 | 1)) % np.uint64(self.m)

    def _positions_many(self, keys: list[bytes]) -> np.ndarray:
        digests = b"".join(xxhash.xxh3_128_digest(key) for key in keys)
        halves = np.frombuffer(digests, dtype="<u8").reshape(-1, 2)
        h1 = halves[:, 0:1]
        h2 = halves[:, 1:2] | np.uint64(1)
        return ((h1 + self._offsets() * h2) % np.uint64(self.m)).ravel()

    # ----------------------------------------------------------------------
    def add(self, key: bytes):
        self.update((key,))

    def update(self, keys: Iterable[bytes]):
        """Insert a batch of keys with one vectorized bit update."""
        keys = list(keys)
        if not keys:
            return
        pos = self._positions_many(keys)
        idx, mask = _split(pos)
        np.bitwise_or.at(self.bits, idx, mask)
        self.count += len(keys)

    def __contains__(self, key: bytes) -> bool:
        pos = self._positions(key)
        idx, mask = _split(pos)
        return bool(np.all(self.bits[idx] & mask))

    def __len__(self) -> int:
        return self.count

    # -- observability -----------------------------------------------------
    @property
    def bits_set(self) -> int:
        total = 0
        for off in range(0, len(self.bits), _POPCOUNT_CHUNK):
            total += int(np.unpackbits(self.bits[off:off + _POPCOUNT_CHUNK]).sum())
        return total

    @property
    def fill_ratio(self) -> float:
        return self.bits_set / self.m

    def estimated_items(self) -> float:
        """Swamidass & Baldi cardinality estimate from the fill ratio."""
        x = self.bits_set
        if x >= self.m:
            return float("inf")
        return -(self.m / self.k) * log(1 - x / self.m)

    def estimated_fp_rate(self) -> float:
        if self.count == 0:
            return 0.0
        return (1 - exp(-self.k * self.count / self.m)) ** self.k

    # -- (de)serialization -------------------------------------------------
    def to_bytes(self) -> bytes:
        column = NO_COLUMN if self.column is None else self.column
        header = struct.pack(HEADER_FMT, MAGIC, VERSION, column, self.k, self.m,
                             self.n_items, self.count, self.fp_rate)
        return header + pack_bits(self.bits)

    @classmethod
    def from_bytes(cls, data: bytes) -> Bloom:
        if len(data) < HEADER_SIZE:
            raise ArtifactError(f"bloom blob truncated ({len(data)} bytes)")
        magic, version, column, k, m, n_items, count, fp_rate = struct.unpack_from(HEADER_FMT, data, 0)
        if magic != MAGIC:
            raise ArtifactError("invalid bloom blob (bad magic)")
        if version != VERSION:
            raise ArtifactError(f"unsupported bloom blob version {version}")
        if not 0.0 < fp_rate < 1.0 or m == 0 or k == 0:
            raise ArtifactError("invalid bloom blob (bad sizing parameters)")
        bits = unpack_bits(data[HEADER_SIZE:], (m + 7) // 8)
        bloom = cls(n_items, fp_rate, bits, None if column == NO_COLUMN else column)
        bloom.m, bloom.k, bloom.count = m, k, count
        return bloom

    def __eq__(self, other) -> bool:
        if not isinstance(other, Bloom):
            return NotImplemented
        return (self.m, self.k, self.n_items) == (other.m, other.k, other.n_items) \
            and np.array_equal(self.bits, other.bits)

    def __repr__(self) -> str:
        return (f"Bloom(n_items={self.n_items}, fp_rate={self.fp_rate}, "
                f"m={self.m}, k={self.k}, count={self.count}, column={self.column})")
