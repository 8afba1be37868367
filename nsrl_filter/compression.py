# ==================================================
# nsrl_filter/compression.py
# ==================================================
import numpy as np
import zstandard as zstd

from .const import ZSTD_LEVEL
from .errors import ArtifactError

# -------- bloom payload codec ---------------------------------------------
# zstd frame carries content size + checksum; a damaged payload raises ArtifactError

cctx = zstd.ZstdCompressor(level=ZSTD_LEVEL, write_checksum=True)
dctx = zstd.ZstdDecompressor()

def pack_bits(bits: np.ndarray) -> bytes:
    return cctx.compress(bits.tobytes())

def unpack_bits(payload: bytes, n_bytes: int) -> np.ndarray:
    """Decode a bit-array payload that must hold exactly `n_bytes` bytes."""
    try:
        raw = dctx.decompress(payload)
    except zstd.ZstdError as e:
        raise ArtifactError(f"corrupt bloom payload ({e})") from e
    if len(raw) != n_bytes:
        raise ArtifactError(f"bloom payload is {len(raw)} bytes, header says {n_bytes}")
    return np.frombuffer(raw, dtype=np.uint8).copy()
