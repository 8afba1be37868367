# ==================================================
# nsrl_filter/const.py
# ==================================================
import struct

# -------- artifact layout (all siblings under the db directory) -----------
DATASET_FILENAME   = "NSRLFile.txt"
LINECOUNT_FILENAME = "LINECOUNT"
BLOOM_FILENAME     = "nsrl.bloom"
DEFAULT_DB         = "db"

DEFAULT_ERROR_RATE = 0.001
CHUNK_SIZE         = 32 * 1024      # line-counter read buffer
BATCH_SIZE         = 65_536         # keys per Bloom.update() during build

COUNT_FMT  = "<Q"                   # LINECOUNT: u64 little-endian
COUNT_SIZE = struct.calcsize(COUNT_FMT)

# -------- filter blob -----------------------------------------------------
MAGIC       = b"NSB1"               # 4-byte magic + format major «1»
VERSION     = 2
HEADER_FMT  = "<4sHHHQQQd"          # magic, version, column, k, m (bits), n_items, count, fp_rate
HEADER_SIZE = struct.calcsize(HEADER_FMT)   # 46 bytes
NO_COLUMN   = 0xFFFF                # filter not tied to a dataset column
ZSTD_LEVEL  = 3
