# ==================================================
# nsrl_filter/builder.py
# ==================================================
from __future__ import annotations

import csv
import io
import logging
import time
from dataclasses import dataclass

from .artifacts import write_filter, write_record_count
from .bloom import Bloom
from .config import FilterConfig
from .const import BATCH_SIZE
from .counter import count_lines
from .errors import ArtifactError, MalformedRecordError

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    line_count: int
    rows_inserted: int
    bits: int
    hash_functions: int
    elapsed: float


class FilterBuilder:
    """
    Two-pass build of the NSRL bloom filter.

      pass 1  count raw newlines in NSRLFile.txt, write LINECOUNT
      pass 2  stream rows, insert the configured column into a Bloom sized
              from that count, write nsrl.bloom

    The count includes the header line, same as the LINECOUNT files written
    by earlier tooling, so the filter is provisioned for one more item than
    there are data rows.
    """

    def __init__(self, config: FilterConfig, batch_size: int = BATCH_SIZE):
        self.config = config
        self.batch_size = max(1, batch_size)

    def build(self) -> BuildReport:
        cfg = self.config
        started = time.perf_counter()
        try:
            f = open(cfg.dataset_path, "rb")
        except OSError as e:
            raise ArtifactError(f"cannot open dataset ({e.strerror})", cfg.dataset_path) from e

        with f:
            lines = count_lines(f)
            logger.debug("Number of lines in %s: %d", cfg.dataset_path.name, lines)
            write_record_count(cfg.linecount_path, lines)

            bloom = Bloom(lines, cfg.error_rate, column=cfg.hash_kind.column)
            logger.debug("Sized %r", bloom)

            f.seek(0)
            logger.debug("Loading %s column of %s into bloomfilter",
                         cfg.hash_kind.label, cfg.dataset_path.name)
            inserted = self._insert_rows(f, bloom)

        logger.debug("Writing bloomfilter to disk")
        write_filter(cfg.bloom_path, bloom)

        report = BuildReport(
            line_count=lines,
            rows_inserted=inserted,
            bits=bloom.m,
            hash_functions=bloom.k,
            elapsed=time.perf_counter() - started,
        )
        logger.info("Built %s filter from %d rows in %.2fs",
                    cfg.hash_kind.label, inserted, report.elapsed)
        return report

    # ------------------------------------------------------------------
    def _insert_rows(self, stream, bloom: Bloom) -> int:
        encoding = self.config.encoding
        column = self.config.hash_kind.column
        text = io.TextIOWrapper(stream, encoding=encoding, errors="surrogateescape", newline="")
        reader = csv.reader(text, strict=True)
        batch: list[bytes] = []
        inserted = 0
        try:
            header = next(reader, None)     # strip off csv header
            fields = len(header) if header else None
            for row in reader:
                if not row:
                    continue
                if fields is not None and len(row) != fields:
                    raise MalformedRecordError(
                        f"wrong number of fields: expected {fields}, got {len(row)}",
                        reader.line_num)
                if len(row) <= column:
                    raise MalformedRecordError(
                        f"expected at least {column + 1} fields, got {len(row)}",
                        reader.line_num)
                # raw bytes of the field, ASCII-uppercased like query hashes
                batch.append(row[column].encode(encoding, "surrogateescape").upper())
                if len(batch) >= self.batch_size:
                    bloom.update(batch)
                    inserted += len(batch)
                    batch.clear()
        except csv.Error as e:
            raise MalformedRecordError(str(e), reader.line_num) from e
        finally:
            # hand the binary stream back to the caller's `with`
            text.detach()

        bloom.update(batch)
        return inserted + len(batch)
