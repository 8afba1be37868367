# ==================================================
# nsrl_filter/engine.py
# ==================================================
from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Optional, Tuple, Union

from .artifacts import load_artifacts
from .bloom import Bloom
from .config import FilterConfig
from .errors import MalformedQueryError
from .hashkind import HashKind
from .result import LookupResult

logger = logging.getLogger(__name__)

Line = Union[bytes, str]

_SEP = re.compile(rb"[\t ]")


class QueryEngine:
    """Answers membership queries against a loaded, read-only Bloom.

    Nothing here mutates the filter, so one engine (or one Bloom shared by
    several engines) can serve concurrent readers without locking.
    """

    def __init__(self, bloom: Bloom, config: Optional[FilterConfig] = None):
        self.bloom = bloom
        self.config = config or FilterConfig()

    @classmethod
    def load(cls, config: FilterConfig) -> QueryEngine:
        _, bloom = load_artifacts(config)
        if bloom.column is not None and bloom.column != config.hash_kind.column:
            logger.warning("filter was built from the %s column but queries are %s; "
                           "lookups will not match", built_label(bloom), config.hash_kind.label)
        return cls(bloom, config)

    # -- helpers -----------------------------------------------------------
    def _bytes(self, value: Line) -> bytes:
        if isinstance(value, str):
            return value.encode(self.config.encoding, "surrogateescape")
        return bytes(value)

    def _text(self, value: bytes) -> str:
        return value.decode(self.config.encoding, "replace")

    # ----------------------------------------------------------------------
    def lookup(self, value: Line, filename: Line = "") -> LookupResult:
        key = self._bytes(value).upper()
        return LookupResult(
            found=key in self.bloom,
            hash=self._text(key),
            filename=filename if isinstance(filename, str) else self._text(filename),
        )

    def parse_line(self, line: Line) -> Tuple[bytes, bytes]:
        """Split `<HASH><space|tab><LABEL>` into (uppercased hash, trimmed label)."""
        raw = self._bytes(line).rstrip(b"\r\n")
        m = _SEP.search(raw)
        if m is None or m.start() < 1:
            raise MalformedQueryError(
                f"please supply a valid {self.config.hash_kind.label.upper()} "
                f"hash and filename ({self._text(raw)})")
        i = m.start()
        return raw[:i].upper(), raw[i:].strip()

    def stream(self, lines: Iterable[Line]) -> Iterator[LookupResult]:
        """One result per well-formed line, in input order; bad lines are skipped."""
        for line in lines:
            try:
                key, label = self.parse_line(line)
            except MalformedQueryError as e:
                logger.warning("%s", e)
                continue
            yield self.lookup(key, label)

    def check(self, hashes: Iterable[Line]) -> Iterator[LookupResult]:
        for value in hashes:
            yield self.lookup(value)


def built_label(bloom: Bloom) -> str:
    """Hash kind recorded in the filter blob, or "unknown"."""
    try:
        return HashKind(bloom.column).label
    except ValueError:
        return "unknown"
