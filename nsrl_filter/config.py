# ==================================================
# nsrl_filter/config.py
# ==================================================
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .const import (BLOOM_FILENAME, DATASET_FILENAME, DEFAULT_DB,
                    DEFAULT_ERROR_RATE, LINECOUNT_FILENAME)
from .errors import ConfigError
from .hashkind import HashKind

ENV_HASH_TYPE  = "NSRL_HASH_TYPE"
ENV_ERROR_RATE = "NSRL_ERROR_RATE"
ENV_DB         = "NSRL_DB"


@dataclass(frozen=True)
class FilterConfig:
    """Settings shared by FilterBuilder and QueryEngine for one filter."""
    hash_kind: HashKind = HashKind.SHA1
    error_rate: float = DEFAULT_ERROR_RATE
    db: Path = Path(DEFAULT_DB)
    encoding: str = "utf-8"

    def __post_init__(self):
        # frozen: coerce through object.__setattr__
        object.__setattr__(self, "hash_kind", HashKind.from_name(self.hash_kind))
        object.__setattr__(self, "db", Path(self.db))
        try:
            rate = float(self.error_rate)
        except (TypeError, ValueError):
            raise ConfigError(f"error rate {self.error_rate!r} is not a number") from None
        if not 0.0 < rate < 1.0:
            raise ConfigError(f"error rate must be in (0, 1), got {rate}")
        object.__setattr__(self, "error_rate", rate)

    # ------------------------------------------------------------------
    @classmethod
    def from_env(cls, **overrides) -> FilterConfig:
        """Environment first, explicit (non-None) keyword overrides win."""
        values = {
            "hash_kind":  os.getenv(ENV_HASH_TYPE,  HashKind.SHA1.label),
            "error_rate": os.getenv(ENV_ERROR_RATE, str(DEFAULT_ERROR_RATE)),
            "db":         os.getenv(ENV_DB,         DEFAULT_DB),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    # -- derived paths -----------------------------------------------------
    @property
    def dataset_path(self) -> Path:
        return self.db / DATASET_FILENAME

    @property
    def linecount_path(self) -> Path:
        return self.db / LINECOUNT_FILENAME

    @property
    def bloom_path(self) -> Path:
        return self.db / BLOOM_FILENAME
