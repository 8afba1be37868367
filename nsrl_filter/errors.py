# ==================================================
# nsrl_filter/errors.py
# ==================================================
from __future__ import annotations

import os
from typing import Optional


class NsrlError(Exception):
    """Base class for everything the core raises."""


class ConfigError(NsrlError, ValueError):
    pass


class UnsupportedHashKindError(ConfigError):
    def __init__(self, name: str):
        super().__init__(f"hash type {name} not supported")
        self.name = name


class ArtifactError(NsrlError):
    """Dataset or persisted artifact is missing, truncated or undecodable."""

    def __init__(self, message: str, path: Optional[str | os.PathLike] = None):
        if path is not None:
            message = f"{message}: {path}"
        super().__init__(message)
        self.path = path


class ArtifactMismatchError(ArtifactError):
    pass


class MalformedRecordError(NsrlError):
    def __init__(self, message: str, line_no: int):
        super().__init__(f"line {line_no}: {message}")
        self.line_no = line_no


class MalformedQueryError(NsrlError, ValueError):
    pass
