from .bloom import Bloom
from .builder import BuildReport, FilterBuilder
from .config import FilterConfig
from .engine import QueryEngine
from .errors import (ArtifactError, ArtifactMismatchError, ConfigError,
                     MalformedQueryError, MalformedRecordError, NsrlError,
                     UnsupportedHashKindError)
from .hashkind import HashKind
from .result import LookupResult

__all__ = [
    "Bloom", "BuildReport", "FilterBuilder", "FilterConfig", "QueryEngine",
    "HashKind", "LookupResult",
    "NsrlError", "ConfigError", "UnsupportedHashKindError", "ArtifactError",
    "ArtifactMismatchError", "MalformedRecordError", "MalformedQueryError",
]
