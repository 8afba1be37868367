# ==================================================
# nsrl_filter/hashkind.py
# ==================================================
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .errors import UnsupportedHashKindError

logger = logging.getLogger(__name__)


class HashKind(Enum):
    """NSRLFile.txt column selected for a build / lookup session.

    The value is the zero-based column in the dataset row schema. The
    mapping is part of the artifact format: a filter built for one column
    can only answer queries for that same column.
    """
    SHA1           = 0
    MD5            = 1
    CRC32          = 2
    FILENAME       = 3
    FILESIZE       = 4
    PRODUCT_CODE   = 5
    OP_SYSTEM_CODE = 6
    SPECIAL_CODE   = 7

    @property
    def column(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_name(cls, name: str | HashKind) -> HashKind:
        if isinstance(name, cls):
            return name
        key = _normalize(name)
        try:
            return _BY_NAME[key]
        except KeyError:
            raise UnsupportedHashKindError(name) from None

    @classmethod
    def names(cls) -> list[str]:
        return [k.label for k in cls]


_LABELS = {
    HashKind.SHA1:           "sha1",
    HashKind.MD5:            "md5",
    HashKind.CRC32:          "crc32",
    HashKind.FILENAME:       "filename",
    HashKind.FILESIZE:       "filesize",
    HashKind.PRODUCT_CODE:   "productCode",
    HashKind.OP_SYSTEM_CODE: "opSystemCode",
    HashKind.SPECIAL_CODE:   "specialCode",
}

def _normalize(name: str) -> str:
    # "SHA-1", "OpSystemCode", "op_system_code" all fold to the same key
    return "".join(ch for ch in str(name).lower() if ch.isalnum())

_BY_NAME = {_normalize(label): kind for kind, label in _LABELS.items()}
_BY_NAME.update({_normalize(kind.name): kind for kind in HashKind})


def column_for(name: str) -> Optional[int]:
    """Column index for `name`, or None (with a warning) if unsupported.

    Prefer HashKind.from_name() wherever an unknown kind should stop the
    operation; this is for callers that pick their own fallback.
    """
    try:
        return HashKind.from_name(name).column
    except UnsupportedHashKindError as e:
        logger.warning("%s", e)
        return None
