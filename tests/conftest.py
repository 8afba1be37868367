import hashlib

import pytest

from nsrl_filter import FilterConfig

HEADER = "SHA-1,MD5,CRC32,FileName,FileSize,ProductCode,OpSystemCode,SpecialCode"


def nsrl_row(i):
    blob = f"file_{i}".encode()
    return ",".join([
        hashlib.sha1(blob).hexdigest().upper(),
        hashlib.md5(blob).hexdigest().upper(),
        f"{i:08X}",
        f"file_{i}.exe",
        str(1000 + i),
        "1234",
        "358",
        "",
    ])


@pytest.fixture
def write_dataset(tmp_path):
    """Write NSRLFile.txt under tmp_path/db and return its FilterConfig factory."""
    def _write(rows, header=HEADER, newline="\n", trailing=True, **config):
        db = tmp_path / "db"
        db.mkdir(exist_ok=True)
        text = newline.join([header, *rows])
        if trailing:
            text += newline
        cfg = FilterConfig(db=db, **config)
        cfg.dataset_path.write_bytes(text.encode("utf-8"))
        return cfg
    return _write


@pytest.fixture
def synthetic_rows():
    return [nsrl_row(i) for i in range(500)]
