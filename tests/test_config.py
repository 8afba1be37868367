from pathlib import Path

import pytest

from nsrl_filter.config import FilterConfig
from nsrl_filter.errors import ConfigError, UnsupportedHashKindError
from nsrl_filter.hashkind import HashKind


def test_defaults():
    cfg = FilterConfig()
    assert cfg.hash_kind is HashKind.SHA1
    assert cfg.error_rate == 0.001
    assert cfg.db == Path("db")
    assert cfg.dataset_path == Path("db/NSRLFile.txt")
    assert cfg.linecount_path == Path("db/LINECOUNT")
    assert cfg.bloom_path == Path("db/nsrl.bloom")


def test_coerces_strings():
    cfg = FilterConfig(hash_kind="MD5", error_rate="0.01", db="/tmp/x")
    assert cfg.hash_kind is HashKind.MD5
    assert cfg.error_rate == 0.01
    assert cfg.db == Path("/tmp/x")


@pytest.mark.parametrize("rate", [0, 1, -0.5, 1.5, "abc"])
def test_rejects_bad_error_rate(rate):
    with pytest.raises(ConfigError):
        FilterConfig(error_rate=rate)


def test_rejects_unknown_hash_kind():
    with pytest.raises(UnsupportedHashKindError):
        FilterConfig(hash_kind="sha256")


def test_independent_configs_coexist():
    a = FilterConfig(hash_kind="sha1", error_rate=0.01)
    b = FilterConfig(hash_kind="md5", error_rate=0.001)
    assert a.hash_kind is not b.hash_kind
    assert a.error_rate != b.error_rate


def test_from_env(monkeypatch):
    monkeypatch.setenv("NSRL_HASH_TYPE", "crc32")
    monkeypatch.setenv("NSRL_ERROR_RATE", "0.05")
    monkeypatch.setenv("NSRL_DB", "/data/nsrl")
    cfg = FilterConfig.from_env()
    assert cfg.hash_kind is HashKind.CRC32
    assert cfg.error_rate == 0.05
    assert cfg.db == Path("/data/nsrl")


def test_from_env_overrides_win(monkeypatch):
    monkeypatch.delenv("NSRL_ERROR_RATE", raising=False)
    monkeypatch.setenv("NSRL_HASH_TYPE", "crc32")
    cfg = FilterConfig.from_env(hash_kind="md5", error_rate=None)
    assert cfg.hash_kind is HashKind.MD5
    assert cfg.error_rate == 0.001
