from math import ceil, log

import pytest

from nsrl_filter.bloom import Bloom
from nsrl_filter.const import HEADER_SIZE
from nsrl_filter.errors import ArtifactError, ConfigError


def keys(prefix, n):
    return [f"{prefix}{i:08d}".encode() for i in range(n)]


def test_sizing_matches_formula():
    bloom = Bloom(10_000, 0.001)
    assert bloom.m == ceil(-(10_000 * log(0.001)) / (log(2) ** 2))
    assert bloom.k == ceil((bloom.m / 10_000) * log(2))
    assert len(bloom.bits) == (bloom.m + 7) // 8


def test_empty_filter_is_usable():
    bloom = Bloom(0, 0.001)
    assert bloom.m > 0
    assert b"anything" not in bloom
    bloom.add(b"anything")
    assert b"anything" in bloom


def test_no_false_negatives():
    bloom = Bloom(5_000, 0.001)
    inserted = keys("in-", 5_000)
    bloom.update(inserted)
    assert all(k in bloom for k in inserted)
    assert len(bloom) == 5_000


def test_add_and_update_agree():
    one, many = Bloom(100, 0.01), Bloom(100, 0.01)
    ks = keys("k", 100)
    for k in ks:
        one.add(k)
    many.update(ks)
    assert one == many


def test_false_positive_rate_is_bounded():
    bloom = Bloom(2_000, 0.001)
    bloom.update(keys("in-", 2_000))
    probes = keys("out-", 50_000)
    fp = sum(k in bloom for k in probes) / len(probes)
    assert fp < 0.003


def test_overfilling_raises_fp_rate_without_growing():
    bloom = Bloom(100, 0.01)
    size = len(bloom.bits)
    bloom.update(keys("in-", 2_000))
    assert len(bloom.bits) == size
    fp = sum(k in bloom for k in keys("out-", 5_000)) / 5_000
    assert fp > 0.01
    assert bloom.estimated_fp_rate() > 0.01


def test_fill_ratio_and_estimates():
    bloom = Bloom(1_000, 0.01)
    assert bloom.bits_set == 0
    assert bloom.estimated_fp_rate() == 0.0
    bloom.update(keys("in-", 1_000))
    assert 0.4 < bloom.fill_ratio < 0.6       # ~0.5 at design capacity
    assert bloom.estimated_items() == pytest.approx(1_000, rel=0.1)


def test_serialization_round_trip():
    bloom = Bloom(1_000, 0.001)
    bloom.update(keys("in-", 1_000))
    restored = Bloom.from_bytes(bloom.to_bytes())
    assert restored == bloom
    assert (restored.m, restored.k, restored.n_items, restored.count, restored.fp_rate) == \
        (bloom.m, bloom.k, bloom.n_items, bloom.count, bloom.fp_rate)
    probes = keys("in-", 50) + keys("out-", 500)
    assert [p in restored for p in probes] == [p in bloom for p in probes]


def test_restored_filter_accepts_more_keys():
    restored = Bloom.from_bytes(Bloom(10, 0.01).to_bytes())
    restored.add(b"late")
    assert b"late" in restored


@pytest.mark.parametrize("mutate", [
    lambda b: b[:10],                          # truncated header
    lambda b: b"XXXX" + b[4:],                 # bad magic
    lambda b: b[:4] + b"\x09\x00" + b[6:],     # unknown version
    lambda b: b[:HEADER_SIZE] + b"garbage",    # corrupt payload
])
def test_corrupt_blob_raises(mutate):
    blob = Bloom(100, 0.01).to_bytes()
    with pytest.raises(ArtifactError):
        Bloom.from_bytes(mutate(blob))


def test_payload_size_mismatch_raises():
    small = Bloom(10, 0.01).to_bytes()
    big = Bloom(10_000, 0.01).to_bytes()
    with pytest.raises(ArtifactError, match="header says"):
        Bloom.from_bytes(big[:HEADER_SIZE] + small[HEADER_SIZE:])


@pytest.mark.parametrize("rate", [0, 1, 1.5, -0.1])
def test_rejects_bad_fp_rate(rate):
    with pytest.raises(ConfigError):
        Bloom(100, rate)


def test_rejects_negative_capacity():
    with pytest.raises(ConfigError):
        Bloom(-1, 0.01)


def test_column_round_trip():
    assert Bloom.from_bytes(Bloom(10, 0.01, column=3).to_bytes()).column == 3
    assert Bloom.from_bytes(Bloom(10, 0.01).to_bytes()).column is None


def test_damaged_payload_fails_checksum():
    bloom = Bloom(100, 0.01)
    bloom.update(keys("in-", 100))
    blob = bytearray(bloom.to_bytes())
    blob[-1] ^= 0xFF
    with pytest.raises(ArtifactError, match="corrupt bloom payload"):
        Bloom.from_bytes(bytes(blob))
