# ==================================================
# examples/build_synthetic.py
# ==================================================
import argparse, hashlib, random
from pathlib import Path

from nsrl_filter import FilterBuilder, FilterConfig

HEADER = '"SHA-1","MD5","CRC32","FileName","FileSize","ProductCode","OpSystemCode","SpecialCode"'

def write_dataset(db: Path, count: int, seed: int = 0) -> Path:
    rng = random.Random(seed)
    db.mkdir(parents=True, exist_ok=True)
    path = FilterConfig(db=db).dataset_path
    with open(path, "w", newline="") as f:
        f.write(HEADER + "\r\n")
        for i in range(count):
            blob = f"file_{i}".encode()
            f.write(",".join([
                f'"{hashlib.sha1(blob).hexdigest().upper()}"',
                f'"{hashlib.md5(blob).hexdigest().upper()}"',
                f'"{rng.getrandbits(32):08X}"',
                f'"file_{i}.exe"',
                str(rng.randint(1, 1 << 20)),
                str(rng.randint(1, 9999)),
                '"358"',
                '""',
            ]) + "\r\n")
    return path

def main(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("db", help="directory to write NSRLFile.txt and the filter into")
    p.add_argument("count", type=int)
    p.add_argument("--hash-type", default="sha1")
    args = p.parse_args(argv)

    write_dataset(Path(args.db), args.count)
    report = FilterBuilder(FilterConfig(hash_kind=args.hash_type, db=args.db)).build()
    print(f"{report.rows_inserted} rows -> {report.bits} bits, k={report.hash_functions}")
    return report

if __name__ == "__main__":
    main()
