from pathlib import Path

def _ensure_exists(path: Path):
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"file not found: {p}")

def read_bytes(path: Path) -> bytes:
    _ensure_exists(path)
    with open(path, "rb") as f:
        return f.read()
