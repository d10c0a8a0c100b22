from __future__ import annotations
import hashlib
import os
from typing import Any

import blake3
import xxhash


def _hasher(algorithm: str) -> Any:
    if algorithm == "blake3":
        return blake3.blake3()
    if algorithm == "xxh64":
        return xxhash.xxh64()
    if algorithm == "sha256":
        return hashlib.sha256()
    raise ValueError(f"Unknown checksum algorithm: {algorithm}")


def partial_checksum(path: str, block_size: int = 32768, algorithm: str = "sha256") -> str:
    """Digest of at most ``block_size`` leading bytes of ``path``."""
    h = _hasher(algorithm)
    with open(path, "rb") as f:
        head = f.read(block_size)
        if head:
            h.update(head)
    return h.hexdigest()


def same_content(a: str, b: str, block_size: int = 32768) -> bool:
    """Stream both files chunk by chunk; True only if they end together with no mismatch."""
    with open(a, "rb") as fa, open(b, "rb") as fb:
        while True:
            ca = fa.read(block_size)
            cb = fb.read(block_size)
            if ca != cb:
                return False
            if not ca:
                return True


def normalize_path(path: str) -> str:
    stripped = path.rstrip(os.sep)
    if os.altsep:
        stripped = stripped.rstrip(os.altsep)
    return stripped or path[:1]
