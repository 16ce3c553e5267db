from __future__ import annotations

from typing import List

import base58

from .project_constants import USER_ID_SIZE


def user_from_bytes(raw: bytes) -> str:
    if len(raw) != USER_ID_SIZE:
        raise ValueError(f"Identity must be {USER_ID_SIZE} bytes, got {len(raw)}.")
    return base58.b58encode(raw).decode("ascii")


def parse_user(text: str) -> str:
    """
    Validate a base58 identity and return it in canonical form.
    Raises ValueError for anything that is not exactly 32 bytes once decoded.
    """
    text = text.strip()
    if not text:
        raise ValueError("Empty identity.")
    try:
        raw = base58.b58decode(text)
    except ValueError as e:
        raise ValueError(f"Identity {text!r} is not valid base58: {e}") from e
    return user_from_bytes(raw)


def load_users(path: str) -> List[str]:
    out: List[str] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            w = line.strip()
            if not w or w.startswith("#"):
                continue
            out.append(parse_user(w))
    return out
