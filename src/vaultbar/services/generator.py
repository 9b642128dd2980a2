"""Random secret generation for ``:addgen``."""

from __future__ import annotations

import secrets

DEFAULT_SECRET_LENGTH = 20
# Ambiguous glyphs (l, o, I, O, 0, 1) are left out
SECRET_CHARSET = "abcdefghijkmnpqrstuvwxyzABCDEFGHJKLMNPQRSTUVWXYZ23456789!@#$%^&*"


def generate_secret(length: int = DEFAULT_SECRET_LENGTH) -> str:
    """Return a cryptographically random secret drawn from ``SECRET_CHARSET``."""
    if length < 1:
        raise ValueError(f"length must be positive, got {length}")
    return "".join(secrets.choice(SECRET_CHARSET) for _ in range(length))


__all__ = [
    "DEFAULT_SECRET_LENGTH",
    "SECRET_CHARSET",
    "generate_secret",
]
