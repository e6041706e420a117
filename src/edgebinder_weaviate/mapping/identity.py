"""Deterministic binding id -> backend object identifier."""

from __future__ import annotations

import hashlib


def derive_identifier(key: str) -> str:
    """Map ``key`` to a canonical version-4-shaped UUID string.

    The same key always yields the same identifier. Collisions are bounded
    by the 128-bit MD5 digest, not excluded.
    """
    digest = hashlib.md5(key.encode("utf-8"), usedforsecurity=False).hexdigest()
    variant = format(int(digest[16], 16) & 0x3 | 0x8, "x")
    return "-".join(
        (
            digest[0:8],
            digest[8:12],
            "4" + digest[13:16],
            variant + digest[17:20],
            digest[20:32],
        )
    )


class IdentityMapper:
    """Translate caller-facing binding ids to opaque backend identifiers."""

    def derive(self, key: str) -> str:
        return derive_identifier(key)
