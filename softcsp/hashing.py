"""Hashing backed by a hash-object factory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Hasher:
    """Computes digests with hash objects made by ``factory``."""

    factory: Callable[[], Any]

    def hash(self, msg: bytes, opts: Any) -> bytes:
        """Return the digest of ``msg``."""
        h = self.factory()
        h.update(msg)
        return h.digest()

    def get_hash(self, opts: Any) -> Any:
        """Return a fresh hash object."""
        return self.factory()