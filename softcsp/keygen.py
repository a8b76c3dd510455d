"""Key generators for ECDSA and Ed25519 key pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from softcsp.keys import BCCSPError, EcdsaPrivateKey, Ed25519PrivateKey


@dataclass(frozen=True)
class EcdsaKeyGenerator:
    """Generates ECDSA private keys on a fixed curve."""

    curve: ec.EllipticCurve

    def key_gen(self, opts: Any) -> EcdsaPrivateKey:
        if not isinstance(self.curve, ec.EllipticCurve):
            raise BCCSPError(
                f"Failed generating ECDSA key for [{self.curve}]: [not an elliptic curve]"
            )
        try:
            private = ec.generate_private_key(self.curve)
        except (UnsupportedAlgorithm, ValueError, TypeError) as exc:
            raise BCCSPError(
                f"Failed generating ECDSA key for [{self.curve.name}]: [{exc}]"
            ) from exc
        return EcdsaPrivateKey(private)


class Ed25519KeyGenerator:
    """Generates Ed25519 private keys."""

    def key_gen(self, opts: Any) -> Ed25519PrivateKey:
        try:
            private = ed25519.Ed25519PrivateKey.generate()
        except UnsupportedAlgorithm as exc:
            raise BCCSPError(f"Failed generating ED25519 key: [{exc}]") from exc
        return Ed25519PrivateKey(private)