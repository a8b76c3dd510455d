"""Key objects for ECDSA and Ed25519 key pairs."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import NoReturn

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519


class BCCSPError(Exception):
    """Raised when a cryptographic service operation fails."""


def _refuse_export(key: object) -> NoReturn:
    """Raise the error reported when a private key is asked for its bytes."""
    error = BCCSPError("Not supported.")
    error.add_note(f"{type(key).__name__} material cannot be exported") if hasattr(
        error, "add_note"
    ) else None
    raise error


def _spki_der(public_key: object) -> bytes:
    try:
        return public_key.public_bytes(  # type: ignore[attr-defined]
            serialization.Encoding.DER,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise BCCSPError(f"Failed marshalling key [{exc}]") from exc


def _ec_point_ski(public_key: ec.EllipticCurvePublicKey) -> bytes:
    raw = public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    )
    return hashlib.sha256(raw).digest()


def _ed25519_raw(public_key: ed25519.Ed25519PublicKey) -> bytes:
    return public_key.public_bytes(
        serialization.Encoding.Raw,
        serialization.PublicFormat.Raw,
    )


@dataclass(eq=False)
class EcdsaPrivateKey:
    """An ECDSA private key."""

    priv_key: ec.EllipticCurvePrivateKey | None

    def bytes(self) -> bytes:
        """Private keys cannot be exported."""
        _refuse_export(self)

    def ski(self) -> bytes | None:
        """SHA-256 of the uncompressed public point, or None without a key."""
        if self.priv_key is None:
            return None
        return _ec_point_ski(self.priv_key.public_key())

    def symmetric(self) -> bool:
        return False

    def private(self) -> bool:
        return True

    def public_key(self) -> EcdsaPublicKey:
        """Return the public half of this key pair."""
        if self.priv_key is None:
            raise BCCSPError("no private key material")
        return EcdsaPublicKey(self.priv_key.public_key())


@dataclass(eq=False)
class EcdsaPublicKey:
    """An ECDSA public key."""

    pub_key: ec.EllipticCurvePublicKey | None

    def bytes(self) -> bytes:
        """The key as DER-encoded SubjectPublicKeyInfo."""
        return _spki_der(self.pub_key)

    def ski(self) -> bytes | None:
        """SHA-256 of the uncompressed public point, or None without a key."""
        if self.pub_key is None:
            return None
        return _ec_point_ski(self.pub_key)

    def symmetric(self) -> bool:
        return False

    def private(self) -> bool:
        return False

    def public_key(self) -> EcdsaPublicKey:
        return self


@dataclass(eq=False)
class Ed25519PrivateKey:
    """An Ed25519 private key."""

    priv_key: ed25519.Ed25519PrivateKey | None

    def bytes(self) -> bytes:
        """Private keys cannot be exported."""
        _refuse_export(self)

    def ski(self) -> bytes | None:
        """SHA-256 of the raw public key, or None without a key."""
        if self.priv_key is None:
            return None
        return hashlib.sha256(_ed25519_raw(self.priv_key.public_key())).digest()

    def symmetric(self) -> bool:
        return False

    def private(self) -> bool:
        return True

    def public_key(self) -> Ed25519PublicKey:
        """Return the public half of this key pair."""
        if self.priv_key is None:
            raise BCCSPError("Error casting ed25519 public key")
        return Ed25519PublicKey(self.priv_key.public_key())


@dataclass(eq=False)
class Ed25519PublicKey:
    """An Ed25519 public key."""

    pub_key: ed25519.Ed25519PublicKey | None

    def bytes(self) -> bytes:
        """The key as DER-encoded SubjectPublicKeyInfo."""
        return _spki_der(self.pub_key)

    def ski(self) -> bytes | None:
        """SHA-256 of the raw public key, or None without a key."""
        if self.pub_key is None:
            return None
        return hashlib.sha256(_ed25519_raw(self.pub_key)).digest()

    def symmetric(self) -> bool:
        return False

    def private(self) -> bool:
        return False

    def public_key(self) -> Ed25519PublicKey:
        return self