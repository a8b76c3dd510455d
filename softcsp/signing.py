"""ECDSA (low-S) and Ed25519 signing and verification."""

from __future__ import annotations

import functools
import secrets
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ec, ed25519
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)

from softcsp.keys import (
    BCCSPError,
    EcdsaPrivateKey,
    EcdsaPublicKey,
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

_Point = Optional[Tuple[int, int]]

_CURVE_TYPES = {
    "secp224r1": ec.SECP224R1,
    "secp256r1": ec.SECP256R1,
    "secp384r1": ec.SECP384R1,
    "secp521r1": ec.SECP521R1,
}

_PRIMES = {
    "secp224r1": 2**224 - 2**96 + 1,
    "secp256r1": 2**256 - 2**224 + 2**192 + 2**96 - 1,
    "secp384r1": 2**384 - 2**128 - 2**96 + 2**32 - 1,
    "secp521r1": 2**521 - 1,
}

_ORDERS = {
    "secp224r1": int("ffffffffffffffffffffffffffff16a2e0b8f03e13dd29455c5c2a3d", 16),
    "secp256r1": int(
        "ffffffff00000000ffffffffffffffffbce6faada7179e84f3b9cac2fc632551", 16
    ),
    "secp384r1": int(
        "ffffffffffffffffffffffffffffffffffffffffffffffff"
        "c7634d81f4372ddf581a0db248b0a77aecec196accc52973",
        16,
    ),
    "secp521r1": int(
        "01ff" + "ffffffff" * 7 + "fffffffa"
        "51868783bf2f966b7fcc0148f709a5d03bb5c9b8899c47aebb6fb71e91386409",
        16,
    ),
}


@dataclass(frozen=True)
class _Domain:
    curve: ec.EllipticCurve
    p: int
    n: int
    generator: Tuple[int, int]


@functools.lru_cache(maxsize=None)
def _domain(name: str) -> _Domain:
    if name not in _CURVE_TYPES:
        raise BCCSPError(f"curve not recognized [{name}]")
    curve = _CURVE_TYPES[name]()
    g = ec.derive_private_key(1, curve).public_key().public_numbers()
    return _Domain(curve, _PRIMES[name], _ORDERS[name], (g.x, g.y))


def curve_half_order(curve: ec.EllipticCurve) -> int:
    """Half the order of a supported NIST curve, rounded down."""
    return _domain(curve.name).n >> 1


def _point_add(a: _Point, b: _Point, p: int) -> _Point:
    if a is None:
        return b
    if b is None:
        return a
    x1, y1 = a
    x2, y2 = b
    if x1 == x2:
        if (y1 + y2) % p == 0:
            return None
        lam = (3 * x1 * x1 - 3) * pow(2 * y1, -1, p) % p
    else:
        lam = (y2 - y1) * pow(x2 - x1, -1, p) % p
    x3 = (lam * lam - x1 - x2) % p
    y3 = (lam * (x1 - x3) - y1) % p
    return x3, y3


def _point_mul(k: int, point: _Point, p: int) -> _Point:
    result: _Point = None
    addend = point
    while k:
        if k & 1:
            result = _point_add(result, addend, p)
        addend = _point_add(addend, addend, p)
        k >>= 1
    return result


def _digest_to_int(digest: bytes, n: int) -> int:
    order_bits = n.bit_length()
    order_bytes = (order_bits + 7) // 8
    digest = bytes(digest[:order_bytes])
    value = int.from_bytes(digest, "big")
    excess = len(digest) * 8 - order_bits
    if excess > 0:
        value >>= excess
    return value


def sign_ecdsa(key: ec.EllipticCurvePrivateKey, digest: bytes, opts: Any) -> bytes:
    """Sign a digest and return a DER signature whose S is in the lower half."""
    dom = _domain(key.curve.name)
    d = key.private_numbers().private_value
    e = _digest_to_int(digest, dom.n)
    while True:
        k = secrets.randbelow(dom.n - 1) + 1
        r = ec.derive_private_key(k, dom.curve).public_key().public_numbers().x % dom.n
        if r == 0:
            continue
        s = pow(k, -1, dom.n) * (e + r * d) % dom.n
        if s != 0:
            break
    if s > dom.n >> 1:
        s = dom.n - s
    return encode_dss_signature(r, s)


def _unmarshal_signature(signature: bytes) -> Tuple[int, int]:
    try:
        r, s = decode_dss_signature(signature)
    except (TypeError, ValueError) as exc:
        raise BCCSPError(f"Failed unmashalling signature [{exc}]") from exc
    if r <= 0:
        raise BCCSPError(
            "Failed unmashalling signature [Invalid signature, R must be larger than zero]"
        )
    if s <= 0:
        raise BCCSPError(
            "Failed unmashalling signature [Invalid signature, S must be larger than zero]"
        )
    return r, s


def verify_ecdsa(
    key: ec.EllipticCurvePublicKey, signature: bytes, digest: bytes, opts: Any
) -> bool:
    """Verify a DER signature over a digest; signatures with high S are rejected."""
    r, s = _unmarshal_signature(signature)
    half = curve_half_order(key.curve)
    if s > half:
        raise BCCSPError(
            f"Invalid S. Must be smaller than half the order [{s}][{half}]."
        )
    dom = _domain(key.curve.name)
    if r >= dom.n or s >= dom.n:
        return False
    e = _digest_to_int(digest, dom.n)
    w = pow(s, -1, dom.n)
    numbers = key.public_numbers()
    point = _point_add(
        _point_mul(e * w % dom.n, dom.generator, dom.p),
        _point_mul(r * w % dom.n, (numbers.x, numbers.y), dom.p),
        dom.p,
    )
    if point is None:
        return False
    return point[0] % dom.n == r


def sign_ed25519(key: ed25519.Ed25519PrivateKey, msg: bytes, opts: Any) -> bytes:
    """Sign a message with Ed25519."""
    return key.sign(msg)


def verify_ed25519(
    key: ed25519.Ed25519PublicKey, signature: bytes, msg: bytes, opts: Any
) -> bool:
    """Verify an Ed25519 signature over a message."""
    if signature is None or len(signature) != 64:
        return False
    try:
        key.verify(bytes(signature), msg)
    except InvalidSignature:
        return False
    return True


class EcdsaSigner:
    """Signs digests with ECDSA private keys."""

    def sign(self, key: EcdsaPrivateKey, digest: bytes, opts: Any) -> bytes:
        return sign_ecdsa(key.priv_key, digest, opts)


class EcdsaPrivateKeyVerifier:
    """Verifies ECDSA signatures using the public half of a private key."""

    def verify(
        self, key: EcdsaPrivateKey, signature: bytes, digest: bytes, opts: Any
    ) -> bool:
        return verify_ecdsa(key.priv_key.public_key(), signature, digest, opts)


class EcdsaPublicKeyVerifier:
    """Verifies ECDSA signatures with public keys."""

    def verify(
        self, key: EcdsaPublicKey, signature: bytes, digest: bytes, opts: Any
    ) -> bool:
        return verify_ecdsa(key.pub_key, signature, digest, opts)


class Ed25519Signer:
    """Signs messages with Ed25519 private keys."""

    def sign(self, key: Ed25519PrivateKey, msg: bytes, opts: Any) -> bytes:
        return sign_ed25519(key.priv_key, msg, opts)


class Ed25519PrivateKeyVerifier:
    """Verifies Ed25519 signatures using the public half of a private key."""

    def verify(
        self, key: Ed25519PrivateKey, signature: bytes, msg: bytes, opts: Any
    ) -> bool:
        return verify_ed25519(key.priv_key.public_key(), signature, msg, opts)


class Ed25519PublicKeyVerifier:
    """Verifies Ed25519 signatures with public keys."""

    def verify(
        self, key: Ed25519PublicKey, signature: bytes, msg: bytes, opts: Any
    ) -> bool:
        return verify_ed25519(key.pub_key, signature, msg, opts)