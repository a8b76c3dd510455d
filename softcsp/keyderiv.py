"""Re-randomisation of ECDSA keys by a scalar derived from expansion bytes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cryptography.hazmat.primitives.asymmetric import ec

from softcsp.keys import BCCSPError, EcdsaPrivateKey, EcdsaPublicKey
from softcsp.signing import _domain, _point_add

ECDSA_RERAND = "ECDSA_RERAND"

_ON_CURVE_FAILURE = "Failed temporary public key IsOnCurve check."


@dataclass(frozen=True)
class EcdsaReRandKeyOpts:
    """Options for re-randomising an ECDSA key with ``expansion``."""

    temporary: bool = False
    expansion: bytes = b""

    def algorithm(self) -> str:
        return ECDSA_RERAND

    def ephemeral(self) -> bool:
        return self.temporary

    def expansion_value(self) -> bytes:
        return self.expansion


def _rerand_opts(opts: Any) -> EcdsaReRandKeyOpts:
    if not isinstance(opts, EcdsaReRandKeyOpts):
        raise BCCSPError(f"Unsupported 'KeyDerivOpts' provided [{opts}]")
    return opts


def _scalar(opts: EcdsaReRandKeyOpts, order: int) -> int:
    """Map the expansion value into the range [1, order - 1]."""
    value = int.from_bytes(bytes(opts.expansion_value()), "big")
    return value % (order - 1) + 1


class EcdsaPublicKeyKeyDeriver:
    """Re-randomises ECDSA public keys: P' = P + k·G."""

    def key_deriv(self, key: Any, opts: Any) -> EcdsaPublicKey:
        if opts is None:
            raise BCCSPError("Invalid opts parameter. It must not be nil.")
        if not isinstance(key, EcdsaPublicKey):
            raise BCCSPError(f"Invalid key. Expected an ECDSA public key [{key}]")
        rerand = _rerand_opts(opts)
        if key.pub_key is None:
            raise BCCSPError("Invalid key. It holds no public key material.")

        dom = _domain(key.pub_key.curve.name)
        k = _scalar(rerand, dom.n)
        shift = ec.derive_private_key(k, dom.curve).public_key().public_numbers()
        numbers = key.pub_key.public_numbers()
        point = _point_add((numbers.x, numbers.y), (shift.x, shift.y), dom.p)
        if point is None:
            raise BCCSPError(_ON_CURVE_FAILURE)
        try:
            public = ec.EllipticCurvePublicNumbers(
                point[0], point[1], dom.curve
            ).public_key()
        except ValueError as exc:
            raise BCCSPError(_ON_CURVE_FAILURE) from exc
        return EcdsaPublicKey(public)


class EcdsaPrivateKeyKeyDeriver:
    """Re-randomises ECDSA private keys: d' = (d + k) mod n."""

    def key_deriv(self, key: Any, opts: Any) -> EcdsaPrivateKey:
        if opts is None:
            raise BCCSPError("Invalid opts parameter. It must not be nil.")
        if not isinstance(key, EcdsaPrivateKey):
            raise BCCSPError(f"Invalid key. Expected an ECDSA private key [{key}]")
        rerand = _rerand_opts(opts)
        if key.priv_key is None:
            raise BCCSPError("Invalid key. It holds no private key material.")

        dom = _domain(key.priv_key.curve.name)
        k = _scalar(rerand, dom.n)
        d = (key.priv_key.private_numbers().private_value + k) % dom.n
        if d == 0:
            raise BCCSPError(_ON_CURVE_FAILURE)
        return EcdsaPrivateKey(ec.derive_private_key(d, dom.curve))