"""Importers that turn raw key material into provider keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from softcsp.keys import (
    BCCSPError,
    EcdsaPrivateKey,
    EcdsaPublicKey,
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

_PARSE_ERRORS = (ValueError, TypeError, UnsupportedAlgorithm)


@dataclass(frozen=True)
class EcdsaPublicKeyImportOpts:
    """Options for importing an ECDSA public key object."""

    temporary: bool = False

    def algorithm(self) -> str:
        return "ECDSA"

    def ephemeral(self) -> bool:
        return self.temporary


@dataclass(frozen=True)
class Ed25519PublicKeyImportOpts:
    """Options for importing an Ed25519 public key object."""

    temporary: bool = False

    def algorithm(self) -> str:
        return "ED25519"

    def ephemeral(self) -> bool:
        return self.temporary


def _der(raw: Any, prefix: str = "") -> bytes:
    if not isinstance(raw, (bytes, bytearray, memoryview)):
        raise BCCSPError(f"{prefix}Invalid raw material. Expected byte array.")
    if len(raw) == 0:
        raise BCCSPError(f"{prefix}Invalid raw. It must not be nil.")
    return bytes(raw)


def _load_private(der: bytes) -> Any:
    return serialization.load_der_private_key(der, password=None)


class EcdsaPKIXPublicKeyImporter:
    """Imports ECDSA public keys from DER SubjectPublicKeyInfo."""

    def key_import(self, raw: Any, opts: Any) -> EcdsaPublicKey:
        der = _der(raw)
        try:
            public = serialization.load_der_public_key(der)
        except _PARSE_ERRORS as exc:
            raise BCCSPError(
                f"Failed converting PKIX to ECDSA public key [{exc}]"
            ) from exc
        if not isinstance(public, ec.EllipticCurvePublicKey):
            raise BCCSPError("Failed casting to ECDSA public key. Invalid raw material.")
        return EcdsaPublicKey(public)


class EcdsaPrivateKeyImporter:
    """Imports ECDSA private keys from DER (PKCS#8 or SEC 1)."""

    def key_import(self, raw: Any, opts: Any) -> EcdsaPrivateKey:
        der = _der(raw, "[ECDSADERPrivateKeyImportOpts] ")
        try:
            private = _load_private(der)
        except _PARSE_ERRORS as exc:
            raise BCCSPError(
                f"Failed converting PKIX to ECDSA public key [{exc}]"
            ) from exc
        if not isinstance(private, ec.EllipticCurvePrivateKey):
            raise BCCSPError(
                "Failed casting to ECDSA private key. Invalid raw material."
            )
        return EcdsaPrivateKey(private)


class Ed25519PrivateKeyImporter:
    """Imports Ed25519 private keys from DER PKCS#8."""

    def key_import(self, raw: Any, opts: Any) -> Ed25519PrivateKey:
        der = _der(raw, "[ED25519DERPrivateKeyImportOpts] ")
        try:
            private = _load_private(der)
        except _PARSE_ERRORS as exc:
            raise BCCSPError(
                f"Failed converting PKIX to ED25519 public key [{exc}]"
            ) from exc
        if not isinstance(private, ed25519.Ed25519PrivateKey):
            raise BCCSPError(
                "Failed casting to ED25519 private key. Invalid raw material."
            )
        return Ed25519PrivateKey(private)


class EcdsaPublicKeyImporter:
    """Wraps an ECDSA public key object."""

    def key_import(self, raw: Any, opts: Any) -> EcdsaPublicKey:
        if not isinstance(raw, ec.EllipticCurvePublicKey):
            raise BCCSPError("Invalid raw material. Expected ECDSA public key.")
        return EcdsaPublicKey(raw)


class Ed25519PublicKeyImporter:
    """Wraps an Ed25519 public key object."""

    def key_import(self, raw: Any, opts: Any) -> Ed25519PublicKey:
        if not isinstance(raw, ed25519.Ed25519PublicKey):
            raise BCCSPError("Invalid raw material. Expected Ed25519 public key.")
        return Ed25519PublicKey(raw)


class X509PublicKeyImporter:
    """Imports the public key of an X.509 certificate through a provider."""

    def __init__(self, csp: Any) -> None:
        self.csp = csp

    def _delegate(self, opts_type: type, public: Any, ephemeral: bool) -> Any:
        importer = None if self.csp is None else self.csp.key_importers.get(opts_type)
        if importer is None:
            raise BCCSPError(f"No key importer registered for [{opts_type.__name__}]")
        return importer.key_import(public, opts_type(temporary=ephemeral))

    def key_import(self, raw: Any, opts: Any) -> Any:
        if not isinstance(raw, x509.Certificate):
            raise BCCSPError("Invalid raw material. Expected X.509 certificate.")
        try:
            public = raw.public_key()
        except _PARSE_ERRORS:
            public = None
        if isinstance(public, ec.EllipticCurvePublicKey):
            return self._delegate(EcdsaPublicKeyImportOpts, public, opts.ephemeral())
        if isinstance(public, ed25519.Ed25519PublicKey):
            return self._delegate(Ed25519PublicKeyImportOpts, public, opts.ephemeral())
        raise BCCSPError(
            "Certificate's public key type not recognized. Supported keys: [ECDSA, ED25519]"
        )