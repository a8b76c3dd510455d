import hashlib

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from softcsp.keys import (
    BCCSPError,
    EcdsaPrivateKey,
    EcdsaPublicKey,
    Ed25519PrivateKey,
    Ed25519PublicKey,
)


def _point_bytes(pub):
    return pub.public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )


def test_ecdsa_private_key_flags_and_bytes():
    k = EcdsaPrivateKey(ec.generate_private_key(ec.SECP256R1()))
    assert k.symmetric() is False
    assert k.private() is True
    with pytest.raises(BCCSPError, match="Not supported."):
        k.bytes()


def test_ecdsa_private_key_ski():
    low = ec.generate_private_key(ec.SECP256R1())
    k = EcdsaPrivateKey(None)
    assert k.ski() is None
    k.priv_key = low
    expected = hashlib.sha256(_point_bytes(low.public_key())).digest()
    assert k.ski() == expected
    assert len(k.ski()) == 32


def test_ecdsa_private_key_public_key():
    low = ec.generate_private_key(ec.SECP256R1())
    k = EcdsaPrivateKey(low)
    pk = k.public_key()
    assert isinstance(pk, EcdsaPublicKey)
    assert pk.pub_key.public_numbers() == low.public_key().public_numbers()
    assert pk.ski() == k.ski()


def test_ecdsa_private_key_public_key_without_material():
    with pytest.raises(BCCSPError):
        EcdsaPrivateKey(None).public_key()


def test_ecdsa_public_key():
    low = ec.generate_private_key(ec.SECP256R1())
    k = EcdsaPublicKey(low.public_key())
    assert k.symmetric() is False
    assert k.private() is False

    k.pub_key = None
    assert k.ski() is None

    k.pub_key = low.public_key()
    assert k.ski() == hashlib.sha256(_point_bytes(low.public_key())).digest()
    assert k.public_key() is k

    raw = k.bytes()
    expected = low.public_key().public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    assert raw == expected
    loaded = serialization.load_der_public_key(raw)
    assert loaded.public_numbers() == low.public_key().public_numbers()


def test_ecdsa_public_key_bytes_without_key():
    with pytest.raises(BCCSPError, match=r"Failed marshalling key \["):
        EcdsaPublicKey(None).bytes()


def test_ed25519_private_key():
    low = ed25519.Ed25519PrivateKey.generate()
    k = Ed25519PrivateKey(low)
    assert k.symmetric() is False
    assert k.private() is True
    with pytest.raises(BCCSPError, match="Not supported."):
        k.bytes()

    k.priv_key = None
    assert k.ski() is None

    k.priv_key = low
    raw = low.public_key().public_bytes(
        serialization.Encoding.Raw, serialization.PublicFormat.Raw
    )
    assert k.ski() == hashlib.sha256(raw).digest()

    pk = k.public_key()
    assert isinstance(pk, Ed25519PublicKey)
    assert (
        pk.pub_key.public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)
        == raw
    )


def test_ed25519_public_key():
    low = ed25519.Ed25519PrivateKey.generate()
    pub = low.public_key()
    k = Ed25519PublicKey(pub)
    assert k.symmetric() is False
    assert k.private() is False

    k.pub_key = None
    assert k.ski() is None

    k.pub_key = pub
    raw = pub.public_bytes(serialization.Encoding.Raw, serialization.PublicFormat.Raw)
    assert k.ski() == hashlib.sha256(raw).digest()
    assert k.public_key() is k

    expected = pub.public_bytes(
        serialization.Encoding.DER, serialization.PublicFormat.SubjectPublicKeyInfo
    )
    assert k.bytes() == expected


def test_ed25519_private_and_public_ski_match():
    k = Ed25519PrivateKey(ed25519.Ed25519PrivateKey.generate())
    assert k.ski() == k.public_key().ski()


def test_ed25519_public_key_bytes_without_key():
    with pytest.raises(BCCSPError, match=r"Failed marshalling key \["):
        Ed25519PublicKey(None).bytes()