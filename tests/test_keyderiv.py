from dataclasses import dataclass

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from softcsp.csp import CSP
from softcsp.keyderiv import (
    EcdsaPrivateKeyKeyDeriver,
    EcdsaPublicKeyKeyDeriver,
    EcdsaReRandKeyOpts,
)
from softcsp.keys import BCCSPError, EcdsaPrivateKey, EcdsaPublicKey
from softcsp.signing import sign_ecdsa, verify_ecdsa

P256_ORDER = int(
    "ffffffff00000000ffffffffffffffffbce6faada7179e84f3b9cac2fc632551", 16
)


@dataclass
class _OtherOpts:
    temporary: bool = False

    def algorithm(self):
        return "OTHER"

    def ephemeral(self):
        return self.temporary


class _MemoryKeyStore:
    def __init__(self):
        self.keys = {}

    def store_key(self, key):
        self.keys[key.ski()] = key

    def get_key(self, ski):
        return self.keys[ski]


@pytest.fixture(params=[ec.SECP256R1(), ec.SECP384R1()], ids=["P256", "P384"])
def private_key(request):
    return EcdsaPrivateKey(ec.generate_private_key(request.param))


def test_opts_accessors():
    opts = EcdsaReRandKeyOpts(temporary=True, expansion=b"\x01\x02")
    assert opts.algorithm() == "ECDSA_RERAND"
    assert opts.ephemeral() is True
    assert opts.expansion_value() == b"\x01\x02"
    assert EcdsaReRandKeyOpts().ephemeral() is False


@pytest.mark.parametrize(
    "deriver", [EcdsaPublicKeyKeyDeriver(), EcdsaPrivateKeyKeyDeriver()]
)
def test_nil_opts_rejected(deriver):
    with pytest.raises(BCCSPError, match="Invalid opts parameter. It must not be nil."):
        deriver.key_deriv(object(), None)


def test_public_deriver_rejects_other_opts():
    with pytest.raises(BCCSPError, match=r"Unsupported 'KeyDerivOpts' provided \["):
        EcdsaPublicKeyKeyDeriver().key_deriv(EcdsaPublicKey(None), _OtherOpts())


def test_private_deriver_rejects_other_opts():
    with pytest.raises(BCCSPError, match=r"Unsupported 'KeyDerivOpts' provided \["):
        EcdsaPrivateKeyKeyDeriver().key_deriv(EcdsaPrivateKey(None), _OtherOpts())


def test_wrong_key_type_rejected(private_key):
    opts = EcdsaReRandKeyOpts(expansion=b"\x01")
    with pytest.raises(BCCSPError):
        EcdsaPublicKeyKeyDeriver().key_deriv(private_key, opts)
    with pytest.raises(BCCSPError):
        EcdsaPrivateKeyKeyDeriver().key_deriv(private_key.public_key(), opts)


def test_private_derivation_adds_scalar(private_key):
    d = private_key.priv_key.private_numbers().private_value
    derived = EcdsaPrivateKeyKeyDeriver().key_deriv(
        private_key, EcdsaReRandKeyOpts(expansion=b"\x01")
    )
    assert derived.private() is True
    assert derived.symmetric() is False
    assert derived.priv_key.private_numbers().private_value == d + 2


def test_empty_expansion_adds_one(private_key):
    d = private_key.priv_key.private_numbers().private_value
    derived = EcdsaPrivateKeyKeyDeriver().key_deriv(private_key, EcdsaReRandKeyOpts())
    assert derived.priv_key.private_numbers().private_value == d + 1


def test_expansion_is_reduced_modulo_order_minus_one():
    key = EcdsaPrivateKey(ec.derive_private_key(5, ec.SECP256R1()))
    expansion = (P256_ORDER - 1).to_bytes(32, "big")
    derived = EcdsaPrivateKeyKeyDeriver().key_deriv(
        key, EcdsaReRandKeyOpts(expansion=expansion)
    )
    assert derived.priv_key.private_numbers().private_value == 6


def test_public_and_private_derivations_agree(private_key):
    opts = EcdsaReRandKeyOpts(expansion=b"\x01")
    derived_private = EcdsaPrivateKeyKeyDeriver().key_deriv(private_key, opts)
    derived_public = EcdsaPublicKeyKeyDeriver().key_deriv(
        private_key.public_key(), opts
    )
    assert derived_public.private() is False
    assert derived_public.symmetric() is False
    assert derived_public.ski() == derived_private.ski()
    assert derived_public.ski() != private_key.ski()


def test_derived_key_signs_and_verifies(private_key):
    opts = EcdsaReRandKeyOpts(expansion=b"\x07\x08")
    derived_private = EcdsaPrivateKeyKeyDeriver().key_deriv(private_key, opts)
    derived_public = EcdsaPublicKeyKeyDeriver().key_deriv(
        private_key.public_key(), opts
    )
    digest = b"\x11" * 32
    signature = sign_ecdsa(derived_private.priv_key, digest, None)
    assert verify_ecdsa(derived_public.pub_key, signature, digest, None) is True
    assert verify_ecdsa(private_key.priv_key.public_key(), signature, digest, None) is False


def test_csp_stores_non_ephemeral_derived_key(private_key):
    store = _MemoryKeyStore()
    csp = CSP(store)
    csp.add_wrapper(EcdsaPrivateKey, EcdsaPrivateKeyKeyDeriver())
    csp.add_wrapper(EcdsaPublicKey, EcdsaPublicKeyKeyDeriver())

    derived = csp.key_deriv(private_key, EcdsaReRandKeyOpts(expansion=b"\x01"))
    assert store.get_key(derived.ski()) is derived

    ephemeral = csp.key_deriv(
        private_key.public_key(), EcdsaReRandKeyOpts(temporary=True, expansion=b"\x01")
    )
    assert ephemeral.ski() == derived.ski()
    assert list(store.keys) == [derived.ski()]


def test_csp_wraps_deriver_errors(private_key):
    csp = CSP(_MemoryKeyStore())
    csp.add_wrapper(EcdsaPrivateKey, EcdsaPrivateKeyKeyDeriver())
    with pytest.raises(BCCSPError, match="Unsupported 'KeyDerivOpts' provided"):
        csp.key_deriv(private_key, _OtherOpts())