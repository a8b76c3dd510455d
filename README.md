# softcsp

A software cryptographic service provider for ECDSA and Ed25519 keys. It
offers one small key interface, low-S ECDSA and Ed25519 signing and
verification, hashing, ECDSA key re-randomisation and key import, and a
dispatcher (`CSP`) that routes each operation to a handler registered for
the type of the options object or of the key.

## Installation

```
pip install softcsp
```

## Keys (`softcsp.keys`)

`EcdsaPrivateKey`, `EcdsaPublicKey`, `Ed25519PrivateKey` and
`Ed25519PublicKey` wrap key objects from the `cryptography` library. Each
has:

- `bytes()`: for public keys, the DER-encoded SubjectPublicKeyInfo; private
  keys raise `BCCSPError("Not supported.")`.
- `ski()`: the subject key identifier. For ECDSA it is the SHA-256 of the
  uncompressed public point, for Ed25519 the SHA-256 of the raw 32-byte
  public key; `None` when the key holds no material.
- `symmetric()` (always `False`) and `private()`.
- `public_key()`: the public half; a public key returns itself.

All errors in the package are raised as `softcsp.keys.BCCSPError`.

## Signing (`softcsp.signing`)

- `sign_ecdsa(key, digest, opts)` signs a digest and returns a DER signature
  whose S value is never above half the curve order.
- `verify_ecdsa(key, signature, digest, opts)` returns `True` or `False`; it
  raises `BCCSPError` for a signature that cannot be decoded, has a zero or
  negative R or S, or has a high S value.
- `curve_half_order(curve)` gives that bound.
- `sign_ed25519` and `verify_ed25519` do the same for Ed25519 messages.

ECDSA signing and verification support the NIST curves P-224, P-256, P-384
and P-521. Handler classes for the provider: `EcdsaSigner`,
`EcdsaPrivateKeyVerifier`, `EcdsaPublicKeyVerifier`, `Ed25519Signer`,
`Ed25519PrivateKeyVerifier`, `Ed25519PublicKeyVerifier`.

```python
import hashlib
from cryptography.hazmat.primitives.asymmetric import ec
from softcsp.keygen import EcdsaKeyGenerator
from softcsp.signing import EcdsaSigner, EcdsaPublicKeyVerifier

key = EcdsaKeyGenerator(ec.SECP256R1()).key_gen(None)
digest = hashlib.sha256(b"Hello World").digest()
signature = EcdsaSigner().sign(key, digest, None)
assert EcdsaPublicKeyVerifier().verify(key.public_key(), signature, digest, None)
```

## Other handlers

- `softcsp.hashing.Hasher(factory)`: `hash(msg, opts)` returns the digest
  from a fresh hash object made by `factory` (for example `hashlib.sha256`);
  `get_hash(opts)` returns a fresh hash object.
- `softcsp.keygen`: `EcdsaKeyGenerator(curve)` and `Ed25519KeyGenerator`.
- `softcsp.keyderiv`: `EcdsaPrivateKeyKeyDeriver` and
  `EcdsaPublicKeyKeyDeriver` re-randomise a key with
  `EcdsaReRandKeyOpts(temporary=..., expansion=...)`. The expansion bytes
  become a scalar k in [1, n-1]; the private key becomes (d + k) mod n and
  the public key P + k·G, so a derived private and public key still match.
- `softcsp.keyimport`:
  - `EcdsaPKIXPublicKeyImporter`: DER SubjectPublicKeyInfo to `EcdsaPublicKey`.
  - `EcdsaPrivateKeyImporter`: DER private key to `EcdsaPrivateKey`.
  - `Ed25519PrivateKeyImporter`: DER PKCS#8 to `Ed25519PrivateKey`.
  - `EcdsaPublicKeyImporter`, `Ed25519PublicKeyImporter`: wrap library
    public key objects; their options are `EcdsaPublicKeyImportOpts` and
    `Ed25519PublicKeyImportOpts`.
  - `X509PublicKeyImporter(csp)`: takes an `x509.Certificate` and hands its
    ECDSA or Ed25519 public key to the importer that `csp` has registered
    for `EcdsaPublicKeyImportOpts` or `Ed25519PublicKeyImportOpts`.

## The provider (`softcsp.csp`)

`CSP(key_store)` starts with no handlers. `add_wrapper(kind, wrapper)` puts
the wrapper in the table for the first role it satisfies: `KeyGenerator`,
`KeyImporter`, `KeyDeriver`, `Encryptor`, `Decryptor`, `Signer`, `Verifier`
or `HashProvider`. Key generators, importers and hashers are looked up by the
type of the options; derivers, signers, verifiers, encryptors and decryptors
by the type of the key.

Options objects passed to `key_gen`, `key_deriv` and `key_import` need
`ephemeral()` and `algorithm()` methods. When `ephemeral()` is false, the
new key is passed to `key_store.store_key(key)`; `get_key(ski)` calls
`key_store.get_key(ski)`.

```python
import hashlib
from dataclasses import dataclass
from cryptography.hazmat.primitives.asymmetric import ec

from softcsp.csp import CSP
from softcsp.hashing import Hasher
from softcsp.keygen import EcdsaKeyGenerator
from softcsp.keys import BCCSPError, EcdsaPrivateKey, EcdsaPublicKey
from softcsp.signing import EcdsaPrivateKeyVerifier, EcdsaPublicKeyVerifier, EcdsaSigner


class MemoryKeyStore:
    def __init__(self):
        self.keys = {}

    def store_key(self, key):
        self.keys[key.ski()] = key

    def get_key(self, ski):
        if ski not in self.keys:
            raise BCCSPError(f"key with SKI {ski.hex()} not found")
        return self.keys[ski]


@dataclass
class P256KeyGenOpts:
    temporary: bool = False

    def algorithm(self):
        return "ECDSAP256"

    def ephemeral(self):
        return self.temporary


@dataclass
class SHA256Opts:
    pass


csp = CSP(MemoryKeyStore())
csp.add_wrapper(P256KeyGenOpts, EcdsaKeyGenerator(ec.SECP256R1()))
csp.add_wrapper(SHA256Opts, Hasher(hashlib.sha256))
csp.add_wrapper(EcdsaPrivateKey, EcdsaSigner())
csp.add_wrapper(EcdsaPrivateKey, EcdsaPrivateKeyVerifier())
csp.add_wrapper(EcdsaPublicKey, EcdsaPublicKeyVerifier())

key = csp.key_gen(P256KeyGenOpts())
assert csp.get_key(key.ski()) is key

digest = csp.hash(b"Hello World", SHA256Opts())
signature = csp.sign(key, digest, None)
assert csp.verify(key.public_key(), signature, digest, None)
```

Failures inside a handler are raised again as `BCCSPError` with the
operation named in the message; `encrypt` passes handler errors through
unchanged.

## What this package does not do

- It has no key store. `CSP` needs an object with `store_key` and `get_key`
  that you provide.
- It has no symmetric keys, no RSA keys and no built-in encryption or
  decryption handlers; `encrypt` and `decrypt` work only with handlers you
  register.
- `X509PublicKeyImporter` accepts only certificates with ECDSA or Ed25519
  public keys.
- There is no key derivation for Ed25519 keys, and no command-line tool.