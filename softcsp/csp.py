"""A cryptographic service provider that dispatches to pluggable wrappers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from softcsp.keys import BCCSPError

_WRAPPED_ERRORS = (BCCSPError, ValueError, TypeError)

_INVALID_WRAPPER = (
    "wrapper type not valid, must be one of: KeyGenerator, KeyDeriver, "
    "KeyImporter, Encryptor, Decryptor, Signer, Verifier, Hasher"
)


@runtime_checkable
class KeyGenerator(Protocol):
    """Provides key generation algorithms."""

    def key_gen(self, opts: Any) -> Any:
        """Generate a key using opts."""


@runtime_checkable
class KeyDeriver(Protocol):
    """Provides key derivation algorithms."""

    def key_deriv(self, key: Any, opts: Any) -> Any:
        """Derive a key from key using opts."""


@runtime_checkable
class KeyImporter(Protocol):
    """Provides key import algorithms."""

    def key_import(self, raw: Any, opts: Any) -> Any:
        """Import a key from its raw representation using opts."""


@runtime_checkable
class Encryptor(Protocol):
    """Provides encryption algorithms."""

    def encrypt(self, key: Any, plaintext: bytes, opts: Any) -> bytes:
        """Encrypt plaintext using key."""


@runtime_checkable
class Decryptor(Protocol):
    """Provides decryption algorithms."""

    def decrypt(self, key: Any, ciphertext: bytes, opts: Any) -> bytes:
        """Decrypt ciphertext using key."""


@runtime_checkable
class Signer(Protocol):
    """Provides signing algorithms."""

    def sign(self, key: Any, digest: bytes, opts: Any) -> bytes:
        """Sign digest using key."""


@runtime_checkable
class Verifier(Protocol):
    """Provides signature verification algorithms."""

    def verify(self, key: Any, signature: bytes, digest: bytes, opts: Any) -> bool:
        """Verify signature against key and digest."""


@runtime_checkable
class HashProvider(Protocol):
    """Provides hash algorithms."""

    def hash(self, msg: bytes, opts: Any) -> bytes:
        """Hash msg using opts."""

    def get_hash(self, opts: Any) -> Any:
        """Return a hash object for opts."""


class CSP:
    """Generic provider whose operations are delegated to wrappers.

    Each wrapper is bound to a type: key generators, importers and hashers
    to the type of the options object, the others to the type of the key.
    """

    def __init__(self, key_store: Any) -> None:
        if key_store is None:
            raise BCCSPError(
                "Invalid KeyStore instance. It must be different from None."
            )
        self.key_store = key_store
        self.key_generators: dict[type, KeyGenerator] = {}
        self.key_derivers: dict[type, KeyDeriver] = {}
        self.key_importers: dict[type, KeyImporter] = {}
        self.encryptors: dict[type, Encryptor] = {}
        self.decryptors: dict[type, Decryptor] = {}
        self.signers: dict[type, Signer] = {}
        self.verifiers: dict[type, Verifier] = {}
        self.hashers: dict[type, HashProvider] = {}

    def add_wrapper(self, kind: type, wrapper: Any) -> None:
        """Bind ``kind`` to ``wrapper`` in the table matching the wrapper's role."""
        if kind is None:
            raise BCCSPError("type cannot be nil")
        if wrapper is None:
            raise BCCSPError("wrapper cannot be nil")
        tables = (
            (KeyGenerator, self.key_generators),
            (KeyImporter, self.key_importers),
            (KeyDeriver, self.key_derivers),
            (Encryptor, self.encryptors),
            (Decryptor, self.decryptors),
            (Signer, self.signers),
            (Verifier, self.verifiers),
            (HashProvider, self.hashers),
        )
        for role, table in tables:
            if isinstance(wrapper, role):
                table[kind] = wrapper
                return
        raise BCCSPError(_INVALID_WRAPPER)

    def _store(self, key: Any, message: str) -> None:
        try:
            self.key_store.store_key(key)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(f"{message}: {exc}") from exc

    def key_gen(self, opts: Any) -> Any:
        """Generate a key; keep it in the key store unless it is ephemeral."""
        if opts is None:
            raise BCCSPError("Invalid Opts parameter. It must not be nil.")
        generator = self.key_generators.get(type(opts))
        if generator is None:
            raise BCCSPError(f"Unsupported 'KeyGenOpts' provided [{opts}]")
        try:
            key = generator.key_gen(opts)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(
                f"Failed generating key with opts [{opts}]: {exc}"
            ) from exc
        if not opts.ephemeral():
            self._store(key, f"Failed storing key [{opts.algorithm()}]")
        return key

    def key_deriv(self, key: Any, opts: Any) -> Any:
        """Derive a key from ``key``; keep it unless it is ephemeral."""
        if key is None:
            raise BCCSPError("Invalid Key. It must not be nil.")
        if opts is None:
            raise BCCSPError("Invalid opts. It must not be nil.")
        deriver = self.key_derivers.get(type(key))
        if deriver is None:
            raise BCCSPError(f"Unsupported 'Key' provided [{key}]")
        try:
            derived = deriver.key_deriv(key, opts)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(
                f"Failed deriving key with opts [{opts}]: {exc}"
            ) from exc
        if not opts.ephemeral():
            self._store(derived, f"Failed storing key [{opts.algorithm()}]")
        return derived

    def key_import(self, raw: Any, opts: Any) -> Any:
        """Import a key from raw material; keep it unless it is ephemeral."""
        if raw is None:
            raise BCCSPError("Invalid raw. It must not be nil.")
        if opts is None:
            raise BCCSPError("Invalid opts. It must not be nil.")
        importer = self.key_importers.get(type(opts))
        if importer is None:
            raise BCCSPError(f"Unsupported 'KeyImportOpts' provided [{opts}]")
        try:
            key = importer.key_import(raw, opts)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(
                f"Failed importing key with opts [{opts}]: {exc}"
            ) from exc
        if not opts.ephemeral():
            self._store(key, f"Failed storing imported key with opts [{opts}]")
        return key

    def get_key(self, ski: bytes) -> Any:
        """Return the key the key store holds for the subject key identifier."""
        try:
            return self.key_store.get_key(ski)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(f"Failed getting key for SKI [{ski!r}]: {exc}") from exc

    def _hasher(self, opts: Any) -> HashProvider:
        if opts is None:
            raise BCCSPError("Invalid opts. It must not be nil.")
        hasher = self.hashers.get(type(opts))
        if hasher is None:
            raise BCCSPError(f"Unsupported 'HashOpt' provided [{opts}]")
        return hasher

    def hash(self, msg: bytes, opts: Any) -> bytes:
        """Hash ``msg`` with the hasher bound to the type of ``opts``."""
        hasher = self._hasher(opts)
        try:
            return hasher.hash(msg, opts)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(f"Failed hashing with opts [{opts}]: {exc}") from exc

    def get_hash(self, opts: Any) -> Any:
        """Return a hash object from the hasher bound to the type of ``opts``."""
        hasher = self._hasher(opts)
        try:
            return hasher.get_hash(opts)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(
                f"Failed getting hash function with opts [{opts}]: {exc}"
            ) from exc

    def sign(self, key: Any, digest: bytes, opts: Any) -> bytes:
        """Sign ``digest``; hashing a larger message is the caller's job."""
        if key is None:
            raise BCCSPError("Invalid Key. It must not be nil.")
        if not digest:
            raise BCCSPError("Invalid digest. Cannot be empty.")
        signer = self.signers.get(type(key))
        if signer is None:
            raise BCCSPError(f"Unsupported 'SignKey' provided [{type(key)}]")
        try:
            return signer.sign(key, digest, opts)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(f"Failed signing with opts [{opts}]: {exc}") from exc

    def verify(self, key: Any, signature: bytes, digest: bytes, opts: Any) -> bool:
        """Verify ``signature`` against ``key`` and ``digest``."""
        if key is None:
            raise BCCSPError("Invalid Key. It must not be nil.")
        if not signature:
            raise BCCSPError("Invalid signature. Cannot be empty.")
        if not digest:
            raise BCCSPError("Invalid digest. Cannot be empty.")
        verifier = self.verifiers.get(type(key))
        if verifier is None:
            raise BCCSPError(f"Unsupported 'VerifyKey' provided [{key}]")
        try:
            return verifier.verify(key, signature, digest, opts)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(f"Failed verifying with opts [{opts}]: {exc}") from exc

    def encrypt(self, key: Any, plaintext: bytes, opts: Any) -> bytes:
        """Encrypt ``plaintext`` with ``key``."""
        if key is None:
            raise BCCSPError("Invalid Key. It must not be nil.")
        encryptor = self.encryptors.get(type(key))
        if encryptor is None:
            raise BCCSPError(f"Unsupported 'EncryptKey' provided [{key}]")
        return encryptor.encrypt(key, plaintext, opts)

    def decrypt(self, key: Any, ciphertext: bytes, opts: Any) -> bytes:
        """Decrypt ``ciphertext`` with ``key``."""
        if key is None:
            raise BCCSPError("Invalid Key. It must not be nil.")
        decryptor = self.decryptors.get(type(key))
        if decryptor is None:
            raise BCCSPError(f"Unsupported 'DecryptKey' provided [{key}]")
        try:
            return decryptor.decrypt(key, ciphertext, opts)
        except _WRAPPED_ERRORS as exc:
            raise BCCSPError(
                f"Failed decrypting with opts [{opts}]: {exc}"
            ) from exc