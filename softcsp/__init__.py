"""Software cryptographic service provider for ECDSA and Ed25519 keys."""

__version__ = "0.1.0"