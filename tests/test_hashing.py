import hashlib

from softcsp.hashing import Hasher


def test_hasher_hash_sha256():
    hasher = Hasher(hashlib.sha256)
    out = hasher.hash(b"hello world", None)
    assert out.hex() == (
        "b94d27b9934d3e08a52e52d7da7dabfac484efe37a5380ee9088f7ace2efcde9"
    )


def test_hasher_hash_matches_hashlib():
    hasher = Hasher(hashlib.sha384)
    msg = b"Hello World"
    assert hasher.hash(msg, None) == hashlib.sha384(msg).digest()


def test_hasher_get_hash_is_fresh():
    hasher = Hasher(hashlib.sha256)
    h1 = hasher.get_hash(None)
    h2 = hasher.get_hash(None)
    assert h1.name == "sha256"
    h1.update(b"data")
    assert h2.hexdigest() == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )
    assert h1.digest() != h2.digest()


def test_hasher_empty_message():
    hasher = Hasher(hashlib.sha256)
    assert hasher.hash(b"", None).hex() == (
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )