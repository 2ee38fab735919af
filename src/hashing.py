"""
Hash capabilities for signing and verification, and the ECDSA rule that
turns a digest into an integer no wider than the group order.

A hash capability is any callable mapping bytes to bytes; the functions
here are the hashlib-backed ones a signing profile can name.
"""
import hashlib
from typing import Callable, Dict

HashFunction = Callable[[bytes], bytes]


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def sha384(data: bytes) -> bytes:
    return hashlib.sha384(data).digest()


def sha512(data: bytes) -> bytes:
    return hashlib.sha512(data).digest()


def double_sha256(data: bytes) -> bytes:
    """SHA-256 applied twice, as used for Bitcoin message digests."""
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


_NAMED: Dict[str, HashFunction] = {
    'sha256': sha256,
    'sha384': sha384,
    'sha512': sha512,
    'double_sha256': double_sha256,
}


def get_hash_function(name: str) -> HashFunction:
    """
    Resolves a hash capability by name.

    Known names map to the functions in this module; any other name is
    looked up in hashlib, so 'sha3_256' or 'blake2b' also work.

    Args:
        name (str): The hash name, case-insensitive.

    Returns:
        HashFunction: A callable mapping bytes to a digest.

    Raises:
        ValueError: If neither this module nor hashlib knows the name.
    """
    key = name.strip().lower()
    if key in _NAMED:
        return _NAMED[key]
    if key not in hashlib.algorithms_available or key.startswith('shake_'):
        raise ValueError(f"Unknown hash function: {name}")

    def _digest(data: bytes) -> bytes:
        return hashlib.new(key, data).digest()

    _digest.__name__ = key
    return _digest


def hash_to_int(digest: bytes, n: int) -> int:
    """
    Interprets a digest as a big-endian integer, truncated to the bit
    length of the group order n.

    Truncation keeps the leftmost bits (a right shift), it is not a
    reduction modulo n.

    Args:
        digest (bytes): The hash output.
        n (int): The group order.

    Returns:
        int: The digest as an integer of at most n.bit_length() bits.
    """
    h = int.from_bytes(digest, 'big')
    excess = len(digest) * 8 - n.bit_length()
    if excess > 0:
        h >>= excess
    return h
