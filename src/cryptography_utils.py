"""
Number-theoretic helpers shared by the point and key modules, plus all
direct interactions with the coincurve library, which serves as a
libsecp256k1 reference backend for secp256k1 cross-checks.
"""
import hashlib
import secrets
from typing import TYPE_CHECKING, Callable, Optional, Tuple

from curves import get_curve
from ecdsa_errors import CurveMismatchError, InvalidScalarError

if TYPE_CHECKING:
    from coincurve.keys import PublicKey

SECP256K1_SCALAR_BYTES = 32


def mod_inverse(value: int, modulus: int) -> int:
    """
    Returns the multiplicative inverse of value modulo modulus.

    Raises:
        ZeroDivisionError: If value is congruent to zero.
        ValueError: If value and modulus are not coprime.
    """
    value %= modulus
    if value == 0:
        raise ZeroDivisionError("cannot invert zero")
    return pow(value, -1, modulus)


def random_scalar(n: int) -> int:
    """Draws a uniform integer in [1, n-1] from the OS CSPRNG."""
    if n < 2:
        raise InvalidScalarError(f"cannot draw a scalar below {n}")
    return secrets.randbelow(n - 1) + 1


def is_low_s(s: int, n: int) -> bool:
    """True if s lies in the lower half of [1, n-1]."""
    return 1 <= s <= n // 2


def normalize_s(s: int, n: int) -> int:
    """Maps s to its low-s form, min(s, n - s)."""
    return s if s <= n // 2 else n - s


# --- libsecp256k1 reference backend (secp256k1 only) ---
def _secp256k1_scalar_bytes(scalar: int) -> bytes:
    n = get_curve("secp256k1").n
    if not isinstance(scalar, int) or not 1 <= scalar < n:
        raise InvalidScalarError("secp256k1 scalar must be in [1, n-1]")
    return scalar.to_bytes(SECP256K1_SCALAR_BYTES, 'big')


def libsecp256k1_public_point(scalar: int) -> Tuple[int, int]:
    """Computes scalar * G on secp256k1 with libsecp256k1."""
    from coincurve.keys import PrivateKey
    return PrivateKey(_secp256k1_scalar_bytes(scalar)).public_key.point()


def to_coincurve_public_key(point) -> "PublicKey":
    """
    Converts a finite secp256k1 Point into a coincurve PublicKey.

    Raises:
        CurveMismatchError: If the point is not on secp256k1.
        ValueError: If the point is the identity.
    """
    if point.curve != get_curve("secp256k1"):
        raise CurveMismatchError("libsecp256k1 only supports secp256k1 points")
    if point.is_identity:
        raise ValueError("the identity has no libsecp256k1 encoding")
    from coincurve.keys import PublicKey
    return PublicKey.from_point(point.x, point.y)


def coincurve_point(public_key: "PublicKey") -> Tuple[int, int]:
    """Extracts the affine (x, y) coordinates of a coincurve PublicKey."""
    return public_key.point()


def libsecp256k1_sign(
    scalar: int,
    message: bytes,
    hasher: Optional[Callable[[bytes], bytes]] = None,
) -> Tuple[int, int]:
    """
    Signs with libsecp256k1 (RFC 6979 nonces) and returns the raw (r, s).

    The signature is taken from the 65-byte compact recoverable form,
    r || s || recovery id. libsecp256k1 always emits low-s signatures.
    """
    if hasher is None:
        hasher = lambda data: hashlib.sha256(data).digest()
    from coincurve.keys import PrivateKey
    compact = PrivateKey(_secp256k1_scalar_bytes(scalar)).sign_recoverable(message, hasher=hasher)
    r = int.from_bytes(compact[:32], 'big')
    s = int.from_bytes(compact[32:64], 'big')
    return r, s
