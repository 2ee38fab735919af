"""
ECDSA private keys: a secret scalar bound to a curve, able to derive its
public key and to sign messages.
"""
import logging
from typing import Tuple, Union

import cryptography_utils as crypto
from curves import Curve, resolve_curve
from ecdsa_errors import InvalidKeyError, SigningError
from hashing import HashFunction, hash_to_int
from point import Point
from public_key import PublicKey

logger = logging.getLogger(__name__)

# Degenerate nonces occur with probability about 2/n per attempt
DEFAULT_MAX_SIGN_ATTEMPTS = 64


class PrivateKey:
    """
    A secret scalar d in [1, n-1] on a specific curve.

    Instances are immutable. The scalar is never included in repr() or
    log output.
    """

    __slots__ = ("_d", "_curve")

    def __init__(self, d: int, curve: Union[str, Curve]):
        """
        Binds an already validated secret scalar to a curve.

        Args:
            d (int): The secret scalar.
            curve (Union[str, Curve]): A registry name or Curve instance.

        Raises:
            InvalidKeyError: If d is not an integer in [1, n-1].
            UnsupportedCurveError: If the curve name is not registered.
        """
        curve = resolve_curve(curve)
        if isinstance(d, bool) or not isinstance(d, int):
            raise InvalidKeyError("private scalar must be an integer")
        if not 1 <= d < curve.n:
            raise InvalidKeyError("invalid privkey value: must be in [1, n-1]")
        object.__setattr__(self, "_d", d)
        object.__setattr__(self, "_curve", curve)

    @classmethod
    def generate(cls, curve: Union[str, Curve]) -> "PrivateKey":
        """Draws a fresh key uniformly from [1, n-1] using the OS CSPRNG."""
        curve = resolve_curve(curve)
        return cls(crypto.random_scalar(curve.n), curve)

    def __setattr__(self, name, value):
        raise AttributeError("PrivateKey is immutable")

    def __delattr__(self, name):
        raise AttributeError("PrivateKey is immutable")

    @property
    def d(self) -> int:
        return self._d

    @property
    def curve(self) -> Curve:
        return self._curve

    def calc_pub_key(self) -> PublicKey:
        """Derives the public key d * G."""
        e = Point.generator(self._curve).multiply(self._d)
        return PublicKey(e, self._curve)

    def sign(
        self,
        message: bytes,
        hash_function: HashFunction,
        max_attempts: int = DEFAULT_MAX_SIGN_ATTEMPTS,
        low_s: bool = False,
    ) -> Tuple[int, int]:
        """
        Produces an ECDSA signature (r, s) over message.

        Each attempt draws a fresh nonce k; attempts yielding r = 0 or
        s = 0 are discarded and retried with a new nonce.

        Args:
            message (bytes): The message to sign.
            hash_function (HashFunction): Maps the message to a digest.
            max_attempts (int): Upper bound on nonce draws.
            low_s (bool): Replace s by n - s when s is in the upper half.

        Returns:
            Tuple[int, int]: The signature pair, both in [1, n-1].

        Raises:
            SigningError: If every attempt produced a degenerate signature.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        n = self._curve.n
        g = Point.generator(self._curve)
        h = hash_to_int(hash_function(message), n)

        for attempt in range(1, max_attempts + 1):
            k = crypto.random_scalar(n)

            q = g.multiply(k)
            r = 0 if q.is_identity else q.x % n
            if r == 0:
                logger.debug("Discarding nonce with r = 0 (attempt %d)", attempt)
                continue

            s = crypto.mod_inverse(k, n) * (h + r * self._d) % n
            if s == 0:
                logger.debug("Discarding nonce with s = 0 (attempt %d)", attempt)
                continue

            if low_s:
                s = crypto.normalize_s(s, n)
            return r, s

        raise SigningError(f"no valid signature after {max_attempts} nonce draws")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivateKey):
            return NotImplemented
        return self._curve == other._curve and self._d == other._d

    def __hash__(self) -> int:
        return hash((self._curve, self._d))

    def __repr__(self) -> str:
        return f"PrivateKey(curve={self._curve.name or 'custom'})"
