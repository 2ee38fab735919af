"""
ECDSA public keys: a validated curve point able to verify signatures.
"""
import logging
from typing import Optional, Union

import cryptography_utils as crypto
from curves import Curve, resolve_curve
from ecdsa_errors import CurveMismatchError, EccError, InternalInvariantError, InvalidKeyError
from hashing import HashFunction, hash_to_int
from point import Point

logger = logging.getLogger(__name__)


def _in_scalar_range(value, n: int) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value < n


class PublicKey:
    """
    A point E on a specific curve.

    A PublicKey is only constructed for points that are finite, on the
    curve, and of order dividing n.
    """

    __slots__ = ("_e", "_curve")

    def __init__(self, e: Point, curve: Optional[Union[str, Curve]] = None):
        """
        Validates and wraps a public point.

        Args:
            e (Point): The public point.
            curve (Optional[Union[str, Curve]]): The expected curve; defaults
                to the point's own curve.

        Raises:
            InvalidKeyError: If the point is the identity, off the curve,
                             or outside the subgroup generated by G.
            CurveMismatchError: If the point is not on the expected curve.
        """
        if not isinstance(e, Point):
            raise InvalidKeyError(f"public key must be a Point, got {type(e).__name__}")
        curve = e.curve if curve is None else resolve_curve(curve)
        if e.curve != curve:
            raise CurveMismatchError("public point is not on the requested curve")
        if e.is_identity:
            raise InvalidKeyError("public key cannot be the point at infinity")
        if not e.on_curve():
            raise InvalidKeyError("pubkey not on curve")
        if not e.multiply(curve.n).is_identity:
            raise InvalidKeyError("pubkey is not in the group generated by G")
        object.__setattr__(self, "_e", e)
        object.__setattr__(self, "_curve", curve)

    @classmethod
    def from_coordinates(cls, x: int, y: int, curve: Union[str, Curve]) -> "PublicKey":
        """Builds a PublicKey from already parsed affine coordinates."""
        return cls(Point(x, y, curve))

    def __setattr__(self, name, value):
        raise AttributeError("PublicKey is immutable")

    def __delattr__(self, name):
        raise AttributeError("PublicKey is immutable")

    @property
    def e(self) -> Point:
        return self._e

    @property
    def curve(self) -> Curve:
        return self._curve

    def verify(
        self,
        r: int,
        s: int,
        message: bytes,
        hash_function: HashFunction,
        require_low_s: bool = False,
    ) -> bool:
        """
        Checks an ECDSA signature (r, s) over message.

        Both s and n - s are accepted unless require_low_s is set. Any
        malformed or inconsistent input yields False rather than an
        exception.

        Args:
            r (int): First signature component.
            s (int): Second signature component.
            message (bytes): The signed message.
            hash_function (HashFunction): Must match the signer's.
            require_low_s (bool): Reject s greater than n // 2.

        Returns:
            bool: True if the signature is valid for this key.
        """
        curve = self._curve
        n = curve.n
        try:
            if self._e.is_identity or not self._e.on_curve():
                logger.debug("Rejecting signature: public point invalid")
                return False
            if not self._e.multiply(n).is_identity:
                logger.debug("Rejecting signature: public point has wrong order")
                return False

            if not (_in_scalar_range(r, n) and _in_scalar_range(s, n)):
                logger.debug("Rejecting signature: r or s outside [1, n-1]")
                return False
            if require_low_s and not crypto.is_low_s(s, n):
                logger.debug("Rejecting signature: s is not in low-s form")
                return False
            if not isinstance(message, (bytes, bytearray, memoryview)):
                logger.debug("Rejecting signature: message is not bytes-like")
                return False

            h = hash_to_int(hash_function(message), n)

            w = crypto.mod_inverse(s, n)
            u = h * w % n
            v = r * w % n
            q = Point.generator(curve).multiply(u).add(self._e.multiply(v))

            if q.is_identity:
                logger.debug("Rejecting signature: u*G + v*E is the identity")
                return False

            return q.x % n == r
        except InternalInvariantError:
            logger.warning("Internal arithmetic invariant failed during verification", exc_info=True)
            return False
        except (EccError, TypeError, ValueError, ZeroDivisionError) as e:
            logger.debug("Rejecting signature: %s", e)
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return NotImplemented
        return self._e == other._e

    def __hash__(self) -> int:
        return hash(self._e)

    def __repr__(self) -> str:
        return f"PublicKey({self._e!r})"
