"""
Short-Weierstrass curve parameters and the read-only registry of named
curves.

A curve is y^2 = x^3 + a*x + b over the prime field GF(p), together with
a generator G and the order n of the group G generates.
"""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Tuple, Union

from ecdsa_errors import InvalidCurveError, UnsupportedCurveError


@dataclass(frozen=True)
class Curve:
    """
    Immutable domain parameters of a prime-field elliptic curve.

    Equality covers p, a, b, g and n; the name is descriptive only.
    """

    p: int
    a: int
    b: int
    g: Tuple[int, int]
    n: int
    name: str = field(default="", compare=False)

    def contains(self, x: int, y: int) -> bool:
        """Checks the curve equation for the affine pair (x, y)."""
        lhs = pow(y, 2, self.p)
        rhs = (pow(x, 3, self.p) + self.a * x + self.b) % self.p
        return lhs == rhs

    def discriminant(self) -> int:
        """Returns 4a^3 + 27b^2 mod p, which is zero for singular curves."""
        return (4 * pow(self.a, 3, self.p) + 27 * pow(self.b, 2, self.p)) % self.p

    @property
    def bit_length(self) -> int:
        """Bit length of the group order n."""
        return self.n.bit_length()

    def __repr__(self) -> str:
        if self.name:
            return f"Curve({self.name})"
        return f"Curve(p={self.p}, a={self.a}, b={self.b}, g={self.g}, n={self.n})"


# --- Named curves ---
_DEFINITIONS = (
    Curve(
        # SEC 2 / X9.62, also known as P-256
        name="prime256v1",
        p=0xffffffff00000001000000000000000000000000ffffffffffffffffffffffff,
        a=0xffffffff00000001000000000000000000000000fffffffffffffffffffffffc,
        b=0x5ac635d8aa3a93e7b3ebbd55769886bc651d06b0cc53b0f63bce3c3e27d2604b,
        g=(
            0x6b17d1f2e12c4247f8bce6e563a440f277037d812deb33a0f4a13945d898c296,
            0x4fe342e2fe1a7f9b8ee7eb4a7c0f9e162bce33576b315ececbb6406837bf51f5,
        ),
        n=0xffffffff00000000ffffffffffffffffbce6faada7179e84f3b9cac2fc632551,
    ),
    Curve(
        name="secp256k1",
        p=0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f,
        a=0,
        b=7,
        g=(
            0x79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798,
            0x483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8,
        ),
        n=0xfffffffffffffffffffffffffffffffebaaedce6af48a03bbfd25e8cd0364141,
    ),
    Curve(
        # P-384
        name="secp384r1",
        p=0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffeffffffff0000000000000000ffffffff,
        a=0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffeffffffff0000000000000000fffffffc,
        b=0xb3312fa7e23ee7e4988e056be3f82d19181d9c6efe8141120314088f5013875ac656398d8a2ed19d2a85c8edd3ec2aef,
        g=(
            0xaa87ca22be8b05378eb1c71ef320ad746e1d3b628ba79b9859f741e082542a385502f25dbf55296c3a545e3872760ab7,
            0x3617de4a96262c6f5d9e98bf9292dc29f8f41dbd289a147ce9da3113b5f0b8c00a60b1ce1d7e819d7a431d7c90ea0e5f,
        ),
        n=0xffffffffffffffffffffffffffffffffffffffffffffffffc7634d81f4372ddf581a0db248b0a77aecec196accc52973,
    ),
)

CURVES: Mapping[str, Curve] = MappingProxyType({c.name: c for c in _DEFINITIONS})


def supported_curves() -> List[str]:
    """Returns the names of all registered curves, sorted."""
    return sorted(CURVES)


def get_curve(name: str) -> Curve:
    """
    Looks up a curve in the registry.

    Args:
        name (str): The registry name, e.g. 'secp256k1'.

    Returns:
        Curve: The shared curve instance.

    Raises:
        UnsupportedCurveError: If no curve is registered under that name.
    """
    try:
        return CURVES[name]
    except (KeyError, TypeError):
        raise UnsupportedCurveError(
            f"unsupported curve: {name!r} (supported: {', '.join(supported_curves())})"
        ) from None


def resolve_curve(curve: Union[str, Curve]) -> Curve:
    """Accepts either a registry name or a Curve instance."""
    if isinstance(curve, Curve):
        return curve
    return get_curve(curve)


def validate_curve(curve: Curve) -> None:
    """
    Checks the domain parameter invariants of a curve.

    The order check computes n*G and therefore costs one full scalar
    multiplication.

    Args:
        curve (Curve): The curve to check.

    Raises:
        InvalidCurveError: Naming the first invariant that does not hold.
    """
    # Imported here: point depends on this module.
    from point import Point

    label = curve.name or "curve"
    if curve.p < 3 or curve.n < 1:
        raise InvalidCurveError(f"{label}: p and n must be positive (p > 2)")
    if curve.n >= curve.p:
        raise InvalidCurveError(f"{label}: n >= p")
    if curve.discriminant() == 0:
        raise InvalidCurveError(f"{label}: singular curve")

    gx, gy = curve.g
    if not (0 <= gx < curve.p and 0 <= gy < curve.p) or not curve.contains(gx, gy):
        raise InvalidCurveError(f"{label}: g not on curve")

    if not Point.generator(curve).multiply(curve.n).is_identity:
        raise InvalidCurveError(f"{label}: n * g != identity")
