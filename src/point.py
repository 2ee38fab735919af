"""
Affine points on a short-Weierstrass curve and the group law.

A Point is either the identity (the point at infinity) of its curve or
an (x, y) pair satisfying that curve's equation. Points are immutable;
every operation returns a new Point and checks that the result is still
on the curve.
"""
from typing import List, Optional, Tuple, Union

import cryptography_utils as crypto
from curves import Curve, resolve_curve
from ecdsa_errors import (
    ArithmeticInvariantError,
    CurveMismatchError,
    InvalidPointError,
    InvalidScalarError,
)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class Point:
    """
    A point on a specific curve, or that curve's identity element.

    The curve is held by reference; points from different curves never
    combine.
    """

    __slots__ = ("_x", "_y", "_curve", "_inf")

    def __init__(self, x: int, y: int, curve: Union[str, Curve]):
        """
        Builds a finite point after checking it lies on the curve.

        Args:
            x (int): Affine x-coordinate in [0, p).
            y (int): Affine y-coordinate in [0, p).
            curve (Union[str, Curve]): A registry name or Curve instance.

        Raises:
            InvalidPointError: If the coordinates are not field elements or
                               do not satisfy the curve equation.
            UnsupportedCurveError: If the curve name is not registered.
        """
        curve = resolve_curve(curve)
        if not (_is_int(x) and _is_int(y)):
            raise InvalidPointError("point coordinates must be integers")
        if not (0 <= x < curve.p and 0 <= y < curve.p):
            raise InvalidPointError("point coordinates outside the field")
        if not curve.contains(x, y):
            raise InvalidPointError("point not on curve")
        object.__setattr__(self, "_x", x)
        object.__setattr__(self, "_y", y)
        object.__setattr__(self, "_curve", curve)
        object.__setattr__(self, "_inf", False)

    # constructors -----------------------------------------------------------
    @classmethod
    def _make(cls, x: Optional[int], y: Optional[int], curve: Curve, infinity: bool = False) -> "Point":
        p = object.__new__(cls)
        object.__setattr__(p, "_x", x)
        object.__setattr__(p, "_y", y)
        object.__setattr__(p, "_curve", curve)
        object.__setattr__(p, "_inf", infinity)
        return p

    @classmethod
    def identity(cls, curve: Union[str, Curve]) -> "Point":
        """The point at infinity of the given curve."""
        return cls._make(None, None, resolve_curve(curve), infinity=True)

    @classmethod
    def generator(cls, curve: Union[str, Curve]) -> "Point":
        """The generator G of the given curve."""
        curve = resolve_curve(curve)
        gx, gy = curve.g
        return cls(gx, gy, curve)

    def __setattr__(self, name, value):
        raise AttributeError("Point is immutable")

    def __delattr__(self, name):
        raise AttributeError("Point is immutable")

    # accessors --------------------------------------------------------------
    @property
    def x(self) -> Optional[int]:
        """The x-coordinate, or None for the identity."""
        return self._x

    @property
    def y(self) -> Optional[int]:
        """The y-coordinate, or None for the identity."""
        return self._y

    @property
    def curve(self) -> Curve:
        return self._curve

    @property
    def is_identity(self) -> bool:
        return self._inf

    def to_tuple(self) -> Tuple[int, int]:
        """
        Returns the (x, y) coordinates of a finite point.

        Raises:
            ValueError: For the identity, which has no affine coordinates.
        """
        if self._inf:
            raise ValueError("the identity has no affine coordinates")
        return self._x, self._y

    # predicates -------------------------------------------------------------
    def on_curve(self) -> bool:
        """True for the identity, otherwise an exact check of the curve equation."""
        if self._inf:
            return True
        return self._curve.contains(self._x, self._y)

    def equals(self, other: object) -> bool:
        if not isinstance(other, Point):
            return False
        if self is other:
            return True
        if self._curve != other._curve:
            return False
        if self._inf or other._inf:
            return self._inf and other._inf
        return self._x == other._x and self._y == other._y

    def is_negation(self, other: "Point") -> bool:
        """
        True if other is the additive inverse of this point.

        Raises:
            CurveMismatchError: If the points are on different curves.
        """
        self._require_same_curve(other)
        if self._inf or other._inf:
            return self._inf and other._inf
        return self._x == other._x and self._y == (-other._y) % self._curve.p

    # group law --------------------------------------------------------------
    def negate(self) -> "Point":
        if self._inf:
            return self
        q = Point._make(self._x, (-self._y) % self._curve.p, self._curve)
        return q._checked("negation")

    def add(self, other: "Point") -> "Point":
        """
        Adds two points on the same curve.

        Raises:
            CurveMismatchError: If the points are on different curves.
            ArithmeticInvariantError: If the result is not on the curve.
        """
        self._require_same_curve(other)

        if self._inf:
            return other
        if other._inf:
            return self

        if self.equals(other):
            return self.double()

        if self.is_negation(other):
            return Point.identity(self._curve)

        # Distinct x is the only case left for points on the curve
        if self._x == other._x:
            raise ArithmeticInvariantError("points with same x but not negations")

        p = self._curve.p
        slope = (other._y - self._y) * crypto.mod_inverse(other._x - self._x, p) % p
        x = (slope * slope - self._x - other._x) % p
        y = (slope * (self._x - x) - self._y) % p
        return Point._make(x, y, self._curve)._checked("addition")

    def double(self) -> "Point":
        if self._inf:
            return self

        # A point with y = 0 has order two
        if self._y == 0:
            return Point.identity(self._curve)

        p = self._curve.p
        slope = (3 * self._x * self._x + self._curve.a) * crypto.mod_inverse(2 * self._y, p) % p
        x = (slope * slope - 2 * self._x) % p
        y = (slope * (self._x - x) - self._y) % p
        return Point._make(x, y, self._curve)._checked("doubling")

    def multiply(self, k: int) -> "Point":
        """
        Computes k * self.

        Builds a table of 2^i * self for every 2^i <= k, then sums the
        largest cached multiples that still fit into the remaining scalar.
        Zero maps to the identity and a negative k multiplies the negation.

        Args:
            k (int): The scalar.

        Returns:
            Point: The unique point k * self.

        Raises:
            InvalidScalarError: If k is not an integer.
            ArithmeticInvariantError: If the result is not on the curve.
        """
        if not _is_int(k):
            raise InvalidScalarError(f"scalar must be an integer, got {type(k).__name__}")
        if k < 0:
            return self.negate().multiply(-k)
        if k == 0 or self._inf:
            return Point.identity(self._curve)

        doublings: List[Point] = [self]
        while (1 << len(doublings)) <= k:
            doublings.append(doublings[-1].double())

        result = Point.identity(self._curve)
        remaining = k
        for i in range(len(doublings) - 1, -1, -1):
            if (1 << i) <= remaining:
                result = result.add(doublings[i])
                remaining -= 1 << i

        return result._checked("multiplication")

    # operators --------------------------------------------------------------
    def __neg__(self) -> "Point":
        return self.negate()

    def __add__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: "Point") -> "Point":
        if not isinstance(other, Point):
            return NotImplemented
        return self.add(other.negate())

    def __mul__(self, k: int) -> "Point":
        if not _is_int(k):
            return NotImplemented
        return self.multiply(k)

    def __rmul__(self, k: int) -> "Point":
        if not _is_int(k):
            return NotImplemented
        return self.multiply(k)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((self._curve, self._inf, self._x, self._y))

    def __repr__(self) -> str:
        curve = self._curve.name or "custom"
        if self._inf:
            return f"Point(identity, curve={curve})"
        return f"Point(x={self._x:#x}, y={self._y:#x}, curve={curve})"

    # internals --------------------------------------------------------------
    def _require_same_curve(self, other: "Point") -> None:
        if not isinstance(other, Point):
            raise TypeError(f"expected Point, got {type(other).__name__}")
        if self._curve is not other._curve and self._curve != other._curve:
            raise CurveMismatchError("points not on same curve")

    def _checked(self, operation: str) -> "Point":
        if not self.on_curve():
            raise ArithmeticInvariantError(f"{operation} produced a point off the curve")
        return self
