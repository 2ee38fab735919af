import hashlib

import pytest

import cryptography_utils as crypto
import curves
from curves import Curve
from ecdsa_errors import (
    ArithmeticInvariantError,
    CurveMismatchError,
    InvalidKeyError,
    InvalidPointError,
)
from hashing import double_sha256, sha256, sha384, sha512
from point import Point
from private_key import PrivateKey
from public_key import PublicKey

# Worked example from learnmeabitcoin.com (ECDSA)
MESSAGE = b"Message for ECDSA signing"
D = 0xd9a4b9a99984eadea545b42efe7cd1eb101d2e55b30d35eb7a79fc216c087c57
R = 89383775124345383949639009137714586387472647985584917903906909455303659871882
S_LOW = 7439227374782059477889960317890800744771556402344980569214821196768403835101
S_HIGH = 108352861862534135945681024690797107108066007876729923813390341944749757659236


@pytest.fixture
def pubkey():
    return PrivateKey(D, "secp256k1").calc_pub_key()


class TestConstruction:
    def test_from_coordinates(self, pubkey):
        x, y = pubkey.e.to_tuple()
        rebuilt = PublicKey.from_coordinates(x, y, "secp256k1")
        assert rebuilt == pubkey
        assert hash(rebuilt) == hash(pubkey)

    def test_identity_rejected(self):
        with pytest.raises(InvalidKeyError, match="point at infinity"):
            PublicKey(Point.identity("secp256k1"))

    def test_off_curve_rejected(self, pubkey):
        x, y = pubkey.e.to_tuple()
        with pytest.raises(InvalidPointError):
            PublicKey.from_coordinates(x, y + 1, "secp256k1")

    def test_wrong_order_rejected(self):
        """(6, 0) lies on the toy curve but outside the order-5 subgroup."""
        toy7 = Curve(p=7, a=3, b=4, g=(1, 1), n=5, name="toy7")
        PublicKey(Point(1, 1, toy7))
        with pytest.raises(InvalidKeyError, match="not in the group"):
            PublicKey(Point(6, 0, toy7))

    def test_curve_mismatch(self, pubkey):
        with pytest.raises(CurveMismatchError):
            PublicKey(pubkey.e, "prime256v1")

    def test_not_a_point(self):
        with pytest.raises(InvalidKeyError):
            PublicKey((1, 2), "secp256k1")

    def test_immutable(self, pubkey):
        with pytest.raises(AttributeError):
            pubkey.e = Point.generator("secp256k1")
        with pytest.raises(AttributeError):
            del pubkey._e
        assert pubkey.e == PrivateKey(D, "secp256k1").calc_pub_key().e


class TestVerify:
    def test_literal_vector_accepts_both_s(self, pubkey):
        """The scheme does not enforce low-s, so s and n - s both verify."""
        assert sha256(MESSAGE) == bytes.fromhex(
            "de2d515297cad600f0365ef2be0f6d7e2ea3e757c7a9c8b3cdf49d8483670b1c"
        )
        assert pubkey.verify(R, S_LOW, MESSAGE, sha256)
        assert pubkey.verify(R, S_HIGH, MESSAGE, sha256)

    def test_require_low_s(self, pubkey):
        assert pubkey.verify(R, S_LOW, MESSAGE, sha256, require_low_s=True)
        assert not pubkey.verify(R, S_HIGH, MESSAGE, sha256, require_low_s=True)

    def test_wrong_message(self, pubkey):
        assert not pubkey.verify(R, S_LOW, b"Message for ECDSA signinG", sha256)

    def test_wrong_hash_function(self, pubkey):
        assert not pubkey.verify(R, S_LOW, MESSAGE, double_sha256)

    def test_wrong_key(self):
        other = PrivateKey(D - 1, "secp256k1").calc_pub_key()
        assert not other.verify(R, S_LOW, MESSAGE, sha256)

    @pytest.mark.parametrize("bit", [0, 1, 7, 100, 199])
    def test_tampered_message(self, pubkey, bit):
        tampered = bytearray(MESSAGE)
        tampered[bit // 8] ^= 1 << (bit % 8)
        assert not pubkey.verify(R, S_LOW, bytes(tampered), sha256)

    @pytest.mark.parametrize("bit", [0, 1, 64, 128, 255])
    def test_tampered_r(self, pubkey, bit):
        assert not pubkey.verify(R ^ (1 << bit), S_LOW, MESSAGE, sha256)

    @pytest.mark.parametrize("bit", [0, 1, 64, 128, 255])
    def test_tampered_s(self, pubkey, bit):
        assert not pubkey.verify(R, S_LOW ^ (1 << bit), MESSAGE, sha256)

    @pytest.mark.parametrize("r, s", [
        (0, S_LOW),
        (R, 0),
        (-R, S_LOW),
        (R, -S_LOW),
    ])
    def test_out_of_range_components(self, pubkey, r, s):
        assert not pubkey.verify(r, s, MESSAGE, sha256)

    def test_components_not_below_order(self, pubkey):
        n = pubkey.curve.n
        assert not pubkey.verify(R + n, S_LOW, MESSAGE, sha256)
        assert not pubkey.verify(R, S_LOW + n, MESSAGE, sha256)
        assert not pubkey.verify(n, n, MESSAGE, sha256)

    @pytest.mark.parametrize("r, s", [
        ("1", S_LOW),
        (R, 1.5),
        (None, None),
        (True, True),
    ])
    def test_malformed_components_never_raise(self, pubkey, r, s):
        assert pubkey.verify(r, s, MESSAGE, sha256) is False

    def test_signature_from_libsecp256k1(self, pubkey):
        r, s = crypto.libsecp256k1_sign(D, MESSAGE)
        assert pubkey.verify(r, s, MESSAGE, sha256)
        assert pubkey.verify(r, s, MESSAGE, sha256, require_low_s=True)

    def test_libsecp256k1_signature_with_custom_hasher(self, pubkey):
        r, s = crypto.libsecp256k1_sign(D, MESSAGE, hasher=double_sha256)
        assert pubkey.verify(r, s, MESSAGE, double_sha256)
        assert not pubkey.verify(r, s, MESSAGE, sha256)

    @pytest.mark.parametrize("message, hash_function", [
        ("Message for ECDSA signing", sha256),
        (None, sha256),
        (12345, sha256),
        (MESSAGE, lambda data: data.hex()),
        (MESSAGE, lambda data: None),
    ])
    def test_malformed_message_or_digest_never_raises(self, pubkey, message, hash_function):
        """Non-bytes messages and digests are rejected with False."""
        assert pubkey.verify(R, S_LOW, message, hash_function) is False

    def test_bytearray_message_verifies(self, pubkey):
        assert pubkey.verify(R, S_LOW, bytearray(MESSAGE), sha256)

    def test_internal_failure_is_absorbed(self, pubkey, monkeypatch):
        """An arithmetic invariant failure inside verify yields False."""
        def broken_add(self, other):
            raise ArithmeticInvariantError("addition produced a point off the curve")

        monkeypatch.setattr(Point, "add", broken_add)
        assert pubkey.verify(R, S_LOW, MESSAGE, sha256) is False

    def test_point_failing_curve_check_is_rejected(self, pubkey, monkeypatch):
        monkeypatch.setattr(Curve, "contains", lambda self, x, y: False)
        assert pubkey.verify(R, S_LOW, MESSAGE, sha256) is False


@pytest.mark.parametrize("name, hash_function", [
    ("secp256k1", sha256),
    ("secp256k1", sha512),
    ("prime256v1", sha256),
    ("prime256v1", sha384),
    ("secp384r1", sha384),
    ("secp384r1", sha256),
    ("secp384r1", lambda m: hashlib.sha3_512(m).digest()),
])
def test_sign_verify_round_trip(name, hash_function):
    """Signatures verify for every curve and any injected hash, truncated or not."""
    key = PrivateKey.generate(name)
    pub = key.calc_pub_key()
    message = b"transfer 1 BTC to Alice"

    r, s = key.sign(message, hash_function)
    assert pub.verify(r, s, message, hash_function)
    assert pub.verify(r, key.curve.n - s, message, hash_function)
    assert not pub.verify(r, s, message + b"!", hash_function)


def test_low_s_signatures_pass_strict_verification():
    key = PrivateKey.generate("secp256k1")
    pub = key.calc_pub_key()
    for i in range(4):
        message = b"message %d" % i
        r, s = key.sign(message, sha256, low_s=True)
        assert crypto.is_low_s(s, key.curve.n)
        assert pub.verify(r, s, message, sha256, require_low_s=True)


def test_signatures_verify_with_coincurve_derived_key():
    """A key rebuilt from libsecp256k1 coordinates verifies our signatures."""
    key = PrivateKey.generate("secp256k1")
    x, y = crypto.libsecp256k1_public_point(key.d)
    pub = PublicKey.from_coordinates(x, y, curves.get_curve("secp256k1"))
    r, s = key.sign(MESSAGE, sha256)
    assert pub.verify(r, s, MESSAGE, sha256)
