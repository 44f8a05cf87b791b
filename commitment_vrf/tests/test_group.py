"""
⚠️ DRAFT — requires crypto review before production use

Tests for the secp256k1 group abstraction.
"""

import threading

import pytest

from commitment_vrf.config import GROUP_ORDER, POINT_SIZE_BYTES, SCALAR_SIZE_BYTES
from commitment_vrf.exceptions import (
    ConfigurationError,
    CryptographicError,
    MalformedEncodingError,
)
from commitment_vrf.group import (
    Group,
    clear_group_cache,
    get_group,
    setup_group,
)

# secp256k1 generator, compressed
G_COMPRESSED = bytes.fromhex(
    "0279BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798"
)


@pytest.fixture
def group():
    return setup_group()


# ============================================================================
# SETUP
# ============================================================================


def test_setup_group(group):
    assert group.curve == "secp256k1"
    assert group.library == "petlib"
    assert group.order == GROUP_ORDER


def test_setup_rejects_other_curves():
    with pytest.raises(ValueError, match="secp256k1"):
        setup_group(curve_name="P-256")
    with pytest.raises(ValueError, match="petlib"):
        setup_group(library="cryptography")


def test_group_rejects_wrong_order(group):
    with pytest.raises(ConfigurationError):
        Group(
            curve=group.curve,
            library=group.library,
            ec_group=group.ec_group,
            G=group.G,
            order=GROUP_ORDER - 1,
        )


def test_cached_group_is_shared():
    clear_group_cache()
    results = []

    def worker():
        results.append(get_group())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert all(g is results[0] for g in results)
    assert get_group() is results[0]


def test_clear_cache():
    first = get_group()
    clear_group_cache()
    assert get_group() is not first


# ============================================================================
# SCALARS
# ============================================================================


def test_scalar_arithmetic_wraps(group):
    n = group.order
    assert group.scalar_add(n - 1, 2) == 1
    assert group.scalar_sub(1, 2) == n - 1
    assert group.scalar_mul(n - 1, n - 1) == 1
    assert group.scalar_neg(1) == n - 1
    assert group.scalar_neg(0) == 0


def test_random_scalar_nonzero(group):
    for _ in range(20):
        assert 0 < group.random_scalar() < group.order


def test_scalar_encoding(group):
    assert group.encode_scalar(1) == b"\x00" * 31 + b"\x01"
    assert group.decode_scalar(group.encode_scalar(GROUP_ORDER - 1)) == GROUP_ORDER - 1
    assert len(group.encode_scalar(12345)) == SCALAR_SIZE_BYTES


def test_encode_scalar_out_of_range(group):
    with pytest.raises(ValueError):
        group.encode_scalar(GROUP_ORDER)
    with pytest.raises(ValueError):
        group.encode_scalar(-1)
    with pytest.raises(TypeError):
        group.encode_scalar(b"\x01")


def test_decode_scalar_rejects_non_canonical(group):
    with pytest.raises(MalformedEncodingError):
        group.decode_scalar(GROUP_ORDER.to_bytes(32, "big"))
    with pytest.raises(MalformedEncodingError):
        group.decode_scalar(b"\xff" * 32)


@pytest.mark.parametrize("size", [0, 31, 33])
def test_decode_scalar_rejects_wrong_length(group, size):
    with pytest.raises(MalformedEncodingError):
        group.decode_scalar(b"\x01" * size)


def test_scalar_from_bytes_reduces(group):
    assert group.scalar_from_bytes(b"\x01\xe2\x40") == 123456
    assert group.scalar_from_bytes(GROUP_ORDER.to_bytes(32, "big")) == 0
    assert group.scalar_from_bytes(b"") == 0


# ============================================================================
# POINTS
# ============================================================================


def test_generator_encoding(group):
    assert group.encode_point(group.G) == G_COMPRESSED
    assert group.encode_point(group.mul(1)) == G_COMPRESSED


def test_mul_against_base_and_point(group):
    P = group.mul(7)
    assert group.mul(3, P) == group.mul(21)
    assert group.mul(5, None) == group.mul(5)


def test_add_is_scalar_homomorphic(group):
    a, b = 123456789, 987654321
    assert group.add(group.mul(a), group.mul(b)) == group.mul(a + b)


def test_mul_by_order_is_identity(group):
    assert group.is_identity(group.mul(GROUP_ORDER - 1, group.G) + group.G)


def test_neg(group):
    P = group.mul(42)
    assert group.is_identity(group.add(P, group.neg(P)))
    assert group.neg(P) == group.mul(GROUP_ORDER - 42)


def test_points_equal(group):
    assert group.points_equal(group.mul(9), group.mul(9))
    assert not group.points_equal(group.mul(9), group.mul(10))


def test_point_roundtrip(group):
    P = group.mul(2024)
    data = group.encode_point(P)
    assert len(data) == POINT_SIZE_BYTES
    assert group.decode_point(data) == P


def test_encode_identity_fails(group):
    with pytest.raises(CryptographicError):
        group.encode_point(group.ec_group.infinite())


@pytest.mark.parametrize(
    "data",
    [
        b"",
        G_COMPRESSED[:-1],
        G_COMPRESSED + b"\x00",
        b"\x05" + G_COMPRESSED[1:],
        b"\x02" + b"\xff" * 32,
        b"\x00" * 33,
    ],
)
def test_decode_point_rejects_malformed(group, data):
    with pytest.raises(MalformedEncodingError):
        group.decode_point(data)


def test_decode_point_rejects_non_bytes(group):
    with pytest.raises(MalformedEncodingError):
        group.decode_point("02" * 33)
