"""
⚠️ DRAFT — requires crypto review before production use

Prime-order group abstraction over secp256k1 using petlib.

Scalars are plain Python ints in [0, GROUP_ORDER); points are petlib
``EcPt`` objects. All curve arithmetic is delegated to petlib (OpenSSL).

Encodings:
    - Scalar: 32 bytes, big-endian, strictly below GROUP_ORDER
    - Point: 33 bytes, SEC1 compressed; the point at infinity has no
      fixed-width encoding and is rejected
"""

from typing import Any, Optional
from dataclasses import dataclass
import threading

try:
    from petlib.ec import EcGroup, EcPt
    from petlib.bn import Bn
except ImportError:
    raise ImportError(
        "petlib is required for curve arithmetic. "
        "Install with: pip install petlib"
    )

from .security import RandomnessSource
from .exceptions import CryptographicError, MalformedEncodingError, ConfigurationError
from .config import (
    CURVE_NAME,
    CURVE_LIBRARY,
    CURVE_NID,
    GROUP_ORDER,
    POINT_SIZE_BYTES,
    SCALAR_SIZE_BYTES,
    COFACTOR,
)


# ============================================================================
# GROUP
# ============================================================================


@dataclass(frozen=True)
class Group:
    """
    secp256k1 group with scalar-field helpers.

    Attributes:
        curve: Curve name ("secp256k1")
        library: Backing library ("petlib")
        ec_group: petlib EcGroup
        G: Base generator (EcPt)
        order: Group order n

    Instances hold no mutable state and may be shared between threads.
    """

    curve: str
    library: str
    ec_group: Any  # EcGroup
    G: Any  # EcPt
    order: int

    def __post_init__(self):
        if self.order != GROUP_ORDER:
            raise ConfigurationError(
                f"Group order mismatch: expected {GROUP_ORDER}, got {self.order}"
            )
        if COFACTOR != 1:
            raise ConfigurationError(
                f"COFACTOR={COFACTOR}, expected 1 (prime order groups only)"
            )

    # ------------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------------

    def scalar_add(self, a: int, b: int) -> int:
        return (a + b) % self.order

    def scalar_sub(self, a: int, b: int) -> int:
        return (a - b) % self.order

    def scalar_mul(self, a: int, b: int) -> int:
        return (a * b) % self.order

    def scalar_neg(self, a: int) -> int:
        return (-a) % self.order

    def random_scalar(
        self, randomness_source: Optional[RandomnessSource] = None
    ) -> int:
        """Uniform non-zero scalar from a cryptographically secure source."""
        if randomness_source is None:
            randomness_source = RandomnessSource()
        scalar = randomness_source.get_nonzero_scalar_mod_order()
        # Zero would make R the point at infinity
        while scalar % self.order == 0:
            scalar = randomness_source.get_nonzero_scalar_mod_order()
        return scalar % self.order

    def encode_scalar(self, scalar: int) -> bytes:
        """Encode scalar as SCALAR_SIZE_BYTES big-endian bytes."""
        if not isinstance(scalar, int):
            raise TypeError(f"scalar must be int, got {type(scalar)}")
        if not 0 <= scalar < self.order:
            raise ValueError("scalar must be in [0, GROUP_ORDER)")
        return scalar.to_bytes(SCALAR_SIZE_BYTES, "big")

    def decode_scalar(self, data: bytes) -> int:
        """
        Decode a fixed-width scalar.

        Raises:
            MalformedEncodingError: If the length is wrong or the value is
                not a canonical scalar (>= GROUP_ORDER)
        """
        if not isinstance(data, (bytes, bytearray)):
            raise MalformedEncodingError(
                f"scalar encoding must be bytes, got {type(data)}"
            )
        if len(data) != SCALAR_SIZE_BYTES:
            raise MalformedEncodingError(
                f"Invalid scalar size: expected {SCALAR_SIZE_BYTES} bytes, "
                f"got {len(data)}"
            )
        scalar = int.from_bytes(data, "big")
        if scalar >= self.order:
            raise MalformedEncodingError("Scalar is not reduced modulo GROUP_ORDER")
        return scalar

    def scalar_from_bytes(self, data: bytes) -> int:
        """Interpret arbitrary bytes big-endian and reduce modulo the order."""
        return int.from_bytes(data, "big") % self.order

    # ------------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------------

    def mul(self, scalar: int, point: Optional[Any] = None) -> Any:
        """
        Scalar multiplication.

        ``mul(k)`` is ``k * G``; ``mul(k, P)`` is ``k * P``.
        """
        if not isinstance(scalar, int):
            raise TypeError(f"scalar must be int, got {type(scalar)}")
        base = self.G if point is None else point
        return _to_bn(scalar % self.order) * base

    def add(self, p: Any, q: Any) -> Any:
        return p + q

    def neg(self, p: Any) -> Any:
        return -p

    def points_equal(self, p: Any, q: Any) -> bool:
        return p == q

    def is_identity(self, p: Any) -> bool:
        return p.is_infinite()

    def encode_point(self, point: Any) -> bytes:
        """
        Encode a point in compressed form (POINT_SIZE_BYTES).

        Raises:
            CryptographicError: If the point has no fixed-width encoding
        """
        if self.is_identity(point):
            raise CryptographicError("Point at infinity has no compressed encoding")
        data = point.export()
        if len(data) != POINT_SIZE_BYTES:
            raise CryptographicError(
                f"Point size mismatch: expected {POINT_SIZE_BYTES} bytes, "
                f"got {len(data)}"
            )
        return data

    def decode_point(self, data: bytes) -> Any:
        """
        Decode a compressed point.

        Raises:
            MalformedEncodingError: If the bytes are not a valid, finite
                curve point of the expected width
        """
        if not isinstance(data, (bytes, bytearray)):
            raise MalformedEncodingError(
                f"point encoding must be bytes, got {type(data)}"
            )
        if len(data) != POINT_SIZE_BYTES:
            raise MalformedEncodingError(
                f"Invalid point size: expected {POINT_SIZE_BYTES} bytes, "
                f"got {len(data)}"
            )
        try:
            point = EcPt.from_binary(bytes(data), self.ec_group)
        except Exception as e:
            raise MalformedEncodingError(f"Invalid point encoding: {e}") from e

        if point is None or not self.ec_group.check_point(point):
            raise MalformedEncodingError("Point is not on the curve")
        if self.is_identity(point):
            raise MalformedEncodingError("Point at infinity is not allowed")
        return point


def _to_bn(scalar: int) -> Bn:
    # Byte round-trip is the reliable int -> Bn path for all scalar values
    return Bn.from_binary(scalar.to_bytes(SCALAR_SIZE_BYTES, "big"))


# ============================================================================
# SETUP
# ============================================================================


def setup_group(
    curve_name: Optional[str] = None, library: Optional[str] = None
) -> Group:
    """
    Build the secp256k1 group.

    Args:
        curve_name: Name of elliptic curve (defaults to config.CURVE_NAME)
        library: Cryptographic library (defaults to config.CURVE_LIBRARY)

    Returns:
        Group

    Raises:
        ValueError: If curve/library combination is unsupported
        CryptographicError: If curve initialization fails
    """
    curve_name = curve_name or CURVE_NAME
    library = library or CURVE_LIBRARY

    if curve_name != "secp256k1":
        raise ValueError(f"Only secp256k1 is supported, got {curve_name}")

    if library != "petlib":
        raise ValueError(f"Only petlib is supported, got {library}")

    try:
        ec_group = EcGroup(CURVE_NID)
        G = ec_group.generator()
        order = int(ec_group.order())
    except Exception as e:
        raise CryptographicError(
            f"Failed to initialize curve {curve_name}: {e}"
        ) from e

    return Group(
        curve=curve_name,
        library=library,
        ec_group=ec_group,
        G=G,
        order=order,
    )


# ============================================================================
# CACHING (Thread-Safe)
# ============================================================================

_GROUP_CACHE: Optional[Group] = None
_CACHE_LOCK = threading.Lock()


def get_group() -> Group:
    """
    Get cached group (initialize if needed).

    Thread-safe using double-checked locking.
    """
    global _GROUP_CACHE

    if _GROUP_CACHE is not None:
        return _GROUP_CACHE

    with _CACHE_LOCK:
        if _GROUP_CACHE is None:
            _GROUP_CACHE = setup_group()

    return _GROUP_CACHE


def clear_group_cache() -> None:
    """Clear cached group. Next get_group() call reinitializes."""
    global _GROUP_CACHE

    with _CACHE_LOCK:
        _GROUP_CACHE = None
