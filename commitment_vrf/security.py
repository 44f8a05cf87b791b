"""
⚠️ DRAFT — requires crypto review before production use

Security utilities for cryptographic operations.

Fork-safe randomness, the package-wide hash, hash-to-curve and
constant-time comparison.
"""

import os
import secrets
import hashlib
import hmac

from .config import (
    GROUP_ORDER,
    HASH_TO_CURVE_PREFIX,
)


# ============================================================================
# RANDOMNESS SOURCE (Fork-Safe)
# ============================================================================


class RandomnessSource:
    """
    Cryptographically secure randomness with fork detection.

    Prevents catastrophic randomness reuse if process forks. Backed by
    ``secrets.SystemRandom``, which is safe to share between threads.

    Example:
        >>> rng = RandomnessSource()
        >>> k = rng.get_nonzero_scalar_mod_order()
    """

    def __init__(self):
        """Initialize randomness source with fork detection."""
        self._pid = os.getpid()
        self._rng = secrets.SystemRandom()

    def _check_fork(self) -> None:
        if os.getpid() != self._pid:
            self.__init__()

    def get_nonzero_scalar_mod_order(self) -> int:
        """Get random scalar in [1, GROUP_ORDER)."""
        self._check_fork()
        return self._rng.randrange(1, GROUP_ORDER)


# ============================================================================
# HASH FUNCTIONS
# ============================================================================


def new_hash():
    """Fresh SHA-256 object; the only hash used on the wire."""
    return hashlib.sha256()


def hash_digest(*parts: bytes) -> bytes:
    """
    Hash the plain concatenation of ``parts``.

    No length prefixes are added: callers are responsible for making the
    concatenation unambiguous (fixed-width fields or a length-prefixed
    encoding).

    Raises:
        TypeError: If any part is not bytes
    """
    h = new_hash()
    for part in parts:
        if not isinstance(part, (bytes, bytearray)):
            raise TypeError(f"hash input must be bytes, got {type(part)}")
        h.update(part)
    return h.digest()


def hash_to_scalar(*parts: bytes, max_value: int = GROUP_ORDER) -> int:
    """
    Hash ``parts`` to an integer in [0, max_value).

    Security Note:
        Modulo reduction introduces a bias of roughly 2^-128 for
        secp256k1, which is negligible.
    """
    if max_value <= 1:
        raise ValueError(f"max_value must be > 1, got {max_value}")
    return int.from_bytes(hash_digest(*parts), "big") % max_value


# ============================================================================
# HASH-TO-CURVE (public key + seed)
# ============================================================================


def hash_to_curve(public_key, seed: bytes, group=None):
    """
    Map (public_key, seed) to a curve point.

    Computes ``x = H(0x01 || encode(Y) || seed) mod n`` and returns ``x * Y``.

    ⚠️ SECURITY WARNING: NOT RFC 9380 COMPLIANT

    The discrete log of the result relative to ``Y`` is public, so the
    point is only suitable for deriving per-key, per-seed values, never as
    an independent generator.

    Args:
        public_key: petlib EcPt
        seed: Seed bytes
        group: Group instance (optional, cached group if None)

    Returns:
        petlib EcPt

    Raises:
        TypeError: If seed is not bytes
    """
    if not isinstance(seed, bytes):
        raise TypeError(f"seed must be bytes, got {type(seed)}")

    if group is None:
        from .group import get_group

        group = get_group()

    x = hash_to_scalar(
        HASH_TO_CURVE_PREFIX, group.encode_point(public_key), seed
    )
    return group.mul(x, public_key)


# ============================================================================
# CONSTANT-TIME OPERATIONS
# ============================================================================


def constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Constant-time comparison to prevent timing attacks.

    Uses hmac.compare_digest which takes constant time regardless of
    where the inputs differ.
    """
    return hmac.compare_digest(a, b)