"""
⚠️ DRAFT — requires crypto review before production use

Key management: key pair generation, public key derivation and
hex import/export of private keys.

Private key: scalar x in [1, GROUP_ORDER)
Public key:  Y = x * G (always derived, never supplied independently)
"""

import binascii
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from .config import SCALAR_SIZE_BYTES
from .exceptions import InvalidKeyEncodingError, MalformedEncodingError
from .group import Group, get_group
from .security import RandomnessSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeyPair:
    """
    Private scalar and its public point.

    The private key is kept out of ``repr``; use export_private_key for an
    explicit hex export.
    """

    private_key: int = field(repr=False)
    public_key: Any = field(compare=False)  # EcPt

    @classmethod
    def from_private_key(
        cls, private_key: int, group: Optional[Group] = None
    ) -> "KeyPair":
        return cls(
            private_key=private_key,
            public_key=derive_public_key(private_key, group=group),
        )

    def public_key_bytes(self, group: Optional[Group] = None) -> bytes:
        return encode_public_key(self.public_key, group=group)


def _check_private_key(private_key: int, group: Group) -> None:
    if not isinstance(private_key, int) or isinstance(private_key, bool):
        raise TypeError(f"private_key must be int, got {type(private_key)}")
    if not 0 < private_key < group.order:
        raise ValueError("private_key must be in [1, GROUP_ORDER)")


def generate_keypair(
    randomness_source: Optional[RandomnessSource] = None,
    group: Optional[Group] = None,
) -> KeyPair:
    """
    Generate a fresh key pair from a cryptographically secure source.

    Args:
        randomness_source: Source for the private scalar (created if None)
        group: Group (cached group if None)

    Returns:
        KeyPair with public_key = private_key * G
    """
    if group is None:
        group = get_group()

    private_key = group.random_scalar(randomness_source)
    logger.debug("Generated new key pair")
    return KeyPair(private_key=private_key, public_key=group.mul(private_key))


def derive_public_key(private_key: int, group: Optional[Group] = None) -> Any:
    """Return private_key * G. Pure and deterministic."""
    if group is None:
        group = get_group()
    _check_private_key(private_key, group)
    return group.mul(private_key)


def load_private_key(hex_private_key: str, group: Optional[Group] = None) -> int:
    """
    Decode a private key from its hexadecimal representation.

    Args:
        hex_private_key: Exactly SCALAR_SIZE_BYTES bytes as hex. An optional
            "0x" prefix and surrounding whitespace are accepted.

    Returns:
        Private scalar

    Raises:
        InvalidKeyEncodingError: On malformed hex, wrong byte length, or a
            value outside [1, GROUP_ORDER)
    """
    if group is None:
        group = get_group()

    if not isinstance(hex_private_key, str):
        raise InvalidKeyEncodingError(
            f"private key must be a hex string, got {type(hex_private_key)}"
        )

    text = hex_private_key.strip()
    if text[:2].lower() == "0x":
        text = text[2:]

    try:
        raw = binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise InvalidKeyEncodingError(f"Malformed private key hex: {e}") from e

    if len(raw) != SCALAR_SIZE_BYTES:
        raise InvalidKeyEncodingError(
            f"Invalid private key length: expected {SCALAR_SIZE_BYTES} bytes, "
            f"got {len(raw)}"
        )

    try:
        private_key = group.decode_scalar(raw)
    except MalformedEncodingError as e:
        raise InvalidKeyEncodingError(str(e)) from e

    if private_key == 0:
        raise InvalidKeyEncodingError("Private key must be non-zero")

    return private_key


def export_private_key(private_key: int, group: Optional[Group] = None) -> str:
    """Export a private key as PRIVATE_KEY_HEX_LENGTH lowercase hex chars."""
    if group is None:
        group = get_group()
    _check_private_key(private_key, group)
    return group.encode_scalar(private_key).hex()


def encode_public_key(public_key: Any, group: Optional[Group] = None) -> bytes:
    """Compressed public key bytes."""
    if group is None:
        group = get_group()
    return group.encode_point(public_key)


def load_public_key(data: bytes, group: Optional[Group] = None) -> Any:
    """
    Decode a compressed public key.

    Raises:
        InvalidKeyEncodingError: If the bytes are not a valid curve point
    """
    if group is None:
        group = get_group()
    try:
        return group.decode_point(data)
    except MalformedEncodingError as e:
        raise InvalidKeyEncodingError(f"Invalid public key: {e}") from e
