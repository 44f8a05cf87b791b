"""
⚠️ DRAFT — requires crypto review before production use

Output extraction from proofs.

Two distinct artifacts:
    - VRF output: H(encode(R) || message). Recomputable by any verifier
      from (R, message); checked by verify_vrf_proof.
    - Deterministic random number: H(proof bytes). Covers the whole
      proof (R and s), so it is not the VRF output and must not be used
      in its place.

Reduction into a caller's range (e.g. modulo a commitment's upper_bound)
is left to the caller.
"""

from typing import Any, Optional, Union

from .config import OUTPUT_SIZE_BYTES
from .group import Group, get_group
from .security import hash_digest


def derive_output(R: Any, message: bytes, group: Optional[Group] = None) -> bytes:
    """
    VRF output for announcement R and message.

    Args:
        R: Announcement point (EcPt)
        message: Message the proof is bound to

    Returns:
        OUTPUT_SIZE_BYTES digest
    """
    if not isinstance(message, (bytes, bytearray)):
        raise TypeError(f"message must be bytes, got {type(message)}")
    if group is None:
        group = get_group()
    return hash_digest(group.encode_point(R), bytes(message))


def collapse_to_integer(output: bytes) -> int:
    """Big-endian unsigned integer of an output digest. No reduction."""
    if not isinstance(output, (bytes, bytearray)):
        raise TypeError(f"output must be bytes, got {type(output)}")
    if len(output) != OUTPUT_SIZE_BYTES:
        raise ValueError(
            f"Invalid output size: expected {OUTPUT_SIZE_BYTES} bytes, "
            f"got {len(output)}"
        )
    return int.from_bytes(output, "big")


def output_to_decimal(output: bytes) -> str:
    """Decimal string form of collapse_to_integer, for display."""
    return str(collapse_to_integer(output))


def derive_deterministic_random_number(proof: Union[bytes, Any]) -> bytes:
    """
    Hash of the full proof encoding.

    Args:
        proof: Proof or its encoded bytes

    Returns:
        OUTPUT_SIZE_BYTES digest
    """
    if not isinstance(proof, (bytes, bytearray)):
        from .proof import Proof

        if not isinstance(proof, Proof):
            raise TypeError(f"proof must be bytes or Proof, got {type(proof)}")
        proof = proof.to_bytes()
    return hash_digest(bytes(proof))
