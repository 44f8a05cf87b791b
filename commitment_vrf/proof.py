"""
⚠️ DRAFT — requires crypto review before production use

Schnorr-style proofs binding a key holder to a serialized request commitment.

This is a PROTOTYPE implementation for testing and validation.
DO NOT use in production without security audit.

Protocol (Non-Interactive via Fiat-Shamir):
    Prover knows x such that Y = x*G

    1. Pick nonce k ← Z_q (random, see below for the deterministic variant)
    2. Compute announcement: R = k*G
    3. Compute challenge: e = H(encode(R) || m) mod q
    4. Compute response: s = (k - e*x) mod q
    5. Proof = (R, s), encoded as encode(R) || encode(s)

    Verifier checks:
    1. Recompute e = H(encode(R) || m) mod q
    2. Verify s*G + e*Y = R

    Sign convention: the response SUBTRACTS e*x, so verification ADDS e*Y.
    Mixing this with the s = k + e*x convention makes every proof fail.

Variants:
    - generate_proof: k uniform from the OS CSPRNG. Proofs are unlinkable
      and unforgeable under the discrete-log assumption.
    - generate_insecure_deterministic_proof: k derived from a public
      nonce source (e.g. a block number). Anyone who knows the nonce
      source and sees one proof can solve s = k - e*x for x. NOT a
      signature, NOT a VRF. Requires an explicit opt-in through
      feature_flags and exists only for reproducible tests/simulations.

Proof size: 65 bytes (R: 33, s: 32)

Verification outcome:
    - TruncatedProofError: buffer shorter than 65 bytes
    - MalformedEncodingError: bad point/scalar bytes or trailing bytes
    - InvalidProofError: well formed, equation does not hold
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Union

from .config import (
    OUTPUT_SIZE_BYTES,
    POINT_SIZE_BYTES,
    PROOF_SIZE_BYTES,
)
from .exceptions import (
    InsecureOperationError,
    InvalidProofError,
    MalformedEncodingError,
    TruncatedProofError,
)
from .feature_flags import insecure_deterministic_enabled
from .group import Group, get_group
from .keys import load_public_key
from .output import derive_output
from .security import RandomnessSource, constant_time_compare, hash_to_scalar

logger = logging.getLogger(__name__)


# ============================================================================
# PROOF TYPES
# ============================================================================


@dataclass(frozen=True)
class Proof:
    """
    Schnorr proof (R, s).

    Attributes:
        R: Announcement point k*G (EcPt)
        s: Response scalar k - e*x mod q
    """

    R: Any  # EcPt
    s: int

    def to_bytes(self, group: Optional[Group] = None) -> bytes:
        """Encode as encode(R) || encode(s) (PROOF_SIZE_BYTES)."""
        if group is None:
            group = get_group()
        return group.encode_point(self.R) + group.encode_scalar(self.s)

    @classmethod
    def from_bytes(cls, data: bytes, group: Optional[Group] = None) -> "Proof":
        """
        Decode proof bytes.

        Raises:
            TruncatedProofError: If data is shorter than PROOF_SIZE_BYTES
            MalformedEncodingError: If data is longer than PROOF_SIZE_BYTES
                or either component does not decode
        """
        if not isinstance(data, (bytes, bytearray)):
            raise MalformedEncodingError(f"proof must be bytes, got {type(data)}")

        if len(data) < PROOF_SIZE_BYTES:
            raise TruncatedProofError(
                f"Proof too short: expected {PROOF_SIZE_BYTES} bytes, "
                f"got {len(data)}"
            )
        if len(data) > PROOF_SIZE_BYTES:
            raise MalformedEncodingError(
                f"Proof too long: expected {PROOF_SIZE_BYTES} bytes, "
                f"got {len(data)}"
            )

        if group is None:
            group = get_group()

        R = group.decode_point(bytes(data[:POINT_SIZE_BYTES]))
        s = group.decode_scalar(bytes(data[POINT_SIZE_BYTES:]))
        return cls(R=R, s=s)


@dataclass(frozen=True)
class VRFProof:
    """Proof together with its VRF output H(encode(R) || m)."""

    proof: Proof
    output: bytes


# ============================================================================
# INTERNALS
# ============================================================================


def _compute_challenge(group: Group, R: Any, message: bytes) -> int:
    """
    e = H(encode(R) || m) mod q

    R has a fixed-width encoding, so plain concatenation is unambiguous.
    """
    return hash_to_scalar(group.encode_point(R), message, max_value=group.order)


def _check_inputs(private_key: int, message: bytes, group: Group) -> None:
    if not isinstance(private_key, int) or isinstance(private_key, bool):
        raise TypeError(f"private_key must be int, got {type(private_key)}")
    if not 0 < private_key < group.order:
        raise ValueError("private_key must be in [1, GROUP_ORDER)")
    if not isinstance(message, (bytes, bytearray)):
        raise TypeError(f"message must be bytes, got {type(message)}")


def _prove_with_nonce(group: Group, private_key: int, message: bytes, k: int) -> Proof:
    # R = k*G
    R = group.mul(k)

    # e = H(R || m)
    e = _compute_challenge(group, R, message)

    # s = k - e*x
    s = group.scalar_sub(k, group.scalar_mul(e, private_key))

    return Proof(R=R, s=s)


def _nonce_from_source(nonce_source: int, group: Group) -> int:
    """
    Minimal big-endian bytes of nonce_source, read back as a scalar.

    Raises:
        ValueError: If nonce_source is negative or reduces to zero
    """
    if not isinstance(nonce_source, int) or isinstance(nonce_source, bool):
        raise TypeError(f"nonce_source must be int, got {type(nonce_source)}")
    if nonce_source < 0:
        raise ValueError(f"nonce_source must be non-negative, got {nonce_source}")

    raw = nonce_source.to_bytes((nonce_source.bit_length() + 7) // 8, "big")
    k = group.scalar_from_bytes(raw)
    if k == 0:
        # k = 0 puts R at infinity and reveals x = -s/e
        raise ValueError("nonce_source reduces to the zero scalar")
    return k


def _require_insecure_opt_in() -> None:
    if not insecure_deterministic_enabled():
        raise InsecureOperationError(
            "Deterministic proofs use a publicly derivable nonce and leak the "
            "private key. Enable them explicitly with "
            "set_insecure_deterministic_enabled(True) or the "
            "COMMITMENT_VRF_ALLOW_INSECURE_DETERMINISTIC environment variable."
        )


def _coerce_public_key(public_key: Any, group: Group) -> Any:
    if isinstance(public_key, (bytes, bytearray)):
        return load_public_key(bytes(public_key), group=group)
    return public_key


# ============================================================================
# PROOF GENERATION
# ============================================================================


def generate_proof(
    private_key: int,
    message: bytes,
    randomness_source: Optional[RandomnessSource] = None,
    group: Optional[Group] = None,
) -> Proof:
    """
    Generate a randomized Schnorr proof over message.

    ⚠️ SECURITY CRITICAL

    Args:
        private_key: Signer's scalar x (kept secret)
        message: Bytes to bind, normally encode_commitment(rc)
        randomness_source: Source for the nonce (created if None)
        group: Group (cached group if None)

    Returns:
        Proof (R, s)

    Raises:
        TypeError / ValueError: If inputs are invalid

    Security Notes:
        - Nonce is fresh per call; two proofs over the same message have
          different R with overwhelming probability
        - Nonce reuse across different messages reveals x
    """
    if group is None:
        group = get_group()
    _check_inputs(private_key, message, group)

    k = group.random_scalar(randomness_source)
    proof = _prove_with_nonce(group, private_key, bytes(message), k)

    logger.debug("Generated randomized proof over %d-byte message", len(message))
    return proof


def generate_insecure_deterministic_proof(
    private_key: int,
    message: bytes,
    nonce_source: int,
    group: Optional[Group] = None,
) -> Proof:
    """
    Generate a reproducible proof with a nonce derived from public data.

    ⚠️ INSECURE — reproducible tests and simulations only

    k is the minimal big-endian encoding of nonce_source read as a scalar.
    The verification equation still holds, but anyone who knows
    nonce_source recovers the private key from a single proof:
    x = (k - s) / e mod q.

    Args:
        private_key: Signer's scalar x
        message: Bytes to bind
        nonce_source: Public non-negative integer (e.g. block number)
        group: Group (cached group if None)

    Returns:
        Proof (R, s); identical inputs always give identical proofs

    Raises:
        InsecureOperationError: If the insecure path is not enabled
        ValueError: If nonce_source is negative or reduces to zero
    """
    _require_insecure_opt_in()

    if group is None:
        group = get_group()
    _check_inputs(private_key, message, group)

    k = _nonce_from_source(nonce_source, group)

    logger.warning(
        "Generating INSECURE deterministic proof (nonce derived from public "
        "source); do not use outside tests or simulations"
    )
    return _prove_with_nonce(group, private_key, bytes(message), k)


# ============================================================================
# PROOF VERIFICATION
# ============================================================================


def verify_proof(
    public_key: Any,
    message: bytes,
    proof: Union[Proof, bytes],
    group: Optional[Group] = None,
) -> bool:
    """
    Verify a proof produced by either generation variant.

    ⚠️ SECURITY CRITICAL

    Checks s*G + e*Y == R with e = H(encode(R) || m) mod q.

    Args:
        public_key: Y as EcPt, or its compressed bytes
        message: Bytes the proof should be bound to
        proof: Proof or its PROOF_SIZE_BYTES encoding
        group: Group (cached group if None)

    Returns:
        True (failures raise)

    Raises:
        TruncatedProofError: Proof bytes shorter than PROOF_SIZE_BYTES
        MalformedEncodingError: Proof bytes do not decode
        InvalidKeyEncodingError: Public key bytes do not decode
        InvalidProofError: Verification equation does not hold
    """
    if group is None:
        group = get_group()

    if not isinstance(message, (bytes, bytearray)):
        raise TypeError(f"message must be bytes, got {type(message)}")

    if not isinstance(proof, Proof):
        proof = Proof.from_bytes(proof, group=group)

    Y = _coerce_public_key(public_key, group)

    if group.is_identity(proof.R):
        # Unreachable from bytes; only a hand-built Proof gets here
        raise InvalidProofError("Proof announcement is the point at infinity")

    e = _compute_challenge(group, proof.R, bytes(message))

    # s*G + e*Y
    expected_R = group.add(group.mul(proof.s), group.mul(e, Y))

    if not group.points_equal(expected_R, proof.R):
        logger.debug("Proof rejected: verification equation does not hold")
        raise InvalidProofError("Proof is invalid")

    logger.debug("Proof verified")
    return True


# ============================================================================
# VRF BUNDLES (proof + output)
# ============================================================================


def generate_vrf_proof(
    private_key: int,
    message: bytes,
    randomness_source: Optional[RandomnessSource] = None,
    group: Optional[Group] = None,
) -> VRFProof:
    """Randomized proof plus its output H(encode(R) || m)."""
    if group is None:
        group = get_group()
    proof = generate_proof(private_key, message, randomness_source, group=group)
    return VRFProof(proof=proof, output=derive_output(proof.R, message, group=group))


def generate_insecure_deterministic_vrf_proof(
    private_key: int,
    message: bytes,
    nonce_source: int,
    group: Optional[Group] = None,
) -> VRFProof:
    """
    Deterministic proof plus its output.

    ⚠️ INSECURE — same caveats as generate_insecure_deterministic_proof.
    """
    if group is None:
        group = get_group()
    proof = generate_insecure_deterministic_proof(
        private_key, message, nonce_source, group=group
    )
    return VRFProof(proof=proof, output=derive_output(proof.R, message, group=group))


def verify_vrf_proof(
    public_key: Any,
    message: bytes,
    proof: Union[Proof, bytes],
    output: bytes,
    group: Optional[Group] = None,
) -> bool:
    """
    Verify the proof and that output equals H(encode(R) || m).

    Raises:
        MalformedEncodingError: If output has the wrong length
        InvalidProofError: If the proof or the claimed output is invalid
        (plus everything verify_proof raises)
    """
    if group is None:
        group = get_group()

    if not isinstance(output, (bytes, bytearray)):
        raise MalformedEncodingError(f"output must be bytes, got {type(output)}")
    if len(output) != OUTPUT_SIZE_BYTES:
        raise MalformedEncodingError(
            f"Invalid output size: expected {OUTPUT_SIZE_BYTES} bytes, "
            f"got {len(output)}"
        )

    if not isinstance(proof, Proof):
        proof = Proof.from_bytes(proof, group=group)

    verify_proof(public_key, message, proof, group=group)

    expected = derive_output(proof.R, message, group=group)
    if not constant_time_compare(bytes(output), expected):
        logger.debug("VRF output rejected: does not match H(R || m)")
        raise InvalidProofError("VRF output does not match proof")

    return True
