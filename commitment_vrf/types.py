"""
⚠️ DRAFT — requires crypto review before production use

Transport envelope for proofs.

ProofEnvelope bundles everything a verifier needs (public key, message,
proof, optional VRF output) into one versioned CBOR document.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

try:
    import cbor2
except ImportError:
    raise ImportError(
        "cbor2 is required for proof serialization. "
        "Install with: pip install cbor2"
    )

from .config import ENVELOPE_VERSION
from .exceptions import MalformedEncodingError
from .group import Group, get_group
from .keys import encode_public_key
from .output import collapse_to_integer
from .proof import Proof, VRFProof, verify_proof, verify_vrf_proof


class ProofKind(Enum):
    """
    Kinds of proof carried by an envelope.

    - RANDOMIZED: generate_proof
    - DETERMINISTIC: generate_insecure_deterministic_proof (not secure)
    """

    RANDOMIZED = "randomized"
    DETERMINISTIC = "deterministic"


@dataclass(frozen=True)
class ProofEnvelope:
    """
    Versioned proof bundle.

    Attributes:
        kind: ProofKind value string
        public_key: Compressed public key (33 bytes)
        message: Message the proof is bound to
        proof: Proof bytes (65 bytes)
        output: Optional VRF output (32 bytes)

    Example:
        >>> env = ProofEnvelope.from_vrf_proof(keypair.public_key, msg, vrf_proof)
        >>> restored = ProofEnvelope.deserialize(env.serialize())
        >>> restored.verify()
        True
    """

    kind: str
    public_key: bytes
    message: bytes
    proof: bytes
    output: Optional[bytes] = None

    def __post_init__(self):
        if not isinstance(self.kind, str):
            raise ValueError(f"kind must be str, got {type(self.kind)}")
        if self.kind not in {k.value for k in ProofKind}:
            raise ValueError(f"Unknown proof kind: {self.kind!r}")
        for name in ("public_key", "message", "proof"):
            if not isinstance(getattr(self, name), bytes):
                raise ValueError(f"{name} must be bytes")
        if self.output is not None and not isinstance(self.output, bytes):
            raise ValueError("output must be bytes or None")

    @classmethod
    def from_proof(
        cls,
        public_key: Any,
        message: bytes,
        proof: Proof,
        kind: ProofKind = ProofKind.RANDOMIZED,
        group: Optional[Group] = None,
    ) -> "ProofEnvelope":
        if group is None:
            group = get_group()
        return cls(
            kind=kind.value,
            public_key=encode_public_key(public_key, group=group),
            message=bytes(message),
            proof=proof.to_bytes(group=group),
        )

    @classmethod
    def from_vrf_proof(
        cls,
        public_key: Any,
        message: bytes,
        vrf_proof: VRFProof,
        kind: ProofKind = ProofKind.RANDOMIZED,
        group: Optional[Group] = None,
    ) -> "ProofEnvelope":
        if group is None:
            group = get_group()
        return cls(
            kind=kind.value,
            public_key=encode_public_key(public_key, group=group),
            message=bytes(message),
            proof=vrf_proof.proof.to_bytes(group=group),
            output=vrf_proof.output,
        )

    # ========================================================================
    # VERIFICATION
    # ========================================================================

    def verify(self, group: Optional[Group] = None) -> bool:
        """
        Verify the carried proof (and output, when present).

        Raises whatever verify_proof / verify_vrf_proof raise.
        """
        if self.output is None:
            return verify_proof(self.public_key, self.message, self.proof, group=group)
        return verify_vrf_proof(
            self.public_key, self.message, self.proof, self.output, group=group
        )

    # ========================================================================
    # SERIALIZATION (CBOR)
    # ========================================================================

    def serialize(self) -> bytes:
        """Serialize to CBOR with a version field."""
        data = {
            "v": ENVELOPE_VERSION,
            "t": self.kind,
            "pk": self.public_key,
            "m": self.message,
            "p": self.proof,
            "o": self.output,
        }
        return cbor2.dumps(data, canonical=True)

    @classmethod
    def deserialize(cls, data: bytes) -> "ProofEnvelope":
        """
        Deserialize from CBOR bytes.

        Raises:
            MalformedEncodingError: If data is not CBOR
            ValueError: If version is unsupported or fields are missing
        """
        try:
            obj = cbor2.loads(data)
        except Exception as e:
            raise MalformedEncodingError(f"Failed to deserialize envelope: {e}") from e

        if not isinstance(obj, dict):
            raise ValueError("Invalid envelope format: expected a map")

        version = obj.get("v")
        if version != ENVELOPE_VERSION:
            raise ValueError(
                f"Unsupported envelope version: {version} "
                f"(expected {ENVELOPE_VERSION})"
            )

        missing = {"t", "pk", "m", "p"} - obj.keys()
        if missing:
            raise ValueError(f"Invalid envelope format: missing {sorted(missing)}")

        return cls(
            kind=obj["t"],
            public_key=obj["pk"],
            message=obj["m"],
            proof=obj["p"],
            output=obj.get("o"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible view; binary fields are hex-encoded."""
        result = {
            "version": ENVELOPE_VERSION,
            "kind": self.kind,
            "public_key": self.public_key.hex(),
            "message": self.message.hex(),
            "proof": self.proof.hex(),
            "output": self.output.hex() if self.output is not None else None,
        }
        if self.output is not None:
            result["output_int"] = str(collapse_to_integer(self.output))
        return result
