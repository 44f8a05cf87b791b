"""commitment-vrf: Schnorr proofs and VRF outputs over request commitments.

⚠️ DRAFT — requires crypto review before production use
"""

__version__ = "0.1.0"

from .commitment import RequestCommitment, decode_commitment, encode_commitment
from .exceptions import (
    CommitmentVRFError,
    InsecureOperationError,
    InvalidKeyEncodingError,
    InvalidProofError,
    MalformedEncodingError,
    TruncatedProofError,
)
from .feature_flags import (
    insecure_deterministic_enabled,
    set_insecure_deterministic_enabled,
)
from .group import Group, get_group
from .keys import (
    KeyPair,
    derive_public_key,
    export_private_key,
    generate_keypair,
    load_private_key,
    load_public_key,
)
from .output import (
    collapse_to_integer,
    derive_deterministic_random_number,
    derive_output,
)
from .proof import (
    Proof,
    VRFProof,
    generate_insecure_deterministic_proof,
    generate_insecure_deterministic_vrf_proof,
    generate_proof,
    generate_vrf_proof,
    verify_proof,
    verify_vrf_proof,
)
from .types import ProofEnvelope, ProofKind

__all__ = [
    "RequestCommitment",
    "encode_commitment",
    "decode_commitment",
    "KeyPair",
    "generate_keypair",
    "derive_public_key",
    "load_private_key",
    "export_private_key",
    "load_public_key",
    "Proof",
    "VRFProof",
    "generate_proof",
    "generate_insecure_deterministic_proof",
    "verify_proof",
    "generate_vrf_proof",
    "generate_insecure_deterministic_vrf_proof",
    "verify_vrf_proof",
    "derive_output",
    "collapse_to_integer",
    "derive_deterministic_random_number",
    "ProofEnvelope",
    "ProofKind",
    "Group",
    "get_group",
    "insecure_deterministic_enabled",
    "set_insecure_deterministic_enabled",
    "CommitmentVRFError",
    "MalformedEncodingError",
    "TruncatedProofError",
    "InvalidProofError",
    "InvalidKeyEncodingError",
    "InsecureOperationError",
]
