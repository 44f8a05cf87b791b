"""
⚠️ DRAFT — requires crypto review before production use

Custom exceptions for request-commitment proofs.

Decoding failures and verification failures live on separate branches so
callers can always tell them apart.
"""


class CommitmentVRFError(Exception):
    """Base exception for commitment-vrf errors."""

    pass


class MalformedEncodingError(CommitmentVRFError):
    """Bytes cannot be decoded as a scalar, point, commitment or hex string."""

    pass


class TruncatedProofError(MalformedEncodingError):
    """Proof buffer is shorter than a point plus a scalar."""

    pass


class InvalidProofError(CommitmentVRFError):
    """Proof is well formed but fails the verification equation."""

    pass


class InvalidKeyEncodingError(CommitmentVRFError):
    """Private or public key import failed."""

    pass


class InsecureOperationError(CommitmentVRFError):
    """Insecure deterministic path used without an explicit opt-in."""

    pass


class ConfigurationError(CommitmentVRFError):
    """Configuration error."""

    pass


class CryptographicError(CommitmentVRFError):
    """Cryptographic operation error."""

    pass
