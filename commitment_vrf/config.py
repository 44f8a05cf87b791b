"""
⚠️ DRAFT — requires crypto review before production use

Cryptographic configuration for request-commitment proofs.

Single curve (secp256k1 via petlib), single hash (SHA-256). Values here
define the wire sizes of every encoding produced by the package.
"""

# ============================================================================
# CURVE SELECTION
# ============================================================================

# secp256k1 via petlib
# - Prime order group (cofactor = 1)
# - Compressed point encoding is fixed width

CURVE_NAME = "secp256k1"
CURVE_LIBRARY = "petlib"

# ============================================================================
# GROUP PARAMETERS
# ============================================================================

GROUP_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
GROUP_ORDER_BITS = 256
COFACTOR = 1
CURVE_NID = 714  # OpenSSL NID for secp256k1

POINT_SIZE_BYTES = 33  # Compressed point format
SCALAR_SIZE_BYTES = 32
PROOF_SIZE_BYTES = POINT_SIZE_BYTES + SCALAR_SIZE_BYTES

# ============================================================================
# HASH FUNCTIONS
# ============================================================================

# Challenge e = H(R || m) and VRF output share this hash
HASH_FUNCTION = "SHA256"
HASH_OUTPUT_BITS = 256
OUTPUT_SIZE_BYTES = HASH_OUTPUT_BITS // 8

# Prefix byte for hash-to-curve of (public key, seed)
HASH_TO_CURVE_PREFIX = b"\x01"

# ============================================================================
# ENCODINGS
# ============================================================================

# Request commitment wire layout:
#   u64 block_number | u64 len | station_id | u64 upper_bound |
#   u64 len | requester_address | u8 extra_args
COMMITMENT_ENCODING_VERSION = 1
UINT64_SIZE_BYTES = 8
UINT64_MAX = 2**64 - 1

# Private key hex export is exactly SCALAR_SIZE_BYTES bytes
PRIVATE_KEY_HEX_LENGTH = SCALAR_SIZE_BYTES * 2

# CBOR proof envelope
ENVELOPE_VERSION = 1

# ============================================================================
# INSECURE DETERMINISTIC PATH
# ============================================================================

INSECURE_DETERMINISTIC_ENV_VAR = "COMMITMENT_VRF_ALLOW_INSECURE_DETERMINISTIC"

# ============================================================================
# VALIDATION
# ============================================================================


def validate_config() -> bool:
    """
    Validate configuration parameters.

    Returns:
        True if configuration is valid

    Raises:
        AssertionError: If configuration is invalid
    """
    assert CURVE_NAME == "secp256k1", "Invalid curve"
    assert CURVE_LIBRARY == "petlib", "secp256k1 requires petlib library"
    assert HASH_FUNCTION == "SHA256", "Invalid hash function"
    assert COFACTOR == 1, "secp256k1 must have cofactor 1"
    assert CURVE_NID == 714, "secp256k1 NID must be 714"
    assert GROUP_ORDER < 2 ** (8 * SCALAR_SIZE_BYTES), "Scalar width too small"
    assert OUTPUT_SIZE_BYTES == 32, "Output must be a 256-bit digest"
    assert len(HASH_TO_CURVE_PREFIX) == 1, "Hash-to-curve prefix is one byte"

    return True


# Auto-validate on import
validate_config()
